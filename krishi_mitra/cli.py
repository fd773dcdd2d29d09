"""Command-line interface for Krishi Mitra."""

import json
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from krishi_mitra import __version__
from krishi_mitra.chat import ChatService
from krishi_mitra.config import get_settings
from krishi_mitra.dashboard import previous_queries, submit_record
from krishi_mitra.localization import Language, category_label, resolve_language
from krishi_mitra.logging_config import configure_from_env, get_logger
from krishi_mitra.notify import Notifier
from krishi_mitra.pipeline import EvaluationPipeline
from krishi_mitra.records import ContactQuery, QueryType
from krishi_mitra.reports import export_csv, fetch_farm_data, overview, summarize
from krishi_mitra.soil.classifier import overall_status
from krishi_mitra.soil.models import SoilSample
from krishi_mitra.speech import Speaker
from krishi_mitra.store import build_store
from krishi_mitra.store.base import StoreError

console = Console()
logger = get_logger(__name__)

STATUS_STYLES = {"good": "green", "warning": "yellow", "critical": "red"}


def _validation_message(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc'])}: {e['msg']}" for e in error.errors()
    )


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def main(verbose: bool) -> None:
    """Krishi Mitra: soil evaluation and farm records for farmers."""
    configure_from_env(verbose)


def _store():
    try:
        return build_store(get_settings())
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option("--moisture", type=float, required=True, help="Soil moisture (%)")
@click.option("--ph", type=float, required=True, help="Soil pH (0-14)")
@click.option("--nitrogen", type=float, required=True, help="Nitrogen (ppm)")
@click.option("--notes", default=None, help="Notes about the sample")
@click.option("--lang", "language", default=None, help="Language code (en, hi, te, ta)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.option("--speak", is_flag=True, help="Read the results aloud")
@click.option("--email", default=None, help="Gmail address for a detailed report")
def evaluate(
    moisture: float,
    ph: float,
    nitrogen: float,
    notes: str | None,
    language: str | None,
    output_format: str,
    speak: bool,
    email: str | None,
) -> None:
    """Evaluate a soil sample and show recommendations."""
    try:
        sample = SoilSample(moisture=moisture, ph=ph, nitrogen=nitrogen, notes=notes)
    except ValidationError as e:
        raise click.BadParameter(_validation_message(e)) from e

    settings = get_settings()
    speaker = None
    if speak:
        speaker = Speaker(
            rate=settings.speech.rate,
            volume=settings.speech.volume,
            enabled=settings.speech.enabled,
        )

    pipeline = EvaluationPipeline(
        store=_store(),
        speaker=speaker,
        notifier=Notifier(),
        language=language or settings.language,
    )
    findings = pipeline.evaluate(sample)

    if output_format == "json":
        click.echo(
            json.dumps(
                {
                    "language": pipeline.language.value,
                    "sample": sample.model_dump(mode="json"),
                    "overall": overall_status(findings).value,
                    "findings": [f.model_dump(mode="json") for f in findings],
                },
                indent=2,
                ensure_ascii=False,
            )
        )
    else:
        table = Table(title="Soil Evaluation")
        table.add_column("Category", style="cyan")
        table.add_column("Status")
        table.add_column("Message")
        table.add_column("Recommendation")
        for finding in findings:
            style = STATUS_STYLES[finding.status.value]
            table.add_row(
                category_label(finding.category, pipeline.language),
                f"[{style}]{finding.status.value.upper()}[/{style}]",
                finding.message,
                finding.recommendation,
            )
        console.print(table)

    if speaker is not None:
        pipeline.speak_all(findings)
        speaker.wait()

    if email is not None:
        result = pipeline.save(email, sample, findings)
        if not result.ok:
            raise click.exceptions.Exit(1)


@main.command()
@click.argument("message")
@click.option("--lang", "language", default=None, help="Language code (en, hi, te, ta)")
@click.option("--save", is_flag=True, help="Record the exchange in a new chat session")
def chat(message: str, language: str | None, save: bool) -> None:
    """Ask the farming assistant a question."""
    language = language or get_settings().language
    service = ChatService(_store())

    session_id = service.start_session(language) if save else None
    if session_id:
        reply = service.send(session_id, message, language)
    else:
        reply = service.reply(message, language)

    click.echo(reply.content)


@main.command()
@click.option("--phone", required=True, help="Contact number")
@click.option("--message", required=True, help="Your message")
@click.option(
    "--type",
    "query_type",
    type=click.Choice([q.value for q in QueryType]),
    default=QueryType.SOIL_HEALTH.value,
    help="Type of query",
)
@click.option("--name", default=None, help="Your name")
@click.option("--email", default=None, help="Your email")
def contact(
    phone: str, message: str, query_type: str, name: str | None, email: str | None
) -> None:
    """Send a query to the support team."""
    try:
        query = ContactQuery(
            name=name, phone=phone, email=email, query_type=query_type, message=message
        )
    except ValidationError as e:
        raise click.BadParameter(_validation_message(e)) from e

    store = _store()
    result = submit_record(store, query, Notifier())
    if not result.ok:
        raise click.exceptions.Exit(1)

    history = previous_queries(store, query.phone)
    click.echo(f"Queries on record for {query.phone}: {len(history)}")


@main.group()
def report() -> None:
    """Farm data summaries and exports."""


@report.command("summary")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
def report_summary(output_format: str) -> None:
    """Show totals and averages over stored records."""
    try:
        data = fetch_farm_data(_store())
    except StoreError as e:
        Notifier().error("Error", "Failed to load report data")
        raise click.exceptions.Exit(1) from e

    summary = summarize(data)
    if output_format == "json":
        click.echo(
            json.dumps(
                {
                    "summary": summary.model_dump(),
                    "overview": overview(data).model_dump(),
                },
                indent=2,
            )
        )
        return

    table = Table(title="Farm Report")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for metric, value in summary.model_dump().items():
        table.add_row(metric.replace("_", " ").title(), str(value))
    console.print(table)


@report.command("export")
@click.option(
    "--kind",
    type=click.Choice(["soil", "crop", "pest", "all"]),
    default="all",
    help="Which records to export",
)
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    help="Directory for the CSV file",
)
def report_export(kind: str, output_dir: Path) -> None:
    """Export stored records as CSV."""
    try:
        data = fetch_farm_data(_store())
    except StoreError as e:
        Notifier().error("Error", "Failed to load report data")
        raise click.exceptions.Exit(1) from e

    path = export_csv(data, kind, output_dir)
    if path is None:
        click.echo(f"No {kind} records to export")
    else:
        click.echo(f"Exported to {path}")


@main.command()
def languages() -> None:
    """List supported languages."""
    default = resolve_language(get_settings().language)
    for language in Language:
        marker = " (default)" if language == default else ""
        click.echo(f"{language.value}\t{language.display_name}{marker}")


if __name__ == "__main__":
    main()
