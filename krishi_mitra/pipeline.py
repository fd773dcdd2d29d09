"""Evaluation pipeline: classify a sample, narrate findings, persist on opt-in."""

from pydantic import EmailStr, TypeAdapter, ValidationError

from krishi_mitra.localization import (
    Language,
    category_label,
    localize_finding,
    resolve_language,
    ui_text,
)
from krishi_mitra.logging_config import get_logger
from krishi_mitra.notify import Notifier
from krishi_mitra.soil.classifier import classify, overall_status
from krishi_mitra.soil.models import EvaluationRecord, Finding, SoilSample
from krishi_mitra.speech import Speaker
from krishi_mitra.store.base import RecordStore, WriteResult

logger = get_logger(__name__)

EVALUATION_TABLE = "evaluation_results"
REPORT_EMAIL_DOMAIN = "gmail.com"

_EMAIL = TypeAdapter(EmailStr)


def is_report_email(email: str | None) -> bool:
    """Reports are only mailed to well-formed Gmail addresses."""
    if not email:
        return False
    try:
        address = _EMAIL.validate_python(email.strip())
    except ValidationError:
        return False
    return address.rpartition("@")[2].lower() == REPORT_EMAIL_DOMAIN


class EvaluationPipeline:
    """Presents soil evaluations in one language for one user session.

    The store, speaker and notifier are passed in explicitly; the pipeline
    holds no global state.
    """

    def __init__(
        self,
        store: RecordStore,
        speaker: Speaker | None = None,
        notifier: Notifier | None = None,
        language: "str | Language" = Language.EN,
    ) -> None:
        self.store = store
        self.speaker = speaker
        self.notifier = notifier or Notifier()
        self.language = resolve_language(language)

    def evaluate(self, sample: SoilSample) -> list[Finding]:
        """Classify ``sample`` and localize the findings."""
        findings = [localize_finding(f, self.language) for f in classify(sample)]
        logger.info(
            f"Evaluated sample (moisture={sample.moisture}, ph={sample.ph}, "
            f"nitrogen={sample.nitrogen}): {overall_status(findings).value}"
        )
        return findings

    def narrate(self, finding: Finding) -> str:
        """Speech text for one finding."""
        return (
            f"{category_label(finding.category, self.language)}: {finding.message}. "
            f"{ui_text('recommendation', self.language)}: {finding.recommendation}"
        )

    def narrate_all(self, findings: list[Finding]) -> str:
        """Speech text for a whole evaluation."""
        body = ". ".join(self.narrate(finding) for finding in findings)
        return f"{ui_text('evaluation_title', self.language)}. {body}"

    def speak(self, finding: Finding) -> None:
        self._say(self.narrate(finding))

    def speak_all(self, findings: list[Finding]) -> None:
        self._say(self.narrate_all(findings))

    def stop_speaking(self) -> None:
        if self.speaker is not None:
            self.speaker.stop()

    def _say(self, text: str) -> None:
        if self.speaker is None:
            logger.debug("No speaker configured, skipping narration")
            return
        self.speaker.speak(text, locale=self.language.speech_locale)

    def save(
        self, email: str, sample: SoilSample, findings: list[Finding]
    ) -> WriteResult:
        """Persist an evaluation for a detailed report by email.

        Makes a single write attempt. The outcome is returned and also shown
        to the user as a toast; nothing is raised.
        """
        if not is_report_email(email):
            self.notifier.error("Invalid Email", "Please enter a valid Gmail address")
            return WriteResult.failure("invalid email")

        record = EvaluationRecord(
            email=email.strip(), soil_sample=sample, findings=findings
        )
        result = self.store.insert(EVALUATION_TABLE, record.to_row())

        if result.ok:
            logger.info(f"Saved evaluation for {record.email}")
            self.notifier.success(
                "Success!", "Report will be sent to your email. Thank you!"
            )
        else:
            logger.error(f"Error saving evaluation: {result.error}")
            self.notifier.error("Error", "Failed to save evaluation. Please try again.")
        return result
