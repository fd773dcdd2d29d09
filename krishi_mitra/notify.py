"""Transient user notifications ("toasts")."""

from enum import Enum

from pydantic import BaseModel
from rich.console import Console

from krishi_mitra.logging_config import get_logger

logger = get_logger(__name__)


class ToastVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Toast(BaseModel):
    """A short notification shown to the user after an action."""

    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT


class Notifier:
    """Renders toasts on a rich console and remembers them for inspection."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)
        self.history: list[Toast] = []

    def notify(
        self,
        title: str,
        description: str,
        variant: ToastVariant = ToastVariant.DEFAULT,
    ) -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self.history.append(toast)

        style = "red" if variant == ToastVariant.DESTRUCTIVE else "green"
        self.console.print(f"[bold {style}]{title}[/bold {style}] {description}")
        return toast

    def success(self, title: str, description: str) -> Toast:
        return self.notify(title, description)

    def error(self, title: str, description: str) -> Toast:
        logger.debug(f"Error toast: {title}: {description}")
        return self.notify(title, description, ToastVariant.DESTRUCTIVE)

    @property
    def last(self) -> Toast | None:
        return self.history[-1] if self.history else None
