"""Text-to-speech playback built on pyttsx3.

Playback is fire-and-forget: :meth:`Speaker.speak` returns once the
utterance is handed to a daemon thread. The last call wins: a new ``speak``
or a ``stop`` discards whatever is queued or playing. pyttsx3 allows only
one run loop per engine, so the previous worker is joined before the next
one starts. Engine failures are logged, never raised.
"""

import threading
from collections.abc import Callable
from typing import Any

import pyttsx3

from krishi_mitra.logging_config import get_logger

logger = get_logger(__name__)

# How long speak() waits for an interrupted utterance to wind down
HANDOFF_TIMEOUT_S = 5.0


class Speaker:
    """Cancellable, non-blocking speech output."""

    def __init__(
        self,
        engine_factory: Callable[[], Any] | None = None,
        rate: float = 0.8,
        volume: float = 1.0,
        enabled: bool = True,
    ) -> None:
        """Initialize the speaker.

        Args:
            engine_factory: Callable returning a pyttsx3-compatible engine
                (defaults to ``pyttsx3.init``; created on first use)
            rate: Multiplier applied to the engine's default speaking rate
            volume: Volume between 0.0 and 1.0
            enabled: When False every call is a no-op
        """
        self.engine_factory = engine_factory or pyttsx3.init
        self.rate = rate
        self.volume = volume
        self.enabled = enabled

        self._engine: Any = None
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._generation = 0
        self._speaking = False

    @property
    def is_speaking(self) -> bool:
        return self._speaking

    def speak(self, text: str, locale: str = "en-IN") -> None:
        """Start speaking ``text``, replacing any current utterance."""
        if not self.enabled or not text.strip():
            return

        self.stop()

        previous = self._thread
        if previous is not None:
            previous.join(HANDOFF_TIMEOUT_S)
            if previous.is_alive():
                logger.warning("Previous utterance did not stop in time")

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._speaking = True
            self._thread = threading.Thread(
                target=self._run, args=(text, locale, generation), daemon=True
            )
            self._thread.start()

        logger.debug(f"Speaking {len(text)} characters in {locale}")

    def stop(self) -> None:
        """Discard the pending or current utterance, if any."""
        with self._lock:
            self._generation += 1
            engine = self._engine if self._speaking else None
            self._speaking = False

        if engine is None:
            return

        try:
            engine.stop()
        except Exception as e:
            logger.warning(f"Failed to stop speech engine: {e}")

    def wait(self, timeout: float | None = None) -> None:
        """Block until the current utterance finishes (CLI and tests)."""
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def _run(self, text: str, locale: str, generation: int) -> None:
        try:
            engine = self._get_engine()
            with self._lock:
                if generation != self._generation:
                    logger.debug("Utterance replaced before playback")
                    return
                self._select_voice(engine, locale)
                engine.say(text)
            engine.runAndWait()
        except Exception as e:
            logger.warning(f"Speech playback failed: {e}")
        finally:
            with self._lock:
                if generation == self._generation:
                    self._speaking = False

    def _get_engine(self) -> Any:
        with self._lock:
            if self._engine is None:
                engine = self.engine_factory()
                engine.setProperty("volume", self.volume)
                base_rate = engine.getProperty("rate")
                if base_rate:
                    engine.setProperty("rate", int(base_rate * self.rate))
                self._engine = engine
            return self._engine

    def _select_voice(self, engine: Any, locale: str) -> None:
        """Switch to a voice for ``locale`` when the engine has one."""
        language = locale.split("-")[0].lower()

        for voice in engine.getProperty("voices") or []:
            # espeak reports languages as bytes with a leading priority byte
            tags = [
                tag.decode(errors="ignore") if isinstance(tag, bytes) else str(tag)
                for tag in getattr(voice, "languages", None) or []
            ]
            tags.append(str(getattr(voice, "id", "")))
            tags = ["".join(ch for ch in t if ch.isprintable()).lower() for t in tags]
            if any(locale.lower() in t or t.startswith(language) for t in tags):
                engine.setProperty("voice", voice.id)
                return

        logger.debug(f"No voice installed for {locale}, using engine default")
