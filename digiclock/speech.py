# Copyright (c) 2025-2026 Luc Vincent. All Rights Reserved.
"""
Spoken time announcements via pyttsx3.

Speech runs on a background worker that owns the TTS engine, so the UI
thread only ever enqueues text. Announcements are fire-and-forget: nothing
waits for them and failures are logged and ignored.
"""

import logging
import queue
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

try:
    import pyttsx3
    PYTTSX3_AVAILABLE = True
except ImportError:
    PYTTSX3_AVAILABLE = False
    logger.warning("pyttsx3 not installed - spoken announcements disabled")


ANNOUNCE_ON_CHANGE = "on_change"
ANNOUNCE_EVERY_RENDER = "every_render"

PHRASE_TEMPLATE = "Current time is {time}"


def _default_engine_factory():
    return pyttsx3.init()


class VoiceAnnouncer:
    """
    Speaks the current time.

    Two announce policies:
    - on_change: speak only when the time string differs from the last one
      announced.
    - every_render: speak on every render call, even if nothing changed.

    At most one utterance waits in the queue; a newer one replaces it.
    """

    def __init__(
        self,
        announce_mode: str = ANNOUNCE_ON_CHANGE,
        rate: int = 160,
        volume: float = 0.9,
        engine_factory: Optional[Callable[[], object]] = None
    ):
        """
        Initialize the announcer. Call start() to launch the worker.

        Args:
            announce_mode: 'on_change' or 'every_render'.
            rate: Speech rate in words per minute.
            volume: Volume between 0.0 and 1.0.
            engine_factory: Returns a pyttsx3-compatible engine. Defaults to
                pyttsx3.init.
        """
        self._announce_mode = announce_mode
        self._rate = rate
        self._volume = volume
        self._engine_factory = engine_factory
        if self._engine_factory is None and PYTTSX3_AVAILABLE:
            self._engine_factory = _default_engine_factory

        self._queue: "queue.Queue[Optional[str]]" = queue.Queue(maxsize=1)
        self._thread: Optional[threading.Thread] = None
        self._engine = None
        self._last_announced: Optional[str] = None
        self._shutdown = False

    @property
    def available(self) -> bool:
        return self._engine_factory is not None

    def start(self) -> bool:
        """
        Start the speech worker.

        Returns:
            True if the worker is running, False if speech is unavailable.
        """
        if not self.available:
            logger.info("No TTS engine available - announcements disabled")
            return False
        if self._thread is not None:
            return True

        self._thread = threading.Thread(target=self._worker_loop, daemon=True)
        self._thread.start()
        logger.info(f"Voice announcer started (mode: {self._announce_mode})")
        return True

    def announce(self, time_text: str) -> bool:
        """
        Request an announcement for a rendered time string.

        Returns:
            True if the phrase was queued, False if it was skipped.
        """
        if self._shutdown or not time_text:
            return False

        if self._announce_mode == ANNOUNCE_ON_CHANGE and time_text == self._last_announced:
            return False
        self._last_announced = time_text

        self._enqueue(PHRASE_TEMPLATE.format(time=time_text))
        return True

    def _enqueue(self, phrase: str) -> None:
        try:
            self._queue.put_nowait(phrase)
        except queue.Full:
            # Replace the stale pending phrase
            try:
                self._queue.get_nowait()
                self._queue.task_done()
            except queue.Empty:
                pass
            try:
                self._queue.put_nowait(phrase)
            except queue.Full:
                logger.debug("Speech queue busy, dropping announcement")

    def _init_engine(self) -> bool:
        try:
            self._engine = self._engine_factory()
            self._engine.setProperty("rate", self._rate)
            self._engine.setProperty("volume", self._volume)
            self._engine.connect("started-word", self._on_word)
            return True
        except Exception as e:
            logger.warning(f"Failed to initialize TTS engine: {e}")
            self._engine = None
            return False

    def _on_word(self, name, location, length) -> None:
        """Cut the current utterance short once shutdown has begun."""
        if self._shutdown and self._engine is not None:
            self._engine.stop()

    def _worker_loop(self) -> None:
        """Background thread that speaks queued phrases."""
        engine_ready = self._init_engine()

        while True:
            phrase = self._queue.get()
            try:
                if phrase is None:
                    break
                if engine_ready:
                    self._engine.say(phrase)
                    self._engine.runAndWait()
            except Exception as e:
                logger.debug(f"TTS error: {e}")
            finally:
                self._queue.task_done()

        if self._engine is not None:
            try:
                self._engine.stop()
            except Exception as e:
                logger.debug(f"TTS stop error: {e}")

    def shutdown(self) -> None:
        """
        Stop speaking and end the worker. Safe to call more than once.

        An utterance in progress is stopped at its next word boundary.
        """
        if self._shutdown:
            return
        self._shutdown = True

        if self._thread is not None:
            # Drop anything pending, then wake the worker with the sentinel
            try:
                self._queue.get_nowait()
                self._queue.task_done()
            except queue.Empty:
                pass
            try:
                self._queue.put(None, timeout=1.0)
            except queue.Full:
                logger.debug("Speech worker did not drain in time")
            self._thread.join(timeout=1.0)
            self._thread = None

        logger.info("Voice announcer stopped")
