"""Speech bridge between the chat screen and the speech services.

Hides the design decisions about:
- Ownership of the single playback channel (newest speak() wins)
- Lifetime of microphone recognition sessions (newest session wins)
- How partial transcripts reach the input field (replace, never append)
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from itertools import count
from typing import Any

from ..errors import PlaybackError
from .base import AudioPlayer, AudioSource, SpeechRecognizer, SpeechSynthesizer
from .models import PartialTranscript, RecognitionSettings


class ListeningSession:
    """One microphone recognition session.

    Iterate it to receive partial transcripts. stop() ends capture and lets
    the recognizer emit the final transcript; cancel() ends it silently.
    """

    def __init__(
        self,
        session_id: int,
        source: AudioSource,
        recognizer: SpeechRecognizer,
        settings: RecognitionSettings
    ) -> None:
        self.session_id = session_id
        self._source = source
        self._recognizer = recognizer
        self._settings = settings
        self._cancelled = False
        self._stopped = False
        self._final: PartialTranscript | None = None
        self._pending: asyncio.Future[PartialTranscript] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._stopped)

    @property
    def final_transcript(self) -> PartialTranscript | None:
        return self._final

    def stop(self) -> None:
        """Stop capturing; the final transcript is still delivered."""
        self._stopped = True
        self._source.close()

    def cancel(self) -> None:
        """Stop capturing and deliver nothing more.

        The recognizer is interrupted too, so no final transcription
        request is made for the captured audio.
        """
        self._cancelled = True
        self._source.close()
        if self._pending is not None:
            self._pending.cancel()

    def __aiter__(self) -> AsyncIterator[PartialTranscript]:
        return self._stream()

    async def _stream(self) -> AsyncIterator[PartialTranscript]:
        iterator = aiter(self._recognizer.recognize(self._source.chunks(), self._settings))
        try:
            while not self._cancelled:
                # Each pull runs as its own task so cancel() can interrupt the recognizer
                self._pending = asyncio.ensure_future(anext(iterator))
                try:
                    partial = await self._pending
                except StopAsyncIteration:
                    return
                except asyncio.CancelledError:
                    if not self._cancelled or asyncio.current_task().cancelling():
                        raise
                    return
                finally:
                    self._pending = None

                if self._cancelled:
                    return
                if partial.is_final:
                    self._final = partial
                yield partial
        finally:
            await iterator.aclose()


class SpeechBridge:
    """Outbound speech (speak) and inbound speech (listen) for the chat screen."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        player: AudioPlayer,
        recognizer: SpeechRecognizer | None = None,
        source_factory: Callable[[], AudioSource] | None = None,
        settings: RecognitionSettings | None = None
    ) -> None:
        self._synthesizer = synthesizer
        self._player = player
        self._recognizer = recognizer
        self._source_factory = source_factory
        self._settings = settings or RecognitionSettings()
        self._speak_generation = 0
        self._session_ids = count(1)
        self._listening: ListeningSession | None = None
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Speech", message)

    @property
    def can_listen(self) -> bool:
        return self._recognizer is not None and self._source_factory is not None

    @property
    def is_listening(self) -> bool:
        return self._listening is not None and self._listening.active

    @property
    def is_speaking(self) -> bool:
        return self._player.is_playing

    async def speak(self, text: str) -> None:
        """Synthesize text and play it, preempting any current playback.

        If another speak() starts while this one is still synthesizing,
        this one's audio is dropped.

        Raises:
            TransportError: Synthesis call failed in transit
            ServiceError: Synthesis service returned an error
            PlaybackError: Local playback failed
        """
        if not text.strip():
            return

        self._speak_generation += 1
        generation = self._speak_generation
        self._player.stop()

        clip = await self._synthesizer.synthesize(text)
        if generation != self._speak_generation:
            self._debug("debug", "Dropped superseded speech")
            return

        self._player.stop()
        await self._player.play(clip)
        self._debug("debug", f"Playing {len(clip.data)} bytes")

    def stop_speaking(self) -> None:
        """Stop playback and discard any synthesis still in flight.

        A device error while stopping is logged, not raised.
        """
        self._speak_generation += 1
        try:
            self._player.stop()
        except PlaybackError as e:
            self._debug("warning", f"Could not stop playback: {e}")

    def start_listening(self) -> ListeningSession:
        """Start a microphone recognition session.

        Any active session is cancelled before the new one exists, so it
        cannot emit after this call. Current playback is stopped too.

        Raises:
            RuntimeError: If no recognizer or audio source is configured
        """
        if self._recognizer is None or self._source_factory is None:
            raise RuntimeError("Speech recognition is not configured")

        self.stop_speaking()
        if self._listening is not None:
            self._listening.cancel()
            self._debug("debug", f"Cancelled listening session {self._listening.session_id}")

        self._listening = ListeningSession(
            session_id=next(self._session_ids),
            source=self._source_factory(),
            recognizer=self._recognizer,
            settings=self._settings,
        )
        self._debug("info", f"Listening session {self._listening.session_id} started")
        return self._listening

    def stop_listening(self) -> None:
        """Stop the active session; its final transcript is still delivered."""
        if self._listening is not None and self._listening.active:
            self._listening.stop()
            self._debug("info", f"Listening session {self._listening.session_id} stopped")

    async def listen_into(
        self,
        setter: Callable[[str], None],
        session: ListeningSession | None = None
    ) -> str:
        """Feed partial transcripts into an input field until the session ends.

        Each partial replaces the field content. Returns the last text set.
        """
        session = session or self.start_listening()
        text = ""
        async for partial in session:
            text = partial.text
            setter(text)
        return text

    async def close(self) -> None:
        if self._listening is not None:
            self._listening.cancel()
        self.stop_speaking()
        await self._synthesizer.close()
        if self._recognizer is not None:
            await self._recognizer.close()
