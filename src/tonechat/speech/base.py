"""Abstract interfaces for the speech collaborators.

This module hides which speech services and audio devices are used:
- SpeechSynthesizer: text to audio (remote)
- SpeechRecognizer: audio chunks to incremental transcripts (remote)
- AudioPlayer: the single local playback channel
- AudioSource: a capture device producing raw audio chunks
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from .models import AudioClip, PartialTranscript, RecognitionSettings


class SpeechSynthesizer(ABC):
    """Converts reply text to audio."""

    @abstractmethod
    async def synthesize(self, text: str) -> AudioClip:
        """Synthesize text to audio.

        Raises:
            TransportError: Network, auth or timeout failure
            ServiceError: The service answered with an error
        """
        pass

    async def close(self) -> None:
        """Close any open connections or resources."""


class SpeechRecognizer(ABC):
    """Converts captured audio to text incrementally."""

    @abstractmethod
    def recognize(
        self,
        chunks: AsyncIterator[bytes],
        settings: RecognitionSettings
    ) -> AsyncIterator[PartialTranscript]:
        """Transcribe an audio stream.

        Yields interim transcripts while chunks arrive (if enabled) and one
        final transcript once the chunk stream ends.
        """
        pass

    async def close(self) -> None:
        """Close any open connections or resources."""


class AudioPlayer(ABC):
    """Single-owner local playback channel."""

    @abstractmethod
    async def play(self, clip: AudioClip) -> None:
        """Start playing a clip.

        Raises:
            PlaybackError: The clip could not be decoded or played
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop current playback. No-op when nothing is playing.

        Raises:
            PlaybackError: The audio device failed while stopping
        """
        pass

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        pass


class AudioSource(ABC):
    """A capture device that streams raw 16-bit PCM chunks."""

    @abstractmethod
    def chunks(self) -> AsyncIterator[bytes]:
        """Open the device and yield chunks until close() is called."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Stop capturing; the chunk iterator finishes after pending chunks."""
        pass
