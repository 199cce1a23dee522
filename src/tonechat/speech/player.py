"""Local audio playback with sounddevice + soundfile."""

import asyncio
import io

import sounddevice as sd
import soundfile as sf

from ..errors import PlaybackError
from .base import AudioPlayer
from .models import AudioClip


class SoundDevicePlayer(AudioPlayer):
    """Plays clips on the default output device.

    sounddevice keeps one module-level playback stream, so starting a new
    clip or calling stop() always ends the previous one.
    """

    def __init__(self, device: int | str | None = None) -> None:
        self._device = device

    async def play(self, clip: AudioClip) -> None:
        try:
            data, sample_rate = await asyncio.to_thread(
                sf.read, io.BytesIO(clip.data), dtype="float32"
            )
        except (RuntimeError, TypeError, ValueError) as e:
            raise PlaybackError(f"Cannot decode {clip.content_type} audio: {e}", source="player") from e

        try:
            sd.play(data, sample_rate, device=self._device)
        except (sd.PortAudioError, ValueError) as e:
            raise PlaybackError(f"Audio device error: {e}", source="player") from e

    def stop(self) -> None:
        try:
            sd.stop()
        except sd.PortAudioError as e:
            raise PlaybackError(f"Audio device error: {e}", source="player") from e

    @property
    def is_playing(self) -> bool:
        try:
            return bool(sd.get_stream().active)
        except RuntimeError:
            return False
