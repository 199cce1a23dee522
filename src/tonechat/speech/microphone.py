"""Microphone capture feeding an asyncio queue."""

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import sounddevice as sd

from ..errors import PlaybackError
from .base import AudioSource


class MicrophoneSource(AudioSource):
    """Default input device as a stream of 16-bit PCM chunks.

    The PortAudio callback runs on its own thread and hands chunks to the
    event loop with call_soon_threadsafe.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        block_duration: float = 0.1,
        device: int | str | None = None
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._blocksize = int(sample_rate * block_duration)
        self._device = device
        self._queue: asyncio.Queue[bytes | None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._closed = False

    async def chunks(self) -> AsyncIterator[bytes]:
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        queue = self._queue

        def _callback(indata: Any, frames: int, time_info: Any, status: Any) -> None:
            self._loop.call_soon_threadsafe(queue.put_nowait, bytes(indata))

        try:
            stream = sd.RawInputStream(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="int16",
                blocksize=self._blocksize,
                device=self._device,
                callback=_callback,
            )
            stream.start()
        except sd.PortAudioError as e:
            raise PlaybackError(f"Cannot open microphone: {e}", source="microphone") from e

        try:
            if self._closed:
                return
            while True:
                chunk = await queue.get()
                if chunk is None:
                    break
                yield chunk
        finally:
            stream.stop()
            stream.close()

    def close(self) -> None:
        self._closed = True
        if self._queue is not None and self._loop is not None:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, None)
