import io
from collections.abc import AsyncIterator
from typing import Any

import numpy as np
import openai
import soundfile as sf
from openai import AsyncOpenAI

from ...errors import TransportError, error_for_status
from ..base import SpeechRecognizer, SpeechSynthesizer
from ..models import AudioClip, PartialTranscript, RecognitionSettings


def _translate(e: openai.OpenAIError, source: str) -> Exception:
    if isinstance(e, (openai.APIConnectionError, openai.APITimeoutError)):
        return TransportError(str(e), source=source)
    if isinstance(e, openai.APIStatusError):
        return error_for_status(e.status_code, e.message, source=source)
    return TransportError(str(e), source=source)


class OpenAISpeechSynthesizer(SpeechSynthesizer):
    """Text to speech with the OpenAI audio API (WAV output)."""

    SOURCE = "openai-tts"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini-tts",
        voice: str = "alloy",
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._voice = voice
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)

    async def synthesize(self, text: str) -> AudioClip:
        try:
            response = await self._client.audio.speech.create(
                model=self._model,
                voice=self._voice,
                input=text,
                response_format="wav",
            )
        except openai.OpenAIError as e:
            raise _translate(e, self.SOURCE) from e
        return AudioClip(data=response.content, content_type="audio/wav")

    async def close(self) -> None:
        await self._client.close()


class OpenAISpeechRecognizer(SpeechRecognizer):
    """Incremental transcription on top of the OpenAI transcription API.

    The API is request/response, so interim results are produced by
    re-transcribing everything captured so far every interim_interval
    seconds of new audio. The final transcript covers the whole utterance.
    """

    SOURCE = "openai-stt"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini-transcribe",
        language: str | None = None,
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._language = language
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)

    async def recognize(
        self,
        chunks: AsyncIterator[bytes],
        settings: RecognitionSettings
    ) -> AsyncIterator[PartialTranscript]:
        buffer = bytearray()
        step = int(settings.interim_interval * settings.bytes_per_second)
        next_interim = step

        async for chunk in chunks:
            buffer.extend(chunk)
            if settings.interim_results and len(buffer) >= next_interim:
                text = await self._transcribe(bytes(buffer), settings)
                next_interim = len(buffer) + step
                yield PartialTranscript(text=text, is_final=False)

        if buffer:
            text = await self._transcribe(bytes(buffer), settings)
            yield PartialTranscript(text=text, is_final=True)

    async def _transcribe(self, pcm: bytes, settings: RecognitionSettings) -> str:
        request_params: dict[str, Any] = {
            "model": self._model,
            "file": ("speech.wav", pcm_to_wav(pcm, settings), "audio/wav"),
        }
        if self._language:
            request_params["language"] = self._language

        try:
            transcription = await self._client.audio.transcriptions.create(**request_params)
        except openai.OpenAIError as e:
            raise _translate(e, self.SOURCE) from e
        return transcription.text.strip()

    async def close(self) -> None:
        await self._client.close()


def pcm_to_wav(pcm: bytes, settings: RecognitionSettings) -> bytes:
    """Wrap raw 16-bit PCM in a WAV container."""
    # Drop a trailing partial frame so the buffer reshapes cleanly
    frame_size = 2 * settings.channels
    usable = len(pcm) - len(pcm) % frame_size
    samples = np.frombuffer(pcm[:usable], dtype=np.int16).reshape(-1, settings.channels)
    buffer = io.BytesIO()
    sf.write(buffer, samples, settings.sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()
