from pydantic import BaseModel, ConfigDict, Field


class AudioClip(BaseModel):
    """Synthesized audio returned by a speech synthesizer."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(description="Encoded audio payload")
    content_type: str = Field(default="audio/wav")


class PartialTranscript(BaseModel):
    """One result of an incremental recognition stream.

    Each partial replaces the previous one; it is never appended to it.
    """

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Best transcript so far")
    is_final: bool = Field(default=False)


class RecognitionSettings(BaseModel):
    """Settings for a streaming recognition request."""

    model_config = ConfigDict(frozen=True)

    content_type: str = Field(default="audio/l16", description="Format of the captured audio")
    sample_rate: int = Field(default=16000, gt=0)
    channels: int = Field(default=1, ge=1)
    interim_results: bool = Field(default=True)
    interim_interval: float = Field(
        default=1.5,
        gt=0,
        description="Seconds of new audio between interim transcripts"
    )

    @property
    def bytes_per_second(self) -> int:
        # 16-bit linear PCM
        return self.sample_rate * self.channels * 2
