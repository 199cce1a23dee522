"""Data models for the conversation log and tone results.

These models are shared by the dialogue, tone and orchestration modules and
carry the explicit turn id that correlates a user message with its reply and
its tone record.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SenderKind(str, Enum):
    """Who authored a message."""

    USER = "user"
    AGENT = "agent"


class Message(BaseModel):
    """A single chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    sender: SenderKind = Field(description="Author of the message")
    text: str = Field(description="Message text")
    timestamp: datetime = Field(default_factory=datetime.now)
    turn_id: int | None = Field(
        default=None,
        description="Turn this message belongs to (None for the session greeting)"
    )

    @property
    def is_user(self) -> bool:
        return self.sender == SenderKind.USER


class ToneCategory(str, Enum):
    """The three tone groupings requested on every analysis."""

    EMOTION = "emotion"
    LANGUAGE = "language"
    SOCIAL = "social"


class ToneScore(BaseModel):
    """One named sub-score of a tone category."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Tone identifier, e.g. 'anger'")
    score: float = Field(ge=0.0, le=1.0, description="Probability-like score")


class ToneAnalysis(BaseModel):
    """Raw result of a tone service call: three ordered category vectors."""

    model_config = ConfigDict(frozen=True)

    emotion: tuple[ToneScore, ...] = Field(description="Emotion tones, anger first")
    language: tuple[ToneScore, ...] = Field(default=())
    social: tuple[ToneScore, ...] = Field(default=())

    @field_validator("emotion")
    @classmethod
    def _emotion_not_empty(cls, value: tuple[ToneScore, ...]) -> tuple[ToneScore, ...]:
        if not value:
            raise ValueError("emotion category must contain at least the anger score")
        return value

    def category(self, category: ToneCategory) -> tuple[ToneScore, ...]:
        """Get the score vector for a category."""
        return getattr(self, category.value)


class ToneScoreRecord(ToneAnalysis):
    """Tone analysis attached to the turn that produced it."""

    turn_id: int = Field(description="Turn whose user message was scored")

    @property
    def anger(self) -> float:
        """Anger score: first slot of the emotion category by convention."""
        return self.emotion[0].score

    @classmethod
    def from_analysis(cls, analysis: ToneAnalysis, turn_id: int) -> "ToneScoreRecord":
        return cls(
            turn_id=turn_id,
            emotion=analysis.emotion,
            language=analysis.language,
            social=analysis.social,
        )


class BubbleStatus(str, Enum):
    """Tone state of a user message bubble."""

    PENDING = "pending"
    SCORED = "scored"
    FAILED = "failed"


class BubbleState(BaseModel):
    """Per-turn tone state read directly by the renderer."""

    model_config = ConfigDict(frozen=True)

    status: BubbleStatus = BubbleStatus.PENDING
    record: ToneScoreRecord | None = None
