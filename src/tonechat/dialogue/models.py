from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DialogueContext(BaseModel):
    """Opaque server-issued state carried across dialogue calls.

    Only the dialogue provider that produced it knows what the payload means.
    """

    model_config = ConfigDict(frozen=True)

    payload: dict[str, Any] = Field(default_factory=dict)


class DialogueReply(BaseModel):
    """Reply from a dialogue service."""

    model_config = ConfigDict(frozen=True)

    reply_text: str = Field(description="Text the agent answered with")
    context: DialogueContext = Field(description="Context to send with the next utterance")
