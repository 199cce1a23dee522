"""Conversation log module for tonechat.

Holds the session's messages and tone records in memory.
"""

from .models import (
    BubbleState,
    BubbleStatus,
    Message,
    SenderKind,
    ToneAnalysis,
    ToneCategory,
    ToneScore,
    ToneScoreRecord,
)
from .store import MessageStore, ToneLedger

__all__ = [
    "BubbleState",
    "BubbleStatus",
    "Message",
    "MessageStore",
    "SenderKind",
    "ToneAnalysis",
    "ToneCategory",
    "ToneLedger",
    "ToneScore",
    "ToneScoreRecord",
]
