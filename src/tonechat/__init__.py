"""
tonechat: a voice-enabled chat screen with tone-aware message bubbles.

Each user turn is sent to a dialogue service and a tone analyzer at the same
time; the reply is spoken aloud and the user's latest bubble is tinted by
its anger score. Each sub-package hides one design decision.
"""

__version__ = "0.1.0"

from .conversation import Message, MessageStore, SenderKind, ToneScoreRecord
from .dialogue import DialogueSession, create_dialogue_service
from .errors import PlaybackError, ServiceError, ToneChatError, TransportError
from .orchestrator import TurnOrchestrator
from .speech import SpeechBridge
from .tone import ToneScorer, create_tone_service

__all__ = [
    "DialogueSession",
    "Message",
    "MessageStore",
    "PlaybackError",
    "SenderKind",
    "ServiceError",
    "SpeechBridge",
    "ToneChatError",
    "ToneScoreRecord",
    "ToneScorer",
    "TransportError",
    "TurnOrchestrator",
    "create_dialogue_service",
    "create_tone_service",
]
