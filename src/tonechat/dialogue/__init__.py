from .base import DialogueService
from .factory import create_dialogue_service
from .models import DialogueContext, DialogueReply
from .providers import AssistantDialogueService, OpenAIDialogueService
from .session import DialogueSession

__all__ = [
    "AssistantDialogueService",
    "DialogueContext",
    "DialogueReply",
    "DialogueService",
    "DialogueSession",
    "OpenAIDialogueService",
    "create_dialogue_service",
]
