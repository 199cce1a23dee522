from .assistant import AssistantDialogueService
from .openai import OpenAIDialogueService

__all__ = ["AssistantDialogueService", "OpenAIDialogueService"]
