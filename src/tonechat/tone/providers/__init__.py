from .openai import OpenAIToneService
from .watson import WatsonToneService

__all__ = ["OpenAIToneService", "WatsonToneService"]
