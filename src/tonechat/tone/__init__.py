from .base import ToneService
from .factory import create_tone_service
from .models import EMOTION_TONES, LANGUAGE_TONES, SOCIAL_TONES, TONE_LABELS
from .providers import OpenAIToneService, WatsonToneService
from .scorer import ToneScorer

__all__ = [
    "EMOTION_TONES",
    "LANGUAGE_TONES",
    "SOCIAL_TONES",
    "TONE_LABELS",
    "OpenAIToneService",
    "ToneScorer",
    "ToneService",
    "WatsonToneService",
    "create_tone_service",
]
