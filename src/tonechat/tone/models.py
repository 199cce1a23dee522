"""Tone label sets.

The category vectors are ordered; anger must stay the first emotion tone
because the renderer reads it from that slot.
"""

from ..conversation.models import ToneAnalysis, ToneCategory, ToneScore

EMOTION_TONES = ("anger", "disgust", "fear", "joy", "sadness")
LANGUAGE_TONES = ("analytical", "confident", "tentative")
SOCIAL_TONES = (
    "openness",
    "conscientiousness",
    "extraversion",
    "agreeableness",
    "emotional_range",
)

TONE_LABELS: dict[ToneCategory, tuple[str, ...]] = {
    ToneCategory.EMOTION: EMOTION_TONES,
    ToneCategory.LANGUAGE: LANGUAGE_TONES,
    ToneCategory.SOCIAL: SOCIAL_TONES,
}

__all__ = [
    "EMOTION_TONES",
    "LANGUAGE_TONES",
    "SOCIAL_TONES",
    "TONE_LABELS",
    "ToneAnalysis",
    "ToneCategory",
    "ToneScore",
]
