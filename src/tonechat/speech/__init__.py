"""Speech module for tonechat.

Text to speech for agent replies and incremental speech to text for the
input field, behind a single SpeechBridge.
"""

from .base import AudioPlayer, AudioSource, SpeechRecognizer, SpeechSynthesizer
from .bridge import ListeningSession, SpeechBridge
from .factory import create_speech_recognizer, create_speech_synthesizer
from .models import AudioClip, PartialTranscript, RecognitionSettings
from .providers import OpenAISpeechRecognizer, OpenAISpeechSynthesizer

__all__ = [
    "AudioClip",
    "AudioPlayer",
    "AudioSource",
    "ListeningSession",
    "OpenAISpeechRecognizer",
    "OpenAISpeechSynthesizer",
    "PartialTranscript",
    "RecognitionSettings",
    "SpeechBridge",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "create_speech_recognizer",
    "create_speech_synthesizer",
]
