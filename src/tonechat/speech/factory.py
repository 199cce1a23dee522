from typing import Any

from .base import SpeechRecognizer, SpeechSynthesizer
from .providers import OpenAISpeechRecognizer, OpenAISpeechSynthesizer


def create_speech_synthesizer(provider: str, **config: Any) -> SpeechSynthesizer:
    """Create a speech synthesizer.

    Args:
        provider: Provider type ('openai')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o-mini-tts')
                - voice: str (default: 'alloy')

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAISpeechSynthesizer(**config)

    raise ValueError(f"Unsupported provider: {provider}. Supported providers: 'openai'")


def create_speech_recognizer(provider: str, **config: Any) -> SpeechRecognizer:
    """Create a speech recognizer.

    Args:
        provider: Provider type ('openai')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o-mini-transcribe')
                - language: str | None

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAISpeechRecognizer(**config)

    raise ValueError(f"Unsupported provider: {provider}. Supported providers: 'openai'")
