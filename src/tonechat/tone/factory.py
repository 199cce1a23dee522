from typing import Any

from .base import ToneService
from .providers import OpenAIToneService, WatsonToneService


def create_tone_service(provider: str, **config: Any) -> ToneService:
    """Create a tone analysis service.

    Args:
        provider: Provider type ('watson', 'openai')
        **config: Provider-specific configuration
            For watson:
                - api_key: str (required)
                - url: str (required)
                - version: str (default: '2016-05-19')
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o-mini')

    Returns:
        Initialized tone service

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    provider_lower = provider.lower()

    if provider_lower == "watson":
        for key in ("api_key", "url"):
            if key not in config:
                raise TypeError(f"Watson tone provider requires '{key}' in config")
        return WatsonToneService(**config)

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIToneService(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'watson', 'openai'"
    )
