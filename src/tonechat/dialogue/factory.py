from typing import Any

from .base import DialogueService
from .providers import AssistantDialogueService, OpenAIDialogueService


def create_dialogue_service(provider: str, **config: Any) -> DialogueService:
    """Create a dialogue service instance.

    This factory function hides the instantiation logic for different providers.

    Args:
        provider: Provider type ('assistant', 'openai')
        **config: Provider-specific configuration
            For assistant:
                - api_key: str (required)
                - workspace_id: str (required)
                - url: str (required)
                - version: str (default: '2018-09-20')
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o-mini')
                - instructions: str | None

    Returns:
        Initialized dialogue service

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> service = create_dialogue_service(
        ...     "assistant",
        ...     api_key="...",
        ...     workspace_id="9f1c...",
        ...     url="https://api.us-south.assistant.watson.cloud.ibm.com"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("assistant", "watson"):
        for key in ("api_key", "workspace_id", "url"):
            if key not in config:
                raise TypeError(f"Assistant provider requires '{key}' in config")
        return AssistantDialogueService(**config)

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIDialogueService(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'assistant', 'openai'"
    )
