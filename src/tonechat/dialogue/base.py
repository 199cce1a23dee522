from abc import ABC, abstractmethod
from typing import Any

from .models import DialogueContext, DialogueReply


class DialogueService(ABC):
    """Abstract base class for remote dialogue services.

    This module hides the design decision of which dialogue backend is used.
    Implementations must handle provider-specific details like:
    - API client setup and authentication
    - Request/response format conversion
    - Mapping transport and service failures to tonechat errors

    Supports async context manager protocol for proper resource cleanup:
        async with service:
            reply = await service.send("hello", None)
    """

    @abstractmethod
    async def send(
        self,
        utterance: str,
        context: DialogueContext | None = None
    ) -> DialogueReply:
        """Send one utterance to the dialogue service.

        Args:
            utterance: User text (empty string opens a new conversation)
            context: Context returned by the previous reply, None for a fresh session

        Returns:
            DialogueReply with the reply text and the updated context

        Raises:
            TransportError: Network, auth or timeout failure
            ServiceError: The service answered with an error payload
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "DialogueService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors raised by httpx/anyio
        when the loop shuts down before the client is closed.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
