"""Stateful dialogue session.

Hides how the single live context token is held and replaced across turns.
"""

from typing import Any

from .base import DialogueService
from .models import DialogueContext, DialogueReply


class DialogueSession:
    """One conversation with a dialogue service.

    Holds exactly one context. Every successful reply replaces it
    (last write wins); a failed call leaves it untouched. Replies that
    arrive after reset() do not touch the new conversation.
    """

    def __init__(
        self,
        service: DialogueService,
        context: DialogueContext | None = None
    ) -> None:
        self._service = service
        self._context = context
        self._generation = 0
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Dialogue", message)

    @property
    def context(self) -> DialogueContext | None:
        """The context the next utterance will be sent with."""
        return self._context

    @property
    def service(self) -> DialogueService:
        return self._service

    async def start(self) -> DialogueReply:
        """Open a fresh conversation and return the service greeting."""
        self.reset()
        return await self.send("")

    async def send(self, utterance: str) -> DialogueReply:
        """Send an utterance with the held context.

        Raises:
            TransportError: Network, auth or timeout failure
            ServiceError: The service answered with an error
        """
        sent_with = self._context
        generation = self._generation
        self._debug("debug", f"Sending {len(utterance)} chars (context: {'yes' if sent_with else 'none'})")
        reply = await self._service.send(utterance, sent_with)
        if generation == self._generation:
            self._context = reply.context
            self._debug("debug", "Context replaced")
        return reply

    def reset(self) -> None:
        """Drop the held context; the next call starts a new conversation."""
        self._generation += 1
        self._context = None

    async def close(self) -> None:
        await self._service.close()
