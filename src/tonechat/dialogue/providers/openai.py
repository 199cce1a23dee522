from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import ServiceError, TransportError, error_for_status
from ..base import DialogueService
from ..models import DialogueContext, DialogueReply

# Key under which the server-held conversation handle is stored in the context
PREVIOUS_RESPONSE_KEY = "previous_response_id"

DEFAULT_INSTRUCTIONS = (
    "You are a friendly customer-support agent in a chat app. "
    "Keep replies short, one or two sentences, because they are read aloud."
)

GREETING_PROMPT = "Greet the user and ask how you can help."


class OpenAIDialogueService(DialogueService):
    """OpenAI Responses API as a stateful dialogue service.

    Hidden design decisions:
    - Conversation state stays on the server; the context only carries
      the id of the last response (previous_response_id)
    - An empty utterance opens the conversation with a greeting
    - SDK exceptions are mapped to tonechat errors
    """

    SOURCE = "openai-dialogue"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        instructions: str | None = None,
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI dialogue service.

        Args:
            api_key: OpenAI API key
            model: Model to answer with
            instructions: System instructions (None uses a short support-agent persona)
            base_url: Optional custom API base URL
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        self._instructions = instructions or DEFAULT_INSTRUCTIONS
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)

    @property
    def model(self) -> str:
        """Get the default model name."""
        return self._model

    async def send(
        self,
        utterance: str,
        context: DialogueContext | None = None
    ) -> DialogueReply:
        request_params: dict[str, Any] = {
            "model": self._model,
            "instructions": self._instructions,
            "input": utterance or GREETING_PROMPT,
        }
        previous_id = context.payload.get(PREVIOUS_RESPONSE_KEY) if context else None
        if previous_id:
            request_params[PREVIOUS_RESPONSE_KEY] = previous_id

        try:
            response = await self._client.responses.create(**request_params)
        except (openai.APIConnectionError, openai.APITimeoutError) as e:
            raise TransportError(str(e), source=self.SOURCE) from e
        except openai.APIStatusError as e:
            raise error_for_status(e.status_code, e.message, source=self.SOURCE) from e

        error = getattr(response, "error", None)
        if error:
            raise ServiceError(getattr(error, "message", str(error)), source=self.SOURCE)

        return DialogueReply(
            reply_text=response.output_text or "",
            context=DialogueContext(payload={PREVIOUS_RESPONSE_KEY: response.id}),
        )

    async def close(self) -> None:
        await self._client.close()
