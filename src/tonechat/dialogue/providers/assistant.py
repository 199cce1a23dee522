from typing import Any

import httpx
from pydantic import ValidationError

from ...errors import ServiceError, TransportError, error_for_status
from ..base import DialogueService
from ..models import DialogueContext, DialogueReply

DEFAULT_VERSION = "2018-09-20"


class AssistantDialogueService(DialogueService):
    """Workspace-based assistant message API over HTTP.

    Hidden design decisions:
    - Endpoint layout (/v1/workspaces/{workspace_id}/message)
    - API key authentication (basic auth with the 'apikey' user)
    - The service context object is passed back verbatim as the opaque context
    """

    SOURCE = "assistant"

    def __init__(
        self,
        api_key: str,
        workspace_id: str,
        url: str,
        version: str = DEFAULT_VERSION,
        timeout: float = 30.0,
        **client_kwargs: Any
    ):
        """Initialize the assistant service.

        Args:
            api_key: Service API key
            workspace_id: Workspace holding the dialogue skill
            url: Service instance base URL
            version: API version date
            timeout: HTTP timeout in seconds
            **client_kwargs: Additional kwargs for httpx.AsyncClient
        """
        self._workspace_id = workspace_id
        self._version = version
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            auth=("apikey", api_key),
            timeout=timeout,
            **client_kwargs
        )

    @property
    def workspace_id(self) -> str:
        return self._workspace_id

    async def send(
        self,
        utterance: str,
        context: DialogueContext | None = None
    ) -> DialogueReply:
        body: dict[str, Any] = {"input": {"text": utterance}}
        if context is not None:
            body["context"] = context.payload

        try:
            response = await self._client.post(
                f"/v1/workspaces/{self._workspace_id}/message",
                params={"version": self._version},
                json=body,
            )
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, source=self.SOURCE) from e

        data = _json_or_none(response)
        if response.is_error:
            raise error_for_status(
                response.status_code, _error_message(data, response), source=self.SOURCE
            )
        if not isinstance(data, dict):
            raise ServiceError("Malformed reply: expected a JSON object", source=self.SOURCE)
        if "error" in data:
            raise ServiceError(str(data["error"]), source=self.SOURCE)

        try:
            output = data.get("output") or {}
            texts = output.get("text") or []
            if isinstance(texts, str):
                texts = [texts]
            return DialogueReply(
                reply_text="".join(texts),
                context=DialogueContext(payload=data.get("context") or {}),
            )
        except (AttributeError, TypeError, ValidationError) as e:
            raise ServiceError(f"Malformed reply: {e}", source=self.SOURCE) from e

    async def close(self) -> None:
        await self._client.aclose()


def _json_or_none(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(data: Any, response: httpx.Response) -> str:
    """Extract a readable error message from an error response."""
    if isinstance(data, dict):
        for key in ("error", "message", "description"):
            if data.get(key):
                return str(data[key])
    return response.reason_phrase or f"HTTP {response.status_code}"
