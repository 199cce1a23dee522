"""Error taxonomy shared by every remote and local collaborator.

All three errors are non-fatal to the turn orchestrator: they are caught at
the branch boundary, reported, and the affected branch produces no effects.
"""


class ToneChatError(Exception):
    """Base class for tonechat errors."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        message = super().__str__()
        if self.source:
            return f"{self.source}: {message}"
        return message


class TransportError(ToneChatError):
    """Network, authentication or timeout failure talking to a remote service."""


class ServiceError(ToneChatError):
    """The remote call went through but the service answered with an error."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        status_code: int | None = None
    ) -> None:
        super().__init__(message, source=source)
        self.status_code = status_code


class PlaybackError(ToneChatError):
    """Local audio subsystem failure (decoding, device or stream)."""


# Status codes that mean the request never reached a usable service.
_TRANSPORT_STATUS_CODES = {401, 403, 407, 408}


def error_for_status(
    status_code: int,
    message: str,
    source: str | None = None
) -> ToneChatError:
    """Map an HTTP error status to the matching tonechat error.

    Authentication and request-timeout statuses count as transport failures,
    everything else is an error reported by the service itself.
    """
    if status_code in _TRANSPORT_STATUS_CODES:
        return TransportError(f"HTTP {status_code}: {message}", source=source)
    return ServiceError(message, source=source, status_code=status_code)
