from typing import Any

from ..conversation.models import ToneScoreRecord
from .base import ToneService


class ToneScorer:
    """Turns utterances into tone records attached to their turn."""

    def __init__(self, service: ToneService) -> None:
        self._service = service
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set debug callback for logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    @property
    def service(self) -> ToneService:
        return self._service

    async def score(self, utterance: str, turn_id: int) -> ToneScoreRecord:
        """Score one user utterance.

        Raises:
            TransportError: Network, auth or timeout failure
            ServiceError: The service answered with an error
        """
        analysis = await self._service.analyze(utterance)
        record = ToneScoreRecord.from_analysis(analysis, turn_id)
        if self._debug_callback:
            self._debug_callback("debug", "Tone", f"Turn {turn_id} anger={record.anger:.2f}")
        return record

    async def close(self) -> None:
        await self._service.close()
