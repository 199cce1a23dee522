from abc import ABC, abstractmethod
from typing import Any

from .models import ToneAnalysis


class ToneService(ABC):
    """Abstract base class for remote tone analysis services.

    This module hides the design decision of which sentiment backend is used.
    Every call asks for the three fixed categories (emotion, language, social).
    """

    @abstractmethod
    async def analyze(self, text: str) -> ToneAnalysis:
        """Analyze the tone of a text.

        Args:
            text: Raw utterance text

        Returns:
            ToneAnalysis with the three category vectors, anger first in emotion

        Raises:
            TransportError: Network, auth or timeout failure
            ServiceError: The service answered with an error or a malformed payload
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "ToneService":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
