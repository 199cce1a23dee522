from typing import Any

import httpx
from pydantic import ValidationError

from ...errors import ServiceError, TransportError, error_for_status
from ..base import ToneService
from ..models import ToneAnalysis, ToneCategory, ToneScore

DEFAULT_VERSION = "2016-05-19"

_CATEGORY_IDS = {
    "emotion_tone": ToneCategory.EMOTION,
    "language_tone": ToneCategory.LANGUAGE,
    "social_tone": ToneCategory.SOCIAL,
}


class WatsonToneService(ToneService):
    """Tone analyzer v3 endpoint over HTTP.

    Hidden design decisions:
    - Document-level analysis only (sentences=false)
    - The tone_categories payload layout and category ids
    - Anger is moved to the first emotion slot if the service orders it elsewhere
    """

    SOURCE = "tone-analyzer"

    def __init__(
        self,
        api_key: str,
        url: str,
        version: str = DEFAULT_VERSION,
        timeout: float = 30.0,
        **client_kwargs: Any
    ):
        self._version = version
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            auth=("apikey", api_key),
            timeout=timeout,
            **client_kwargs
        )

    async def analyze(self, text: str) -> ToneAnalysis:
        try:
            response = await self._client.post(
                "/v3/tone",
                params={
                    "version": self._version,
                    "tones": "emotion,language,social",
                    "sentences": "false",
                },
                json={"text": text},
            )
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, source=self.SOURCE) from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.is_error:
            message = ""
            if isinstance(data, dict):
                message = str(data.get("error") or data.get("description") or "")
            raise error_for_status(
                response.status_code,
                message or response.reason_phrase or f"HTTP {response.status_code}",
                source=self.SOURCE,
            )
        if not isinstance(data, dict) or "document_tone" not in data:
            raise ServiceError("Malformed tone payload: missing document_tone", source=self.SOURCE)

        return parse_tone_categories(data["document_tone"], source=self.SOURCE)

    async def close(self) -> None:
        await self._client.aclose()


def parse_tone_categories(document_tone: dict[str, Any], source: str | None = None) -> ToneAnalysis:
    """Convert a document_tone object into a ToneAnalysis.

    Raises:
        ServiceError: If the payload has no usable emotion category
    """
    vectors: dict[ToneCategory, list[ToneScore]] = {category: [] for category in ToneCategory}

    try:
        for category in document_tone.get("tone_categories", []):
            target = _CATEGORY_IDS.get(category.get("category_id", ""))
            if target is None:
                continue
            vectors[target] = [
                ToneScore(label=tone["tone_id"], score=tone["score"])
                for tone in category.get("tones", [])
            ]

        emotion = vectors[ToneCategory.EMOTION]
        if not any(tone.label == "anger" for tone in emotion):
            raise ServiceError("Malformed tone payload: no anger tone", source=source)
        emotion.sort(key=lambda tone: tone.label != "anger")

        return ToneAnalysis(
            emotion=tuple(emotion),
            language=tuple(vectors[ToneCategory.LANGUAGE]),
            social=tuple(vectors[ToneCategory.SOCIAL]),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise ServiceError(f"Malformed tone payload: {e}", source=source) from e
