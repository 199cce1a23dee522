import json
import math
from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import ServiceError, TransportError, error_for_status
from ..base import ToneService
from ..models import TONE_LABELS, ToneAnalysis, ToneCategory, ToneScore

SYSTEM_PROMPT = """You are a tone analyzer. Score the tone of the user's text.

Return a JSON object with exactly three keys: "emotion", "language", "social".
Each key maps tone names to a probability between 0 and 1.

emotion: {emotion}
language: {language}
social: {social}

Return JSON only."""


def _build_system_prompt() -> str:
    return SYSTEM_PROMPT.format(**{
        category.value: ", ".join(labels) for category, labels in TONE_LABELS.items()
    })


class OpenAIToneService(ToneService):
    """Tone analysis with an OpenAI chat model in JSON mode.

    Hidden design decisions:
    - Prompt layout and JSON response format
    - Fixed label order per category (anger first)
    - Missing tones score 0.0, out-of-range scores are clamped
    """

    SOURCE = "openai-tone"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        **client_kwargs: Any
    ):
        self._model = model
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    async def analyze(self, text: str) -> ToneAnalysis:
        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": _build_system_prompt()},
                    {"role": "user", "content": text},
                ],
                temperature=0.0,
                response_format={"type": "json_object"},
            )
        except (openai.APIConnectionError, openai.APITimeoutError) as e:
            raise TransportError(str(e), source=self.SOURCE) from e
        except openai.APIStatusError as e:
            raise error_for_status(e.status_code, e.message, source=self.SOURCE) from e

        content = completion.choices[0].message.content or ""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ServiceError(f"Tone reply is not JSON: {e}", source=self.SOURCE) from e
        if not isinstance(data, dict):
            raise ServiceError("Tone reply is not a JSON object", source=self.SOURCE)

        return ToneAnalysis(
            emotion=_scores(data, ToneCategory.EMOTION),
            language=_scores(data, ToneCategory.LANGUAGE),
            social=_scores(data, ToneCategory.SOCIAL),
        )

    async def close(self) -> None:
        await self._client.close()


def _scores(data: dict[str, Any], category: ToneCategory) -> tuple[ToneScore, ...]:
    raw = data.get(category.value)
    if not isinstance(raw, dict):
        raw = {}

    scores = []
    for label in TONE_LABELS[category]:
        try:
            value = float(raw.get(label, 0.0))
        except (TypeError, ValueError):
            value = 0.0
        if not math.isfinite(value):
            value = 0.0
        scores.append(ToneScore(label=label, score=min(max(value, 0.0), 1.0)))
    return tuple(scores)
