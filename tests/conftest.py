"""Pytest configuration and shared fixtures."""
import asyncio
import os
from collections.abc import AsyncIterator

import pytest

from tonechat.conversation import ToneAnalysis, ToneScore
from tonechat.dialogue import DialogueContext, DialogueReply, DialogueService, DialogueSession
from tonechat.errors import ToneChatError
from tonechat.speech import (
    AudioClip,
    AudioPlayer,
    AudioSource,
    PartialTranscript,
    RecognitionSettings,
    SpeechBridge,
    SpeechRecognizer,
    SpeechSynthesizer,
)
from tonechat.tone import ToneScorer, ToneService


def tone_analysis(anger: float) -> ToneAnalysis:
    """Build an analysis with the given anger score in the first slot."""
    return ToneAnalysis(
        emotion=(
            ToneScore(label="anger", score=anger),
            ToneScore(label="joy", score=round(1.0 - anger, 3)),
        ),
        language=(ToneScore(label="analytical", score=0.2),),
        social=(ToneScore(label="openness", score=0.4),),
    )


class FakeDialogueService(DialogueService):
    """Echoes utterances and numbers each context it hands out.

    Replies with "reply to <utterance>"; context k carries {"n": k}.
    Utterances listed in fail_on raise the given error instead.
    """

    def __init__(self, fail_on: dict[str, ToneChatError] | None = None, delay: float = 0.0):
        self.fail_on = fail_on or {}
        self.delay = delay
        self.calls: list[tuple[str, DialogueContext | None]] = []
        self.closed = False
        self._issued = 0

    async def send(self, utterance, context=None):
        self.calls.append((utterance, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        if utterance in self.fail_on:
            raise self.fail_on[utterance]
        self._issued += 1
        text = f"reply to {utterance}" if utterance else "Hello, how can I help?"
        return DialogueReply(reply_text=text, context=DialogueContext(payload={"n": self._issued}))

    async def close(self):
        self.closed = True


class FakeToneService(ToneService):
    """Scores from a lookup table, with optional per-text delays and failures."""

    def __init__(
        self,
        scores: dict[str, float] | None = None,
        fail_on: dict[str, ToneChatError] | None = None,
        delays: dict[str, float] | None = None,
        default: float = 0.5,
    ):
        self.scores = scores or {}
        self.fail_on = fail_on or {}
        self.delays = delays or {}
        self.default = default
        self.calls: list[str] = []
        self.closed = False

    async def analyze(self, text):
        self.calls.append(text)
        if text in self.delays:
            await asyncio.sleep(self.delays[text])
        if text in self.fail_on:
            raise self.fail_on[text]
        return tone_analysis(self.scores.get(text, self.default))

    async def close(self):
        self.closed = True


class FakeSynthesizer(SpeechSynthesizer):
    def __init__(self, delay: float = 0.0, error: ToneChatError | None = None):
        self.delay = delay
        self.error = error
        self.texts: list[str] = []

    async def synthesize(self, text):
        self.texts.append(text)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return AudioClip(data=text.encode())


class FakePlayer(AudioPlayer):
    def __init__(self):
        self.played: list[AudioClip] = []
        self.stops = 0
        self._playing = False

    async def play(self, clip):
        self.played.append(clip)
        self._playing = True

    def stop(self):
        self.stops += 1
        self._playing = False

    @property
    def is_playing(self):
        return self._playing


class QueueSource(AudioSource):
    """Audio source fed by the test through push()."""

    def __init__(self):
        self._queue: asyncio.Queue[bytes | None] = asyncio.Queue()
        self.closed = False

    def push(self, chunk: bytes) -> None:
        self._queue.put_nowait(chunk)

    async def chunks(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._queue.get()
            if chunk is None:
                return
            yield chunk

    def close(self):
        if not self.closed:
            self.closed = True
            self._queue.put_nowait(None)


class ScriptedRecognizer(SpeechRecognizer):
    """Yields one interim transcript per chunk and a final one at the end."""

    async def recognize(self, chunks, settings: RecognitionSettings):
        words: list[str] = []
        async for chunk in chunks:
            words.append(chunk.decode())
            yield PartialTranscript(text=" ".join(words))
        yield PartialTranscript(text=" ".join(words), is_final=True)


@pytest.fixture
def dialogue_service():
    return FakeDialogueService()


@pytest.fixture
def tone_service():
    return FakeToneService()


@pytest.fixture
def session(dialogue_service):
    return DialogueSession(dialogue_service)


@pytest.fixture
def scorer(tone_service):
    return ToneScorer(tone_service)


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def sources():
    """Every QueueSource the bridge created, in order."""
    return []


@pytest.fixture
def speech_bridge(player, sources):
    def _source_factory():
        source = QueueSource()
        sources.append(source)
        return source

    return SpeechBridge(
        synthesizer=FakeSynthesizer(),
        player=player,
        recognizer=ScriptedRecognizer(),
        source_factory=_source_factory,
    )


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "assistant": os.getenv("ASSISTANT_APIKEY"),
        "tone": os.getenv("TONE_APIKEY"),
    }
