"""Conversation turn orchestration.

Hidden design decisions:
- Turn lifecycle (composing -> sent -> awaiting -> completed)
- The dialogue and tone branches run as independent asyncio tasks
- Per-branch timeouts and the error boundary around each branch
- Which message bubble gets recolored by the anger score
"""

import asyncio
from collections.abc import Awaitable, Callable, Generator
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Any, TypeVar

from ..conversation import (
    BubbleState,
    Message,
    MessageStore,
    ToneLedger,
    ToneScoreRecord,
)
from ..conversation.models import BubbleStatus
from ..dialogue import DialogueSession
from ..errors import ToneChatError, TransportError
from ..speech import SpeechBridge
from ..tone import ToneScorer
from .coloring import AGENT_TEXT, ALERT_TEXT, NEUTRAL_TEXT, RGBColor, color_fraction, interpolate

T = TypeVar("T")

DEFAULT_BRANCH_TIMEOUT = 15.0


class TurnState(str, Enum):
    COMPOSING = "composing"
    SENT = "sent"
    AWAITING = "awaiting"
    COMPLETED = "completed"


class BranchStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RenderKind(str, Enum):
    """What changed, so the UI knows what to redraw."""

    MESSAGE_ADDED = "message_added"
    TONE_SCORED = "tone_scored"
    TURN_COMPLETED = "turn_completed"
    SESSION_RESET = "session_reset"


@dataclass
class BranchOutcome:
    """Result of one branch of a turn."""

    status: BranchStatus = BranchStatus.PENDING
    error: str | None = None

    @property
    def done(self) -> bool:
        return self.status != BranchStatus.PENDING


@dataclass
class Turn:
    """One user utterance with its dialogue reply and tone analysis."""

    turn_id: int
    text: str
    epoch: int = 0
    state: TurnState = TurnState.COMPOSING
    user_message_id: str | None = None
    reply_message_id: str | None = None
    tone_record: ToneScoreRecord | None = None
    dialogue: BranchOutcome = field(default_factory=BranchOutcome)
    tone: BranchOutcome = field(default_factory=BranchOutcome)


@dataclass(frozen=True)
class RenderEvent:
    kind: RenderKind
    turn_id: int | None = None
    message_id: str | None = None


class TurnHandle:
    """Awaitable handle on a running turn.

    Awaiting it waits for both branches and returns the Turn.
    """

    def __init__(self, turn: Turn, dialogue_task: asyncio.Task, tone_task: asyncio.Task) -> None:
        self.turn = turn
        self.dialogue_task = dialogue_task
        self.tone_task = tone_task

    @property
    def turn_id(self) -> int:
        return self.turn.turn_id

    def done(self) -> bool:
        return self.dialogue_task.done() and self.tone_task.done()

    async def _wait(self) -> Turn:
        await asyncio.gather(self.dialogue_task, self.tone_task)
        return self.turn

    def __await__(self) -> Generator[Any, None, Turn]:
        return self._wait().__await__()


class TurnOrchestrator:
    """Coordinates dialogue, tone scoring and speech for each user turn.

    The user message is stored before either branch starts. The dialogue and
    tone branches then run concurrently and fail independently; turns may
    overlap if the user sends again before the previous one resolves.
    All state changes happen on the event loop thread.

    Example:
        orchestrator = TurnOrchestrator(session, scorer, speech)
        orchestrator.set_render_callback(lambda event: refresh())
        await orchestrator.start_session()
        turn = await orchestrator.handle_turn("I am furious")
    """

    def __init__(
        self,
        dialogue: DialogueSession,
        tone: ToneScorer,
        speech: SpeechBridge | None = None,
        store: MessageStore | None = None,
        ledger: ToneLedger | None = None,
        branch_timeout: float | None = DEFAULT_BRANCH_TIMEOUT,
        neutral_color: RGBColor = NEUTRAL_TEXT,
        alert_color: RGBColor = ALERT_TEXT,
        agent_color: RGBColor = AGENT_TEXT,
    ) -> None:
        self._dialogue = dialogue
        self._tone = tone
        self._speech = speech
        self._store = store or MessageStore()
        self._ledger = ledger or ToneLedger()
        self._branch_timeout = branch_timeout
        self._neutral_color = neutral_color
        self._alert_color = alert_color
        self._agent_color = agent_color

        self._turn_ids = count(1)
        self._turns: dict[int, Turn] = {}
        self._tasks: set[asyncio.Task] = set()
        self._epoch = 0

        self._render_callback: Callable[[RenderEvent], None] | None = None
        self._error_callback: Callable[[str, ToneChatError], None] | None = None
        self._debug_callback: Any | None = None

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def set_render_callback(self, callback: Callable[[RenderEvent], None]) -> None:
        """Set the callback that tells the UI to redraw."""
        self._render_callback = callback

    def set_error_callback(self, callback: Callable[[str, ToneChatError], None]) -> None:
        """Set the callback for passive error notifications.

        Args:
            callback: Callable(branch: str, error: ToneChatError)
        """
        self._error_callback = callback

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for detailed execution logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback
        self._dialogue.set_debug_callback(callback)
        self._tone.set_debug_callback(callback)
        if self._speech is not None:
            self._speech.set_debug_callback(callback)

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Turn", message)

    def _notify(self, kind: RenderKind, turn_id: int | None = None, message_id: str | None = None) -> None:
        if self._render_callback:
            self._render_callback(RenderEvent(kind=kind, turn_id=turn_id, message_id=message_id))

    def _report(self, branch: str, error: ToneChatError) -> None:
        self._debug("error", f"{branch} failed: {error}")
        if self._error_callback:
            self._error_callback(branch, error)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._store.messages

    @property
    def store(self) -> MessageStore:
        return self._store

    @property
    def records(self) -> tuple[ToneScoreRecord, ...]:
        return self._ledger.records

    @property
    def anger_series(self) -> tuple[float, ...]:
        return self._ledger.anger_series

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns[turn_id] for turn_id in sorted(self._turns))

    @property
    def speech(self) -> SpeechBridge | None:
        return self._speech

    def turn(self, turn_id: int) -> Turn | None:
        return self._turns.get(turn_id)

    def bubble_state(self, turn_id: int) -> BubbleState | None:
        return self._ledger.state(turn_id)

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Session and turns
    # ------------------------------------------------------------------

    async def start_session(self) -> Message | None:
        """Open a fresh dialogue session and post the agent's greeting.

        Returns:
            The greeting message, or None if the dialogue service failed
        """
        epoch = self._epoch
        try:
            reply = await self._with_timeout(self._dialogue.start(), "dialogue")
        except ToneChatError as e:
            self._report("dialogue", e)
            return None

        if epoch != self._epoch or not reply.reply_text:
            return None

        message = self._store.add_agent_message(reply.reply_text)
        self._notify(RenderKind.MESSAGE_ADDED, message_id=message.id)
        self._speak(reply.reply_text)
        return message

    def handle_turn(self, text: str) -> TurnHandle:
        """Start a turn for a submitted utterance.

        The user message is appended immediately; the dialogue and tone
        branches are spawned as tasks. Must be called from a running loop.

        Raises:
            ValueError: If text is blank
        """
        text = text.strip()
        if not text:
            raise ValueError("Cannot send an empty message")

        turn = Turn(turn_id=next(self._turn_ids), text=text, epoch=self._epoch)
        self._turns[turn.turn_id] = turn

        message = self._store.add_user_message(text, turn.turn_id)
        turn.user_message_id = message.id
        turn.state = TurnState.SENT
        self._ledger.open_turn(turn.turn_id)
        self._notify(RenderKind.MESSAGE_ADDED, turn.turn_id, message.id)
        self._debug("info", f"Turn {turn.turn_id} sent ({len(text)} chars)")

        dialogue_task = self._spawn(self._dialogue_branch(turn))
        tone_task = self._spawn(self._tone_branch(turn))
        turn.state = TurnState.AWAITING
        return TurnHandle(turn, dialogue_task, tone_task)

    async def _dialogue_branch(self, turn: Turn) -> None:
        try:
            reply = await self._with_timeout(self._dialogue.send(turn.text), "dialogue")
        except ToneChatError as e:
            turn.dialogue = BranchOutcome(BranchStatus.FAILED, str(e))
            self._report("dialogue", e)
        else:
            turn.dialogue = BranchOutcome(BranchStatus.SUCCEEDED)
            if turn.epoch == self._epoch:
                message = self._store.add_agent_message(reply.reply_text, turn.turn_id)
                turn.reply_message_id = message.id
                self._notify(RenderKind.MESSAGE_ADDED, turn.turn_id, message.id)
                self._speak(reply.reply_text)
        finally:
            self._maybe_complete(turn)

    async def _tone_branch(self, turn: Turn) -> None:
        try:
            record = await self._with_timeout(self._tone.score(turn.text, turn.turn_id), "tone")
        except ToneChatError as e:
            turn.tone = BranchOutcome(BranchStatus.FAILED, str(e))
            if turn.epoch == self._epoch:
                self._ledger.mark_failed(turn.turn_id)
            self._report("tone", e)
        else:
            turn.tone = BranchOutcome(BranchStatus.SUCCEEDED)
            turn.tone_record = record
            if turn.epoch == self._epoch:
                self._ledger.record(record)
                self._notify(RenderKind.TONE_SCORED, turn.turn_id, turn.user_message_id)
        finally:
            self._maybe_complete(turn)

    def _maybe_complete(self, turn: Turn) -> None:
        if turn.state == TurnState.COMPLETED:
            return
        if turn.dialogue.done and turn.tone.done:
            turn.state = TurnState.COMPLETED
            self._debug(
                "info",
                f"Turn {turn.turn_id} completed "
                f"(dialogue {turn.dialogue.status.value}, tone {turn.tone.status.value})"
            )
            if turn.epoch == self._epoch:
                self._notify(RenderKind.TURN_COMPLETED, turn.turn_id, turn.user_message_id)

    def _speak(self, text: str) -> None:
        """Start playback of a reply without waiting for it."""
        if self._speech is not None and text.strip():
            self._spawn(self._speak_reply(text))

    async def _speak_reply(self, text: str) -> None:
        try:
            await self._with_timeout(self._speech.speak(text), "speech")
        except ToneChatError as e:
            # Playback problems are logged only, never surfaced to the user
            self._debug("warning", f"Speech failed: {e}")

    async def _with_timeout(self, awaitable: Awaitable[T], source: str) -> T:
        if self._branch_timeout is None:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout=self._branch_timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"No response after {self._branch_timeout:g}s", source=source
            ) from e

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every in-flight branch and playback task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def reset(self) -> None:
        """Clear the chat and start a new dialogue context.

        Results of turns still in flight are discarded when they arrive.
        """
        self._epoch += 1
        self._store.clear()
        self._ledger.clear()
        self._dialogue.reset()
        if self._speech is not None:
            self._speech.stop_speaking()
        self._debug("info", "Session reset")
        self._notify(RenderKind.SESSION_RESET)

    async def aclose(self) -> None:
        """Cancel in-flight work and close every service."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._dialogue.close()
        await self._tone.close()
        if self._speech is not None:
            await self._speech.close()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def highlighted_message_id(self) -> str | None:
        """Id of the user message currently colored by its anger score.

        Only the most recent user message is eligible, and only once its
        tone record has arrived.
        """
        latest = self._store.last_user_message()
        if latest is None or latest.turn_id is None:
            return None
        state = self._ledger.state(latest.turn_id)
        if state is None or state.status != BubbleStatus.SCORED:
            return None
        return latest.id

    def color_for(self, message_id: str) -> RGBColor:
        """Text color for a message bubble.

        Raises:
            KeyError: If the message is not in the store
        """
        message = self._store.get(message_id)
        if message is None:
            raise KeyError(message_id)
        if not message.is_user:
            return self._agent_color
        if message_id != self.highlighted_message_id():
            return self._neutral_color

        state = self._ledger.state(message.turn_id)
        return interpolate(
            self._neutral_color,
            self._alert_color,
            color_fraction(state.record.anger),
        )
