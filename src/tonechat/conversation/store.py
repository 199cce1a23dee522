"""In-memory stores for the chat session.

MessageStore hides the ordering of the message log; ToneLedger hides how
tone records are correlated with turns. Both are append-only and live for
the session only.
"""

from bisect import insort
from collections.abc import Iterator

from .models import BubbleState, BubbleStatus, Message, SenderKind, ToneScoreRecord


class MessageStore:
    """Ordered, append-only log of chat messages."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._by_id: dict[str, Message] = {}

    def append(self, message: Message) -> Message:
        """Append a message at the end of the log."""
        if message.id in self._by_id:
            raise ValueError(f"Message {message.id} already stored")
        self._messages.append(message)
        self._by_id[message.id] = message
        return message

    def add_user_message(self, text: str, turn_id: int) -> Message:
        return self.append(Message(sender=SenderKind.USER, text=text, turn_id=turn_id))

    def add_agent_message(self, text: str, turn_id: int | None = None) -> Message:
        return self.append(Message(sender=SenderKind.AGENT, text=text, turn_id=turn_id))

    def get(self, message_id: str) -> Message | None:
        return self._by_id.get(message_id)

    def user_message_for(self, turn_id: int) -> Message | None:
        """Get the user message that opened a turn."""
        for message in reversed(self._messages):
            if message.is_user and message.turn_id == turn_id:
                return message
        return None

    def last_user_message(self) -> Message | None:
        for message in reversed(self._messages):
            if message.is_user:
                return message
        return None

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the log in send order."""
        return tuple(self._messages)

    def clear(self) -> None:
        self._messages.clear()
        self._by_id.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))


class ToneLedger:
    """Tone records and bubble states keyed by turn id.

    Records are kept in turn order even when tone calls complete out of
    order; a turn can be scored at most once.
    """

    def __init__(self) -> None:
        self._records: dict[int, ToneScoreRecord] = {}
        self._order: list[int] = []
        self._states: dict[int, BubbleState] = {}

    def open_turn(self, turn_id: int) -> None:
        """Mark a turn as waiting for its tone result."""
        self._states.setdefault(turn_id, BubbleState())

    def record(self, record: ToneScoreRecord) -> None:
        if record.turn_id in self._records:
            raise ValueError(f"Turn {record.turn_id} already has a tone record")
        self._records[record.turn_id] = record
        insort(self._order, record.turn_id)
        self._states[record.turn_id] = BubbleState(status=BubbleStatus.SCORED, record=record)

    def mark_failed(self, turn_id: int) -> None:
        if turn_id not in self._records:
            self._states[turn_id] = BubbleState(status=BubbleStatus.FAILED)

    def state(self, turn_id: int) -> BubbleState | None:
        return self._states.get(turn_id)

    def get(self, turn_id: int) -> ToneScoreRecord | None:
        return self._records.get(turn_id)

    @property
    def records(self) -> tuple[ToneScoreRecord, ...]:
        return tuple(self._records[turn_id] for turn_id in self._order)

    @property
    def anger_series(self) -> tuple[float, ...]:
        """Anger score of every record, in turn order. Derived on each access."""
        return tuple(self._records[turn_id].anger for turn_id in self._order)

    def clear(self) -> None:
        self._records.clear()
        self._order.clear()
        self._states.clear()

    def __len__(self) -> int:
        return len(self._records)
