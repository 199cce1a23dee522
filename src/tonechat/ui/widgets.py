"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message bubble rendering and recoloring
- Tone panel (anger sparkline and latest category scores)
- Input bar with microphone toggle
- Log rendering and level filtering
"""

from collections.abc import Callable, Sequence
from datetime import datetime

from rich.markup import escape
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, RichLog, Sparkline, Static, TextArea

from ..conversation import Message, ToneCategory, ToneScoreRecord
from ..orchestrator import RGBColor
from .config import (
    AGENT_DISPLAY_NAME,
    SPARKLINE_MAX_POINTS,
    TONE_SCORE_DECIMALS,
    USER_DISPLAY_NAME,
    LogLevel,
)


class MessageBubble(Vertical):
    """A chat message bubble. Clicking it copies the text."""

    def __init__(self, message: Message, *args, **kwargs) -> None:
        kind = "user-message" if message.is_user else "agent-message"
        super().__init__(*args, classes=f"chat-message {kind}", **kwargs)
        self.message = message
        self._content = Static(message.text, classes="message-content", markup=False)

    def compose(self):
        name = USER_DISPLAY_NAME if self.message.is_user else AGENT_DISPLAY_NAME
        timestamp = self.message.timestamp.strftime("%H:%M:%S")
        yield Static(f"{name} [{timestamp}]", classes="message-header", markup=False)
        yield self._content

    def set_text_color(self, color: RGBColor) -> None:
        self._content.styles.color = color.to_hex()

    def on_click(self, event: Click) -> None:
        event.stop()
        self.app.copy_to_clipboard(self.message.text)
        self.app.notify("Copied", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history keyed by message id."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation history"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._bubbles: dict[str, MessageBubble] = {}

    def add_message(self, message: Message) -> MessageBubble:
        """Mount a bubble for a message (once per message id)."""
        if message.id in self._bubbles:
            return self._bubbles[message.id]
        bubble = MessageBubble(message)
        self._bubbles[message.id] = bubble
        self.mount(bubble)
        self.border_subtitle = f"{len(self._bubbles)} messages"
        self.scroll_end(animate=False)
        return bubble

    def recolor(self, color_for: Callable[[str], RGBColor]) -> None:
        """Recompute every bubble's text color."""
        for message_id, bubble in self._bubbles.items():
            bubble.set_text_color(color_for(message_id))

    def get_last_response(self) -> str | None:
        """Get the last agent reply."""
        for bubble in reversed(list(self._bubbles.values())):
            if not bubble.message.is_user:
                return bubble.message.text
        return None

    def clear_history(self) -> None:
        self._bubbles.clear()
        self.remove_children()
        self.border_subtitle = "Conversation history"


class TonePanel(Vertical):
    """Anger trend and latest tone scores.

    Hidden until the first tone result arrives.
    """

    BORDER_TITLE = "Tone"

    def compose(self):
        yield Sparkline([], summary_function=max, id="anger-sparkline")
        yield Static("", id="tone-scores")

    def on_mount(self) -> None:
        self.display = False

    def update_tone(self, records: Sequence[ToneScoreRecord]) -> None:
        """Show the anger series and the newest record's scores."""
        if not records:
            self.reset()
            return

        series = [record.anger for record in records][-SPARKLINE_MAX_POINTS:]
        self.query_one("#anger-sparkline", Sparkline).data = series

        latest = records[-1]
        lines = [f"[bold]Anger[/] {latest.anger:.{TONE_SCORE_DECIMALS}f}  (turn {latest.turn_id})"]
        for category in ToneCategory:
            scores = latest.category(category)
            if not scores:
                continue
            lines.append(f"[bold]{category.value.capitalize()}[/]")
            for tone in scores:
                lines.append(f"  {tone.label:<18} {tone.score:.{TONE_SCORE_DECIMALS}f}")
        self.query_one("#tone-scores", Static).update("\n".join(lines))

        self.border_subtitle = f"{len(records)} scored"
        self.display = True

    def reset(self) -> None:
        self.query_one("#anger-sparkline", Sparkline).data = []
        self.query_one("#tone-scores", Static).update("")
        self.display = False


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea, microphone toggle and Send button."""

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    class MicToggled(TextualMessage):
        """Message sent when the microphone button is pressed."""

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Mic", id="mic-btn").with_tooltip("Dictate (Ctrl+T)")
        yield Button("Send", id="send-btn", variant="success").with_tooltip(
            "Submit message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.focus()
        text_area.highlight_cursor_line = False

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()
        elif event.button.id == "mic-btn":
            self.post_message(self.MicToggled())

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals. Use ctrl+j to submit.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()

    def _submit(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if value:
            text_area.text = ""
            self.post_message(self.Submitted(value))

    def set_text(self, value: str) -> None:
        """Replace the input text (used for live transcripts)."""
        text_area = self.query_one("#chat-input", TextArea)
        text_area.text = value
        text_area.move_cursor(text_area.document.end)

    def set_listening(self, listening: bool) -> None:
        button = self.query_one("#mic-btn", Button)
        button.label = "Stop" if listening else "Mic"
        button.set_class(listening, "-listening")

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    COMPONENT_COLORS = {
        "TUI": "cyan",
        "Turn": "green",
        "Dialogue": "magenta",
        "Tone": "red",
        "Speech": "blue",
    }

    LEVEL_COLORS = {
        LogLevel.DEBUG: "dim white",
        LogLevel.INFO: "cyan",
        LogLevel.WARNING: "yellow",
        LogLevel.ERROR: "red",
    }

    def __init__(self, *args, log_level: LogLevel = LogLevel.DEBUG, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> LogLevel:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: LogLevel) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {self._log_level.name}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def add_entry(self, component: str, message: str, level: LogLevel = LogLevel.DEBUG) -> None:
        """Add a log entry if it meets the current level threshold."""
        if level < self._log_level:
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        level_color = self.LEVEL_COLORS.get(level, "white")
        comp_color = self.COMPONENT_COLORS.get(component, "white")
        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel(level).name:<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def debug(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.add_entry(component, message, LogLevel.ERROR)

    def route(self, level: str, component: str, message: str) -> None:
        """Debug callback entry point: Callable(level, component, message)."""
        self.add_entry(component, message, LogLevel.parse(level))

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
