"""Main Textual TUI application.

Wires the chat widgets to the TurnOrchestrator: submissions start turns,
render events redraw bubbles and the tone panel, and errors become
notifications.
"""

import asyncio

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..errors import ToneChatError
from ..orchestrator import RenderEvent, RenderKind, TurnOrchestrator
from .config import ERROR_NOTIFY_TIMEOUT, INFO_NOTIFY_TIMEOUT, LogLevel
from .styles import APP_CSS
from .themes import TONECHAT_DUSK
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, TonePanel


class ToneChatApp(App):
    """Textual chat screen with spoken replies and tone-tinted bubbles."""

    CSS = APP_CSS
    TITLE = "tonechat"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+t", "toggle_mic", "Mic", priority=True),
        Binding("escape", "stop_speaking", "Silence"),
        Binding("ctrl+k", "clear_chat", "Clear Chat", priority=True),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Debug", priority=True),
    ]

    def __init__(
        self,
        orchestrator: TurnOrchestrator,
        log_level: str | None = None,
        greet: bool = True,
    ) -> None:
        super().__init__()
        self._orchestrator = orchestrator
        self._log_level = log_level
        self._greet = greet

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)

        yield ChatHistoryWidget(id="chat-history")

        with Vertical(id="side-panel"):
            yield TonePanel(id="tone-panel")
            yield DebugPanel(id="debug-panel")

        with Vertical(id="bottom-bar"):
            yield ChatInputBar(id="chat-input-bar")

        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(TONECHAT_DUSK)
        self.theme = "tonechat-dusk"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.parse(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        self._orchestrator.set_render_callback(self._on_render)
        self._orchestrator.set_error_callback(self._on_error)
        self._orchestrator.set_debug_callback(log_panel.route)

        speech = self._orchestrator.speech
        mic_state = "on" if speech is not None and speech.can_listen else "off"
        self.sub_title = f"voice {'on' if speech is not None else 'off'} | mic {mic_state}"

        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        if self._greet:
            self._start_session()

    @work(exclusive=True, group="session")
    async def _start_session(self) -> None:
        await self._orchestrator.start_session()

    def _on_render(self, event: RenderEvent) -> None:
        """Redraw whatever a render event touched."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        tone_panel = self.query_one("#tone-panel", TonePanel)

        if event.kind == RenderKind.SESSION_RESET:
            chat.clear_history()
            tone_panel.reset()
            return

        if event.kind == RenderKind.MESSAGE_ADDED and event.message_id is not None:
            message = self._orchestrator.store.get(event.message_id)
            if message is not None:
                chat.add_message(message)

        if event.kind == RenderKind.TONE_SCORED:
            tone_panel.update_tone(self._orchestrator.records)

        chat.recolor(self._orchestrator.color_for)

    def _on_error(self, branch: str, error: ToneChatError) -> None:
        self.notify(
            str(error),
            title=f"{branch.capitalize()} error",
            severity="error",
            timeout=ERROR_NOTIFY_TIMEOUT,
        )

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        speech = self._orchestrator.speech
        if speech is not None and speech.is_listening:
            speech.stop_listening()
        try:
            self._orchestrator.handle_turn(event.value)
        except ValueError as e:
            self.notify(str(e), severity="warning", timeout=INFO_NOTIFY_TIMEOUT)

    def on_chat_input_bar_mic_toggled(self, event: ChatInputBar.MicToggled) -> None:
        self.action_toggle_mic()

    def action_toggle_mic(self) -> None:
        """Start dictation, or stop it and leave the transcript for editing."""
        speech = self._orchestrator.speech
        if speech is None or not speech.can_listen:
            self.notify("Speech recognition is not configured", severity="warning")
            return
        if speech.is_listening:
            speech.stop_listening()
        else:
            self._listen()

    @work(exclusive=True, group="mic")
    async def _listen(self) -> None:
        speech = self._orchestrator.speech
        input_bar = self.query_one("#chat-input-bar", ChatInputBar)
        session = speech.start_listening()
        input_bar.set_listening(True)
        try:
            await speech.listen_into(input_bar.set_text, session)
        except ToneChatError as e:
            self._on_error("speech", e)
        finally:
            if not session.cancelled:
                input_bar.set_listening(False)
            input_bar.focus_input()

    def action_stop_speaking(self) -> None:
        speech = self._orchestrator.speech
        if speech is not None:
            speech.stop_speaking()

    def action_clear_chat(self) -> None:
        """Clear the chat and start a fresh dialogue session."""
        self._orchestrator.reset()
        self.notify("Chat cleared", timeout=INFO_NOTIFY_TIMEOUT)
        if self._greet:
            self._start_session()

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=INFO_NOTIFY_TIMEOUT)

    def action_copy_last_response(self) -> None:
        """Copy last agent reply to clipboard."""
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        response = chat.get_last_response()
        if response:
            self.copy_to_clipboard(response)
            self.notify("Response copied")
        else:
            self.notify("No response to copy", severity="warning")


async def run_chat_tui(
    orchestrator: TurnOrchestrator,
    log_level: str | None = None,
    greet: bool = True,
) -> None:
    """Run the Textual chat screen.

    Args:
        orchestrator: Fully wired turn orchestrator
        log_level: Log level for panel (debug/info/warning/error), None to hide
        greet: Open the dialogue session with a greeting on startup
    """
    app = ToneChatApp(orchestrator=orchestrator, log_level=log_level, greet=greet)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await orchestrator.aclose()
