"""Terminal UI module for tonechat.

Provides a Textual-based chat screen around the TurnOrchestrator.

Module structure (each module hides a design decision):
- widgets.py: Custom widgets (bubbles, tone panel, input bar, log panel)
- styles.py: CSS styling (layout decisions)
- themes.py: Color palette
- config.py: Log levels, bubble colors and other constants
- app.py: Application orchestration (user interaction flow)
"""

from .app import ToneChatApp, run_chat_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MessageBubble, TonePanel

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "LogLevel",
    "MessageBubble",
    "ToneChatApp",
    "TonePanel",
    "run_chat_tui",
]
