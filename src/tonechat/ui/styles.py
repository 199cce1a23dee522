"""CSS styles for the TUI.

Hides layout and styling decisions from the application logic.
Uses Textual CSS features: nesting, pseudo-classes, variables.
"""

APP_CSS = """
/* ============================================
   Main Screen Layout - chat left, tone/log right
   ============================================ */
Screen {
    layout: grid;
    grid-size: 2 2;
    grid-columns: 3fr 1fr;
    grid-rows: 1fr auto;
    background: $background;
}

/* ============================================
   Chat History Panel
   ============================================ */
#chat-history {
    height: 100%;
    background: $panel;
    border: round $primary 60%;
    border-title-color: $primary;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    scrollbar-gutter: stable;

    &:focus-within {
        border: round $primary;
    }
}

/* Message bubbles */
.chat-message {
    height: auto;
    width: 80%;
    margin: 1 0 0 0;
    padding: 0 1;
}

.user-message {
    background: $surface-lighten-2;
    border-left: tall $secondary;
    margin-left: 20%;
}

.agent-message {
    background: $primary 70%;
    border-left: tall $primary-lighten-2;
}

.message-header {
    color: $text-muted;
    text-style: italic;
}

.message-content {
    height: auto;
}

/* ============================================
   Right Panel - tone info + log
   ============================================ */
#side-panel {
    height: 100%;
    padding: 0;
}

#tone-panel {
    height: auto;
    background: $panel;
    border: round $error 60%;
    border-title-color: $error;
    border-title-style: bold;
    padding: 0 1;
}

#anger-sparkline {
    height: 3;
    margin-bottom: 1;

    & > .sparkline--max-color {
        color: $error;
    }

    & > .sparkline--min-color {
        color: $success;
    }
}

#tone-scores {
    height: auto;
}

#debug-panel {
    height: 1fr;
    min-height: 6;
    background: $panel;
    border: round $warning 60%;
    border-title-color: $warning;
    border-title-style: bold;
    border-subtitle-color: $text-muted;
    border-subtitle-align: right;
    padding: 0 1;
    margin-top: 1;
}

/* ============================================
   Bottom Bar - Input
   ============================================ */
#bottom-bar {
    column-span: 2;
    height: auto;
    padding: 0 1;
    background: $panel;
    border-top: solid $border;
}

ChatInputBar {
    height: 5;
    border: round $primary 60%;
    background: $panel;

    &:focus-within {
        border: round $primary;
    }
}

#chat-input {
    width: 1fr;
    height: 100%;
    border: none;
    padding: 0 1;
    background: transparent;
}

#mic-btn, #send-btn {
    width: auto;
    min-width: 8;
    height: 3;
    margin: 0 0 0 1;
}

#mic-btn.-listening {
    background: $error;
    color: $foreground;
    text-style: bold;
}
"""
