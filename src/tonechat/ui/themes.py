"""Theme definitions for the TUI.

This module hides the design decisions about:
- Color palettes and visual appearance
- Theme variables (borders, scrollbars, etc.)

To add a new theme, define it here and register in the app.
"""

from textual.theme import Theme

# Slate-blue chat palette; agent bubbles use the primary tone
TONECHAT_DUSK = Theme(
    name="tonechat-dusk",
    primary="#4a708a",      # Agent bubble blue-grey
    secondary="#8fa8b8",    # Muted accent
    accent="#f2c14e",       # Highlights
    foreground="#e8eef2",   # Light text
    background="#10161b",   # Deepest background
    success="#7bc47f",
    warning="#f29e4c",
    error="#e5534b",        # Also the tone alert color family
    surface="#1a232a",      # Main surface
    panel="#151d23",        # Panel backgrounds
    dark=True,
    variables={
        "border": "#34434e",
        "border-blurred": "#26323a",
        "scrollbar": "#26323a",
        "scrollbar-hover": "#34434e",
        "scrollbar-active": "#4a708a",
        "scrollbar-background": "#151d23",
        "footer-key-foreground": "#f2c14e",
        "text-muted": "#7d8b95",
        "input-selection-background": "#4a708a 30%",
    },
)
