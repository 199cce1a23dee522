"""UI configuration constants.

Colors, display names and panel limits used by the chat screen.
"""

from enum import IntEnum


class LogLevel(IntEnum):
    """Log panel threshold. Lower value shows more messages."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    @classmethod
    def parse(cls, value: str) -> "LogLevel":
        """Map a level string (as sent to debug callbacks) to a LogLevel.

        Unknown strings map to DEBUG so nothing is hidden.
        """
        return cls.__members__.get(value.strip().upper(), cls.DEBUG)


# Bubble text colors (hex, converted to RGBColor by the app)
USER_NEUTRAL_COLOR = "#ffffff"
USER_ALERT_COLOR = "#ff0000"
AGENT_TEXT_COLOR = "#ffffff"

# Display names
USER_DISPLAY_NAME = "You"
AGENT_DISPLAY_NAME = "Agent"

# Tone panel configuration
TONE_SCORE_DECIMALS = 2
SPARKLINE_MAX_POINTS = 40  # Most recent anger scores shown

# Notifications
ERROR_NOTIFY_TIMEOUT = 5
INFO_NOTIFY_TIMEOUT = 2
