from .coloring import (
    AGENT_TEXT,
    ALERT_TEXT,
    NEUTRAL_TEXT,
    RGBColor,
    color_fraction,
    interpolate,
)
from .turn import (
    DEFAULT_BRANCH_TIMEOUT,
    BranchOutcome,
    BranchStatus,
    RenderEvent,
    RenderKind,
    Turn,
    TurnHandle,
    TurnOrchestrator,
    TurnState,
)

__all__ = [
    "AGENT_TEXT",
    "ALERT_TEXT",
    "DEFAULT_BRANCH_TIMEOUT",
    "NEUTRAL_TEXT",
    "BranchOutcome",
    "BranchStatus",
    "RGBColor",
    "RenderEvent",
    "RenderKind",
    "Turn",
    "TurnHandle",
    "TurnOrchestrator",
    "TurnState",
    "color_fraction",
    "interpolate",
]
