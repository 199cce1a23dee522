"""Bubble text coloring driven by the anger score.

Colors are plain RGB triples in [0, 1] so the core does not depend on the
UI toolkit; the UI converts them with to_hex().
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RGBColor:
    """An RGB color with float channels in [0, 1]."""

    red: float
    green: float
    blue: float

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} channel out of range: {value}")

    @classmethod
    def from_hex(cls, value: str) -> "RGBColor":
        """Parse '#rrggbb'."""
        value = value.lstrip("#")
        if len(value) != 6:
            raise ValueError(f"Expected #rrggbb, got {value!r}")
        return cls(*(int(value[i:i + 2], 16) / 255 for i in (0, 2, 4)))

    def to_hex(self) -> str:
        return "#" + "".join(
            f"{round(channel * 255):02x}" for channel in (self.red, self.green, self.blue)
        )


NEUTRAL_TEXT = RGBColor(1.0, 1.0, 1.0)
ALERT_TEXT = RGBColor(1.0, 0.0, 0.0)
AGENT_TEXT = RGBColor(1.0, 1.0, 1.0)


def color_fraction(anger: float) -> float:
    """Interpolation fraction for an anger score, clamped to [0, 1]."""
    return min(max(anger, 0.0), 1.0)


def interpolate(start: RGBColor, end: RGBColor, fraction: float) -> RGBColor:
    """Linear interpolation per channel.

    Written as (1 - f) * start + f * end so both endpoints are exact.
    """
    f = color_fraction(fraction)

    def _mix(a: float, b: float) -> float:
        return min(max((1.0 - f) * a + f * b, 0.0), 1.0)

    return RGBColor(
        _mix(start.red, end.red),
        _mix(start.green, end.green),
        _mix(start.blue, end.blue),
    )
