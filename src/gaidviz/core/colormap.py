"""Piecewise-linear color scales.

A color scale is a sequence of ColorPoint control points (value, "#rrggbb").
color_at() interpolates each RGB channel linearly between the two control
points that bracket the query value; values outside the scale clamp to the
end colors. sample_gradient() evaluates a scale at evenly spaced values for
legend strips and previews.

All functions are pure. Scales are re-sorted on every call; user edits to
point values can reorder them.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence

from gaidviz.core import catalog
from gaidviz.core.errors import InvalidArgument

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")

GRADIENT_STEPS = 20


def parse_hex(color: str) -> tuple[int, int, int]:
    """Parse "#rrggbb" (leading '#' optional) into integer channels.

    Raises:
        InvalidArgument: If color is not exactly six hex digits.
    """
    if not isinstance(color, str):
        raise InvalidArgument(f"Color must be a hex string, got {type(color).__name__}")
    m = _HEX_RE.match(color.strip())
    if m is None:
        raise InvalidArgument(f"Malformed hex color {color!r}")
    digits = m.group(1)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def to_hex(r: float, g: float, b: float) -> str:
    """Encode channels as lower-case "#rrggbb"; each channel rounded (half up) and clamped to 0..255."""
    channels = []
    for c in (r, g, b):
        if not math.isfinite(c):
            raise InvalidArgument(f"Color channel must be finite, got {c!r}")
        channels.append(min(255, max(0, _round_half_up(c))))
    return "#" + "".join(f"{c:02x}" for c in channels)


@dataclass(frozen=True)
class ColorPoint:
    """Immutable control point of a color scale.

    The color is normalized to lower-case "#rrggbb" on construction.

    Raises:
        InvalidArgument: If value is not finite or color is not six hex digits.
    """

    value: float
    color: str

    def __post_init__(self) -> None:
        try:
            value = float(self.value)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"Color point value must be a number, got {self.value!r}") from e
        if not math.isfinite(value):
            raise InvalidArgument(f"Color point value must be finite, got {self.value!r}")
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "color", to_hex(*parse_hex(self.color)))

    def to_dict(self) -> dict[str, object]:
        return {"value": self.value, "color": self.color}

    @classmethod
    def from_dict(cls, data: dict) -> "ColorPoint":
        return cls(value=data.get("value"), color=data.get("color"))


ColorScale = Sequence[ColorPoint]

DEFAULT_SCORE_SCALE: tuple[ColorPoint, ...] = (
    ColorPoint(1, "#2c7bb6"),  # blue
    ColorPoint(3, "#abd9e9"),  # light blue
    ColorPoint(4, "#fdae61"),  # orange
    ColorPoint(5, "#d7191c"),  # red
)

DEFAULT_PROPORTION_SCALE: tuple[ColorPoint, ...] = (
    ColorPoint(0, "#edf8fb"),
    ColorPoint(25, "#b2e2e2"),
    ColorPoint(50, "#66c2a4"),
    ColorPoint(75, "#2ca25f"),
    ColorPoint(100, "#006d2c"),
)


def default_scale(proportion: bool) -> tuple[ColorPoint, ...]:
    return DEFAULT_PROPORTION_SCALE if proportion else DEFAULT_SCORE_SCALE


def default_scale_for(measure: str) -> tuple[ColorPoint, ...]:
    """Default scale matching the family of measure."""
    return default_scale(catalog.is_proportion(catalog.validate_measure(measure)))


def interpolate_color(color1: str, color2: str, factor: float) -> str:
    """Blend color1 toward color2; factor 0 gives color1, 1 gives color2."""
    r1, g1, b1 = parse_hex(color1)
    r2, g2, b2 = parse_hex(color2)
    return to_hex(
        r1 + factor * (r2 - r1),
        g1 + factor * (g2 - g1),
        b1 + factor * (b2 - b1),
    )


def sorted_points(scale: ColorScale) -> list[ColorPoint]:
    """Validate scale and return its points sorted by value (stable).

    Raises:
        InvalidArgument: If the scale has fewer than 2 points.
    """
    points = list(scale)
    if len(points) < 2:
        raise InvalidArgument(f"Color scale needs at least 2 points, got {len(points)}")
    return sorted(points, key=lambda p: p.value)


def color_at(scale: ColorScale, value: float) -> str:
    """Map value onto scale.

    The first adjacent pair (p_i, p_i+1) with p_i.value <= value <= p_i+1.value
    wins, so a value sitting exactly on an interior breakpoint uses the lower
    segment. Out-of-range values return the end color as given.
    """
    value = float(value)
    if not math.isfinite(value):
        raise InvalidArgument(f"Cannot map non-finite value {value!r} to a color")
    points = sorted_points(scale)

    for lo, hi in zip(points, points[1:]):
        if lo.value <= value <= hi.value:
            span = hi.value - lo.value
            factor = (value - lo.value) / span if span != 0 else 0.0
            if factor == 0:
                return lo.color
            if factor == 1:
                return hi.color
            return interpolate_color(lo.color, hi.color, factor)

    if value < points[0].value:
        return points[0].color
    return points[-1].color


def sample_gradient(
    scale: ColorScale,
    domain: tuple[float, float],
    steps: int = GRADIENT_STEPS,
) -> list[str]:
    """Return steps colors evenly spaced over domain (both ends included)."""
    if steps < 2:
        raise InvalidArgument(f"steps must be >= 2, got {steps}")
    lo, hi = float(domain[0]), float(domain[1])
    return [color_at(scale, lo + i / (steps - 1) * (hi - lo)) for i in range(steps)]


def to_plotly_colorscale(
    scale: ColorScale,
    domain: tuple[float, float],
    steps: int = GRADIENT_STEPS,
) -> list[list]:
    """Sample scale into a Plotly colorscale ([[fraction, color], ...]) over domain."""
    colors = sample_gradient(scale, domain, steps)
    return [[i / (steps - 1), c] for i, c in enumerate(colors)]
