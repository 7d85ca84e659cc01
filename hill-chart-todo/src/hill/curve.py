"""Hill curve geometry.

The hill is a downward parabola over the drawing area. Screen y grows
downward, so ``height_at`` returns ``chart_height`` (the baseline) at both
ends and its smallest value at progress 0.5. Everything that draws the curve
or places an item on it goes through ``height_at``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

DEFAULT_AMPLITUDE_RATIO = 0.6


def clamp_progress(value: float) -> float:
    if value != value:  # nan
        return 0.0
    return min(1.0, max(0.0, float(value)))


def height_at(progress: float, chart_height: float, amplitude_ratio: float = DEFAULT_AMPLITUDE_RATIO) -> float:
    """Vertical offset from the top of the drawing area for ``progress``."""
    p = clamp_progress(progress)
    amplitude = amplitude_ratio * chart_height
    offset = p - 0.5
    rise = amplitude - 4.0 * amplitude * offset * offset
    return chart_height - rise


def progress_at(x: float, chart_width: float) -> float:
    """Horizontal pointer position -> clamped progress."""
    if chart_width <= 0:
        raise ValueError(f"chart width must be positive, got {chart_width!r}")
    return clamp_progress(x / chart_width)


@dataclass(frozen=True)
class ChartGeometry:
    """Size of the drawing area plus the hill's amplitude."""

    width: float
    height: float
    amplitude_ratio: float = DEFAULT_AMPLITUDE_RATIO

    def height_at(self, progress: float) -> float:
        return height_at(progress, self.height, self.amplitude_ratio)

    def progress_at(self, x: float) -> float:
        return progress_at(x, self.width)

    def point_for(self, progress: float) -> Tuple[float, float]:
        p = clamp_progress(progress)
        return p * self.width, self.height_at(p)

    def curve_points(self, samples: int = 101) -> List[Tuple[float, float]]:
        """Evenly spaced points along the hill, both endpoints included."""
        samples = max(2, int(samples))
        last = samples - 1
        return [self.point_for(i / last) for i in range(samples)]
