"""
Scales and geometry for the multiplot.

The x scale is shared by every subplot row and spans the extent of
``value``; the y scale spans the extent of ``jitter`` and is reused,
unshifted, inside each row.  Only the row offset
(``subplot_height * row_index``) differs between rows.

``LinearScale.nice`` and ``LinearScale.ticks`` follow the d3 linear
scale conventions (1/2/5 × 10^k steps) so domains end on round numbers.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .constants import (
    BOTTOM_PADDING, CIRCLE_RADIUS, FIELD_JITTER, FIELD_VALUE,
    HOVER_CIRCLE_RADIUS, LEFT_PADDING, NICE_TICK_COUNT, RIGHT_PADDING,
    SUBPLOT_HEIGHT, SUBPLOT_PADDING, TOP_PADDING,
)

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def tick_increment(start: float, stop: float, count: int) -> float:
    """Return the d3 tick increment for ``[start, stop]``.

    Positive results are the step itself; negative results ``-k`` mean
    a step of ``1 / k`` (kept integral to avoid float noise).  Returns
    ``0.0`` for an empty interval.
    """
    step = (stop - start) / max(0, count) if count > 0 else 0.0
    if step <= 0 or not math.isfinite(step):
        return 0.0
    power = math.floor(math.log10(step))
    error = step / 10 ** power
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power < 0:
        return -(10 ** -power) / factor
    return factor * 10 ** power


class LinearScale:
    """Continuous linear map from *domain* to *range*."""

    def __init__(self, domain: Tuple[float, float],
                 range_: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)

    def nice(self, count: int = NICE_TICK_COUNT) -> "LinearScale":
        """Extend the domain outwards to round tick boundaries."""
        start, stop = self.domain
        reverse = stop < start
        if reverse:
            start, stop = stop, start
        prestep = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == prestep:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            prestep = step
        self.domain = (stop, start) if reverse else (start, stop)
        return self

    def ticks(self, count: int = NICE_TICK_COUNT) -> List[float]:
        start, stop = sorted(self.domain)
        step = tick_increment(start, stop, count)
        if step > 0:
            first, last = math.ceil(start / step), math.floor(stop / step)
            return [i * step for i in range(first, last + 1)]
        if step < 0:
            inv = -step
            first, last = math.ceil(start * inv), math.floor(stop * inv)
            return [i / inv for i in range(first, last + 1)]
        return [start]

    def __repr__(self):
        return f"LinearScale(domain={self.domain}, range={self.range})"


@dataclass(frozen=True)
class PlotPresets:
    """Fixed pixel geometry of the multiplot."""
    left_padding: int = LEFT_PADDING
    right_padding: int = RIGHT_PADDING
    top_padding: int = TOP_PADDING
    bottom_padding: int = BOTTOM_PADDING
    subplot_height: int = SUBPLOT_HEIGHT
    subplot_padding: int = SUBPLOT_PADDING
    circle_radius: float = CIRCLE_RADIUS
    hover_circle_radius: float = HOVER_CIRCLE_RADIUS

    def total_height(self, group_count: int) -> int:
        return (self.subplot_height * group_count
                + self.top_padding + self.bottom_padding)


DEFAULT_PRESETS = PlotPresets()


@dataclass(frozen=True)
class PlotLayout:
    presets: PlotPresets
    width: float
    x_scale: LinearScale
    y_scale: LinearScale

    def total_height(self, group_count: int) -> int:
        return self.presets.total_height(group_count)

    def subplot_offset(self, row_index: int) -> int:
        """Top of subplot row *row_index*, in pixels from the canvas top."""
        return self.presets.top_padding + self.presets.subplot_height * row_index


def _extent(measurements: Sequence[dict], field: str) -> Tuple[float, float]:
    values = np.asarray([m[field] for m in measurements], dtype=float)
    values = values[np.isfinite(values)]
    if values.size == 0:
        return (0.0, 1.0)
    return (float(values.min()), float(values.max()))


def get_plot_layout(
    measurements: Sequence[dict],
    width: float,
    presets: PlotPresets = DEFAULT_PRESETS,
) -> PlotLayout:
    """Build the shared scales for *measurements* drawn *width* pixels wide.

    Parameters
    ----------
    measurements : sequence of dict
        Filtered measurements (``value`` and ``jitter`` required).
    width : float
        Container width in pixels.
    presets : PlotPresets
        Padding, row height and point radii.
    """
    x_scale = LinearScale(
        _extent(measurements, FIELD_VALUE),
        (presets.left_padding, width - presets.right_padding),
    ).nice()
    y_scale = LinearScale(
        _extent(measurements, FIELD_JITTER),
        (presets.subplot_height, 0),
    ).nice()
    return PlotLayout(presets=presets, width=width,
                      x_scale=x_scale, y_scale=y_scale)
