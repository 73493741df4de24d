"""
Multiplot renderer for the Strain Multiplot Viewer.

``MultiplotRenderer`` exclusively owns a matplotlib ``Figure`` and
exposes three mutations, each driven by a different trigger:

``rebuild``
    Grouped data or width changed: clear the figure and redraw the
    x axis, one banded row per group with its single-tick y axis and
    points, and the threshold line.
``recolor``
    The tree colours changed: restyle point fills only.
``set_threshold_visible``
    The threshold toggle changed: flip only the threshold line.

Geometry is laid out in pixels, top-left origin, exactly as the layout
scales describe it: each row is an axes spanning the full figure width
with ``xlim = (0, width)`` and ``ylim = (subplot_height, 0)``, so a
point sits at ``(x_scale(value), y_scale(jitter))`` inside its row.

Hover enlarges the point under the cursor and reports the full
measurement (or ``None`` on leave) to a caller-supplied callback.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
from matplotlib.colors import to_hex
from matplotlib.figure import Figure
from matplotlib.lines import Line2D

from .constants import (
    BAND_ALPHA, BAND_COLOR, DEFAULT_STRAIN_COLOR, FIELD_ID, FIELD_JITTER,
    FIELD_STRAIN, FIELD_VALUE, MEASUREMENT_ID_PREFIX, SCREEN_DPI,
    THRESHOLD_COLOR, THRESHOLD_ID, THRESHOLD_WIDTH_PX,
)
from .errors import InvariantViolationError
from .layout import DEFAULT_PRESETS, PlotLayout, PlotPresets

HoverCallback = Callable[[Optional[dict]], None]


def get_measurement_dom_id(measurement: Mapping[str, Any]) -> str:
    """Return the stable element id for *measurement*.

    An ``id`` of ``0`` is valid; only a missing or ``None`` id is an
    invariant violation.
    """
    measurement_id = measurement.get(FIELD_ID)
    if measurement_id is None:
        raise InvariantViolationError(
            "Encountered measurement without a valid id",
            context={'measurement': dict(measurement)},
        )
    return f"{MEASUREMENT_ID_PREFIX}{measurement_id}"


@dataclass
class _Row:
    label: Any
    offset: float
    axes: Any
    scatter: Any
    ids: List[str]
    measurements: List[dict]
    tick_labels: List[str]


class MultiplotRenderer:
    """Draws grouped measurements onto a matplotlib figure."""

    def __init__(
        self,
        figure: Figure,
        *,
        presets: PlotPresets = DEFAULT_PRESETS,
        dpi: float = SCREEN_DPI,
    ):
        self._fig = figure
        self._presets = presets
        self._dpi = dpi
        self._rows: List[_Row] = []
        self._points: Dict[str, Tuple[_Row, int]] = {}
        self._threshold_line: Optional[Line2D] = None
        self._threshold_x: Optional[float] = None
        self._x_axis_label = ""
        self._width = 0.0
        self._height = 0.0
        self._hovered: Optional[str] = None
        self._hover_callback: Optional[HoverCallback] = None
        self._hover_cid = None

    @property
    def figure(self) -> Figure:
        return self._fig

    @property
    def height(self) -> float:
        """Canvas height in pixels after the last rebuild."""
        return self._height

    @property
    def hovered_id(self) -> Optional[str]:
        return self._hovered

    # ── Pixel helpers ────────────────────────────────────────────────

    def _fig_fraction(self, x: float, y: float) -> Tuple[float, float]:
        return x / self._width, 1.0 - y / self._height

    def _marker_size(self, radius: float) -> float:
        # scatter sizes are marker areas in points²
        return (2.0 * radius * 72.0 / self._dpi) ** 2

    def _radius(self, size: float) -> float:
        return math.sqrt(size) / 2.0 * self._dpi / 72.0

    def _request_redraw(self) -> None:
        canvas = self._fig.canvas
        if canvas is not None:
            canvas.draw_idle()

    # ── Tier 1: full rebuild ─────────────────────────────────────────

    def rebuild(
        self,
        groups: Sequence[Tuple[Any, Sequence[dict]]],
        layout: PlotLayout,
        *,
        x_axis_label: str = "",
        threshold: Optional[float] = None,
        show_threshold: bool = False,
    ) -> None:
        """Clear the figure and draw *groups* with *layout*.

        Raises
        ------
        InvariantViolationError
            If a measurement has no id.  Raised before the figure is
            touched, so the previous scene stays intact.
        """
        row_ids = [
            [get_measurement_dom_id(m) for m in members]
            for _, members in groups
        ]

        self._clear()
        presets = layout.presets
        self._presets = presets
        self._width = float(layout.width)
        self._height = float(layout.total_height(len(groups)))
        self._x_axis_label = x_axis_label
        self._fig.set_size_inches(
            self._width / self._dpi, self._height / self._dpi, forward=False)

        subplots_bottom = presets.top_padding + presets.subplot_height * len(groups)
        self._draw_x_axis(layout, subplots_bottom)

        for index, ((label, members), ids) in enumerate(zip(groups, row_ids)):
            self._draw_row(index, label, list(members), ids, layout)

        if threshold is not None:
            self._draw_threshold(layout, threshold, subplots_bottom, show_threshold)

        self._request_redraw()

    def _clear(self) -> None:
        self._fig.clf()
        self._rows = []
        self._points = {}
        self._threshold_line = None
        self._threshold_x = None
        self._hovered = None

    def _draw_x_axis(self, layout: PlotLayout, axis_y: float) -> None:
        presets = layout.presets
        _, bottom = self._fig_fraction(0, axis_y)
        ax = self._fig.add_axes((0.0, bottom, 1.0, 1e-6))
        ax.set_gid("multiplotXAxis")
        ax.patch.set_visible(False)
        ax.set_xlim(0, self._width)
        for side in ('left', 'right', 'top'):
            ax.spines[side].set_visible(False)
        x0, x1 = layout.x_scale.range
        ax.spines['bottom'].set_bounds(x0, x1)
        ax.set_yticks([])
        ticks = layout.x_scale.ticks()
        ax.set_xticks([layout.x_scale(t) for t in ticks])
        ax.set_xticklabels([f"{t:g}" for t in ticks])

        center = presets.left_padding + (
            self._width - presets.left_padding - presets.right_padding) / 2
        x_frac, _ = self._fig_fraction(center, 0)
        self._fig.text(x_frac, 2.0 / self._height, self._x_axis_label,
                       ha='center', va='bottom')

    def _draw_row(self, index: int, label: Any, members: List[dict],
                  ids: List[str], layout: PlotLayout) -> None:
        presets = layout.presets
        offset = layout.subplot_offset(index)
        _, bottom = self._fig_fraction(0, offset + presets.subplot_height)
        ax = self._fig.add_axes(
            (0.0, bottom, 1.0, presets.subplot_height / self._height))
        ax.set_gid(f"subplot_{index}")
        ax.set_xlim(0, self._width)
        ax.set_ylim(presets.subplot_height, 0)

        # Alternate rows are shaded for legibility
        if index % 2:
            ax.patch.set_facecolor(BAND_COLOR)
            ax.patch.set_alpha(BAND_ALPHA)
        else:
            ax.patch.set_visible(False)

        for side in ('right', 'top', 'bottom'):
            ax.spines[side].set_visible(False)
        ax.spines['left'].set_position(('data', presets.left_padding))
        ax.set_xticks([])
        y_ticks = layout.y_scale.ticks(1)
        ax.set_yticks([layout.y_scale(t) for t in y_ticks])
        tick_labels = [str(label)] * len(y_ticks)
        ax.set_yticklabels(tick_labels)

        xs = [layout.x_scale(m[FIELD_VALUE]) for m in members]
        ys = [layout.y_scale(m[FIELD_JITTER]) for m in members]
        scatter = ax.scatter(
            xs, ys,
            s=np.full(len(members), self._marker_size(presets.circle_radius)),
            facecolors=[DEFAULT_STRAIN_COLOR] * len(members),
            edgecolors='none',
            clip_on=False,
            zorder=3,
        )
        scatter.set_gid(f"subplot_{index}_points")

        row = _Row(label=label, offset=offset, axes=ax, scatter=scatter,
                   ids=ids, measurements=members,
                   tick_labels=tick_labels)
        self._rows.append(row)
        for point_index, dom_id in enumerate(ids):
            self._points[dom_id] = (row, point_index)

    def _draw_threshold(self, layout: PlotLayout, threshold: float,
                        subplots_bottom: float, visible: bool) -> None:
        x = layout.x_scale(threshold)
        x_frac, top = self._fig_fraction(x, layout.presets.top_padding)
        _, bottom = self._fig_fraction(x, subplots_bottom)
        line = Line2D(
            [x_frac, x_frac], [top, bottom],
            transform=self._fig.transFigure,
            color=THRESHOLD_COLOR,
            linewidth=THRESHOLD_WIDTH_PX * 72.0 / self._dpi,
            zorder=4,
        )
        line.set_gid(THRESHOLD_ID)
        line.set_visible(bool(visible))
        self._fig.add_artist(line)
        self._threshold_line = line
        self._threshold_x = x

    # ── Tier 2: recolour ─────────────────────────────────────────────

    def recolor(self, strain_colors: Mapping[str, str]) -> None:
        """Fill each point with its strain colour (grey when unknown)."""
        for row in self._rows:
            row.scatter.set_facecolors([
                strain_colors.get(m.get(FIELD_STRAIN)) or DEFAULT_STRAIN_COLOR
                for m in row.measurements
            ])
        self._request_redraw()

    # ── Tier 3: threshold visibility ─────────────────────────────────

    def set_threshold_visible(self, visible: bool) -> None:
        if self._threshold_line is None:
            return
        self._threshold_line.set_visible(bool(visible))
        self._request_redraw()

    # ── Hover ────────────────────────────────────────────────────────

    def connect_hover(self, callback: HoverCallback) -> None:
        """Report hovered measurements to *callback* (``None`` on leave)."""
        self._hover_callback = callback
        if self._hover_cid is None and self._fig.canvas is not None:
            self._hover_cid = self._fig.canvas.mpl_connect(
                'motion_notify_event', self._on_motion)

    def disconnect_hover(self) -> None:
        if self._hover_cid is not None:
            self._fig.canvas.mpl_disconnect(self._hover_cid)
        self._hover_cid = None
        self._hover_callback = None

    def _on_motion(self, event) -> None:
        for row in self._rows:
            if event.inaxes is not row.axes:
                continue
            contains, info = row.scatter.contains(event)
            if contains and len(info.get('ind', ())):
                self.hover_point(row.ids[int(info['ind'][0])])
                return
        self.leave_point()

    def _set_radius(self, dom_id: str, radius: float) -> None:
        row, index = self._points[dom_id]
        sizes = np.array(row.scatter.get_sizes(), dtype=float)
        sizes[index] = self._marker_size(radius)
        row.scatter.set_sizes(sizes)

    def hover_point(self, dom_id: str) -> None:
        """Enlarge point *dom_id* and emit its measurement."""
        if dom_id == self._hovered:
            return
        if dom_id not in self._points:
            raise KeyError(f"No point with id '{dom_id}'")
        self.leave_point()
        self._set_radius(dom_id, self._presets.hover_circle_radius)
        self._hovered = dom_id
        row, index = self._points[dom_id]
        if self._hover_callback is not None:
            self._hover_callback(row.measurements[index])
        self._request_redraw()

    def leave_point(self) -> None:
        """Revert the hovered point, if any, and emit ``None``."""
        if self._hovered is None:
            return
        self._set_radius(self._hovered, self._presets.circle_radius)
        self._hovered = None
        if self._hover_callback is not None:
            self._hover_callback(None)
        self._request_redraw()

    def point_position(self, dom_id: str) -> Tuple[float, float]:
        """Pixel position ``(x, y)`` of *dom_id* from the canvas top-left."""
        row, index = self._points[dom_id]
        x, y = row.scatter.get_offsets()[index]
        return float(x), float(row.offset + y)

    # ── Inspection ───────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data description of the current scene."""
        rows = []
        for row in self._rows:
            offsets = row.scatter.get_offsets()
            colors = row.scatter.get_facecolors()
            sizes = row.scatter.get_sizes()
            points = []
            for i, dom_id in enumerate(row.ids):
                color = colors[i] if len(colors) > 1 else colors[0]
                size = sizes[i] if len(sizes) > 1 else sizes[0]
                points.append({
                    'id': dom_id,
                    'x': float(offsets[i][0]),
                    'y': float(offsets[i][1]),
                    'color': to_hex(color),
                    'radius': self._radius(float(size)),
                })
            rows.append({
                'label': row.label,
                'offset': row.offset,
                'shaded': row.axes.patch.get_visible(),
                'tick_labels': list(row.tick_labels),
                'points': points,
            })
        threshold = None
        if self._threshold_line is not None:
            threshold = {
                'x': self._threshold_x,
                'visible': self._threshold_line.get_visible(),
            }
        return {
            'width': self._width,
            'height': self._height,
            'x_axis_label': self._x_axis_label,
            'rows': rows,
            'threshold': threshold,
        }
