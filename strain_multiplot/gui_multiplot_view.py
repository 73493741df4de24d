"""
Multiplot panel (right side) for the Strain Multiplot Viewer.

Hosts the matplotlib canvas inside a vertical scroll area.  The canvas
width follows the panel width and its height follows the number of
subplot rows; the pipeline is re-run on every resize.  Hovering a point
shows the measurement in a floating tooltip.
"""

import sys

from PySide6.QtWidgets import QLabel, QScrollArea, QVBoxLayout, QWidget
from PySide6.QtCore import Qt

from matplotlib.figure import Figure
from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas

from .constants import HOVER_PANEL_WIDTH, PLOT_STYLE, SCREEN_DPI
from .controls import get_multiplot_title
from .errors import InvariantViolationError
from .hover import format_hover_lines, hover_panel_position
from .pipeline import MultiplotPipeline
from .renderer import MultiplotRenderer, get_measurement_dom_id
from .store import MultiplotStore
from .theme import apply_plot_style


class MultiplotView(QWidget):
    """Title, scrolling canvas and hover tooltip for one multiplot."""

    def __init__(self, store: MultiplotStore, parent=None):
        super().__init__(parent)
        self._store = store

        apply_plot_style(PLOT_STYLE)
        self._fig = Figure(dpi=SCREEN_DPI)
        self._renderer = MultiplotRenderer(self._fig)

        self._setup_ui()

        self._pipeline = MultiplotPipeline(store, self._renderer, auto_refresh=False)
        self._unsubscribe = store.subscribe(lambda action: self.refresh())
        self._renderer.connect_hover(self._on_hover)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        self._title = QLabel("")
        self._title.setStyleSheet("font-size: 15px; font-weight: bold;")
        layout.addWidget(self._title)

        self._canvas = FigureCanvas(self._fig)
        self._scroll = QScrollArea()
        self._scroll.setWidget(self._canvas)
        self._scroll.setWidgetResizable(False)
        self._scroll.setHorizontalScrollBarPolicy(
            Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        layout.addWidget(self._scroll, 1)

        self._hover_label = QLabel(self._canvas)
        self._hover_label.setObjectName("hoverPanel")
        self._hover_label.setFixedWidth(HOVER_PANEL_WIDTH)
        self._hover_label.setWordWrap(True)
        self._hover_label.hide()

    # ── Properties ───────────────────────────────────────────────────

    @property
    def fig(self) -> Figure:
        return self._fig

    @property
    def pipeline(self) -> MultiplotPipeline:
        return self._pipeline

    # ── Refresh ──────────────────────────────────────────────────────

    def refresh(self):
        """Re-run the pipeline for the current store state and width."""
        self._update_title()
        width = self._scroll.viewport().width()
        try:
            fired = self._pipeline.set_width(width)
        except InvariantViolationError as exc:
            print(f"[Multiplot] Render halted: {exc.log_message()}",
                  file=sys.stderr)
            return
        if 'rebuild' in fired:
            self._hover_label.hide()
            self._canvas.setFixedSize(int(width), int(self._renderer.height))
        self._canvas.draw_idle()

    def _update_title(self):
        collection = self._store.multiplot.collection_to_display
        if collection is None:
            self._title.setText("")
            return
        controls = self._store.controls
        self._title.setText(get_multiplot_title(
            collection.display_title,
            controls.groupings.get(controls.group_by_key),
        ))

    def resizeEvent(self, event):
        super().resizeEvent(event)
        if self._store.multiplot.loaded:
            self.refresh()

    def closeEvent(self, event):
        self._unsubscribe()
        self._renderer.disconnect_hover()
        super().closeEvent(event)

    # ── Hover tooltip ────────────────────────────────────────────────

    def _on_hover(self, measurement):
        if measurement is None:
            self._hover_label.hide()
            return
        dom_id = get_measurement_dom_id(measurement)
        x, y = self._renderer.point_position(dom_id)
        viewport = self._scroll.viewport()
        position = hover_panel_position(
            x, y, viewport.width(), viewport.height(),
            scroll_top=self._scroll.verticalScrollBar().value(),
        )

        self._hover_label.setText("\n".join(format_hover_lines(measurement)))
        self._hover_label.adjustSize()
        label_w = self._hover_label.width()
        label_h = self._hover_label.height()
        if 'left' in position:
            left = position['left']
        else:
            left = viewport.width() - position['right'] - label_w
        if 'top' in position:
            top = position['top']
        else:
            top = viewport.height() - position['bottom'] - label_h
        self._hover_label.move(int(left), int(top))
        self._hover_label.raise_()
        self._hover_label.show()
