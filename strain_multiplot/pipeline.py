"""
Measurement pipeline wiring for the Strain Multiplot Viewer.

``MultiplotPipeline`` reads the store and runs, in dependency order:

1. Filter (tree visibility + field filters)
2. Grouping (group-by field, ordered by the group-by filter values)
3. Layout (scales from filtered data and container width)
4. Render tier selection through a ``TieredScheduler``:
   ``rebuild`` on grouped data / width / axis label / threshold,
   ``recolor`` on tree colours (and after every rebuild),
   ``threshold`` on the threshold toggle (skipped when a rebuild
   already drew it).

Stages 1-3 are memoised on structurally equal inputs, so colour and
threshold changes never re-run them.
"""

from typing import List, Optional

from .data_model import strain_property
from .filters import filter_measurements
from .grouping import group_measurements
from .layout import DEFAULT_PRESETS, PlotPresets, get_plot_layout
from .renderer import MultiplotRenderer
from .scheduler import Memo, TieredScheduler
from .store import MultiplotStore


class MultiplotPipeline:
    """Connects a ``MultiplotStore`` to a ``MultiplotRenderer``."""

    def __init__(
        self,
        store: MultiplotStore,
        renderer: MultiplotRenderer,
        *,
        width: float = 0,
        presets: PlotPresets = DEFAULT_PRESETS,
        auto_refresh: bool = True,
    ):
        self._store = store
        self._renderer = renderer
        self._width = width
        self._presets = presets
        self.last_fired: List[str] = []

        self.filter_stage = Memo(filter_measurements)
        self.group_stage = Memo(group_measurements)
        self.layout_stage = Memo(get_plot_layout)

        self._scheduler = TieredScheduler()
        self._scheduler.add_tier(
            'rebuild',
            ('groups', 'width', 'x_axis_label', 'threshold'),
            self._rebuild,
            reads=('layout', 'show_threshold'),
        )
        self._scheduler.add_tier(
            'recolor', ('strain_colors',), self._recolor, after=('rebuild',))
        self._scheduler.add_tier(
            'threshold', ('show_threshold',), self._set_threshold,
            covered_by=('rebuild',))

        self._unsubscribe = None
        if auto_refresh:
            self._unsubscribe = store.subscribe(lambda action: self.refresh())

    @property
    def renderer(self) -> MultiplotRenderer:
        return self._renderer

    @property
    def width(self) -> float:
        return self._width

    def set_width(self, width: float) -> List[str]:
        self._width = width
        return self.refresh()

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def filtered_measurements(self) -> List[dict]:
        """Measurements currently passing visibility and field filters."""
        collection = self._store.multiplot.collection_to_display
        if collection is None:
            return []
        return self.filter_stage(
            collection.measurements,
            strain_property(self._store.tree, 'visibility'),
            self._store.controls.filters,
        )

    def refresh(self) -> List[str]:
        """Run the pipeline; return the names of the tiers that fired."""
        store = self._store
        collection = store.multiplot.collection_to_display
        if not store.multiplot.loaded or collection is None or self._width <= 0:
            self.last_fired = []
            return self.last_fired

        controls = store.controls
        filtered = self.filtered_measurements()
        group_by = controls.group_by_key
        groups = self.group_stage(filtered, group_by, controls.filters.get(group_by))
        layout = self.layout_stage(filtered, self._width, self._presets)

        self.last_fired = self._scheduler.update(
            groups=groups,
            width=self._width,
            x_axis_label=collection.x_axis_label,
            threshold=collection.threshold,
            layout=layout,
            show_threshold=controls.show_threshold,
            strain_colors=strain_property(store.tree, 'node_colors'),
        )
        return self.last_fired

    # ── Tier actions ─────────────────────────────────────────────────

    def _rebuild(self, groups, width, x_axis_label, threshold, layout,
                 show_threshold) -> None:
        self._renderer.rebuild(
            groups, layout,
            x_axis_label=x_axis_label,
            threshold=threshold,
            show_threshold=show_threshold,
        )

    def _recolor(self, strain_colors) -> None:
        self._renderer.recolor(strain_colors)

    def _set_threshold(self, show_threshold: Optional[bool]) -> None:
        self._renderer.set_threshold_visible(show_threshold)
