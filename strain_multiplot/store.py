"""
Application state for the Strain Multiplot Viewer.

``MultiplotStore`` holds three slices -- ``controls``, ``multiplot``
and the read-only ``tree`` input -- and changes them only through
``dispatch(Action)``.  Each handler builds a complete replacement for
the slice it touches (``dataclasses.replace`` plus fresh containers),
so a slice obtained before a dispatch is never modified afterwards.
Subscribers are called after every successful dispatch.

A failing load raises before anything is committed, leaving the store
as it was.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

from .constants import GRID_PANELS
from .data_model import Controls, MultiplotState, TreeState
from .filters import (
    remove_all_field_filters, remove_single_filter, toggle_all_field_filters,
    toggle_single_filter,
)
from .json_loader import (
    get_collection_display_controls, get_collection_field_values,
    get_collection_to_display, load_multiplot_collections,
)


class ActionType:
    LOAD_MULTIPLOT_COLLECTIONS = "LOAD_MULTIPLOT_COLLECTIONS"
    CHANGE_MULTIPLOT_COLLECTION = "CHANGE_MULTIPLOT_COLLECTION"
    CHANGE_MULTIPLOT_GROUP_BY = "CHANGE_MULTIPLOT_GROUP_BY"
    TOGGLE_SINGLE_FILTER = "TOGGLE_SINGLE_FILTER"
    REMOVE_SINGLE_FILTER = "REMOVE_SINGLE_FILTER"
    REMOVE_ALL_FIELD_FILTERS = "REMOVE_ALL_FIELD_FILTERS"
    TOGGLE_ALL_FIELD_FILTERS = "TOGGLE_ALL_FIELD_FILTERS"
    TOGGLE_MULTIPLOT_THRESHOLD = "TOGGLE_MULTIPLOT_THRESHOLD"
    TOGGLE_PANEL_DISPLAY = "TOGGLE_PANEL_DISPLAY"
    UPDATE_TREE = "UPDATE_TREE"


@dataclass(frozen=True)
class Action:
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)


def has_multiple_grid_panels(panels_to_display: List[str]) -> bool:
    return len([p for p in GRID_PANELS if p in panels_to_display]) > 1


class MultiplotStore:
    """Holds the controls, multiplot and tree slices."""

    def __init__(self, tree: Optional[TreeState] = None,
                 controls: Optional[Controls] = None):
        self.tree = tree or TreeState()
        self.controls = controls or Controls()
        self.multiplot = MultiplotState()
        self._listeners: List[Callable[[Action], None]] = []
        self._handlers = {
            ActionType.LOAD_MULTIPLOT_COLLECTIONS: self._load_collections,
            ActionType.CHANGE_MULTIPLOT_COLLECTION: self._change_collection,
            ActionType.CHANGE_MULTIPLOT_GROUP_BY: self._change_group_by,
            ActionType.TOGGLE_SINGLE_FILTER: self._toggle_single_filter,
            ActionType.REMOVE_SINGLE_FILTER: self._remove_single_filter,
            ActionType.REMOVE_ALL_FIELD_FILTERS: self._remove_all_field_filters,
            ActionType.TOGGLE_ALL_FIELD_FILTERS: self._toggle_all_field_filters,
            ActionType.TOGGLE_MULTIPLOT_THRESHOLD: self._toggle_threshold,
            ActionType.TOGGLE_PANEL_DISPLAY: self._toggle_panel_display,
            ActionType.UPDATE_TREE: self._update_tree,
        }

    # ── Subscription ─────────────────────────────────────────────────

    def subscribe(self, listener: Callable[[Action], None]) -> Callable[[], None]:
        """Call *listener* after each dispatch; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def dispatch(self, action: Action) -> None:
        handler = self._handlers.get(action.type)
        if handler is None:
            raise ValueError(f"Unknown action type: {action.type}")
        handler(**action.payload)
        for listener in list(self._listeners):
            listener(action)

    # ── Action helpers ───────────────────────────────────────────────

    def load_collections(self, json_data: dict, rng=None) -> None:
        self.dispatch(Action(ActionType.LOAD_MULTIPLOT_COLLECTIONS,
                             {'json_data': json_data, 'rng': rng}))

    def change_collection(self, collection_key: str) -> None:
        self.dispatch(Action(ActionType.CHANGE_MULTIPLOT_COLLECTION,
                             {'collection_key': collection_key}))

    def change_group_by(self, group_by_key: str) -> None:
        self.dispatch(Action(ActionType.CHANGE_MULTIPLOT_GROUP_BY,
                             {'group_by_key': group_by_key}))

    def toggle_single_filter(self, field: str, value: Any, active: bool) -> None:
        self.dispatch(Action(ActionType.TOGGLE_SINGLE_FILTER,
                             {'field': field, 'value': value, 'active': active}))

    def remove_single_filter(self, field: str, value: Any) -> None:
        self.dispatch(Action(ActionType.REMOVE_SINGLE_FILTER,
                             {'field': field, 'value': value}))

    def remove_all_field_filters(self, field: str) -> None:
        self.dispatch(Action(ActionType.REMOVE_ALL_FIELD_FILTERS,
                             {'field': field}))

    def toggle_all_field_filters(self, field: str, active: bool) -> None:
        self.dispatch(Action(ActionType.TOGGLE_ALL_FIELD_FILTERS,
                             {'field': field, 'active': active}))

    def toggle_threshold(self, show_threshold: bool) -> None:
        self.dispatch(Action(ActionType.TOGGLE_MULTIPLOT_THRESHOLD,
                             {'show_threshold': show_threshold}))

    def toggle_panel_display(self, panel_name: str) -> None:
        self.dispatch(Action(ActionType.TOGGLE_PANEL_DISPLAY,
                             {'panel_name': panel_name}))

    def update_tree(self, tree: TreeState) -> None:
        self.dispatch(Action(ActionType.UPDATE_TREE, {'tree': tree}))

    # ── Handlers ─────────────────────────────────────────────────────

    def _load_collections(self, json_data, rng=None) -> None:
        result = load_multiplot_collections(
            json_data, self.tree, rng=rng, base_controls=self.controls)
        self.multiplot = MultiplotState(
            loaded=True,
            collections=result.collections,
            collection_to_display=result.collection_to_display,
            collection_field_values=result.collection_field_values,
        )
        self.controls = result.controls

    def _change_collection(self, collection_key) -> None:
        if not self.multiplot.loaded:
            return
        collection = get_collection_to_display(
            self.multiplot.collections, collection_key)
        self.multiplot = replace(
            self.multiplot,
            collection_to_display=collection,
            collection_field_values=get_collection_field_values(collection),
        )
        self.controls = get_collection_display_controls(collection, self.controls)

    def _change_group_by(self, group_by_key) -> None:
        if group_by_key not in self.controls.groupings:
            raise ValueError(
                f"'{group_by_key}' is not a grouping of collection "
                f"'{self.controls.collection_key}'"
            )
        self.controls = replace(self.controls, group_by_key=group_by_key)

    def _set_filters(self, filters) -> None:
        self.controls = replace(self.controls, filters=filters)

    def _toggle_single_filter(self, field, value, active) -> None:
        self._set_filters(
            toggle_single_filter(self.controls.filters, field, value, active))

    def _remove_single_filter(self, field, value) -> None:
        self._set_filters(
            remove_single_filter(self.controls.filters, field, value))

    def _remove_all_field_filters(self, field) -> None:
        self._set_filters(
            remove_all_field_filters(self.controls.filters, field))

    def _toggle_all_field_filters(self, field, active) -> None:
        self._set_filters(
            toggle_all_field_filters(self.controls.filters, field, active))

    def _toggle_threshold(self, show_threshold) -> None:
        collection = self.multiplot.collection_to_display
        has_threshold = collection is not None and collection.threshold is not None
        self.controls = replace(
            self.controls, show_threshold=bool(show_threshold) and has_threshold)

    def _toggle_panel_display(self, panel_name) -> None:
        controls = self.controls
        if panel_name not in controls.panels_to_display:
            panels = [
                p for p in controls.panels_available
                if p in controls.panels_to_display or p == panel_name
            ]
        else:
            panels = [p for p in controls.panels_to_display if p != panel_name]
        can_toggle = has_multiple_grid_panels(panels)
        self.controls = replace(
            controls,
            panels_to_display=panels,
            panel_layout=controls.panel_layout if can_toggle else "full",
            can_toggle_panel_layout=can_toggle,
        )

    def _update_tree(self, tree) -> None:
        self.tree = tree
