"""
Data model for the Strain Multiplot Viewer.

Immutable dataclasses representing the loaded measurement collections,
the read-only tree input, and the interactive controls.  Collections
are constructed once by ``json_loader`` and never mutated; user
interaction replaces whole ``Controls`` / ``MultiplotState`` values
(see ``store``) instead of editing them in place.

Measurements stay plain ``dict`` objects because their fields are
arbitrary.  The loader adds two generated fields to each of them:
``jitter`` (standard-normal vertical offset) and ``id`` (position in
the collection's measurement list).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .constants import PANELS_AVAILABLE

# ``{field: {field_value: active}}`` -- insertion order of the inner
# dict is the order in which the user added the values.
FilterState = Dict[str, Dict[Any, bool]]


@dataclass(frozen=True)
class Grouping:
    """A selectable "group by" dimension.

    Parameters
    ----------
    key : str
        Measurement field used to form subplot rows.
    title : str or None
        Display title; falls back to *key*.
    """
    key: str
    title: Optional[str] = None

    @property
    def display_title(self) -> str:
        return self.title or self.key


@dataclass(frozen=True)
class Collection:
    """A named set of measurements plus its display metadata.

    Parameters
    ----------
    key : str
        Identifier used by ``default_collection`` and the selector.
    title : str or None
        Display title; falls back to *key*.
    measurements : list of dict
        Measurement records, each with ``strain``, ``value``,
        ``jitter`` and ``id`` plus arbitrary categorical fields.
    groupings : list of Grouping
        Declared group-by options, in declaration order (never empty).
    display_defaults : dict
        Optional ``group_by`` / ``show_threshold`` defaults.
    threshold : float or None
        Reference value drawn as a vertical line.
    x_axis_label : str
        Label of the shared value axis.
    """
    key: str
    title: Optional[str]
    measurements: List[dict]
    groupings: List[Grouping]
    display_defaults: Dict[str, Any] = field(default_factory=dict)
    threshold: Optional[float] = None
    x_axis_label: str = ""

    @property
    def display_title(self) -> str:
        return self.title or self.key

    def grouping_titles(self) -> Dict[str, str]:
        """Map of grouping key to display title, in declaration order."""
        return {g.key: g.display_title for g in self.groupings}


@dataclass(frozen=True)
class TreeNode:
    name: str
    has_children: bool = False


@dataclass(frozen=True)
class TreeState:
    """Read-only input supplied by the tree component.

    ``visibility`` and ``node_colors`` are parallel to ``nodes``: the
    value at index *i* belongs to ``nodes[i]``.
    """
    loaded: bool = False
    nodes: List[TreeNode] = field(default_factory=list)
    visibility: List[int] = field(default_factory=list)
    node_colors: List[str] = field(default_factory=list)


def strain_property(tree: TreeState, prop: str) -> Dict[str, Any]:
    """Reduce *tree* to ``{strain_name: value}`` for terminal nodes only.

    *prop* names one of the per-node lists on ``TreeState``
    (``"visibility"`` or ``"node_colors"``).
    """
    values = getattr(tree, prop)
    return {
        node.name: values[idx]
        for idx, node in enumerate(tree.nodes)
        if not node.has_children and idx < len(values)
    }


@dataclass(frozen=True)
class Controls:
    """Interactive controls state for the multiplot panel."""
    collection_key: Optional[str] = None
    collection_options: Dict[str, str] = field(default_factory=dict)
    groupings: Dict[str, str] = field(default_factory=dict)
    group_by_key: Optional[str] = None
    show_threshold: bool = False
    filters: FilterState = field(default_factory=dict)
    panels_available: List[str] = field(
        default_factory=lambda: list(PANELS_AVAILABLE))
    panels_to_display: List[str] = field(
        default_factory=lambda: list(PANELS_AVAILABLE))
    panel_layout: str = "full"
    can_toggle_panel_layout: bool = True


@dataclass(frozen=True)
class MultiplotState:
    """Loaded collections and the one currently on display.

    ``collection_field_values`` maps each field of the displayed
    collection to its distinct values in first-seen order.
    """
    loaded: bool = False
    collections: List[Collection] = field(default_factory=list)
    collection_to_display: Optional[Collection] = None
    collection_field_values: Dict[str, List[Any]] = field(default_factory=dict)
