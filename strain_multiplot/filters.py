"""
Measurement filtering for the Strain Multiplot Viewer.

A measurement is displayed when its strain is visible in the tree AND,
for every filtered field that has at least one active value, its value
for that field is one of the active values.  A field whose values are
all inactive imposes no constraint ("show all").

Every mutation helper returns a new ``FilterState``; the input is never
modified.  Filtering is a full O(n) re-scan per change.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .constants import FIELD_STRAIN, NODE_VISIBLE
from .data_model import FilterState


def _is_visible(visibility) -> bool:
    return visibility == NODE_VISIBLE


def filter_to_visible_strains(
    measurements: Iterable[dict],
    strain_visibility: Mapping[str, int],
) -> List[dict]:
    """Keep measurements whose strain is visible in the tree."""
    return [
        m for m in measurements
        if _is_visible(strain_visibility.get(m.get(FIELD_STRAIN)))
    ]


def active_filter_values(filters: FilterState) -> Dict[str, Set[Any]]:
    """Map each field with at least one active value to those values."""
    active = {}
    for fld, values in filters.items():
        selected = {value for value, is_active in values.items() if is_active}
        if selected:
            active[fld] = selected
    return active


def measurement_passes_filters(measurement: dict,
                               active: Mapping[str, Set[Any]]) -> bool:
    """Check *measurement* against ``active_filter_values`` output."""
    for fld, values in active.items():
        if measurement.get(fld) not in values:
            return False
    return True


def filter_measurements(
    measurements: Iterable[dict],
    strain_visibility: Mapping[str, int],
    filters: FilterState,
) -> List[dict]:
    """Apply tree visibility and field filters to *measurements*.

    Parameters
    ----------
    measurements : iterable of dict
        Measurements of the displayed collection.
    strain_visibility : mapping
        ``{strain: visibility}`` from the tree; only ``NODE_VISIBLE``
        strains pass.
    filters : FilterState
        ``{field: {value: active}}``.

    Returns
    -------
    list of dict
        Passing measurements in their original order.
    """
    active = active_filter_values(filters)
    return [
        m for m in filter_to_visible_strains(measurements, strain_visibility)
        if measurement_passes_filters(m, active)
    ]


# ── FilterState mutations ────────────────────────────────────────────────

def _copy(filters: FilterState) -> FilterState:
    return {fld: dict(values) for fld, values in filters.items()}


def toggle_single_filter(filters: FilterState, field: str, value: Any,
                         active: bool) -> FilterState:
    """Set *value* of *field* to *active*, adding the field if absent.

    A value that is already present keeps its position; a new one is
    appended after the existing values.
    """
    new_filters = _copy(filters)
    new_filters.setdefault(field, {})[value] = bool(active)
    return new_filters


def remove_single_filter(filters: FilterState, field: str,
                         value: Any) -> FilterState:
    """Remove *value* from *field*; drop the field once it is empty."""
    new_filters = _copy(filters)
    values = new_filters.get(field)
    if values is None:
        return new_filters
    values.pop(value, None)
    if not values:
        del new_filters[field]
    return new_filters


def remove_all_field_filters(filters: FilterState, field: str) -> FilterState:
    """Remove every value of *field*."""
    new_filters = _copy(filters)
    new_filters.pop(field, None)
    return new_filters


def toggle_all_field_filters(
    filters: FilterState,
    field: str,
    active: bool,
    known_values: Optional[Iterable[Any]] = None,
) -> FilterState:
    """Set every value of *field* to *active*.

    The values come from *known_values* (typically the field's distinct
    value index) when given, otherwise from the field's current entry.
    Existing values keep their order; new ones are appended.  With no
    values at all the field stays absent.
    """
    new_filters = _copy(filters)
    values = list(new_filters.get(field, {}))
    if known_values is not None:
        values.extend(v for v in known_values if v not in new_filters.get(field, {}))
    if not values:
        return new_filters
    new_filters[field] = {value: bool(active) for value in values}
    return new_filters


def active_filter_count(filters: FilterState, field: str) -> int:
    return sum(1 for is_active in filters.get(field, {}).values() if is_active)
