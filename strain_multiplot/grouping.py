"""
Grouping of filtered measurements into subplot rows.

Rows are formed by equality of the group-by field and appear in
first-seen order.  When the user has filter values for the group-by
field, those values dictate the row order instead (the order in which
they were added), so rows can be rearranged by re-adding filters.
Rows whose value was never added as a filter follow the ordered rows,
keeping their first-seen order.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Group = Tuple[Any, List[dict]]


def group_measurements(
    measurements: Sequence[dict],
    group_by: str,
    ordering_hint: Optional[Mapping[Any, Any]] = None,
) -> List[Group]:
    """Aggregate *measurements* by their *group_by* value.

    Parameters
    ----------
    measurements : sequence of dict
        Filtered measurements.
    group_by : str
        Field that defines the rows.  Measurements lacking the field
        are grouped under ``None``.
    ordering_hint : mapping, optional
        The ``FilterState`` entry for *group_by*; only its key order is
        used.

    Returns
    -------
    list of (label, list of dict)
    """
    groups: Dict[Any, List[dict]] = {}
    for measurement in measurements:
        groups.setdefault(measurement.get(group_by), []).append(measurement)

    ordered = list(groups.items())
    if not ordering_hint:
        return ordered

    rank = {value: idx for idx, value in enumerate(ordering_hint)}
    unmatched = len(rank)
    # sorted() is stable, so unmatched rows keep first-seen order
    return sorted(ordered, key=lambda group: rank.get(group[0], unmatched))
