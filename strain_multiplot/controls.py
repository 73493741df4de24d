"""
Display aids derived from the controls state.

Pure helpers that turn collection/grouping title maps, the distinct
field value index and the current filters into the option lists and
badge labels shown by the options panel.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .constants import DEFAULT_PLOT_TITLE
from .data_model import FilterState
from .filters import active_filter_count


@dataclass(frozen=True)
class SelectOption:
    value: Any
    label: str


@dataclass(frozen=True)
class FilterBadge:
    """Summary of one filtered field."""
    field: str
    active_count: int
    title: str

    @property
    def active(self) -> bool:
        return self.active_count > 0


def create_key_title_options(options: Mapping[str, str]) -> List[SelectOption]:
    """``{key: title}`` → select options with key values and title labels."""
    return [SelectOption(value=key, label=title) for key, title in options.items()]


def create_filter_options(
    field_values: Mapping[str, Sequence[Any]],
    groupings: Mapping[str, str],
) -> List[SelectOption]:
    """One option per ``(field, value)`` pair for the filter picker.

    Fields with a single distinct value are skipped since they cannot
    filter anything out.  Option values are ``(field, value)`` tuples.
    """
    options = []
    for fld, values in field_values.items():
        if len(values) == 1:
            continue
        field_title = groupings.get(fld) or fld
        for value in values:
            options.append(SelectOption(
                value=(fld, value),
                label=f"{field_title} → {value}",
            ))
    return options


def filter_field_badges(filters: FilterState,
                        groupings: Mapping[str, str]) -> List[FilterBadge]:
    badges = []
    for fld in filters:
        count = active_filter_count(filters, fld)
        field_title = groupings.get(fld) or fld
        badges.append(FilterBadge(
            field=fld,
            active_count=count,
            title=f" {count} x {field_title}",
        ))
    return badges


def filter_summary(filters: FilterState,
                   titles: Mapping[str, str]) -> List[Dict[str, Any]]:
    """Per-field list of ``{value, active}`` entries in insertion order."""
    return [
        {
            'field': fld,
            'title': titles.get(fld) or fld,
            'values': [
                {'value': value, 'active': is_active}
                for value, is_active in values.items()
            ],
        }
        for fld, values in filters.items()
    ]


def truncate_string(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars - 3] + "..."


def get_multiplot_title(title: Optional[str],
                        group_by_title: Optional[str]) -> str:
    panel_title = title or DEFAULT_PLOT_TITLE
    if group_by_title:
        panel_title += f" grouped by {group_by_title}"
    return panel_title
