from strain_multiplot.constants import (
    NODE_NOT_VISIBLE,
    NODE_VISIBLE,
    NODE_VISIBLE_TO_MAP_ONLY,
)
from strain_multiplot.filters import (
    active_filter_count,
    active_filter_values,
    filter_measurements,
    filter_to_visible_strains,
    remove_all_field_filters,
    remove_single_filter,
    toggle_all_field_filters,
    toggle_single_filter,
)

VISIBLE_ALL = {"A": NODE_VISIBLE, "B": NODE_VISIBLE, "C": NODE_VISIBLE}


def _records(measurement):
    return [
        measurement("A", 1.0, clade="x", serum="s1", id=0),
        measurement("B", 2.0, clade="y", serum="s1", id=1),
        measurement("C", 3.0, clade="x", serum="s2", id=2),
    ]


def test_only_fully_visible_strains_pass(measurement) -> None:
    visibility = {
        "A": NODE_VISIBLE,
        "B": NODE_VISIBLE_TO_MAP_ONLY,
        "C": NODE_NOT_VISIBLE,
    }
    kept = filter_to_visible_strains(_records(measurement), visibility)
    assert [m["strain"] for m in kept] == ["A"]


def test_unknown_strain_is_hidden(measurement) -> None:
    kept = filter_to_visible_strains([measurement("Z", 1.0)], VISIBLE_ALL)
    assert kept == []


def test_no_filters_keeps_everything(measurement) -> None:
    records = _records(measurement)
    assert filter_measurements(records, VISIBLE_ALL, {}) == records


def test_active_values_restrict_field(measurement) -> None:
    filters = {"clade": {"x": True, "y": False}}
    kept = filter_measurements(_records(measurement), VISIBLE_ALL, filters)
    assert [m["strain"] for m in kept] == ["A", "C"]


def test_all_inactive_field_imposes_no_constraint(measurement) -> None:
    records = _records(measurement)
    filters = {"clade": {"x": False, "y": False}}
    assert filter_measurements(records, VISIBLE_ALL, filters) == records


def test_filters_combine_across_fields(measurement) -> None:
    filters = {"clade": {"x": True}, "serum": {"s2": True}}
    kept = filter_measurements(_records(measurement), VISIBLE_ALL, filters)
    assert [m["strain"] for m in kept] == ["C"]


def test_visibility_applies_before_field_filters(measurement) -> None:
    visibility = dict(VISIBLE_ALL, C=NODE_NOT_VISIBLE)
    filters = {"serum": {"s2": True}}
    assert filter_measurements(_records(measurement), visibility, filters) == []


def test_active_filter_values_skips_inactive_fields() -> None:
    filters = {"clade": {"x": True, "y": False}, "serum": {"s1": False}}
    assert active_filter_values(filters) == {"clade": {"x"}}


def test_toggle_single_filter_returns_new_state() -> None:
    original = {"clade": {"x": True}}
    updated = toggle_single_filter(original, "clade", "y", True)

    assert updated == {"clade": {"x": True, "y": True}}
    assert original == {"clade": {"x": True}}


def test_toggle_keeps_existing_value_position() -> None:
    filters = {"clade": {"x": True, "y": True}}
    updated = toggle_single_filter(filters, "clade", "x", False)
    assert list(updated["clade"].items()) == [("x", False), ("y", True)]


def test_toggle_then_remove_restores_state() -> None:
    filters = {"serum": {"s1": True}}
    toggled = toggle_single_filter(filters, "clade", "x", True)
    assert remove_single_filter(toggled, "clade", "x") == filters


def test_removing_last_value_drops_field() -> None:
    filters = {"clade": {"x": True}, "serum": {"s1": False}}
    assert remove_single_filter(filters, "clade", "x") == {"serum": {"s1": False}}


def test_remove_unknown_value_is_noop() -> None:
    filters = {"clade": {"x": True}}
    assert remove_single_filter(filters, "serum", "s1") == filters
    assert remove_single_filter(filters, "clade", "zzz") == filters


def test_remove_all_field_filters() -> None:
    filters = {"clade": {"x": True, "y": False}, "serum": {"s1": True}}
    assert remove_all_field_filters(filters, "clade") == {"serum": {"s1": True}}


def test_toggle_all_field_filters_uses_existing_values() -> None:
    filters = {"clade": {"x": True, "y": False}}

    assert toggle_all_field_filters(filters, "clade", False) == {
        "clade": {"x": False, "y": False}
    }
    assert toggle_all_field_filters(filters, "clade", True) == {
        "clade": {"x": True, "y": True}
    }


def test_toggle_all_field_filters_appends_known_values() -> None:
    filters = {"clade": {"y": False}}
    updated = toggle_all_field_filters(filters, "clade", True, known_values=["x", "y", "z"])
    assert list(updated["clade"]) == ["y", "x", "z"]
    assert all(updated["clade"].values())


def test_toggle_all_on_absent_field_without_values_is_noop() -> None:
    assert toggle_all_field_filters({}, "clade", True) == {}


def test_active_filter_count() -> None:
    filters = {"clade": {"x": True, "y": False, "z": True}}
    assert active_filter_count(filters, "clade") == 2
    assert active_filter_count(filters, "serum") == 0
