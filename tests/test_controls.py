from strain_multiplot.controls import (
    FilterBadge,
    SelectOption,
    create_filter_options,
    create_key_title_options,
    filter_field_badges,
    filter_summary,
    get_multiplot_title,
    truncate_string,
)


def test_key_title_options() -> None:
    options = create_key_title_options({"hi": "HI titers", "fra": "fra"})
    assert options == [SelectOption("hi", "HI titers"), SelectOption("fra", "fra")]


def test_filter_options_skip_single_value_fields() -> None:
    field_values = {"serum": ["s1", "s2"], "assay": ["HI"], "clade": ["x", "y"]}
    options = create_filter_options(field_values, {"serum": "Serum"})

    assert [opt.value for opt in options] == [
        ("serum", "s1"), ("serum", "s2"), ("clade", "x"), ("clade", "y"),
    ]
    assert options[0].label == "Serum → s1"
    assert options[2].label == "clade → x"


def test_filter_field_badges() -> None:
    filters = {"serum": {"s1": True, "s2": False}, "clade": {"x": False}}
    badges = filter_field_badges(filters, {"serum": "Serum"})

    assert badges == [
        FilterBadge("serum", 1, " 1 x Serum"),
        FilterBadge("clade", 0, " 0 x clade"),
    ]
    assert badges[0].active and not badges[1].active


def test_filter_summary_keeps_insertion_order() -> None:
    summary = filter_summary({"serum": {"s2": True, "s1": False}}, {})
    assert summary == [{
        "field": "serum",
        "title": "serum",
        "values": [{"value": "s2", "active": True}, {"value": "s1", "active": False}],
    }]


def test_truncate_string() -> None:
    assert truncate_string("short", 25) == "short"
    assert truncate_string("x" * 30, 25) == "x" * 22 + "..."
    assert len(truncate_string("x" * 30, 25)) == 25


def test_multiplot_title() -> None:
    assert get_multiplot_title(None, None) == "Multiplot"
    assert get_multiplot_title("HI titers", None) == "HI titers"
    assert get_multiplot_title("HI titers", "Serum") == "HI titers grouped by Serum"
