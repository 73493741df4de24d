import random

import pytest
from matplotlib.figure import Figure

from strain_multiplot.data_model import strain_property
from strain_multiplot.errors import InvariantViolationError
from strain_multiplot.filters import filter_measurements
from strain_multiplot.grouping import group_measurements
from strain_multiplot.layout import DEFAULT_PRESETS, get_plot_layout
from strain_multiplot.pipeline import MultiplotPipeline
from strain_multiplot.renderer import MultiplotRenderer, get_measurement_dom_id
from strain_multiplot.store import MultiplotStore
from strain_multiplot.tree import tree_from_strains


def _store(measurements):
    store = MultiplotStore(tree=tree_from_strains(m["strain"] for m in measurements))
    store.load_collections(
        {"collections": [{"key": "k", "groupings": [{"key": "assay"}],
                          "measurements": measurements}]},
        rng=random.Random(11),
    )
    return store


def test_three_visible_measurements_form_one_group() -> None:
    store = _store([
        {"strain": "A", "value": 1, "assay": "HI"},
        {"strain": "B", "value": 2, "assay": "HI"},
        {"strain": "C", "value": 3, "assay": "HI"},
    ])
    collection = store.multiplot.collection_to_display
    filtered = filter_measurements(
        collection.measurements, strain_property(store.tree, "visibility"), store.controls.filters)

    assert len(filtered) == 3
    groups = group_measurements(filtered, store.controls.group_by_key)
    assert len(groups) == 1
    assert len(groups[0][1]) == 3


def test_clade_filter_round_trip() -> None:
    store = _store([
        {"strain": "A", "value": 1, "assay": "HI", "clade": "X"},
        {"strain": "B", "value": 2, "assay": "HI", "clade": "Y"},
        {"strain": "C", "value": 3, "assay": "HI", "clade": "X"},
    ])
    pipeline = MultiplotPipeline(store, MultiplotRenderer(Figure()), width=400)

    store.toggle_single_filter("clade", "X", True)
    assert {m["clade"] for m in pipeline.filtered_measurements()} == {"X"}

    store.toggle_single_filter("clade", "X", False)
    assert len(pipeline.filtered_measurements()) == 3


def test_dom_ids() -> None:
    assert isinstance(get_measurement_dom_id({"id": 0}), str)
    with pytest.raises(InvariantViolationError):
        get_measurement_dom_id({})


@pytest.mark.parametrize("group_count", [1, 3, 10])
def test_layout_domain_and_height(group_count) -> None:
    points = [{"value": v, "jitter": 0.0} for v in (1, 5, 9)]
    layout = get_plot_layout(points, 400)

    low, high = layout.x_scale.domain
    assert low <= 1 and high >= 9
    assert layout.total_height(group_count) == (
        DEFAULT_PRESETS.subplot_height * group_count
        + DEFAULT_PRESETS.top_padding
        + DEFAULT_PRESETS.bottom_padding
    )
