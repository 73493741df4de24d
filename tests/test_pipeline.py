from dataclasses import replace

import pytest
from matplotlib.figure import Figure

from strain_multiplot.constants import NODE_NOT_VISIBLE
from strain_multiplot.pipeline import MultiplotPipeline
from strain_multiplot.renderer import MultiplotRenderer
from strain_multiplot.store import MultiplotStore


@pytest.fixture
def loaded_store(tree, collections_json, rng):
    store = MultiplotStore(tree=tree)
    store.load_collections(collections_json, rng=rng)
    return store


@pytest.fixture
def pipeline(loaded_store):
    renderer = MultiplotRenderer(Figure())
    return MultiplotPipeline(loaded_store, renderer, width=400)


def _rows(pipeline):
    return pipeline.renderer.snapshot()["rows"]


def test_no_render_without_width(loaded_store) -> None:
    pipeline = MultiplotPipeline(loaded_store, MultiplotRenderer(Figure()))
    assert pipeline.refresh() == []


def test_no_render_before_load(tree) -> None:
    pipeline = MultiplotPipeline(MultiplotStore(tree=tree), MultiplotRenderer(Figure()), width=400)
    assert pipeline.refresh() == []


def test_first_refresh_rebuilds_and_recolors(pipeline) -> None:
    assert pipeline.refresh() == ["rebuild", "recolor"]
    assert [row["label"] for row in _rows(pipeline)] == ["CDC", "Crick"]


def test_repeat_refresh_is_noop(pipeline) -> None:
    pipeline.refresh()
    assert pipeline.refresh() == []


def test_threshold_toggle_skips_data_stages(pipeline, loaded_store) -> None:
    pipeline.refresh()
    calls = (pipeline.filter_stage.calls, pipeline.group_stage.calls, pipeline.layout_stage.calls)

    loaded_store.toggle_threshold(False)

    assert pipeline.last_fired == ["threshold"]
    assert (pipeline.filter_stage.calls, pipeline.group_stage.calls,
            pipeline.layout_stage.calls) == calls
    assert pipeline.renderer.snapshot()["threshold"]["visible"] is False


def test_color_change_only_recolors(pipeline, loaded_store) -> None:
    pipeline.refresh()
    calls = (pipeline.filter_stage.calls, pipeline.group_stage.calls, pipeline.layout_stage.calls)

    tree = loaded_store.tree
    colors = list(tree.node_colors)
    colors[0] = "#123456"
    loaded_store.update_tree(replace(tree, node_colors=colors))

    assert pipeline.last_fired == ["recolor"]
    assert (pipeline.filter_stage.calls, pipeline.group_stage.calls,
            pipeline.layout_stage.calls) == calls
    point_colors = {p["id"]: p["color"] for row in _rows(pipeline) for p in row["points"]}
    assert point_colors["multiplot_measurement_0"] == "#123456"


def test_filter_change_rebuilds(pipeline, loaded_store) -> None:
    pipeline.refresh()
    loaded_store.toggle_single_filter("serum", "s1", True)

    assert pipeline.last_fired == ["rebuild", "recolor"]
    ids = {p["id"] for row in _rows(pipeline) for p in row["points"]}
    assert ids == {"multiplot_measurement_0", "multiplot_measurement_2"}


def test_visibility_change_rebuilds(pipeline, loaded_store) -> None:
    pipeline.refresh()
    tree = loaded_store.tree
    visibility = list(tree.visibility)
    visibility[0] = NODE_NOT_VISIBLE
    loaded_store.update_tree(replace(tree, visibility=visibility))

    assert "rebuild" in pipeline.last_fired
    strains = {p["id"] for row in _rows(pipeline) for p in row["points"]}
    assert strains == {"multiplot_measurement_1", "multiplot_measurement_2"}


def test_width_change_rebuilds(pipeline) -> None:
    pipeline.refresh()
    assert pipeline.set_width(600) == ["rebuild", "recolor"]
    assert pipeline.renderer.snapshot()["width"] == 600


def test_group_by_ordering_follows_filters(pipeline, loaded_store) -> None:
    pipeline.refresh()
    loaded_store.toggle_single_filter("source", "Crick", False)
    loaded_store.toggle_single_filter("source", "CDC", False)

    assert [row["label"] for row in _rows(pipeline)] == ["Crick", "CDC"]


def test_close_stops_listening(pipeline, loaded_store) -> None:
    pipeline.refresh()
    pipeline.close()
    loaded_store.toggle_threshold(False)

    assert pipeline.renderer.snapshot()["threshold"]["visible"] is True
    assert pipeline.refresh() == ["threshold"]


def test_reordered_group_by_filters_reorder_rows_after_skipped_refreshes(loaded_store) -> None:
    pipeline = MultiplotPipeline(
        loaded_store, MultiplotRenderer(Figure()), width=400, auto_refresh=False)
    loaded_store.toggle_single_filter("source", "CDC", True)
    loaded_store.toggle_single_filter("source", "Crick", True)
    pipeline.refresh()
    assert [row["label"] for row in _rows(pipeline)] == ["CDC", "Crick"]

    loaded_store.remove_single_filter("source", "CDC")
    loaded_store.toggle_single_filter("source", "CDC", True)

    assert pipeline.refresh() == ["rebuild", "recolor"]
    assert [row["label"] for row in _rows(pipeline)] == ["Crick", "CDC"]
