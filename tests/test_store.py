import pytest

from strain_multiplot.data_model import TreeState
from strain_multiplot.errors import MalformedInputError, MissingDependencyError
from strain_multiplot.store import Action, ActionType, MultiplotStore, has_multiple_grid_panels


@pytest.fixture
def store(tree, collections_json, rng):
    store = MultiplotStore(tree=tree)
    store.load_collections(collections_json, rng=rng)
    return store


def test_load_populates_state(store) -> None:
    assert store.multiplot.loaded
    assert store.multiplot.collection_to_display.key == "hi"
    assert store.controls.group_by_key == "source"
    assert store.controls.show_threshold is True


def test_failed_load_leaves_state_untouched(store) -> None:
    multiplot, controls = store.multiplot, store.controls
    with pytest.raises(MalformedInputError):
        store.load_collections({"collections": []})
    assert store.multiplot is multiplot
    assert store.controls is controls


def test_load_without_tree_raises() -> None:
    store = MultiplotStore(tree=TreeState())
    with pytest.raises(MissingDependencyError):
        store.load_collections({"collections": [{"key": "k"}]})
    assert not store.multiplot.loaded


def test_subscribers_are_notified_after_dispatch(store) -> None:
    seen = []
    unsubscribe = store.subscribe(lambda action: seen.append((action.type, store.controls.show_threshold)))

    store.toggle_threshold(False)
    assert seen == [(ActionType.TOGGLE_MULTIPLOT_THRESHOLD, False)]

    unsubscribe()
    store.toggle_threshold(True)
    assert len(seen) == 1


def test_unknown_action_type_raises(store) -> None:
    with pytest.raises(ValueError, match="Unknown action"):
        store.dispatch(Action("NOT_AN_ACTION"))


def test_change_collection_resets_controls(store) -> None:
    store.toggle_single_filter("serum", "s1", True)
    store.change_collection("fra")

    assert store.multiplot.collection_to_display.key == "fra"
    assert store.controls.collection_key == "fra"
    assert store.controls.group_by_key == "clade"
    assert store.controls.filters == {}
    assert store.controls.show_threshold is False
    assert store.multiplot.collection_field_values == {
        "strain": ["A", "B"],
        "clade": ["x", "y"],
    }
    assert store.controls.collection_options == {"hi": "HI titers", "fra": "fra"}


def test_change_group_by(store) -> None:
    store.change_group_by("serum")
    assert store.controls.group_by_key == "serum"

    with pytest.raises(ValueError):
        store.change_group_by("clade")
    assert store.controls.group_by_key == "serum"


def test_threshold_stays_off_without_threshold(store) -> None:
    store.change_collection("fra")
    store.toggle_threshold(True)
    assert store.controls.show_threshold is False


def test_filter_actions(store) -> None:
    store.toggle_single_filter("serum", "s1", True)
    store.toggle_single_filter("serum", "s2", True)
    assert store.controls.filters == {"serum": {"s1": True, "s2": True}}

    store.toggle_all_field_filters("serum", False)
    assert store.controls.filters == {"serum": {"s1": False, "s2": False}}

    store.remove_single_filter("serum", "s1")
    assert store.controls.filters == {"serum": {"s2": False}}

    store.remove_all_field_filters("serum")
    assert store.controls.filters == {}


def test_slices_are_replaced_not_mutated(store) -> None:
    before = store.controls
    store.toggle_single_filter("serum", "s1", True)

    assert before.filters == {}
    assert store.controls is not before


def test_toggle_panel_display(store) -> None:
    assert store.controls.panels_to_display == ["tree", "map", "multiplot"]

    store.toggle_panel_display("map")
    assert store.controls.panels_to_display == ["tree", "multiplot"]
    assert store.controls.can_toggle_panel_layout is False
    assert store.controls.panel_layout == "full"

    store.toggle_panel_display("map")
    assert store.controls.panels_to_display == ["tree", "map", "multiplot"]
    assert store.controls.can_toggle_panel_layout is True


def test_has_multiple_grid_panels() -> None:
    assert has_multiple_grid_panels(["tree", "map"])
    assert not has_multiple_grid_panels(["tree", "multiplot"])
    assert not has_multiple_grid_panels([])
