import random

from strain_multiplot.example_data import generate_example_data, write_example_files
from strain_multiplot.json_loader import load_multiplot_json
from strain_multiplot.tree import load_tree_json, tree_from_nodes


def test_example_is_deterministic() -> None:
    assert generate_example_data(1) == generate_example_data(1)


def test_example_loads(tmp_path) -> None:
    paths = write_example_files(str(tmp_path))
    tree = load_tree_json(paths["tree"])
    result = load_multiplot_json(paths["collections"], tree, rng=random.Random(0))

    assert [c.key for c in result.collections] == ["hi_titers", "fra_titers"]
    assert result.controls.group_by_key == "serum"
    assert result.controls.show_threshold is True


def test_example_tree_hides_some_strains() -> None:
    _, tree_json = generate_example_data()
    tree = tree_from_nodes(tree_json["nodes"])
    assert 0 in tree.visibility
