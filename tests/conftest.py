from __future__ import annotations

import random

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402


def _measurement(strain: str, value: float, **fields) -> dict:
    record = {"strain": strain, "value": value}
    record.update(fields)
    return record


@pytest.fixture
def measurement():
    return _measurement


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def tree():
    from strain_multiplot.tree import tree_from_strains

    return tree_from_strains(["A", "B", "C"])


@pytest.fixture
def collections_json() -> dict:
    return {
        "default_collection": "hi",
        "collections": [
            {
                "key": "hi",
                "title": "HI titers",
                "x_axis_label": "log2 titer",
                "threshold": 2.0,
                "groupings": [
                    {"key": "serum", "title": "Serum"},
                    {"key": "source"},
                ],
                "display_defaults": {"group_by": "source", "show_threshold": True},
                "measurements": [
                    _measurement("A", 1.0, serum="s1", source="CDC"),
                    _measurement("B", 5.0, serum="s2", source="CDC"),
                    _measurement("C", 9.0, serum="s1", source="Crick"),
                    _measurement("A", 3.0, serum="s2", source="Crick"),
                ],
            },
            {
                "key": "fra",
                "groupings": [{"key": "clade"}],
                "measurements": [
                    _measurement("A", 4.0, clade="x"),
                    _measurement("B", 6.0, clade="y"),
                ],
            },
        ],
    }
