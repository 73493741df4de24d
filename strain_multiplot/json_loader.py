"""
Collections JSON loader for the Strain Multiplot Viewer.

Turns the raw multiplot JSON into immutable ``Collection`` objects and
the initial ``Controls``.  Handles:

- Tree-not-loaded and missing-collections failures (load aborted)
- Per-measurement Gaussian jitter (Box–Muller) and stable ids
- Default collection selection with an ambiguity warning
- Distinct field value index for the filter menu
- ``display_defaults`` for group-by and threshold visibility
"""

import json
import math
import os
import random
import warnings
from collections.abc import Hashable
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional

from .constants import FIELD_ID, FIELD_JITTER, FIELD_VALUE, IGNORED_FILTER_FIELDS
from .data_model import Collection, Controls, Grouping, TreeState
from .errors import (
    AmbiguousSelectionWarning, MalformedInputError, MissingDependencyError,
)


@dataclass(frozen=True)
class LoadResult:
    """Everything produced by a successful load."""
    collections: List[Collection]
    collection_to_display: Collection
    collection_field_values: Dict[str, List[Any]]
    controls: Controls


# ── Jitter ───────────────────────────────────────────────────────────────

def gaussian_jitter(rng: random.Random) -> float:
    """Draw one standard-normal value with a Box–Muller transform.

    ``u1`` is taken from (0, 1] so ``log(u1)`` is always finite.
    """
    u1 = 1.0 - rng.random()
    u2 = rng.random()
    return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)


# ── Collection parsing ───────────────────────────────────────────────────

def _parse_measurement(raw: Any, index: int, collection_key: str,
                       rng: random.Random) -> dict:
    if not isinstance(raw, dict):
        raise MalformedInputError(
            f"Measurement {index} in collection '{collection_key}' is not "
            f"an object.",
            context={'collection': collection_key, 'index': index},
        )
    value = raw.get(FIELD_VALUE)
    if (isinstance(value, bool) or not isinstance(value, (int, float))
            or not math.isfinite(value)):
        raise MalformedInputError(
            f"Measurement {index} in collection '{collection_key}' has a "
            f"non-numeric value: {value!r}",
            context={'collection': collection_key, 'index': index},
        )
    measurement = dict(raw)
    measurement[FIELD_JITTER] = gaussian_jitter(rng)
    measurement[FIELD_ID] = index
    return measurement


def _parse_collection(raw: Any, position: int,
                      rng: random.Random) -> Collection:
    if not isinstance(raw, dict) or not raw.get('key'):
        raise MalformedInputError(
            f"Collection at position {position} has no key."
        )
    key = raw['key']

    raw_measurements = raw.get('measurements')
    if not isinstance(raw_measurements, list):
        raise MalformedInputError(
            f"Collection '{key}' does not have a measurements list."
        )

    raw_groupings = raw.get('groupings')
    if not isinstance(raw_groupings, list) or not raw_groupings:
        raise MalformedInputError(
            f"Collection '{key}' must declare at least one grouping."
        )
    groupings = []
    for raw_grouping in raw_groupings:
        if not isinstance(raw_grouping, dict) or not raw_grouping.get('key'):
            raise MalformedInputError(
                f"Collection '{key}' has a grouping without a key."
            )
        groupings.append(Grouping(key=raw_grouping['key'],
                                  title=raw_grouping.get('title')))

    threshold = raw.get('threshold')
    if threshold is not None and (
            isinstance(threshold, bool) or not isinstance(threshold, (int, float))
            or not math.isfinite(threshold)):
        raise MalformedInputError(
            f"Collection '{key}' has a non-numeric threshold: {threshold!r}",
            context={'collection': key},
        )

    measurements = [
        _parse_measurement(m, idx, key, rng)
        for idx, m in enumerate(raw_measurements)
    ]

    return Collection(
        key=key,
        title=raw.get('title'),
        measurements=measurements,
        groupings=groupings,
        display_defaults=dict(raw.get('display_defaults') or {}),
        threshold=threshold,
        x_axis_label=raw.get('x_axis_label', ''),
    )


# ── Display helpers ──────────────────────────────────────────────────────

def get_collection_to_display(
    collections: List[Collection],
    collection_key: Optional[str],
) -> Collection:
    """Return the collection whose key matches *collection_key*.

    Falls back to the first collection when no key is given or nothing
    matches.  When several collections share the key a warning is
    emitted and the first match is returned.
    """
    if not collection_key:
        return collections[0]
    matches = [c for c in collections if c.key == collection_key]
    if not matches:
        return collections[0]
    if len(matches) > 1:
        warnings.warn(
            f"Found multiple collections with key {collection_key}. "
            f"Returning the first matching collection only.",
            AmbiguousSelectionWarning,
            stacklevel=2,
        )
    return matches[0]


def get_collection_field_values(
    collection: Collection,
    ignored_fields=IGNORED_FILTER_FIELDS,
) -> Dict[str, List[Any]]:
    """Map every field of *collection* to its distinct values.

    Values keep first-seen order.  Unhashable values (nested lists or
    objects) cannot be filtered on and are left out.
    """
    field_values: Dict[str, Dict[Any, None]] = {}
    for measurement in collection.measurements:
        for fld, value in measurement.items():
            if fld in ignored_fields or not isinstance(value, Hashable):
                continue
            field_values.setdefault(fld, {})[value] = None
    return {fld: list(values) for fld, values in field_values.items()}


def get_collection_display_controls(collection: Collection,
                                    base: Optional[Controls] = None) -> Controls:
    """Build the controls for *collection* from its ``display_defaults``.

    Filters are reset.  Collection options and panel state are carried
    over from *base* when given.
    """
    groupings = collection.grouping_titles()
    group_by_key = collection.groupings[0].key
    show_threshold = False

    defaults = collection.display_defaults
    potential_group_by = defaults.get('group_by')
    if potential_group_by and potential_group_by in groupings:
        group_by_key = potential_group_by
    if defaults.get('show_threshold') and collection.threshold is not None:
        show_threshold = True

    base = base or Controls()
    return Controls(
        collection_key=collection.key,
        collection_options=dict(base.collection_options),
        groupings=groupings,
        group_by_key=group_by_key,
        show_threshold=show_threshold,
        filters={},
        panels_available=list(base.panels_available),
        panels_to_display=list(base.panels_to_display),
        panel_layout=base.panel_layout,
        can_toggle_panel_layout=base.can_toggle_panel_layout,
    )


# ── Public entry points ──────────────────────────────────────────────────

def load_multiplot_collections(
    json_data: Any,
    tree: TreeState,
    *,
    rng: Optional[random.Random] = None,
    base_controls: Optional[Controls] = None,
) -> LoadResult:
    """Load the multiplot JSON object into collections and controls.

    Parameters
    ----------
    json_data : dict
        Parsed JSON with ``collections`` and optional
        ``default_collection``.
    tree : TreeState
        Must already be loaded; its visibility mask drives filtering.
    rng : random.Random, optional
        Source of jitter draws.  Pass a seeded instance for
        reproducible output.
    base_controls : Controls, optional
        Existing controls whose panel state is preserved.

    Raises
    ------
    MissingDependencyError
        If the tree is not loaded yet.
    MalformedInputError
        If ``collections`` is absent or a collection is malformed.
    """
    if not tree.loaded:
        raise MissingDependencyError(
            "tree not loaded",
            user_message="Load the tree before loading multiplot data.",
        )

    raw_collections = json_data.get('collections') if isinstance(json_data, dict) else None
    if not raw_collections or not isinstance(raw_collections, list):
        raise MalformedInputError("Multiplot JSON does not have collections")

    rng = rng or random.Random()
    collections = [
        _parse_collection(raw, pos, rng)
        for pos, raw in enumerate(raw_collections)
    ]

    to_display = get_collection_to_display(
        collections, json_data.get('default_collection'))
    field_values = get_collection_field_values(to_display)

    controls = get_collection_display_controls(to_display, base_controls)
    options = {c.key: c.display_title for c in collections}

    return LoadResult(
        collections=collections,
        collection_to_display=to_display,
        collection_field_values=field_values,
        controls=replace(controls, collection_options=options),
    )


def read_json_file(filepath: str) -> Any:
    """Parse the JSON file at *filepath* (a UTF-8 BOM is tolerated)."""
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"JSON file not found: {filepath}")
    with open(filepath, 'r', encoding='utf-8-sig') as fh:
        try:
            return json.load(fh)
        except json.JSONDecodeError as exc:
            raise MalformedInputError(
                f"'{os.path.basename(filepath)}' is not valid JSON: {exc}",
                context={'path': filepath},
            ) from exc


def load_multiplot_json(
    filepath: str,
    tree: TreeState,
    *,
    rng: Optional[random.Random] = None,
    base_controls: Optional[Controls] = None,
) -> LoadResult:
    """Read *filepath* and delegate to ``load_multiplot_collections``."""
    return load_multiplot_collections(
        read_json_file(filepath), tree, rng=rng, base_controls=base_controls)
