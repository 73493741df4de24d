"""
Example data generator for the Strain Multiplot Viewer.

Creates a synthetic collections JSON and a matching tree for testing
and demonstration.  The example has two collections over 40 strains
in four clades:

- ``hi_titers``: log2 HI titers against three reference sera, with a
  threshold at 3.0 and ``serum`` as the default group-by.
- ``fra_titers``: FRA titers grouped by clade, without a threshold.

A few strains are hidden in the tree to exercise visibility filtering.
"""

import json
import os
import random
from typing import Dict, Tuple

from .constants import STRAIN_PALETTE

_CLADES = ['3C.2a1b', '3C.3a', '3C.2a2', '2a.1']
_SERA = ['A/Texas/50/2012', 'A/HongKong/4801/2014', 'A/Kansas/14/2017']
_SOURCES = ['CDC', 'Crick', 'VIDRL']


def generate_example_data(seed: int = 42) -> Tuple[dict, dict]:
    """Return ``(collections_json, tree_json)`` for the example dataset."""
    rng = random.Random(seed)

    strains = []
    for idx in range(40):
        clade = _CLADES[idx % len(_CLADES)]
        strains.append((f"A/Example/{idx + 1}/2021", clade))

    # ── HI titers: one measurement per strain × serum ────────────────
    hi_measurements = []
    for strain, clade in strains:
        clade_drop = _CLADES.index(clade) * 0.8
        for serum_idx, serum in enumerate(_SERA):
            value = rng.gauss(6.0 - clade_drop + serum_idx * 0.5, 0.9)
            hi_measurements.append({
                'strain': strain,
                'clade': clade,
                'serum': serum,
                'source': rng.choice(_SOURCES),
                'value': round(value, 3),
            })

    # ── FRA titers: sparser, 1–2 replicates per strain ──────────────
    fra_measurements = []
    for strain, clade in strains:
        for replicate in range(rng.randint(1, 2)):
            fra_measurements.append({
                'strain': strain,
                'clade': clade,
                'replicate': replicate + 1,
                'value': round(rng.gauss(8.0 - _CLADES.index(clade), 1.2), 3),
            })

    collections_json = {
        'default_collection': 'hi_titers',
        'collections': [
            {
                'key': 'hi_titers',
                'title': 'HI titers',
                'x_axis_label': 'log2 titer',
                'threshold': 3.0,
                'groupings': [
                    {'key': 'clade', 'title': 'Clade'},
                    {'key': 'serum', 'title': 'Reference serum'},
                    {'key': 'source'},
                ],
                'display_defaults': {'group_by': 'serum', 'show_threshold': True},
                'measurements': hi_measurements,
            },
            {
                'key': 'fra_titers',
                'title': 'FRA titers',
                'x_axis_label': 'log2 titer',
                'threshold': None,
                'groupings': [{'key': 'clade', 'title': 'Clade'}],
                'measurements': fra_measurements,
            },
        ],
    }

    clade_colors = {c: STRAIN_PALETTE[i * 2] for i, c in enumerate(_CLADES)}
    hidden = set(rng.sample(range(len(strains)), 4))
    tree_nodes = [{'name': 'ROOT', 'has_children': True}]
    tree_nodes.extend(
        {
            'name': strain,
            'has_children': False,
            'visible': idx not in hidden,
            'color': clade_colors[clade],
        }
        for idx, (strain, clade) in enumerate(strains)
    )
    return collections_json, {'nodes': tree_nodes}


def write_example_files(output_dir: str, seed: int = 42) -> Dict[str, str]:
    """Write the example to *output_dir*; returns ``{"collections", "tree"}`` paths."""
    os.makedirs(output_dir, exist_ok=True)
    collections_json, tree_json = generate_example_data(seed)
    paths = {
        'collections': os.path.join(output_dir, 'multiplot_collections.json'),
        'tree': os.path.join(output_dir, 'tree.json'),
    }
    for key, data in (('collections', collections_json), ('tree', tree_json)):
        with open(paths[key], 'w', encoding='utf-8') as fh:
            json.dump(data, fh, indent=1)
    return paths


if __name__ == '__main__':
    import tempfile
    out_dir = os.path.join(tempfile.gettempdir(), 'strain_multiplot_example')
    for name, path in write_example_files(out_dir).items():
        print(f"  {name}: {path} ({os.path.getsize(path):,} bytes)")
