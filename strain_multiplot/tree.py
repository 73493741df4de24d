"""
Tree input for the Strain Multiplot Viewer.

The phylogenetic tree itself lives elsewhere; this module only builds
the ``TreeState`` the multiplot reads: node names, per-node visibility
and per-node colour.  The tree JSON accepted here is::

    {"nodes": [{"name": "A/1", "has_children": false,
                "visible": true, "color": "#4C90C0"}, ...]}
"""

import os
from typing import Iterable, List

from .constants import NODE_NOT_VISIBLE, NODE_VISIBLE, STRAIN_PALETTE
from .data_model import TreeNode, TreeState
from .errors import MalformedInputError
from .json_loader import read_json_file


def tree_from_nodes(raw_nodes: List[dict]) -> TreeState:
    nodes, visibility, colors = [], [], []
    for idx, raw in enumerate(raw_nodes):
        if not isinstance(raw, dict) or not raw.get('name'):
            raise MalformedInputError(f"Tree node {idx} has no name.")
        nodes.append(TreeNode(name=raw['name'],
                              has_children=bool(raw.get('has_children', False))))
        visibility.append(
            NODE_VISIBLE if raw.get('visible', True) else NODE_NOT_VISIBLE)
        colors.append(raw.get('color') or STRAIN_PALETTE[idx % len(STRAIN_PALETTE)])
    return TreeState(loaded=True, nodes=nodes, visibility=visibility,
                     node_colors=colors)


def tree_from_strains(strains: Iterable[str]) -> TreeState:
    """All-visible tree of terminal nodes coloured from the palette."""
    unique = list(dict.fromkeys(strains))
    return tree_from_nodes([{'name': s} for s in unique])


def load_tree_json(filepath: str) -> TreeState:
    data = read_json_file(filepath)
    raw_nodes = data.get('nodes') if isinstance(data, dict) else None
    if not isinstance(raw_nodes, list):
        raise MalformedInputError(
            f"Tree JSON '{os.path.basename(filepath)}' has no nodes list."
        )
    return tree_from_nodes(raw_nodes)
