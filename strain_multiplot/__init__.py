"""
Strain Multiplot Viewer v1.0.0

Interactive grouped scatter plots ("multiplots") of per-strain
measurements that share their strains with a companion phylogenetic
tree.  Measurements are filtered by tree visibility and user-selected
field filters, grouped into subplot rows, and drawn on a shared value
axis with random vertical jitter.

Reads a collections JSON file plus a tree JSON file and renders the
result with matplotlib inside a PySide6 window.
"""

APP_NAME = "Strain Multiplot Viewer"
APP_VERSION = "1.0.0"
APP_DATE = "2026-10-19"
__version__ = APP_VERSION
