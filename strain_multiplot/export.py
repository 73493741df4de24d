"""
Export utilities for the Strain Multiplot Viewer.

Saves the current multiplot figure as a PNG.  The figure keeps its
on-screen pixel layout; only the resolution is raised.
"""

import os

from matplotlib.figure import Figure

from .constants import EXPORT_DPI


def export_png(fig: Figure, filepath: str, *, dpi: int = EXPORT_DPI) -> str:
    """Export *fig* as a PNG and return the path written.

    A ``.png`` suffix is appended when missing.
    """
    if not filepath.lower().endswith('.png'):
        filepath += '.png'
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(
        filepath,
        dpi=dpi,
        facecolor=fig.get_facecolor(),
        edgecolor='none',
    )
    return filepath
