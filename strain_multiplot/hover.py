"""
Hover tooltip helpers for the multiplot.

The tooltip sits to the right of a hovered point in the left half of
the container and to its left otherwise; likewise below the point in
the top half and above it in the bottom half.  Positions are CSS-like
offsets from the container edges, in pixels.
"""

from typing import Any, Dict, List, Mapping

from .constants import HOVER_OFFSET_X, HOVER_OFFSET_Y


def hover_panel_position(
    element_left: float,
    element_top: float,
    container_width: float,
    container_height: float,
    *,
    scroll_top: float = 0.0,
    offset_x: float = HOVER_OFFSET_X,
    offset_y: float = HOVER_OFFSET_Y,
) -> Dict[str, float]:
    """Place the tooltip for an element at (*element_left*, *element_top*).

    Parameters
    ----------
    element_left, element_top : float
        Element position relative to the container's content, i.e.
        *element_top* already includes the scroll offset.
    container_width, container_height : float
        Visible size of the container.
    scroll_top : float
        Current vertical scroll of the container.

    Returns
    -------
    dict
        Exactly one of ``left`` / ``right`` and one of ``top`` /
        ``bottom``.
    """
    position = {}
    if element_left < container_width * 0.5:
        position['left'] = element_left + offset_x
    else:
        position['right'] = container_width - element_left + offset_x

    if element_top - scroll_top < container_height * 0.5:
        position['top'] = element_top + offset_y
    else:
        position['bottom'] = container_height - element_top + offset_y
    return position


def format_hover_lines(measurement: Mapping[str, Any]) -> List[str]:
    """One ``"key : value"`` line per measurement field."""
    return [f"{key} : {value}" for key, value in measurement.items()]
