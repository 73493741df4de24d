"""
Theme and stylesheet for the Strain Multiplot Viewer.

Dark Qt stylesheet for the options panel and window chrome, and the
helper that applies the plot style to matplotlib rcParams.
"""

from .constants import DARK_COLORS


def get_dark_stylesheet() -> str:
    c = DARK_COLORS
    return f"""
    QMainWindow, QWidget {{
        background-color: {c['bg']};
        color: {c['fg']};
        font-size: 13px;
    }}
    QGroupBox {{
        border: 1px solid {c['border']};
        border-radius: 6px;
        margin-top: 12px;
        padding-top: 16px;
        font-weight: bold;
        color: {c['accent']};
    }}
    QGroupBox::title {{
        subcontrol-origin: margin;
        left: 12px;
        padding: 0 6px;
    }}
    QPushButton {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 4px 10px;
    }}
    QPushButton:hover {{
        border-color: {c['accent']};
    }}
    QPushButton:checked {{
        background-color: {c['accent']};
        color: {c['bg']};
    }}
    QComboBox {{
        background-color: {c['bg_input']};
        color: {c['fg']};
        border: 1px solid {c['border']};
        border-radius: 4px;
        padding: 4px 8px;
    }}
    QComboBox QAbstractItemView {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        selection-background-color: {c['selection']};
    }}
    QScrollArea {{
        border: none;
    }}
    QCheckBox {{
        color: {c['fg']};
        spacing: 8px;
    }}
    QLabel#hoverPanel {{
        background-color: {c['bg_widget']};
        color: {c['fg']};
        border: 1px solid {c['accent']};
        border-radius: 10px;
        padding: 10px;
        font-size: 12px;
    }}
    QStatusBar {{
        background-color: {c['bg_alt']};
        color: {c['fg_dim']};
    }}
    """


def apply_plot_style(style_dict: dict) -> None:
    """Apply a style dictionary to matplotlib rcParams."""
    import matplotlib as mpl
    for key, value in style_dict.items():
        mpl.rcParams[key] = value
