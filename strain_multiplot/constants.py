"""
Constants for the Strain Multiplot Viewer.

Centralises tree visibility sentinels, generated measurement field
names, plot layout presets, colours, and the matplotlib style dicts.
"""

# ── Tree visibility sentinels (shared with the tree component) ──────────
NODE_NOT_VISIBLE = 0
NODE_VISIBLE_TO_MAP_ONLY = 1
NODE_VISIBLE = 2

# ── Measurement fields ───────────────────────────────────────────────────
FIELD_STRAIN = "strain"
FIELD_VALUE = "value"
FIELD_JITTER = "jitter"
FIELD_ID = "id"

# Skipped when indexing distinct field values for the filter menu
IGNORED_FILTER_FIELDS = (FIELD_VALUE, FIELD_ID, FIELD_JITTER)

# ── DOM-style identifiers ────────────────────────────────────────────────
MEASUREMENT_ID_PREFIX = "multiplot_measurement_"
THRESHOLD_ID = "multiplotThreshold"

# ── Layout presets (pixels) ──────────────────────────────────────────────
LEFT_PADDING = 120
RIGHT_PADDING = 30
TOP_PADDING = 20
BOTTOM_PADDING = 50
SUBPLOT_HEIGHT = 100
SUBPLOT_PADDING = 20
CIRCLE_RADIUS = 3
HOVER_CIRCLE_RADIUS = 6

# Ticks requested when "nicing" a linear scale domain
NICE_TICK_COUNT = 10

# Screen resolution used to convert pixel geometry to figure inches
SCREEN_DPI = 100

# ── Scene colours ────────────────────────────────────────────────────────
DEFAULT_STRAIN_COLOR = "#AAA"
BAND_COLOR = "#adb1b3"
BAND_ALPHA = 0.15
THRESHOLD_COLOR = "#DDD"
THRESHOLD_WIDTH_PX = 2

# ── Hover tooltip ────────────────────────────────────────────────────────
HOVER_OFFSET_X = 10
HOVER_OFFSET_Y = 10
HOVER_PANEL_WIDTH = 200

# ── Panels ───────────────────────────────────────────────────────────────
PANELS_AVAILABLE = ["tree", "map", "multiplot"]
GRID_PANELS = ["tree", "map"]

DEFAULT_PLOT_TITLE = "Multiplot"
FILTER_BADGE_MAX_CHARS = 25

# ── Colour cycle for strains without a tree colour (example data) ───────
STRAIN_PALETTE = [
    '#4C90C0', '#5DA8A3', '#8EBC66', '#C1BA47', '#E29E39',
    '#E2562B', '#3F52CD', '#73B47E', '#D4B13F', '#DC2F24',
]

# ── Dark GUI colour palette ──────────────────────────────────────────────
DARK_COLORS = {
    'bg':           '#1e1e2e',
    'bg_alt':       '#252536',
    'bg_widget':    '#2a2a3c',
    'bg_input':     '#333348',
    'fg':           '#cdd6f4',
    'fg_dim':       '#9399b2',
    'accent':       '#89b4fa',
    'border':       '#45475a',
    'selection':    '#45475a',
}

# ── Matplotlib style for the plot canvas (light, like the web panel) ────
PLOT_STYLE = {
    'figure.facecolor':  '#ffffff',
    'axes.facecolor':    'none',
    'axes.edgecolor':    '#333333',
    'axes.labelcolor':   '#333333',
    'text.color':        '#333333',
    'xtick.color':       '#333333',
    'ytick.color':       '#333333',
    'xtick.labelsize':   8,
    'ytick.labelsize':   8,
    'axes.labelsize':    9,
}

# ── Export settings ──────────────────────────────────────────────────────
EXPORT_DPI = 300

FONT_FAMILIES = [
    "Segoe UI", "DejaVu Sans", "Liberation Sans", "Noto Sans",
    "Helvetica", "Arial", "sans-serif",
]
