"""
Entry point for the Strain Multiplot Viewer.

Usage:
    python -m strain_multiplot [collections.json] [--tree tree.json]
"""

import argparse
import os
import sys
import traceback


def _check_dependencies():
    """Verify required packages are installed."""
    missing = []
    try:
        import PySide6  # noqa: F401
    except ImportError:
        missing.append("PySide6")
    try:
        import matplotlib  # noqa: F401
    except ImportError:
        missing.append("matplotlib")
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")

    if missing:
        print(
            f"Missing required packages: {', '.join(missing)}\n"
            f"Install with: pip install {' '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)


def _exception_hook(exc_type, exc_value, exc_tb):
    """Global exception handler to prevent silent crashes."""
    msg = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
    print(f"Unhandled exception:\n{msg}", file=sys.stderr)

    # Show a dialog when a QApplication is running
    from PySide6.QtWidgets import QApplication, QMessageBox
    if QApplication.instance() is not None:
        QMessageBox.critical(
            None, "Unhandled Error",
            f"An unexpected error occurred:\n\n"
            f"{exc_type.__name__}: {exc_value}\n\n"
            f"See console for full traceback.",
        )


def _parse_args(argv):
    from . import APP_NAME, APP_VERSION
    parser = argparse.ArgumentParser(
        prog="strain_multiplot",
        description=f"{APP_NAME} v{APP_VERSION}",
    )
    parser.add_argument(
        "collections", nargs="?",
        help="multiplot collections JSON to open at startup",
    )
    parser.add_argument(
        "--tree",
        help="tree JSON providing strain visibility and colours",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Launch the Strain Multiplot Viewer GUI."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    _check_dependencies()

    sys.excepthook = _exception_hook

    # Configure matplotlib backend before importing Qt widgets
    os.environ.setdefault("QT_API", "pyside6")
    import matplotlib
    matplotlib.use('QtAgg')

    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QFont, QFontDatabase

    from .constants import FONT_FAMILIES
    from .theme import get_dark_stylesheet
    from .gui_main import MultiplotMainWindow

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    font = QFont()
    for family in FONT_FAMILIES:
        if QFontDatabase.hasFamily(family):
            font.setFamily(family)
            break
    font.setPointSize(10)
    app.setFont(font)

    app.setStyleSheet(get_dark_stylesheet())

    window = MultiplotMainWindow()
    window.show()
    if args.tree:
        window.load_tree_file(args.tree)
    if args.collections:
        window.load_collections_file(args.collections)

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
