"""
Main window for the Strain Multiplot Viewer.

Hosts the ControlsPanel (left) and MultiplotView (right) in a
horizontal splitter, with a menu bar and status bar.
"""

import os
import random

from PySide6.QtWidgets import (
    QFileDialog, QMainWindow, QMessageBox, QScrollArea, QSplitter,
    QVBoxLayout, QWidget,
)
from PySide6.QtGui import QAction
from PySide6.QtCore import Qt

from . import APP_NAME, APP_VERSION
from .errors import MultiplotError
from .example_data import generate_example_data
from .export import export_png
from .gui_controls_panel import ControlsPanel
from .gui_multiplot_view import MultiplotView
from .json_loader import read_json_file
from .store import MultiplotStore
from .tree import load_tree_json, tree_from_nodes


class MultiplotMainWindow(QMainWindow):
    """Main window for the Strain Multiplot Viewer."""

    def __init__(self):
        super().__init__()
        self._store = MultiplotStore()

        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(1100, 700)

        self._setup_ui()
        self._setup_menu()
        self._store.subscribe(lambda action: self._on_store_changed())

        self.statusBar().showMessage("Ready: load a tree, then a collections file")

    @property
    def store(self) -> MultiplotStore:
        return self._store

    # ── UI setup ─────────────────────────────────────────────────────

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(4, 4, 4, 4)
        main_layout.setSpacing(4)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        self._controls_panel = ControlsPanel(self._store)
        scroll = QScrollArea()
        scroll.setWidget(self._controls_panel)
        scroll.setWidgetResizable(True)
        scroll.setMinimumWidth(280)
        scroll.setMaximumWidth(420)

        self._multiplot_view = MultiplotView(self._store)

        splitter.addWidget(scroll)
        splitter.addWidget(self._multiplot_view)
        splitter.setStretchFactor(0, 0)
        splitter.setStretchFactor(1, 1)
        splitter.setSizes([320, 780])

        main_layout.addWidget(splitter)

    def _setup_menu(self):
        menubar = self.menuBar()

        # ── File menu ────────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        act_load_tree = QAction("Load Tree...", self)
        act_load_tree.triggered.connect(lambda *_: self._browse_tree())
        file_menu.addAction(act_load_tree)

        act_load_collections = QAction("Load Collections...", self)
        act_load_collections.triggered.connect(
            lambda *_: self._browse_collections())
        file_menu.addAction(act_load_collections)

        file_menu.addSeparator()

        act_export = QAction("Export PNG...", self)
        act_export.triggered.connect(lambda *_: self._export_png())
        file_menu.addAction(act_export)

        file_menu.addSeparator()

        act_exit = QAction("Exit", self)
        act_exit.triggered.connect(self.close)
        file_menu.addAction(act_exit)

        # ── View menu ────────────────────────────────────────────────
        view_menu = menubar.addMenu("View")
        self._panel_actions = {}
        for panel in self._store.controls.panels_available:
            act = QAction(f"Show {panel.title()}", self)
            act.setCheckable(True)
            act.setChecked(panel in self._store.controls.panels_to_display)
            act.triggered.connect(
                lambda *_, p=panel: self._store.toggle_panel_display(p))
            view_menu.addAction(act)
            self._panel_actions[panel] = act

        # ── Examples menu ────────────────────────────────────────────
        examples_menu = menubar.addMenu("Examples")

        act_load_example = QAction("Load Example Dataset", self)
        act_load_example.triggered.connect(lambda *_: self._load_example())
        examples_menu.addAction(act_load_example)

        # ── Help menu ────────────────────────────────────────────────
        help_menu = menubar.addMenu("Help")

        act_about = QAction("About", self)
        act_about.triggered.connect(lambda *_: self._show_about())
        help_menu.addAction(act_about)

    # ── Loading ──────────────────────────────────────────────────────

    def _show_error(self, title, exc):
        message = exc.user_message if isinstance(exc, MultiplotError) else str(exc)
        QMessageBox.critical(self, title, message)
        self.statusBar().showMessage(f"{title}: {message}", 5000)

    def load_tree_file(self, path) -> bool:
        try:
            tree = load_tree_json(path)
        except (MultiplotError, OSError) as exc:
            self._show_error("Tree Load Error", exc)
            return False
        self._store.update_tree(tree)
        self.statusBar().showMessage(
            f"Loaded tree {os.path.basename(path)} ({len(tree.nodes)} nodes)", 5000)
        return True

    def load_collections_file(self, path) -> bool:
        try:
            self._store.load_collections(read_json_file(path))
        except (MultiplotError, OSError) as exc:
            self._show_error("Collections Load Error", exc)
            return False
        return True

    def _browse_tree(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Tree JSON", "", "JSON Files (*.json);;All Files (*)")
        if path:
            self.load_tree_file(path)

    def _browse_collections(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Collections JSON", "", "JSON Files (*.json);;All Files (*)")
        if path:
            self.load_collections_file(path)

    def _load_example(self):
        collections_json, tree_json = generate_example_data(42)
        self._store.update_tree(tree_from_nodes(tree_json['nodes']))
        try:
            self._store.load_collections(collections_json, rng=random.Random(42))
        except MultiplotError as exc:
            self._show_error("Example Load Error", exc)

    # ── Slots ────────────────────────────────────────────────────────

    def _on_store_changed(self):
        controls = self._store.controls
        for panel, act in self._panel_actions.items():
            act.setChecked(panel in controls.panels_to_display)
        self._multiplot_view.setVisible('multiplot' in controls.panels_to_display)

        if not self._store.multiplot.loaded:
            return
        pipeline = self._multiplot_view.pipeline
        collection = self._store.multiplot.collection_to_display
        shown = len(pipeline.filtered_measurements())
        self.statusBar().showMessage(
            f"{collection.display_title}: showing {shown} of "
            f"{len(collection.measurements)} measurements"
        )

    def _export_png(self):
        if not self._store.multiplot.loaded:
            QMessageBox.warning(self, "Nothing to Export",
                                "No multiplot is currently displayed.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Export Multiplot as PNG", "",
            "PNG Files (*.png);;All Files (*)",
        )
        if not path:
            return
        try:
            written = export_png(self._multiplot_view.fig, path)
        except OSError as exc:
            self._show_error("Export Error", exc)
            return
        self.statusBar().showMessage(
            f"Exported to {os.path.basename(written)}", 5000)

    def _show_about(self):
        QMessageBox.about(
            self,
            f"About {APP_NAME}",
            f"<h3>{APP_NAME} v{APP_VERSION}</h3>"
            f"<p>Grouped scatter plots of per-strain measurements, "
            f"filtered by tree visibility and by measurement fields.</p>"
            f"<p>Hover a point to see the full measurement.</p>",
        )
