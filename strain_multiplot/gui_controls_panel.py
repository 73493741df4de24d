"""
Options panel (left side) for the Strain Multiplot Viewer.

Collection and group-by selectors, a searchable filter picker, one
badge row per filtered field and the threshold toggle.  Every widget
dispatches to the ``MultiplotStore``; the panel rebuilds itself from
the store after each dispatch.
"""

import sys

from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QCompleter, QFormLayout, QGroupBox, QHBoxLayout,
    QLabel, QPushButton, QVBoxLayout, QWidget,
)
from PySide6.QtCore import Qt

from .constants import DARK_COLORS, FILTER_BADGE_MAX_CHARS
from .controls import (
    create_filter_options, create_key_title_options, filter_field_badges,
    filter_summary, truncate_string,
)
from .store import MultiplotStore

_PICKER_PLACEHOLDER = "Filter by..."


class ControlsPanel(QWidget):
    """Multiplot options panel bound to a store."""

    def __init__(self, store: MultiplotStore, parent=None):
        super().__init__(parent)
        self._store = store
        self._filter_option_values = []
        self._setup_ui()
        self._connect_signals()
        self._unsubscribe = store.subscribe(lambda action: self.sync_from_store())
        self.sync_from_store()

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(10)

        # ── Data ─────────────────────────────────────────────────────
        grp_data = QGroupBox("Data")
        form = QFormLayout(grp_data)

        self._lbl_collection = QLabel("Collection:")
        self._cmb_collection = QComboBox()
        form.addRow(self._lbl_collection, self._cmb_collection)

        self._cmb_group_by = QComboBox()
        form.addRow("Group by:", self._cmb_group_by)

        self._chk_threshold = QCheckBox("Show threshold")
        form.addRow(self._chk_threshold)
        layout.addWidget(grp_data)

        # ── Filters ──────────────────────────────────────────────────
        grp_filters = QGroupBox("Filters")
        filters_layout = QVBoxLayout(grp_filters)

        self._cmb_filter = QComboBox()
        self._cmb_filter.setEditable(True)
        self._cmb_filter.setInsertPolicy(QComboBox.InsertPolicy.NoInsert)
        self._cmb_filter.completer().setFilterMode(Qt.MatchFlag.MatchContains)
        self._cmb_filter.completer().setCompletionMode(
            QCompleter.CompletionMode.PopupCompletion)
        filters_layout.addWidget(self._cmb_filter)

        self._badges_layout = QVBoxLayout()
        self._badges_layout.setSpacing(6)
        filters_layout.addLayout(self._badges_layout)
        layout.addWidget(grp_filters)

        layout.addStretch()

    def _connect_signals(self):
        self._cmb_collection.activated.connect(
            lambda idx: self._on_collection_selected(idx))
        self._cmb_group_by.activated.connect(
            lambda idx: self._on_group_by_selected(idx))
        self._cmb_filter.activated.connect(
            lambda idx: self._on_filter_picked(idx))
        self._chk_threshold.toggled.connect(
            lambda checked: self._store.toggle_threshold(checked))

    # ── Store → widgets ──────────────────────────────────────────────

    def sync_from_store(self):
        """Repopulate every widget from the current store state."""
        controls = self._store.controls
        multiplot = self._store.multiplot
        collection = multiplot.collection_to_display
        self.setEnabled(multiplot.loaded)

        collection_options = create_key_title_options(controls.collection_options)
        self._fill_combo(self._cmb_collection, collection_options,
                         controls.collection_key)
        show_selector = len(collection_options) > 1
        self._lbl_collection.setVisible(show_selector)
        self._cmb_collection.setVisible(show_selector)

        self._fill_combo(self._cmb_group_by,
                         create_key_title_options(controls.groupings),
                         controls.group_by_key)

        self._chk_threshold.blockSignals(True)
        self._chk_threshold.setEnabled(
            collection is not None and collection.threshold is not None)
        self._chk_threshold.setChecked(controls.show_threshold)
        self._chk_threshold.blockSignals(False)

        filter_options = create_filter_options(
            multiplot.collection_field_values, controls.groupings)
        self._filter_option_values = [opt.value for opt in filter_options]
        self._cmb_filter.blockSignals(True)
        self._cmb_filter.clear()
        self._cmb_filter.addItem(_PICKER_PLACEHOLDER)
        for opt in filter_options:
            self._cmb_filter.addItem(opt.label)
        self._cmb_filter.setCurrentIndex(0)
        self._cmb_filter.blockSignals(False)

        self._rebuild_badges()

    @staticmethod
    def _fill_combo(combo, options, current_value):
        combo.blockSignals(True)
        combo.clear()
        for opt in options:
            combo.addItem(opt.label, opt.value)
        idx = combo.findData(current_value)
        if idx >= 0:
            combo.setCurrentIndex(idx)
        combo.blockSignals(False)

    def _rebuild_badges(self):
        while self._badges_layout.count():
            item = self._badges_layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()

        controls = self._store.controls
        titles = controls.groupings
        summary = {s['field']: s for s in filter_summary(controls.filters, titles)}
        for badge in filter_field_badges(controls.filters, titles):
            self._badges_layout.addWidget(
                self._make_badge_row(badge, summary[badge.field]['values']))

    def _make_badge_row(self, badge, values):
        box = QWidget()
        box_layout = QVBoxLayout(box)
        box_layout.setContentsMargins(0, 0, 0, 0)
        box_layout.setSpacing(2)

        header = QHBoxLayout()
        lbl = QLabel(truncate_string(badge.title, FILTER_BADGE_MAX_CHARS))
        color = DARK_COLORS['accent'] if badge.active else DARK_COLORS['fg_dim']
        lbl.setStyleSheet(f"color: {color}; font-weight: bold;")
        lbl.setToolTip(badge.title)
        header.addWidget(lbl, 1)

        fld = badge.field
        for text, tip, slot in (
            ("All", "Activate all filters for this field",
             lambda *_: self._store.toggle_all_field_filters(fld, True)),
            ("None", "Inactivate all filters for this field",
             lambda *_: self._store.toggle_all_field_filters(fld, False)),
            ("✕", "Remove all filters for this field",
             lambda *_: self._store.remove_all_field_filters(fld)),
        ):
            btn = QPushButton(text)
            btn.setToolTip(tip)
            btn.setFixedHeight(22)
            btn.clicked.connect(slot)
            header.addWidget(btn)
        box_layout.addLayout(header)

        for entry in values:
            value = entry['value']
            row = QHBoxLayout()
            row.setContentsMargins(12, 0, 0, 0)
            btn_value = QPushButton(truncate_string(str(value), FILTER_BADGE_MAX_CHARS))
            btn_value.setCheckable(True)
            btn_value.setChecked(entry['active'])
            btn_value.setToolTip(f"{fld} → {value}")
            btn_value.toggled.connect(
                lambda checked, v=value: self._store.toggle_single_filter(fld, v, checked))
            row.addWidget(btn_value, 1)

            btn_remove = QPushButton("✕")
            btn_remove.setFixedSize(22, 22)
            btn_remove.clicked.connect(
                lambda *_, v=value: self._store.remove_single_filter(fld, v))
            row.addWidget(btn_remove)
            box_layout.addLayout(row)
        return box

    # ── Widgets → store ──────────────────────────────────────────────

    def _on_collection_selected(self, idx):
        key = self._cmb_collection.itemData(idx)
        if key is not None and key != self._store.controls.collection_key:
            self._store.change_collection(key)

    def _on_group_by_selected(self, idx):
        key = self._cmb_group_by.itemData(idx)
        if key is None or key == self._store.controls.group_by_key:
            return
        try:
            self._store.change_group_by(key)
        except ValueError as exc:
            print(f"[Multiplot] Group-by change ignored: {exc}", file=sys.stderr)

    def _on_filter_picked(self, idx):
        # index 0 is the placeholder
        if idx <= 0 or idx > len(self._filter_option_values):
            return
        fld, value = self._filter_option_values[idx - 1]
        self._store.toggle_single_filter(fld, value, True)

    def closeEvent(self, event):
        self._unsubscribe()
        super().closeEvent(event)
