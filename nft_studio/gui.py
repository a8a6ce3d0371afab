# gui.py
import os
import sys

from PySide6.QtCore import QThread, Signal
from PySide6.QtWidgets import (
    QApplication, QComboBox, QFileDialog, QGroupBox, QHBoxLayout, QLabel,
    QLineEdit, QListWidget, QMessageBox, QProgressBar, QPushButton, QSpinBox,
    QTabWidget, QTextEdit, QVBoxLayout, QWidget
)

from nft_studio.assembler import MAX_SUPPLY_LIMIT
from nft_studio.catalog import load_catalog_dir
from nft_studio.config import SAVED_CONFIGS_PATH, StudioConfig, load_configs, save_configs
from nft_studio.errors import ConfigurationError
from nft_studio.export import generate_to_dir
from nft_studio.legendary import load_legendary_dir
from nft_studio.stats import trait_distribution


# =========================================================
# Worker thread for NFT generation
# =========================================================
class GenerationWorker(QThread):
    log_signal = Signal(str)
    progress_signal = Signal(int)
    done_signal = Signal(object)
    error_signal = Signal(str)

    def __init__(self, config, legendaries=None):
        super().__init__()
        self.config = config
        self.legendaries = legendaries

    def run(self):
        try:
            result = generate_to_dir(
                self.config,
                legendaries=self.legendaries,
                progress_callback=lambda pct: self.progress_signal.emit(pct),
                log_callback=lambda msg: self.log_signal.emit(msg),
                should_cancel=self.isInterruptionRequested,
            )
        except ConfigurationError as e:
            self.error_signal.emit(str(e))
            return
        except (OSError, ValueError) as e:
            self.log_signal.emit(f"⚠️ Error: {e}")
            self.error_signal.emit(f"{type(e).__name__}: {e}")
            return
        self.done_signal.emit(result)


# =========================================================
# Main GUI
# =========================================================
class StudioWindow(QWidget):
    def __init__(self, configs_path=SAVED_CONFIGS_PATH):
        super().__init__()
        self.setWindowTitle("C3 NFT STUDIO")
        self.setGeometry(100, 100, 1100, 820)

        self.configs_path = configs_path
        self.configs = load_configs(configs_path)
        self.legendaries = None
        self.worker = None

        layout = QVBoxLayout()
        self.tabs = QTabWidget()
        self.tabs.addTab(self.build_project_tab(), "Project")
        self.tabs.addTab(self.build_legendary_tab(), "Legendaries")
        self.tabs.addTab(self.build_generation_tab(), "Generate NFTs")
        layout.addWidget(self.tabs)
        self.setLayout(layout)

        self.refresh_config_list()

    # =========================================================
    # TAB: Project (dirs, layer order, collection metadata)
    # =========================================================
    def build_project_tab(self):
        tab = QWidget()
        layout = QVBoxLayout()

        cfg_row = QHBoxLayout()
        self.cfg_select = QComboBox()
        self.cfg_name_input = QLineEdit()
        self.cfg_name_input.setPlaceholderText("Config name to save...")
        btn_load = QPushButton("Load")
        btn_load.clicked.connect(self.load_selected_config)
        btn_save = QPushButton("Save")
        btn_save.clicked.connect(self.save_current_config)
        cfg_row.addWidget(QLabel("Saved"))
        cfg_row.addWidget(self.cfg_select, 1)
        cfg_row.addWidget(btn_load)
        cfg_row.addWidget(self.cfg_name_input, 1)
        cfg_row.addWidget(btn_save)

        dir_box = QGroupBox("Directories")
        dir_layout = QVBoxLayout()
        self.layers_dir = QLineEdit()
        self.legendaries_dir = QLineEdit()
        self.output_dir = QLineEdit()
        for label, edit, handler in (
            ("Layers Dir", self.layers_dir, self.browse_layers_dir),
            ("Legendaries Dir", self.legendaries_dir, self.browse_legendaries_dir),
            ("Output Dir", self.output_dir, self.browse_output_dir),
        ):
            row = QHBoxLayout()
            btn = QPushButton("Browse")
            btn.clicked.connect(handler)
            row.addWidget(QLabel(label))
            row.addWidget(edit)
            row.addWidget(btn)
            dir_layout.addLayout(row)
        dir_box.setLayout(dir_layout)

        order_box = QGroupBox("Layer Order (top = drawn first)")
        order_layout = QHBoxLayout()
        self.layer_order = QListWidget()
        self.layer_order.setSelectionMode(QListWidget.ExtendedSelection)
        btns = QVBoxLayout()
        for text, handler in (
            ("Reload Layers", self.reload_layers),
            ("Move Up", self.move_layer_up),
            ("Move Down", self.move_layer_down),
            ("Exclude", self.exclude_layers),
            ("Include", self.include_layers),
        ):
            b = QPushButton(text)
            b.clicked.connect(handler)
            btns.addWidget(b)
        btns.addStretch()
        self.excluded_layers = QListWidget()
        order_layout.addWidget(self.layer_order, 2)
        order_layout.addLayout(btns)
        excl_col = QVBoxLayout()
        excl_col.addWidget(QLabel("Excluded"))
        excl_col.addWidget(self.excluded_layers)
        order_layout.addLayout(excl_col, 1)
        order_box.setLayout(order_layout)

        meta_box = QGroupBox("Collection")
        meta_layout = QVBoxLayout()
        self.coll_name = QLineEdit("Collection")
        self.coll_symbol = QLineEdit()
        self.coll_desc = QLineEdit()
        self.width_input = QSpinBox(); self.width_input.setRange(1, 8192); self.width_input.setValue(1000)
        self.height_input = QSpinBox(); self.height_input.setRange(1, 8192); self.height_input.setValue(1000)
        self.seed_input = QLineEdit()
        self.seed_input.setPlaceholderText("blank = random")
        for label, w in (("Name", self.coll_name), ("Symbol", self.coll_symbol), ("Description", self.coll_desc)):
            row = QHBoxLayout()
            row.addWidget(QLabel(label))
            row.addWidget(w)
            meta_layout.addLayout(row)
        size_row = QHBoxLayout()
        size_row.addWidget(QLabel("Width"))
        size_row.addWidget(self.width_input)
        size_row.addWidget(QLabel("Height"))
        size_row.addWidget(self.height_input)
        size_row.addWidget(QLabel("Seed"))
        size_row.addWidget(self.seed_input)
        meta_layout.addLayout(size_row)
        meta_box.setLayout(meta_layout)

        layout.addLayout(cfg_row)
        layout.addWidget(dir_box)
        layout.addWidget(order_box, 1)
        layout.addWidget(meta_box)
        tab.setLayout(layout)
        return tab

    def browse_layers_dir(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Layers Directory")
        if folder:
            self.layers_dir.setText(folder)
            self.reload_layers()

    def browse_legendaries_dir(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Legendaries Directory")
        if folder:
            self.legendaries_dir.setText(folder)
            self.reload_legendaries()

    def browse_output_dir(self):
        folder = QFileDialog.getExistingDirectory(self, "Select Output Directory")
        if folder:
            self.output_dir.setText(folder)

    def reload_layers(self):
        self.layer_order.clear()
        self.excluded_layers.clear()
        layers_dir = self.layers_dir.text().strip()
        try:
            catalog = load_catalog_dir(layers_dir)
        except ConfigurationError as e:
            QMessageBox.warning(self, "Error", str(e))
            return
        for layer in catalog:
            self.layer_order.addItem(layer.name)
            if not layer.traits:
                self.log(f"⚠️ Layer '{layer.name}' has no traits")

    def move_layer_up(self):
        rows = sorted([self.layer_order.row(i) for i in self.layer_order.selectedItems()])
        for r in rows:
            if r <= 0:
                continue
            it = self.layer_order.takeItem(r)
            self.layer_order.insertItem(r - 1, it)
            self.layer_order.setCurrentItem(it)

    def move_layer_down(self):
        rows = sorted([self.layer_order.row(i) for i in self.layer_order.selectedItems()], reverse=True)
        for r in rows:
            if r >= self.layer_order.count() - 1:
                continue
            it = self.layer_order.takeItem(r)
            self.layer_order.insertItem(r + 1, it)
            self.layer_order.setCurrentItem(it)

    def exclude_layers(self):
        existing = self._list_texts(self.excluded_layers)
        for it in self.layer_order.selectedItems():
            if it.text() not in existing:
                self.excluded_layers.addItem(it.text())

    def include_layers(self):
        for it in self.excluded_layers.selectedItems():
            self.excluded_layers.takeItem(self.excluded_layers.row(it))

    @staticmethod
    def _list_texts(widget):
        return [widget.item(i).text() for i in range(widget.count())]

    # --- Config persistence ---
    def refresh_config_list(self):
        self.cfg_select.clear()
        self.cfg_select.addItems(sorted(self.configs.keys()))

    def current_seed(self):
        text = self.seed_input.text().strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            raise ConfigurationError(f"Seed must be a whole number, got '{text}'") from None

    def current_config(self):
        return StudioConfig(
            layers_dir=self.layers_dir.text().strip(),
            legendaries_dir=self.legendaries_dir.text().strip(),
            output_dir=self.output_dir.text().strip(),
            layer_order=self._list_texts(self.layer_order),
            excluded_layers=self._list_texts(self.excluded_layers),
            name=self.coll_name.text().strip() or "Collection",
            symbol=self.coll_symbol.text().strip(),
            description=self.coll_desc.text().strip(),
            width=self.width_input.value(),
            height=self.height_input.value(),
            supply=self.quantity_input.value(),
            seed=self.current_seed(),
        )

    def save_current_config(self):
        name = self.cfg_name_input.text().strip()
        if not name:
            QMessageBox.warning(self, "Error", "Please provide a Config Name.")
            return
        try:
            self.configs[name] = self.current_config()
        except ConfigurationError as e:
            QMessageBox.warning(self, "Error", str(e))
            return
        save_configs(self.configs, self.configs_path)
        self.refresh_config_list()
        self.log(f"💾 Saved config '{name}'")

    def load_selected_config(self):
        name = self.cfg_select.currentText()
        cfg = self.configs.get(name)
        if not cfg:
            return
        self.cfg_name_input.setText(name)
        self.layers_dir.setText(cfg.layers_dir)
        self.legendaries_dir.setText(cfg.legendaries_dir)
        self.output_dir.setText(cfg.output_dir)
        self.layer_order.clear()
        self.layer_order.addItems(cfg.layer_order)
        self.excluded_layers.clear()
        self.excluded_layers.addItems(cfg.excluded_layers)
        self.coll_name.setText(cfg.name)
        self.coll_symbol.setText(cfg.symbol)
        self.coll_desc.setText(cfg.description)
        self.width_input.setValue(cfg.width)
        self.height_input.setValue(cfg.height)
        self.quantity_input.setValue(cfg.supply)
        self.seed_input.setText("" if cfg.seed is None else str(cfg.seed))
        self.reload_legendaries()

    # =========================================================
    # TAB: Legendaries (slot order)
    # =========================================================
    def build_legendary_tab(self):
        tab = QWidget()
        layout = QVBoxLayout()
        self.legendary_list = QListWidget()
        row = QHBoxLayout()
        for text, handler in (
            ("Reload", self.reload_legendaries),
            ("Move Up", self.move_legendary_up),
            ("Move Down", self.move_legendary_down),
            ("Remove", self.remove_legendary),
        ):
            b = QPushButton(text)
            b.clicked.connect(handler)
            row.addWidget(b)
        layout.addWidget(QLabel("Legendaries take slots #1..#K in this order"))
        layout.addWidget(self.legendary_list, 1)
        layout.addLayout(row)
        tab.setLayout(layout)
        return tab

    def reload_legendaries(self):
        try:
            self.legendaries = load_legendary_dir(self.legendaries_dir.text().strip())
        except ConfigurationError as e:
            self.legendaries = None
            self.refresh_legendary_list()
            QMessageBox.warning(self, "Error", str(e))
            return False
        self.refresh_legendary_list()
        return True

    def refresh_legendary_list(self, select=None):
        self.legendary_list.clear()
        if self.legendaries is None:
            return
        for slot, item in enumerate(self.legendaries, start=1):
            self.legendary_list.addItem(f"#{slot}  {item.name or item.id}")
        if select is not None:
            self.legendary_list.setCurrentRow(select)

    def move_legendary_up(self):
        r = self.legendary_list.currentRow()
        if self.legendaries is not None and self.legendaries.move_up(r):
            self.refresh_legendary_list(select=r - 1)

    def move_legendary_down(self):
        r = self.legendary_list.currentRow()
        if self.legendaries is not None and self.legendaries.move_down(r):
            self.refresh_legendary_list(select=r + 1)

    def remove_legendary(self):
        r = self.legendary_list.currentRow()
        if self.legendaries is None or r < 0:
            return
        self.legendaries.remove(self.legendaries.items[r].id)
        self.refresh_legendary_list()

    # =========================================================
    # TAB: Generate NFTs (logging + stats)
    # =========================================================
    def build_generation_tab(self):
        tab = QWidget()
        layout = QVBoxLayout()

        self.quantity_input = QSpinBox(); self.quantity_input.setRange(1, MAX_SUPPLY_LIMIT); self.quantity_input.setValue(10)
        self.log_window = QTextEdit(); self.log_window.setReadOnly(True)
        self.progress_bar = QProgressBar(); self.progress_bar.setRange(0, 100)
        self.stats_label = QLabel("Stats: waiting...")

        self.generate_btn = QPushButton("Start Generation")
        self.generate_btn.clicked.connect(self.start_generation)
        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.setEnabled(False)
        self.cancel_btn.clicked.connect(self.cancel_generation)

        btn_row = QHBoxLayout()
        btn_row.addWidget(self.generate_btn)
        btn_row.addWidget(self.cancel_btn)

        layout.addWidget(QLabel("Total Supply"))
        layout.addWidget(self.quantity_input)
        layout.addWidget(QLabel("Logs"))
        layout.addWidget(self.log_window, 1)
        layout.addWidget(self.progress_bar)
        layout.addWidget(self.stats_label)
        layout.addLayout(btn_row)

        tab.setLayout(layout)
        return tab

    def log(self, msg):
        self.log_window.append(msg)

    def update_progress(self, pct):
        self.progress_bar.setValue(pct)

    def generation_done(self, result):
        self.generate_btn.setEnabled(True)
        self.cancel_btn.setEnabled(False)
        dist = trait_distribution(result.records)
        self.stats_label.setText(
            f"Stats: {len(result.records)} generated, {len(dist)} trait types, "
            f"{len(result.warnings)} asset warnings, ended: {result.termination}"
        )
        if result.termination == "completed":
            self.log("🎉 Generation complete.")
        else:
            self.log(f"⚠️ Generation stopped early ({result.termination}).")

    def generation_failed(self, msg):
        self.generate_btn.setEnabled(True)
        self.cancel_btn.setEnabled(False)
        QMessageBox.warning(self, "Generation Error", msg)

    def start_generation(self):
        try:
            cfg = self.current_config()
        except ConfigurationError as e:
            QMessageBox.warning(self, "Error", str(e))
            return
        if not cfg.layers_dir or not os.path.isdir(cfg.layers_dir):
            QMessageBox.warning(self, "Error", "Please choose a valid Layers Dir.")
            return
        if self.legendaries is None and not self.reload_legendaries():
            return
        self.progress_bar.setValue(0)
        self.generate_btn.setEnabled(False)
        self.cancel_btn.setEnabled(True)

        # Run in background thread
        self.worker = GenerationWorker(cfg, legendaries=self.legendaries.snapshot())
        self.worker.log_signal.connect(self.log)
        self.worker.progress_signal.connect(self.update_progress)
        self.worker.done_signal.connect(self.generation_done)
        self.worker.error_signal.connect(self.generation_failed)
        self.worker.start()

    def cancel_generation(self):
        if self.worker is not None and self.worker.isRunning():
            self.worker.requestInterruption()
            self.log("⏹️ Cancel requested, finishing current item...")


def main():
    app = QApplication(sys.argv)
    window = StudioWindow()
    window.show()
    return app.exec()
