from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Optional

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import (
    QApplication,
    QDockWidget,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPlainTextEdit,
    QSplitter,
    QStatusBar,
)
from PyQt6.QtGui import QAction, QKeySequence

from core.blocks import RenderSession
from core.linker import CrossViewLinker, OffsetIndex
from core.listing import ListingError, load_listing
from core.model import AsmListing, WatListing
from ui.listing_view import BlockWidget, ListingView


class ExplorerWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Wasm Explorer")
        self.resize(1400, 800)

        self.current_file: Optional[str] = None
        self.session: Optional[RenderSession] = None
        self.index: OffsetIndex[BlockWidget] = OffsetIndex()
        self.linker = self._make_linker()

        self._build_ui()
        self._load_layout()

    def _build_ui(self) -> None:
        self.asm_view = ListingView("Disassembly")
        self.wat_view = ListingView("WAT")

        self.central_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.central_splitter.addWidget(self.asm_view)
        self.central_splitter.addWidget(self.wat_view)
        self.central_splitter.setStretchFactor(0, 3)
        self.central_splitter.setStretchFactor(1, 2)
        self.setCentralWidget(self.central_splitter)

        self.log_output = QPlainTextEdit()
        self.log_output.setReadOnly(True)
        self.log_output.setMaximumBlockCount(1000)
        self.log_dock = QDockWidget("Log", self)
        self.log_dock.setObjectName("log_dock")
        self.log_dock.setWidget(self.log_output)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.log_dock)

        file_menu = self.menuBar().addMenu("&File")
        open_action = QAction("&Open listing...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.open_file)
        file_menu.addAction(open_action)
        reload_action = QAction("&Reload", self)
        reload_action.setShortcut(QKeySequence("F5"))
        reload_action.triggered.connect(self.reload)
        file_menu.addAction(reload_action)
        view_menu = self.menuBar().addMenu("&View")
        view_menu.addAction(self.log_dock.toggleViewAction())

        status = QStatusBar()
        self.offset_label = QLabel("Offset: -")
        self.count_label = QLabel("")
        status.addWidget(self.offset_label)
        status.addPermanentWidget(self.count_label)
        self.setStatusBar(status)

    def _make_linker(self) -> CrossViewLinker[BlockWidget]:
        return CrossViewLinker(
            self.index,
            lambda widget, highlighted: widget.set_highlighted(highlighted),
            self._reveal,
        )

    def _reveal(self, widget: BlockWidget) -> None:
        view = self.asm_view if self.asm_view.isAncestorOf(widget) else self.wat_view
        view.reveal(widget)

    def load(self, asm: AsmListing, wat: WatListing) -> RenderSession:
        self.session = RenderSession(asm, wat).render()
        self.asm_view.clear()
        self.wat_view.clear()
        widgets: list[BlockWidget] = []
        for entry in self.session.functions:
            widgets.extend(self.asm_view.add_function(entry))
        widgets.extend(self.wat_view.add_blocks(self.session.text_blocks))
        by_block = {id(widget.block): widget for widget in widgets}
        self.index = self.session.index.map(lambda block: by_block[id(block)])
        self._link(widgets)
        self.linker = self._make_linker()

        asm_blocks = len(self.asm_view.block_widgets())
        wat_blocks = len(self.wat_view.block_widgets())
        self.count_label.setText(f"{len(asm.functions)} functions | {asm_blocks} asm blocks | {wat_blocks} wat blocks")
        self.log(
            f"Rendered {len(asm.functions)} functions into {asm_blocks} blocks, "
            f"{wat_blocks} WAT blocks, {len(self.session.cache)} colored offsets"
        )
        return self.session

    def _link(self, widgets: list[BlockWidget]) -> None:
        for widget in widgets:
            if widget.block.interactive:
                widget.entered.connect(self.on_block_entered)
                widget.left.connect(self.on_block_left)
                widget.clicked.connect(self.on_block_clicked)

    def on_block_entered(self, offset: int) -> None:
        self.linker.enter(offset)
        self.offset_label.setText(f"Offset: 0x{offset:x}")

    def on_block_left(self, offset: int) -> None:
        self.linker.leave(offset)
        self.offset_label.setText("Offset: -")

    def on_block_clicked(self, offset: int) -> None:
        self.linker.click(offset)

    def open_file(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open listing", "", "Listing JSON (*.json);;All Files (*)")
        if path:
            self.open_path(path)

    def open_path(self, path: str) -> bool:
        try:
            asm, wat = load_listing(path)
        except ListingError as exc:
            self.log(f"Failed to load {path}: {exc.message}")
            QMessageBox.warning(self, "Open listing", exc.message)
            return False
        self.current_file = os.path.abspath(path)
        self.setWindowTitle(f"Wasm Explorer - {os.path.basename(path)}")
        self.log(f"Loaded {self.current_file}")
        self.load(asm, wat)
        return True

    def reload(self) -> None:
        if self.current_file:
            self.open_path(self.current_file)

    def log(self, message: str) -> None:
        self.log_output.appendPlainText(message)

    def _config_path(self) -> str:
        base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        return os.path.join(base_dir, ".explorer_layout.json")

    def _load_layout(self) -> None:
        path = self._config_path()
        if not os.path.exists(path):
            return
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            geo = data.get("geometry")
            if geo:
                self.restoreGeometry(bytes.fromhex(geo))
            state = data.get("state")
            if state:
                self.restoreState(bytes.fromhex(state))
            central_sizes = data.get("central_sizes")
            if central_sizes:
                QTimer.singleShot(0, lambda sizes=list(central_sizes): self.central_splitter.setSizes(sizes))
        except (OSError, ValueError, json.JSONDecodeError):
            # A broken layout file falls back to the default layout.
            pass

    def _save_layout(self) -> None:
        data = {}
        data["geometry"] = self.saveGeometry().toHex().data().decode("ascii")
        data["state"] = self.saveState().toHex().data().decode("ascii")
        data["central_sizes"] = self.central_splitter.sizes()
        try:
            with open(self._config_path(), "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError:
            pass

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_layout()
        super().closeEvent(event)


def run_app(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Side-by-side disassembly and WAT explorer")
    parser.add_argument("listing", nargs="?", help="JSON listing with 'asm' and 'wat' sections")
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    app = QApplication([])
    window = ExplorerWindow()
    if args.listing:
        window.open_path(args.listing)
    window.show()
    app.exec()
