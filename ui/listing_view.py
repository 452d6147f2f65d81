from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import QEasingCurve, QPropertyAnimation, Qt, pyqtSignal
from PyQt6.QtGui import QFont, QFontDatabase
from PyQt6.QtWidgets import QFrame, QLabel, QScrollArea, QVBoxLayout, QWidget

from core.blocks import FunctionBlocks
from core.model import Block


VIEW_BG = "#282a36"
VIEW_FG = "#f8f8f2"
HEADER_FG = "#8be9fd"
HOVER_OUTLINE = "#ff79c6"
SCROLL_DURATION_MS = 250
OFFSET_PROPERTY = "wasmOffset"


def monospace_font() -> QFont:
    preferred = [
        "JetBrains Mono",
        "Cascadia Code",
        "Fira Code",
        "Source Code Pro",
        "DejaVu Sans Mono",
        "Consolas",
        "Menlo",
    ]
    available = set(QFontDatabase.families())
    for name in preferred:
        if name in available:
            return QFont(name, 10)
    font = QFont("Monospace", 10)
    font.setStyleHint(QFont.StyleHint.TypeWriter)
    return font


class BlockWidget(QLabel):
    entered = pyqtSignal(object)
    left = pyqtSignal(object)
    clicked = pyqtSignal(object)

    def __init__(self, block: Block, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.block = block
        self.setText(block.text)
        self.setTextFormat(Qt.TextFormat.PlainText)
        self.setFont(monospace_font())
        self.setTextInteractionFlags(Qt.TextInteractionFlag.NoTextInteraction)
        if block.tagged:
            self.setProperty(OFFSET_PROPERTY, block.offset)
            self.setToolTip(self._tooltip())
        if block.interactive:
            self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._apply_style()

    @property
    def offset(self) -> Optional[int]:
        return self.block.offset

    @property
    def highlighted(self) -> bool:
        return self.block.highlighted

    def _tooltip(self) -> str:
        text = f"wasm offset 0x{self.block.offset:x}"
        if self.block.continues_previous:
            text += " (continued from previous function)"
        return text

    def _apply_style(self) -> None:
        color = self.block.color
        background = color.css if color is not None else "transparent"
        foreground = color.foreground if color is not None else VIEW_FG
        outline = HOVER_OUTLINE if self.block.highlighted else "transparent"
        self.setStyleSheet(
            "QLabel {"
            f" background-color: {background};"
            f" color: {foreground};"
            f" border: 2px solid {outline};"
            " padding: 1px 4px;"
            " }"
        )

    def set_highlighted(self, highlighted: bool) -> None:
        if self.block.highlighted == highlighted:
            return
        self.block.highlighted = highlighted
        self.setProperty("hovered", highlighted)
        self._apply_style()

    def enterEvent(self, event) -> None:  # type: ignore[override]
        if self.block.interactive:
            self.entered.emit(self.block.offset)
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:  # type: ignore[override]
        if self.block.interactive:
            self.left.emit(self.block.offset)
        super().leaveEvent(event)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.block.interactive:
            self.clicked.emit(self.block.offset)
            return
        super().mousePressEvent(event)


class ListingView(QScrollArea):
    def __init__(self, title: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.title = title
        self.setWidgetResizable(True)
        self.setFrameShape(QFrame.Shape.NoFrame)
        self._blocks: List[BlockWidget] = []
        self._animation: Optional[QPropertyAnimation] = None
        self._content: QWidget
        self._layout: QVBoxLayout
        self.clear()

    def clear(self) -> None:
        self._blocks = []
        self._content = QWidget()
        self._content.setStyleSheet(f"background-color: {VIEW_BG}; color: {VIEW_FG};")
        self._layout = QVBoxLayout(self._content)
        self._layout.setContentsMargins(8, 8, 8, 8)
        self._layout.setSpacing(0)
        self._layout.addStretch(1)
        self.setWidget(self._content)

    def _insert(self, widget: QWidget) -> None:
        self._layout.insertWidget(self._layout.count() - 1, widget)

    def _add_block(self, block: Block) -> BlockWidget:
        widget = BlockWidget(block, self._content)
        self._insert(widget)
        self._blocks.append(widget)
        return widget

    def add_function(self, entry: FunctionBlocks) -> List[BlockWidget]:
        header = QLabel(entry.header, self._content)
        header.setTextFormat(Qt.TextFormat.PlainText)
        header.setToolTip(entry.title)
        font = monospace_font()
        font.setBold(True)
        header.setFont(font)
        header.setStyleSheet(f"QLabel {{ color: {HEADER_FG}; padding: 12px 0px 4px 0px; }}")
        self._insert(header)
        return [self._add_block(block) for block in entry.blocks]

    def add_blocks(self, blocks: List[Block]) -> List[BlockWidget]:
        return [self._add_block(block) for block in blocks]

    def block_widgets(self) -> List[BlockWidget]:
        return list(self._blocks)

    def find_blocks(self, offset: int) -> List[BlockWidget]:
        return [widget for widget in self._blocks if widget.property(OFFSET_PROPERTY) == offset]

    def reveal(self, widget: BlockWidget) -> None:
        bar = self.verticalScrollBar()
        top = widget.y()
        target = top + widget.height() // 2 - self.viewport().height() // 2
        target = max(bar.minimum(), min(bar.maximum(), target))
        if self._animation is not None:
            self._animation.stop()
        self._animation = QPropertyAnimation(bar, b"value", self)
        self._animation.setDuration(SCROLL_DURATION_MS)
        self._animation.setEasingCurve(QEasingCurve.Type.OutCubic)
        self._animation.setStartValue(bar.value())
        self._animation.setEndValue(target)
        self._animation.start()
