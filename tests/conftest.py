import os

import pytest

from core.model import Function, Instruction, TextChunk

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture(scope="session")
def qapp():
    widgets = pytest.importorskip("PyQt6.QtWidgets")
    app = widgets.QApplication.instance() or widgets.QApplication([])
    yield app


def make_inst(address: int, offset, mnemonic: str = "nop", operands: str = "", data=(0x90,)) -> Instruction:
    return Instruction(address=address, bytes=list(data), mnemonic=mnemonic, operands=operands, offset=offset)


def make_function(index: int, offsets, name=None, demangled_name=None) -> Function:
    return Function(
        index=index,
        name=name,
        demangled_name=demangled_name,
        instructions=[make_inst(0x10 * index + i, offset) for i, offset in enumerate(offsets)],
    )


def make_chunks(*pairs) -> list[TextChunk]:
    return [TextChunk(text=text, offset=offset) for text, offset in pairs]
