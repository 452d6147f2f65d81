from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from core.colors import ColorCache
from core.linker import OffsetIndex
from core.model import AsmListing, Block, Function, Instruction, TextChunk, WatListing


BYTES_COLUMN_WIDTH = 30
COLUMN_GAP = "    "

T = TypeVar("T")


def render_address(address: int) -> str:
    return f"{address:08x}"


def render_bytes(data: Sequence[int]) -> str:
    text = " ".join(f"{byte:02x}" for byte in data)
    return text.ljust(BYTES_COLUMN_WIDTH)


def render_inst(mnemonic: str, operands: str) -> str:
    if not operands:
        return mnemonic
    return f"{mnemonic} {operands}"


def render_instruction_line(inst: Instruction) -> str:
    return COLUMN_GAP.join(
        (
            render_address(inst.address),
            render_bytes(inst.bytes),
            render_inst(inst.mnemonic, inst.operands),
        )
    )


def partition(items: Iterable[T], key: Callable[[T], Optional[int]]) -> Iterator[Tuple[Optional[int], List[T]]]:
    # None is a run value of its own.
    run: List[T] = []
    run_offset: Optional[int] = None
    for item in items:
        offset = key(item)
        if run and offset != run_offset:
            yield run_offset, run
            run = []
        run_offset = offset
        run.append(item)
    if run:
        yield run_offset, run


def build_instruction_blocks(
    instructions: Iterable[Instruction],
    cache: ColorCache,
    cursor: Optional[int] = None,
) -> Tuple[List[Block], Optional[int]]:
    # cursor: offset of the last run of the previous function.
    blocks: List[Block] = []
    for offset, run in partition(instructions, lambda inst: inst.offset):
        block = Block(
            offset=offset,
            text="\n".join(render_instruction_line(inst) for inst in run),
            lines=list(run),
        )
        if offset is not None:
            block.color = cache.color_for(offset)
            block.continues_previous = not blocks and offset == cursor
        blocks.append(block)
        cursor = offset
    return blocks, cursor


def build_text_blocks(chunks: Iterable[TextChunk], cache: ColorCache) -> List[Block]:
    blocks = []
    for chunk in chunks:
        if chunk.offset is None:
            continue
        # Only offsets already colored by the instruction view get a color.
        blocks.append(
            Block(
                offset=chunk.offset,
                text=chunk.text,
                color=cache.get(chunk.offset),
                lines=[chunk],
            )
        )
    return blocks


@dataclass
class FunctionBlocks:
    function: Function
    blocks: List[Block] = field(default_factory=list)

    @property
    def header(self) -> str:
        return f"Disassembly of function <{self.function.demangled_or_name}>:"

    @property
    def title(self) -> str:
        return f"Function {self.function.index}: {self.function.display_name}"


class RenderSession:
    def __init__(self, asm: AsmListing, wat: WatListing) -> None:
        self.asm = asm
        self.wat = wat
        self.cache = ColorCache()
        self.functions: List[FunctionBlocks] = []
        self.text_blocks: List[Block] = []
        self.index: OffsetIndex[Block] = OffsetIndex()

    def render(self) -> "RenderSession":
        self.cache.clear()
        self.functions = []
        cursor: Optional[int] = None
        for function in self.asm.functions:
            blocks, cursor = build_instruction_blocks(function.instructions, self.cache, cursor)
            self.functions.append(FunctionBlocks(function, blocks))
        self.text_blocks = build_text_blocks(self.wat.chunks, self.cache)
        self.index = OffsetIndex()
        self.index.register_all((block.offset, block) for block in self.all_blocks())
        return self

    def instruction_blocks(self) -> List[Block]:
        return [block for entry in self.functions for block in entry.blocks]

    def all_blocks(self) -> List[Block]:
        return self.instruction_blocks() + self.text_blocks
