from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from core.colors import Color


@dataclass(frozen=True)
class Instruction:
    address: int
    bytes: Tuple[int, ...]
    mnemonic: str
    operands: str
    offset: Optional[int] = None  # byte offset in the wasm module

    def __post_init__(self) -> None:
        object.__setattr__(self, "bytes", tuple(self.bytes))


@dataclass(frozen=True)
class Function:
    index: int
    name: Optional[str]
    demangled_name: Optional[str]
    instructions: Tuple[Instruction, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "instructions", tuple(self.instructions))

    @property
    def display_name(self) -> str:
        if self.name is None:
            return f"function[{self.index}]"
        return self.name

    @property
    def demangled_or_name(self) -> str:
        if self.demangled_name is None:
            return self.display_name
        return self.demangled_name


@dataclass(frozen=True)
class TextChunk:
    text: str
    offset: Optional[int] = None


@dataclass(frozen=True)
class AsmListing:
    functions: Tuple[Function, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "functions", tuple(self.functions))


@dataclass(frozen=True)
class WatListing:
    chunks: Tuple[TextChunk, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "chunks", tuple(self.chunks))


@dataclass
class Block:
    offset: Optional[int]
    text: str
    color: Optional[Color] = None
    lines: List[object] = field(default_factory=list)
    highlighted: bool = False
    continues_previous: bool = False

    @property
    def tagged(self) -> bool:
        return self.offset is not None

    @property
    def interactive(self) -> bool:
        return self.tagged and self.color is not None
