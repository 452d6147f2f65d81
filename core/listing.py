from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core.model import AsmListing, Function, Instruction, TextChunk, WatListing


class ListingError(Exception):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ListingError(f"{where}: missing '{key}'")
    return data[key]


def _optional_int(value: Any, where: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ListingError(f"{where}: expected an integer offset, got {value!r}")
    return value


def _optional_str(value: Any, field_name: str, where: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ListingError(f"{where}: '{field_name}' must be a string, got {value!r}")
    return value


def _parse_instruction(data: Any, where: str) -> Instruction:
    if not isinstance(data, dict):
        raise ListingError(f"{where}: expected an object")
    raw_bytes = _require(data, "bytes", where)
    if not isinstance(raw_bytes, list) or not all(isinstance(b, int) and 0 <= b <= 0xFF for b in raw_bytes):
        raise ListingError(f"{where}: 'bytes' must be a list of 8-bit integers")
    address = _require(data, "address", where)
    if not isinstance(address, int) or address < 0:
        raise ListingError(f"{where}: 'address' must be an unsigned integer")
    return Instruction(
        address=address,
        bytes=tuple(raw_bytes),
        mnemonic=str(_require(data, "mnemonic", where)),
        operands=str(data.get("operands") or ""),
        offset=_optional_int(data.get("wasm_offset"), where),
    )


def _parse_function(data: Any, position: int) -> Function:
    where = f"function #{position}"
    if not isinstance(data, dict):
        raise ListingError(f"{where}: expected an object")
    instructions = data.get("instructions", [])
    if not isinstance(instructions, list):
        raise ListingError(f"{where}: 'instructions' must be a list")
    index = _optional_int(data.get("func_index", position), where)
    return Function(
        index=position if index is None else index,
        name=_optional_str(data.get("name"), "name", where),
        demangled_name=_optional_str(data.get("demangled_name"), "demangled_name", where),
        instructions=tuple(
            _parse_instruction(item, f"{where}, instruction #{i}") for i, item in enumerate(instructions)
        ),
    )


def parse_asm(data: Any) -> AsmListing:
    if not isinstance(data, dict):
        raise ListingError("asm: expected an object")
    functions = data.get("functions", [])
    if not isinstance(functions, list):
        raise ListingError("asm: 'functions' must be a list")
    return AsmListing(functions=tuple(_parse_function(item, i) for i, item in enumerate(functions)))


def parse_wat(data: Any) -> WatListing:
    if not isinstance(data, dict):
        raise ListingError("wat: expected an object")
    chunks = data.get("chunks", [])
    if not isinstance(chunks, list):
        raise ListingError("wat: 'chunks' must be a list")
    parsed: List[TextChunk] = []
    for i, item in enumerate(chunks):
        where = f"chunk #{i}"
        if not isinstance(item, dict):
            raise ListingError(f"{where}: expected an object")
        parsed.append(
            TextChunk(
                text=str(_require(item, "wat", where)),
                offset=_optional_int(item.get("wasm_offset"), where),
            )
        )
    return WatListing(chunks=tuple(parsed))


def load_listing(path: str | Path) -> Tuple[AsmListing, WatListing]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise ListingError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ListingError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ListingError("Listing must be a JSON object with 'asm' and 'wat'")
    return parse_asm(data.get("asm", {})), parse_wat(data.get("wat", {}))
