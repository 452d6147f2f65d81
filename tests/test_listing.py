import json
from pathlib import Path

import pytest

from core.listing import ListingError, load_listing, parse_asm, parse_wat


def _write_listing(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


SAMPLE = {
    "asm": {
        "functions": [
            {
                "func_index": 2,
                "name": None,
                "demangled_name": None,
                "instructions": [
                    {"address": 0, "bytes": [85], "mnemonic": "push", "operands": "rbp", "wasm_offset": 40},
                    {"address": 1, "bytes": [195], "mnemonic": "ret", "operands": "", "wasm_offset": None},
                ],
            }
        ]
    },
    "wat": {"chunks": [{"wat": "(func", "wasm_offset": None}, {"wat": "local.get 0", "wasm_offset": 40}]},
}


def test_load_listing_reads_both_sections(tmp_path: Path):
    asm, wat = load_listing(_write_listing(tmp_path / "listing.json", SAMPLE))

    func = asm.functions[0]
    assert func.index == 2
    assert func.display_name == "function[2]"
    assert [inst.offset for inst in func.instructions] == [40, None]
    assert func.instructions[0].bytes == (85,)
    assert func.instructions[1].operands == ""
    assert [chunk.offset for chunk in wat.chunks] == [None, 40]
    assert wat.chunks[1].text == "local.get 0"


def test_missing_sections_give_empty_listings(tmp_path: Path):
    asm, wat = load_listing(_write_listing(tmp_path / "empty.json", {}))
    assert asm.functions == ()
    assert wat.chunks == ()


def test_function_index_defaults_to_position():
    asm = parse_asm({"functions": [{"instructions": []}, {"name": "main"}]})
    assert [f.index for f in asm.functions] == [0, 1]
    assert asm.functions[1].demangled_or_name == "main"


def test_invalid_json_raises_listing_error(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ListingError) as exc:
        load_listing(path)
    assert "Invalid JSON" in exc.value.message


def test_missing_file_raises_listing_error(tmp_path: Path):
    with pytest.raises(ListingError) as exc:
        load_listing(tmp_path / "nope.json")
    assert "Cannot read" in exc.value.message


def test_bad_bytes_are_rejected():
    with pytest.raises(ListingError) as exc:
        parse_asm(
            {"functions": [{"instructions": [{"address": 0, "bytes": [256], "mnemonic": "nop"}]}]}
        )
    assert "8-bit" in exc.value.message


def test_non_integer_offset_is_rejected():
    with pytest.raises(ListingError):
        parse_wat({"chunks": [{"wat": "nop", "wasm_offset": "12"}]})


def test_chunk_without_text_is_rejected():
    with pytest.raises(ListingError) as exc:
        parse_wat({"chunks": [{"wasm_offset": 1}]})
    assert "missing 'wat'" in exc.value.message


def test_parsed_records_are_hashable_tuples(tmp_path: Path):
    asm, wat = load_listing(_write_listing(tmp_path / "listing.json", SAMPLE))
    func = asm.functions[0]
    assert isinstance(func.instructions, tuple)
    assert isinstance(func.instructions[0].bytes, tuple)
    assert isinstance(wat.chunks, tuple)
    assert hash(func) == hash(parse_asm(SAMPLE["asm"]).functions[0])


@pytest.mark.parametrize("field_name", ["name", "demangled_name"])
def test_non_string_names_are_rejected(field_name):
    with pytest.raises(ListingError) as exc:
        parse_asm({"functions": [{field_name: 17, "instructions": []}]})
    assert f"'{field_name}' must be a string" in exc.value.message
