"""
Tests for grid parsing: symbols, level text and puzzle files.
"""

import json

import pytest

from Solver.puzzle import AkariPuzzle, CellSymbol, parse_level_text


def test_symbol_parsing():
    assert CellSymbol.parse('#') is CellSymbol.OPAQUE
    assert CellSymbol.parse('.') is CellSymbol.OPEN
    assert CellSymbol.parse('3') is CellSymbol.NUM3
    assert CellSymbol.parse('3').number == 3
    assert CellSymbol.OPAQUE.number is None
    assert CellSymbol.OPEN.number is None


def test_unknown_symbols_are_open():
    assert CellSymbol.parse('x') is CellSymbol.OPEN
    assert CellSymbol.parse('5') is CellSymbol.OPEN
    assert CellSymbol.parse('') is CellSymbol.OPEN


def test_parse_level_text_stops_at_blank_line():
    text = "# . 1\n. . .\n\n7 7\nsome trailer"
    assert parse_level_text(text) == [['#', '.', '1'], ['.', '.', '.']]


def test_parse_level_text_compact_rows():
    assert parse_level_text("#.1\n...\n") == [['#', '.', '1'], ['.', '.', '.']]


def test_puzzle_dimensions_and_queries():
    puzzle = AkariPuzzle([['.', '.', '#'], ['.', '1', '.']])
    assert puzzle.height == 2
    assert puzzle.width == 3
    assert puzzle.is_open(0, 0)
    assert not puzzle.is_open(0, 2)
    assert puzzle.open_cells() == [(0, 0), (0, 1), (1, 0), (1, 2)]
    assert puzzle.numbered_cells() == [(1, 1, 1)]
    assert puzzle.neighbors(0, 0) == [(1, 0), (0, 1)]
    assert puzzle.neighbors(1, 1) == [(0, 1), (1, 0), (1, 2)]
    assert puzzle.to_rows() == [['.', '.', '#'], ['.', '1', '.']]


def test_puzzle_accepts_string_rows():
    puzzle = AkariPuzzle(["#.", ".2"])
    assert puzzle.symbol_at(0, 0) is CellSymbol.OPAQUE
    assert puzzle.symbol_at(1, 1) is CellSymbol.NUM2


def test_from_text_rejects_empty():
    with pytest.raises(ValueError):
        AkariPuzzle.from_text("\n\n")


def test_from_file_text_and_json(tmp_path):
    txt = tmp_path / "p.txt"
    txt.write_text(". 0 .\n. # .\n\n2 3\n")
    puzzle = AkariPuzzle.from_file(txt)
    assert (puzzle.height, puzzle.width) == (2, 3)
    assert puzzle.numbered_cells() == [(0, 1, 0)]

    js = tmp_path / "p.json"
    js.write_text(json.dumps({"rows": [["#", "."], [".", "."]]}))
    puzzle = AkariPuzzle.from_file(js)
    assert puzzle.open_cells() == [(0, 1), (1, 0), (1, 1)]

    bare = tmp_path / "bare.json"
    bare.write_text(json.dumps(["..", ".."]))
    assert AkariPuzzle.from_file(bare).width == 2


def test_from_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        AkariPuzzle.from_file(tmp_path / "nope.txt")
