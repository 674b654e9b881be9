import csv

import pytest

from tablespanner import MissingContent, resolve
from tablespanner.exporters import grid_to_csv, grid_to_csv_text, grid_to_layout_json, write_text


@pytest.fixture
def grid():
    return resolve([["A", "B"], ["C", "D"]], {"A": [2, 1]})


def test_layout_json_uses_null_for_spanned_positions(grid):
    assert grid_to_layout_json(grid) == '[["A",null,"B"],["C","D",null]]'


def test_csv_text_uses_content(grid):
    text = grid_to_csv_text(grid, {"A": "head", "B": "b", "C": "c", "D": "d"})
    assert text.splitlines() == ["head,,b", "c,d,"]


def test_csv_missing_content(grid):
    with pytest.raises(MissingContent):
        grid_to_csv_text(grid, {"A": "head"})


def test_grid_to_csv_writes_file(grid, tmp_path):
    out = tmp_path / "nested" / "table.csv"
    grid_to_csv(grid, None, str(out))
    with open(out, encoding="utf-8-sig", newline="") as fh:
        rows = list(csv.reader(fh))
    assert rows == [["A", "", "B"], ["C", "D", ""]]


def test_write_text_adds_trailing_newline(tmp_path):
    out = tmp_path / "out" / "table.txt"
    write_text("+-+", str(out))
    assert out.read_text(encoding="utf-8") == "+-+\n"
