import numpy as np
import pytest

from tablespanner import MissingContent, RenderOptions, render, resolve
from tablespanner.renderer import (
    compute_column_widths,
    compute_row_heights,
    distribute_largest_remainder,
)


@pytest.fixture
def worked_grid():
    return resolve([["A", "B"], ["C", "D"]], {"A": [2, 1]})


def test_plain_table_ascii():
    grid = resolve([["A", "B"], ["C", "D"]])
    assert render(grid) == "\n".join([
        "+---+---+",
        "| A | B |",
        "+---+---+",
        "| C | D |",
        "+---+---+",
    ])


def test_colspan_and_empty_slot_ascii(worked_grid):
    assert render(worked_grid) == "\n".join([
        "+-------+---+",
        "| A     | B |",
        "+---+---+---+",
        "| C | D |   |",
        "+---+---+---+",
    ])


def test_colspan_unicode(worked_grid):
    assert render(worked_grid, options=RenderOptions(border_style="unicode")) == "\n".join([
        "┌───────┬───┐",
        "│ A     │ B │",
        "├───┬───┼───┤",
        "│ C │ D │   │",
        "└───┴───┴───┘",
    ])


def test_rowspan_continuation_is_blank():
    grid = resolve([["A", "B"], ["C"]], {"A": [1, 2]})
    assert render(grid) == "\n".join([
        "+---+---+",
        "| A | B |",
        "|   +---+",
        "|   | C |",
        "+---+---+",
    ])


def test_multiline_content_sets_width_and_height():
    grid = resolve([["A"]])
    assert render(grid, {"A": "x\nyy"}) == "\n".join([
        "+----+",
        "| x  |",
        "| yy |",
        "+----+",
    ])


def test_center_alignment():
    grid = resolve([["A"], ["B", "C"]], {"A": [2, 1]})
    content = {"A": "abc", "B": "xxx", "C": "yyy"}
    lines = render(grid, content, RenderOptions(align="center")).splitlines()
    assert lines[1] == "|    abc    |"
    assert lines[3] == "| xxx | yyy |"


def test_callable_content_lookup():
    grid = resolve([["a", "b"]])
    out = render(grid, lambda label: label.upper() * 2)
    assert out.splitlines()[1] == "| AA | BB |"


def test_missing_content_raises():
    grid = resolve([["A", "B"]])
    with pytest.raises(MissingContent) as excinfo:
        render(grid, {"A": "only a"})
    assert excinfo.value.label == "B"


def test_empty_grid_renders_nothing():
    assert render(resolve([])) == ""


def test_min_width_option():
    grid = resolve([["A"]])
    assert render(grid, options=RenderOptions(min_width=3)).splitlines()[1] == "| A   |"


def test_unknown_options_rejected():
    with pytest.raises(ValueError):
        RenderOptions(border_style="double")
    with pytest.raises(ValueError):
        RenderOptions(align="right")


def test_all_lines_have_same_length():
    grid = resolve(
        [list("ABC"), list("DEF"), list("GHI"), list("JKL")],
        {"A": [2, 2], "F": [1, 3], "H": [2, 1]},
    )
    content = {label: label * (i % 4 + 1) for i, label in enumerate("ABCDEFGHIJKL")}
    lines = render(grid, content, RenderOptions(border_style="unicode")).splitlines()
    assert len({len(line) for line in lines}) == 1


# ===== Width / height computation =====


def test_spanning_content_grows_both_columns():
    """An even remainder split goes to the narrower column, so both columns grow."""
    grid = resolve([["AB"], ["X", "Y"]], {"AB": [2, 1]})
    texts = {"AB": "twelve chars", "X": "fives", "Y": "y"}
    widths = compute_column_widths(grid, texts, RenderOptions())
    separator = RenderOptions().separator_width
    assert widths.tolist() == [7, 2]
    assert int(widths.sum()) + separator >= 12


def test_spanning_content_that_fits_changes_nothing():
    grid = resolve([["AB"], ["X", "Y"]], {"AB": [2, 1]})
    texts = {"AB": "short", "X": "fives", "Y": "y"}
    widths = compute_column_widths(grid, texts, RenderOptions())
    assert widths.tolist() == [5, 1]


def test_tall_content_grows_spanned_rows():
    grid = resolve([["A", "B"], ["C"]], {"A": [1, 2]})
    texts = {"A": "1\n2\n3\n4\n5", "B": "b", "C": "c"}
    heights = compute_row_heights(grid, texts)
    assert heights.tolist() == [2, 2]


def test_largest_remainder_distribution():
    assert distribute_largest_remainder(np.array([5, 1]), 3).tolist() == [7, 2]
    assert distribute_largest_remainder(np.array([2, 2]), 3).tolist() == [4, 3]
    assert distribute_largest_remainder(np.array([0, 0, 0]), 4).tolist() == [2, 1, 1]
    assert distribute_largest_remainder(np.array([1, 3]), 0).tolist() == [1, 3]


def test_unicode_borders_leave_cell_text_untouched():
    out = render(resolve([["A"]]), {"A": "a-b|c+d"}, RenderOptions(border_style="unicode"))
    assert out == "\n".join([
        "┌─────────┐",
        "│ a-b|c+d │",
        "└─────────┘",
    ])


def test_unicode_junctions_ignore_text_next_to_borders():
    grid = resolve([["A", "B"], ["C", "D"]], {"A": [2, 1]})
    content = {"A": "+-+", "B": "|", "C": "-", "D": "+"}
    lines = render(grid, content, RenderOptions(border_style="unicode", padding=0)).splitlines()
    assert lines == [
        "┌───┬─┐",
        "│+-+│|│",
        "├─┬─┼─┤",
        "│-│+│ │",
        "└─┴─┴─┘",
    ]
