from __future__ import annotations

import pytest

from contracts.errors import OutOfRangeError
from propagation import ALL_ONES, CandidateGrid, cell_coords, cell_index


def _solved_rows() -> list[str]:
    return [
        "534678912",
        "672195348",
        "198342567",
        "859761423",
        "426853791",
        "713924856",
        "961537284",
        "287419635",
        "345286179",
    ]


def _solved_grid() -> CandidateGrid:
    grid = CandidateGrid()
    for y, row in enumerate(_solved_rows()):
        for x, ch in enumerate(row):
            grid.set_cell(x, y, int(ch) - 1)
    return grid


def test_new_grid_is_unconstrained():
    grid = CandidateGrid.create()
    assert len(grid.masks) == 81
    assert all(mask == ALL_ONES for mask in grid.masks)
    assert grid.get_value(4, 4) is None
    assert grid.get_cell_value(4, 4) is None
    assert not grid.is_complete()
    assert grid.unresolved_count() == 81


def test_set_cell_fixes_single_bit_row_major():
    grid = CandidateGrid()
    grid.set_cell(2, 7, 4)
    assert grid.get_bits(2, 7) == 1 << 4
    assert grid.masks[7 * 9 + 2] == 1 << 4
    assert grid.get_value(2, 7) == 4
    assert grid.get_cell_value(2, 7) == 5
    assert grid.get_cell_bits(2, 7) == 16
    assert grid.get_bits(7, 2) == ALL_ONES


@pytest.mark.parametrize(
    "x, y, value",
    [(-1, 0, 0), (9, 0, 0), (0, 9, 0), (0, 0, 9), (0, 0, -1), (True, 0, 0)],
)
def test_set_cell_rejects_out_of_range(x, y, value):
    grid = CandidateGrid()
    with pytest.raises(OutOfRangeError):
        grid.set_cell(x, y, value)


def test_get_bits_rejects_out_of_range():
    with pytest.raises(OutOfRangeError) as excinfo:
        CandidateGrid().get_bits(0, 10)
    assert excinfo.value.name == "y"
    assert isinstance(excinfo.value, ValueError)


def test_complete_requires_every_cell_fixed():
    grid = _solved_grid()
    assert grid.is_complete()
    assert grid.unresolved_count() == 0
    grid.masks[40] = 0b11
    assert not grid.is_complete()


def test_zero_mask_is_not_complete_and_is_reported():
    grid = _solved_grid()
    grid.masks[cell_index(3, 5)] = 0
    assert not grid.is_complete()
    assert grid.find_contradiction() == (3, 5)
    assert CandidateGrid().find_contradiction() is None


def test_index_round_trip():
    for index in range(81):
        x, y = cell_coords(index)
        assert cell_index(x, y) == index


def test_state_hash_tracks_content():
    first = CandidateGrid()
    second = CandidateGrid()
    assert first.state_hash() == second.state_hash()
    assert first.state_hash().startswith("sha256-")
    second.set_cell(0, 0, 0)
    assert first.state_hash() != second.state_hash()
    assert first != second


def test_snapshot_is_a_copy():
    grid = CandidateGrid()
    snapshot = grid.snapshot()
    grid.set_cell(0, 0, 3)
    assert snapshot[0] == ALL_ONES


def test_rejects_wrong_mask_count():
    with pytest.raises(ValueError):
        CandidateGrid([ALL_ONES] * 80)


@pytest.mark.parametrize("bad", [512, -1, 1 << 12])
def test_rejects_masks_outside_nine_bits(bad):
    masks = [ALL_ONES] * 81
    masks[40] = bad
    with pytest.raises(ValueError, match="cell 40"):
        CandidateGrid(masks)


def test_grids_compare_by_masks():
    first = CandidateGrid()
    second = CandidateGrid(first.snapshot())
    assert first == second
    second.set_cell(4, 4, 0)
    assert first != second
    assert first != first.masks
