import pytest

from grid import Grid, GridIndexError, InvalidMergeError
from records import BoardRecord


def make_grid(cells):
    size = int(len(cells) ** 0.5)
    return Grid.from_record(BoardRecord(size=size, cells=cells))


def test_new_grid_is_empty():
    grid = Grid(3)
    assert grid.get_size() == 3
    assert grid.cells == [0] * 9
    assert grid.empty_cells() == list(range(9))
    assert grid.highest_value() == 0


@pytest.mark.parametrize("size", [0, -2, 2.5])
def test_invalid_size_rejected(size):
    with pytest.raises(ValueError):
        Grid(size)


def test_index_and_position_conversion():
    grid = Grid(4)
    assert grid.index_of(2, 3) == 11
    assert grid.position_of(11) == (2, 3)
    with pytest.raises(GridIndexError):
        grid.index_of(4, 0)
    with pytest.raises(GridIndexError):
        grid.position_of(16)


def test_cell_access_out_of_bounds():
    grid = Grid(2)
    assert grid.in_bounds(3)
    assert not grid.in_bounds(4)
    assert not grid.in_bounds(-1)
    with pytest.raises(IndexError):
        grid.cell_at(4)
    with pytest.raises(IndexError):
        grid.cell_at(-1)
    with pytest.raises(IndexError):
        grid.set_value(4, 2)


def test_empty_cells_and_highest_value():
    grid = make_grid([2, 0, 8, 0])
    assert grid.empty_cells() == [1, 3]
    assert grid.is_empty(1)
    assert not grid.is_empty(0)
    assert grid.highest_value() == 8
    assert grid.cell(1, 0) == 8
    assert grid.rows() == [[2, 0], [8, 0]]


def test_same_row_and_column_are_structural():
    grid = Grid(4)
    assert grid.same_row(4, 7)
    assert not grid.same_row(3, 4)
    assert grid.same_column(1, 13)
    assert not grid.same_column(1, 2)
    # no bounds check: 17 sits in column 1 of a row that does not exist
    assert grid.same_column(1, 17)


def test_line_indices():
    grid = Grid(3)
    assert grid.row_indices(1) == [3, 4, 5]
    assert grid.column_indices(2) == [2, 5, 8]


def test_swap_cells():
    grid = make_grid([2, 0, 0, 4])
    grid.swap_cells(0, 1)
    assert grid.cells == [0, 2, 0, 4]
    with pytest.raises(GridIndexError):
        grid.swap_cells(0, 9)


def test_merge_cells_doubles_target_and_clears_source():
    grid = make_grid([4, 4, 0, 0])
    assert grid.merge_cells(1, 0) == 8
    assert grid.cells == [8, 0, 0, 0]


@pytest.mark.parametrize("cells", [[2, 4, 0, 0], [0, 0, 0, 0]])
def test_merge_cells_rejects_unequal_or_empty(cells):
    grid = make_grid(cells)
    with pytest.raises(InvalidMergeError):
        grid.merge_cells(0, 1)
    assert grid.cells == cells


def test_merge_cells_out_of_bounds():
    grid = make_grid([2, 2, 0, 0])
    with pytest.raises(GridIndexError):
        grid.merge_cells(1, 4)


def test_set_value_rejects_negative():
    grid = Grid(2)
    with pytest.raises(ValueError):
        grid.set_value(0, -2)


@pytest.mark.parametrize("value", [3, 6, 12, 1000])
def test_set_value_rejects_non_powers_of_two(value):
    grid = Grid(2)
    with pytest.raises(ValueError):
        grid.set_value(0, value)
    assert grid.cells == [0, 0, 0, 0]


def test_set_value_accepts_powers_of_two():
    grid = Grid(2)
    grid.set_value(0, 1)
    grid.set_value(1, 2048)
    grid.set_value(1, 0)
    assert grid.cells == [1, 0, 0, 0]


def test_restore_keeps_the_same_grid_object():
    grid = make_grid([2, 4, 0, 0])
    snapshot = grid.copy()
    grid.swap_cells(0, 3)
    grid.restore(snapshot)
    assert grid.cells == [2, 4, 0, 0]
    with pytest.raises(ValueError):
        grid.restore(Grid(3))


def test_copy_is_independent():
    grid = make_grid([2, 0, 0, 0])
    clone = grid.copy()
    clone.set_value(1, 4)
    assert grid.cells == [2, 0, 0, 0]
    assert clone != grid


def test_record_round_trip():
    grid = make_grid([2, 0, 4, 8, 0, 0, 16, 0, 2])
    record = grid.to_record()
    assert record.model_dump() == {"size": 3, "cells": [2, 0, 4, 8, 0, 0, 16, 0, 2]}
    assert Grid.from_record(record) == grid


def test_board_record_validation():
    with pytest.raises(ValueError):
        BoardRecord(size=2, cells=[0, 0, 0])
    with pytest.raises(ValueError):
        BoardRecord(size=2, cells=[0, 0, 0, -2])
    with pytest.raises(ValueError):
        BoardRecord(size=2, cells=[2, 0, 0, 3])
    with pytest.raises(ValueError):
        BoardRecord(size=0, cells=[])
