"""Unit tests for turning edited sets into cell updates."""

import pytest

from workout_sheet.coordinates import CellUpdate, Coordinate
from workout_sheet.exercises import SetCoordinates
from workout_sheet.writeback import build_set_updates


@pytest.mark.unit
def test_reps_and_weight_for_first_set():
    """Test set 1 writes reps to its cell and weight to the week row."""
    coords = SetCoordinates(reps=Coordinate(7, 6), weight=Coordinate(6, 5))
    assert build_set_updates(coords, reps="12", weight=105) == [
        CellUpdate(7, 6, "12"),
        CellUpdate(6, 5, 105),
    ]


@pytest.mark.unit
def test_weight_dropped_without_a_target():
    """Test weight is ignored for sets with no weight coordinate."""
    coords = SetCoordinates(reps=Coordinate(7, 7))
    assert build_set_updates(coords, reps="9", weight="105") == [CellUpdate(7, 7, "9")]


@pytest.mark.unit
def test_blank_values_are_not_written():
    """Test blank values are skipped but zero is written."""
    coords = SetCoordinates(reps=Coordinate(7, 6), weight=Coordinate(6, 5))
    assert build_set_updates(coords, reps="  ", weight=None) == []
    assert build_set_updates(coords, reps=0) == [CellUpdate(7, 6, 0)]


@pytest.mark.unit
def test_nothing_to_write_without_coordinates():
    """Test a base entry without coordinates produces no updates."""
    assert build_set_updates(SetCoordinates(), reps="10", weight="100") == []
