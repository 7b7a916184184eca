"""Workout sheet parsing and spreadsheet write-back."""

from .coordinates import CellUpdate, Coordinate
from .exercises import ExerciseTemplate, SetRecord
from .pipeline import (
    WorkoutSheet,
    filter_sets,
    flatten_sets,
    load_workout_sheet,
    parse_workout_sheet,
)

__all__ = [
    "CellUpdate",
    "Coordinate",
    "ExerciseTemplate",
    "SetRecord",
    "WorkoutSheet",
    "filter_sets",
    "flatten_sets",
    "load_workout_sheet",
    "parse_workout_sheet",
]
