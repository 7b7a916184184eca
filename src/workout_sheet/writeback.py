"""Turn an edited set into cell updates against its origin spreadsheet."""
from typing import Any, List

from .coordinates import CellUpdate
from .exercises import SetCoordinates


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def build_set_updates(coordinates: SetCoordinates, reps: Any = None, weight: Any = None) -> List[CellUpdate]:
    """Updates for one set: reps to its own cell, weight to the week row.

    Weight only has a target on the first set of a week, so it is dropped
    for later sets. Blank values are never written.
    """
    updates = []
    if coordinates.reps is not None and not _is_blank(reps):
        updates.append(CellUpdate(coordinates.reps.row, coordinates.reps.col, reps))
    if coordinates.weight is not None and not _is_blank(weight):
        updates.append(CellUpdate(coordinates.weight.row, coordinates.weight.col, weight))
    return updates

