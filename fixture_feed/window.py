from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from .utils import REFERENCE_TZ, local_date


class Bucket(str, Enum):
    TODAY = "today"
    FUTURE = "future"
    OUT_OF_WINDOW = "out_of_window"


def classify(
    start: datetime,
    reference_date: date,
    lookahead_days: int = 7,
    tz_name: str = REFERENCE_TZ,
) -> Bucket:
    """Bucket a kickoff by whole days between its local date and the run date."""
    diff = (local_date(start, tz_name) - reference_date).days
    if diff == 0:
        return Bucket.TODAY
    if 1 <= diff <= lookahead_days:
        return Bucket.FUTURE
    return Bucket.OUT_OF_WINDOW
