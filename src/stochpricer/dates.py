# dates.py
# Day-count helpers: the only place calendar dates become model time.

from __future__ import annotations
from datetime import date

__all__ = ["DAY_COUNT_CONVENTIONS", "year_fraction"]


def _actual_365_fixed(start: date, end: date) -> float:
    return (end - start).days / 365.0


def _actual_360(start: date, end: date) -> float:
    return (end - start).days / 360.0


def _thirty_360(start: date, end: date) -> float:
    """30/360 bond basis (ISDA)."""
    d1 = min(start.day, 30)
    d2 = end.day
    if d1 == 30 and d2 == 31:
        d2 = 30
    days = 360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)
    return days / 360.0


DAY_COUNT_CONVENTIONS = {
    "act/365f": _actual_365_fixed,
    "act/360": _actual_360,
    "30/360": _thirty_360,
}


def year_fraction(start: date, end: date, convention: str = "act/365f") -> float:
    """Year fraction between two dates under a day-count convention.

    Parameters
    ----------
    start, end : datetime.date
        Period bounds; ``end`` must not precede ``start``.
    convention : str
        One of ``"act/365f"`` (default), ``"act/360"``, ``"30/360"``.

    Returns
    -------
    float
        Non-negative year fraction.
    """
    try:
        fn = DAY_COUNT_CONVENTIONS[convention]
    except KeyError:
        raise ValueError(
            f"convention must be one of {sorted(DAY_COUNT_CONVENTIONS)}, got {convention!r}"
        ) from None
    if end < start:
        raise ValueError(f"end date {end} precedes start date {start}")
    return fn(start, end)
