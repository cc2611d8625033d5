"""Descriptive statistics used by the baseline calculations."""

from typing import Iterable, Optional


def median(values: Iterable[float]) -> Optional[float]:
    """
    Calculate the median of a sequence of numbers.

    Odd counts return the middle element, even counts the mean of the two middle
    elements. The caller's sequence is left untouched.

    Args:
        values: Numeric values, in any order.

    Returns:
        The median, or None if the sequence is empty.
    """
    ordered = sorted(values)
    count = len(ordered)
    if count == 0:
        return None

    middle = count // 2
    if count % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2.0
    return ordered[middle]
