# File: academy/utils/number_utils.py
import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (12.5 -> 13).

    The builtin ``round`` uses banker's rounding (12.5 -> 12), which would make
    percentages and blended scores drift from what the UI displays.
    """
    return int(math.floor(value + 0.5))


def clamp(value: int, low: int = 0, high: int = 100) -> int:
    return max(low, min(high, value))
