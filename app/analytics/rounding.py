"""Rounding helpers. Halves round up, as dashboard consumers expect."""

import math


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value))


def clamp_percent(value: float) -> int:
    return min(100, max(0, round_int(value)))


def percentage(part: float, whole: float) -> int:
    """part / whole as a rounded percentage in [0, 100]; 0 when whole is 0."""
    if not whole or whole <= 0:
        return 0
    return clamp_percent(part / whole * 100)
