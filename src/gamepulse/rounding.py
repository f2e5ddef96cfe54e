"""Half-up rounding used for every displayed ratio and score."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ``.5`` going up (``round(2.5) == 3``)."""
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round to two decimal places, half up."""
    return math.floor(value * 100 + 0.5) / 100
