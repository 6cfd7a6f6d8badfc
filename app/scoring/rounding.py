from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    # round() uses banker's rounding; scores round .5 upwards.
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))
