import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (round() would give banker's rounding)."""
    return int(math.floor(float(value) + 0.5))


def to_percent(score: float) -> int:
    """Lighthouse category score in [0,1] -> whole percentage for display."""
    return round_half_up(float(score) * 100)
