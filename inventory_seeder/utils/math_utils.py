# inventory_seeder/utils/math_utils.py
import math
from typing import List, Union

import numpy as np

from inventory_seeder.exceptions import ValidationError

def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up.

    Python's round() uses banker's rounding (round(2.5) == 2); demand
    figures are rounded the commercial way instead.

    Args:
        value: Value to round

    Returns:
        Rounded integer
    """
    return int(math.floor(value + 0.5))

def mean(values: List[Union[int, float]]) -> float:
    """Arithmetic mean of a non-empty list of values."""
    if not values:
        raise ValidationError("Cannot take the mean of an empty list")
    return float(np.mean(values))

def random_between(rng, low: int, high: int) -> int:
    """Inclusive random integer from an injected random.Random."""
    if low > high:
        raise ValidationError(f"Invalid range: {low} > {high}")
    return rng.randint(low, high)
