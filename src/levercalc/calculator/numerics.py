"""IEEE-754 float helpers for the calculator core.

Python raises ZeroDivisionError on float division by zero. The calculator
propagates non-finite values to the caller instead, so every division in the
core goes through ieee_divide.
"""

import math


def ieee_divide(numerator: float, denominator: float) -> float:
    """Divide with IEEE-754 semantics: x/0 -> +/-inf, 0/0 -> nan.

    The sign of an infinite result follows the signs of both operands,
    including a signed zero denominator.
    """
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator
