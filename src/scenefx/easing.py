"""Easing curves: map normalized progress in [0, 1] to curved progress.

Any ``Callable[[float], float]`` can be passed where a curve is expected.
"""

from __future__ import annotations

import math
from typing import Callable

Curve = Callable[[float], float]


def linear(t: float) -> float:
    return t


def ease_in_out_sine(t: float) -> float:
    """Sinusoidal S-curve, slow at both ends."""
    return math.sin(math.pi * t - math.pi / 2) / 2 + 0.5


def ease_in_out_sigmoid(t: float) -> float:
    """Logistic curve centred on 0.5. Steeper than the sine curve.

    Only approaches 0 and 1 at the ends (about 0.0067 and 0.9933).
    """
    return 1 / (1 + math.exp(-10 * (t - 0.5)))
