from __future__ import annotations

import math
from typing import Optional


def round_to(value: float, digits: int) -> float:
    # Half-up: 2.25 -> 2.3 at one digit. Builtin round() is half-to-even.
    factor = 10.0 ** digits
    return math.floor(value * factor + 0.5) / factor


def safe_ratio(num: Optional[float], den: Optional[float], digits: int) -> float:
    """Rounded ``num / den``, or the neutral ``0.0`` unless both are positive."""
    if num is None or den is None or num <= 0 or den <= 0:
        return 0.0
    return round_to(num / den, digits)
