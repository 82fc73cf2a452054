import math
from decimal import Decimal
from typing import Any, Iterable


def round2(value: Any) -> float:
    """round to currency precision, half-up on the value scaled by 100.

    Anything that isn't a finite number comes back as 0.0 so a bad figure
    never leaks into a response.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return 0.0
    value = float(value)
    if not math.isfinite(value):
        return 0.0
    return math.floor(value * 100 + 0.5) / 100


def cart_total(cart: Iterable[Any] | None) -> float:
    """sum of price * quantity over the cart, rounded."""
    if not cart:
        return 0.0
    return round2(sum((line.price or 0) * (line.quantity or 0) for line in cart))
