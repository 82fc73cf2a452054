"""
Cart-wise coupons: a discount over the whole cart, gated on a minimum spend
and optionally capped at a maximum discount.
"""
import logging
from typing import Any, Optional, Sequence

from coupon_engine.core.config import settings
from coupon_engine.schemas.coupon import CartWiseConditions
from coupon_engine.services.promo.money import round2
from coupon_engine.services.promo.result import EvaluationResult
from coupon_engine.services.promo.validation import apply_rate, coerce_cart, coerce_discount, coerce_model

logger = logging.getLogger(__name__)


def _money(value: float) -> str:
    return f"{settings.CURRENCY_LABEL}{round2(value):.2f}"


def evaluate_cart_wise(
    cart: Optional[Sequence[Any]],
    conditions: Any,
    discount: Any,
) -> EvaluationResult:
    lines = coerce_cart(cart)
    if not lines:
        return EvaluationResult.not_applicable("Cart is empty")

    conditions = coerce_model(conditions, CartWiseConditions, "cart-wise conditions")
    spec = coerce_discount(discount)

    total = sum(line.price * line.quantity for line in lines)
    minimum = conditions.minimum_cart_value or 0

    if total < minimum:
        logger.debug(f"cart-wise: total {total} below minimum {minimum}")
        return EvaluationResult.not_applicable(
            f"Cart total {_money(total)} is below minimum {_money(minimum)} "
            f"(short by {_money(minimum - total)})",
            breakdown={
                "cart_total": round2(total),
                "minimum_required": round2(minimum),
                "shortfall": round2(minimum - total),
            },
        )

    calculated = apply_rate(spec, total)
    amount = calculated
    reason = None

    cap = conditions.maximum_discount
    capped = cap is not None and amount > cap
    if capped:
        amount = cap
        logger.info(f"cart-wise: discount {calculated} capped at {cap}")

    # a flat amount bigger than the cart can't take it below zero
    clamped = amount > total
    if clamped:
        amount = total

    amount = round2(amount)
    if clamped:
        reason = f"Discount limited to cart total of {_money(amount)}"
    elif capped:
        reason = f"Discount capped at maximum of {_money(amount)}"

    breakdown = {
        "cart_total": round2(total),
        "discount_type": spec.type.value,
        "discount_value": spec.value,
        "final_discount": amount,
        "final_amount": round2(total - amount),
    }
    if cap is not None:
        breakdown["maximum_cap"] = round2(cap)
    if capped or clamped:
        breakdown["calculated_discount"] = round2(calculated)

    logger.debug(f"cart-wise: applicable, discount {amount}")
    return EvaluationResult(applicable=True, discount_amount=amount, reason=reason, breakdown=breakdown)
