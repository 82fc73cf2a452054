"""
Product-wise coupons: discount only the cart lines whose product is on the
coupon's allow-list. Other lines are left alone and kept out of the breakdown.
"""
import logging
from typing import Any, Iterable, Optional, Sequence

from coupon_engine.services.promo.money import round2
from coupon_engine.services.promo.result import EvaluationResult
from coupon_engine.services.promo.validation import apply_rate, coerce_cart, coerce_discount, coerce_ids

logger = logging.getLogger(__name__)


def evaluate_product_wise(
    cart: Optional[Sequence[Any]],
    applicable_products: Optional[Iterable[Any]],
    discount: Any,
) -> EvaluationResult:
    lines = coerce_cart(cart)
    if not lines:
        return EvaluationResult.not_applicable("Cart is empty")

    eligible_ids = coerce_ids(applicable_products)
    if not eligible_ids:
        return EvaluationResult.not_applicable("No applicable products defined for this coupon")

    spec = coerce_discount(discount)
    eligible = set(eligible_ids)

    total_discount = 0.0
    matched = 0
    discounted_items = []
    for line in lines:
        if line.product_id not in eligible:
            continue
        matched += 1
        subtotal = line.price * line.quantity
        # a per-unit flat amount can't exceed what the line costs
        line_discount = min(apply_rate(spec, subtotal, units=line.quantity), subtotal)
        total_discount += line_discount
        discounted_items.append({
            "product_id": line.product_id,
            "quantity": line.quantity,
            "price": round2(line.price),
            "line_subtotal": round2(subtotal),
            "line_discount": round2(line_discount),
        })

    if total_discount == 0:
        if matched:
            reason = "Eligible products found but the discount value is zero"
        else:
            reason = "No applicable products found in your cart"
        logger.debug(f"product-wise: not applicable ({reason})")
        return EvaluationResult.not_applicable(
            reason,
            breakdown={
                "applicable_products": eligible_ids,
                "cart_products": [line.product_id for line in lines],
            },
        )

    total_discount = round2(total_discount)
    logger.debug(f"product-wise: {matched} line(s) discounted, total {total_discount}")
    return EvaluationResult(
        applicable=True,
        discount_amount=total_discount,
        breakdown={
            "discount_type": spec.type.value,
            "discount_value": spec.value,
            "discounted_items": discounted_items,
            "total_discount": total_discount,
        },
    )
