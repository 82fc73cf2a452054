"""
Buy-X-get-Y coupons.

Every ``buy_quantity`` units bought from ``buy_from`` earn ``get_quantity``
free units from ``get_from``, at most ``repetition_limit`` times. Free units
are handed out highest price first so the customer keeps the most valuable
items; lines of equal price keep their cart order. A line never gives away
more free units than it holds.
"""
import logging
from typing import Any, Iterable, List, Optional, Sequence

from coupon_engine.services.promo.money import round2
from coupon_engine.services.promo.result import EvaluationResult
from coupon_engine.services.promo.validation import coerce_cart, coerce_ids, require_positive_int

logger = logging.getLogger(__name__)


def _pick_free_units(candidates: List[Any], needed: int):
    """greedily take free units from the priciest candidates.

    Returns (total discount, units given, per-line details).
    """
    # sorted() leaves the caller's cart untouched and is stable on ties
    ranked = sorted(candidates, key=lambda line: line.price, reverse=True)

    total = 0.0
    given = 0
    details = []
    for line in ranked:
        remaining = needed - given
        if remaining <= 0:
            break
        free_qty = min(line.quantity, remaining)
        if free_qty <= 0:
            continue
        line_discount = free_qty * line.price
        total += line_discount
        given += free_qty
        details.append({
            "product_id": line.product_id,
            "free_quantity": free_qty,
            "price": round2(line.price),
            "line_discount": round2(line_discount),
        })
    return total, given, details


def evaluate_bxgy(
    cart: Optional[Sequence[Any]],
    buy_quantity: Any,
    get_quantity: Any,
    buy_from: Optional[Iterable[Any]],
    get_from: Optional[Iterable[Any]],
    repetition_limit: Optional[int] = None,
) -> EvaluationResult:
    lines = coerce_cart(cart)
    if not lines:
        return EvaluationResult.not_applicable("Cart is empty")

    buy_ids = coerce_ids(buy_from)
    if not buy_ids:
        return EvaluationResult.not_applicable("No products defined in buy array")
    get_ids = coerce_ids(get_from)
    if not get_ids:
        return EvaluationResult.not_applicable("No products defined in get array")

    buy_quantity = require_positive_int(buy_quantity, "buy_quantity")
    get_quantity = require_positive_int(get_quantity, "get_quantity")
    if repetition_limit is not None:
        repetition_limit = require_positive_int(repetition_limit, "repetition_limit")

    buy_set = set(buy_ids)
    buy_lines = [line for line in lines if line.product_id in buy_set]
    buy_count = sum(line.quantity for line in buy_lines)

    if buy_count < buy_quantity:
        logger.debug(f"bxgy: need {buy_quantity} buy units, found {buy_count}")
        return EvaluationResult.not_applicable(
            f"Need at least {buy_quantity} items from buy array, but found {buy_count}",
            breakdown={
                "buy_from": buy_ids,
                "buy_quantity_required": buy_quantity,
                "buy_quantity_found": buy_count,
                "shortfall": buy_quantity - buy_count,
                "buy_items_in_cart": [
                    {"product_id": line.product_id, "quantity": line.quantity, "price": round2(line.price)}
                    for line in buy_lines
                ],
            },
        )

    times_applicable = buy_count // buy_quantity
    times_applied = times_applicable
    if repetition_limit is not None:
        times_applied = min(times_applicable, repetition_limit)

    get_set = set(get_ids)
    candidates = [line for line in lines if line.product_id in get_set]
    if not candidates:
        logger.debug("bxgy: buy condition met but no free-item candidates in cart")
        return EvaluationResult.not_applicable(
            "No eligible items found in cart to get for free",
            breakdown={
                "get_from": get_ids,
                "cart_products": [line.product_id for line in lines],
            },
        )

    needed = times_applied * get_quantity
    total, given, details = _pick_free_units(candidates, needed)
    total = round2(total)

    breakdown = {
        "buy_quantity_required": buy_quantity,
        "buy_quantity_found": buy_count,
        "get_quantity_per_application": get_quantity,
        "times_applicable": times_applicable,
        "times_applied": times_applied,
        "free_items_needed": needed,
        "free_items_given": given,
        "free_items": details,
        "total_discount": total,
    }
    if repetition_limit is not None:
        breakdown["repetition_limit"] = repetition_limit

    logger.debug(f"bxgy: applied {times_applied}x, {given}/{needed} free units, discount {total}")
    return EvaluationResult(applicable=True, discount_amount=total, breakdown=breakdown)
