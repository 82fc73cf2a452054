"""
Coupon dispatch.

Picks the evaluator that matches a coupon's type and feeds it the coupon's
typed conditions. Also holds the status checks (active, date window, usage
limit) that a caller runs before trusting an evaluation; the clock is only
read here, never inside the evaluators.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from coupon_engine.core.errors import CouponNotApplicableError, InvalidCouponConfigError
from coupon_engine.schemas.coupon import BxGyCoupon, CartWiseCoupon, ProductWiseCoupon, parse_coupon
from coupon_engine.services.promo.bxgy import evaluate_bxgy
from coupon_engine.services.promo.cart_wise import evaluate_cart_wise
from coupon_engine.services.promo.money import cart_total, round2
from coupon_engine.services.promo.product_wise import evaluate_product_wise
from coupon_engine.services.promo.result import EvaluationResult
from coupon_engine.services.promo.validation import coerce_cart

logger = logging.getLogger(__name__)

AnyCoupon = Union[CartWiseCoupon, ProductWiseCoupon, BxGyCoupon]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def evaluate_coupon(coupon: Any, cart: Optional[Sequence[Any]]) -> EvaluationResult:
    """run the evaluator for the coupon's type."""
    coupon = parse_coupon(coupon) if isinstance(coupon, dict) else coupon
    lines = coerce_cart(cart)

    if isinstance(coupon, CartWiseCoupon):
        return evaluate_cart_wise(lines, coupon.conditions, coupon.discount)
    elif isinstance(coupon, ProductWiseCoupon):
        return evaluate_product_wise(lines, coupon.conditions.applicable_products, coupon.discount)
    elif isinstance(coupon, BxGyCoupon):
        c = coupon.conditions
        return evaluate_bxgy(lines, c.buy_quantity, c.get_quantity, c.buy_from, c.get_from, c.repetition_limit)

    logger.error(f"Unsupported coupon object: {type(coupon).__name__}")
    raise InvalidCouponConfigError(f"Unsupported coupon type: {type(coupon).__name__}")


def check_coupon_status(coupon: AnyCoupon, now: Optional[datetime] = None) -> Optional[EvaluationResult]:
    """not-applicable result if the coupon can't be used right now, else None."""
    now = _as_utc(now) if now else datetime.now(timezone.utc)

    if not coupon.is_active:
        return EvaluationResult.not_applicable("Coupon is inactive")
    if coupon.applicable_from and now < _as_utc(coupon.applicable_from):
        return EvaluationResult.not_applicable("Coupon is not active yet")
    if coupon.applicable_till and now > _as_utc(coupon.applicable_till):
        return EvaluationResult.not_applicable("Coupon has expired")
    if coupon.max_usage is not None and coupon.current_usage >= coupon.max_usage:
        return EvaluationResult.not_applicable("Maximum usage reached")
    return None


def is_coupon_applicable(coupon: Any, cart: Optional[Sequence[Any]], now: Optional[datetime] = None) -> EvaluationResult:
    coupon = parse_coupon(coupon)
    status = check_coupon_status(coupon, now)
    if status is not None:
        logger.debug(f"coupon {coupon.code}: {status.reason}")
        return status
    return evaluate_coupon(coupon, cart)


def applicable_coupons(
    coupons: Iterable[Any],
    cart: Optional[Sequence[Any]],
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """every coupon that applies to the cart, best discount first."""
    lines = coerce_cart(cart)
    found = []
    for raw in coupons:
        coupon = parse_coupon(raw)
        result = is_coupon_applicable(coupon, lines, now)
        if not result.applicable:
            continue
        found.append({
            "coupon_code": coupon.code,
            "type": coupon.type,
            "description": coupon.description,
            "discount_amount": result.discount_amount,
        })
    found.sort(key=lambda c: c["discount_amount"], reverse=True)
    return found


def apply_coupon(coupon: Any, cart: Optional[Sequence[Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    """price the cart with the coupon or raise CouponNotApplicableError.

    Usage counters are left to the caller; nothing here is persisted.
    """
    coupon = parse_coupon(coupon)
    lines = coerce_cart(cart)
    result = is_coupon_applicable(coupon, lines, now)
    if not result.applicable:
        logger.warning(f"coupon {coupon.code} rejected: {result.reason}")
        raise CouponNotApplicableError(result.reason or "Coupon cannot be applied to this cart", result=result)

    total = cart_total(lines)
    return {
        "coupon_code": coupon.code,
        "coupon_type": coupon.type,
        "cart_total": total,
        "final_total": round2(total - result.discount_amount),
        **result.dict(),
    }
