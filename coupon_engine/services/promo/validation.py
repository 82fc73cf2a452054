"""
Entry checks shared by the evaluators.

Config objects may come in as the pydantic models from
coupon_engine.schemas.coupon or as plain dicts straight off a request body;
either way they are normalized here and anything malformed is raised as
InvalidCouponConfigError.
"""
import logging
from typing import Any, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from coupon_engine.core.errors import InvalidCouponConfigError
from coupon_engine.schemas.cart import CartLine, parse_cart
from coupon_engine.schemas.coupon import DiscountSpec, DiscountType, normalize_product_ids

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_model(value: Any, model: Type[ModelT], label: str) -> ModelT:
    if isinstance(value, model):
        return value
    if value is None:
        logger.error(f"{label} missing")
        raise InvalidCouponConfigError(f"Invalid {label}: missing")
    try:
        return model.model_validate(value)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(p) for p in err.get("loc", ())) or label
        logger.error(f"Rejected {label}: {loc}: {err['msg']}")
        raise InvalidCouponConfigError(f"Invalid {label}: {loc}: {err['msg']}") from e


def coerce_discount(value: Any) -> DiscountSpec:
    return coerce_model(value, DiscountSpec, "discount config")


def coerce_cart(cart: Optional[Iterable[Any]]) -> List[CartLine]:
    """CartLine instances pass through as is; everything else is validated."""
    if cart is None:
        return []
    return parse_cart(cart)


def coerce_ids(ids: Any) -> List[str]:
    if not ids:
        return []
    if isinstance(ids, (str, int)):
        ids = [ids]
    return normalize_product_ids(list(ids))


def require_positive_int(value: Any, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        logger.error(f"{label} must be a positive integer, got {value!r}")
        raise InvalidCouponConfigError(f"Invalid {label}: must be a positive integer")
    return value


def apply_rate(spec: DiscountSpec, base: float, units: int = 1) -> float:
    """raw discount for a base value.

    PERCENTAGE takes value percent of base, FIXED_AMOUNT is value per unit.
    """
    if spec.type == DiscountType.PERCENTAGE:
        return base * spec.value / 100
    if spec.type == DiscountType.FIXED_AMOUNT:
        return spec.value * units
    logger.error(f"Unknown discount type: {spec.type!r}")
    raise InvalidCouponConfigError(f"Unknown discount type: {spec.type}")
