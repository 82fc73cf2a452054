import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from coupon_engine.core.errors import InvalidCouponConfigError

COUPON_CODE_RE = re.compile(r"^[A-Z0-9]{3,20}$")


class DiscountType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


def normalize_product_ids(v):
    # same coercion as CartLine.product_id so membership checks line up
    if not isinstance(v, (list, tuple, set)):
        return v
    return [str(p).strip() if isinstance(p, (str, int)) and not isinstance(p, bool) else p for p in v]


class DiscountSpec(BaseModel):
    type: DiscountType
    value: float = Field(..., ge=0)


class CartWiseConditions(BaseModel):
    minimum_cart_value: Optional[float] = Field(None, ge=0)
    maximum_discount: Optional[float] = Field(None, ge=0)


class ProductWiseConditions(BaseModel):
    applicable_products: List[str] = Field(..., min_length=1)

    @field_validator("applicable_products", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return normalize_product_ids(v)


class BxGyConditions(BaseModel):
    buy_quantity: int = Field(..., gt=0)
    get_quantity: int = Field(..., gt=0)
    buy_from: List[str] = Field(..., min_length=1)
    get_from: List[str] = Field(..., min_length=1)
    repetition_limit: Optional[int] = Field(None, gt=0)

    @field_validator("buy_from", "get_from", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return normalize_product_ids(v)


class CouponBase(BaseModel):
    code: str
    description: Optional[str] = None
    discount: DiscountSpec
    is_active: bool = True
    applicable_from: Optional[datetime] = None
    applicable_till: Optional[datetime] = None
    max_usage: Optional[int] = Field(None, gt=0)
    current_usage: int = Field(0, ge=0)

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        v = v.strip().upper()
        if not COUPON_CODE_RE.match(v):
            raise ValueError("code must be 3-20 alphanumeric characters")
        return v


class CartWiseCoupon(CouponBase):
    type: Literal["CART_WISE"] = "CART_WISE"
    conditions: CartWiseConditions = Field(default_factory=CartWiseConditions)


class ProductWiseCoupon(CouponBase):
    type: Literal["PRODUCT_WISE"] = "PRODUCT_WISE"
    conditions: ProductWiseConditions


class BxGyCoupon(CouponBase):
    type: Literal["BXGY"] = "BXGY"
    # the free units are the discount, so this is informational only
    discount: DiscountSpec = Field(
        default_factory=lambda: DiscountSpec(type=DiscountType.PERCENTAGE, value=100)
    )
    conditions: BxGyConditions


Coupon = Annotated[
    Union[CartWiseCoupon, ProductWiseCoupon, BxGyCoupon],
    Field(discriminator="type"),
]

_coupon_adapter = TypeAdapter(Coupon)


def parse_coupon(data: Any) -> Union[CartWiseCoupon, ProductWiseCoupon, BxGyCoupon]:
    """validate a JSON-like coupon payload into its typed variant."""
    if isinstance(data, (CartWiseCoupon, ProductWiseCoupon, BxGyCoupon)):
        return data
    try:
        return _coupon_adapter.validate_python(data)
    except ValidationError as e:
        err = e.errors()[0]
        loc = ".".join(str(p) for p in err.get("loc", ()))
        raise InvalidCouponConfigError(f"Invalid coupon: {loc}: {err['msg']}") from e
