from typing import Any, Iterable, List

from pydantic import BaseModel, Field, ValidationError, field_validator

from coupon_engine.core.errors import InvalidCartError


class CartLine(BaseModel):
    product_id: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., gt=0)

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_product_id(cls, v):
        # ids arrive as strings or numbers depending on the client
        if isinstance(v, bool) or v is None:
            raise ValueError("product_id is required")
        if isinstance(v, int):
            return str(v)
        if isinstance(v, str) and v.strip():
            return v.strip()
        raise ValueError("product_id must be a non-empty string or integer")

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


def parse_cart(items: Iterable[Any] | None) -> List[CartLine]:
    """build cart lines from dicts or CartLine instances."""
    if items is None:
        return []
    lines: List[CartLine] = []
    for idx, item in enumerate(items):
        if isinstance(item, CartLine):
            lines.append(item)
            continue
        try:
            # from_attributes lets ORM rows or other line-shaped objects through
            lines.append(CartLine.model_validate(item, from_attributes=True))
        except ValidationError as e:
            raise InvalidCartError(f"Invalid cart item at position {idx}: {e.errors()[0]['msg']}") from e
    return lines
