"""
Promo / coupon discount services.

This package contains the discount engine:
- cart-wise, product-wise and buy-X-get-Y evaluators
- currency rounding helpers
- coupon dispatch and status checks
"""

from .money import round2, cart_total
from .result import EvaluationResult
from .cart_wise import evaluate_cart_wise
from .product_wise import evaluate_product_wise
from .bxgy import evaluate_bxgy
from .dispatcher import (
    evaluate_coupon,
    check_coupon_status,
    is_coupon_applicable,
    applicable_coupons,
    apply_coupon
)

__all__ = [
    'round2',
    'cart_total',
    'EvaluationResult',
    'evaluate_cart_wise',
    'evaluate_product_wise',
    'evaluate_bxgy',
    'evaluate_coupon',
    'check_coupon_status',
    'is_coupon_applicable',
    'applicable_coupons',
    'apply_coupon'
]
