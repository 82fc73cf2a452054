"""
Errors raised for input-contract violations.

Business outcomes such as "cart below minimum" are never raised; they come
back as a not-applicable EvaluationResult. The classes here signal a caller
bug (malformed coupon configuration or cart) and carry an HTTP status hint
so API layers can translate them into a client error response.
"""
from typing import Any, Optional


class CouponEngineError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidCouponConfigError(CouponEngineError, ValueError):
    """coupon conditions or discount config are malformed."""
    status_code = 400


class InvalidCartError(CouponEngineError, ValueError):
    """cart payload could not be parsed into cart lines."""
    status_code = 400


class CouponNotApplicableError(CouponEngineError):
    """raised by apply_coupon when the coupon does not apply to the cart."""
    status_code = 400

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result
