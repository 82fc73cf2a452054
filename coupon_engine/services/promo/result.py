from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class EvaluationResult:
    """outcome of evaluating one coupon against one cart."""
    applicable: bool
    discount_amount: float = 0.0
    reason: Optional[str] = None
    breakdown: Optional[Dict[str, Any]] = None

    @classmethod
    def not_applicable(cls, reason: str, breakdown: Optional[Dict[str, Any]] = None) -> "EvaluationResult":
        return cls(applicable=False, discount_amount=0.0, reason=reason, breakdown=breakdown)

    def dict(self) -> Dict[str, Any]:
        return {
            "applicable": self.applicable,
            "discount_amount": self.discount_amount,
            "reason": self.reason,
            "breakdown": self.breakdown,
        }
