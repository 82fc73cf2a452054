"""
Evaluate coupons against a cart from the command line.

Usage:
    coupon-engine CART.json COUPON.json [COUPON.json ...] [--at ISO_DATETIME] [--apply]

CART.json holds a list of {"product_id", "price", "quantity"} objects; each
COUPON.json holds one coupon (or a list of them). Without --apply every
coupon that fits the cart is listed, best discount first. --apply needs exactly
one coupon.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from coupon_engine.core.config import configure_logging
from coupon_engine.core.errors import CouponEngineError
from coupon_engine.schemas.cart import parse_cart
from coupon_engine.services.promo import applicable_coupons, apply_coupon

logger = logging.getLogger(__name__)


def _load_json(path: str):
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _load_coupons(paths: List[str]) -> list:
    coupons = []
    for path in paths:
        data = _load_json(path)
        coupons.extend(data if isinstance(data, list) else [data])
    return coupons


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Evaluate coupons against a cart")
    parser.add_argument("cart", help="path to cart JSON")
    parser.add_argument("coupons", nargs="+", help="path(s) to coupon JSON")
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        default=None,
        help="evaluate as of this time (ISO 8601, default now)"
    )
    parser.add_argument(
        "--apply",
        action="store_true",
        help="apply the first coupon and print the priced cart"
    )
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        cart = parse_cart(_load_json(args.cart))
        coupons = _load_coupons(args.coupons)
        if args.apply and len(coupons) != 1:
            logger.error(f"--apply takes exactly one coupon, got {len(coupons)}")
            print(json.dumps({"error": "--apply takes exactly one coupon", "status_code": 400}))
            return 2
        if args.apply:
            out = apply_coupon(coupons[0], cart, args.at)
        else:
            out = applicable_coupons(coupons, cart, args.at)
    except CouponEngineError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        print(json.dumps({"error": e.message, "status_code": e.status_code}))
        return 1
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        return 2

    print(json.dumps(out, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
