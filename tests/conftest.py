import pytest

from helpers import make_cart


@pytest.fixture
def small_cart():
    return make_cart(("A", 100, 1), ("B", 50, 1))


@pytest.fixture
def product_cart():
    return make_cart(("P1", 100, 2), ("P2", 50, 1), ("P3", 75, 1))


@pytest.fixture
def bxgy_cart():
    return make_cart(("A", 100, 6), ("D", 500, 1), ("E", 400, 1), ("F", 300, 1))


@pytest.fixture
def cart_wise_coupon():
    return {
        "code": "SAVE10",
        "type": "CART_WISE",
        "description": "10% off carts over 100",
        "discount": {"type": "PERCENTAGE", "value": 10},
        "conditions": {"minimum_cart_value": 100},
    }


@pytest.fixture
def product_wise_coupon():
    return {
        "code": "PROD20",
        "type": "PRODUCT_WISE",
        "discount": {"type": "PERCENTAGE", "value": 20},
        "conditions": {"applicable_products": ["P1", "P3"]},
    }


@pytest.fixture
def bxgy_coupon():
    return {
        "code": "B2G1",
        "type": "BXGY",
        "conditions": {
            "buy_quantity": 2,
            "get_quantity": 1,
            "buy_from": ["A", "B", "C"],
            "get_from": ["D", "E", "F"],
            "repetition_limit": 3,
        },
    }
