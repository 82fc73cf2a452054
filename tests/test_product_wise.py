import pytest

from coupon_engine.core.errors import InvalidCouponConfigError
from coupon_engine.services.promo.product_wise import evaluate_product_wise
from helpers import make_cart

PCT20 = {"type": "PERCENTAGE", "value": 20}


def test_discounts_only_eligible_products(product_cart):
    res = evaluate_product_wise(product_cart, ["P1", "P3"], PCT20)
    assert res.applicable is True
    # 20% of 200 + 20% of 75
    assert res.discount_amount == 55.0
    items = res.breakdown["discounted_items"]
    assert [i["product_id"] for i in items] == ["P1", "P3"]
    assert items[0] == {"product_id": "P1", "quantity": 2, "price": 100.0, "line_subtotal": 200.0, "line_discount": 40.0}
    assert items[1]["line_discount"] == 15.0
    assert res.breakdown["total_discount"] == 55.0


def test_breakdown_keeps_cart_order():
    cart = make_cart(("P3", 75, 1), ("P2", 50, 1), ("P1", 100, 2))
    res = evaluate_product_wise(cart, ["P1", "P3"], PCT20)
    assert [i["product_id"] for i in res.breakdown["discounted_items"]] == ["P3", "P1"]


def test_fixed_amount_is_per_unit():
    cart = make_cart(("P1", 100, 2), ("P2", 50, 1))
    res = evaluate_product_wise(cart, ["P1"], {"type": "FIXED_AMOUNT", "value": 50})
    assert res.applicable is True
    assert res.discount_amount == 100.0


def test_fixed_amount_capped_at_line_subtotal():
    cart = make_cart(("P1", 10, 3))
    res = evaluate_product_wise(cart, ["P1"], {"type": "FIXED_AMOUNT", "value": 15})
    assert res.discount_amount == 30.0


def test_no_eligible_products_in_cart():
    cart = make_cart(("P1", 100, 1))
    res = evaluate_product_wise(cart, ["P2", "P3"], PCT20)
    assert res.applicable is False
    assert res.discount_amount == 0
    assert res.reason == "No applicable products found in your cart"
    assert res.breakdown == {"applicable_products": ["P2", "P3"], "cart_products": ["P1"]}


def test_zero_value_discount_is_not_applicable():
    cart = make_cart(("P1", 100, 1))
    res = evaluate_product_wise(cart, ["P1"], {"type": "PERCENTAGE", "value": 0})
    assert res.applicable is False
    assert res.discount_amount == 0
    assert "zero" in res.reason


def test_empty_cart():
    res = evaluate_product_wise([], ["P1"], PCT20)
    assert res.applicable is False
    assert res.reason == "Cart is empty"


@pytest.mark.parametrize("ids", [None, []])
def test_no_products_defined(product_cart, ids):
    res = evaluate_product_wise(product_cart, ids, PCT20)
    assert res.applicable is False
    assert res.discount_amount == 0


def test_numeric_ids_match_string_ids():
    cart = [{"product_id": 1, "price": 10, "quantity": 1}]
    res = evaluate_product_wise(cart, [1], {"type": "PERCENTAGE", "value": 50})
    assert res.discount_amount == 5.0


def test_removing_ineligible_line_changes_nothing(product_cart):
    full = evaluate_product_wise(product_cart, ["P1", "P3"], PCT20)
    trimmed = evaluate_product_wise([l for l in product_cart if l.product_id != "P2"], ["P1", "P3"], PCT20)
    assert full == trimmed


def test_unknown_discount_type_raises(product_cart):
    with pytest.raises(InvalidCouponConfigError):
        evaluate_product_wise(product_cart, ["P1"], {"type": "HALF_OFF", "value": 1})


def test_line_objects_with_numeric_ids_are_normalized():
    from types import SimpleNamespace

    cart = [SimpleNamespace(product_id=1, price=40, quantity=2)]
    res = evaluate_product_wise(cart, [1], {"type": "PERCENTAGE", "value": 25})
    assert res.applicable is True
    assert res.discount_amount == 20.0
    assert res.breakdown["discounted_items"][0]["product_id"] == "1"
