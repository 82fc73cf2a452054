from coupon_engine.schemas.cart import CartLine


def make_cart(*items):
    """build cart lines from (product_id, price, quantity) tuples"""
    return [CartLine(product_id=p, price=price, quantity=qty) for p, price, qty in items]
