# catalog/services.py
from .discounts import resolve_discount_code
from .pricing import Selection, compute_price


def quote_selection(product, *, subjects=None, series=None, group=None, coupon_code=None):
    """Build the Selection from request values and price it. Returns (selection, quote)."""
    selection = Selection.build(subjects=subjects, series=series, group=group, offered=product.subjects)
    discount = resolve_discount_code(coupon_code, product) if coupon_code else None
    return selection, compute_price(product, selection, discount)
