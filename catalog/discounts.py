# catalog/discounts.py
import logging

from django.db.models import F
from django.utils import timezone

from cores.exceptions import DiscountNotFound

from .models import DiscountCode, Offer
from .pricing import DiscountDescriptor

logger = logging.getLogger(__name__)

_OFFER_KINDS = {
    Offer.Type.PERCENTAGE: DiscountDescriptor.PERCENT,
    Offer.Type.FIXED: DiscountDescriptor.FLAT,
}


def normalize_code(code):
    return (code or "").strip().upper()


def resolve_discount_code(code, product=None):
    """
    Look a coupon up and return a DiscountDescriptor.

    Codes printed on the product win over site-wide offers with the same code.
    Offers must be active, inside their date window and under their usage cap.
    Matching is case-insensitive.
    """
    normalized = normalize_code(code)
    if not normalized:
        raise DiscountNotFound()

    if product is not None:
        printed = DiscountCode.objects.filter(test_series=product, code__iexact=normalized).first()
        if printed:
            return DiscountDescriptor(code=normalized, kind=printed.discount_type, value=printed.value)

    offer = Offer.objects.filter(code__iexact=normalized).first()
    if offer and offer.is_redeemable(timezone.now()):
        return DiscountDescriptor(code=normalized, kind=_OFFER_KINDS[offer.discount_type], value=offer.discount_value)

    logger.info("Rejected coupon %r for test series %s", normalized, getattr(product, "pk", None))
    raise DiscountNotFound()


def record_redemption(code, product):
    """Count one use of a site-wide offer. Product coupons are uncapped."""
    normalized = normalize_code(code)
    if not normalized:
        return
    if DiscountCode.objects.filter(test_series=product, code__iexact=normalized).exists():
        return
    Offer.objects.filter(code__iexact=normalized).update(current_usage_count=F("current_usage_count") + 1)
