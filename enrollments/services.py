# enrollments/services.py
import logging
import uuid

from django.db import transaction

from catalog.discounts import record_redemption
from catalog.pricing import validate_selection
from cores.exceptions import DuplicatePaymentReference, EntitlementDenied, InvalidSelection
from cores.models import AuditLog
from papers.entitlement import Entitlement, composite_key, split_key

from .models import Enrollment

logger = logging.getLogger(__name__)


def entitlement_keys_for(product, selection):
    """The key set a purchase of `selection` grants, in catalog order."""
    validate_selection(product, selection)
    subjects = [s for s in product.subjects if s in selection.subjects]
    if not product.is_full:
        return subjects
    return [
        composite_key(f"series{n}", subject)
        for n in sorted(selection.series)
        for subject in subjects
    ]


def normalize_entitlement_keys(product, keys):
    """Validate keys handed over by the commerce side against the product."""
    normalized = []
    for key in keys:
        series, subject = split_key(str(key).strip())
        if subject not in product.subjects:
            raise InvalidSelection(f"Subject not offered in this test series: {subject}")
        if product.is_full:
            if series not in product.series_tags:
                raise InvalidSelection(f"Invalid entitlement key for a series-wise test series: {key}")
            normalized.append(composite_key(series, subject))
        else:
            if series is not None:
                raise InvalidSelection(f"This test series is not sold series-wise: {key}")
            normalized.append(subject)
    return list(dict.fromkeys(normalized))


@transaction.atomic
def record_enrollment(buyer, product, keys, *, amount, reference, provider=Enrollment.Provider.RAZORPAY,
                      discount_code="", actor=None):
    """
    Persist a completed purchase. Re-sending the same payment reference for
    the same buyer/product returns the original row.
    """
    existing = Enrollment.objects.filter(reference=reference).first()
    if existing:
        if existing.user_id == buyer.pk and existing.test_series_id == product.pk:
            return existing
        raise DuplicatePaymentReference()

    enrollment = Enrollment.objects.create(
        user=buyer,
        test_series=product,
        entitlement_keys=list(keys),
        amount=amount,
        reference=reference,
        provider=provider,
        discount_code=discount_code or "",
    )
    if discount_code:
        record_redemption(discount_code, product)

    AuditLog.objects.create(
        actor=actor or buyer,
        action='ENROLL',
        target_model='Enrollment',
        target_object_id=str(enrollment.id),
        details=f"{buyer.email} enrolled in {product.title}: {', '.join(keys) or 'full access'}",
    )
    logger.info("Enrollment %s recorded for user %s on test series %s (%d keys)",
                enrollment.id, buyer.pk, product.pk, len(keys))
    return enrollment


def free_reference():
    return f"FREE-{uuid.uuid4().hex}"


def entitlement_for(buyer, product):
    """
    Union of the buyer's enrollments for the product.
    A buyer without any enrollment is denied outright.
    """
    key_sets = list(
        Enrollment.objects.filter(user=buyer, test_series=product).values_list('entitlement_keys', flat=True)
    )
    if not key_sets:
        raise EntitlementDenied("You are not enrolled in this test series.")

    if any(not keys for keys in key_sets):
        # Legacy/free grant without explicit keys
        return Entitlement(is_full=product.is_full, keys=frozenset())

    merged = frozenset(key for keys in key_sets for key in keys)
    return Entitlement(is_full=product.is_full, keys=merged)
