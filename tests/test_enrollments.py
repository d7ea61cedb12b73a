from decimal import Decimal

import pytest

from catalog.pricing import Selection
from cores.exceptions import DuplicatePaymentReference, InvalidSelection
from cores.models import AuditLog
from enrollments.models import Enrollment
from enrollments.services import entitlement_keys_for, normalize_entitlement_keys, record_enrollment

pytestmark = pytest.mark.django_db


def test_full_product_keys_are_series_subject_composites(full_product):
    keys = entitlement_keys_for(full_product, Selection.build(subjects=["AFM", "FR"], series=[2, 1]))

    assert keys == ["series1-FR", "series1-AFM", "series2-FR", "series2-AFM"]


def test_other_products_grant_bare_subjects(half_product):
    keys = entitlement_keys_for(half_product, Selection.build(group="Group 1"))

    assert keys == ["FR", "AFM", "Audit"]


def test_invalid_selection_grants_nothing(full_product):
    with pytest.raises(InvalidSelection):
        entitlement_keys_for(full_product, Selection.build(subjects=["FR"]))


def test_normalize_keys_rejects_bare_subject_on_full_product(full_product):
    with pytest.raises(InvalidSelection):
        normalize_entitlement_keys(full_product, ["FR"])


def test_normalize_keys_rejects_series_on_other_products(half_product):
    with pytest.raises(InvalidSelection):
        normalize_entitlement_keys(half_product, ["series1-FR"])


def test_normalize_keys_dedupes(full_product):
    assert normalize_entitlement_keys(full_product, ["series1-FR", " series1-FR"]) == ["series1-FR"]


def test_record_enrollment_is_idempotent_per_reference(student, full_product):
    first = record_enrollment(student, full_product, ["series1-FR"], amount=Decimal("450"), reference="pay_1")
    again = record_enrollment(student, full_product, ["series1-FR"], amount=Decimal("450"), reference="pay_1")

    assert first.pk == again.pk
    assert Enrollment.objects.count() == 1
    assert AuditLog.objects.filter(action='ENROLL').count() == 1


def test_reference_reused_by_someone_else(student, other_student, full_product):
    record_enrollment(student, full_product, ["series1-FR"], amount=Decimal("450"), reference="pay_1")

    with pytest.raises(DuplicatePaymentReference):
        record_enrollment(other_student, full_product, ["series1-FR"], amount=Decimal("450"), reference="pay_1")


def test_enrollments_cannot_be_edited(student, full_product, enroll):
    enrollment = enroll(student, full_product, ["series1-FR"])
    enrollment.entitlement_keys = ["series1-FR", "series2-FR"]

    with pytest.raises(ValueError):
        enrollment.save()
