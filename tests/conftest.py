import itertools
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from catalog.models import ALL_SUBJECTS, GROUP_SUBJECTS, Group
from catalog.models import TestSeries as Series
from enrollments.services import record_enrollment
from papers.models import Paper

_references = itertools.count(1)


@pytest.fixture(autouse=True)
def in_memory_storage(settings):
    settings.STORAGES = {
        "default": {"BACKEND": "django.core.files.storage.InMemoryStorage"},
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }


@pytest.fixture
def api_client():
    return APIClient()


# --- Users ---

@pytest.fixture
def student(django_user_model):
    return django_user_model.objects.create_user(
        username="asha", email="asha@example.com", password="pass12345"
    )


@pytest.fixture
def other_student(django_user_model):
    return django_user_model.objects.create_user(
        username="ravi", email="ravi@example.com", password="pass12345"
    )


@pytest.fixture
def evaluator(django_user_model):
    return django_user_model.objects.create_user(
        username="meera", email="meera@example.com", password="pass12345", role="evaluator"
    )


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_superuser(
        username="admin", email="admin@example.com", password="pass12345"
    )


# --- Catalog ---

def full_series_product(**overrides):
    """FullProd: 3 series, all five subjects, one paper per subject per series."""
    values = dict(
        title="FullProd",
        kind=Series.Kind.FULL,
        subjects=list(ALL_SUBJECTS),
        series_count=3,
        subject_price=Decimal("450"),
        combo_price=Decimal("1200"),
        all_subjects_price=Decimal("2000"),
        full_bundle_price=Decimal("6000"),
    )
    values.update(overrides)
    return Series(**values)


@pytest.fixture
def full_product(db):
    product = full_series_product()
    product.save()
    return product


@pytest.fixture
def half_product(db):
    return Series.objects.create(
        title="Half Syllabus",
        kind=Series.Kind.HALF,
        subjects=list(GROUP_SUBJECTS[Group.GROUP_1]),
        subject_price=Decimal("900"),
    )


# --- Papers ---

def group_of(subject):
    return Group.GROUP_1 if subject in GROUP_SUBJECTS[Group.GROUP_1] else Group.GROUP_2


@pytest.fixture
def make_paper(db):
    def _make(product, subject="FR", series="series1", paper_type=Paper.PaperType.QUESTION, number=1, **extra):
        return Paper.objects.create(
            test_series=product,
            group=group_of(subject),
            subject=subject,
            series=series,
            paper_type=paper_type,
            paper_number=number,
            file=f"papers/{product.pk}/{series or 'all'}-{subject}-{paper_type}-{number}.pdf",
            file_name=f"{subject} {paper_type}.pdf",
            **extra,
        )
    return _make


@pytest.fixture
def fr_question(full_product, make_paper):
    return make_paper(full_product, "FR", "series1")


@pytest.fixture
def fr_suggested(full_product, make_paper):
    return make_paper(full_product, "FR", "series1", paper_type=Paper.PaperType.SUGGESTED)


# --- Enrollments ---

@pytest.fixture
def enroll(db):
    def _enroll(user, product, keys, amount=Decimal("0")):
        return record_enrollment(user, product, keys, amount=amount, reference=f"pay_{next(_references)}")
    return _enroll


# --- Uploads ---

@pytest.fixture
def pdf_file():
    def _pdf(name="answer-sheet.pdf", content=b"%PDF-1.4 answer sheet"):
        return SimpleUploadedFile(name, content, content_type="application/pdf")
    return _pdf
