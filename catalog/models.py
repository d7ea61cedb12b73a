# catalog/models.py
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

MAX_PERCENT = Decimal("100")


class Subject(models.TextChoices):
    FR = "FR", "Financial Reporting"
    AFM = "AFM", "Advanced Financial Management"
    AUDIT = "Audit", "Auditing & Ethics"
    DT = "DT", "Direct Tax"
    IDT = "IDT", "Indirect Tax"


ALL_SUBJECTS = [s.value for s in Subject]


class Group(models.TextChoices):
    GROUP_1 = "Group 1", "Group 1"
    GROUP_2 = "Group 2", "Group 2"
    BOTH = "Both", "Both Groups"


GROUP_SUBJECTS = {
    Group.GROUP_1: [Subject.FR.value, Subject.AFM.value, Subject.AUDIT.value],
    Group.GROUP_2: [Subject.DT.value, Subject.IDT.value],
    Group.BOTH: ALL_SUBJECTS,
}


def subjects_for_group(group):
    """Subjects a group tag pre-fills; unknown tags pre-fill nothing."""
    return list(GROUP_SUBJECTS.get(group, []))


class TestSeries(models.Model):
    """A purchasable test-series product. Maintained through the admin."""

    class Kind(models.TextChoices):
        FULL = "full", "Full Syllabus"
        HALF = "half", "50% Syllabus"
        THIRD = "third", "30% Syllabus"
        SPECIAL = "special", "CA Successful Specials"

    # Papers per subject when the product does not configure its own count
    DEFAULT_PAPERS_PER_SUBJECT = {
        Kind.FULL: 1,
        Kind.HALF: 2,
        Kind.THIRD: 3,
        Kind.SPECIAL: 6,
    }

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    kind = models.CharField(max_length=20, choices=Kind.choices)
    subjects = models.JSONField(default=list, help_text="Subject codes offered, e.g. [\"FR\", \"AFM\"]")
    series_count = models.PositiveSmallIntegerField(default=3, help_text="Full Syllabus only: 2 or 3 series")
    papers_per_subject = models.JSONField(default=dict, blank=True)

    # --- Price book (INR). Empty tier prices fall back to paper_price x papers ---
    subject_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    combo_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    all_subjects_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    full_bundle_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    paper_price = models.DecimalField(max_digits=10, decimal_places=2, default=400)
    currency = models.CharField(max_length=3, default="INR")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name_plural = "test series"

    def __str__(self):
        return f"{self.title} ({self.get_kind_display()})"

    @property
    def is_full(self):
        return self.kind == self.Kind.FULL

    @property
    def series_tags(self):
        if not self.is_full:
            return []
        return [f"series{n}" for n in range(1, self.series_count + 1)]

    def papers_for(self, subject):
        configured = (self.papers_per_subject or {}).get(subject)
        if configured is not None:
            return int(configured)
        return self.DEFAULT_PAPERS_PER_SUBJECT.get(self.kind, 0)


class DiscountCode(models.Model):
    """Coupon printed on a specific test series."""

    class Type(models.TextChoices):
        FLAT = "flat", "Flat amount"
        PERCENT = "percent", "Percentage"

    test_series = models.ForeignKey(TestSeries, related_name='discount_codes', on_delete=models.CASCADE)
    code = models.CharField(max_length=50)
    discount_type = models.CharField(max_length=10, choices=Type.choices)
    value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    label = models.CharField(max_length=100, blank=True)

    class Meta:
        unique_together = ('test_series', 'code')

    def __str__(self):
        return self.label or self.code

    def clean(self):
        if self.discount_type == self.Type.PERCENT and self.value is not None and self.value > MAX_PERCENT:
            raise ValidationError({"value": "A percentage discount cannot exceed 100."})


class Offer(models.Model):
    """Site-wide, time-boxed coupon (may be capped by usage)."""

    class Type(models.TextChoices):
        PERCENTAGE = "percentage", "Percentage"
        FIXED = "fixed", "Fixed amount"

    title = models.CharField(max_length=255)
    code = models.CharField(max_length=50, unique=True)
    discount_type = models.CharField(max_length=20, choices=Type.choices, default=Type.PERCENTAGE)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    max_usage_count = models.PositiveIntegerField(null=True, blank=True, help_text="Empty means unlimited")
    current_usage_count = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.title} ({self.code})"

    def clean(self):
        if (self.discount_type == self.Type.PERCENTAGE and self.discount_value is not None
                and self.discount_value > MAX_PERCENT):
            raise ValidationError({"discount_value": "A percentage discount cannot exceed 100."})
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "End date must be after the start date."})

    def is_redeemable(self, at=None):
        at = at or timezone.now()
        if not self.is_active or not (self.start_date <= at <= self.end_date):
            return False
        if self.max_usage_count is not None and self.current_usage_count >= self.max_usage_count:
            return False
        return True
