# enrollments/models.py
from django.conf import settings
from django.db import models

from catalog.models import TestSeries


class Enrollment(models.Model):
    """
    A completed purchase (or free grant) of part of a test series.
    entitlement_keys is exactly what was bought; rows are never edited.
    """

    class Provider(models.TextChoices):
        RAZORPAY = "razorpay", "Razorpay"
        MANUAL = "manual", "Manual / Offline"
        FREE = "free", "Free acquisition"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='enrollments', on_delete=models.CASCADE)
    test_series = models.ForeignKey(TestSeries, related_name='enrollments', on_delete=models.PROTECT)
    entitlement_keys = models.JSONField(default=list, blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    reference = models.CharField(max_length=100, unique=True)  # Gateway payment id
    provider = models.CharField(max_length=20, choices=Provider.choices, default=Provider.RAZORPAY)
    discount_code = models.CharField(max_length=50, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['user', 'test_series'])]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Enrollments are immutable once recorded.")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.user} - {self.test_series} - {len(self.entitlement_keys)} keys"
