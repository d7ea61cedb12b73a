# papers/models.py
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from catalog.models import Group, Subject, TestSeries


class Paper(models.Model):
    """One uploaded artifact of a test series (question / suggested answer / evaluated sample)."""

    class PaperType(models.TextChoices):
        QUESTION = "question", "Question Paper"
        SUGGESTED = "suggested", "Suggested Answer"
        EVALUATED = "evaluated", "Evaluated Template"

    class Series(models.TextChoices):
        NONE = "", "Not series-specific"
        SERIES_1 = "series1", "Series 1"
        SERIES_2 = "series2", "Series 2"
        SERIES_3 = "series3", "Series 3"

    class Syllabus(models.TextChoices):
        FULL = "100%", "100%"
        HALF = "50%", "50%"
        THIRD = "30%", "30%"

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        ARCHIVED = "archived", "Archived"

    test_series = models.ForeignKey(TestSeries, related_name='papers', on_delete=models.CASCADE)
    group = models.CharField(max_length=10, choices=Group.choices)
    subject = models.CharField(max_length=10, choices=Subject.choices)
    paper_type = models.CharField(max_length=20, choices=PaperType.choices)
    paper_number = models.PositiveSmallIntegerField(default=1)
    syllabus_percentage = models.CharField(max_length=5, choices=Syllabus.choices, default=Syllabus.FULL)
    # Blank (not NULL) so the uniqueness constraint below also holds for non-series papers
    series = models.CharField(max_length=10, choices=Series.choices, blank=True, default=Series.NONE)

    file = models.CharField(max_length=255, help_text="Storage reference")
    file_name = models.CharField(max_length=255, blank=True)
    availability_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PUBLISHED, db_index=True)

    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['test_series', 'group', 'subject', 'paper_type']),
            models.Index(fields=['test_series', 'status']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['test_series', 'subject', 'series', 'paper_number', 'paper_type'],
                condition=models.Q(paper_type__in=['question', 'suggested']),
                name='unique_question_and_suggested_per_slot',
            ),
        ]

    def __str__(self):
        series = f" {self.series}" if self.series else ""
        return f"{self.test_series.title}{series} {self.subject} #{self.paper_number} ({self.paper_type})"

    @property
    def submission_deadline(self):
        """Answer sheets are accepted until availability_date plus the grace period."""
        if not self.availability_date:
            return None
        grace = settings.TESTSERIES["SUBMISSION_GRACE_PERIOD"]
        return self.availability_date + timedelta(seconds=grace)

    @property
    def is_question(self):
        return self.paper_type == self.PaperType.QUESTION

    def suggested_answer(self):
        """The suggested-answer paper for the same slot, or None."""
        return Paper.objects.filter(
            test_series_id=self.test_series_id,
            subject=self.subject,
            series=self.series,
            paper_number=self.paper_number,
            paper_type=self.PaperType.SUGGESTED,
            status=self.Status.PUBLISHED,
        ).first()
