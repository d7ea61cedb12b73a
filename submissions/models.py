# submissions/models.py
from django.conf import settings
from django.db import models

from papers.models import Paper


class Submission(models.Model):
    """
    One learner's answer sheet for one question paper.

    Lifecycle: unsubmitted -> submitted -> evaluated.
    suggested_answer_viewed only ever goes False -> True; once set while
    unsubmitted, the sheet can no longer be submitted.
    """

    class State(models.TextChoices):
        UNSUBMITTED = "unsubmitted", "Unsubmitted"
        SUBMITTED = "submitted", "Submitted"
        EVALUATED = "evaluated", "Evaluated"

    user = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='submissions', on_delete=models.CASCADE)
    paper = models.ForeignKey(Paper, related_name='submissions', on_delete=models.PROTECT)
    state = models.CharField(max_length=20, choices=State.choices, default=State.UNSUBMITTED)
    suggested_answer_viewed = models.BooleanField(default=False)

    # Answer sheet
    answer_sheet = models.CharField(max_length=255, blank=True, help_text="Storage reference")
    answer_sheet_name = models.CharField(max_length=255, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)

    # Evaluation
    marks_obtained = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    max_marks = models.DecimalField(max_digits=6, decimal_places=2, null=True, blank=True)
    percentage = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True)
    evaluator_comments = models.TextField(blank=True)
    evaluated_sheet = models.CharField(max_length=255, blank=True, help_text="Storage reference")
    evaluated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, related_name='evaluations', on_delete=models.SET_NULL
    )
    evaluated_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('user', 'paper')
        indexes = [models.Index(fields=['paper', 'state'])]

    def __str__(self):
        return f"{self.user} - {self.paper} - {self.state}"
