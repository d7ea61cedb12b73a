from django.contrib import admin

from .models import Submission


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('user', 'paper', 'state', 'suggested_answer_viewed', 'submitted_at', 'marks_obtained')
    list_filter = ('state', 'suggested_answer_viewed')
    search_fields = ('user__email',)
    # State only moves through the API so the conditional transitions hold
    readonly_fields = ('state', 'suggested_answer_viewed', 'answer_sheet', 'evaluated_sheet')
