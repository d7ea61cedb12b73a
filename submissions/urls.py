from django.urls import path
from .views import (
    SuggestedAnswerView,
    SubmitAnswerSheetView,
    MySubmissionView,
    MySubmissionHistoryView,
    PendingEvaluationListView,
    EvaluateSubmissionView,
    PaperStatisticsView,
)

urlpatterns = [
    # --- Student ---
    path('papers/<int:paper_id>/suggested-answer/', SuggestedAnswerView.as_view(), name='suggested-answer'),
    path('papers/<int:paper_id>/submit/', SubmitAnswerSheetView.as_view(), name='submit-answer-sheet'),
    path('papers/<int:paper_id>/my-submission/', MySubmissionView.as_view(), name='my-submission'),
    path('submissions/', MySubmissionHistoryView.as_view(), name='my-submissions'),

    # --- Evaluators ---
    path('evaluations/pending/', PendingEvaluationListView.as_view(), name='evaluations-pending'),
    path('evaluations/<int:submission_id>/', EvaluateSubmissionView.as_view(), name='evaluate-submission'),

    # --- Public ---
    path('papers/<int:paper_id>/statistics/', PaperStatisticsView.as_view(), name='paper-statistics'),
]
