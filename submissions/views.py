# submissions/views.py
import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status, views
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from papers.models import Paper
from papers.serializers import PaperSerializer
from users.permissions import IsEvaluatorOrAdmin

from .models import Submission
from .serializers import (
    EvaluateSubmissionSerializer, PaperStatisticsSerializer, PendingEvaluationSerializer,
    SubmissionSerializer, SubmitAnswerSheetSerializer,
)
from .services import evaluate_submission, submit_answer_sheet, view_suggested_answer
from .statistics import paper_statistics

logger = logging.getLogger(__name__)


def _published_paper(paper_id):
    return get_object_or_404(
        Paper.objects.select_related('test_series'), id=paper_id, status=Paper.Status.PUBLISHED
    )


# --- Student side ---

class SuggestedAnswerView(views.APIView):
    """
    Returns the suggested answer for a question paper.
    Viewing it before submitting locks the submission for good.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, paper_id):
        paper = _published_paper(paper_id)
        suggested, url = view_suggested_answer(request.user, paper)
        submission = Submission.objects.get(user=request.user, paper=paper)

        data = PaperSerializer(suggested).data
        data['file_url'] = url
        return Response({
            "suggested_answer": data,
            "submission": SubmissionSerializer(submission).data,
        })


class SubmitAnswerSheetView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, paper_id):
        paper = _published_paper(paper_id)
        payload = SubmitAnswerSheetSerializer(data=request.data)
        payload.is_valid(raise_exception=True)

        submission = submit_answer_sheet(request.user, paper, payload.validated_data.get('answer_sheet'))
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)


class MySubmissionView(views.APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, paper_id):
        paper = _published_paper(paper_id)
        submission = Submission.objects.filter(user=request.user, paper=paper).first()
        if not submission:
            return Response({"submission": None, "can_submit": paper.is_question})
        return Response({"submission": SubmissionSerializer(submission).data})


class MySubmissionHistoryView(generics.ListAPIView):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = SubmissionSerializer

    def get_queryset(self):
        return (
            Submission.objects.filter(user=self.request.user)
            .select_related('paper__test_series')
            .order_by('-created_at')
        )


# --- Evaluator side ---

class PendingEvaluationListView(generics.ListAPIView):
    """Submitted sheets waiting for marks. Filters: ?paper=<id>&test_series=<id>"""
    permission_classes = [IsEvaluatorOrAdmin]
    serializer_class = PendingEvaluationSerializer

    def get_queryset(self):
        queryset = (
            Submission.objects.filter(state=Submission.State.SUBMITTED)
            .select_related('user', 'paper__test_series')
            .order_by('submitted_at')
        )
        paper_id = self.request.query_params.get('paper')
        if paper_id:
            queryset = queryset.filter(paper_id=paper_id)
        test_series_id = self.request.query_params.get('test_series')
        if test_series_id:
            queryset = queryset.filter(paper__test_series_id=test_series_id)
        return queryset


class EvaluateSubmissionView(views.APIView):
    permission_classes = [IsEvaluatorOrAdmin]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, submission_id):
        submission = get_object_or_404(
            Submission.objects.select_related('user', 'paper__test_series'), id=submission_id
        )
        payload = EvaluateSubmissionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        submission = evaluate_submission(
            submission,
            request.user,
            marks_obtained=data['marks_obtained'],
            max_marks=data['max_marks'],
            comments=data['comments'],
            evaluated_file=data.get('evaluated_sheet'),
        )
        return Response(SubmissionSerializer(submission).data)


# --- Public ---

class PaperStatisticsView(views.APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, paper_id):
        paper = _published_paper(paper_id)
        return Response(PaperStatisticsSerializer(paper_statistics(paper.id)).data)
