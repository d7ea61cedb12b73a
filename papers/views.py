# papers/views.py
import logging

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status, views
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from catalog.models import TestSeries
from cores.models import AuditLog
from cores.storage import store_file, validate_upload
from enrollments.services import entitlement_for
from submissions.statistics import statistics_for_papers

from .entitlement import Entitlement, visible_papers
from .models import Paper
from .selectors import grouped_papers
from .serializers import PaperSerializer, PaperUploadSerializer

logger = logging.getLogger(__name__)


class GroupedPapersView(views.APIView):
    """
    Papers of one test series grouped by subject, narrowed to what the
    caller has bought. Query params: ?group=Group 1&series=series2
    """
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, test_series_id):
        product = get_object_or_404(TestSeries, id=test_series_id, is_active=True)

        if request.user.is_evaluator:
            entitlement = Entitlement(is_full=product.is_full, keys=frozenset())
        else:
            entitlement = entitlement_for(request.user, product)

        grouped = visible_papers(
            entitlement,
            grouped_papers(
                product,
                group=request.query_params.get('group') or None,
                series=request.query_params.get('series') or None,
            ),
        )

        question_ids = [p.id for papers in grouped.values() for p in papers if p.is_question]
        context = {'request': request, 'statistics': statistics_for_papers(question_ids)}

        return Response({
            "test_series": {"id": product.id, "title": product.title, "kind": product.kind},
            "papers": {
                subject: PaperSerializer(papers, many=True, context=context).data
                for subject, papers in grouped.items()
            },
        })


class PaperUploadView(views.APIView):
    """Staff upload of question papers, suggested answers and evaluated samples (PDF only)."""
    permission_classes = [permissions.IsAdminUser]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        payload = PaperUploadSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        uploaded = data.pop('file')
        validate_upload(uploaded)
        ref = store_file(uploaded, f"papers/{data['test_series'].id}")

        paper = Paper.objects.create(
            file=ref,
            file_name=uploaded.name,
            created_by=request.user,
            **data,
        )

        AuditLog.objects.create(
            actor=request.user,
            action='PAPER_UPLOAD',
            target_model='Paper',
            target_object_id=str(paper.id),
            details=f"Uploaded {paper}",
        )
        logger.info("Paper %s uploaded by %s", paper.id, request.user.pk)
        return Response(PaperSerializer(paper).data, status=status.HTTP_201_CREATED)
