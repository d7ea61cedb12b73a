import logging

from django.core import signing
from django.http import FileResponse, Http404
from rest_framework import generics, permissions, views

from .models import AuditLog
from .serializers import AuditLogSerializer
from .storage import open_signed_file

logger = logging.getLogger(__name__)


class AuditLogListView(generics.ListAPIView):
    queryset = AuditLog.objects.select_related('actor').all().order_by('-timestamp')
    serializer_class = AuditLogSerializer
    permission_classes = [permissions.IsAdminUser]

    def get_queryset(self):
        queryset = super().get_queryset()
        action = self.request.query_params.get('action')
        if action:
            queryset = queryset.filter(action=action)
        return queryset


class FileDownloadView(views.APIView):
    """
    Streams a stored file. The signed token is the capability, so no login is
    required; links expire after TESTSERIES['FILE_URL_MAX_AGE'] seconds.
    """
    permission_classes = [permissions.AllowAny]

    def get(self, request, token):
        try:
            ref, handle = open_signed_file(token)
        except signing.SignatureExpired:
            raise Http404("This link has expired.")
        except signing.BadSignature:
            raise Http404("Invalid file link.")
        except FileNotFoundError:
            logger.error("Signed link points at a missing file")
            raise Http404("File not found.")
        return FileResponse(handle, content_type='application/pdf', filename=ref.rsplit('/', 1)[-1])
