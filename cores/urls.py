from django.urls import path
from .views import AuditLogListView, FileDownloadView

urlpatterns = [
    path('audit-logs/', AuditLogListView.as_view(), name='audit-logs'),
    path('files/<path:token>/', FileDownloadView.as_view(), name='file-download'),
]
