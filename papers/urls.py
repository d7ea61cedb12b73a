from django.urls import path
from .views import GroupedPapersView, PaperUploadView

urlpatterns = [
    path('test-series/<int:test_series_id>/papers/', GroupedPapersView.as_view(), name='grouped-papers'),
    path('papers/upload/', PaperUploadView.as_view(), name='paper-upload'),
]
