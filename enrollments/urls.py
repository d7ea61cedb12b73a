from django.urls import path
from .views import RecordEnrollmentView, FreeEnrollView, MyEnrollmentsView

urlpatterns = [
    path('enrollments/', MyEnrollmentsView.as_view(), name='my-enrollments'),
    path('enrollments/record/', RecordEnrollmentView.as_view(), name='record-enrollment'),
    path('test-series/<int:test_series_id>/enroll-free/', FreeEnrollView.as_view(), name='enroll-free'),
]
