from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import TestSeriesViewSet

router = DefaultRouter()
router.register(r'test-series', TestSeriesViewSet, basename='test-series')

urlpatterns = [
    path('', include(router.urls)),
]
