# catalog/views.py
from rest_framework import viewsets, permissions
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import TestSeries
from .serializers import (
    TestSeriesListSerializer, TestSeriesDetailSerializer,
    SelectionSerializer, PriceQuoteSerializer,
)
from .services import quote_selection


class TestSeriesViewSet(viewsets.ReadOnlyModelViewSet):
    """Public catalog. Products are maintained in the Django admin."""
    queryset = TestSeries.objects.filter(is_active=True).prefetch_related('discount_codes').order_by('id')
    permission_classes = [permissions.AllowAny]

    def get_serializer_class(self):
        if self.action == 'list':
            return TestSeriesListSerializer
        return TestSeriesDetailSerializer

    @action(detail=True, methods=['post'], url_path='calculate-price')
    def calculate_price(self, request, pk=None):
        """
        Recomputed on every change of series/subjects/coupon.
        Payload: { "series": [1, 2], "group": "Both", "subjects": ["FR"], "coupon_code": "CA10" }
        """
        product = self.get_object()
        payload = SelectionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        _, quote = quote_selection(
            product,
            subjects=data['subjects'],
            series=data['series'],
            group=data['group'],
            coupon_code=data['coupon_code'],
        )
        return Response({
            "pricing": PriceQuoteSerializer(quote.as_dict()).data,
            "test_series": {"id": product.id, "title": product.title, "kind": product.kind},
        })
