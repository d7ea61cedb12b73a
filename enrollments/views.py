# enrollments/views.py
import logging

from django.shortcuts import get_object_or_404
from rest_framework import generics, permissions, status, views
from rest_framework.response import Response

from catalog.models import TestSeries
from catalog.pricing import Selection
from catalog.serializers import SelectionSerializer
from catalog.services import quote_selection

from .models import Enrollment
from .serializers import EnrollmentSerializer, RecordEnrollmentSerializer
from .services import (
    entitlement_keys_for, free_reference, normalize_entitlement_keys, record_enrollment,
)

logger = logging.getLogger(__name__)


class RecordEnrollmentView(views.APIView):
    """Commerce/admin hook: persist a purchase after payment capture."""
    permission_classes = [permissions.IsAdminUser]

    def post(self, request):
        payload = RecordEnrollmentSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data
        product = data['test_series']

        if 'entitlement_keys' in data:
            keys = normalize_entitlement_keys(product, data['entitlement_keys'])
        else:
            selection = Selection.build(
                subjects=data['subjects'], series=data['series'], group=data['group'], offered=product.subjects,
            )
            keys = entitlement_keys_for(product, selection)

        enrollment = record_enrollment(
            data['buyer'], product, keys,
            amount=data['amount'],
            reference=data['reference'],
            provider=data['provider'],
            discount_code=data['coupon_code'],
            actor=request.user,
        )
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


class FreeEnrollView(views.APIView):
    """A buyer may self-enroll when the quoted price (after coupon) is zero."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, test_series_id):
        product = get_object_or_404(TestSeries, id=test_series_id, is_active=True)
        payload = SelectionSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        selection, quote = quote_selection(
            product,
            subjects=data['subjects'],
            series=data['series'],
            group=data['group'],
            coupon_code=data['coupon_code'],
        )
        if quote.final_price > 0:
            return Response(
                {"error": f"This selection costs {quote.final_price}. Please complete payment."},
                status=status.HTTP_402_PAYMENT_REQUIRED,
            )

        enrollment = record_enrollment(
            request.user, product, entitlement_keys_for(product, selection),
            amount=quote.final_price,
            reference=free_reference(),
            provider=Enrollment.Provider.FREE,
            discount_code=quote.discount_code or "",
        )
        return Response(EnrollmentSerializer(enrollment).data, status=status.HTTP_201_CREATED)


class MyEnrollmentsView(generics.ListAPIView):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = EnrollmentSerializer

    def get_queryset(self):
        return Enrollment.objects.filter(user=self.request.user).select_related('test_series').order_by('-created_at')
