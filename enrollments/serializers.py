# enrollments/serializers.py
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import serializers

from catalog.models import TestSeries
from catalog.serializers import SelectionSerializer

from .models import Enrollment

User = get_user_model()


class EnrollmentSerializer(serializers.ModelSerializer):
    test_series_title = serializers.CharField(source='test_series.title', read_only=True)

    class Meta:
        model = Enrollment
        fields = ['id', 'test_series', 'test_series_title', 'entitlement_keys', 'amount',
                  'reference', 'provider', 'discount_code', 'created_at']
        read_only_fields = fields


class RecordEnrollmentSerializer(SelectionSerializer):
    """
    Handed over by the commerce side once payment is captured.
    Either explicit entitlement_keys or a selection to derive them from.
    """
    buyer = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    test_series = serializers.PrimaryKeyRelatedField(queryset=TestSeries.objects.all())
    entitlement_keys = serializers.ListField(child=serializers.CharField(), required=False)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0"))
    reference = serializers.CharField(max_length=100)
    provider = serializers.ChoiceField(choices=Enrollment.Provider.choices, default=Enrollment.Provider.RAZORPAY)

    def validate(self, attrs):
        if 'entitlement_keys' not in attrs and not (attrs.get('subjects') or attrs.get('group')):
            raise serializers.ValidationError("Provide entitlement_keys or a series/subject selection.")
        return attrs
