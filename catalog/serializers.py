# catalog/serializers.py
from rest_framework import serializers

from .models import ALL_SUBJECTS, DiscountCode, Group, TestSeries


class DiscountCodeSerializer(serializers.ModelSerializer):
    class Meta:
        model = DiscountCode
        fields = ['code', 'discount_type', 'value', 'label']


class TestSeriesListSerializer(serializers.ModelSerializer):
    kind_label = serializers.CharField(source='get_kind_display', read_only=True)

    class Meta:
        model = TestSeries
        fields = ['id', 'title', 'kind', 'kind_label', 'subject_price', 'currency']


class TestSeriesDetailSerializer(serializers.ModelSerializer):
    kind_label = serializers.CharField(source='get_kind_display', read_only=True)
    series = serializers.ListField(source='series_tags', read_only=True)
    papers_per_subject = serializers.SerializerMethodField()
    discount_codes = DiscountCodeSerializer(many=True, read_only=True)

    class Meta:
        model = TestSeries
        fields = [
            'id', 'title', 'description', 'kind', 'kind_label', 'subjects', 'series',
            'papers_per_subject', 'subject_price', 'combo_price', 'all_subjects_price',
            'full_bundle_price', 'paper_price', 'currency', 'discount_codes',
        ]

    def get_papers_per_subject(self, obj):
        return {subject: obj.papers_for(subject) for subject in obj.subjects}


class SelectionSerializer(serializers.Serializer):
    """Buyer's in-progress picks; series accepts 1 or "series1"."""
    series = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    group = serializers.ChoiceField(choices=Group.choices, required=False, allow_null=True, default=None)
    subjects = serializers.ListField(
        child=serializers.ChoiceField(choices=ALL_SUBJECTS), required=False, default=list
    )
    coupon_code = serializers.CharField(required=False, allow_blank=True, default='')


class PriceQuoteSerializer(serializers.Serializer):
    base_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    total_papers = serializers.IntegerField()
    discount_amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    final_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    tier = serializers.CharField()
    discount_code = serializers.CharField(allow_null=True)
    breakdown = serializers.DictField()
