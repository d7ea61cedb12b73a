# papers/serializers.py
from django.utils import timezone
from rest_framework import serializers

from catalog.models import Group, Subject, TestSeries
from cores.storage import get_file_url
from submissions.serializers import PaperStatisticsSerializer

from .models import Paper


class PaperSerializer(serializers.ModelSerializer):
    file_url = serializers.SerializerMethodField()
    submission_deadline = serializers.SerializerMethodField()
    statistics = serializers.SerializerMethodField()

    class Meta:
        model = Paper
        fields = [
            'id', 'test_series', 'group', 'subject', 'series', 'paper_type', 'paper_number',
            'syllabus_percentage', 'file_name', 'file_url', 'availability_date', 'submission_deadline', 'statistics',
        ]

    def get_file_url(self, obj):
        # Suggested answers are only handed out through the view-suggested-answer action
        if obj.paper_type == Paper.PaperType.SUGGESTED or not obj.file:
            return None
        return get_file_url(obj.file)

    def get_submission_deadline(self, obj):
        if not obj.is_question or obj.submission_deadline is None:
            return None
        return serializers.DateTimeField().to_representation(obj.submission_deadline)

    def get_statistics(self, obj):
        stats = (self.context.get('statistics') or {}).get(obj.id)
        if stats is None:
            return None
        return PaperStatisticsSerializer(stats).data


class PaperUploadSerializer(serializers.Serializer):
    test_series = serializers.PrimaryKeyRelatedField(queryset=TestSeries.objects.all())
    group = serializers.ChoiceField(choices=Group.choices)
    subject = serializers.ChoiceField(choices=Subject.choices)
    paper_type = serializers.ChoiceField(choices=Paper.PaperType.choices)
    paper_number = serializers.IntegerField(min_value=1, default=1)
    syllabus_percentage = serializers.ChoiceField(choices=Paper.Syllabus.choices, default=Paper.Syllabus.FULL)
    series = serializers.ChoiceField(choices=Paper.Series.choices, required=False, allow_blank=True, default='')
    availability_date = serializers.DateTimeField(required=False)
    status = serializers.ChoiceField(choices=Paper.Status.choices, default=Paper.Status.PUBLISHED)
    file = serializers.FileField()

    def validate(self, attrs):
        product = attrs['test_series']
        if attrs['subject'] not in product.subjects:
            raise serializers.ValidationError({"subject": "This subject is not offered in the selected test series."})

        series = attrs.get('series') or ''
        if series and not product.is_full:
            raise serializers.ValidationError({"series": "Only Full Syllabus papers carry a series tag."})
        if series and series not in product.series_tags:
            raise serializers.ValidationError({"series": "Series is outside this test series' configured range."})

        if attrs['paper_type'] != Paper.PaperType.EVALUATED:
            clash = Paper.objects.filter(
                test_series=product,
                subject=attrs['subject'],
                series=series,
                paper_number=attrs['paper_number'],
                paper_type=attrs['paper_type'],
            ).exists()
            if clash:
                raise serializers.ValidationError("A paper of this type already exists for this slot.")

        attrs['series'] = series
        attrs.setdefault('availability_date', timezone.now())
        return attrs
