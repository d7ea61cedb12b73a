# submissions/serializers.py
from rest_framework import serializers

from cores.storage import get_file_url

from .models import Submission


class SubmissionSerializer(serializers.ModelSerializer):
    paper_title = serializers.CharField(source='paper.__str__', read_only=True)
    can_submit = serializers.SerializerMethodField()
    answer_sheet_url = serializers.SerializerMethodField()
    evaluated_sheet_url = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = [
            'id', 'paper', 'paper_title', 'state', 'suggested_answer_viewed', 'can_submit',
            'answer_sheet_name', 'answer_sheet_url', 'submitted_at',
            'marks_obtained', 'max_marks', 'percentage', 'evaluator_comments',
            'evaluated_sheet_url', 'evaluated_at',
        ]
        read_only_fields = fields

    def get_can_submit(self, obj):
        return obj.state == Submission.State.UNSUBMITTED and not obj.suggested_answer_viewed

    def get_answer_sheet_url(self, obj):
        return get_file_url(obj.answer_sheet) if obj.answer_sheet else None

    def get_evaluated_sheet_url(self, obj):
        return get_file_url(obj.evaluated_sheet) if obj.evaluated_sheet else None


class PendingEvaluationSerializer(SubmissionSerializer):
    """Evaluator queue row: adds who wrote the sheet and which product it belongs to."""
    student_email = serializers.EmailField(source='user.email', read_only=True)
    student_name = serializers.SerializerMethodField()
    test_series = serializers.IntegerField(source='paper.test_series_id', read_only=True)

    class Meta(SubmissionSerializer.Meta):
        fields = SubmissionSerializer.Meta.fields + ['student_email', 'student_name', 'test_series']
        read_only_fields = fields

    def get_student_name(self, obj):
        return obj.user.get_full_name() or obj.user.username


class SubmitAnswerSheetSerializer(serializers.Serializer):
    answer_sheet = serializers.FileField(required=False)


class EvaluateSubmissionSerializer(serializers.Serializer):
    marks_obtained = serializers.DecimalField(max_digits=6, decimal_places=2)
    max_marks = serializers.DecimalField(max_digits=6, decimal_places=2)
    comments = serializers.CharField(required=False, allow_blank=True, default='')
    evaluated_sheet = serializers.FileField(required=False)


class PaperStatisticsSerializer(serializers.Serializer):
    highest_score = serializers.DecimalField(max_digits=6, decimal_places=2)
    average_score = serializers.DecimalField(max_digits=6, decimal_places=2)
    average_percentage = serializers.DecimalField(max_digits=5, decimal_places=2)
    submission_count = serializers.IntegerField()
    total_submissions = serializers.IntegerField()
