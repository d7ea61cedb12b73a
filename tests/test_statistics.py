from decimal import Decimal

import pytest

from submissions.models import Submission
from submissions.statistics import paper_statistics, statistics_for_papers

pytestmark = pytest.mark.django_db

ZEROS = {
    "highest_score": Decimal("0.00"),
    "average_score": Decimal("0.00"),
    "average_percentage": Decimal("0.00"),
    "submission_count": 0,
    "total_submissions": 0,
}


def add_submission(user, paper, state, marks=None, max_marks=None):
    percentage = None
    if marks is not None:
        percentage = Decimal(marks) / Decimal(max_marks) * 100
    return Submission.objects.create(
        user=user, paper=paper, state=state,
        marks_obtained=marks, max_marks=max_marks, percentage=percentage,
    )


def test_paper_without_submissions_reports_zeros(fr_question):
    assert paper_statistics(fr_question.id) == ZEROS


def test_unevaluated_sheets_only_count_towards_total(student, fr_question):
    add_submission(student, fr_question, Submission.State.SUBMITTED)

    stats = paper_statistics(fr_question.id)

    assert stats["submission_count"] == 0
    assert stats["highest_score"] == Decimal("0.00")
    assert stats["total_submissions"] == 1


def test_scores_over_evaluated_sheets(student, other_student, evaluator, fr_question):
    add_submission(student, fr_question, Submission.State.EVALUATED, marks=40, max_marks=50)
    add_submission(other_student, fr_question, Submission.State.EVALUATED, marks=25, max_marks=50)
    add_submission(evaluator, fr_question, Submission.State.SUBMITTED)

    stats = paper_statistics(fr_question.id)

    assert stats == {
        "highest_score": Decimal("40.00"),
        "average_score": Decimal("32.50"),
        "average_percentage": Decimal("65.00"),
        "submission_count": 2,
        "total_submissions": 3,
    }


def test_locked_unsubmitted_sheets_are_ignored(student, fr_question):
    Submission.objects.create(user=student, paper=fr_question, suggested_answer_viewed=True)

    assert paper_statistics(fr_question.id)["total_submissions"] == 0


def test_bulk_statistics_fill_in_zeros(student, full_product, make_paper, fr_question):
    afm = make_paper(full_product, "AFM", "series1")
    add_submission(student, fr_question, Submission.State.EVALUATED, marks=30, max_marks=60)

    stats = statistics_for_papers([fr_question.id, afm.id])

    assert stats[fr_question.id]["highest_score"] == Decimal("30.00")
    assert stats[fr_question.id]["average_percentage"] == Decimal("50.00")
    assert stats[afm.id] == ZEROS
