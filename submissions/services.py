# submissions/services.py
"""
Answer-sheet lifecycle for one (buyer, question paper) pair.

Every transition is a single conditional UPDATE keyed on the current
(state, suggested_answer_viewed) pair, so a "view suggested answer" racing a
"submit" for the same pair has exactly one winner. Files are written to
storage before the state change is committed and removed again when the
update loses.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.db import transaction
from django.utils import timezone

from cores.exceptions import (
    AlreadyEvaluated, AlreadySubmitted, InvalidEvaluation, InvalidPaper,
    NotYetSubmitted, SubmissionDeadlinePassed, SubmissionLocked, SuggestedAnswerUnavailable,
)
from cores.models import AuditLog
from cores.storage import delete_file, get_file_url, store_file, validate_upload
from enrollments.services import entitlement_for
from papers.entitlement import ensure_paper_entitled

from .models import Submission

logger = logging.getLogger(__name__)

State = Submission.State


def _ensure_question_paper(paper):
    if not paper.is_question:
        raise InvalidPaper()


def _ensure_access(buyer, paper):
    _ensure_question_paper(paper)
    ensure_paper_entitled(entitlement_for(buyer, paper.test_series), paper)


def _check_submittable(submission):
    if submission.state != State.UNSUBMITTED:
        raise AlreadySubmitted()
    if submission.suggested_answer_viewed:
        raise SubmissionLocked()


def _check_deadline(paper):
    deadline = paper.submission_deadline
    if deadline is not None and timezone.now() > deadline:
        raise SubmissionDeadlinePassed()


def _check_evaluable(submission):
    if submission.state == State.UNSUBMITTED:
        raise NotYetSubmitted()
    if submission.state == State.EVALUATED:
        raise AlreadyEvaluated()


def create_or_get_submission(buyer, paper):
    """Submissions start life as 'unsubmitted' the first time a buyer touches a paper."""
    _ensure_question_paper(paper)
    submission, created = Submission.objects.get_or_create(user=buyer, paper=paper)
    if created:
        logger.debug("Opened submission %s for user %s on paper %s", submission.pk, buyer.pk, paper.pk)
    return submission


def view_suggested_answer(buyer, paper):
    """
    Returns (suggested paper, short-lived url). Always allowed; while the
    sheet is still unsubmitted this permanently forfeits the right to submit.
    """
    _ensure_access(buyer, paper)
    suggested = paper.suggested_answer()
    if suggested is None:
        raise SuggestedAnswerUnavailable()

    submission = create_or_get_submission(buyer, paper)
    locked = Submission.objects.filter(
        pk=submission.pk, state=State.UNSUBMITTED, suggested_answer_viewed=False,
    ).update(suggested_answer_viewed=True)
    if locked:
        logger.info("User %s viewed the suggested answer of paper %s before submitting; submission locked",
                    buyer.pk, paper.pk)
    return suggested, get_file_url(suggested.file)


def submit_answer_sheet(buyer, paper, uploaded_file):
    _ensure_access(buyer, paper)
    submission = create_or_get_submission(buyer, paper)
    _check_submittable(submission)
    _check_deadline(paper)
    validate_upload(uploaded_file)

    # Storage errors propagate from here with the state untouched
    ref = store_file(uploaded_file, f"answer-sheets/{paper.test_series_id}")
    try:
        with transaction.atomic():
            won = Submission.objects.filter(
                pk=submission.pk, state=State.UNSUBMITTED, suggested_answer_viewed=False,
            ).update(
                state=State.SUBMITTED,
                answer_sheet=ref,
                answer_sheet_name=uploaded_file.name or "",
                submitted_at=timezone.now(),
            )
    except Exception:
        delete_file(ref)
        raise

    submission.refresh_from_db()
    if not won:
        delete_file(ref)
        logger.warning("Submit lost a race for submission %s (state=%s, viewed=%s)",
                       submission.pk, submission.state, submission.suggested_answer_viewed)
        _check_submittable(submission)
        raise AlreadySubmitted()

    AuditLog.objects.create(
        actor=buyer,
        action='SUBMIT',
        target_model='Submission',
        target_object_id=str(submission.pk),
        details=f"Answer sheet submitted for paper {paper.pk}",
    )
    logger.info("Submission %s submitted by user %s", submission.pk, buyer.pk)
    return submission


def _parse_marks(marks_obtained, max_marks):
    try:
        marks = Decimal(str(marks_obtained))
        maximum = Decimal(str(max_marks))
    except (InvalidOperation, ValueError):
        raise InvalidEvaluation("Marks must be numbers.") from None
    if maximum <= 0:
        raise InvalidEvaluation("Maximum marks must be greater than zero.")
    if not 0 <= marks <= maximum:
        raise InvalidEvaluation()
    return marks, maximum


def evaluate_submission(submission, evaluator, *, marks_obtained, max_marks, comments="", evaluated_file=None):
    _check_evaluable(submission)
    marks, maximum = _parse_marks(marks_obtained, max_marks)
    validate_upload(evaluated_file)

    ref = store_file(evaluated_file, f"evaluated-sheets/{submission.paper.test_series_id}")
    percentage = (marks / maximum * 100).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    try:
        with transaction.atomic():
            won = Submission.objects.filter(pk=submission.pk, state=State.SUBMITTED).update(
                state=State.EVALUATED,
                marks_obtained=marks,
                max_marks=maximum,
                percentage=percentage,
                evaluator_comments=comments or "",
                evaluated_sheet=ref,
                evaluated_by=evaluator,
                evaluated_at=timezone.now(),
            )
    except Exception:
        delete_file(ref)
        raise

    submission.refresh_from_db()
    if not won:
        delete_file(ref)
        _check_evaluable(submission)
        raise AlreadyEvaluated()

    AuditLog.objects.create(
        actor=evaluator,
        action='EVALUATE',
        target_model='Submission',
        target_object_id=str(submission.pk),
        details=f"Marked {marks}/{maximum} for {submission.user.email}",
    )
    logger.info("Submission %s evaluated by %s: %s/%s", submission.pk, evaluator.pk, marks, maximum)
    return submission
