# cores/exceptions.py
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Expected, recoverable failure of a core operation."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "error"
    default_message = "Request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


# --- Buying flow ---

class InvalidSelection(DomainError):
    code = "invalid_selection"
    default_message = "The selected series/subjects are not valid for this test series."


class DiscountNotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "discount_not_found"
    default_message = "Invalid or expired coupon code."


class DuplicatePaymentReference(DomainError):
    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_payment_reference"
    default_message = "This payment receipt has already been used."


# --- Access ---

class EntitlementDenied(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "entitlement_denied"
    default_message = "You have not purchased access to this paper."


class SuggestedAnswerUnavailable(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "suggested_answer_unavailable"
    default_message = "Suggested answer not available for this paper yet."


# --- Submission lifecycle ---

class SubmissionStateError(DomainError):
    status_code = status.HTTP_409_CONFLICT


class SubmissionLocked(SubmissionStateError):
    code = "submission_locked"
    default_message = "You cannot upload an answer sheet after viewing the suggested answer."


class AlreadySubmitted(SubmissionStateError):
    code = "already_submitted"
    default_message = "An answer sheet has already been submitted for this paper."


class SubmissionDeadlinePassed(DomainError):
    code = "submission_deadline_passed"
    default_message = "Submission deadline has passed."


class NotYetSubmitted(SubmissionStateError):
    code = "not_yet_submitted"
    default_message = "No answer sheet has been submitted for this paper."


class AlreadyEvaluated(SubmissionStateError):
    code = "already_evaluated"
    default_message = "This answer sheet has already been evaluated."


# --- Payload checks ---

class InvalidUpload(DomainError):
    code = "invalid_upload"
    default_message = "Only PDF files are allowed."


class InvalidPaper(DomainError):
    code = "invalid_paper"
    default_message = "Answer sheets can only be attached to question papers."


class InvalidEvaluation(DomainError):
    code = "invalid_evaluation"
    default_message = "Marks must be between 0 and the maximum marks."


def api_exception_handler(exc, context):
    """
    Renders DomainError as {"error": ..., "code": ...}.
    Everything else goes through DRF's default handler.
    """
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            "%s rejected by %s: %s",
            exc.code, view.__class__.__name__ if view else "-", exc.message,
        )
        return Response({"error": exc.message, "code": exc.code}, status=exc.status_code)
    return exception_handler(exc, context)
