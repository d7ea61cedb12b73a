# submissions/statistics.py
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Avg, Count, Max, Q

from .models import Submission

_CENTS = Decimal("0.01")

_EVALUATED = Q(state=Submission.State.EVALUATED)
_HANDED_IN = Q(state__in=[Submission.State.SUBMITTED, Submission.State.EVALUATED])

AGGREGATES = {
    "highest_score": Max("marks_obtained", filter=_EVALUATED),
    "average_score": Avg("marks_obtained", filter=_EVALUATED),
    "average_percentage": Avg("percentage", filter=_EVALUATED),
    "submission_count": Count("id", filter=_EVALUATED),
    "total_submissions": Count("id", filter=_HANDED_IN),
}


def _round(value):
    if value is None:
        return Decimal("0.00")
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _stats_from_row(row):
    return {
        "highest_score": _round(row.get("highest_score")),
        "average_score": _round(row.get("average_score")),
        "average_percentage": _round(row.get("average_percentage")),
        "submission_count": row.get("submission_count") or 0,
        "total_submissions": row.get("total_submissions") or 0,
    }


def paper_statistics(paper_id):
    """
    Highest / average score over evaluated sheets of one paper.
    Zeros (not nulls) when nothing has been evaluated yet.
    """
    row = Submission.objects.filter(paper_id=paper_id).aggregate(**AGGREGATES)
    return _stats_from_row(row)


def statistics_for_papers(paper_ids):
    """paper_id -> statistics for a whole listing in one query."""
    paper_ids = list(paper_ids)
    if not paper_ids:
        return {}
    rows = (
        Submission.objects.filter(paper_id__in=paper_ids)
        .values('paper_id')
        .order_by()
        .annotate(**AGGREGATES)
    )
    found = {row['paper_id']: _stats_from_row(row) for row in rows}
    return {pid: found.get(pid) or _stats_from_row({}) for pid in paper_ids}
