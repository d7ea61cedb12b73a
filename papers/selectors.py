# papers/selectors.py
from .models import Paper

TYPE_ORDER = {
    Paper.PaperType.QUESTION: 0,
    Paper.PaperType.SUGGESTED: 1,
    Paper.PaperType.EVALUATED: 2,
}


def list_papers(product_id, group=None, subject=None, series=None, paper_type=None):
    """Published papers of one test series, optionally narrowed down."""
    queryset = Paper.objects.filter(test_series_id=product_id, status=Paper.Status.PUBLISHED)
    if group:
        queryset = queryset.filter(group=group)
    if subject:
        queryset = queryset.filter(subject=subject)
    if series:
        queryset = queryset.filter(series=series)
    if paper_type:
        queryset = queryset.filter(paper_type=paper_type)
    return list(queryset.order_by('paper_number', 'created_at', 'id'))


def grouped_papers(product, group=None, series=None):
    """
    subject -> [Paper], subjects in the product's order, each list ordered by
    paper type (question, suggested, evaluated), paper number, upload time.
    """
    papers = list_papers(product.pk, group=group, series=series)
    papers.sort(key=lambda p: (TYPE_ORDER[p.paper_type], p.paper_number, p.created_at, p.id))

    by_subject = {}
    for paper in papers:
        by_subject.setdefault(paper.subject, []).append(paper)

    ordered = {s: by_subject.pop(s) for s in product.subjects if s in by_subject}
    ordered.update(by_subject)
    return ordered
