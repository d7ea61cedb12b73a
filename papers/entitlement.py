# papers/entitlement.py
"""
Which slices of the paper catalog a buyer may see.

Entitlement keys come only from what was purchased:
    - non-Full products: bare subject codes       "FR"
    - Full products:     series/subject composites "series1-FR"

Uploaded papers never widen access. The one exception is an enrollment that
carries no keys at all (legacy/free grants), which unlocks the whole product.
"""
from dataclasses import dataclass

from cores.exceptions import EntitlementDenied

KEY_SEPARATOR = "-"


def composite_key(series, subject):
    return f"{series}{KEY_SEPARATOR}{subject}"


def split_key(key):
    """'series1-FR' -> ('series1', 'FR'); 'FR' -> (None, 'FR')."""
    series, sep, subject = key.rpartition(KEY_SEPARATOR)
    if not sep:
        return None, key
    return series, subject


@dataclass(frozen=True)
class Entitlement:
    is_full: bool
    keys: frozenset

    @property
    def unrestricted(self):
        return not self.keys

    def entitled_series(self):
        """Full products: subject -> set of series tags bought for it."""
        series_by_subject = {}
        for key in self.keys:
            series, subject = split_key(key)
            if series:
                series_by_subject.setdefault(subject, set()).add(series)
        return series_by_subject

    def covers_subject(self, subject):
        if self.unrestricted:
            return True
        if not self.is_full:
            return subject in self.keys
        return subject in self.entitled_series()

    def allows(self, paper):
        if not self.covers_subject(paper.subject):
            return False
        if self.unrestricted or not self.is_full or not paper.series:
            return True
        return paper.series in self.entitled_series()[paper.subject]


def visible_papers(entitlement, grouped):
    """
    Filter a grouped_papers() mapping down to what the entitlement covers.
    Subjects outside the keys are dropped entirely, never shown as teasers.
    """
    return {
        subject: [paper for paper in papers if entitlement.allows(paper)]
        for subject, papers in grouped.items()
        if entitlement.covers_subject(subject)
    }


def ensure_paper_entitled(entitlement, paper):
    if not entitlement.allows(paper):
        raise EntitlementDenied()
