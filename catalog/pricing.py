# catalog/pricing.py
"""
Test-series pricing.

compute_price() is a pure function of (product, selection, discount): it
reads the product's price book and returns a PriceQuote. It must be called
again whenever the selection or the coupon changes; nothing is cached.

Tier precedence (first match wins):
    1. Full Syllabus, all five subjects, every configured series -> full bundle
    2. all five subjects                                     -> all-subjects x series
    3. 3 or 4 subjects                                       -> combo x series
    4. otherwise                                             -> per-subject x subjects x series
    5. the chosen tier has no price in the book              -> per-paper x total papers
"""
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP

from cores.exceptions import InvalidSelection

from .models import ALL_SUBJECTS, subjects_for_group

COMBO_MIN_SUBJECTS = 3

TIER_FULL_BUNDLE = "full_bundle"
TIER_ALL_SUBJECTS = "all_subjects"
TIER_COMBO = "combo"
TIER_PER_SUBJECT = "per_subject"
TIER_PER_PAPER = "per_paper"

_WHOLE = Decimal("1")
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Selection:
    subjects: frozenset
    series: frozenset = frozenset()
    group: str = None

    @classmethod
    def build(cls, subjects=None, series=None, group=None, offered=None):
        """
        Normalise raw request values. When no subjects are given the group
        tag pre-fills them, limited to `offered` when given; the tag itself
        is never priced.
        """
        subjects = list(subjects or [])
        if not subjects and group:
            subjects = subjects_for_group(group)
            if offered is not None:
                subjects = [s for s in subjects if s in offered]
        return cls(
            subjects=frozenset(subjects),
            series=frozenset(_series_index(s) for s in (series or [])),
            group=group,
        )


def _series_index(value):
    # Accepts 2 and "series2"
    raw = str(value).strip().lower()
    if raw.startswith("series"):
        raw = raw[len("series"):]
    try:
        return int(raw)
    except ValueError:
        raise InvalidSelection(f"Invalid series: {value}") from None


@dataclass(frozen=True)
class DiscountDescriptor:
    code: str
    kind: str  # "flat" | "percent"
    value: Decimal

    FLAT = "flat"
    PERCENT = "percent"


@dataclass(frozen=True)
class PriceQuote:
    base_price: Decimal
    total_papers: int
    final_price: Decimal
    discount_amount: Decimal
    tier: str
    discount_code: str = None
    breakdown: dict = field(default_factory=dict)

    def as_dict(self):
        return {
            "base_price": self.base_price,
            "total_papers": self.total_papers,
            "discount_amount": self.discount_amount,
            "final_price": self.final_price,
            "tier": self.tier,
            "discount_code": self.discount_code,
            "breakdown": self.breakdown,
        }


def validate_selection(product, selection):
    if not selection.subjects:
        raise InvalidSelection("At least one subject must be selected.")

    unknown = sorted(selection.subjects - set(product.subjects))
    if unknown:
        raise InvalidSelection(f"Subjects not offered in this test series: {', '.join(unknown)}")

    if product.is_full:
        if not selection.series:
            raise InvalidSelection("Series selection is required for the Full Syllabus test series.")
        bad = sorted(n for n in selection.series if not 1 <= n <= product.series_count)
        if bad:
            raise InvalidSelection(f"Invalid series: {', '.join(str(n) for n in bad)}")


def series_multiplier(product, selection):
    if not product.is_full:
        return 1
    return max(1, len(selection.series))


def _money(value):
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def _resolve_tier(product, selection, multiplier):
    """Returns (tier, tier price or None when the book has no entry)."""
    n_subjects = len(selection.subjects)
    all_subjects = selection.subjects >= set(ALL_SUBJECTS)

    if product.is_full and all_subjects and len(selection.series) == product.series_count:
        price = product.full_bundle_price
        return TIER_FULL_BUNDLE, None if price is None else Decimal(price)

    if all_subjects:
        price = product.all_subjects_price
        return TIER_ALL_SUBJECTS, None if price is None else Decimal(price) * multiplier

    if n_subjects >= COMBO_MIN_SUBJECTS:
        price = product.combo_price
        return TIER_COMBO, None if price is None else Decimal(price) * multiplier

    price = product.subject_price
    return TIER_PER_SUBJECT, None if price is None else Decimal(price) * n_subjects * multiplier


def apply_discount(base_price, discount):
    """Returns (final_price, discount_amount) with 0 <= final_price <= base_price."""
    if discount is None:
        return base_price, Decimal("0.00")

    value = max(Decimal(0), Decimal(discount.value))
    if discount.kind == DiscountDescriptor.PERCENT:
        value = min(value, Decimal(100))
        final = (base_price * (Decimal(100) - value) / Decimal(100)).quantize(_WHOLE, rounding=ROUND_HALF_UP)
    else:
        final = base_price - value
    final = _money(max(Decimal(0), final))
    return final, _money(base_price - final)


def compute_price(product, selection, discount=None):
    validate_selection(product, selection)

    multiplier = series_multiplier(product, selection)
    subjects = [s for s in product.subjects if s in selection.subjects]
    papers = {s: product.papers_for(s) * multiplier for s in subjects}
    total_papers = sum(papers.values())

    tier, base_price = _resolve_tier(product, selection, multiplier)
    if base_price is None:
        tier = TIER_PER_PAPER
        base_price = Decimal(product.paper_price) * total_papers
    base_price = _money(base_price)

    if tier == TIER_PER_SUBJECT:
        price_per_subject = _money(product.subject_price)
    else:
        price_per_subject = _money(base_price / (len(subjects) * multiplier))

    final_price, discount_amount = apply_discount(base_price, discount)

    return PriceQuote(
        base_price=base_price,
        total_papers=total_papers,
        final_price=final_price,
        discount_amount=discount_amount,
        tier=tier,
        discount_code=discount.code if discount else None,
        breakdown={
            "series_multiplier": multiplier,
            "selected_series": sorted(selection.series) if product.is_full else [],
            "papers_per_subject": papers,
            "price_per_subject": price_per_subject,
        },
    )
