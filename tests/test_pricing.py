from decimal import Decimal

import pytest

from catalog.models import ALL_SUBJECTS
from catalog.models import TestSeries as Series
from catalog.pricing import (
    TIER_ALL_SUBJECTS, TIER_COMBO, TIER_FULL_BUNDLE, TIER_PER_PAPER, TIER_PER_SUBJECT,
    DiscountDescriptor, Selection, apply_discount, compute_price,
)
from catalog.services import quote_selection
from cores.exceptions import InvalidSelection


def make_full(**overrides):
    values = dict(
        title="FullProd",
        kind=Series.Kind.FULL,
        subjects=list(ALL_SUBJECTS),
        series_count=3,
        subject_price=Decimal("450"),
        combo_price=Decimal("1200"),
        all_subjects_price=Decimal("2000"),
        full_bundle_price=Decimal("6000"),
    )
    values.update(overrides)
    return Series(**values)


def make_half(**overrides):
    values = dict(
        title="Half",
        kind=Series.Kind.HALF,
        subjects=["FR", "AFM", "Audit"],
        subject_price=Decimal("900"),
    )
    values.update(overrides)
    return Series(**values)


FLAT_100 = DiscountDescriptor(code="FLAT100", kind=DiscountDescriptor.FLAT, value=Decimal("100"))


class TestFullSyllabusBundle:
    def test_all_subjects_all_series_is_the_bundle_price(self):
        quote = compute_price(make_full(), Selection.build(subjects=ALL_SUBJECTS, series=[1, 2, 3]))

        assert quote.total_papers == 15
        assert quote.base_price == Decimal("6000.00")
        assert quote.tier == TIER_FULL_BUNDLE
        assert quote.final_price == Decimal("6000.00")

    def test_flat_discount_on_bundle(self):
        quote = compute_price(
            make_full(), Selection.build(subjects=ALL_SUBJECTS, series=[1, 2, 3]), FLAT_100
        )

        assert quote.final_price == Decimal("5900.00")
        assert quote.discount_amount == Decimal("100.00")
        assert quote.discount_code == "FLAT100"

    def test_same_inputs_give_the_same_quote(self):
        product = make_full()
        selection = Selection.build(subjects=["FR", "DT"], series=["series1", "series3"])

        assert compute_price(product, selection, FLAT_100) == compute_price(product, selection, FLAT_100)


class TestTierPrecedence:
    def test_all_subjects_scales_with_series(self):
        quote = compute_price(make_full(), Selection.build(subjects=ALL_SUBJECTS, series=[1, 2]))

        assert quote.tier == TIER_ALL_SUBJECTS
        assert quote.base_price == Decimal("4000.00")
        assert quote.total_papers == 10
        assert quote.breakdown["series_multiplier"] == 2

    def test_three_subjects_is_combo(self):
        quote = compute_price(make_full(), Selection.build(subjects=["FR", "AFM", "DT"], series=[2]))

        assert quote.tier == TIER_COMBO
        assert quote.base_price == Decimal("1200.00")
        assert quote.breakdown["price_per_subject"] == Decimal("400.00")

    def test_two_subjects_priced_per_subject_and_series(self):
        quote = compute_price(make_full(), Selection.build(subjects=["FR", "AFM"], series=[1, 2]))

        assert quote.tier == TIER_PER_SUBJECT
        assert quote.base_price == Decimal("1800.00")
        assert quote.total_papers == 4
        assert quote.breakdown["price_per_subject"] == Decimal("450.00")
        assert quote.breakdown["papers_per_subject"] == {"FR": 2, "AFM": 2}

    def test_missing_tier_price_falls_back_to_per_paper(self):
        product = make_half()  # no combo/all-subjects price in the book

        quote = compute_price(product, Selection.build(subjects=["FR", "AFM", "Audit"]))

        assert quote.tier == TIER_PER_PAPER
        assert quote.total_papers == 6
        assert quote.base_price == Decimal("2400.00")

    def test_bundle_without_price_falls_back_to_per_paper(self):
        product = make_full(full_bundle_price=None, paper_price=Decimal("300"))

        quote = compute_price(product, Selection.build(subjects=ALL_SUBJECTS, series=[1, 2, 3]))

        assert quote.tier == TIER_PER_PAPER
        assert quote.base_price == Decimal("4500.00")


class TestSelectionValidation:
    def test_full_requires_series(self):
        with pytest.raises(InvalidSelection):
            compute_price(make_full(), Selection.build(subjects=["FR"]))

    def test_series_outside_configured_range(self):
        with pytest.raises(InvalidSelection):
            compute_price(make_full(series_count=2), Selection.build(subjects=["FR"], series=[3]))

    def test_unknown_subject(self):
        with pytest.raises(InvalidSelection):
            compute_price(make_half(), Selection.build(subjects=["DT"]))

    def test_empty_selection(self):
        with pytest.raises(InvalidSelection):
            compute_price(make_half(), Selection.build())

    def test_garbage_series_value(self):
        with pytest.raises(InvalidSelection):
            Selection.build(subjects=["FR"], series=["first"])

    def test_series_ignored_for_non_full_products(self):
        quote = compute_price(make_half(), Selection.build(subjects=["FR"], series=[1, 2]))

        assert quote.breakdown["series_multiplier"] == 1
        assert quote.breakdown["selected_series"] == []
        assert quote.base_price == Decimal("900.00")

    def test_group_prefills_subjects(self):
        selection = Selection.build(group="Group 2", series=[1])

        assert selection.subjects == frozenset({"DT", "IDT"})

    def test_explicit_subjects_win_over_group(self):
        selection = Selection.build(subjects=["FR"], group="Both")

        assert selection.subjects == frozenset({"FR"})


class TestDiscounts:
    def test_flat_discount_never_goes_negative(self):
        big = DiscountDescriptor(code="BIG", kind=DiscountDescriptor.FLAT, value=Decimal("10000"))

        final, amount = apply_discount(Decimal("450.00"), big)

        assert final == Decimal("0.00")
        assert amount == Decimal("450.00")

    def test_percent_discount_rounds_half_up_to_whole_rupee(self):
        promo = DiscountDescriptor(code="P", kind=DiscountDescriptor.PERCENT, value=Decimal("12.5"))

        final, amount = apply_discount(Decimal("450.00"), promo)

        assert final == Decimal("394.00")  # 393.75
        assert amount == Decimal("56.00")

    def test_hundred_percent_is_free(self):
        free = DiscountDescriptor(code="FREE", kind=DiscountDescriptor.PERCENT, value=Decimal("100"))

        final, _ = apply_discount(Decimal("6000.00"), free)

        assert final == Decimal("0.00")

    def test_no_discount(self):
        final, amount = apply_discount(Decimal("900.00"), None)

        assert final == Decimal("900.00")
        assert amount == Decimal("0.00")


class TestProductsWithFewerSubjects:
    def test_every_offered_subject_is_still_a_combo(self):
        product = make_half(combo_price=Decimal("1200"), all_subjects_price=Decimal("2000"))

        quote = compute_price(product, Selection.build(subjects=["FR", "AFM", "Audit"]))

        assert quote.tier == TIER_COMBO
        assert quote.base_price == Decimal("1200.00")

    def test_full_product_bundle_needs_all_five_subjects(self):
        product = make_full(subjects=["FR", "AFM", "Audit"])

        quote = compute_price(product, Selection.build(subjects=["FR", "AFM", "Audit"], series=[1, 2, 3]))

        assert quote.tier == TIER_COMBO
        assert quote.base_price == Decimal("3600.00")

    def test_group_prefill_limited_to_offered_subjects(self):
        product = make_half(combo_price=Decimal("1200"))

        selection, quote = quote_selection(product, group="Both")

        assert selection.subjects == frozenset({"FR", "AFM", "Audit"})
        assert quote.tier == TIER_COMBO

    def test_group_with_nothing_offered_is_rejected(self):
        with pytest.raises(InvalidSelection):
            quote_selection(make_half(), group="Group 2")


class TestDiscountBounds:
    def test_negative_flat_value_never_raises_the_price(self):
        negative = DiscountDescriptor(code="NEG", kind=DiscountDescriptor.FLAT, value=Decimal("-500"))

        final, amount = apply_discount(Decimal("900.00"), negative)

        assert final == Decimal("900.00")
        assert amount == Decimal("0.00")

    def test_percent_above_hundred_is_capped(self):
        huge = DiscountDescriptor(code="HUGE", kind=DiscountDescriptor.PERCENT, value=Decimal("150"))

        final, amount = apply_discount(Decimal("900.00"), huge)

        assert final == Decimal("0.00")
        assert amount == Decimal("900.00")
