from dataclasses import replace
from decimal import Decimal

from listiq.engine.comparison import (
    best_value,
    compare,
    display_price_per_sqft,
    lowest_monthly_payment,
    price_per_sqft,
)
from listiq.engine.mortgage import payment_for
from listiq.models.property import MortgageSettings


class TestPricePerSqft:
    def test_ratio(self, ranch):
        assert price_per_sqft(ranch) == Decimal("200")

    def test_zero_square_feet_is_na(self, ranch):
        empty = replace(ranch, square_feet=0)
        assert price_per_sqft(empty) is None
        assert display_price_per_sqft(empty) == "N/A"

    def test_display(self, condo):
        assert display_price_per_sqft(condo) == "$300"


class TestBestValue:
    def test_empty(self):
        assert best_value([]) is None

    def test_lowest_price_per_sqft_wins(self, listings, ranch):
        assert best_value(listings) == ranch

    def test_minimal_against_every_other(self, listings):
        best = best_value(listings)
        for prop in listings:
            assert price_per_sqft(best) <= price_per_sqft(prop)

    def test_first_encountered_wins_ties(self, condo):
        twin = replace(condo, id="twin")
        assert best_value([condo, twin]).id == "condo"
        assert best_value([twin, condo]).id == "twin"

    def test_skips_missing_square_feet(self, condo, ranch):
        no_size = replace(ranch, id="no-size", square_feet=0)
        assert best_value([no_size, condo]) == condo

    def test_only_ineligible_properties(self, ranch):
        assert best_value([replace(ranch, square_feet=0)]) is None


class TestLowestMonthlyPayment:
    def test_disabled_returns_none(self, listings):
        assert lowest_monthly_payment(listings, MortgageSettings(enabled=False)) is None

    def test_empty_returns_none(self, mortgage_on):
        assert lowest_monthly_payment([], mortgage_on) is None

    def test_lowest_total_wins(self, listings, cottage, mortgage_on):
        assert lowest_monthly_payment(listings, mortgage_on) == cottage

    def test_minimal_against_every_other(self, listings, mortgage_on):
        lowest = lowest_monthly_payment(listings, mortgage_on)
        lowest_total = payment_for(lowest, mortgage_on).total_monthly
        for prop in listings:
            assert lowest_total <= payment_for(prop, mortgage_on).total_monthly

    def test_taxes_can_flip_the_winner(self, condo, cottage, mortgage_on):
        heavy_tax = replace(cottage, taxes=Decimal("20000"))
        assert lowest_monthly_payment([condo, heavy_tax], mortgage_on) == condo

    def test_first_encountered_wins_ties(self, condo, mortgage_on):
        twin = replace(condo, id="twin")
        assert lowest_monthly_payment([twin, condo], mortgage_on).id == "twin"


class TestCompare:
    def test_summary(self, listings, mortgage_on):
        summary = compare(listings, mortgage_on)
        assert summary.property_count == 3
        assert summary.best_value_id == "ranch"
        assert summary.best_price_per_sqft == Decimal("200.00")
        assert summary.lowest_payment_id == "cottage"
        assert summary.lowest_total_monthly > 0

    def test_summary_with_mortgage_off(self, listings):
        summary = compare(listings, MortgageSettings())
        assert summary.best_value_id == "ranch"
        assert summary.lowest_payment_id is None
        assert summary.lowest_total_monthly is None
