"""Pick out the best-value and lowest-payment properties in a comparison set.

Both selections are a single linear scan with a strict less-than, so on a tie
the property that appears first in the list wins.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from listiq.engine.mortgage import DEFAULT_INSURANCE_RATE_PCT, payment_for
from listiq.models.property import MortgageSettings, Property


@dataclass(frozen=True)
class ComparisonSummary:
    property_count: int
    best_value_id: str | None
    best_price_per_sqft: Decimal | None
    lowest_payment_id: str | None
    lowest_total_monthly: Decimal | None


def price_per_sqft(prop: Property) -> Decimal | None:
    """Price per square foot, or None ("N/A") when square footage is missing."""
    if not prop.square_feet or prop.square_feet <= 0:
        return None
    return prop.price / prop.square_feet


def display_price_per_sqft(prop: Property) -> str:
    ratio = price_per_sqft(prop)
    if ratio is None:
        return "N/A"
    return f"${ratio.quantize(Decimal('1'), ROUND_HALF_UP):,}"


def best_value(properties: Iterable[Property]) -> Property | None:
    """Property with the lowest price per square foot.

    Properties without a positive price and square footage are not eligible.
    """
    best: Property | None = None
    best_ratio: Decimal | None = None
    for prop in properties:
        if prop.price <= 0:
            continue
        ratio = price_per_sqft(prop)
        if ratio is None:
            continue
        if best_ratio is None or ratio < best_ratio:
            best, best_ratio = prop, ratio
    return best


def lowest_monthly_payment(
    properties: Iterable[Property],
    mortgage: MortgageSettings,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> Property | None:
    """Property with the lowest total monthly cost, None when mortgage math is disabled."""
    if not mortgage.enabled:
        return None

    lowest: Property | None = None
    lowest_total: Decimal | None = None
    for prop in properties:
        total = payment_for(prop, mortgage, insurance_rate_pct).total_monthly
        if lowest_total is None or total < lowest_total:
            lowest, lowest_total = prop, total
    return lowest


def compare(
    properties: list[Property],
    mortgage: MortgageSettings,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> ComparisonSummary:
    best = best_value(properties)
    lowest = lowest_monthly_payment(properties, mortgage, insurance_rate_pct)
    return ComparisonSummary(
        property_count=len(properties),
        best_value_id=best.id if best else None,
        best_price_per_sqft=price_per_sqft(best).quantize(Decimal("0.01"), ROUND_HALF_UP) if best else None,
        lowest_payment_id=lowest.id if lowest else None,
        lowest_total_monthly=(
            payment_for(lowest, mortgage, insurance_rate_pct).total_monthly if lowest else None
        ),
    )
