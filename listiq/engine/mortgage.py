"""Monthly cost-of-ownership math.

Pure functions: Decimal in, dataclass out. No I/O.
Rates and the down payment are percentages (6.5 means 6.5%), matching
what a user types into the mortgage settings dialog.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from listiq.models.property import MortgageSettings, Property

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")

DEFAULT_INSURANCE_RATE_PCT = Decimal("0.5")  # of home price, per year


@dataclass(frozen=True)
class PaymentBreakdown:
    principal: Decimal
    down_payment: Decimal
    monthly_mortgage: Decimal
    monthly_taxes: Decimal
    monthly_insurance: Decimal
    total_monthly: Decimal


def _money(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def _non_negative(value) -> Decimal:
    value = Decimal(value)
    return value if value > 0 else ZERO


def monthly_mortgage_payment(principal: Decimal, annual_rate_pct: Decimal, term_years: int = 30) -> Decimal:
    """Fixed monthly principal + interest payment.

    A 0% rate is repaid straight-line over the term.
    """
    if term_years <= 0:
        raise ValueError(f"Loan term must be positive, got {term_years}")
    principal = _non_negative(principal)
    annual_rate_pct = _non_negative(annual_rate_pct)
    if principal == 0:
        return _money(ZERO)

    n = term_years * 12
    if annual_rate_pct == 0:
        return _money(principal / n)

    r = annual_rate_pct / HUNDRED / 12
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    factor = (1 + r) ** n
    return _money(principal * (r * factor) / (factor - 1))


def monthly_insurance(home_price: Decimal, annual_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT) -> Decimal:
    return _money(_non_negative(home_price) * (_non_negative(annual_rate_pct) / HUNDRED) / 12)


def monthly_taxes(annual_taxes: Decimal) -> Decimal:
    return _money(_non_negative(annual_taxes) / 12)


def total_monthly_payment(
    home_price: Decimal,
    down_payment_pct: Decimal,
    annual_rate_pct: Decimal,
    annual_taxes: Decimal,
    term_years: int = 30,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> PaymentBreakdown:
    """Full monthly cost breakdown: mortgage, taxes and insurance.

    Args:
        home_price: Listing price
        down_payment_pct: Down payment as a percentage, clamped to [0, 100]
        annual_rate_pct: Annual interest rate as a percentage (e.g. 6.5)
        annual_taxes: Annual property taxes
        term_years: Loan term in years
        insurance_rate_pct: Annual insurance as a percentage of price
    """
    home_price = _non_negative(home_price)
    down_payment_pct = min(_non_negative(down_payment_pct), HUNDRED)

    down_payment = _money(home_price * down_payment_pct / HUNDRED)
    principal = home_price - down_payment

    mortgage = monthly_mortgage_payment(principal, annual_rate_pct, term_years)
    taxes = monthly_taxes(annual_taxes)
    insurance = monthly_insurance(home_price, insurance_rate_pct)

    return PaymentBreakdown(
        principal=_money(principal),
        down_payment=down_payment,
        monthly_mortgage=mortgage,
        monthly_taxes=taxes,
        monthly_insurance=insurance,
        total_monthly=mortgage + taxes + insurance,
    )


def payment_for(
    prop: Property,
    mortgage: MortgageSettings,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> PaymentBreakdown | None:
    """Breakdown for one property, or None when mortgage calculations are off."""
    if not mortgage.enabled:
        return None
    return total_monthly_payment(
        prop.price,
        mortgage.down_payment_pct,
        mortgage.interest_rate,
        prop.taxes,
        mortgage.loan_term_years,
        insurance_rate_pct,
    )
