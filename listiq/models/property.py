from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from uuid import uuid4

CENTS = Decimal("0.01")


def generate_id() -> str:
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def to_cents(value) -> Decimal:
    """Round a price, tax amount or bath count to two decimal places.

    Stored and shared values never carry more precision than this, so they
    survive the JSON number encoding unchanged.
    """
    return Decimal(str(value)).quantize(CENTS, ROUND_HALF_UP)


@dataclass(frozen=True)
class Property:
    url: str
    address: str
    price: Decimal
    square_feet: int
    taxes: Decimal = Decimal("0")
    bedrooms: int = 0
    bathrooms: Decimal = Decimal("0")
    year_built: int | None = None
    source: str = ""
    id: str = field(default_factory=generate_id)


@dataclass(frozen=True)
class MortgageSettings:
    enabled: bool = False
    interest_rate: Decimal = Decimal("6.5")  # annual, percent
    down_payment_pct: Decimal = Decimal("20")
    loan_term_years: int = 30


@dataclass(frozen=True)
class SavedSearch:
    name: str
    properties: tuple[Property, ...]
    saved_at: str = field(default_factory=utc_now_iso)
    id: str = field(default_factory=generate_id)
