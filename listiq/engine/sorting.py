"""Display ordering for the comparison list.

Sort options are encoded as "<field>-<direction>" strings ("price-asc",
"pricePerSqFt-desc") so they can be persisted as the user's preference.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable

from listiq.engine.comparison import price_per_sqft
from listiq.engine.mortgage import DEFAULT_INSURANCE_RATE_PCT, payment_for
from listiq.models.property import MortgageSettings, Property


class SortField(str, Enum):
    PRICE = "price"
    SQUARE_FEET = "squareFeet"
    PRICE_PER_SQFT = "pricePerSqFt"
    BEDROOMS = "bedrooms"
    BATHROOMS = "bathrooms"
    TAXES = "taxes"
    YEAR_BUILT = "yearBuilt"
    MONTHLY_PAYMENT = "monthlyPayment"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class NullPolicy(str, Enum):
    ZERO = "zero"  # missing values compare as 0
    LAST = "last"  # missing values trail in either direction


class View(str, Enum):
    ALL = "all"
    FAVORITES = "favorites"


_SNAKE_ALIASES = {
    "square_feet": SortField.SQUARE_FEET,
    "price_per_sqft": SortField.PRICE_PER_SQFT,
    "year_built": SortField.YEAR_BUILT,
    "monthly_payment": SortField.MONTHLY_PAYMENT,
}

_FIELD_LABELS = {
    SortField.PRICE: ("Price", "Low to High", "High to Low"),
    SortField.SQUARE_FEET: ("Square Feet", "Low to High", "High to Low"),
    SortField.PRICE_PER_SQFT: ("Price/Sq.Ft", "Low to High", "High to Low"),
    SortField.BEDROOMS: ("Bedrooms", "Low to High", "High to Low"),
    SortField.BATHROOMS: ("Bathrooms", "Low to High", "High to Low"),
    SortField.TAXES: ("Taxes", "Low to High", "High to Low"),
    SortField.YEAR_BUILT: ("Year Built", "Oldest First", "Newest First"),
    SortField.MONTHLY_PAYMENT: ("Monthly Payment", "Low to High", "High to Low"),
}


@dataclass(frozen=True)
class SortOption:
    field: SortField = SortField.PRICE
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, raw: str) -> "SortOption":
        """Parse "price-asc", "pricePerSqFt-desc" or "price_per_sqft-desc"."""
        name, sep, direction = raw.strip().rpartition("-")
        if not sep:
            raise ValueError(f"Invalid sort option: {raw!r}")
        field = _SNAKE_ALIASES.get(name)
        if field is None:
            try:
                field = SortField(name)
            except ValueError:
                raise ValueError(f"Unknown sort field: {name!r}") from None
        try:
            return cls(field, SortDirection(direction.lower()))
        except ValueError:
            raise ValueError(f"Unknown sort direction: {direction!r}") from None

    def encode(self) -> str:
        return f"{self.field.value}-{self.direction.value}"

    @property
    def label(self) -> str:
        name, asc, desc = _FIELD_LABELS[self.field]
        return f"{name}: {asc if self.direction is SortDirection.ASC else desc}"


DEFAULT_SORT = SortOption()

SORT_OPTIONS: list[SortOption] = [
    SortOption(field, direction) for field in SortField for direction in SortDirection
]


def _value_getter(
    field: SortField,
    mortgage: MortgageSettings | None,
    insurance_rate_pct: Decimal,
) -> Callable[[Property], Decimal | int | None]:
    if field is SortField.PRICE_PER_SQFT:
        return price_per_sqft
    if field is SortField.MONTHLY_PAYMENT:
        def monthly(prop: Property) -> Decimal | None:
            if mortgage is None:
                return None
            breakdown = payment_for(prop, mortgage, insurance_rate_pct)
            return breakdown.total_monthly if breakdown else None
        return monthly

    attr = {
        SortField.PRICE: "price",
        SortField.SQUARE_FEET: "square_feet",
        SortField.BEDROOMS: "bedrooms",
        SortField.BATHROOMS: "bathrooms",
        SortField.TAXES: "taxes",
        SortField.YEAR_BUILT: "year_built",
    }[field]
    return lambda prop: getattr(prop, attr)


def sort_properties(
    properties: Iterable[Property],
    option: SortOption = DEFAULT_SORT,
    mortgage: MortgageSettings | None = None,
    null_policy: NullPolicy = NullPolicy.ZERO,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> list[Property]:
    """Return a new, stably sorted list. The input is left untouched."""
    getter = _value_getter(option.field, mortgage, insurance_rate_pct)
    reverse = option.direction is SortDirection.DESC
    items = list(properties)

    if null_policy is NullPolicy.ZERO:
        return sorted(items, key=lambda p: getter(p) or 0, reverse=reverse)

    present = [p for p in items if getter(p) is not None]
    missing = [p for p in items if getter(p) is None]
    return sorted(present, key=getter, reverse=reverse) + missing


def filter_view(properties: Iterable[Property], view: View, favorite_ids: set[str]) -> list[Property]:
    if view is View.FAVORITES:
        return [p for p in properties if p.id in favorite_ids]
    return list(properties)


def arrange(
    properties: Iterable[Property],
    option: SortOption = DEFAULT_SORT,
    view: View = View.ALL,
    favorite_ids: set[str] | None = None,
    mortgage: MortgageSettings | None = None,
    null_policy: NullPolicy = NullPolicy.ZERO,
    insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
) -> list[Property]:
    """Filter to the active view first, then sort."""
    visible = filter_view(properties, view, favorite_ids or set())
    return sort_properties(visible, option, mortgage, null_policy, insurance_rate_pct)
