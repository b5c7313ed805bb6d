"""Pydantic schemas for API request/response models."""

from decimal import Decimal

from pydantic import BaseModel, Field

from listiq.engine.mortgage import PaymentBreakdown
from listiq.engine.sorting import View
from listiq.models.property import MortgageSettings, Property, SavedSearch


# ---- Request schemas ----

class PropertyCreate(BaseModel):
    url: str = Field(..., description="Listing URL (Zillow, Redfin, Realtor.com, ...)")
    address: str = Field("", description="Street address; detected from the URL when blank")
    source: str = Field("", description="Listing site; detected from the URL when blank")
    price: Decimal = Decimal("0")
    square_feet: int = 0
    taxes: Decimal = Decimal("0")
    bedrooms: int = 0
    bathrooms: Decimal = Decimal("0")
    year_built: int | None = None


class PropertyUpdate(BaseModel):
    url: str | None = None
    address: str | None = None
    source: str | None = None
    price: Decimal | None = None
    square_feet: int | None = None
    taxes: Decimal | None = None
    bedrooms: int | None = None
    bathrooms: Decimal | None = None
    year_built: int | None = None


class BulkRemoveRequest(BaseModel):
    ids: list[str]


class SortRequest(BaseModel):
    sort: str = Field(..., description='Encoded sort option, e.g. "price-asc"')


class MortgageSettingsSchema(BaseModel):
    enabled: bool = False
    interest_rate: Decimal = Field(Decimal("6.5"), ge=0, description="Annual rate, percent")
    down_payment_pct: Decimal = Field(Decimal("20"), ge=0, le=100)
    loan_term_years: int = Field(30, ge=1, le=50)

    @classmethod
    def from_settings(cls, mortgage: MortgageSettings) -> "MortgageSettingsSchema":
        return cls(
            enabled=mortgage.enabled,
            interest_rate=mortgage.interest_rate,
            down_payment_pct=mortgage.down_payment_pct,
            loan_term_years=mortgage.loan_term_years,
        )

    def to_settings(self) -> MortgageSettings:
        return MortgageSettings(
            enabled=self.enabled,
            interest_rate=self.interest_rate,
            down_payment_pct=self.down_payment_pct,
            loan_term_years=self.loan_term_years,
        )


class PaymentRequest(BaseModel):
    price: Decimal = Field(..., ge=0)
    down_payment_pct: Decimal = Field(Decimal("20"), ge=0, le=100)
    interest_rate: Decimal = Field(Decimal("6.5"), ge=0)
    annual_taxes: Decimal = Field(Decimal("0"), ge=0)
    loan_term_years: int = Field(30, ge=1, le=50)


class SaveSearchRequest(BaseModel):
    name: str
    overwrite: bool = Field(False, description="Replace an existing search with the same name")


class ImportSearchRequest(BaseModel):
    payload: str = Field(..., description="Share code or exported JSON")
    from_link: bool = Field(False, description="Opened from a share link: also load the search")


# ---- Response schemas ----

class PaymentBreakdownResponse(BaseModel):
    principal: Decimal
    down_payment: Decimal
    monthly_mortgage: Decimal
    monthly_taxes: Decimal
    monthly_insurance: Decimal
    total_monthly: Decimal

    @classmethod
    def from_breakdown(cls, b: PaymentBreakdown) -> "PaymentBreakdownResponse":
        return cls(
            principal=b.principal,
            down_payment=b.down_payment,
            monthly_mortgage=b.monthly_mortgage,
            monthly_taxes=b.monthly_taxes,
            monthly_insurance=b.monthly_insurance,
            total_monthly=b.total_monthly,
        )


class PropertyFields(BaseModel):
    id: str
    url: str
    address: str
    source: str
    price: Decimal
    square_feet: int
    taxes: Decimal
    bedrooms: int
    bathrooms: Decimal
    year_built: int | None

    @classmethod
    def from_property(cls, prop: Property) -> "PropertyFields":
        return cls(
            id=prop.id,
            url=prop.url,
            address=prop.address,
            source=prop.source,
            price=prop.price,
            square_feet=prop.square_feet,
            taxes=prop.taxes,
            bedrooms=prop.bedrooms,
            bathrooms=prop.bathrooms,
            year_built=prop.year_built,
        )


class PropertyResponse(PropertyFields):
    price_per_sqft: Decimal | None = None
    is_favorite: bool = False
    is_best_value: bool = False
    is_lowest_payment: bool = False
    monthly_payment: PaymentBreakdownResponse | None = None


class PropertyListResponse(BaseModel):
    sort: str
    view: View
    total_count: int
    favorite_count: int
    properties: list[PropertyResponse]


class SortOptionResponse(BaseModel):
    value: str
    label: str


class BulkRemoveResponse(BaseModel):
    removed: int


class FavoriteResponse(BaseModel):
    id: str
    is_favorite: bool


class ComparisonResponse(BaseModel):
    property_count: int
    mortgage_enabled: bool
    best_value_id: str | None
    best_price_per_sqft: Decimal | None
    lowest_payment_id: str | None
    lowest_total_monthly: Decimal | None


class SavedSearchResponse(BaseModel):
    id: str
    name: str
    saved_at: str
    property_count: int
    properties: list[PropertyFields]

    @classmethod
    def from_search(cls, search: SavedSearch) -> "SavedSearchResponse":
        return cls(
            id=search.id,
            name=search.name,
            saved_at=search.saved_at,
            property_count=len(search.properties),
            properties=[PropertyFields.from_property(p) for p in search.properties],
        )


class ShareResponse(BaseModel):
    code: str
    url: str
    filename: str
    json_export: str


class SummaryResponse(BaseModel):
    text: str
    used_ai: bool
    property_count: int
