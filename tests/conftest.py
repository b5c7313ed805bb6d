"""Shared fixtures.

Fixture set: three listings with distinct price/sqft and taxes, plus the
default mortgage (6.5%, 20% down, 30yr) switched on.
"""

from decimal import Decimal

import pytest

from listiq.data.store import MemoryStateStore
from listiq.models.property import MortgageSettings, Property
from listiq.workspace import ComparisonWorkspace


class FakeRedis:
    def __init__(self):
        self.data: dict[str, str] = {}

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    """Keep the summary cache off the network."""
    fake = FakeRedis()

    async def _get_redis():
        return fake

    monkeypatch.setattr("listiq.data.cache.get_redis", _get_redis)
    return fake


@pytest.fixture
def condo() -> Property:
    """$300K, 1,000 sqft => $300/sqft, low taxes."""
    return Property(
        id="condo",
        url="https://www.zillow.com/homedetails/1-Main-St-Austin-TX-78701/1_zpid/",
        address="1 Main St, Austin, TX 78701",
        price=Decimal("300000"),
        square_feet=1000,
        taxes=Decimal("3000"),
        bedrooms=2,
        bathrooms=Decimal("1"),
        year_built=2005,
        source="Zillow",
    )


@pytest.fixture
def ranch() -> Property:
    """$400K, 2,000 sqft => $200/sqft (best value), high taxes."""
    return Property(
        id="ranch",
        url="https://www.redfin.com/TX/Austin/22-Oak-Ave-78702/home/2",
        address="22 Oak Ave, Austin, TX 78702",
        price=Decimal("400000"),
        square_feet=2000,
        taxes=Decimal("9000"),
        bedrooms=3,
        bathrooms=Decimal("2"),
        year_built=1978,
        source="Redfin",
    )


@pytest.fixture
def cottage() -> Property:
    """$250K, 1,000 sqft => $250/sqft, no year built (lowest payment)."""
    return Property(
        id="cottage",
        url="https://www.trulia.com/p/tx/austin/5-elm-st-austin-tx-78703/3",
        address="5 elm st, austin, tx",
        price=Decimal("250000"),
        square_feet=1000,
        taxes=Decimal("4000"),
        bedrooms=2,
        bathrooms=Decimal("1.5"),
        year_built=None,
        source="Trulia",
    )


@pytest.fixture
def listings(condo, ranch, cottage) -> list[Property]:
    return [condo, ranch, cottage]


@pytest.fixture
def mortgage_on() -> MortgageSettings:
    return MortgageSettings(
        enabled=True,
        interest_rate=Decimal("6.5"),
        down_payment_pct=Decimal("20"),
        loan_term_years=30,
    )


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest.fixture
def workspace(store) -> ComparisonWorkspace:
    return ComparisonWorkspace(store)
