"""The comparison workspace: all user state plus the operations that mutate it.

State is held in one object and written through to an injected ``StateStore``
after every change, so a reload picks up exactly where the user left off.
"""

import functools
import logging
from dataclasses import replace
from decimal import Decimal

from listiq.data import share
from listiq.data.listing_url import extract_address_from_url, extract_source_from_url
from listiq.data.store import StateStore
from listiq.engine.comparison import ComparisonSummary, compare
from listiq.engine.mortgage import DEFAULT_INSURANCE_RATE_PCT, PaymentBreakdown, payment_for
from listiq.engine.sorting import DEFAULT_SORT, NullPolicy, SortOption, View, arrange
from listiq.errors import (
    InvalidInput,
    PropertyNotFound,
    PropertyValidationError,
    SearchNameConflict,
    SearchNotFound,
)
from listiq.models.property import MortgageSettings, Property, SavedSearch, to_cents, utc_now_iso

logger = logging.getLogger(__name__)

PROPERTIES_KEY = "listiq-properties"
FAVORITES_KEY = "listiq-favorites"
SAVED_SEARCHES_KEY = "listiq-saved-searches"
SORT_KEY = "listiq-sort-preference"
MORTGAGE_KEY = "listiq-mortgage-settings"

MAX_LOAN_TERM_YEARS = 50


@functools.lru_cache(maxsize=32)
def _compare_cached(
    properties: tuple[Property, ...],
    mortgage: MortgageSettings,
    insurance_rate_pct: Decimal,
) -> ComparisonSummary:
    return compare(list(properties), mortgage, insurance_rate_pct)


def build_property(
    url: str,
    address: str = "",
    price: Decimal = Decimal("0"),
    square_feet: int = 0,
    taxes: Decimal = Decimal("0"),
    bedrooms: int = 0,
    bathrooms: Decimal = Decimal("0"),
    year_built: int | None = None,
    source: str = "",
    property_id: str | None = None,
) -> Property:
    """Normalize form input into a Property, filling source/address from the URL.

    Raises:
        PropertyValidationError: if url/address are blank or price/square feet are not positive.
    """
    url = (url or "").strip()
    address = (address or "").strip() or extract_address_from_url(url)
    source = (source or "").strip() or extract_source_from_url(url) or "Unknown"

    missing = []
    if not url:
        missing.append("url")
    if not address:
        missing.append("address")
    price = to_cents(price or 0)
    if price <= 0:
        missing.append("price")
    if not square_feet or square_feet <= 0:
        missing.append("square_feet")
    if missing:
        raise PropertyValidationError(missing)

    fields = dict(
        url=url,
        address=address,
        price=price,
        square_feet=int(square_feet),
        taxes=max(to_cents(taxes or 0), Decimal("0")),
        bedrooms=max(int(bedrooms or 0), 0),
        bathrooms=max(to_cents(bathrooms or 0), Decimal("0")),
        year_built=year_built or None,
        source=source,
    )
    if property_id:
        fields["id"] = property_id
    return Property(**fields)


def validate_mortgage_settings(mortgage: MortgageSettings) -> MortgageSettings:
    if mortgage.interest_rate < 0:
        raise InvalidInput("Interest rate cannot be negative")
    if not 0 <= mortgage.down_payment_pct <= 100:
        raise InvalidInput("Down payment must be between 0% and 100%")
    if not 1 <= mortgage.loan_term_years <= MAX_LOAN_TERM_YEARS:
        raise InvalidInput(f"Loan term must be between 1 and {MAX_LOAN_TERM_YEARS} years")
    return mortgage


def _mortgage_to_json(mortgage: MortgageSettings) -> dict:
    return {
        "enabled": mortgage.enabled,
        "interestRate": mortgage.interest_rate,
        "downPaymentPercentage": mortgage.down_payment_pct,
        "loanTermYears": mortgage.loan_term_years,
    }


def _mortgage_from_json(data: dict, default: MortgageSettings) -> MortgageSettings:
    return MortgageSettings(
        enabled=bool(data.get("enabled", default.enabled)),
        interest_rate=Decimal(str(data.get("interestRate", default.interest_rate))),
        down_payment_pct=Decimal(str(data.get("downPaymentPercentage", default.down_payment_pct))),
        loan_term_years=int(data.get("loanTermYears", default.loan_term_years)),
    )


class ComparisonWorkspace:
    def __init__(
        self,
        store: StateStore,
        default_mortgage: MortgageSettings | None = None,
        insurance_rate_pct: Decimal = DEFAULT_INSURANCE_RATE_PCT,
        null_policy: NullPolicy = NullPolicy.ZERO,
    ):
        self.store = store
        self.insurance_rate_pct = insurance_rate_pct
        self.null_policy = null_policy
        self.default_mortgage = default_mortgage or MortgageSettings()

        self.properties: list[Property] = []
        self.favorite_ids: set[str] = set()
        self.saved_searches: list[SavedSearch] = []
        self.sort: SortOption = DEFAULT_SORT
        self.mortgage: MortgageSettings = self.default_mortgage
        self._load()

    # ── Persistence ──────────────────────────────────────────────

    def _read(self, key: str):
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            return share.loads(raw)
        except ValueError as e:
            logger.warning("Ignoring unreadable %s: %s", key, e)
            return None

    def _load(self) -> None:
        try:
            data = self._read(PROPERTIES_KEY)
            if data is not None:
                self.properties = [share.PropertyPayload.model_validate(p).to_property() for p in data]
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring malformed %s: %s", PROPERTIES_KEY, e)

        data = self._read(FAVORITES_KEY)
        if isinstance(data, list):
            self.favorite_ids = {str(i) for i in data}

        try:
            data = self._read(SAVED_SEARCHES_KEY)
            if data is not None:
                self.saved_searches = [share.SavedSearchPayload.model_validate(s).to_search() for s in data]
        except (ValueError, TypeError) as e:
            logger.warning("Ignoring malformed %s: %s", SAVED_SEARCHES_KEY, e)

        data = self._read(SORT_KEY)
        if isinstance(data, str):
            try:
                self.sort = SortOption.parse(data)
            except ValueError as e:
                logger.warning("Ignoring stored sort preference: %s", e)

        data = self._read(MORTGAGE_KEY)
        if isinstance(data, dict):
            try:
                self.mortgage = validate_mortgage_settings(_mortgage_from_json(data, self.default_mortgage))
            except (ValueError, TypeError, ArithmeticError, InvalidInput) as e:
                logger.warning("Ignoring stored mortgage settings: %s", e)

    def _write(self, key: str, value) -> None:
        self.store.set(key, share.dumps(value))

    def _save_properties(self) -> None:
        self._write(
            PROPERTIES_KEY,
            [share.PropertyPayload.from_property(p).model_dump(by_alias=True) for p in self.properties],
        )

    def _save_favorites(self) -> None:
        self._write(FAVORITES_KEY, sorted(self.favorite_ids))

    def _save_searches(self) -> None:
        self._write(
            SAVED_SEARCHES_KEY,
            [share.SavedSearchPayload.from_search(s).model_dump(by_alias=True) for s in self.saved_searches],
        )

    # ── Properties ───────────────────────────────────────────────

    def get_property(self, property_id: str) -> Property:
        for prop in self.properties:
            if prop.id == property_id:
                return prop
        raise PropertyNotFound(property_id)

    def add_property(self, **fields) -> Property:
        prop = build_property(**fields)
        self.properties.append(prop)
        self._save_properties()
        logger.info("Added property %s (%s)", prop.id, prop.address)
        return prop

    def update_property(self, property_id: str, **changes) -> Property:
        """Edit a property in place, keeping its id and list position.

        A changed URL re-detects source and address unless they are given explicitly.
        """
        current = self.get_property(property_id)
        if "url" in changes and changes["url"] != current.url:
            changes.setdefault("source", "")
            changes.setdefault("address", "")
        merged = {
            "url": current.url,
            "address": current.address,
            "price": current.price,
            "square_feet": current.square_feet,
            "taxes": current.taxes,
            "bedrooms": current.bedrooms,
            "bathrooms": current.bathrooms,
            "year_built": current.year_built,
            "source": current.source,
        }
        merged.update(changes)
        updated = build_property(**merged, property_id=current.id)

        index = self.properties.index(current)
        self.properties[index] = updated
        self._save_properties()
        return updated

    def remove_property(self, property_id: str) -> None:
        prop = self.get_property(property_id)
        self.properties.remove(prop)
        self._save_properties()
        if property_id in self.favorite_ids:
            self.favorite_ids.discard(property_id)
            self._save_favorites()

    def remove_properties(self, property_ids: list[str]) -> int:
        """Bulk removal; unknown ids are ignored. Returns how many were removed."""
        targets = set(property_ids)
        before = len(self.properties)
        self.properties = [p for p in self.properties if p.id not in targets]
        removed = before - len(self.properties)
        self._save_properties()
        if self.favorite_ids & targets:
            self.favorite_ids -= targets
            self._save_favorites()
        return removed

    def clear_properties(self) -> None:
        self.properties = []
        self._save_properties()

    def toggle_favorite(self, property_id: str) -> bool:
        """Flip the favorite flag. Returns the new state."""
        self.get_property(property_id)
        if property_id in self.favorite_ids:
            self.favorite_ids.discard(property_id)
            is_favorite = False
        else:
            self.favorite_ids.add(property_id)
            is_favorite = True
        self._save_favorites()
        return is_favorite

    # ── Display ──────────────────────────────────────────────────

    def set_sort(self, option: SortOption | str) -> SortOption:
        if isinstance(option, str):
            option = SortOption.parse(option)
        self.sort = option
        self._write(SORT_KEY, option.encode())
        return option

    def visible_properties(self, view: View = View.ALL, option: SortOption | None = None) -> list[Property]:
        return arrange(
            self.properties,
            option or self.sort,
            view,
            self.favorite_ids,
            self.mortgage,
            self.null_policy,
            self.insurance_rate_pct,
        )

    # ── Mortgage & comparison ────────────────────────────────────

    def update_mortgage_settings(self, mortgage: MortgageSettings) -> MortgageSettings:
        self.mortgage = validate_mortgage_settings(mortgage)
        self._write(MORTGAGE_KEY, _mortgage_to_json(self.mortgage))
        return self.mortgage

    def payment_breakdown(self, property_id: str) -> PaymentBreakdown | None:
        return payment_for(self.get_property(property_id), self.mortgage, self.insurance_rate_pct)

    def comparison(self) -> ComparisonSummary:
        return _compare_cached(tuple(self.properties), self.mortgage, self.insurance_rate_pct)

    # ── Saved searches ───────────────────────────────────────────

    def _find_search(self, search_id: str) -> SavedSearch:
        for search in self.saved_searches:
            if search.id == search_id:
                return search
        raise SearchNotFound(search_id)

    def find_search_by_name(self, name: str) -> SavedSearch | None:
        wanted = name.strip().casefold()
        for search in self.saved_searches:
            if search.name.strip().casefold() == wanted:
                return search
        return None

    def save_search(self, name: str, overwrite: bool = False) -> SavedSearch:
        """Snapshot the current list under ``name``.

        Raises:
            SearchNameConflict: if the name is taken and ``overwrite`` is False.
        """
        name = (name or "").strip()
        if not name:
            raise InvalidInput("Please enter a name for this search")

        existing = self.find_search_by_name(name)
        if existing is not None:
            if not overwrite:
                raise SearchNameConflict(name, existing.id)
            search = replace(existing, name=name, properties=tuple(self.properties), saved_at=utc_now_iso())
            self.saved_searches[self.saved_searches.index(existing)] = search
        else:
            search = SavedSearch(name=name, properties=tuple(self.properties))
            self.saved_searches.insert(0, search)

        self._save_searches()
        logger.info("Saved search %r with %d properties", name, len(search.properties))
        return search

    def load_search(self, search_id: str) -> SavedSearch:
        """Replace the working list with a saved snapshot. Favorites are kept."""
        search = self._find_search(search_id)
        self.properties = list(search.properties)
        self._save_properties()
        return search

    def delete_search(self, search_id: str) -> None:
        self.saved_searches.remove(self._find_search(search_id))
        self._save_searches()

    def import_search(self, search: SavedSearch, load: bool = False) -> SavedSearch:
        self.saved_searches.insert(0, search)
        self._save_searches()
        if load:
            self.properties = list(search.properties)
            self._save_properties()
        return search

    def import_shared(self, raw: str, from_link: bool = False) -> SavedSearch:
        """Import a share code or JSON export. Links also load the search."""
        suffix = share.SHARED_SUFFIX if from_link else share.IMPORTED_SUFFIX
        search = share.decode_shared_search(raw, suffix=suffix)
        return self.import_search(search, load=from_link)

    def get_search(self, search_id: str) -> SavedSearch:
        return self._find_search(search_id)
