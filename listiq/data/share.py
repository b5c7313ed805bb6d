"""Shared-search codec.

Wire format: ``{"type": "listiq-shared-search", "data": <SavedSearch>}`` with
camelCase keys, either as pretty JSON (file download) or base64 inside a
``?shared=`` query parameter (share link).
"""

import base64
import binascii
import json
import logging
import re
from decimal import Decimal
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from listiq.errors import SharedSearchError
from listiq.models.property import Property, SavedSearch, generate_id, to_cents, utc_now_iso

logger = logging.getLogger(__name__)

SHARED_SEARCH_TYPE = "listiq-shared-search"
IMPORTED_SUFFIX = " (Imported)"
SHARED_SUFFIX = " (Shared)"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PropertyPayload(_CamelModel):
    id: str = Field(default_factory=generate_id)
    url: str = ""
    address: str = ""
    price: Decimal = Field(gt=0)
    square_feet: int = Field(gt=0)
    taxes: Decimal = Field(Decimal("0"), ge=0)
    bedrooms: int = Field(0, ge=0)
    bathrooms: Decimal = Field(Decimal("0"), ge=0)
    year_built: int | None = None
    source: str = ""

    @field_validator("price", "taxes", "bathrooms")
    @classmethod
    def _round_to_cents(cls, v: Decimal) -> Decimal:
        return to_cents(v)

    @field_validator("year_built")
    @classmethod
    def _zero_year_is_unknown(cls, v: int | None) -> int | None:
        # Older payloads wrote 0 for "not entered".
        return v or None

    @classmethod
    def from_property(cls, prop: Property) -> "PropertyPayload":
        return cls(
            id=prop.id,
            url=prop.url,
            address=prop.address,
            price=prop.price,
            square_feet=prop.square_feet,
            taxes=prop.taxes,
            bedrooms=prop.bedrooms,
            bathrooms=prop.bathrooms,
            year_built=prop.year_built,
            source=prop.source,
        )

    def to_property(self) -> Property:
        return Property(
            id=self.id,
            url=self.url,
            address=self.address,
            price=self.price,
            square_feet=self.square_feet,
            taxes=self.taxes,
            bedrooms=self.bedrooms,
            bathrooms=self.bathrooms,
            year_built=self.year_built,
            source=self.source,
        )


class SavedSearchPayload(_CamelModel):
    id: str = Field(default_factory=generate_id)
    name: str
    properties: list[PropertyPayload]
    saved_at: str = Field(default_factory=utc_now_iso)

    @classmethod
    def from_search(cls, search: SavedSearch) -> "SavedSearchPayload":
        return cls(
            id=search.id,
            name=search.name,
            properties=[PropertyPayload.from_property(p) for p in search.properties],
            saved_at=search.saved_at,
        )

    def to_search(self) -> SavedSearch:
        return SavedSearch(
            id=self.id,
            name=self.name,
            properties=tuple(p.to_property() for p in self.properties),
            saved_at=self.saved_at,
        )


def _json_default(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(obj, **kwargs) -> str:
    """json.dumps that writes Decimals as plain JSON numbers."""
    return json.dumps(obj, default=_json_default, **kwargs)


def loads(text: str):
    """json.loads that reads non-integer numbers back as exact Decimals."""
    return json.loads(text, parse_float=Decimal)


def search_envelope(search: SavedSearch) -> dict:
    return {
        "type": SHARED_SEARCH_TYPE,
        "data": SavedSearchPayload.from_search(search).model_dump(by_alias=True),
    }


def export_search_json(search: SavedSearch) -> str:
    """Pretty-printed envelope for file download."""
    return dumps(search_envelope(search), indent=2)


def export_filename(search: SavedSearch) -> str:
    slug = re.sub(r"\s+", "-", search.name.strip()).lower()
    return f"{slug}-shared-search.json"


def encode_share_code(search: SavedSearch) -> str:
    """URL-safe base64 of the compact envelope, percent-encoded for a query string."""
    raw = dumps(search_envelope(search), separators=(",", ":")).encode("utf-8")
    return quote(base64.urlsafe_b64encode(raw).decode("ascii"), safe="")


def share_url(search: SavedSearch, base_url: str) -> str:
    return f"{base_url}?shared={encode_share_code(search)}"


def _decode_base64(code: str) -> str:
    code = unquote(code.strip())
    code += "=" * (-len(code) % 4)
    # urlsafe_b64decode also accepts the standard "+/" alphabet
    return base64.urlsafe_b64decode(code.encode("ascii")).decode("utf-8")


def _parse_payload(raw: str):
    raw = raw.strip()
    if not raw.startswith("{"):
        try:
            return loads(_decode_base64(raw))
        except (binascii.Error, UnicodeError, ValueError):
            pass
    try:
        return loads(raw)
    except ValueError:
        raise SharedSearchError("Invalid import code or data format") from None


def decode_shared_search(raw: str, suffix: str = IMPORTED_SUFFIX) -> SavedSearch:
    """Decode a share code or raw JSON envelope into a new SavedSearch.

    The imported search gets a fresh id and timestamp and ``suffix`` is
    appended to its name; property fields are preserved as-is.

    Raises:
        SharedSearchError: with a user-facing message on any malformed input.
    """
    if not raw or not raw.strip():
        raise SharedSearchError("Invalid import code or data format")

    envelope = _parse_payload(raw)
    if not isinstance(envelope, dict) or envelope.get("type") != SHARED_SEARCH_TYPE or not envelope.get("data"):
        raise SharedSearchError("Invalid shared search data format")

    data = envelope["data"]
    if (
        not isinstance(data, dict)
        or not data.get("name")
        or not isinstance(data.get("properties"), list)
        or not data["properties"]
    ):
        raise SharedSearchError("The shared search is missing required data")

    try:
        payload = SavedSearchPayload.model_validate(data)
    except ValidationError as e:
        logger.warning("Rejected shared search with invalid properties: %s", e)
        raise SharedSearchError("The shared search contains invalid property data") from None

    search = payload.to_search()
    return SavedSearch(
        id=generate_id(),
        name=f"{search.name}{suffix}",
        properties=search.properties,
        saved_at=utc_now_iso(),
    )
