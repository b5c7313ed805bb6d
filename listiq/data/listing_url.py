"""Derive the listing site and street address from a pasted listing URL."""

import logging
import re
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

KNOWN_SITES: dict[str, str] = {
    "zillow": "Zillow",
    "redfin": "Redfin",
    "realtor": "Realtor.com",
    "trulia": "Trulia",
    "homes": "Homes.com",
    "century21": "Century 21",
    "coldwellbanker": "Coldwell Banker",
    "remax": "RE/MAX",
    "compass": "Compass",
    "movoto": "Movoto",
    "homesnap": "Homesnap",
    "apartments": "Apartments.com",
    "loopnet": "LoopNet",
    "auction": "Auction.com",
    "foreclosure": "Foreclosure.com",
    "homefinder": "HomeFinder",
    "point2homes": "Point2 Homes",
    "estately": "Estately",
    "mlslistings": "MLS Listings",
    "sothebysrealty": "Sotheby's",
    "christiesrealestate": "Christie's",
    "berkshirehathaway": "Berkshire Hathaway",
    "kw": "Keller Williams",
}


def _parse(url: str):
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    parsed = urlparse(url)
    host = (parsed.hostname or "").removeprefix("www.")
    return host, parsed.path


def _segments(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def extract_source_from_url(url: str) -> str:
    """Site name for a listing URL ("zillow.com/..." -> "Zillow"), or "" if unknown."""
    if not url:
        return ""
    try:
        host, _ = _parse(url.strip())
    except ValueError as e:
        logger.debug("Could not parse listing URL %r: %s", url, e)
        return ""

    labels = host.split(".")
    if len(labels) < 2 or not labels[-2]:
        return ""
    site = labels[-2].lower()
    return KNOWN_SITES.get(site, site[:1].upper() + site[1:])


def _redfin(parts: list[str]) -> str:
    # /STATE/CITY/ADDRESS-ZIP/home/ID
    if len(parts) < 3:
        return ""
    state, city, address_part = parts[0], parts[1], parts[2]
    m = re.match(r"^(.*)-(\d+)$", address_part)
    if m:
        return f"{m.group(1).replace('-', ' ')}, {city}, {state} {m.group(2)}"
    return f"{address_part.replace('-', ' ')}, {city}, {state}"


def _zillow(parts: list[str]) -> str:
    if len(parts) >= 2 and parts[0] == "homedetails":
        # /homedetails/13-Laurie-Ln-South-Salem-NY-10590/247836482_zpid/
        address_part = parts[1]
        m = re.match(r"^(.*)-([A-Z]{2})-(\d+)$", address_part)
        if m:
            return f"{m.group(1).replace('-', ' ')}, {m.group(2)} {m.group(3)}"
        return address_part.replace("-", " ")
    if len(parts) >= 2 and parts[0] == "homes":
        return re.sub(r"_rb$", "", parts[1]).replace("-", " ")
    return ""


def _realtor(parts: list[str]) -> str:
    if len(parts) >= 2 and parts[0] == "realestateandhomes-detail":
        return parts[1].split("_")[0].replace("-", " ")
    return ""


def _trulia(parts: list[str]) -> str:
    # /p/STATE/CITY/ADDRESS-CITY-STATE-ZIP/ID
    if len(parts) < 4 or parts[0] != "p":
        return ""
    state, city, address_part = parts[1], parts[2], parts[3]
    m = re.match(r"^(.*?)-[^-]+-[^-]+-\d+$", address_part)
    if m:
        return f"{m.group(1).replace('-', ' ')}, {city}, {state}"
    return address_part.replace("-", " ")


def _homes(parts: list[str]) -> str:
    if len(parts) >= 2 and parts[0] == "property":
        return parts[1].replace("-", " ")
    return ""


_ADDRESS_PARSERS = [
    ("redfin.com", _redfin),
    ("zillow.com", _zillow),
    ("realtor.com", _realtor),
    ("trulia.com", _trulia),
    ("homes.com", _homes),
]


def extract_address_from_url(url: str) -> str:
    """Street address encoded in a listing URL path, or "" for unsupported sites."""
    if not url:
        return ""
    try:
        host, path = _parse(url.strip())
    except ValueError as e:
        logger.debug("Could not parse listing URL %r: %s", url, e)
        return ""

    for domain, parser in _ADDRESS_PARSERS:
        if domain in host:
            return parser(_segments(path))
    return ""
