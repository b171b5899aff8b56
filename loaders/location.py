"""
Parcel location - Map embed URLs and address geocoding.

Features:
- Google Maps embed URL for an address (no API key needed)
- Nominatim geocoding with rate limiting (1 request/second per policy)
- In-memory cache to avoid repeated lookups
- Retry with exponential backoff
"""

import time
import logging
from dataclasses import dataclass, asdict
from typing import Dict, Optional
from urllib.parse import quote

import requests
from tenacity import retry, stop_after_attempt, wait_exponential

log = logging.getLogger(__name__)

EMBED_URL = "https://maps.google.com/maps?q={query}&t=m&z={zoom}&ie=UTF8&iwloc=&output=embed"

_MIN_REQUEST_INTERVAL = 1.1  # seconds between Nominatim requests


def build_embed_url(address: str, zoom: int = 15) -> str:
    """Embeddable map URL centred on a free-text address."""
    return EMBED_URL.format(query=quote(address, safe=""), zoom=zoom)


@dataclass(frozen=True)
class ParcelLocation:
    """A geocoded parcel address."""
    address: str
    latitude: float
    longitude: float
    display_name: str

    def to_dict(self) -> Dict:
        return asdict(self)


class LocationResolver:
    """
    Resolves parcel addresses to coordinates via OpenStreetMap Nominatim.

    Lookups (including misses) are cached per normalized address for the
    life of the resolver.
    """

    NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"
    USER_AGENT = "EstateNexus/1.0 (feasibility dashboard)"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.USER_AGENT})
        self._cache: Dict[str, Optional[ParcelLocation]] = {}
        self._last_request_time = 0.0

    @staticmethod
    def _cache_key(address: str) -> str:
        return " ".join(address.lower().split())

    def _rate_limit(self):
        elapsed = time.time() - self._last_request_time
        if elapsed < _MIN_REQUEST_INTERVAL:
            time.sleep(_MIN_REQUEST_INTERVAL - elapsed)
        self._last_request_time = time.time()

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=2, min=2, max=10))
    def _search(self, address: str) -> list:
        self._rate_limit()
        response = self.session.get(
            self.NOMINATIM_URL,
            params={"q": address, "format": "jsonv2", "limit": 1},
            timeout=10,
        )
        response.raise_for_status()
        return response.json()

    def resolve(self, address: str) -> Optional[ParcelLocation]:
        """
        Convert a parcel address to coordinates.

        Returns:
            ParcelLocation, or None if the address is blank, not found, or
            the service is unreachable.
        """
        if not address or not address.strip():
            return None

        key = self._cache_key(address)
        if key in self._cache:
            log.debug(f"Cache hit for: {address}")
            return self._cache[key]

        try:
            results = self._search(address)
        except Exception as e:
            log.error(f"Geocoding failed for '{address}': {e}")
            return None

        location = None
        if results:
            top = results[0]
            location = ParcelLocation(
                address=address,
                latitude=float(top["lat"]),
                longitude=float(top["lon"]),
                display_name=top.get("display_name", ""),
            )
            log.info(f"Geocoded: {address} -> ({location.latitude}, {location.longitude})")
        else:
            log.warning(f"No results for: {address}")

        self._cache[key] = location
        return location


_resolver: Optional[LocationResolver] = None


def get_location_resolver() -> LocationResolver:
    """Get the singleton location resolver."""
    global _resolver
    if _resolver is None:
        _resolver = LocationResolver()
    return _resolver
