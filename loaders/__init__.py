"""
Data loaders for Estate Nexus.

Includes:
- Parcel location (map embed URL, Nominatim geocoding)
"""

from loaders.location import (
    LocationResolver,
    ParcelLocation,
    build_embed_url,
    get_location_resolver,
)

__all__ = [
    "LocationResolver",
    "ParcelLocation",
    "build_embed_url",
    "get_location_resolver",
]
