"""Capability gate for the coordinate system course data is expressed in."""

from __future__ import annotations

import logging
from threading import RLock

from cachetools import LRUCache
from pyproj import CRS
from pyproj.exceptions import CRSError

from ..config import CRS_CACHE_SIZE
from ..errors import UnsupportedProjectionError
from ..models import CoordinateReference

LOGGER = logging.getLogger(__name__)

WGS84 = CRS.from_epsg(4326)

_PROJECTED_MESSAGE = (
    "Course rendering is not supported for maps in a projected coordinate "
    "system (such as UTM or a local grid). Use a KMZ file or a world file "
    "with geographic (latitude/longitude) coordinates to display courses."
)

_crs_cache: LRUCache[str, CRS] = LRUCache(maxsize=max(1, CRS_CACHE_SIZE))
_crs_cache_lock = RLock()


def resolve_crs(definition: str) -> CRS:
    """Parse a CRS definition through pyproj, caching the result."""

    with _crs_cache_lock:
        cached = _crs_cache.get(definition)
    if cached is not None:
        return cached
    try:
        crs = CRS.from_user_input(definition)
    except CRSError as exc:
        raise UnsupportedProjectionError(
            f"Unable to resolve coordinate reference '{definition}'. {_PROJECTED_MESSAGE}"
        ) from exc
    with _crs_cache_lock:
        _crs_cache[definition] = crs
    return crs


def ensure_supported(reference: CoordinateReference | None) -> CRS:
    """Return the geographic CRS courses are drawn in, or refuse.

    The declared ``kind`` is authoritative. A projected declaration is refused
    even when pyproj could resolve it: this engine never reprojects.

    Raises:
        UnsupportedProjectionError: If the reference is projected, unknown, or
            its definition does not resolve to a geographic CRS.
    """

    if reference is None:
        return WGS84
    if reference.kind == "projected":
        LOGGER.warning("Projected coordinate reference declared: %s", reference.definition)
        raise UnsupportedProjectionError(_PROJECTED_MESSAGE)
    if reference.kind != "geographic":
        raise UnsupportedProjectionError(
            f"Unknown coordinate reference kind '{reference.kind}'"
        )
    if not reference.definition:
        return WGS84
    crs = resolve_crs(reference.definition)
    if not crs.is_geographic:
        LOGGER.warning(
            "Coordinate reference '%s' declared geographic but resolves to %s",
            reference.definition,
            crs.name,
        )
        raise UnsupportedProjectionError(_PROJECTED_MESSAGE)
    return crs


def clear_crs_cache() -> None:
    with _crs_cache_lock:
        _crs_cache.clear()


__all__ = ["WGS84", "resolve_crs", "ensure_supported", "clear_crs_cache"]
