"""Tests for the geographic coordinate reference gate."""

from __future__ import annotations

import pytest

from orienteering_overlay.errors import UnsupportedProjectionError
from orienteering_overlay.geometry.projection import WGS84, ensure_supported, resolve_crs
from orienteering_overlay.models import CoordinateReference


def test_missing_reference_means_wgs84() -> None:
    assert ensure_supported(None) == WGS84
    assert ensure_supported(CoordinateReference()) == WGS84


def test_geographic_epsg_is_accepted() -> None:
    crs = ensure_supported(CoordinateReference("geographic", "EPSG:4326"))
    assert crs.is_geographic


@pytest.mark.parametrize("definition", [None, "EPSG:32630", "EPSG:4326"])
def test_projected_declaration_is_refused(definition) -> None:
    """Projected maps are refused whatever definition accompanies them."""

    with pytest.raises(UnsupportedProjectionError, match="projected coordinate system"):
        ensure_supported(CoordinateReference("projected", definition))


def test_geographic_declaration_resolving_to_projected_crs_is_refused() -> None:
    with pytest.raises(UnsupportedProjectionError):
        ensure_supported(CoordinateReference("geographic", "EPSG:27700"))


def test_unresolvable_definition_is_refused() -> None:
    with pytest.raises(UnsupportedProjectionError, match="Unable to resolve"):
        ensure_supported(CoordinateReference("geographic", "not a coordinate system"))


def test_unknown_kind_is_refused() -> None:
    with pytest.raises(UnsupportedProjectionError):
        ensure_supported(CoordinateReference("local", None))  # type: ignore[arg-type]


def test_resolved_crs_is_cached() -> None:
    assert resolve_crs("EPSG:4258") is resolve_crs("EPSG:4258")
