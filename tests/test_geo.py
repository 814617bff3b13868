"""Tests for great-circle helpers."""

import pytest

from xpnav.geo import bounding_box, haversine_nm, in_bounding_box, normalize_bearing


class TestGeo:
    """Tests for distance, boxes and bearings."""

    def test_one_degree_of_latitude(self) -> None:
        """Test a degree of latitude is about 60 nm."""
        assert haversine_nm(0.0, 0.0, 1.0, 0.0) == pytest.approx(60.04, abs=0.01)
        assert haversine_nm(10.0, 10.0, 10.0, 10.0) == 0.0

    def test_symmetry(self) -> None:
        """Test distance does not depend on direction."""
        assert haversine_nm(40.64, -73.78, 51.47, -0.46) == pytest.approx(haversine_nm(51.47, -0.46, 40.64, -73.78))

    def test_box_order_and_widening(self) -> None:
        """Test (min_lat, min_lon, max_lat, max_lon) with longitude widened by latitude."""
        min_lat, min_lon, max_lat, max_lon = bounding_box(60.0, 10.0, 60.0)

        assert (min_lat, max_lat) == pytest.approx((59.0, 61.0))
        assert (min_lon, max_lon) == pytest.approx((8.0, 12.0))

    def test_box_at_pole(self) -> None:
        """Test longitude is unbounded at the pole."""
        assert in_bounding_box(89.5, 170.0, 90.0, 0.0, 60.0)

    @pytest.mark.parametrize("bearing,expected", [(0, 0), (360, 0), (-90, 270), (450, 90)])
    def test_normalize_bearing(self, bearing: float, expected: float) -> None:
        """Test bearings wrap into [0, 360)."""
        assert normalize_bearing(bearing) == expected
