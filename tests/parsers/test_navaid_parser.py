"""Tests for the navaid table decoder and its packed-column codecs."""

import random

import pytest

from xpnav.parsers.navaids import (
    NavaidRowCode,
    NavaidType,
    classify_navaid,
    decode_glidepath,
    decode_localizer_bearing,
    decode_navaid_line,
    encode_glidepath,
    encode_localizer_bearing,
    parse_navaids,
)

HEADER = "I\n1200 Version - data cycle 2601, build 20260105, metadata NavXP1200.\n"


class TestLocalizerCodec:
    """Tests for the localizer bearing/course column."""

    def test_decode(self) -> None:
        """Test bearing is the remainder and course the quotient of 360."""
        bearing, course = decode_localizer_bearing(44570.211)

        assert course == 123
        assert bearing == pytest.approx(290.211)

    @pytest.mark.parametrize("bearing,course", [(0.0, 0), (44.5, 44), (359.9, 359), (180.25, 10)])
    def test_round_trip(self, bearing: float, course: int) -> None:
        """Test decode undoes encode."""
        decoded_bearing, decoded_course = decode_localizer_bearing(encode_localizer_bearing(bearing, course))

        assert decoded_course == course
        assert decoded_bearing == pytest.approx(bearing)

    def test_raw_columns_survive_decode_and_encode(self) -> None:
        """Test re-encoding a decoded column reproduces the column."""
        rng = random.Random(0)
        for _ in range(3000):
            raw = float(f"{rng.randrange(360) * 360 + rng.uniform(0, 360):.3f}")

            assert encode_localizer_bearing(*decode_localizer_bearing(raw)) == pytest.approx(raw)


class TestGlidepathCodec:
    """Tests for the glidepath angle/bearing column."""

    def test_decode(self) -> None:
        """Test a 3.00 degree path on bearing 44.5."""
        angle, bearing = decode_glidepath(30000044.5)

        assert angle == 3.0
        assert bearing == pytest.approx(44.5)

    def test_decode_counts_hundredths(self) -> None:
        """Test the quotient of 100000 is read in hundredths of a degree."""
        angle, bearing = decode_glidepath(300044.5)

        assert angle == 0.03
        assert bearing == pytest.approx(44.5)

    @pytest.mark.parametrize("angle,bearing", [(3.0, 44.5), (3.2, 0.0), (2.75, 359.99)])
    def test_round_trip(self, angle: float, bearing: float) -> None:
        """Test decode undoes encode."""
        decoded_angle, decoded_bearing = decode_glidepath(encode_glidepath(angle, bearing))

        assert decoded_angle == pytest.approx(angle)
        assert decoded_bearing == pytest.approx(bearing)

    def test_raw_columns_survive_decode_and_encode(self) -> None:
        """Test re-encoding a decoded column reproduces the column."""
        rng = random.Random(0)
        for _ in range(3000):
            raw = float(f"{rng.randrange(100, 1000) * 100000 + rng.uniform(0, 360):.3f}")

            assert encode_glidepath(*decode_glidepath(raw)) == pytest.approx(raw)


class TestClassification:
    """Tests for name-based type upgrades."""

    def test_vor_variants(self) -> None:
        """Test VORTAC, TACAN and VOR/DME names upgrade a VOR row."""
        assert classify_navaid(NavaidRowCode.VOR, "KENNEDY VORTAC") is NavaidType.VORTAC
        assert classify_navaid(NavaidRowCode.VOR, "SOMEWHERE TACAN") is NavaidType.VORTAC
        assert classify_navaid(NavaidRowCode.VOR, "LA GUARDIA VOR/DME") is NavaidType.VOR_DME
        assert classify_navaid(NavaidRowCode.VOR, "BRIDGEPORT VOR-DME") is NavaidType.VOR_DME
        assert classify_navaid(NavaidRowCode.VOR, "BRIDGEPORT VOR") is NavaidType.VOR

    def test_dme_and_threshold_points(self) -> None:
        """Test TACAN upgrades a DME and FTP is told apart from LTP."""
        assert classify_navaid(NavaidRowCode.DME_STANDALONE, "NAS TACAN") is NavaidType.TACAN
        assert classify_navaid(NavaidRowCode.DME_NDB, "KENNEDY DME") is NavaidType.DME
        assert classify_navaid(NavaidRowCode.LTP_FTP, "R04LFTP") is NavaidType.FTP
        assert classify_navaid(NavaidRowCode.LTP_FTP, "R04L") is NavaidType.LTP


class TestDecodeLine:
    """Tests for single-row decoding."""

    def test_vor_row(self) -> None:
        """Test every station column lands in its field."""
        navaid = decode_navaid_line("3 40.63992500 -73.77869444 13 11390 130 -13.000 JFK K6 US KENNEDY VORTAC")

        assert navaid is not None
        assert navaid.type is NavaidType.VORTAC
        assert navaid.id == "JFK"
        assert navaid.region == "K6"
        assert navaid.country == "US"
        assert navaid.name == "KENNEDY VORTAC"
        assert navaid.frequency == 11390
        assert navaid.range == 130
        assert navaid.magnetic_variation == -13.0

    def test_localizer_row(self) -> None:
        """Test the packed column and the associated airport/runway."""
        navaid = decode_navaid_line("4 40.629917 -73.769167 12 10990 18 44570.211 IJFK KJFK K6 04L ILS-cat-III")

        assert navaid is not None
        assert navaid.type is NavaidType.ILS
        assert navaid.course == 123
        assert navaid.bearing == pytest.approx(290.211)
        assert navaid.associated_airport == "KJFK"
        assert navaid.associated_runway == "04L"
        assert navaid.region == "K6"

    def test_glideslope_row(self) -> None:
        """Test glidepath angle and bearing are split."""
        navaid = decode_navaid_line("6 40.6512 -73.7611 12 10990 10 30000044.500 IJFK KJFK K6 04L GS")

        assert navaid is not None
        assert navaid.type is NavaidType.GS
        assert navaid.glidepath_angle == 3.0
        assert navaid.bearing == pytest.approx(44.5)

    def test_fpap_row(self) -> None:
        """Test the performance class is read from the name."""
        navaid = decode_navaid_line("14 40.65 -73.76 12 56990 0.0 44.5 R04L KJFK K6 04L LPV")

        assert navaid is not None
        assert navaid.type is NavaidType.FPAP
        assert navaid.length_offset == 0.0
        assert navaid.course == 44.5
        assert navaid.approach_performance == "LPV"

    def test_threshold_point_row(self) -> None:
        """Test crossing height, reference path and the packed glidepath."""
        navaid = decode_navaid_line("16 40.62 -73.78 12 56990 55.0 30000044.50 R04L KJFK K6 04L W04A LTP")

        assert navaid is not None
        assert navaid.type is NavaidType.LTP
        assert navaid.threshold_crossing_height == 55.0
        assert navaid.glidepath_angle == 3.0
        assert navaid.ref_path_id == "W04A"
        assert navaid.name == "W04A"

    @pytest.mark.parametrize(
        "line,navaid_type,column",
        [
            ("4 40.629917 -73.769167 12 10990 18 44570.211 IJFK KJFK K6 04L ILS-cat-III", NavaidType.ILS, 44570.211),
            ("5 40.7700 -73.8600 12 10855 18 79264.500 ILGA KLGA K6 22 LOC", NavaidType.LOC, 79264.5),
        ],
    )
    def test_localizer_family_column(self, line: str, navaid_type: NavaidType, column: float) -> None:
        """Test rows 4 and 5 re-encode to their packed column."""
        navaid = decode_navaid_line(line)

        assert navaid is not None
        assert navaid.type is navaid_type
        assert encode_localizer_bearing(navaid.bearing, navaid.course) == pytest.approx(column)

    @pytest.mark.parametrize(
        "line,navaid_type,column",
        [
            ("6 40.6512 -73.7611 12 10990 10 30000044.500 IJFK KJFK K6 04L GS", NavaidType.GS, 30000044.5),
            ("15 40.65 -73.76 12 20351 0.0 31000044.500 G04A KJFK K6 04L GLS", NavaidType.GLS, 31000044.5),
            ("16 40.62 -73.78 12 56990 55.0 30000044.50 R04L KJFK K6 04L W04A LTP", NavaidType.LTP, 30000044.5),
        ],
    )
    def test_glidepath_family_column(self, line: str, navaid_type: NavaidType, column: float) -> None:
        """Test rows 6, 15 and 16 re-encode to their packed column."""
        navaid = decode_navaid_line(line)

        assert navaid is not None
        assert navaid.type is navaid_type
        direction = navaid.bearing if navaid_type is NavaidType.GS else navaid.course
        assert encode_glidepath(navaid.glidepath_angle, direction) == pytest.approx(column)

    @pytest.mark.parametrize(
        "line",
        [
            "3 40.6 -73.7 13 11390 130 -13.0 JFK K6",
            "1 40.6 -73.7 13 11390 130 -13.0 JFK K6 US NAME",
            "3 abc -73.7 13 11390 130 -13.0 JFK K6 US NAME",
            "3 95.0 -73.7 13 11390 130 -13.0 JFK K6 US NAME",
        ],
    )
    def test_rejected_rows(self, line: str) -> None:
        """Test short rows, unknown codes and bad coordinates are dropped."""
        assert decode_navaid_line(line) is None


class TestParseNavaids:
    """Tests for the whole-table decoder."""

    def test_vor_vortac_and_malformed(self) -> None:
        """Test a VOR, a VORTAC and a malformed line yield exactly two navaids."""
        text = (
            HEADER
            + "3 41.1675 -73.1256 11 10880 40 -14.0 BDR K6 US BRIDGEPORT VOR\n"
            + "3 40.6399 -73.7787 13 11390 130 -13.0 JFK K6 US KENNEDY VORTAC\n"
            + "3 40.6399 garbage\n"
            + "99\n"
        )

        result = parse_navaids(text)

        assert [n.type for n in result.items] == [NavaidType.VOR, NavaidType.VORTAC]
        assert result.stats.parsed == 2
        assert result.stats.skipped == 1

    def test_stops_at_sentinel(self) -> None:
        """Test rows after 99 are ignored."""
        text = HEADER + "99\n3 41.1675 -73.1256 11 10880 40 -14.0 BDR K6 US BRIDGEPORT VOR\n"

        assert parse_navaids(text).items == []
