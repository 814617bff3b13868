"""Tests for the airport metadata decoder."""

from navdata_samples import APTMETA_DAT

from xpnav.parsers.apt_meta import decode_meta_line, parse_airport_metadata


class TestAirportMetadata:
    """Tests for earth_aptmeta.dat rows."""

    def test_parse_file(self) -> None:
        """Test records are keyed by ICAO."""
        by_icao, result = parse_airport_metadata(APTMETA_DAT)

        assert sorted(by_icao) == ["EGLL", "KJFK"]
        assert result.stats.parsed == 2
        egll = by_icao["EGLL"]
        assert egll.transition_altitude == 6000
        assert egll.transition_level == "FL070"
        assert egll.elevation == 83
        assert egll.ifr_capable
        assert egll.longest_runway == 12799

    def test_normalization(self) -> None:
        """Test lowercase ICAO, unknown class and missing transition altitude."""
        meta = decode_meta_line("othh OT 25.27 51.60 13 X -5 V 0 FL150")

        assert meta is not None
        assert meta.icao == "OTHH"
        assert meta.airport_class == "C"
        assert meta.longest_runway == 0
        assert not meta.ifr_capable
        assert meta.transition_altitude == 18000

    def test_rejected_rows(self) -> None:
        """Test short rows, bad identifiers and bad coordinates are rejected."""
        assert decode_meta_line("KJFK K6 40.6 -73.7 13 C 14511 I 18000") is None
        assert decode_meta_line("KJFKX K6 40.6 -73.7 13 C 14511 I 18000 FL180") is None
        assert decode_meta_line("KJFK K6 95.0 -73.7 13 C 14511 I 18000 FL180") is None

    def test_duplicate_icao_last_wins(self) -> None:
        """Test a repeated ICAO keeps the later row."""
        text = "KJFK K6 40.6 -73.7 13 C 14511 I 18000 FL180\nKJFK K6 40.6 -73.7 13 C 14511 I 17000 FL170\n"

        by_icao, result = parse_airport_metadata(text)

        assert by_icao["KJFK"].transition_altitude == 17000
        assert len(result.items) == 2
