"""Tests for the ATC controller decoder."""

from xpnav.parsers.atc import ATCRole, controller_by_facility, controllers_by_role, parse_atc, search_controllers

ATC_DAT = """# ATC sectors
CONTROLLER
NAME ALGIERS
FACILITY_ID DAAA
ROLE CTR
FREQ 12045
FREQ 12720
AIRSPACE_POLYGON_BEGIN 0 60000
POINT 39.000000 4.666667
POINT 38.000000 8.000000
POINT 36.000000 8.000000
AIRSPACE_POLYGON_END

CONTROLLER
NAME KENNEDY TOWER
FACILITY_ID KJFK
ROLE twr
FREQ 11910

CONTROLLER
NAME BROKEN
ROLE app

CONTROLLER
NAME ODD
FACILITY_ID XXXX
ROLE fss
"""


class TestParseAtc:
    """Tests for controller blocks."""

    def test_complete_blocks_kept(self) -> None:
        """Test blocks missing a facility or with an unknown role are dropped."""
        result = parse_atc(ATC_DAT)

        assert [c.name for c in result.items] == ["ALGIERS", "KENNEDY TOWER"]
        assert result.stats.skipped == 2

    def test_frequencies_and_polygon(self) -> None:
        """Test frequencies are MHz and polygon points are (lon, lat)."""
        algiers = parse_atc(ATC_DAT).items[0]

        assert algiers.role is ATCRole.CENTER
        assert algiers.frequencies == [120.45, 127.2]
        assert algiers.airspace is not None
        assert (algiers.airspace.min_altitude, algiers.airspace.max_altitude) == (0, 60000)
        assert algiers.airspace.polygon[0] == (4.666667, 39.0)
        assert len(algiers.airspace.polygon) == 3

    def test_block_without_sector(self) -> None:
        """Test a controller without a polygon has no airspace."""
        tower = parse_atc(ATC_DAT).items[1]

        assert tower.airspace is None
        assert tower.frequencies == [119.1]

    def test_default_limits(self) -> None:
        """Test missing polygon limits take the defaults."""
        text = "CONTROLLER\nNAME X\nFACILITY_ID Y\nROLE gnd\nAIRSPACE_POLYGON_BEGIN\nPOINT 1 2\nAIRSPACE_POLYGON_END\nPOINT 5 6\n"

        airspace = parse_atc(text).items[0].airspace

        assert (airspace.min_altitude, airspace.max_altitude) == (0, 99999)
        assert airspace.polygon == [(2.0, 1.0)]


class TestAtcLookups:
    """Tests for controller queries."""

    def test_lookups(self) -> None:
        """Test facility, role and text search."""
        controllers = parse_atc(ATC_DAT).items

        assert controller_by_facility(controllers, "kjfk").name == "KENNEDY TOWER"
        assert controller_by_facility(controllers, "ZZZZ") is None
        assert [c.name for c in controllers_by_role(controllers, ATCRole.TOWER)] == ["KENNEDY TOWER"]
        assert [c.name for c in search_controllers(controllers, "alg")] == ["ALGIERS"]
        assert [c.name for c in search_controllers(controllers, "daa")] == ["ALGIERS"]
