"""Tests for the per-airport procedure decoder."""

import pytest
from navdata_samples import CIFP_KJFK, cifp_record

from xpnav.parsers.cifp import (
    AltitudeConstraint,
    ProcedureType,
    classify_record,
    decode_altitude,
    decode_leg,
    parse_cifp,
    procedure_names,
    procedure_runways,
    procedure_transitions,
    split_record,
)


@pytest.fixture
def kjfk():
    return parse_cifp(CIFP_KJFK, "kjfk")


class TestRecordSplitting:
    """Tests for record prefix handling."""

    def test_split(self) -> None:
        """Test the prefix and stripped fields are separated."""
        assert split_record("SID: 010 ,1,DEEZZ5") == ("SID", ["010", "1", "DEEZZ5"])

    def test_line_without_colon(self) -> None:
        """Test lines without a record prefix are rejected."""
        assert split_record("garbage line") is None

    @pytest.mark.parametrize(
        "prefix,expected",
        [
            ("SID", ProcedureType.SID),
            ("STAR", ProcedureType.STAR),
            ("APPCH", ProcedureType.APPROACH),
            ("FINAL", ProcedureType.APPROACH),
            ("RWY", ProcedureType.APPROACH),
            ("PRDAT", None),
        ],
    )
    def test_classify(self, prefix: str, expected: ProcedureType | None) -> None:
        """Test record prefixes map onto procedure families."""
        assert classify_record(prefix) is expected


class TestAltitudes:
    """Tests for altitude restriction decoding."""

    def test_between_window(self) -> None:
        """Test a B window packs two five-digit altitudes."""
        assert decode_altitude("B0500018000") == AltitudeConstraint("B", 5000, 18000)

    def test_single_descriptors(self) -> None:
        """Test +, - and @ keep their descriptor."""
        assert decode_altitude("+02500") == AltitudeConstraint("+", 2500)
        assert decode_altitude("-10000") == AltitudeConstraint("-", 10000)
        assert decode_altitude("@03000") == AltitudeConstraint("@", 3000)

    def test_unknown_descriptor_reads_as_at(self) -> None:
        """Test an unrecognized leading character becomes "at"."""
        assert decode_altitude("X04000") == AltitudeConstraint("@", 4000)

    def test_empty_or_garbage(self) -> None:
        """Test empty and non-numeric values have no restriction."""
        assert decode_altitude("") is None
        assert decode_altitude("+FL180") is None


class TestLegs:
    """Tests for single-record leg decoding."""

    def test_short_record_has_no_leg(self) -> None:
        """Test records under eleven fields are ignored."""
        assert decode_leg(["010", "1", "DEEZZ5", "RW04L", "CAMRN"]) is None

    def test_record_without_fix_has_no_leg(self) -> None:
        """Test an empty fix field yields no leg."""
        assert decode_leg([""] * 12) is None

    def test_leg_fields(self) -> None:
        """Test course and distance are tenths and turn/speed are read."""
        _, fields = split_record(
            cifp_record("SID", f0="010", f1="4", f2="X", f3="RW31L", f4="MERIT", f5="K6", f6="E", f9="L",
                        f11="TF", f18="0310", f19="0120", f22="+", f23="05000", f25="250")
        )

        leg = decode_leg(fields)

        assert leg is not None
        assert leg.fix_id == "MERIT"
        assert leg.fix_region == "K6"
        assert leg.fix_type == "E"
        assert leg.path_terminator == "TF"
        assert leg.path_terminator_name == "Track to Fix"
        assert leg.course == pytest.approx(31.0)
        assert leg.distance == pytest.approx(12.0)
        assert leg.altitude == AltitudeConstraint("+", 5000)
        assert leg.speed == 250
        assert leg.turn_direction == "L"

    def test_invalid_turn_dropped(self) -> None:
        """Test a turn other than L or R is ignored."""
        _, fields = split_record(cifp_record("SID", f4="MERIT", f9="E", f11="TF"))

        assert decode_leg(fields).turn_direction is None


class TestParseCifp:
    """Tests for grouping records into procedures."""

    def test_icao_uppercased(self, kjfk) -> None:
        """Test the airport code is normalized."""
        assert kjfk.icao == "KJFK"

    def test_sids_split_by_runway(self, kjfk) -> None:
        """Test route types 1 and 4 carry a runway."""
        assert [(p.name, p.runway, p.transition) for p in kjfk.sids] == [
            ("DEEZZ5", "RW04L", None),
            ("DEEZZ5", "RW31L", None),
        ]
        assert [wp.fix_id for wp in kjfk.sids[0].waypoints] == ["RW04L", "CAMRN"]
        assert kjfk.sids[0].waypoints[1].turn_direction == "R"

    def test_star_transition(self, kjfk) -> None:
        """Test route types 5 and 6 carry a transition."""
        assert len(kjfk.stars) == 1
        star = kjfk.stars[0]
        assert (star.name, star.runway, star.transition) == ("PARCH3", None, "CCC")
        assert star.key == ("STAR", "PARCH3", "ALL", "CCC")

    def test_procedure_without_legs_omitted(self, kjfk) -> None:
        """Test a procedure whose records name no fix is left out."""
        assert "EMPTY1" not in procedure_names(kjfk.stars)

    def test_approach_altitudes(self, kjfk) -> None:
        """Test single, packed and split altitude windows on an approach."""
        approach = kjfk.approaches[0]

        assert approach.name == "I04L"
        assert approach.runway is None
        assert approach.transition is None
        assert [wp.fix_id for wp in approach.waypoints] == ["CAMRN", "XYZ12", "RW04L"]
        assert approach.waypoints[0].altitude == AltitudeConstraint("@", 2000)
        assert approach.waypoints[0].speed == 210
        assert approach.waypoints[1].altitude == AltitudeConstraint("B", 5000, 18000)
        assert approach.waypoints[2].altitude is None
        assert kjfk.sids[1].waypoints[0].altitude == AltitudeConstraint("B", 5000, 18000)

    def test_all_and_of_type(self, kjfk) -> None:
        """Test aggregate accessors."""
        assert len(kjfk.all()) == 4
        assert kjfk.of_type(ProcedureType.APPROACH) is kjfk.approaches

    def test_unknown_and_malformed_lines_ignored(self) -> None:
        """Test non-procedure records and colonless lines are ignored."""
        text = "PRDAT:1,2,3\nnonsense\n\n" + cifp_record("SID", f1="2", f2="A1", f4="FIX1", f11="IF")

        procedures = parse_cifp(text, "ZZZZ")

        assert [p.name for p in procedures.sids] == ["A1"]
        assert procedures.stars == [] and procedures.approaches == []


class TestHelpers:
    """Tests for name, runway and transition listings."""

    def test_names_runways_transitions(self, kjfk) -> None:
        """Test listings are unique and sorted."""
        assert procedure_names(kjfk.sids) == ["DEEZZ5"]
        assert procedure_runways(kjfk.sids, "DEEZZ5") == ["RW04L", "RW31L"]
        assert procedure_transitions(kjfk.stars, "PARCH3") == ["CCC"]
        assert procedure_transitions(kjfk.sids, "DEEZZ5") == []
