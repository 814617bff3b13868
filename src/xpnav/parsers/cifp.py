"""Decoder for per-airport instrument procedures (CIFP/<ICAO>.dat).

Each line is ``TYPE:f0,f1,f2,...``. ``SID`` and ``STAR`` lines belong to
departures and arrivals; ``APPCH``, ``FINAL`` and ``RWY*`` lines belong to
approaches. Lines are grouped into procedures by (type, name, runway,
transition) and every line that names a fix contributes one leg.

Typical usage example:
    from xpnav.parsers.cifp import parse_cifp

    procedures = parse_cifp(Path("CIFP/KJFK.dat").read_text(), "KJFK")
    for sid in procedures.sids:
        print(sid.name, sid.runway, [wp.fix_id for wp in sid.waypoints])
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from xpnav.parsers.base import to_float, to_int

logger = logging.getLogger(__name__)

MIN_LEG_FIELDS = 11
ALL_RUNWAYS = "ALL"
ALTITUDE_DESCRIPTORS = ("+", "-", "@")
BETWEEN_DESCRIPTOR = "B"
ALTITUDE_WIDTH = 5

RUNWAY_ROUTE_TYPES = frozenset({"1", "4"})
TRANSITION_ROUTE_TYPES = frozenset({"5", "6"})

PATH_TERMINATORS = {
    "IF": "Initial Fix",
    "TF": "Track to Fix",
    "CF": "Course to Fix",
    "DF": "Direct to Fix",
    "FA": "Fix to Altitude",
    "FC": "Track from Fix to Distance",
    "FD": "Track from Fix to DME Distance",
    "FM": "From Fix to Manual",
    "CA": "Course to Altitude",
    "CD": "Course to DME",
    "CI": "Course to Intercept",
    "CR": "Course to Radial",
    "RF": "Constant Radius Arc",
    "AF": "Arc to Fix",
    "VA": "Heading to Altitude",
    "VD": "Heading to DME",
    "VI": "Heading to Intercept",
    "VM": "Heading to Manual",
    "VR": "Heading to Radial",
    "PI": "Procedure Turn",
    "HA": "Racetrack to Altitude",
    "HF": "Racetrack to Fix",
    "HM": "Racetrack to Manual",
}


class ProcedureType(Enum):
    """Instrument procedure family."""

    SID = "SID"
    STAR = "STAR"
    APPROACH = "APPROACH"


@dataclass
class AltitudeConstraint:
    """Altitude restriction on a procedure leg.

    Attributes:
        descriptor: "+" at or above, "-" at or below, "@" at, "B" between
        altitude1: First (or only) altitude in feet
        altitude2: Second altitude for "B" constraints
    """

    descriptor: str
    altitude1: int | None
    altitude2: int | None = None


@dataclass
class ProcedureWaypoint:
    """One leg of a procedure.

    Attributes:
        fix_id: Fix identifier the leg terminates at
        fix_region: ICAO region of the fix
        fix_type: Fix section letter (E waypoint, V VHF navaid, N NDB, D, P, ...)
        path_terminator: Two-letter leg type (IF, TF, CF, ...)
        course: Course in degrees
        distance: Distance or time in nautical miles / minutes
        altitude: Altitude restriction, if any
        speed: Speed limit in knots
        turn_direction: "L", "R" or None
    """

    fix_id: str
    fix_region: str
    fix_type: str
    path_terminator: str
    course: float | None = None
    distance: float | None = None
    altitude: AltitudeConstraint | None = None
    speed: int | None = None
    turn_direction: str | None = None

    @property
    def path_terminator_name(self) -> str:
        """Readable leg type, or the raw code when it is not known."""
        return PATH_TERMINATORS.get(self.path_terminator, self.path_terminator)


@dataclass
class Procedure:
    """A SID, STAR or approach with its ordered legs.

    Attributes:
        type: Procedure family
        name: Procedure name (e.g., "DEEZZ5", "I04R")
        runway: Runway the procedure serves, None for all runways
        transition: Enroute or approach transition name, None for the common route
        waypoints: Legs in file order
    """

    type: ProcedureType
    name: str
    runway: str | None
    transition: str | None
    waypoints: list[ProcedureWaypoint] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, str, str]:
        return procedure_key(self.type, self.name, self.runway, self.transition)


@dataclass
class AirportProcedures:
    """Every procedure published for one airport."""

    icao: str
    sids: list[Procedure] = field(default_factory=list)
    stars: list[Procedure] = field(default_factory=list)
    approaches: list[Procedure] = field(default_factory=list)

    def all(self) -> list[Procedure]:
        """SIDs, then STARs, then approaches."""
        return self.sids + self.stars + self.approaches

    def of_type(self, procedure_type: ProcedureType) -> list[Procedure]:
        """The list holding procedures of one family."""
        return {
            ProcedureType.SID: self.sids,
            ProcedureType.STAR: self.stars,
            ProcedureType.APPROACH: self.approaches,
        }[procedure_type]


def procedure_key(
    procedure_type: ProcedureType, name: str, runway: str | None, transition: str | None
) -> tuple[str, str, str, str]:
    """Grouping key for CIFP lines: (type, name, runway or ALL, transition or "")."""
    return (procedure_type.value, name, runway or ALL_RUNWAYS, transition or "")


def classify_record(record_type: str) -> ProcedureType | None:
    """Map a CIFP record prefix onto a procedure family."""
    if record_type == "SID":
        return ProcedureType.SID
    if record_type == "STAR":
        return ProcedureType.STAR
    if record_type in ("APPCH", "FINAL") or record_type.startswith("RWY"):
        return ProcedureType.APPROACH
    return None


def split_record(line: str) -> tuple[str, list[str]] | None:
    """Split ``TYPE:a,b,c`` into the type and its stripped fields."""
    record_type, sep, rest = line.partition(":")
    if not sep:
        return None
    return record_type.strip(), [f.strip() for f in rest.split(",")]


def decode_altitude(value: str) -> AltitudeConstraint | None:
    """Decode a packed altitude string.

    ``B`` followed by ten digits is a window of two five-digit altitudes;
    any other leading character is a single-altitude descriptor, with
    unknown descriptors read as "at".

    Examples:
        >>> decode_altitude("B0500018000")
        AltitudeConstraint(descriptor='B', altitude1=5000, altitude2=18000)
        >>> decode_altitude("+02500")
        AltitudeConstraint(descriptor='+', altitude1=2500, altitude2=None)
    """
    value = value.strip()
    if not value:
        return None

    descriptor, rest = value[0], value[1:]
    if descriptor == BETWEEN_DESCRIPTOR and len(rest) >= 2 * ALTITUDE_WIDTH:
        return AltitudeConstraint(
            descriptor=BETWEEN_DESCRIPTOR,
            altitude1=to_int(rest[:ALTITUDE_WIDTH]) or None,
            altitude2=to_int(rest[ALTITUDE_WIDTH : 2 * ALTITUDE_WIDTH]) or None,
        )

    altitude = to_int(rest)
    if altitude is None:
        return None
    return AltitudeConstraint(
        descriptor=descriptor if descriptor in ALTITUDE_DESCRIPTORS else "@",
        altitude1=altitude,
    )


def _leg_altitude(fields: list[str]) -> AltitudeConstraint | None:
    descriptor = _field(fields, 22)
    first = _field(fields, 23)
    second = _field(fields, 24)

    if not first:
        return None

    if descriptor == BETWEEN_DESCRIPTOR:
        # window packed in one field, or split over the two altitude fields
        if len(first) >= 2 * ALTITUDE_WIDTH:
            return decode_altitude(BETWEEN_DESCRIPTOR + first)
        altitude1, altitude2 = to_int(first), to_int(second)
        if altitude1 is None:
            return None
        return AltitudeConstraint(BETWEEN_DESCRIPTOR, altitude1, altitude2)

    altitude = to_int(first)
    if altitude is None:
        return None
    return AltitudeConstraint(descriptor if descriptor in ALTITUDE_DESCRIPTORS else "@", altitude)


def _field(fields: list[str], index: int) -> str:
    return fields[index] if index < len(fields) else ""


def _tenths(value: str) -> float | None:
    number = to_float(value) if value else None
    return number / 10 if number is not None else None


def decode_leg(fields: list[str]) -> ProcedureWaypoint | None:
    """Decode the leg carried by one CIFP record.

    Args:
        fields: Comma-separated record fields after the type prefix.

    Returns:
        The leg, or None when the record is too short or names no fix.
    """
    if len(fields) < MIN_LEG_FIELDS:
        return None

    fix_id = fields[4]
    if not fix_id:
        return None

    turn = _field(fields, 9)
    speed = _field(fields, 25)

    return ProcedureWaypoint(
        fix_id=fix_id,
        fix_region=fields[5],
        fix_type=fields[6],
        path_terminator=_field(fields, 11),
        course=_tenths(_field(fields, 18)),
        distance=_tenths(_field(fields, 19)),
        altitude=_leg_altitude(fields),
        speed=to_int(speed) if speed else None,
        turn_direction=turn if turn in ("L", "R") else None,
    )


def parse_cifp(text: str, icao: str) -> AirportProcedures:
    """Decode one airport's procedure file.

    Route types 1 and 4 put a runway in field 3; route types 5 and 6 put a
    transition there. Procedures without any usable leg are omitted.

    Args:
        text: File content.
        icao: Airport the file belongs to.

    Returns:
        Procedures grouped into SIDs, STARs and approaches, in first-seen order.
    """
    groups: dict[tuple[str, str, str, str], Procedure] = {}
    skipped = 0

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        record = split_record(line)
        if record is None:
            continue
        record_type, fields = record

        procedure_type = classify_record(record_type)
        if procedure_type is None:
            continue

        route_type = _field(fields, 1)
        name = _field(fields, 2)
        runway_or_transition = _field(fields, 3)

        runway = runway_or_transition if route_type in RUNWAY_ROUTE_TYPES and runway_or_transition else None
        transition = (
            runway_or_transition if route_type in TRANSITION_ROUTE_TYPES and runway_or_transition else None
        )

        key = procedure_key(procedure_type, name, runway, transition)
        procedure = groups.get(key)
        if procedure is None:
            procedure = groups[key] = Procedure(procedure_type, name, runway, transition)

        leg = decode_leg(fields)
        if leg is None:
            skipped += 1
            continue
        procedure.waypoints.append(leg)

    result = AirportProcedures(icao=icao.upper())
    for procedure in groups.values():
        if procedure.waypoints:
            result.of_type(procedure.type).append(procedure)

    logger.debug(
        "Decoded %s procedures: %d SIDs, %d STARs, %d approaches (%d records without a leg)",
        result.icao,
        len(result.sids),
        len(result.stars),
        len(result.approaches),
        skipped,
    )
    return result


def procedure_names(procedures: list[Procedure]) -> list[str]:
    """Unique procedure names, sorted."""
    return sorted({p.name for p in procedures})


def procedure_runways(procedures: list[Procedure], name: str) -> list[str]:
    """Runways served by the procedure called ``name``, sorted."""
    return sorted({p.runway for p in procedures if p.name == name and p.runway})


def procedure_transitions(procedures: list[Procedure], name: str) -> list[str]:
    """Transitions of the procedure called ``name``, sorted."""
    return sorted({p.transition for p in procedures if p.name == name and p.transition})
