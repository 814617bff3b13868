"""Decoder for ATC controller sectors (Custom Data/atc.dat).

The file is a sequence of blocks::

    CONTROLLER
    NAME ALGIERS
    FACILITY_ID DAAA
    ROLE ctr
    FREQ 12045
    AIRSPACE_POLYGON_BEGIN 0 60000
    POINT 39.000000 4.666667
    ...
    AIRSPACE_POLYGON_END

A block is kept only when it names a controller, a facility and a known role.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from xpnav.parsers.base import ParseResult, Stopwatch, to_float, to_int

logger = logging.getLogger(__name__)

DEFAULT_MIN_ALTITUDE = 0
DEFAULT_MAX_ALTITUDE = 99999


class ATCRole(Enum):
    """Controller position."""

    CENTER = "ctr"
    APPROACH = "app"
    TOWER = "twr"
    GROUND = "gnd"
    DELIVERY = "del"


@dataclass
class ATCAirspace:
    """Vertical limits and lateral polygon of a controller's sector.

    Attributes:
        min_altitude: Floor in feet
        max_altitude: Ceiling in feet
        polygon: (longitude, latitude) vertices in file order
    """

    min_altitude: int = DEFAULT_MIN_ALTITUDE
    max_altitude: int = DEFAULT_MAX_ALTITUDE
    polygon: list[tuple[float, float]] = field(default_factory=list)


@dataclass
class ATCController:
    """ATC position with its frequencies and sector.

    Attributes:
        name: Position name (e.g., "ALGIERS")
        facility_id: Facility identifier (e.g., "DAAA")
        role: Controller position
        frequencies: Frequencies in MHz
        airspace: Sector, if the block defines one
    """

    name: str
    facility_id: str
    role: ATCRole
    frequencies: list[float] = field(default_factory=list)
    airspace: ATCAirspace | None = None


class _BlockBuilder:
    """Accumulates one CONTROLLER block."""

    def __init__(self) -> None:
        self.name: str | None = None
        self.facility_id: str | None = None
        self.role: ATCRole | None = None
        self.frequencies: list[float] = []
        self.airspace: ATCAirspace | None = None
        self.in_polygon = False

    def build(self) -> ATCController | None:
        if not (self.name and self.facility_id and self.role):
            return None
        return ATCController(
            name=self.name,
            facility_id=self.facility_id,
            role=self.role,
            frequencies=self.frequencies,
            airspace=self.airspace,
        )

    def feed(self, line: str) -> None:
        keyword, _, value = line.partition(" ")
        value = value.strip()

        if keyword == "NAME":
            self.name = value
        elif keyword == "FACILITY_ID":
            self.facility_id = value
        elif keyword == "ROLE":
            try:
                self.role = ATCRole(value.lower())
            except ValueError:
                logger.debug("Unknown ATC role %r", value)
        elif keyword == "FREQ":
            frequency = to_int(value)
            if frequency is not None:
                self.frequencies.append(frequency / 100)
        elif keyword == "AIRSPACE_POLYGON_BEGIN":
            limits = value.split()
            floor = to_int(limits[0]) if limits else None
            ceiling = to_int(limits[1]) if len(limits) > 1 else None
            self.airspace = ATCAirspace(
                min_altitude=DEFAULT_MIN_ALTITUDE if floor is None else floor,
                max_altitude=DEFAULT_MAX_ALTITUDE if ceiling is None else ceiling,
            )
            self.in_polygon = True
        elif keyword == "AIRSPACE_POLYGON_END":
            self.in_polygon = False
        elif keyword == "POINT" and self.in_polygon and self.airspace is not None:
            coords = value.split()
            if len(coords) >= 2:
                lat, lon = to_float(coords[0]), to_float(coords[1])
                if lat is not None and lon is not None:
                    self.airspace.polygon.append((lon, lat))


def parse_atc(text: str) -> ParseResult[ATCController]:
    """Decode the ATC controller file.

    Returns:
        Complete controllers in file order. ``stats.skipped`` counts
        incomplete blocks.
    """
    watch = Stopwatch()
    result: ParseResult[ATCController] = ParseResult()
    block: _BlockBuilder | None = None

    def finish() -> None:
        if block is None:
            return
        controller = block.build()
        if controller is None:
            result.stats.skipped += 1
        else:
            result.items.append(controller)
            result.stats.parsed += 1

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        result.stats.total_lines += 1
        if line == "CONTROLLER":
            finish()
            block = _BlockBuilder()
        elif block is not None:
            block.feed(line)

    finish()

    result.stats.elapsed_ms = watch.elapsed_ms()
    logger.debug("Decoded %d ATC controllers", result.stats.parsed)
    return result


def controllers_by_role(controllers: list[ATCController], role: ATCRole) -> list[ATCController]:
    return [c for c in controllers if c.role is role]


def controller_by_facility(controllers: list[ATCController], facility_id: str) -> ATCController | None:
    """First controller whose facility matches, case-insensitive."""
    facility_id = facility_id.upper()
    for controller in controllers:
        if controller.facility_id.upper() == facility_id:
            return controller
    return None


def search_controllers(controllers: list[ATCController], query: str) -> list[ATCController]:
    """Controllers whose name or facility contains ``query``."""
    query = query.upper()
    return [c for c in controllers if query in c.name.upper() or query in c.facility_id.upper()]
