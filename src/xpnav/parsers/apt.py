"""Scanner for scenery airport tables (apt.dat).

The scanner does not interpret airport layouts. It splits the file into
per-airport blocks, keeps every line of a block verbatim, reads the
``1302`` metadata rows and picks a placement coordinate:

1. ``datum_lat`` / ``datum_lon`` metadata,
2. the first end of the first runway (row ``100``),
3. the first helipad (row ``102``).

Airports with none of those are dropped and reported in ``errors``.

Typical usage example:
    from xpnav.parsers.apt import scan_apt

    scan = scan_apt(Path("apt.dat").read_text(), "apt.dat")
    kjfk = scan.airports["KJFK"]
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from xpnav.parsers.base import END_OF_DATA, ParseStats, Stopwatch, to_float

logger = logging.getLogger(__name__)

MIN_HEADER_TOKENS = 5
MIN_RUNWAY_TOKENS = 11
MIN_HELIPAD_TOKENS = 4

METADATA_ROW = "1302"
LAND_RUNWAY_ROW = "100"
HELIPAD_ROW = "102"

METADATA_KEYS = frozenset(
    {
        "city",
        "country",
        "iata_code",
        "faa_code",
        "region_code",
        "state",
        "transition_alt",
        "transition_level",
        "tower_service_type",
        "drive_on_left",
        "gui_label",
        "datum_lat",
        "datum_lon",
    }
)


class AirportFieldType(Enum):
    """Kind of landing facility, from the block's header row code."""

    LAND = "land"
    SEAPLANE = "seaplane"
    HELIPORT = "heliport"


HEADER_ROWS = {
    "1": AirportFieldType.LAND,
    "16": AirportFieldType.SEAPLANE,
    "17": AirportFieldType.HELIPORT,
}


@dataclass
class AirportRecord:
    """One airport block, placed and ready for the airport store.

    Attributes:
        icao: Airport identifier from the header row
        name: Airport name
        latitude: Placement latitude
        longitude: Placement longitude
        field_type: Land, seaplane base or heliport
        elevation: Field elevation in feet
        data: The block's lines, verbatim, newline-joined
        source_file: apt.dat path the block came from
        is_custom: True when the block came from a custom scenery pack
        pack_name: Custom scenery pack directory name
        metadata: ``1302`` key/value rows
    """

    icao: str
    name: str
    latitude: float
    longitude: float
    field_type: AirportFieldType
    elevation: float
    data: str
    source_file: str = ""
    is_custom: bool = False
    pack_name: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def city(self) -> str | None:
        return self.metadata.get("city")

    @property
    def country(self) -> str | None:
        return self.metadata.get("country")

    @property
    def iata_code(self) -> str | None:
        return self.metadata.get("iata_code")

    @property
    def transition_altitude(self) -> int | None:
        value = to_float(self.metadata.get("transition_alt", ""))
        return int(value) if value is not None else None


@dataclass
class AptScanResult:
    """Airports found in one apt.dat plus drop diagnostics."""

    airports: dict[str, AirportRecord] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    stats: ParseStats = field(default_factory=ParseStats)


class _AirportBlock:
    def __init__(self, header: list[str], line: str) -> None:
        self.icao = header[4]
        self.name = " ".join(header[5:])
        self.field_type = HEADER_ROWS[header[0]]
        self.elevation = to_float(header[1], 0.0)
        self.lines = [line]
        self.metadata: dict[str, str] = {}
        self.runway_coords: tuple[float, float] | None = None
        self.helipad_coords: tuple[float, float] | None = None

    def feed(self, line: str, parts: list[str]) -> None:
        self.lines.append(line)
        if not parts:
            return

        row = parts[0]
        if row == METADATA_ROW and len(parts) >= 3 and parts[1] in METADATA_KEYS:
            self.metadata[parts[1]] = " ".join(parts[2:])
        elif row == LAND_RUNWAY_ROW and self.runway_coords is None and len(parts) >= MIN_RUNWAY_TOKENS:
            self.runway_coords = _coords(parts[9], parts[10])
        elif row == HELIPAD_ROW and self.helipad_coords is None and len(parts) >= MIN_HELIPAD_TOKENS:
            self.helipad_coords = _coords(parts[2], parts[3])

    def placement(self) -> tuple[float, float] | None:
        datum = _coords(self.metadata.get("datum_lat", ""), self.metadata.get("datum_lon", ""))
        return datum or self.runway_coords or self.helipad_coords


def _coords(lat_text: str, lon_text: str) -> tuple[float, float] | None:
    lat, lon = to_float(lat_text), to_float(lon_text)
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lat, lon


def scan_apt(text: str, source_file: str = "", pack_name: str | None = None) -> AptScanResult:
    """Split an apt.dat into placed airport records.

    Args:
        text: File content.
        source_file: Path recorded on every record.
        pack_name: Custom scenery pack name; marks records as custom.

    Returns:
        Airports keyed by ICAO. A repeated ICAO within one file keeps the
        later block.
    """
    watch = Stopwatch()
    result = AptScanResult()
    block: _AirportBlock | None = None

    def finish() -> None:
        if block is None:
            return
        coords = block.placement()
        if coords is None:
            result.errors.append(f"{block.icao}: no datum, runway or helipad coordinate")
            result.stats.skipped += 1
            return
        result.airports[block.icao] = AirportRecord(
            icao=block.icao,
            name=block.name,
            latitude=coords[0],
            longitude=coords[1],
            field_type=block.field_type,
            elevation=block.elevation,
            data="\n".join(block.lines),
            source_file=source_file,
            is_custom=pack_name is not None,
            pack_name=pack_name,
            metadata=block.metadata,
        )
        result.stats.parsed += 1

    for raw in text.splitlines():
        line = raw.rstrip("\r\n")
        stripped = line.strip()

        if stripped == END_OF_DATA:
            break

        parts = stripped.split()
        if parts and parts[0] in HEADER_ROWS:
            finish()
            block = None
            result.stats.total_lines += 1
            if len(parts) >= MIN_HEADER_TOKENS:
                block = _AirportBlock(parts, line)
            else:
                result.stats.skipped += 1
            continue

        if block is not None:
            block.feed(line, parts)

    finish()

    result.stats.elapsed_ms = watch.elapsed_ms()
    logger.debug(
        "Scanned %s: %d airports placed, %d dropped",
        source_file or "apt.dat",
        result.stats.parsed,
        result.stats.skipped,
    )
    return result
