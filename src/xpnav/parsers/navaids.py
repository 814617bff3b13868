"""Decoder for the navaid table (earth_nav.dat, NAV1200 layout).

Each data row starts with a numeric row code that selects the column layout.
VOR, NDB and DME rows carry a magnetic variation and a country; the
ILS-family rows carry an associated airport and runway and pack two values
into one integer column. Those packed columns are decoded by the
``decode_*``/``encode_*`` pairs below.

Typical usage example:
    from xpnav.parsers.navaids import parse_navaids

    result = parse_navaids(Path("earth_nav.dat").read_text())
    vors = [n for n in result.items if n.type is NavaidType.VOR]
"""

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum

from xpnav.parsers.base import FixedHeaderPolicy, ParseResult, parse_lines, to_float, to_int

logger = logging.getLogger(__name__)

MIN_NAVAID_TOKENS = 10
LOCALIZER_COURSE_FACTOR = 360
GLIDEPATH_ANGLE_FACTOR = 100000


class NavaidType(Enum):
    """Navigation aid type classification.

    Attributes:
        VOR: VHF Omnidirectional Range
        VORTAC: VOR co-located with a military TACAN
        VOR_DME: VOR co-located with a DME
        NDB: Non-Directional Beacon
        DME: Distance Measuring Equipment
        TACAN: Tactical Air Navigation (distance component)
        ILS: Localizer that is part of a full ILS
        LOC: Standalone localizer (LOC, LDA, SDF)
        GS: ILS glideslope
        OM: Outer marker
        MM: Middle marker
        IM: Inner marker
        FPAP: Flight path alignment point of an SBAS/GBAS approach
        GLS: GBAS landing system approach path
        LTP: Landing threshold point
        FTP: Fictitious threshold point
    """

    VOR = "VOR"
    VORTAC = "VORTAC"
    VOR_DME = "VOR-DME"
    NDB = "NDB"
    DME = "DME"
    TACAN = "TACAN"
    ILS = "ILS"
    LOC = "LOC"
    GS = "GS"
    OM = "OM"
    MM = "MM"
    IM = "IM"
    FPAP = "FPAP"
    GLS = "GLS"
    LTP = "LTP"
    FTP = "FTP"


class NavaidRowCode(IntEnum):
    """Row codes recognized in the navaid table."""

    NDB = 2
    VOR = 3
    LOC = 4
    LOC_STANDALONE = 5
    GS = 6
    OM = 7
    MM = 8
    IM = 9
    DME_STANDALONE = 12
    DME_NDB = 13
    FPAP = 14
    GLS = 15
    LTP_FTP = 16


@dataclass
class Navaid:
    """Navigation aid decoded from one navaid table row.

    Attributes:
        type: Navaid classification
        id: Identifier (e.g., "JFK", "IJFK")
        name: Human-readable name
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        elevation: Elevation in feet
        frequency: Frequency as stored (10 kHz units for VHF, kHz for NDB)
        range: Service volume in nautical miles
        region: ICAO region code (e.g., "K6")
        country: Country code; ILS-family rows repeat the region
        magnetic_variation: Station declination for VOR/NDB/DME rows
        bearing: True bearing of a localizer, glideslope or marker
        course: Magnetic course (localizer) or approach course (FPAP/GLS/LTP)
        glidepath_angle: Glidepath angle in degrees
        associated_airport: Airport ICAO for ILS-family rows
        associated_runway: Runway designator for ILS-family rows
        length_offset: FPAP length offset in meters
        threshold_crossing_height: LTP/FTP crossing height in feet
        ref_path_id: Approach reference path identifier (LTP/FTP)
        approach_performance: LP, LPV, APV-II or GLS for FPAP rows

    Examples:
        >>> vor = Navaid(
        ...     type=NavaidType.VOR, id="SFO", name="SAN FRANCISCO VOR",
        ...     latitude=37.619, longitude=-122.374, elevation=13,
        ...     frequency=11580, range=40, region="K2", country="US",
        ... )
    """

    type: NavaidType
    id: str
    name: str
    latitude: float
    longitude: float
    elevation: int
    frequency: int
    range: int
    region: str
    country: str
    magnetic_variation: float = 0.0
    bearing: float | None = None
    course: float | None = None
    glidepath_angle: float | None = None
    associated_airport: str | None = None
    associated_runway: str | None = None
    length_offset: float | None = None
    threshold_crossing_height: float | None = None
    ref_path_id: str | None = None
    approach_performance: str | None = None

    def __str__(self) -> str:
        return f"{self.id} ({self.type.value} {self.frequency})"


def decode_localizer_bearing(encoded: float) -> tuple[float, int]:
    """Split a packed localizer column into true bearing and magnetic course.

    The column holds ``magnetic_course * 360 + true_bearing``.

    Args:
        encoded: Raw column value.

    Returns:
        Tuple of (true_bearing, magnetic_course).

    Examples:
        >>> decode_localizer_bearing(44570.211)
        (290.211..., 123)
    """
    magnetic_course = int(encoded // LOCALIZER_COURSE_FACTOR)
    return encoded % LOCALIZER_COURSE_FACTOR, magnetic_course


def encode_localizer_bearing(true_bearing: float, magnetic_course: int) -> float:
    """Inverse of :func:`decode_localizer_bearing`."""
    return magnetic_course * LOCALIZER_COURSE_FACTOR + true_bearing


def decode_glidepath(encoded: float) -> tuple[float, float]:
    """Split a packed glidepath column into angle and bearing.

    The column holds ``angle_hundredths * 100000 + true_bearing``, so
    ``30000044.5`` is a 3.00 degree path on bearing 44.5 while ``300044.5``
    decodes to 0.03 degrees.

    Args:
        encoded: Raw column value.

    Returns:
        Tuple of (angle_degrees, true_bearing).
    """
    angle = int(encoded // GLIDEPATH_ANGLE_FACTOR) / 100
    return angle, encoded % GLIDEPATH_ANGLE_FACTOR


def encode_glidepath(angle_degrees: float, true_bearing: float) -> float:
    """Inverse of :func:`decode_glidepath`."""
    return round(angle_degrees * 100) * GLIDEPATH_ANGLE_FACTOR + true_bearing


def classify_navaid(row_code: NavaidRowCode, name: str) -> NavaidType:
    """Derive the navaid type from its row code and name."""
    if row_code is NavaidRowCode.VOR:
        if "VORTAC" in name or "TACAN" in name:
            return NavaidType.VORTAC
        if "VOR/DME" in name or "VOR-DME" in name:
            return NavaidType.VOR_DME
        return NavaidType.VOR
    if row_code in (NavaidRowCode.DME_STANDALONE, NavaidRowCode.DME_NDB):
        return NavaidType.TACAN if "TACAN" in name else NavaidType.DME
    if row_code is NavaidRowCode.LTP_FTP:
        return NavaidType.FTP if "FTP" in name else NavaidType.LTP
    return _FIXED_TYPES[row_code]


_FIXED_TYPES = {
    NavaidRowCode.NDB: NavaidType.NDB,
    NavaidRowCode.LOC: NavaidType.ILS,
    NavaidRowCode.LOC_STANDALONE: NavaidType.LOC,
    NavaidRowCode.GS: NavaidType.GS,
    NavaidRowCode.OM: NavaidType.OM,
    NavaidRowCode.MM: NavaidType.MM,
    NavaidRowCode.IM: NavaidType.IM,
    NavaidRowCode.FPAP: NavaidType.FPAP,
    NavaidRowCode.GLS: NavaidType.GLS,
}


def _approach_performance(name: str) -> str | None:
    for label in ("LPV", "APV-II", "GLS", "LP"):
        if label in name:
            return label
    return None


def _decode_station(parts: list[str], fields: dict) -> dict | None:
    """Rows 2, 3, 12, 13: VOR, NDB and DME stations."""
    variation = to_float(parts[6])
    if variation is None:
        return None
    fields.update(
        magnetic_variation=variation,
        id=parts[7],
        region=parts[8],
        country=parts[9],
        name=" ".join(parts[10:]),
    )
    return fields


def _decode_approach_common(parts: list[str], fields: dict) -> dict:
    fields.update(
        id=parts[7],
        associated_airport=parts[8],
        region=parts[9],
        country=parts[9],
        associated_runway=parts[10] if len(parts) > 10 else None,
        name=" ".join(parts[11:]),
    )
    return fields


def _decode_localizer(parts: list[str], fields: dict) -> dict | None:
    encoded = to_float(parts[6])
    if encoded is None:
        return None
    fields["bearing"], fields["course"] = decode_localizer_bearing(encoded)
    return _decode_approach_common(parts, fields)


def _decode_glideslope(parts: list[str], fields: dict) -> dict | None:
    encoded = to_float(parts[6])
    if encoded is None:
        return None
    fields["glidepath_angle"], fields["bearing"] = decode_glidepath(encoded)
    return _decode_approach_common(parts, fields)


def _decode_marker(parts: list[str], fields: dict) -> dict | None:
    bearing = to_float(parts[6])
    if bearing is None:
        return None
    fields["bearing"] = bearing
    return _decode_approach_common(parts, fields)


def _decode_fpap(parts: list[str], fields: dict) -> dict | None:
    length_offset, course = to_float(parts[5]), to_float(parts[6])
    if length_offset is None or course is None:
        return None
    fields.update(length_offset=length_offset, course=course)
    _decode_approach_common(parts, fields)
    fields["approach_performance"] = _approach_performance(fields["name"])
    return fields


def _decode_gls(parts: list[str], fields: dict) -> dict | None:
    encoded = to_float(parts[6])
    if encoded is None:
        return None
    fields["glidepath_angle"], fields["course"] = decode_glidepath(encoded)
    return _decode_approach_common(parts, fields)


def _decode_threshold_point(parts: list[str], fields: dict) -> dict | None:
    crossing_height, encoded = to_float(parts[5]), to_float(parts[6])
    if crossing_height is None or encoded is None:
        return None
    fields["threshold_crossing_height"] = crossing_height
    fields["glidepath_angle"], fields["course"] = decode_glidepath(encoded)
    _decode_approach_common(parts, fields)
    ref_path_id = parts[11] if len(parts) > 11 else None
    fields["ref_path_id"] = ref_path_id
    fields["name"] = ref_path_id or "LTP"
    return fields


_ROW_DECODERS = {
    NavaidRowCode.NDB: _decode_station,
    NavaidRowCode.VOR: _decode_station,
    NavaidRowCode.DME_STANDALONE: _decode_station,
    NavaidRowCode.DME_NDB: _decode_station,
    NavaidRowCode.LOC: _decode_localizer,
    NavaidRowCode.LOC_STANDALONE: _decode_localizer,
    NavaidRowCode.GS: _decode_glideslope,
    NavaidRowCode.OM: _decode_marker,
    NavaidRowCode.MM: _decode_marker,
    NavaidRowCode.IM: _decode_marker,
    NavaidRowCode.FPAP: _decode_fpap,
    NavaidRowCode.GLS: _decode_gls,
    NavaidRowCode.LTP_FTP: _decode_threshold_point,
}


def decode_navaid_line(line: str) -> Navaid | None:
    """Decode one navaid row.

    Args:
        line: Stripped data line.

    Returns:
        Navaid, or None for short rows, unknown row codes and
        non-numeric fields.
    """
    parts = line.split()
    if len(parts) < MIN_NAVAID_TOKENS:
        return None

    try:
        row_code = NavaidRowCode(to_int(parts[0]))
    except ValueError:
        return None

    latitude, longitude = to_float(parts[1]), to_float(parts[2])
    elevation, frequency, range_nm = to_int(parts[3]), to_int(parts[4]), to_int(parts[5])
    if latitude is None or longitude is None or elevation is None or frequency is None:
        return None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        return None

    fields = {
        "latitude": latitude,
        "longitude": longitude,
        "elevation": elevation,
        "frequency": frequency,
        "range": range_nm or 0,
    }
    decoded = _ROW_DECODERS[row_code](parts, fields)
    if decoded is None:
        return None

    return Navaid(type=classify_navaid(row_code, decoded["name"]), **decoded)


def parse_navaids(text: str) -> ParseResult[Navaid]:
    """Decode the whole navaid table.

    The first two physical lines are the file preamble. Malformed rows are
    dropped and counted as skipped.

    Args:
        text: Content of earth_nav.dat.

    Returns:
        Navaids in file order with pass statistics.
    """
    result = parse_lines(text, decode_navaid_line, FixedHeaderPolicy(2))
    logger.debug(
        "Decoded %d navaids (%d lines skipped) in %.1f ms",
        result.stats.parsed,
        result.stats.skipped,
        result.stats.elapsed_ms,
    )
    return result
