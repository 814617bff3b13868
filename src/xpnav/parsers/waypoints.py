"""Decoder for the fix table (earth_fix.dat)."""

import logging
from dataclasses import dataclass

from xpnav.parsers.base import FixedHeaderPolicy, ParseResult, parse_lines, to_float

logger = logging.getLogger(__name__)

MIN_WAYPOINT_TOKENS = 5


@dataclass
class Waypoint:
    """Named enroute or terminal fix.

    Attributes:
        id: Fix identifier (e.g., "MERIT")
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees
        region: ICAO region code, or "ENRT" for enroute fixes
        area_code: Terminal area (airport ICAO) or "ENRT"
        description: Free-text remainder of the row
    """

    id: str
    latitude: float
    longitude: float
    region: str
    area_code: str
    description: str = ""


def decode_waypoint_line(line: str) -> Waypoint | None:
    """Decode ``lat lon id region area [description...]``."""
    parts = line.split()
    if len(parts) < MIN_WAYPOINT_TOKENS:
        return None

    latitude, longitude = to_float(parts[0]), to_float(parts[1])
    if latitude is None or longitude is None:
        return None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        return None

    return Waypoint(
        id=parts[2],
        latitude=latitude,
        longitude=longitude,
        region=parts[3],
        area_code=parts[4],
        description=" ".join(parts[5:]),
    )


def parse_waypoints(text: str) -> ParseResult[Waypoint]:
    """Decode the whole fix table, skipping its two-line preamble."""
    result = parse_lines(text, decode_waypoint_line, FixedHeaderPolicy(2))
    logger.debug("Decoded %d waypoints (%d lines skipped)", result.stats.parsed, result.stats.skipped)
    return result
