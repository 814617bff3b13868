"""Decoder for airport metadata (earth_aptmeta.dat).

Row layout::

    OTHH OT 25.274563889 51.608377778 13 C 15900 I 13000 FL150
    icao rg latitude     longitude    el cl rwy  ifr ta  tl
"""

import logging
from dataclasses import dataclass

from xpnav.parsers.base import ParseResult, parse_lines, to_float, to_int

logger = logging.getLogger(__name__)

MIN_META_TOKENS = 10
DEFAULT_TRANSITION_ALTITUDE = 18000
DEFAULT_TRANSITION_LEVEL = "FL180"


@dataclass
class AirportMetadata:
    """Published airport facts used by procedures and altimetry.

    Attributes:
        icao: Airport ICAO code, uppercase
        region: ICAO region code
        latitude: Reference point latitude
        longitude: Reference point longitude
        elevation: Elevation in feet
        airport_class: "C" civil or "P" private/military
        longest_runway: Longest runway length in feet
        ifr_capable: True when instrument procedures are published
        transition_altitude: Transition altitude in feet
        transition_level: Transition level label (e.g., "FL180")
    """

    icao: str
    region: str
    latitude: float
    longitude: float
    elevation: int
    airport_class: str
    longest_runway: int
    ifr_capable: bool
    transition_altitude: int
    transition_level: str


def decode_meta_line(line: str) -> AirportMetadata | None:
    parts = line.split()
    if len(parts) < MIN_META_TOKENS:
        return None

    icao = parts[0].upper()
    latitude, longitude = to_float(parts[2]), to_float(parts[3])
    elevation = to_int(parts[4])
    if not 3 <= len(icao) <= 4 or latitude is None or longitude is None or elevation is None:
        return None
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        return None

    airport_class = parts[5].upper()
    return AirportMetadata(
        icao=icao,
        region=parts[1],
        latitude=latitude,
        longitude=longitude,
        elevation=elevation,
        airport_class=airport_class if airport_class in ("C", "P") else "C",
        longest_runway=max(to_int(parts[6]) or 0, 0),
        ifr_capable=parts[7].upper() == "I",
        transition_altitude=to_int(parts[8]) or DEFAULT_TRANSITION_ALTITUDE,
        transition_level=parts[9] or DEFAULT_TRANSITION_LEVEL,
    )


def parse_airport_metadata(text: str) -> tuple[dict[str, AirportMetadata], ParseResult[AirportMetadata]]:
    """Decode the metadata table.

    Args:
        text: File content.

    Returns:
        Tuple of (records keyed by ICAO, raw parse result). When an ICAO
        appears twice the later row wins.
    """
    result = parse_lines(text, decode_meta_line)
    by_icao = {meta.icao: meta for meta in result.items}
    logger.debug("Decoded metadata for %d airports", len(by_icao))
    return by_icao, result
