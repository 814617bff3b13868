"""Decoder for published holding patterns (earth_hold.dat)."""

import logging
from dataclasses import dataclass

from xpnav.parsers.base import ParseResult, parse_lines, to_float, to_int

logger = logging.getLogger(__name__)

MIN_HOLD_TOKENS = 10
ENROUTE = "ENRT"


@dataclass
class HoldingPattern:
    """Holding pattern anchored on a fix.

    Attributes:
        fix_id: Holding fix identifier
        fix_region: Region of the holding fix
        airport: Terminal area ICAO, or "ENRT" for enroute holds
        fix_type: Fix type code (11 fix, 2 NDB, 3 VHF)
        inbound_course: Inbound magnetic course in degrees
        leg_time: Outbound leg time in minutes
        leg_distance: Outbound leg length in nautical miles, 0 when timed
        turn_direction: "L" or "R"
        min_altitude: Lowest holding altitude in feet
        max_altitude: Highest holding altitude in feet
        speed: Speed limit in knots, 0 when none
    """

    fix_id: str
    fix_region: str
    airport: str
    fix_type: int
    inbound_course: float
    leg_time: float
    leg_distance: float
    turn_direction: str
    min_altitude: int
    max_altitude: int
    speed: int

    @property
    def is_enroute(self) -> bool:
        return self.airport == ENROUTE


def decode_hold_line(line: str) -> HoldingPattern | None:
    """Decode ``fix region airport type course time dist turn min max [speed]``."""
    parts = line.split()
    if len(parts) < MIN_HOLD_TOKENS:
        return None

    fix_type = to_int(parts[3])
    inbound_course = to_float(parts[4])
    turn = parts[7].upper()
    if fix_type is None or inbound_course is None or turn not in ("L", "R"):
        return None
    if not 0.0 <= inbound_course <= 360.0:
        return None

    return HoldingPattern(
        fix_id=parts[0],
        fix_region=parts[1],
        airport=parts[2],
        fix_type=fix_type,
        inbound_course=inbound_course,
        leg_time=to_float(parts[5]) or 1.0,
        leg_distance=to_float(parts[6]) or 0.0,
        turn_direction=turn,
        min_altitude=to_int(parts[8]) or 0,
        max_altitude=to_int(parts[9]) or 99999,
        speed=(to_int(parts[10]) or 0) if len(parts) > 10 else 0,
    )


def parse_holding_patterns(text: str) -> ParseResult[HoldingPattern]:
    """Decode the holding pattern table.

    Args:
        text: Content of earth_hold.dat.

    Returns:
        Holds in file order. Rows with a bad turn direction or an inbound
        course outside 0-360 are counted as skipped.
    """
    result = parse_lines(text, decode_hold_line)
    logger.debug("Decoded %d holding patterns (%d lines skipped)", result.stats.parsed, result.stats.skipped)
    return result
