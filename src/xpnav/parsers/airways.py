"""Decoder for the airway table (earth_awy.dat).

Each row is one segment between two fixes. Segments are kept independent;
nothing chains them into complete airways.

Row layout::

    ABCDE K2 11 FGHIJ K2 11 F 1 180 450 J60
    from  rg ty to    rg ty H d base top name
"""

import logging
from dataclasses import dataclass

from xpnav.parsers.base import FixedHeaderPolicy, ParseResult, parse_lines, to_int

logger = logging.getLogger(__name__)

MIN_AIRWAY_TOKENS = 11
HIGH_AIRWAY_FLAG = "F"


@dataclass
class AirwaySegment:
    """One directed airway segment.

    Attributes:
        name: Airway designator (e.g., "J60"); hyphen-joined when shared
        from_fix: Start fix identifier
        from_region: Start fix region
        from_navaid_type: Start fix type code (11 fix, 2 NDB, 3 VHF)
        to_fix: End fix identifier
        to_region: End fix region
        to_navaid_type: End fix type code
        is_high: True for high-altitude (jet) airways
        direction: Raw direction restriction code
        base_fl: Lowest usable flight level
        top_fl: Highest usable flight level
    """

    name: str
    from_fix: str
    from_region: str
    from_navaid_type: int
    to_fix: str
    to_region: str
    to_navaid_type: int
    is_high: bool
    direction: int
    base_fl: int
    top_fl: int


def decode_airway_line(line: str) -> AirwaySegment | None:
    parts = line.split()
    if len(parts) < MIN_AIRWAY_TOKENS:
        return None

    numbers = [to_int(parts[i]) for i in (2, 5, 7, 8, 9)]
    if any(n is None for n in numbers):
        return None
    from_type, to_type, direction, base_fl, top_fl = numbers

    return AirwaySegment(
        name=parts[10],
        from_fix=parts[0],
        from_region=parts[1],
        from_navaid_type=from_type,
        to_fix=parts[3],
        to_region=parts[4],
        to_navaid_type=to_type,
        is_high=parts[6] == HIGH_AIRWAY_FLAG,
        direction=direction,
        base_fl=base_fl,
        top_fl=top_fl,
    )


def parse_airways(text: str) -> ParseResult[AirwaySegment]:
    """Decode the whole airway table, skipping its two-line preamble."""
    result = parse_lines(text, decode_airway_line, FixedHeaderPolicy(2))
    logger.debug("Decoded %d airway segments (%d lines skipped)", result.stats.parsed, result.stats.skipped)
    return result
