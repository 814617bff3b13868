"""Decoder and lookups for minimum sector altitudes (earth_msa.dat).

A fix publishes one or more sectors, each bounded by two bearings *from*
the fix and a radius. Sectors may wrap through north (e.g., 270 to 090).
"""

import logging
from dataclasses import dataclass

from xpnav.geo import normalize_bearing
from xpnav.parsers.base import ParseResult, parse_lines, to_float, to_int

logger = logging.getLogger(__name__)

MIN_MSA_TOKENS = 6


@dataclass
class MSASector:
    """One sector of a minimum sector altitude diagram.

    Attributes:
        fix_id: Reference fix identifier
        fix_region: Region of the reference fix
        bearing_start: Sector start bearing in degrees
        bearing_end: Sector end bearing in degrees
        radius: Sector radius in nautical miles
        altitude: Minimum altitude in feet
    """

    fix_id: str
    fix_region: str
    bearing_start: float
    bearing_end: float
    radius: float
    altitude: int

    def contains_bearing(self, bearing: float) -> bool:
        """Return True if ``bearing`` falls in [start, end), wrapping through north."""
        bearing = normalize_bearing(bearing)
        if self.bearing_start > self.bearing_end:
            return bearing >= self.bearing_start or bearing < self.bearing_end
        return self.bearing_start <= bearing < self.bearing_end


def decode_msa_line(line: str) -> MSASector | None:
    """Decode ``fix region start end radius altitude``; extra columns are ignored."""
    parts = line.split()
    if len(parts) < MIN_MSA_TOKENS:
        return None

    start, end, radius = to_float(parts[2]), to_float(parts[3]), to_float(parts[4])
    altitude = to_int(parts[5])
    if start is None or end is None or radius is None or altitude is None:
        return None

    return MSASector(
        fix_id=parts[0],
        fix_region=parts[1],
        bearing_start=start,
        bearing_end=end,
        radius=radius,
        altitude=altitude,
    )


def parse_msa(text: str) -> ParseResult[MSASector]:
    """Decode the minimum sector altitude table.

    Args:
        text: Content of earth_msa.dat.

    Returns:
        Sectors in file order with pass statistics.
    """
    return parse_lines(text, decode_msa_line)


def sectors_for_fix(sectors: list[MSASector], fix_id: str, region: str | None = None) -> list[MSASector]:
    """Sectors published for a fix, optionally narrowed to one region (case-insensitive)."""
    fix_id = fix_id.upper()
    region = region.upper() if region else None
    return [
        s
        for s in sectors
        if s.fix_id.upper() == fix_id and (region is None or s.fix_region.upper() == region)
    ]


def msa_at_bearing(sectors: list[MSASector], fix_id: str, bearing: float) -> MSASector | None:
    """Sector of ``fix_id`` covering ``bearing`` from the fix.

    Examples:
        >>> sector = msa_at_bearing(sectors, "IAD", 355)
        >>> sector.altitude if sector else None
        3000
    """
    for sector in sectors_for_fix(sectors, fix_id):
        if sector.contains_bearing(bearing):
            return sector
    return None


def max_msa(sectors: list[MSASector], fix_id: str) -> int | None:
    """Highest sector altitude of a fix, None when it publishes none."""
    altitudes = [s.altitude for s in sectors_for_fix(sectors, fix_id)]
    return max(altitudes) if altitudes else None


def msa_fix_ids(sectors: list[MSASector]) -> list[str]:
    return sorted({s.fix_id.upper() for s in sectors})
