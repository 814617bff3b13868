"""Decoder and lookups for grid minimum off-route altitudes (earth_mora.dat).

Two row layouts are accepted:

* explicit cell, exactly five columns: ``lat_min lon_min lat_max lon_max altitude``
* one row per latitude band: ``lat alt1 alt2 ...`` where column *i* (1-based)
  is the one-degree cell starting at longitude ``-180 + (i - 1)`` and the
  altitude is in hundreds of feet. Non-positive altitudes mean no value.
"""

import logging
from dataclasses import dataclass

from xpnav.parsers.base import DataLineReader, ParseResult, Stopwatch, to_float, to_int

logger = logging.getLogger(__name__)

EXPLICIT_CELL_TOKENS = 5
CELL_SIZE_DEG = 1.0
ROW_ALTITUDE_UNIT_FT = 100


@dataclass
class MORACell:
    """Grid cell with its minimum off-route altitude.

    Attributes:
        lat_min: Southern edge
        lat_max: Northern edge
        lon_min: Western edge
        lon_max: Eastern edge
        altitude: Altitude in feet
    """

    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    altitude: int

    def contains(self, lat: float, lon: float) -> bool:
        """Half-open containment: south and west edges inclusive."""
        return self.lat_min <= lat < self.lat_max and self.lon_min <= lon < self.lon_max


def _decode_explicit_cell(parts: list[str]) -> MORACell | None:
    if len(parts) != EXPLICIT_CELL_TOKENS:
        return None

    lat_min, lon_min, lat_max, lon_max = (to_float(p) for p in parts[:4])
    altitude = to_int(parts[4])
    if None in (lat_min, lon_min, lat_max, lon_max, altitude):
        return None
    if lat_max <= lat_min or lon_max <= lon_min:
        return None

    return MORACell(lat_min=lat_min, lat_max=lat_max, lon_min=lon_min, lon_max=lon_max, altitude=altitude)


def _decode_latitude_row(parts: list[str]) -> list[MORACell]:
    lat = to_float(parts[0])
    if lat is None or len(parts) < 2:
        return []

    cells = []
    for column, token in enumerate(parts[1:], start=1):
        altitude = to_int(token)
        if altitude is None or altitude <= 0:
            continue
        lon_min = -180.0 + (column - 1)
        cells.append(
            MORACell(
                lat_min=lat,
                lat_max=lat + CELL_SIZE_DEG,
                lon_min=lon_min,
                lon_max=lon_min + CELL_SIZE_DEG,
                altitude=altitude * ROW_ALTITUDE_UNIT_FT,
            )
        )
    return cells


def parse_mora(text: str) -> ParseResult[MORACell]:
    """Decode the MORA grid.

    Returns:
        Cells in file order. A latitude row yields one cell per populated
        column; ``stats.skipped`` counts rows that yielded nothing.
    """
    watch = Stopwatch()
    result: ParseResult[MORACell] = ParseResult()

    for line in DataLineReader(text):
        result.stats.total_lines += 1
        parts = line.split()

        cell = _decode_explicit_cell(parts)
        cells = [cell] if cell is not None else _decode_latitude_row(parts)
        if not cells:
            result.stats.skipped += 1
            continue

        result.items.extend(cells)
        result.stats.parsed += 1

    result.stats.elapsed_ms = watch.elapsed_ms()
    logger.debug("Decoded %d MORA cells from %d rows", len(result.items), result.stats.parsed)
    return result


def mora_at_point(cells: list[MORACell], lat: float, lon: float) -> int | None:
    """Altitude of the first cell containing the point."""
    for cell in cells:
        if cell.contains(lat, lon):
            return cell.altitude
    return None


def cells_in_bounds(
    cells: list[MORACell], min_lat: float, max_lat: float, min_lon: float, max_lon: float
) -> list[MORACell]:
    """Cells overlapping or touching the given box."""
    return [
        c
        for c in cells
        if c.lat_max >= min_lat and c.lat_min <= max_lat and c.lon_max >= min_lon and c.lon_min <= max_lon
    ]


def max_mora_along_route(
    cells: list[MORACell],
    from_lat: float,
    from_lon: float,
    to_lat: float,
    to_lon: float,
    sample_points: int = 10,
) -> int | None:
    """Highest MORA sampled at evenly spaced points on a straight (rhumb) leg.

    Args:
        cells: MORA grid.
        from_lat: Leg start latitude.
        from_lon: Leg start longitude.
        to_lat: Leg end latitude.
        to_lon: Leg end longitude.
        sample_points: Number of intervals; endpoints are always sampled.

    Returns:
        Highest altitude in feet, None if no sample falls inside the grid.
    """
    highest = None
    for i in range(sample_points + 1):
        t = i / sample_points
        altitude = mora_at_point(cells, from_lat + (to_lat - from_lat) * t, from_lon + (to_lon - from_lon) * t)
        if altitude is not None and (highest is None or altitude > highest):
            highest = altitude
    return highest
