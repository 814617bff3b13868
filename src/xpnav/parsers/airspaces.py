"""Decoder for OpenAir airspace boundaries (airspaces/airspace.txt).

Only polygon geometry is read. Each ``AC`` record opens an airspace, ``AN``,
``AH`` and ``AL`` set its name and limits, and ``DP`` adds a vertex.
Arc and circle commands (``DC``, ``DA``, ``DB``, ``V``) are recognized and
ignored, so an airspace described only by arcs or a circle has no vertices
and is dropped.

Typical usage example:
    result = parse_airspaces(Path("airspace.txt").read_text())
    for airspace in result.items:
        print(airspace.airspace_class, airspace.name, len(airspace.coordinates))
"""

import logging
import re
from dataclasses import dataclass, field

from xpnav.parsers.base import ParseResult, Stopwatch

logger = logging.getLogger(__name__)

AIRSPACE_CLASSES = frozenset({"A", "B", "C", "D", "E", "F", "G", "CTR", "TMA", "R", "P", "Q", "W", "GP"})
OTHER_CLASS = "OTHER"
IGNORED_COMMANDS = frozenset({"DC", "DA", "DB", "V ", "V="})
MIN_RING_VERTICES = 3

_POINT_RE = re.compile(r"(\d+:\d+:\d+(?:\.\d+)?\s+[NS])\s+(\d+:\d+:\d+(?:\.\d+)?\s+[EW])", re.IGNORECASE)


@dataclass
class Airspace:
    """Airspace boundary polygon.

    Attributes:
        airspace_class: Normalized class (A-G, CTR, TMA, R, P, Q, W, GP or OTHER)
        name: Airspace name, "Unknown" when absent
        upper_limit: Raw upper limit text (e.g., "FL245"), "UNL" when absent
        lower_limit: Raw lower limit text (e.g., "1500 MSL"), "GND" when absent
        coordinates: Closed ring of (longitude, latitude) pairs
    """

    airspace_class: str
    name: str = "Unknown"
    upper_limit: str = "UNL"
    lower_limit: str = "GND"
    coordinates: list[tuple[float, float]] = field(default_factory=list)


def normalize_airspace_class(raw: str) -> str:
    """Map an ``AC`` argument onto the known classes."""
    value = raw.strip().upper()
    return value if value in AIRSPACE_CLASSES else OTHER_CLASS


def parse_dms(text: str) -> float | None:
    """Convert ``dd:mm:ss H`` to signed decimal degrees.

    Examples:
        >>> parse_dms("40:30:00 S")
        -40.5
    """
    parts = text.split()
    if len(parts) != 2:
        return None

    pieces = parts[0].split(":")
    if len(pieces) != 3:
        return None

    try:
        degrees, minutes, seconds = int(pieces[0]), int(pieces[1]), float(pieces[2])
    except ValueError:
        return None

    value = degrees + minutes / 60 + seconds / 3600
    if parts[1].upper() in ("S", "W"):
        value = -value
    return value


def parse_point(line: str) -> tuple[float, float] | None:
    """Decode a ``DP`` line into a (longitude, latitude) pair."""
    match = _POINT_RE.search(line[2:])
    if not match:
        return None

    lat, lon = parse_dms(match.group(1)), parse_dms(match.group(2))
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lon, lat


def close_ring(points: list[tuple[float, float]]) -> list[tuple[float, float]] | None:
    """Return a closed copy of ``points``, or None if it is degenerate.

    A ring needs at least three distinct vertices.
    """
    if len(set(points)) < MIN_RING_VERTICES:
        return None

    ring = list(points)
    if ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def parse_airspaces(text: str) -> ParseResult[Airspace]:
    """Decode an OpenAir file.

    Args:
        text: File content.

    Returns:
        Airspaces with closed rings. ``stats.skipped`` counts airspace
        records dropped for lack of geometry.
    """
    watch = Stopwatch()
    result: ParseResult[Airspace] = ParseResult()
    current: Airspace | None = None
    points: list[tuple[float, float]] = []

    def flush() -> None:
        if current is None:
            return
        ring = close_ring(points)
        if ring is None:
            result.stats.skipped += 1
            logger.debug("Dropping airspace %s: %d usable vertices", current.name, len(set(points)))
            return
        current.coordinates = ring
        result.items.append(current)
        result.stats.parsed += 1

    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("*"):
            continue

        result.stats.total_lines += 1
        command = line[:2].upper()

        if command == "AC":
            flush()
            current = Airspace(airspace_class=normalize_airspace_class(line[2:]))
            points = []
        elif current is None or command in IGNORED_COMMANDS:
            continue
        elif command == "AN":
            current.name = line[2:].strip() or current.name
        elif command == "AH":
            current.upper_limit = line[2:].strip() or current.upper_limit
        elif command == "AL":
            current.lower_limit = line[2:].strip() or current.lower_limit
        elif command == "DP":
            point = parse_point(line)
            if point is not None:
                points.append(point)

    flush()

    result.stats.elapsed_ms = watch.elapsed_ms()
    logger.debug("Decoded %d airspaces (%d dropped)", result.stats.parsed, result.stats.skipped)
    return result
