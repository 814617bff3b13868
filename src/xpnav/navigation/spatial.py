"""Radius queries over in-memory navigation sets.

Every query is a linear scan: a bounding-box pre-check followed by the exact
haversine distance. A point exactly ``radius_nm`` away is inside. Results
keep the order of the input set.

Typical usage example:
    from xpnav.navigation.spatial import navaids_in_radius, NavaidFamily

    vors = navaids_in_radius(navaids, 40.64, -73.78, 50, NavaidFamily.VOR)
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, TypeVar

from xpnav.geo import haversine_nm, in_bounding_box
from xpnav.parsers.airspaces import Airspace
from xpnav.parsers.airways import AirwaySegment
from xpnav.parsers.navaids import Navaid, NavaidType
from xpnav.parsers.waypoints import Waypoint


class Located(Protocol):
    latitude: float
    longitude: float


L = TypeVar("L", bound=Located)


class NavaidFamily(Enum):
    """Groups of navaid types queried together."""

    VOR = frozenset({NavaidType.VOR, NavaidType.VORTAC, NavaidType.VOR_DME})
    NDB = frozenset({NavaidType.NDB})
    DME = frozenset({NavaidType.DME, NavaidType.TACAN})
    ILS = frozenset({NavaidType.ILS, NavaidType.LOC})
    GLIDESLOPE = frozenset({NavaidType.GS})
    MARKER = frozenset({NavaidType.OM, NavaidType.MM, NavaidType.IM})
    ILS_COMPONENTS = frozenset(
        {NavaidType.ILS, NavaidType.LOC, NavaidType.GS, NavaidType.OM, NavaidType.MM, NavaidType.IM}
    )
    APPROACH_AIDS = frozenset({NavaidType.FPAP, NavaidType.GLS, NavaidType.LTP, NavaidType.FTP})


APPROACH_NAVAID_TYPES = NavaidFamily.ILS_COMPONENTS.value | NavaidFamily.APPROACH_AIDS.value


def is_within_radius(lat: float, lon: float, center_lat: float, center_lon: float, radius_nm: float) -> bool:
    """Two-stage membership test: bounding box, then haversine distance."""
    if not in_bounding_box(lat, lon, center_lat, center_lon, radius_nm):
        return False
    return haversine_nm(center_lat, center_lon, lat, lon) <= radius_nm


def within_radius(items: Iterable[L], lat: float, lon: float, radius_nm: float) -> list[L]:
    """Items whose position lies within ``radius_nm`` of (lat, lon).

    Args:
        items: Anything with ``latitude`` and ``longitude`` attributes.
        lat: Center latitude.
        lon: Center longitude.
        radius_nm: Radius in nautical miles, boundary inclusive.

    Returns:
        Matching items in input order.
    """
    return [item for item in items if is_within_radius(item.latitude, item.longitude, lat, lon, radius_nm)]


def navaids_in_radius(
    navaids: Sequence[Navaid],
    lat: float,
    lon: float,
    radius_nm: float,
    types: NavaidFamily | Iterable[NavaidType] | None = None,
) -> list[Navaid]:
    """Navaids within radius, optionally restricted to some types.

    Examples:
        >>> navaids_in_radius(navaids, 37.6, -122.4, 40, NavaidFamily.VOR)
        >>> navaids_in_radius(navaids, 37.6, -122.4, 40, [NavaidType.NDB])
    """
    if types is None:
        candidates: Iterable[Navaid] = navaids
    else:
        wanted = types.value if isinstance(types, NavaidFamily) else frozenset(types)
        candidates = (n for n in navaids if n.type in wanted)
    return within_radius(candidates, lat, lon, radius_nm)


def waypoints_in_radius(waypoints: Sequence[Waypoint], lat: float, lon: float, radius_nm: float) -> list[Waypoint]:
    return within_radius(waypoints, lat, lon, radius_nm)


def airspaces_near_point(airspaces: Sequence[Airspace], lat: float, lon: float, radius_nm: float = 50.0) -> list[Airspace]:
    """Airspaces with at least one vertex inside a square of ``radius_nm / 60`` degrees."""
    degrees = radius_nm / 60.0
    return [
        a
        for a in airspaces
        if any(abs(v_lat - lat) <= degrees and abs(v_lon - lon) <= degrees for v_lon, v_lat in a.coordinates)
    ]


def approach_navaids(navaids: Sequence[Navaid], airport: str, runway: str | None = None) -> list[Navaid]:
    """ILS-family and approach-path navaids serving an airport (and optionally one runway)."""
    return [
        n
        for n in navaids
        if n.type in APPROACH_NAVAID_TYPES
        and n.associated_airport == airport
        and (runway is None or n.associated_runway == runway)
    ]


@dataclass
class AirwaySegmentWithCoords:
    """Airway segment with both endpoints placed.

    Attributes:
        name: Airway designator
        from_fix: Start fix identifier
        to_fix: End fix identifier
        from_lat: Start latitude
        from_lon: Start longitude
        to_lat: End latitude
        to_lon: End longitude
        is_high: High-altitude airway flag
        base_fl: Lowest flight level
        top_fl: Highest flight level
    """

    name: str
    from_fix: str
    to_fix: str
    from_lat: float
    from_lon: float
    to_lat: float
    to_lon: float
    is_high: bool
    base_fl: int
    top_fl: int


class FixIndex:
    """Coordinate lookup for airway endpoints.

    Keys are ``ID:REGION`` and bare ``ID``. For ``ID:REGION`` a navaid
    replaces a waypoint; for a bare ``ID`` the first fix seen wins.
    """

    def __init__(self, waypoints: Iterable[Waypoint], navaids: Iterable[Navaid]) -> None:
        self._coords: dict[str, tuple[float, float]] = {}
        for fix in (*waypoints, *navaids):
            position = (fix.latitude, fix.longitude)
            self._coords[f"{fix.id}:{fix.region}"] = position
            self._coords.setdefault(fix.id, position)

    def lookup(self, fix_id: str, region: str) -> tuple[float, float] | None:
        return self._coords.get(f"{fix_id}:{region}") or self._coords.get(fix_id)

    def __len__(self) -> int:
        return len(self._coords)


def place_airways(
    segments: Iterable[AirwaySegment],
    fixes: FixIndex,
    limit: int,
    center: tuple[float, float] | None = None,
    radius_nm: float = 0.0,
) -> list[AirwaySegmentWithCoords]:
    """Resolve airway endpoints, optionally keeping only segments near a point.

    Segments with an endpoint that cannot be placed are dropped. With a
    center, a segment is kept when either endpoint is within ``radius_nm``.

    Args:
        segments: Airway segments.
        fixes: Endpoint lookup.
        limit: Maximum number of segments returned.
        center: Optional (lat, lon) filter center.
        radius_nm: Filter radius.

    Returns:
        Placed segments in input order, at most ``limit``.
    """
    results: list[AirwaySegmentWithCoords] = []

    for segment in segments:
        if len(results) >= limit:
            break

        start = fixes.lookup(segment.from_fix, segment.from_region)
        end = fixes.lookup(segment.to_fix, segment.to_region)
        if start is None or end is None:
            continue

        if center is not None and not (
            is_within_radius(start[0], start[1], center[0], center[1], radius_nm)
            or is_within_radius(end[0], end[1], center[0], center[1], radius_nm)
        ):
            continue

        results.append(
            AirwaySegmentWithCoords(
                name=segment.name,
                from_fix=segment.from_fix,
                to_fix=segment.to_fix,
                from_lat=start[0],
                from_lon=start[1],
                to_lat=end[0],
                to_lon=end[1],
                is_high=segment.is_high,
                base_fl=segment.base_fl,
                top_fl=segment.top_fl,
            )
        )

    return results
