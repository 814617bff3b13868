"""Places procedure legs on the map.

Procedure legs name their fix by identifier, region and a fix-type letter.
Identifiers are not unique worldwide, so the resolver prefers an exact
``ID:REGION`` match and only falls back to the nearest same-named fix when
that fix lies within a distance ceiling of the procedure's airport.

Resolution order for one leg:

1. Runway pseudo-fixes (``RW09``, ``RW27L``) are never resolved.
2. Fix type ``V``, ``N`` or ``D``: exact navaid match.
3. Exact waypoint match.
4. Exact navaid match.
5. Nearest same-named navaid within the ceiling, then nearest same-named
   waypoint within the ceiling.

Typical usage example:
    resolver = ProcedureCoordResolver(waypoints, navaids, reference=(40.64, -73.78))
    resolved = resolve_procedures(parse_cifp(text, "KJFK"), resolver)
    print(resolution_stats(resolved).rate)
"""

import logging
import re
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from xpnav.geo import haversine_nm
from xpnav.parsers.cifp import AirportProcedures, Procedure, ProcedureType, ProcedureWaypoint
from xpnav.parsers.navaids import Navaid
from xpnav.parsers.waypoints import Waypoint

logger = logging.getLogger(__name__)

DEFAULT_MAX_FALLBACK_DISTANCE_NM = 500.0
NAVAID_FIX_TYPES = frozenset({"V", "N", "D"})
RUNWAY_FIX_RE = re.compile(r"^RW\d{2}[LRC]?$")


def is_runway_fix(fix_id: str) -> bool:
    """Return True for runway threshold pseudo-fixes such as RW04R."""
    return RUNWAY_FIX_RE.match(fix_id.upper()) is not None


def fix_key(fix_id: str, region: str) -> str:
    return f"{fix_id.upper()}:{region.upper()}"


@dataclass
class ResolvedProcedureWaypoint:
    """A procedure leg with its fix placed, when possible.

    Attributes:
        waypoint: The decoded leg
        latitude: Fix latitude, None when unresolved
        longitude: Fix longitude, None when unresolved
        resolved: True when a coordinate was found
    """

    waypoint: ProcedureWaypoint
    latitude: float | None = None
    longitude: float | None = None
    resolved: bool = False

    @property
    def fix_id(self) -> str:
        return self.waypoint.fix_id

    @property
    def fix_region(self) -> str:
        return self.waypoint.fix_region


@dataclass
class ResolvedProcedure:
    type: ProcedureType
    name: str
    runway: str | None
    transition: str | None
    waypoints: list[ResolvedProcedureWaypoint] = field(default_factory=list)


@dataclass
class ResolvedAirportProcedures:
    icao: str
    sids: list[ResolvedProcedure] = field(default_factory=list)
    stars: list[ResolvedProcedure] = field(default_factory=list)
    approaches: list[ResolvedProcedure] = field(default_factory=list)

    def all(self) -> list[ResolvedProcedure]:
        return self.sids + self.stars + self.approaches


@dataclass
class ResolutionStats:
    """Counts of placed and unplaced legs.

    Attributes:
        total: Legs examined
        resolved: Legs with a coordinate
        unresolved: Legs without one
        rate: resolved / total, 0.0 when there are no legs
    """

    total: int = 0
    resolved: int = 0
    unresolved: int = 0

    @property
    def rate(self) -> float:
        return self.resolved / self.total if self.total else 0.0


class ProcedureCoordResolver:
    """Resolves fix references to coordinates.

    Args:
        waypoints: Every known waypoint.
        navaids: Every known navaid.
        reference: (lat, lon) of the procedure's airport. Without it the
            nearest-candidate fallback is disabled.
        max_fallback_distance_nm: Ceiling for the fallback, inclusive.

    Examples:
        >>> resolver = ProcedureCoordResolver(waypoints, navaids, reference=(40.64, -73.78))
        >>> resolver.resolve("CAMRN", "K6", "E")
        (40.64166667, -73.825)
        >>> resolver.resolve("RW04L", "K6", "G") is None
        True
    """

    def __init__(
        self,
        waypoints: Iterable[Waypoint],
        navaids: Iterable[Navaid],
        reference: tuple[float, float] | None = None,
        max_fallback_distance_nm: float = DEFAULT_MAX_FALLBACK_DISTANCE_NM,
    ) -> None:
        self.reference = reference
        self.max_fallback_distance_nm = max_fallback_distance_nm

        self._waypoint_by_key: dict[str, Waypoint] = {}
        self._waypoints_by_id: dict[str, list[Waypoint]] = defaultdict(list)
        for wp in waypoints:
            self._waypoint_by_key[fix_key(wp.id, wp.region)] = wp
            self._waypoints_by_id[wp.id.upper()].append(wp)

        self._navaid_by_key: dict[str, Navaid] = {}
        self._navaids_by_id: dict[str, list[Navaid]] = defaultdict(list)
        for nav in navaids:
            self._navaid_by_key[fix_key(nav.id, nav.region)] = nav
            self._navaids_by_id[nav.id.upper()].append(nav)

    def resolve(self, fix_id: str, region: str, fix_type: str = "") -> tuple[float, float] | None:
        """Return (lat, lon) for a fix reference, or None.

        Args:
            fix_id: Fix identifier.
            region: ICAO region code.
            fix_type: Fix-type letter from the procedure leg.
        """
        if is_runway_fix(fix_id):
            return None

        key = fix_key(fix_id, region)

        if fix_type.upper() in NAVAID_FIX_TYPES:
            navaid = self._navaid_by_key.get(key)
            if navaid is not None:
                return navaid.latitude, navaid.longitude

        waypoint = self._waypoint_by_key.get(key)
        if waypoint is not None:
            return waypoint.latitude, waypoint.longitude

        navaid = self._navaid_by_key.get(key)
        if navaid is not None:
            return navaid.latitude, navaid.longitude

        upper_id = fix_id.upper()
        nearest = self._nearest(self._navaids_by_id.get(upper_id, ()))
        if nearest is None:
            nearest = self._nearest(self._waypoints_by_id.get(upper_id, ()))
        if nearest is not None:
            logger.debug("Resolved %s by proximity (no exact %s match)", upper_id, key)
        return nearest

    def _nearest(self, candidates: Iterable[Waypoint | Navaid]) -> tuple[float, float] | None:
        if self.reference is None:
            return None

        ref_lat, ref_lon = self.reference
        best: tuple[float, float] | None = None
        best_distance = float("inf")

        for candidate in candidates:
            distance = haversine_nm(ref_lat, ref_lon, candidate.latitude, candidate.longitude)
            if distance <= self.max_fallback_distance_nm and distance < best_distance:
                best = (candidate.latitude, candidate.longitude)
                best_distance = distance

        return best

    def resolve_waypoint(self, waypoint: ProcedureWaypoint) -> ResolvedProcedureWaypoint:
        coords = self.resolve(waypoint.fix_id, waypoint.fix_region, waypoint.fix_type)
        if coords is None:
            return ResolvedProcedureWaypoint(waypoint=waypoint)
        return ResolvedProcedureWaypoint(waypoint=waypoint, latitude=coords[0], longitude=coords[1], resolved=True)

    def resolve_procedure(self, procedure: Procedure) -> ResolvedProcedure:
        return ResolvedProcedure(
            type=procedure.type,
            name=procedure.name,
            runway=procedure.runway,
            transition=procedure.transition,
            waypoints=[self.resolve_waypoint(wp) for wp in procedure.waypoints],
        )


def resolve_procedures(procedures: AirportProcedures, resolver: ProcedureCoordResolver) -> ResolvedAirportProcedures:
    """Place every leg of an airport's procedures."""
    return ResolvedAirportProcedures(
        icao=procedures.icao,
        sids=[resolver.resolve_procedure(p) for p in procedures.sids],
        stars=[resolver.resolve_procedure(p) for p in procedures.stars],
        approaches=[resolver.resolve_procedure(p) for p in procedures.approaches],
    )


def resolution_stats(procedures: ResolvedAirportProcedures) -> ResolutionStats:
    stats = ResolutionStats()
    for procedure in procedures.all():
        for wp in procedure.waypoints:
            stats.total += 1
            if wp.resolved:
                stats.resolved += 1
            else:
                stats.unresolved += 1
    return stats


def unresolved_fixes(procedures: ResolvedAirportProcedures) -> list[str]:
    """Sorted unique ``ID:REGION`` keys of legs left without coordinates."""
    return sorted(
        {
            f"{wp.fix_id}:{wp.fix_region}"
            for procedure in procedures.all()
            for wp in procedure.waypoints
            if not wp.resolved
        }
    )
