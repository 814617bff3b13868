"""Spatial queries and procedure fix resolution.

Typical usage:
    from xpnav.navigation import NavaidFamily, ProcedureCoordResolver, navaids_in_radius

    vors = navaids_in_radius(navaids, 40.64, -73.78, 50, NavaidFamily.VOR)
    resolver = ProcedureCoordResolver(waypoints, navaids, reference=(40.64, -73.78))
"""

from xpnav.navigation.resolver import (
    ProcedureCoordResolver,
    ResolutionStats,
    ResolvedAirportProcedures,
    ResolvedProcedure,
    ResolvedProcedureWaypoint,
    resolution_stats,
    resolve_procedures,
    unresolved_fixes,
)
from xpnav.navigation.spatial import (
    AirwaySegmentWithCoords,
    FixIndex,
    NavaidFamily,
    airspaces_near_point,
    approach_navaids,
    navaids_in_radius,
    place_airways,
    waypoints_in_radius,
    within_radius,
)

__all__ = [
    "AirwaySegmentWithCoords",
    "FixIndex",
    "NavaidFamily",
    "ProcedureCoordResolver",
    "ResolutionStats",
    "ResolvedAirportProcedures",
    "ResolvedProcedure",
    "ResolvedProcedureWaypoint",
    "airspaces_near_point",
    "approach_navaids",
    "navaids_in_radius",
    "place_airways",
    "resolution_stats",
    "resolve_procedures",
    "unresolved_fixes",
    "waypoints_in_radius",
    "within_radius",
]
