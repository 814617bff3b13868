"""Decoders for the simulator's navigation data files.

Every decoder is a pure function from file text to typed records. Malformed
lines are dropped and counted; nothing here raises on bad input.

Typical usage:
    from xpnav.parsers import parse_navaids, parse_waypoints

    navaids = parse_navaids(nav_text).items
    waypoints = parse_waypoints(fix_text).items
"""

from xpnav.parsers.airspaces import Airspace, parse_airspaces
from xpnav.parsers.airways import AirwaySegment, parse_airways
from xpnav.parsers.apt import AirportFieldType, AirportRecord, AptScanResult, scan_apt
from xpnav.parsers.apt_meta import AirportMetadata, parse_airport_metadata
from xpnav.parsers.atc import ATCAirspace, ATCController, ATCRole, parse_atc
from xpnav.parsers.base import ParseResult, ParseStats
from xpnav.parsers.cifp import (
    AirportProcedures,
    AltitudeConstraint,
    Procedure,
    ProcedureType,
    ProcedureWaypoint,
    parse_cifp,
)
from xpnav.parsers.holds import HoldingPattern, parse_holding_patterns
from xpnav.parsers.mora import MORACell, parse_mora
from xpnav.parsers.msa import MSASector, parse_msa
from xpnav.parsers.navaids import Navaid, NavaidRowCode, NavaidType, parse_navaids
from xpnav.parsers.waypoints import Waypoint, parse_waypoints

__all__ = [
    "ATCAirspace",
    "ATCController",
    "ATCRole",
    "AirportFieldType",
    "AirportMetadata",
    "AirportProcedures",
    "AirportRecord",
    "Airspace",
    "AirwaySegment",
    "AltitudeConstraint",
    "AptScanResult",
    "HoldingPattern",
    "MORACell",
    "MSASector",
    "Navaid",
    "NavaidRowCode",
    "NavaidType",
    "ParseResult",
    "ParseStats",
    "Procedure",
    "ProcedureType",
    "ProcedureWaypoint",
    "Waypoint",
    "parse_airport_metadata",
    "parse_airspaces",
    "parse_airways",
    "parse_atc",
    "parse_cifp",
    "parse_holding_patterns",
    "parse_mora",
    "parse_msa",
    "parse_navaids",
    "parse_waypoints",
    "scan_apt",
]
