"""Airport overlay store.

Typical usage:
    from xpnav.airports import AirportStore, load_airports
    from xpnav.data.paths import XPlanePaths

    store = AirportStore("airports.db")
    breakdown = load_airports(XPlanePaths("/opt/X-Plane 12"), store)
    coords = store.get_coordinates("KJFK")
"""

from xpnav.airports.overlay import (
    AirportOverlay,
    AirportSourceBreakdown,
    AptSource,
    apt_sources,
    breakdown_from_store,
    load_airports,
)
from xpnav.airports.store import AirportStore, AirportSummary, CacheValidity

__all__ = [
    "AirportOverlay",
    "AirportSourceBreakdown",
    "AirportStore",
    "AirportSummary",
    "AptSource",
    "CacheValidity",
    "apt_sources",
    "breakdown_from_store",
    "load_airports",
]
