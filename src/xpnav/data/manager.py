"""Navigation data context.

``NavDataContext`` owns every loaded dataset for one installation and the
airport store. It is constructed by the caller; there is no module-level
instance.

Loading happens in two concurrent batches. The core batch (airports,
navaids, waypoints, airspaces, airways) runs first; a failure in one
dataset is logged and leaves that dataset empty without stopping the
others. The optional batch (ATC, holds, airport metadata, MSA, MORA)
follows. Each collection is replaced wholesale once its dataset finishes,
so readers never see a partially decoded set.

Typical usage example:
    context = NavDataContext(NavSettings(xplane_path=Path("/opt/X-Plane 12")))
    await context.reload()
    vors = context.vors_in_radius(40.64, -73.78, 50)
    procedures = await context.get_airport_procedures("KJFK")
"""

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from xpnav.airports.overlay import AirportSourceBreakdown, breakdown_from_store
from xpnav.airports.store import AirportStore, AirportSummary
from xpnav.core.config import NavSettings
from xpnav.data import loader
from xpnav.data.cycle_info import NavDataSources, detect_data_sources
from xpnav.data.paths import XPlanePaths
from xpnav.errors import InvalidInstallationError, ReloadInProgressError
from xpnav.geo import bounding_box, haversine_nm
from xpnav.navigation import spatial
from xpnav.navigation.resolver import (
    ProcedureCoordResolver,
    ResolvedAirportProcedures,
    resolution_stats,
    resolve_procedures,
    unresolved_fixes,
)
from xpnav.navigation.spatial import AirwaySegmentWithCoords, FixIndex, NavaidFamily
from xpnav.parsers.airspaces import Airspace
from xpnav.parsers.airways import AirwaySegment
from xpnav.parsers.apt import AirportRecord
from xpnav.parsers.apt_meta import DEFAULT_TRANSITION_ALTITUDE, DEFAULT_TRANSITION_LEVEL, AirportMetadata
from xpnav.parsers.atc import ATCController, ATCRole, controller_by_facility, controllers_by_role, search_controllers
from xpnav.parsers.cifp import parse_cifp
from xpnav.parsers.holds import HoldingPattern
from xpnav.parsers.mora import MORACell, cells_in_bounds, max_mora_along_route, mora_at_point
from xpnav.parsers.msa import MSASector, max_msa, msa_at_bearing, sectors_for_fix
from xpnav.parsers.navaids import Navaid, NavaidType
from xpnav.parsers.waypoints import Waypoint

logger = logging.getLogger(__name__)


@dataclass
class HoldWithCoords:
    """Holding pattern placed on its fix."""

    hold: HoldingPattern
    latitude: float
    longitude: float


@dataclass
class DataLoadStatus:
    """Snapshot of what the context currently holds.

    Attributes:
        xplane_path: Installation root, or None before the first load
        counts: Record count per dataset
        loaded: Whether each dataset's file was found and decoded
        sources: File each dataset was read from
        airport_breakdown: Global vs custom airport counts
        navaid_types: Navaid count per type
        last_reload: When the last reload finished
        reloading: True while a reload is running
    """

    xplane_path: Path | None
    counts: dict[str, int] = field(default_factory=dict)
    loaded: dict[str, bool] = field(default_factory=dict)
    sources: dict[str, Path | None] = field(default_factory=dict)
    airport_breakdown: AirportSourceBreakdown = field(default_factory=AirportSourceBreakdown)
    navaid_types: dict[str, int] = field(default_factory=dict)
    last_reload: datetime | None = None
    reloading: bool = False


class NavDataContext:
    """In-memory navigation data for one installation.

    Args:
        settings: Paths and query limits.
        store: Airport store. Opened from ``settings.airport_db_path`` when
            omitted. The store must only be used from the event loop thread.
    """

    def __init__(self, settings: NavSettings, store: AirportStore | None = None) -> None:
        self.settings = settings
        self.store = store if store is not None else AirportStore(settings.airport_db_path)

        self.navaids: list[Navaid] = []
        self.waypoints: list[Waypoint] = []
        self.airways: list[AirwaySegment] = []
        self.airspaces: list[Airspace] = []
        self.atc_controllers: list[ATCController] = []
        self.holding_patterns: list[HoldingPattern] = []
        self.msa_sectors: list[MSASector] = []
        self.mora_cells: list[MORACell] = []
        self.airport_metadata: dict[str, AirportMetadata] = {}
        self.airport_breakdown = AirportSourceBreakdown()

        self._loaded: dict[str, bool] = {}
        self._sources: dict[str, Path | None] = {}
        self._fix_index: FixIndex | None = None
        self._reloading = False
        self._last_reload: datetime | None = None

    @property
    def paths(self) -> XPlanePaths | None:
        if self.settings.xplane_path is None:
            return None
        return XPlanePaths(self.settings.xplane_path)

    @property
    def is_reloading(self) -> bool:
        return self._reloading

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def reload(self, force: bool = False) -> DataLoadStatus:
        """Reload every dataset from the configured installation.

        Args:
            force: Rescan airports even when no apt.dat changed.

        Returns:
            Status after loading.

        Raises:
            ReloadInProgressError: If another reload is running.
            InvalidInstallationError: If no path is configured or it is not
                a usable installation. Nothing is loaded in that case.
        """
        if self._reloading:
            raise ReloadInProgressError("A navigation data reload is already in progress")

        paths = self.paths
        if paths is None:
            raise InvalidInstallationError("No simulator path configured")
        paths.validate()

        self._reloading = True
        try:
            logger.info("Loading navigation data from %s", paths.root)
            await self._load_core(paths, force)
            await self._load_optional(paths)
            self._last_reload = datetime.now()
            logger.info(
                "Navigation data loaded: %d navaids, %d waypoints, %d airways, %d airspaces, %d airports",
                len(self.navaids),
                len(self.waypoints),
                len(self.airways),
                len(self.airspaces),
                self.airport_breakdown.total,
            )
        finally:
            self._reloading = False

        return self.get_status()

    async def set_path(self, path: str | Path, force: bool = True) -> DataLoadStatus:
        """Switch to another installation and load it.

        Every dataset is cleared and the airport store is wiped before the
        new installation is read.

        Raises:
            ReloadInProgressError: If a reload is running.
            InvalidInstallationError: If ``path`` is not a usable installation.
        """
        if self._reloading:
            raise ReloadInProgressError("Cannot change path while a reload is in progress")

        XPlanePaths(path).validate()

        logger.info("Switching simulator path to %s", path)
        self.settings.xplane_path = Path(path)
        self.clear()
        self.store.clear()
        return await self.reload(force=force)

    def clear(self) -> None:
        """Drop every in-memory dataset."""
        self.navaids = []
        self.waypoints = []
        self.airways = []
        self.airspaces = []
        self.atc_controllers = []
        self.holding_patterns = []
        self.msa_sectors = []
        self.mora_cells = []
        self.airport_metadata = {}
        self.airport_breakdown = AirportSourceBreakdown()
        self._loaded = {}
        self._sources = {}
        self._fix_index = None

    async def _load_core(self, paths: XPlanePaths, force: bool) -> None:
        results = await asyncio.gather(
            loader.load_airports(paths, self.store, force=force),
            loader.load_navaids(paths),
            loader.load_waypoints(paths),
            loader.load_airspaces(paths),
            loader.load_airways(paths),
            return_exceptions=True,
        )
        airports, navaids, waypoints, airspaces, airways = results

        if isinstance(airports, BaseException):
            logger.error("Failed to load airports: %s", airports)
            self._loaded["airports"] = False
        else:
            self.airport_breakdown = airports
            self._loaded["airports"] = self.store.count() > 0

        self.navaids = self._take("navaids", navaids)
        self.waypoints = self._take("waypoints", waypoints)
        self.airspaces = self._take("airspaces", airspaces)
        self.airways = self._take("airways", airways)
        self._fix_index = None

    async def _load_optional(self, paths: XPlanePaths) -> None:
        results = await asyncio.gather(
            loader.load_atc(paths),
            loader.load_holding_patterns(paths),
            loader.load_airport_metadata(paths),
            loader.load_msa(paths),
            loader.load_mora(paths),
            return_exceptions=True,
        )
        atc, holds, meta, msa, mora = results

        self.atc_controllers = self._take("atc", atc)
        self.holding_patterns = self._take("holds", holds)
        self.airport_metadata = self._take("airport_meta", meta, empty={})
        self.msa_sectors = self._take("msa", msa)
        self.mora_cells = self._take("mora", mora)

    def _take(self, name: str, result: Any, empty: Any = None) -> Any:
        """Unwrap one gathered load result, logging failures."""
        if isinstance(result, BaseException):
            logger.error("Failed to load %s: %s", name, result)
            self._loaded[name] = False
            self._sources[name] = None
            return [] if empty is None else empty

        self._loaded[name] = result.loaded
        self._sources[name] = result.source
        return result.data

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def navaid_counts_by_type(self) -> dict[str, int]:
        counts = Counter(n.type.value for n in self.navaids)
        return dict(sorted(counts.items()))

    def get_status(self) -> DataLoadStatus:
        return DataLoadStatus(
            xplane_path=self.settings.xplane_path,
            counts={
                "navaids": len(self.navaids),
                "waypoints": len(self.waypoints),
                "airways": len(self.airways),
                "airspaces": len(self.airspaces),
                "airports": self.store.count(),
                "atc": len(self.atc_controllers),
                "holds": len(self.holding_patterns),
                "airport_meta": len(self.airport_metadata),
                "msa": len(self.msa_sectors),
                "mora": len(self.mora_cells),
            },
            loaded=dict(self._loaded),
            sources=dict(self._sources),
            airport_breakdown=self.airport_breakdown,
            navaid_types=self.navaid_counts_by_type(),
            last_reload=self._last_reload,
            reloading=self._reloading,
        )

    def data_sources(self) -> NavDataSources | None:
        paths = self.paths
        if paths is None:
            return None
        return detect_data_sources(paths)

    def stored_airport_breakdown(self) -> AirportSourceBreakdown:
        """Breakdown recorded in the airport store by the last scan."""
        return breakdown_from_store(self.store)

    # ------------------------------------------------------------------
    # Navaids and waypoints
    # ------------------------------------------------------------------

    def navaids_in_radius(
        self, lat: float, lon: float, radius_nm: float, family: NavaidFamily | None = None
    ) -> list[Navaid]:
        return spatial.navaids_in_radius(self.navaids, lat, lon, radius_nm, family)

    def vors_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.VOR)

    def ndbs_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.NDB)

    def dmes_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.DME)

    def ils_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.ILS)

    def glideslopes_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.GLIDESLOPE)

    def markers_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.MARKER)

    def ils_components_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.ILS_COMPONENTS)

    def approach_aids_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Navaid]:
        return self.navaids_in_radius(lat, lon, radius_nm, NavaidFamily.APPROACH_AIDS)

    def approach_navaids(self, airport: str, runway: str | None = None) -> list[Navaid]:
        """ILS components and approach aids for an airport, optionally one runway."""
        return spatial.approach_navaids(self.navaids, airport.upper(), runway.upper() if runway else None)

    def waypoints_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[Waypoint]:
        return spatial.waypoints_in_radius(self.waypoints, lat, lon, radius_nm)

    def get_navaid(self, ident: str, navaid_type: NavaidType | None = None) -> list[Navaid]:
        ident = ident.upper()
        return [n for n in self.navaids if n.id == ident and (navaid_type is None or n.type is navaid_type)]

    def get_waypoint(self, ident: str, region: str | None = None) -> list[Waypoint]:
        ident = ident.upper()
        return [w for w in self.waypoints if w.id == ident and (region is None or w.region == region.upper())]

    def search_navaids(self, query: str, limit: int = 50) -> list[Navaid]:
        """Navaids whose identifier starts with, or name contains, ``query``."""
        query = query.upper()
        matches = [n for n in self.navaids if n.id.startswith(query) or query in n.name.upper()]
        return matches[:limit]

    def search_waypoints(self, query: str, limit: int = 50) -> list[Waypoint]:
        query = query.upper()
        return [w for w in self.waypoints if w.id.startswith(query)][:limit]

    # ------------------------------------------------------------------
    # Airports
    # ------------------------------------------------------------------

    def get_airport(self, icao: str) -> AirportRecord | None:
        return self.store.get(icao.upper())

    def get_airport_data(self, icao: str) -> str | None:
        """Verbatim apt.dat block of an airport."""
        return self.store.get_data(icao.upper())

    def all_airports(self) -> list[AirportSummary]:
        return self.store.all_airports()

    def airports_in_radius(self, lat: float, lon: float, radius_nm: float) -> list[AirportSummary]:
        min_lat, min_lon, max_lat, max_lon = bounding_box(lat, lon, radius_nm)
        candidates = self.store.airports_in_box(min_lat, min_lon, max_lat, max_lon)
        return [a for a in candidates if haversine_nm(lat, lon, a.latitude, a.longitude) <= radius_nm]

    def get_airport_metadata(self, icao: str) -> AirportMetadata | None:
        return self.airport_metadata.get(icao.upper())

    def get_transition_altitude(self, icao: str) -> int:
        """Published transition altitude, falling back to apt.dat and then 18000 ft."""
        meta = self.get_airport_metadata(icao)
        if meta is not None:
            return meta.transition_altitude

        record = self.get_airport(icao)
        if record is not None and record.transition_altitude is not None:
            return record.transition_altitude
        return DEFAULT_TRANSITION_ALTITUDE

    def get_transition_level(self, icao: str) -> str:
        meta = self.get_airport_metadata(icao)
        if meta is not None:
            return meta.transition_level

        record = self.get_airport(icao)
        if record is not None and record.metadata.get("transition_level"):
            return record.metadata["transition_level"]
        return DEFAULT_TRANSITION_LEVEL

    # ------------------------------------------------------------------
    # Airspaces and airways
    # ------------------------------------------------------------------

    def airspaces_near_point(self, lat: float, lon: float, radius_nm: float | None = None) -> list[Airspace]:
        if radius_nm is None:
            radius_nm = self.settings.airspace_near_radius_nm
        return spatial.airspaces_near_point(self.airspaces, lat, lon, radius_nm)

    @property
    def fix_index(self) -> FixIndex:
        if self._fix_index is None:
            self._fix_index = FixIndex(self.waypoints, self.navaids)
        return self._fix_index

    def airways_in_radius(
        self, lat: float, lon: float, radius_nm: float, limit: int | None = None
    ) -> list[AirwaySegmentWithCoords]:
        return spatial.place_airways(
            self.airways,
            self.fix_index,
            limit if limit is not None else self.settings.airway_limit,
            center=(lat, lon),
            radius_nm=radius_nm,
        )

    def all_airways_with_coords(self, limit: int | None = None) -> list[AirwaySegmentWithCoords]:
        return spatial.place_airways(
            self.airways, self.fix_index, limit if limit is not None else self.settings.airway_limit_all
        )

    # ------------------------------------------------------------------
    # Holds
    # ------------------------------------------------------------------

    def holds_for_fix(self, fix_id: str, region: str | None = None) -> list[HoldingPattern]:
        fix_id = fix_id.upper()
        return [
            h
            for h in self.holding_patterns
            if h.fix_id == fix_id and (region is None or h.fix_region == region.upper())
        ]

    def holds_for_airport(self, icao: str) -> list[HoldingPattern]:
        icao = icao.upper()
        return [h for h in self.holding_patterns if h.airport == icao]

    def holds_with_coords(self, holds: list[HoldingPattern] | None = None) -> list[HoldWithCoords]:
        """Place holds on their fix; holds on unknown fixes are dropped."""
        placed = []
        for hold in self.holding_patterns if holds is None else holds:
            position = self.fix_index.lookup(hold.fix_id, hold.fix_region)
            if position is not None:
                placed.append(HoldWithCoords(hold, position[0], position[1]))
        return placed

    # ------------------------------------------------------------------
    # Minimum altitudes
    # ------------------------------------------------------------------

    def msa_for_fix(self, fix_id: str, region: str | None = None) -> list[MSASector]:
        return sectors_for_fix(self.msa_sectors, fix_id, region)

    def msa_at_bearing(self, fix_id: str, bearing: float) -> MSASector | None:
        return msa_at_bearing(self.msa_sectors, fix_id, bearing)

    def max_msa(self, fix_id: str) -> int | None:
        return max_msa(self.msa_sectors, fix_id)

    def mora_at(self, lat: float, lon: float) -> int | None:
        return mora_at_point(self.mora_cells, lat, lon)

    def mora_in_bounds(self, min_lat: float, max_lat: float, min_lon: float, max_lon: float) -> list[MORACell]:
        return cells_in_bounds(self.mora_cells, min_lat, max_lat, min_lon, max_lon)

    def max_mora_along_route(self, from_lat: float, from_lon: float, to_lat: float, to_lon: float) -> int | None:
        return max_mora_along_route(self.mora_cells, from_lat, from_lon, to_lat, to_lon)

    # ------------------------------------------------------------------
    # ATC
    # ------------------------------------------------------------------

    def atc_by_facility(self, facility_id: str) -> ATCController | None:
        return controller_by_facility(self.atc_controllers, facility_id)

    def atc_by_role(self, role: ATCRole) -> list[ATCController]:
        return controllers_by_role(self.atc_controllers, role)

    def search_atc(self, query: str) -> list[ATCController]:
        return search_controllers(self.atc_controllers, query)

    # ------------------------------------------------------------------
    # Procedures
    # ------------------------------------------------------------------

    async def get_airport_procedures(self, icao: str) -> ResolvedAirportProcedures | None:
        """Decode and resolve the CIFP file of one airport.

        The airport's stored coordinate is the reference point for the
        nearest-fix fallback.

        Args:
            icao: Airport ICAO code.

        Returns:
            Resolved procedures, or None when there is no installation or
            no procedure file for the airport.
        """
        paths = self.paths
        if paths is None:
            return None

        icao = icao.upper()
        cifp_path = paths.cifp(icao)
        if not cifp_path.is_file():
            logger.debug("No procedure file for %s: %s", icao, cifp_path)
            return None

        text = await loader.read_text(cifp_path)
        procedures = parse_cifp(text, icao)

        resolver = ProcedureCoordResolver(
            self.waypoints,
            self.navaids,
            reference=self.store.get_coordinates(icao),
            max_fallback_distance_nm=self.settings.fallback_distance_nm,
        )
        resolved = resolve_procedures(procedures, resolver)

        stats = resolution_stats(resolved)
        logger.info(
            "%s procedures: %d of %d legs resolved (%.0f%%)", icao, stats.resolved, stats.total, stats.rate * 100
        )
        if stats.unresolved:
            logger.debug("%s unresolved fixes: %s", icao, ", ".join(unresolved_fixes(resolved)))
        return resolved
