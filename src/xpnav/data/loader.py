"""Asynchronous dataset loaders.

Each loader locates its file, reads it through the default executor so the
event loop is not blocked on disk, and decodes it. Core datasets report a
missing file as a warning; optional datasets (ATC, holds, MSA, MORA,
airport metadata) only log it at debug level. Neither raises for a missing
file. Read errors on core datasets propagate to the caller.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, TypeVar

from xpnav.airports.overlay import (
    AirportOverlay,
    AirportSourceBreakdown,
    apt_sources,
    breakdown_from_store,
    commit_overlay,
    file_mtimes,
)
from xpnav.airports.store import AirportStore
from xpnav.data.paths import XPlanePaths
from xpnav.parsers.airspaces import Airspace, parse_airspaces
from xpnav.parsers.airways import AirwaySegment, parse_airways
from xpnav.parsers.apt import scan_apt
from xpnav.parsers.apt_meta import AirportMetadata, parse_airport_metadata
from xpnav.parsers.atc import ATCController, parse_atc
from xpnav.parsers.base import ParseResult, ParseStats
from xpnav.parsers.holds import HoldingPattern, parse_holding_patterns
from xpnav.parsers.mora import MORACell, parse_mora
from xpnav.parsers.msa import MSASector, parse_msa
from xpnav.parsers.navaids import Navaid, parse_navaids
from xpnav.parsers.waypoints import Waypoint, parse_waypoints

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class NavLoadResult(Generic[T]):
    """Outcome of loading one dataset.

    Attributes:
        data: Decoded records (empty when nothing was loaded)
        loaded: True when the file existed and was decoded
        source: File that was read
        stats: Decoder counters
    """

    data: T
    loaded: bool = False
    source: Path | None = None
    stats: ParseStats = field(default_factory=ParseStats)


def _read_text(path: Path) -> str:
    """Blocking read (runs in executor)."""
    return path.read_text(encoding="utf-8", errors="replace")


async def read_text(path: Path) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _read_text, path)


async def _load_table(
    label: str,
    path: Path | None,
    parse: Callable[[str], ParseResult[Any]],
    optional: bool = False,
) -> NavLoadResult[list]:
    if path is None or not path.is_file():
        if optional:
            logger.debug("%s not found: %s", label, path)
        else:
            logger.warning("%s not found: %s", label, path)
        return NavLoadResult(data=[])

    try:
        text = await read_text(path)
    except OSError as e:
        if not optional:
            raise
        logger.warning("Failed to read %s: %s", path, e)
        return NavLoadResult(data=[])

    result = parse(text)
    if result.stats.skipped:
        logger.debug("%s: %d lines skipped", label, result.stats.skipped)
    logger.info("Loaded %d %s in %.0f ms", result.stats.parsed, label, result.stats.elapsed_ms)
    return NavLoadResult(data=result.items, loaded=True, source=path, stats=result.stats)


async def load_navaids(paths: XPlanePaths) -> NavLoadResult[list[Navaid]]:
    return await _load_table("navaids", paths.nav_data(), parse_navaids)


async def load_waypoints(paths: XPlanePaths) -> NavLoadResult[list[Waypoint]]:
    return await _load_table("waypoints", paths.fix_data(), parse_waypoints)


async def load_airways(paths: XPlanePaths) -> NavLoadResult[list[AirwaySegment]]:
    return await _load_table("airway segments", paths.airway_data(), parse_airways)


async def load_airspaces(paths: XPlanePaths) -> NavLoadResult[list[Airspace]]:
    return await _load_table("airspaces", paths.airspace_data(), parse_airspaces)


async def load_holding_patterns(paths: XPlanePaths) -> NavLoadResult[list[HoldingPattern]]:
    return await _load_table("holding patterns", paths.hold_data(), parse_holding_patterns, optional=True)


async def load_msa(paths: XPlanePaths) -> NavLoadResult[list[MSASector]]:
    return await _load_table("MSA sectors", paths.msa_data(), parse_msa, optional=True)


async def load_mora(paths: XPlanePaths) -> NavLoadResult[list[MORACell]]:
    return await _load_table("MORA cells", paths.mora_data(), parse_mora, optional=True)


async def load_atc(paths: XPlanePaths) -> NavLoadResult[list[ATCController]]:
    return await _load_table("ATC controllers", paths.atc_data(), parse_atc, optional=True)


async def load_airport_metadata(paths: XPlanePaths) -> NavLoadResult[dict[str, AirportMetadata]]:
    result = await _load_table(
        "airport metadata entries", paths.airport_meta_data(), lambda text: parse_airport_metadata(text)[1], True
    )
    return NavLoadResult(
        data={meta.icao: meta for meta in result.data},
        loaded=result.loaded,
        source=result.source,
        stats=result.stats,
    )


async def load_airports(paths: XPlanePaths, store: AirportStore, force: bool = False) -> AirportSourceBreakdown:
    """Async counterpart of :func:`xpnav.airports.overlay.load_airports`.

    File reads run in the executor; scanning and every store write happen
    on the calling thread.
    """
    sources = apt_sources(paths)
    mtimes = file_mtimes(sources)

    if not force and store.check_cache_validity(mtimes).valid:
        logger.info("Airport cache is current (%d files), skipping scan", len(mtimes))
        return breakdown_from_store(store)

    texts = await asyncio.gather(*(read_text(source.path) for source in sources))

    overlay = AirportOverlay()
    scans = []
    for source, text in zip(sources, texts):
        scan = scan_apt(text, str(source.path), pack_name=source.pack_name)
        overlay.apply(scan, pack=source.is_pack)
        scans.append((source, scan))

    return commit_overlay(store, overlay, scans, mtimes)
