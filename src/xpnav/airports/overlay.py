"""Merges the global airport table with custom scenery packs.

The global apt.dat is applied first, then each custom scenery pack in sorted
directory order; a later definition of an ICAO replaces an earlier one. An
ICAO defined by any pack counts as custom even when the global table also
has it.

Typical usage example:
    overlay = AirportOverlay()
    overlay.apply(scan_apt(global_text, str(global_path)))
    overlay.apply(scan_apt(pack_text, str(pack_path), pack_name="KJFK Custom"), pack=True)
    store.replace_all(overlay.records.values())
    print(overlay.breakdown())
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from xpnav.airports.store import AirportStore
from xpnav.data.paths import XPlanePaths
from xpnav.parsers.apt import AirportRecord, AptScanResult, scan_apt

logger = logging.getLogger(__name__)

BREAKDOWN_KEYS = ("global_airports", "custom_scenery", "custom_scenery_packs")


@dataclass
class AirportSourceBreakdown:
    """Where the merged airports came from.

    Attributes:
        global_airports: ICAOs only the global table defines
        custom_scenery: ICAOs defined by at least one custom pack
        custom_scenery_packs: Number of packs with an apt.dat
    """

    global_airports: int = 0
    custom_scenery: int = 0
    custom_scenery_packs: int = 0

    @property
    def total(self) -> int:
        return self.global_airports + self.custom_scenery


@dataclass
class AirportOverlay:
    """Accumulates scanned apt.dat files into one ICAO-keyed set."""

    records: dict[str, AirportRecord] = field(default_factory=dict)
    global_icaos: set[str] = field(default_factory=set)
    custom_icaos: set[str] = field(default_factory=set)
    pack_count: int = 0
    errors: list[str] = field(default_factory=list)

    def apply(self, scan: AptScanResult, pack: bool = False) -> None:
        """Layer one scanned file over what is already merged.

        Args:
            scan: Scanner output for one apt.dat.
            pack: True for a custom scenery pack.
        """
        target = self.custom_icaos if pack else self.global_icaos
        for icao, record in scan.airports.items():
            self.records[icao] = record
            target.add(icao)

        if pack:
            self.pack_count += 1
        self.errors.extend(scan.errors)

    def breakdown(self) -> AirportSourceBreakdown:
        return AirportSourceBreakdown(
            global_airports=len(self.global_icaos - self.custom_icaos),
            custom_scenery=len(self.custom_icaos),
            custom_scenery_packs=self.pack_count,
        )


@dataclass
class AptSource:
    """One apt.dat to scan."""

    path: Path
    pack_name: str | None = None

    @property
    def is_pack(self) -> bool:
        return self.pack_name is not None


def apt_sources(paths: XPlanePaths) -> list[AptSource]:
    """Every apt.dat of an installation, global table first."""
    sources = []
    global_apt = paths.global_apt()
    if global_apt.is_file():
        sources.append(AptSource(global_apt))
    else:
        logger.warning("Global apt.dat not found: %s", global_apt)

    sources.extend(AptSource(apt, pack) for pack, apt in paths.custom_scenery_apts())
    return sources


def file_mtimes(sources: list[AptSource]) -> dict[str, float]:
    mtimes = {}
    for source in sources:
        try:
            mtimes[str(source.path)] = os.path.getmtime(source.path)
        except OSError as e:
            logger.warning("Cannot stat %s: %s", source.path, e)
    return mtimes


def scan_source(source: AptSource) -> AptScanResult:
    """Read and scan one apt.dat. Blocking; run it off the event loop."""
    text = source.path.read_text(encoding="utf-8", errors="replace")
    return scan_apt(text, str(source.path), pack_name=source.pack_name)


def store_breakdown(store: AirportStore, breakdown: AirportSourceBreakdown) -> None:
    for key in BREAKDOWN_KEYS:
        store.set_info(key, str(getattr(breakdown, key)))


def breakdown_from_store(store: AirportStore) -> AirportSourceBreakdown:
    """Breakdown recorded with the last full rewrite, recomputed if absent."""
    values = {key: store.get_info(key) for key in BREAKDOWN_KEYS}
    if all(v is not None for v in values.values()):
        return AirportSourceBreakdown(**{k: int(v) for k, v in values.items()})

    custom = store.custom_count()
    return AirportSourceBreakdown(global_airports=store.count() - custom, custom_scenery=custom)


def commit_overlay(
    store: AirportStore,
    overlay: AirportOverlay,
    scans: list[tuple[AptSource, AptScanResult]],
    mtimes: dict[str, float],
) -> AirportSourceBreakdown:
    """Write a merged overlay and its file metadata to the store."""
    breakdown = overlay.breakdown()
    store.replace_all(overlay.records.values())
    store.update_file_meta(
        {
            str(source.path): (mtimes.get(str(source.path), 0.0), len(scan.airports))
            for source, scan in scans
        }
    )
    store_breakdown(store, breakdown)

    logger.info(
        "Airport breakdown: %d from Global, %d from Custom Scenery (%d packs)",
        breakdown.global_airports,
        breakdown.custom_scenery,
        breakdown.custom_scenery_packs,
    )
    if overlay.errors:
        logger.debug("%d airports dropped without a placement coordinate", len(overlay.errors))
    return breakdown


def load_airports(paths: XPlanePaths, store: AirportStore, force: bool = False) -> AirportSourceBreakdown:
    """Scan, merge and persist every apt.dat of an installation.

    Args:
        paths: Installation layout.
        store: Destination store; fully replaced.
        force: Rescan even when no apt.dat changed since the last run.

    Returns:
        Source breakdown of the stored set.
    """
    sources = apt_sources(paths)
    mtimes = file_mtimes(sources)

    if not force:
        validity = store.check_cache_validity(mtimes)
        if validity.valid:
            logger.info("Airport cache is current (%d files), skipping scan", len(mtimes))
            return breakdown_from_store(store)

    overlay = AirportOverlay()
    scans = []
    for source in sources:
        scan = scan_source(source)
        overlay.apply(scan, pack=source.is_pack)
        scans.append((source, scan))

    return commit_overlay(store, overlay, scans, mtimes)
