"""Identifies where the loaded navigation data came from.

Third-party AIRAC updates install into ``Custom Data`` and describe their
cycle either in ``cycle.json`` or, in older packages, ``cycle_info.txt``::

    AIRAC cycle    : 2601
    Revision       : 1
    Valid (from/to): 22JAN26 - 19FEB26
"""

import json
import logging
import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from pathlib import Path

from xpnav.data import paths as xp

logger = logging.getLogger(__name__)

_CYCLE_RE = re.compile(r"AIRAC cycle\s*:\s*(\d+)", re.IGNORECASE)
_REVISION_RE = re.compile(r"Revision\s*:\s*(\d+)", re.IGNORECASE)
_VALIDITY_RE = re.compile(r"Valid.*?:\s*(\d{1,2}[A-Z]{3}\d{2})\s*-\s*(\d{1,2}[A-Z]{3}\d{2})", re.IGNORECASE)
_AIRAC_DATE_RE = re.compile(r"(\d{1,2})([A-Z]{3})(\d{2})", re.IGNORECASE)
_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


class DataSource(Enum):
    NAVIGRAPH = "navigraph"
    XPLANE_DEFAULT = "xplane-default"
    UNKNOWN = "unknown"


@dataclass
class DataSourceInfo:
    """Provenance of one dataset.

    Attributes:
        source: Who published the data
        cycle: AIRAC cycle (e.g., "2601")
        revision: Cycle revision
        effective_date: First valid day
        expiration_date: Last valid day
        is_custom_data: True when read from Custom Data
    """

    source: DataSource
    cycle: str | None = None
    revision: str | None = None
    effective_date: date | None = None
    expiration_date: date | None = None
    is_custom_data: bool = False

    def is_expired(self, today: date | None = None) -> bool:
        if self.expiration_date is None:
            return False
        return (today or date.today()) > self.expiration_date

    def display(self) -> str:
        if self.source is DataSource.NAVIGRAPH and self.cycle:
            suffix = f" (rev {self.revision})" if self.revision else ""
            return f"AIRAC {self.cycle}{suffix}"
        if self.source is DataSource.XPLANE_DEFAULT:
            return "X-Plane Default"
        return "Unknown"


@dataclass
class NavDataSources:
    global_source: DataSourceInfo
    navaids: DataSourceInfo
    waypoints: DataSourceInfo
    airways: DataSourceInfo
    airspaces: DataSourceInfo
    procedures: DataSourceInfo
    atc: DataSourceInfo | None
    holds: DataSourceInfo | None
    airport_meta: DataSourceInfo | None


def parse_airac_date(text: str) -> date | None:
    """Parse ``22JAN26`` style dates.

    Examples:
        >>> parse_airac_date("22JAN26")
        datetime.date(2026, 1, 22)
    """
    match = _AIRAC_DATE_RE.fullmatch(text.strip())
    if not match or match.group(2).upper() not in _MONTHS:
        return None

    try:
        return date(2000 + int(match.group(3)), _MONTHS.index(match.group(2).upper()) + 1, int(match.group(1)))
    except ValueError:
        return None


def _parse_iso_date(text: str | None) -> date | None:
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def read_cycle_json(path: Path) -> DataSourceInfo | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unreadable cycle file %s: %s", path, e)
        return None

    if not isinstance(data, dict):
        return None

    return DataSourceInfo(
        source=DataSource.NAVIGRAPH,
        cycle=str(data["cycle"]) if data.get("cycle") else None,
        revision=str(data["revision"]) if data.get("revision") else None,
        effective_date=_parse_iso_date(data.get("validFrom")),
        expiration_date=_parse_iso_date(data.get("validTo")),
        is_custom_data=True,
    )


def parse_cycle_info_text(text: str) -> DataSourceInfo:
    info = DataSourceInfo(source=DataSource.NAVIGRAPH, is_custom_data=True)

    for line in text.splitlines():
        cycle = _CYCLE_RE.search(line)
        if cycle:
            info.cycle = cycle.group(1)

        revision = _REVISION_RE.search(line)
        if revision:
            info.revision = revision.group(1)

        validity = _VALIDITY_RE.search(line)
        if validity:
            info.effective_date = parse_airac_date(validity.group(1))
            info.expiration_date = parse_airac_date(validity.group(2))

    return info


def read_cycle_info(root: Path) -> DataSourceInfo | None:
    """Cycle description of the installed third-party data, if any."""
    cycle_json = root / xp.CUSTOM_DATA / "cycle.json"
    if cycle_json.is_file():
        info = read_cycle_json(cycle_json)
        if info is not None:
            return info

    cycle_txt = root / xp.CUSTOM_DATA / "cycle_info.txt"
    if cycle_txt.is_file():
        try:
            return parse_cycle_info_text(cycle_txt.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logger.warning("Unreadable cycle file %s: %s", cycle_txt, e)
    return None


def _file_source(is_custom: bool, cycle: DataSourceInfo | None) -> DataSourceInfo:
    if is_custom and cycle is not None:
        return replace(cycle)
    return DataSourceInfo(
        source=DataSource.UNKNOWN if is_custom else DataSource.XPLANE_DEFAULT,
        is_custom_data=is_custom,
    )


def detect_data_sources(paths: xp.XPlanePaths) -> NavDataSources:
    """Describe the provenance of every dataset in an installation."""
    cycle = read_cycle_info(paths.root)

    navaids = _file_source(paths.is_custom(xp.EARTH_NAV), cycle)
    waypoints = _file_source(paths.is_custom(xp.EARTH_FIX), cycle)

    def optional(relative: str) -> DataSourceInfo | None:
        if not (paths.is_custom(relative) or (paths.root / xp.DEFAULT_DATA / relative).exists()):
            return None
        return _file_source(paths.is_custom(relative), cycle)

    atc_path = paths.atc_data()
    if cycle is not None and (navaids.is_custom_data or waypoints.is_custom_data):
        global_source = replace(cycle)
    else:
        global_source = DataSourceInfo(source=DataSource.XPLANE_DEFAULT)

    return NavDataSources(
        global_source=global_source,
        navaids=navaids,
        waypoints=waypoints,
        airways=_file_source(paths.is_custom(xp.EARTH_AWY), cycle),
        airspaces=_file_source(paths.is_custom(xp.AIRSPACE), cycle),
        procedures=_file_source(paths.is_custom(xp.CIFP_DIR), cycle),
        atc=replace(cycle) if atc_path is not None and cycle is not None else None,
        holds=optional(xp.EARTH_HOLD),
        airport_meta=optional(xp.EARTH_APTMETA),
    )
