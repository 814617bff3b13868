"""SQLite persistence for merged airport records.

The store holds exactly one row per ICAO. It is always rewritten as a whole:
:meth:`AirportStore.replace_all` clears the table and inserts the new set in
batches inside a single transaction. A second table remembers the
modification time of every apt.dat that fed the last rewrite, so a caller
can skip rescanning when nothing changed.

Typical usage example:
    store = AirportStore(Path.home() / ".xpnav" / "airports.db")
    store.replace_all(records.values())
    lat, lon = store.get_coordinates("KJFK")
"""

import json
import logging
import sqlite3
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from xpnav.errors import AirportStoreError
from xpnav.parsers.apt import AirportFieldType, AirportRecord

logger = logging.getLogger(__name__)

INSERT_BATCH_SIZE = 500
IN_MEMORY = ":memory:"

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS airports (
        icao TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        lat REAL NOT NULL,
        lon REAL NOT NULL,
        type TEXT NOT NULL,
        elevation REAL,
        data TEXT NOT NULL,
        source_file TEXT,
        is_custom INTEGER NOT NULL DEFAULT 0,
        pack_name TEXT,
        metadata TEXT
    );

    CREATE TABLE IF NOT EXISTS apt_file_meta (
        path TEXT PRIMARY KEY,
        mtime REAL NOT NULL,
        airport_count INTEGER NOT NULL DEFAULT 0
    );

    CREATE TABLE IF NOT EXISTS store_info (
        key TEXT PRIMARY KEY,
        value TEXT
    );
"""

_INSERT_AIRPORT = """
    INSERT OR REPLACE INTO airports
        (icao, name, lat, lon, type, elevation, data, source_file, is_custom, pack_name, metadata)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


@dataclass
class AirportSummary:
    """Lightweight airport row for map and list views."""

    icao: str
    name: str
    latitude: float
    longitude: float
    field_type: AirportFieldType


@dataclass
class CacheValidity:
    """Comparison of apt.dat files on disk against the last stored scan.

    Attributes:
        valid: True when no file was added, changed or removed
        changed: Files whose modification time differs
        new: Files not seen in the last scan
        deleted: Files from the last scan that are gone
    """

    valid: bool
    changed: list[str] = field(default_factory=list)
    new: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)


class AirportStore:
    """SQLite-backed airport table.

    Args:
        db_path: Database file, or ":memory:".

    Raises:
        AirportStoreError: If the database cannot be opened.
    """

    def __init__(self, db_path: str | Path = IN_MEMORY) -> None:
        self.db_path = str(db_path)

        try:
            if self.db_path != IN_MEMORY:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self.conn.executescript(_SCHEMA)
        except (OSError, sqlite3.Error) as e:
            raise AirportStoreError(f"Cannot open airport store {self.db_path}: {e}") from e

        logger.debug("Airport store ready: %s", self.db_path)

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "AirportStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def replace_all(self, records: Iterable[AirportRecord]) -> int:
        """Replace every stored airport with ``records``.

        Args:
            records: Complete merged airport set.

        Returns:
            Number of rows written.

        Raises:
            AirportStoreError: If the write fails; the previous contents are kept.
        """
        rows = [_to_row(r) for r in records]

        try:
            with self.conn:
                self.conn.execute("DELETE FROM airports")
                for start in range(0, len(rows), INSERT_BATCH_SIZE):
                    self.conn.executemany(_INSERT_AIRPORT, rows[start : start + INSERT_BATCH_SIZE])
        except sqlite3.Error as e:
            raise AirportStoreError(f"Failed to write airports: {e}") from e

        logger.info("Stored %d airports in %s", len(rows), self.db_path)
        return len(rows)

    def clear(self) -> None:
        """Remove all airports, file metadata and cached counters."""
        with self.conn:
            self.conn.execute("DELETE FROM airports")
            self.conn.execute("DELETE FROM apt_file_meta")
            self.conn.execute("DELETE FROM store_info")

    def count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM airports").fetchone()[0]

    def get(self, icao: str) -> AirportRecord | None:
        row = self.conn.execute("SELECT * FROM airports WHERE icao = ?", (icao.upper(),)).fetchone()
        return _from_row(row) if row else None

    def get_data(self, icao: str) -> str | None:
        """Verbatim apt.dat block of an airport."""
        row = self.conn.execute("SELECT data FROM airports WHERE icao = ?", (icao.upper(),)).fetchone()
        return row["data"] if row else None

    def get_coordinates(self, icao: str) -> tuple[float, float] | None:
        row = self.conn.execute("SELECT lat, lon FROM airports WHERE icao = ?", (icao.upper(),)).fetchone()
        return (row["lat"], row["lon"]) if row else None

    def all_airports(self) -> list[AirportSummary]:
        rows = self.conn.execute("SELECT icao, name, lat, lon, type FROM airports ORDER BY icao").fetchall()
        return [
            AirportSummary(
                icao=row["icao"],
                name=row["name"],
                latitude=row["lat"],
                longitude=row["lon"],
                field_type=AirportFieldType(row["type"]),
            )
            for row in rows
        ]

    def airports_in_box(self, min_lat: float, min_lon: float, max_lat: float, max_lon: float) -> list[AirportSummary]:
        """Airports inside a lat/lon box; the caller applies any exact distance test."""
        rows = self.conn.execute(
            "SELECT icao, name, lat, lon, type FROM airports WHERE lat BETWEEN ? AND ? AND lon BETWEEN ? AND ?",
            (min_lat, max_lat, min_lon, max_lon),
        ).fetchall()
        return [
            AirportSummary(row["icao"], row["name"], row["lat"], row["lon"], AirportFieldType(row["type"]))
            for row in rows
        ]

    def custom_count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM airports WHERE is_custom = 1").fetchone()[0]

    def set_info(self, key: str, value: str) -> None:
        with self.conn:
            self.conn.execute("INSERT OR REPLACE INTO store_info (key, value) VALUES (?, ?)", (key, value))

    def get_info(self, key: str) -> str | None:
        row = self.conn.execute("SELECT value FROM store_info WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def file_meta(self) -> dict[str, float]:
        """Modification time of each apt.dat recorded by the last scan."""
        rows = self.conn.execute("SELECT path, mtime FROM apt_file_meta").fetchall()
        return {row["path"]: row["mtime"] for row in rows}

    def update_file_meta(self, files: dict[str, tuple[float, int]]) -> None:
        """Record the scanned files.

        Args:
            files: Path mapped to (mtime, airport_count).
        """
        with self.conn:
            self.conn.execute("DELETE FROM apt_file_meta")
            self.conn.executemany(
                "INSERT INTO apt_file_meta (path, mtime, airport_count) VALUES (?, ?, ?)",
                [(path, mtime, count) for path, (mtime, count) in files.items()],
            )

    def check_cache_validity(self, current_files: dict[str, float]) -> CacheValidity:
        """Compare files on disk with the last recorded scan.

        Args:
            current_files: Path mapped to its current modification time.

        Returns:
            What differs. An empty store is never valid.
        """
        stored = self.file_meta()
        changed = sorted(p for p, mtime in current_files.items() if p in stored and stored[p] != mtime)
        new = sorted(p for p in current_files if p not in stored)
        deleted = sorted(p for p in stored if p not in current_files)

        valid = bool(stored) and self.count() > 0 and not (changed or new or deleted)
        return CacheValidity(valid=valid, changed=changed, new=new, deleted=deleted)


def _to_row(record: AirportRecord) -> tuple:
    return (
        record.icao,
        record.name,
        record.latitude,
        record.longitude,
        record.field_type.value,
        record.elevation,
        record.data,
        record.source_file,
        int(record.is_custom),
        record.pack_name,
        json.dumps(record.metadata) if record.metadata else None,
    )


def _from_row(row: sqlite3.Row) -> AirportRecord:
    return AirportRecord(
        icao=row["icao"],
        name=row["name"],
        latitude=row["lat"],
        longitude=row["lon"],
        field_type=AirportFieldType(row["type"]),
        elevation=row["elevation"] or 0.0,
        data=row["data"],
        source_file=row["source_file"] or "",
        is_custom=bool(row["is_custom"]),
        pack_name=row["pack_name"],
        metadata=json.loads(row["metadata"]) if row["metadata"] else {},
    )
