"""Pytest configuration and fixtures for all tests."""

from pathlib import Path

import pytest
from navdata_samples import (
    AIRSPACE_TXT,
    APTMETA_DAT,
    AWY_DAT,
    CIFP_KJFK,
    CUSTOM_KJFK_APT,
    FIX_DAT,
    GLOBAL_APT,
    HOLD_DAT,
    MSA_DAT,
    NAV_DAT,
    write_file,
)

from xpnav.airports.store import AirportStore
from xpnav.core.config import NavSettings


@pytest.fixture
def xplane_root(tmp_path: Path) -> Path:
    """Minimal installation with every dataset and one custom scenery pack."""
    root = tmp_path / "X-Plane 12"
    data = root / "Resources" / "default data"

    write_file(data / "earth_nav.dat", NAV_DAT)
    write_file(data / "earth_fix.dat", FIX_DAT)
    write_file(data / "earth_awy.dat", AWY_DAT)
    write_file(data / "airspaces" / "airspace.txt", AIRSPACE_TXT)
    write_file(data / "CIFP" / "KJFK.dat", CIFP_KJFK)
    write_file(data / "earth_hold.dat", HOLD_DAT)
    write_file(data / "earth_msa.dat", MSA_DAT)
    write_file(data / "earth_aptmeta.dat", APTMETA_DAT)

    write_file(root / "Global Scenery" / "Global Airports" / "Earth nav data" / "apt.dat", GLOBAL_APT)
    write_file(root / "Custom Scenery" / "KJFK Custom" / "Earth nav data" / "apt.dat", CUSTOM_KJFK_APT)
    return root


@pytest.fixture
def airport_store():
    """In-memory airport store, closed after the test."""
    store = AirportStore()
    yield store
    store.close()


@pytest.fixture
def nav_settings(xplane_root: Path, tmp_path: Path) -> NavSettings:
    return NavSettings(xplane_path=xplane_root, airport_db_path=tmp_path / "airports.db")
