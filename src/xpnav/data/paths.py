"""File layout of a simulator installation.

Navigation files live under ``Resources/default data``. A copy of the same
relative path under ``Custom Data`` (a third-party AIRAC update) takes
precedence when it exists. Airport tables come from the global scenery plus
any number of custom scenery packs.

Typical usage example:
    paths = XPlanePaths(Path("~/X-Plane 12").expanduser())
    paths.validate()
    nav_file = paths.nav_data()
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from xpnav.errors import InvalidInstallationError

logger = logging.getLogger(__name__)

DEFAULT_DATA = Path("Resources") / "default data"
CUSTOM_DATA = Path("Custom Data")
CUSTOM_SCENERY = Path("Custom Scenery")
GLOBAL_APT = Path("Global Scenery") / "Global Airports" / "Earth nav data" / "apt.dat"
PACK_APT = Path("Earth nav data") / "apt.dat"

EARTH_NAV = "earth_nav.dat"
EARTH_FIX = "earth_fix.dat"
EARTH_AWY = "earth_awy.dat"
EARTH_HOLD = "earth_hold.dat"
EARTH_MSA = "earth_msa.dat"
EARTH_MORA = "earth_mora.dat"
EARTH_APTMETA = "earth_aptmeta.dat"
AIRSPACE = Path("airspaces") / "airspace.txt"
CIFP_DIR = "CIFP"
ATC_CANDIDATES = (
    Path("1200 atc data") / "Earth nav data" / "atc.dat",
    Path("atc.dat"),
)

REQUIRED_DIRS = (Path("Resources"), DEFAULT_DATA)
REQUIRED_FILES = (DEFAULT_DATA / EARTH_NAV, DEFAULT_DATA / EARTH_FIX)

COMMON_INSTALL_DIRS = ("X-Plane 12", "X-Plane 11")


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str]


class XPlanePaths:
    """Resolves data file locations inside one installation.

    Args:
        root: Installation root directory.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def check(self) -> ValidationResult:
        """List what is missing for the root to be a usable installation."""
        if not self.root.is_dir():
            return ValidationResult(False, ["Path does not exist"])

        errors = [f"Missing required directory: {d.as_posix()}" for d in REQUIRED_DIRS if not (self.root / d).is_dir()]
        errors += [f"Missing data file: {f.as_posix()}" for f in REQUIRED_FILES if not (self.root / f).is_file()]
        return ValidationResult(not errors, errors)

    def validate(self) -> None:
        """Raise unless the root is a usable installation.

        Raises:
            InvalidInstallationError: Listing every missing piece.
        """
        result = self.check()
        if not result.valid:
            raise InvalidInstallationError(f"{self.root}: {'; '.join(result.errors)}")

    def resolve(self, relative: str | Path) -> Path:
        """Location of a default-data file, preferring its Custom Data copy.

        Args:
            relative: Path relative to ``Resources/default data``.
        """
        custom = self.root / CUSTOM_DATA / relative
        if custom.exists():
            return custom
        return self.root / DEFAULT_DATA / relative

    def is_custom(self, relative: str | Path) -> bool:
        return (self.root / CUSTOM_DATA / relative).exists()

    def nav_data(self) -> Path:
        return self.resolve(EARTH_NAV)

    def fix_data(self) -> Path:
        return self.resolve(EARTH_FIX)

    def airway_data(self) -> Path:
        return self.resolve(EARTH_AWY)

    def airspace_data(self) -> Path:
        return self.resolve(AIRSPACE)

    def hold_data(self) -> Path:
        return self.resolve(EARTH_HOLD)

    def msa_data(self) -> Path:
        return self.resolve(EARTH_MSA)

    def mora_data(self) -> Path:
        return self.resolve(EARTH_MORA)

    def airport_meta_data(self) -> Path:
        return self.resolve(EARTH_APTMETA)

    def atc_data(self) -> Path | None:
        """ATC sector file; it only ships with third-party data."""
        for candidate in ATC_CANDIDATES:
            path = self.root / CUSTOM_DATA / candidate
            if path.is_file():
                return path
        return None

    def cifp(self, icao: str) -> Path:
        return self.resolve(Path(CIFP_DIR) / f"{icao.upper()}.dat")

    def global_apt(self) -> Path:
        return self.root / GLOBAL_APT

    def custom_scenery_apts(self) -> list[tuple[str, Path]]:
        """(pack name, apt.dat) for every custom scenery pack, in sorted directory order."""
        scenery = self.root / CUSTOM_SCENERY
        if not scenery.is_dir():
            return []

        packs = []
        try:
            for entry in sorted(scenery.iterdir(), key=lambda p: p.name):
                apt = entry / PACK_APT
                if entry.is_dir() and apt.is_file():
                    packs.append((entry.name, apt))
        except OSError as e:
            logger.warning("Error scanning %s: %s", scenery, e)
        return packs


def detect_installations(search_roots: list[Path] | None = None) -> list[Path]:
    """Find valid installations in the usual places.

    Args:
        search_roots: Directories to look in. Defaults to the home directory,
            the Desktop, ``/Applications`` and ``C:\\``.

    Returns:
        Installation roots that pass validation.
    """
    if search_roots is None:
        home = Path.home()
        search_roots = [home, home / "Desktop", Path("/Applications"), Path("C:/")]

    found = []
    seen = set()
    for base in search_roots:
        for name in COMMON_INSTALL_DIRS:
            candidate = base / name
            if candidate in seen:
                continue
            seen.add(candidate)
            if XPlanePaths(candidate).check().valid:
                found.append(candidate)
    return found
