"""Tests for installation layout resolution."""

import pytest
from navdata_samples import CUSTOM_KJFK_APT, write_file

from xpnav.data.paths import XPlanePaths, detect_installations
from xpnav.errors import InvalidInstallationError


class TestValidation:
    """Tests for installation checks."""

    def test_valid_installation(self, xplane_root) -> None:
        """Test the sample installation passes."""
        result = XPlanePaths(xplane_root).check()

        assert result.valid
        assert result.errors == []
        XPlanePaths(xplane_root).validate()

    def test_missing_root(self, tmp_path) -> None:
        """Test a nonexistent root."""
        result = XPlanePaths(tmp_path / "nowhere").check()

        assert not result.valid
        assert result.errors == ["Path does not exist"]

    def test_missing_fix_file(self, xplane_root) -> None:
        """Test each missing required file is named."""
        paths = XPlanePaths(xplane_root)
        paths.fix_data().unlink()

        with pytest.raises(InvalidInstallationError, match="Missing data file: Resources/default data/earth_fix.dat"):
            paths.validate()

    def test_missing_resources(self, tmp_path) -> None:
        """Test an empty directory lists every missing piece."""
        errors = XPlanePaths(tmp_path).check().errors

        assert "Missing required directory: Resources" in errors
        assert len(errors) == 4


class TestFileResolution:
    """Tests for Custom Data precedence and optional files."""

    def test_default_location(self, xplane_root) -> None:
        """Test files resolve under default data."""
        paths = XPlanePaths(xplane_root)

        assert paths.nav_data() == xplane_root / "Resources" / "default data" / "earth_nav.dat"
        assert not paths.is_custom("earth_nav.dat")

    def test_custom_data_override(self, xplane_root) -> None:
        """Test a Custom Data copy takes precedence."""
        custom = write_file(xplane_root / "Custom Data" / "earth_nav.dat", "I\n")
        write_file(xplane_root / "Custom Data" / "airspaces" / "airspace.txt", "")
        paths = XPlanePaths(xplane_root)

        assert paths.nav_data() == custom
        assert paths.is_custom("earth_nav.dat")
        assert paths.airspace_data() == xplane_root / "Custom Data" / "airspaces" / "airspace.txt"
        assert paths.fix_data() == xplane_root / "Resources" / "default data" / "earth_fix.dat"

    def test_cifp_path(self, xplane_root) -> None:
        """Test procedure files are per-airport and uppercase."""
        assert XPlanePaths(xplane_root).cifp("kjfk").name == "KJFK.dat"
        assert XPlanePaths(xplane_root).cifp("kjfk").is_file()

    def test_atc_candidates(self, xplane_root) -> None:
        """Test the ATC file is only found in Custom Data, preferring the 1200 layout."""
        paths = XPlanePaths(xplane_root)
        assert paths.atc_data() is None

        flat = write_file(xplane_root / "Custom Data" / "atc.dat", "")
        assert paths.atc_data() == flat

        nested = write_file(xplane_root / "Custom Data" / "1200 atc data" / "Earth nav data" / "atc.dat", "")
        assert paths.atc_data() == nested


class TestCustomScenery:
    """Tests for custom scenery pack discovery."""

    def test_sorted_packs_with_apt(self, xplane_root) -> None:
        """Test only packs with an apt.dat are listed, in name order."""
        scenery = xplane_root / "Custom Scenery"
        write_file(scenery / "Z Pack" / "Earth nav data" / "apt.dat", CUSTOM_KJFK_APT)
        write_file(scenery / "A Pack" / "Earth nav data" / "apt.dat", CUSTOM_KJFK_APT)
        (scenery / "Empty Pack").mkdir()
        write_file(scenery / "scenery_packs.ini", "")

        packs = XPlanePaths(xplane_root).custom_scenery_apts()

        assert [name for name, _ in packs] == ["A Pack", "KJFK Custom", "Z Pack"]
        assert all(path.name == "apt.dat" for _, path in packs)

    def test_no_custom_scenery(self, tmp_path) -> None:
        """Test a root without Custom Scenery."""
        assert XPlanePaths(tmp_path).custom_scenery_apts() == []


class TestDetectInstallations:
    """Tests for installation discovery."""

    def test_finds_valid_install(self, xplane_root) -> None:
        """Test a valid root under a search directory is found."""
        assert detect_installations([xplane_root.parent]) == [xplane_root]

    def test_ignores_invalid(self, tmp_path) -> None:
        """Test a directory with the right name but no data is skipped."""
        (tmp_path / "X-Plane 11").mkdir()

        assert detect_installations([tmp_path]) == []
