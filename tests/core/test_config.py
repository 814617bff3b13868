"""Tests for the YAML configuration loader and navigation settings."""

from pathlib import Path

import pytest

from xpnav.core.config import DEFAULT_AIRPORT_DB, ConfigError, ConfigLoader, NavSettings


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_load_and_get_dot_notation(self, tmp_path: Path) -> None:
        """Test nested keys are reachable with dot notation."""
        path = tmp_path / "settings.yaml"
        path.write_text("resolver:\n  fallback_distance_nm: 250\nxplane:\n  path: /opt/xp\n")

        config = ConfigLoader.load(path)

        assert config.get("resolver.fallback_distance_nm") == 250
        assert config.get("xplane.path") == "/opt/xp"
        assert config.get("resolver.missing", default=1) == 1
        assert config.get("xplane.path.deeper") is None

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load(tmp_path / "nope.yaml")

    def test_load_non_mapping_root(self, tmp_path: Path) -> None:
        """Test a YAML list at the root is rejected."""
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader.load(path)

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test an empty file loads as an empty configuration."""
        path = tmp_path / "settings.yaml"
        path.write_text("")

        assert ConfigLoader.load(path).to_dict() == {}

    def test_set_creates_sections(self) -> None:
        """Test set builds intermediate sections."""
        config = ConfigLoader()
        config.set("queries.airway_limit", 10)

        assert config.get_section("queries") == {"airway_limit": 10}

    def test_get_section_errors(self) -> None:
        """Test get_section rejects missing keys and scalars."""
        config = ConfigLoader({"xplane": {"path": "/opt"}, "level": "INFO"})

        with pytest.raises(ConfigError, match="not found"):
            config.get_section("airports")
        with pytest.raises(ConfigError, match="not a section"):
            config.get_section("level")

    def test_merge_is_deep(self) -> None:
        """Test merge overrides leaves and keeps untouched siblings."""
        base = ConfigLoader({"queries": {"airway_limit": 3000, "airway_limit_all": 50000}})
        base.merge(ConfigLoader({"queries": {"airway_limit": 10}}))

        assert base.get("queries.airway_limit") == 10
        assert base.get("queries.airway_limit_all") == 50000

    def test_save_round_trip(self, tmp_path: Path) -> None:
        """Test saved configuration loads back identically."""
        config = ConfigLoader({"airports": {"database": "/tmp/a.db"}})
        path = tmp_path / "out" / "settings.yaml"

        config.save(path)

        assert ConfigLoader.load(path).to_dict() == config.to_dict()


class TestNavSettings:
    """Tests for NavSettings.from_config."""

    def test_defaults(self) -> None:
        """Test an empty configuration yields the documented defaults."""
        settings = NavSettings.from_config(ConfigLoader())

        assert settings.xplane_path is None
        assert settings.airport_db_path == DEFAULT_AIRPORT_DB
        assert settings.fallback_distance_nm == 500.0
        assert settings.airway_limit == 3000
        assert settings.airway_limit_all == 50000
        assert settings.airspace_near_radius_nm == 50.0

    def test_values_from_config(self, tmp_path: Path) -> None:
        """Test every key is read and converted."""
        config = ConfigLoader(
            {
                "xplane": {"path": str(tmp_path)},
                "airports": {"database": str(tmp_path / "a.db")},
                "resolver": {"fallback_distance_nm": "120"},
                "queries": {"airway_limit": 5, "airway_limit_all": 6, "airspace_near_radius_nm": 7},
            }
        )

        settings = NavSettings.from_config(config)

        assert settings.xplane_path == tmp_path
        assert settings.airport_db_path == tmp_path / "a.db"
        assert settings.fallback_distance_nm == 120.0
        assert (settings.airway_limit, settings.airway_limit_all) == (5, 6)
        assert settings.airspace_near_radius_nm == 7.0

    def test_invalid_number(self) -> None:
        """Test a non-numeric limit raises ConfigError."""
        config = ConfigLoader({"queries": {"airway_limit": "lots"}})

        with pytest.raises(ConfigError, match="Invalid navigation setting"):
            NavSettings.from_config(config)

    def test_shipped_settings_file(self) -> None:
        """Test the bundled settings file loads with the default limits."""
        path = Path(__file__).parents[2] / "src" / "xpnav" / "config" / "settings.yaml"

        settings = NavSettings.from_config(ConfigLoader.load(path))

        assert settings.xplane_path is None
        assert settings.fallback_distance_nm == 500.0
        assert settings.airway_limit == 3000
