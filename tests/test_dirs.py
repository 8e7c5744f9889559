"""
Tests for structconf.config.dirs module.

Tests tiered configuration directories including:
- Location resolution with a prefix
- Loading from one location and searching all of them
- Override loading order
- Saving to each location
- Program directory availability per OS
"""

from __future__ import annotations

from dataclasses import dataclass
from unittest.mock import patch

import pytest

from structconf.config.dirs import ConfigDir
from structconf.config.loader import write_config_file
from structconf.exceptions import CodecError, NoConfigLoadedError, ProgramDirError
from structconf.tags import tagged


@dataclass
class Settings:
    theme: str = tagged("default=light", default="")
    size: int = tagged("default=12", default=0)
    source: str = ""


@pytest.fixture
def cdir(config_roots, registry):
    """Provide a ConfigDir rooted in temporary system and user locations."""
    return ConfigDir(
        "myapp",
        system_root=config_roots["system"],
        program_root=config_roots["program"],
        registry=registry,
    )


@pytest.fixture
def on_windows():
    """Make the process look like Windows for program directory access."""
    with patch("structconf.config.paths._platform", return_value="win32"):
        yield


class TestConfigDirLocations:
    """Tests for ConfigDir construction and locations."""

    def test_prefix_is_appended(self, cdir, config_roots):
        """Test that system and user locations end with the prefix."""
        assert cdir.system == config_roots["system"] / "myapp"
        assert cdir.user == config_roots["user"] / "myapp"

    def test_user_directory_is_created(self, cdir):
        """Test that construction creates the user location."""
        assert cdir.user.is_dir()

    def test_system_directory_is_not_created(self, cdir):
        """Test that construction leaves the system location alone."""
        assert not cdir.system.exists()

    def test_prefix_may_be_a_path(self, config_roots):
        """Test that nested prefixes are rooted in each location."""
        cdir = ConfigDir("vendor/app", system_root=config_roots["system"])

        assert cdir.user == config_roots["user"] / "vendor" / "app"
        assert cdir.user.is_dir()

    def test_remove_user(self, cdir):
        """Test that remove_user() deletes the user location."""
        cdir.save_user_config("sub/settings.json", Settings())

        cdir.remove_user()

        assert not cdir.user.exists()

    def test_remove_user_when_missing(self, cdir):
        """Test that removing an absent user location is not an error."""
        cdir.remove_user()
        cdir.remove_user()

        assert not cdir.user.exists()


class TestSaveAndLoad:
    """Tests for per-location save and load."""

    def test_user_round_trip(self, cdir):
        """Test saving and loading in the user location."""
        cdir.save_user_config("settings.json", Settings(theme="dark", size=14))

        loaded = Settings()
        result = cdir.load_user_config("settings.json", loaded)

        assert result.path == cdir.user / "settings.json"
        assert (loaded.theme, loaded.size) == ("dark", 14)

    def test_system_round_trip_with_subdirectory(self, cdir):
        """Test that names with subdirectories are created and read."""
        cdir.save_system_config("profiles/main.yaml", Settings(theme="solar"))

        loaded = Settings()
        cdir.load_system_config("profiles/main.yaml", loaded)

        assert (cdir.system / "profiles" / "main.yaml").exists()
        assert loaded.theme == "solar"

    def test_missing_file_raises(self, cdir):
        """Test that loading a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            cdir.load_user_config("absent.json", Settings())

    def test_program_location_requires_windows(self, cdir):
        """Test that program location access fails off Windows."""
        with pytest.raises(ProgramDirError):
            cdir.save_program_config("settings.json", Settings())
        with pytest.raises(ProgramDirError):
            cdir.load_program_config("settings.json", Settings())

    def test_program_location_ignores_prefix(self, cdir, config_roots, on_windows):
        """Test that the program location is used without the prefix."""
        result = cdir.save_program_config("settings.json", Settings(theme="prog"))

        loaded = Settings()
        cdir.load_program_config("settings.json", loaded)

        assert result.path == config_roots["program"] / "settings.json"
        assert loaded.theme == "prog"


class TestLoadConfig:
    """Tests for load_config() search and override order."""

    def _write_all(self, cdir, config_roots):
        write_config_file(cdir.system / "s.json", Settings(theme="sys", size=1, source="system"))
        write_config_file(cdir.user / "s.json", Settings(theme="usr", source="user"))

    def test_first_found_wins(self, cdir, config_roots):
        """Test that without override only the first found file is loaded."""
        self._write_all(cdir, config_roots)

        loaded = Settings()
        paths = cdir.load_config("s.json", loaded)

        assert paths == [cdir.user / "s.json"]
        assert loaded.source == "user"
        assert loaded.size == 0

    def test_falls_back_to_system(self, cdir):
        """Test that the system location is used when the user file is absent."""
        write_config_file(cdir.system / "s.json", Settings(source="system"))

        loaded = Settings()
        paths = cdir.load_config("s.json", loaded)

        assert paths == [cdir.system / "s.json"]
        assert loaded.source == "system"

    def test_override_loads_all_in_order(self, cdir, config_roots):
        """Test that override loads system then user, later values winning."""
        self._write_all(cdir, config_roots)

        loaded = Settings()
        paths = cdir.load_config("s.json", loaded, override=True)

        assert paths == [cdir.system / "s.json", cdir.user / "s.json"]
        assert loaded.source == "user"
        assert loaded.theme == "usr"
        assert loaded.size == 0

    def test_override_keeps_values_missing_later(self, cdir, config_roots):
        """Test that partial later files only override what they contain."""
        write_config_file(cdir.system / "s.json", Settings(theme="sys", size=20))
        (cdir.user / "s.json").write_text('{"theme": "usr"}', encoding="utf-8")

        loaded = Settings()
        cdir.load_config("s.json", loaded, override=True)

        assert (loaded.theme, loaded.size) == ("usr", 20)

    def test_program_location_first_on_windows(self, cdir, config_roots, on_windows):
        """Test that on Windows the program location is searched first."""
        self._write_all(cdir, config_roots)
        write_config_file(config_roots["program"] / "s.json", Settings(source="program"))

        loaded = Settings()
        paths = cdir.load_config("s.json", loaded)

        assert paths == [config_roots["program"] / "s.json"]
        assert loaded.source == "program"

    def test_program_location_last_with_override(self, cdir, config_roots, on_windows):
        """Test that with override the program location is loaded last."""
        self._write_all(cdir, config_roots)
        write_config_file(config_roots["program"] / "s.json", Settings(source="program"))

        loaded = Settings()
        paths = cdir.load_config("s.json", loaded, override=True)

        assert paths[-1] == config_roots["program"] / "s.json"
        assert len(paths) == 3
        assert loaded.source == "program"

    def test_nothing_found_raises(self, cdir):
        """Test that a file found nowhere raises NoConfigLoadedError."""
        with pytest.raises(NoConfigLoadedError, match="missing.json"):
            cdir.load_config("missing.json", Settings())

    def test_broken_file_is_not_skipped(self, cdir):
        """Test that errors other than a missing file propagate."""
        (cdir.user / "s.json").write_text("{broken", encoding="utf-8")

        with pytest.raises(CodecError):
            cdir.load_config("s.json", Settings())
