"""Tests for the YAML configuration loader."""

import pytest

from trimatch.config import (
    ConfigCycleError,
    ConfigIncludeError,
    ConfigPathError,
    ConfigTypeError,
    load_config,
    parse_value,
    resolve_config_path,
    set_nested_value,
)


class TestLoadConfig:
    """Test the loading of configuration files."""

    def test_simple(self, tmp_path):
        """A plain YAML file is loaded as is."""
        path = tmp_path / "simple.yaml"
        path.write_text("reco:\n  cosmic_track_matching:\n    min_matched_hits: 8\n")

        cfg = load_config(str(path))

        assert cfg == {"reco": {"cosmic_track_matching": {"min_matched_hits": 8}}}

    def test_empty(self, tmp_path):
        """An empty file is an empty configuration."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(str(path)) == {}

    def test_include_and_override(self, tmp_path):
        """Included files are merged first, then the content, then overrides."""
        (tmp_path / "base.yaml").write_text(
            "base:\n  verbosity: info\n"
            "reco:\n  cosmic_track_matching:\n"
            "    min_matched_hits: 10\n    layer_pitch: 0.3\n"
        )
        (tmp_path / "main.yaml").write_text(
            "include: base.yaml\n"
            "reco:\n  cosmic_track_matching:\n    min_matched_hits: 12\n"
            "override:\n  base.verbosity: debug\n"
        )

        cfg = load_config(str(tmp_path / "main.yaml"))

        reco = cfg["reco"]["cosmic_track_matching"]
        assert reco == {"min_matched_hits": 12, "layer_pitch": 0.3}
        assert cfg["base"]["verbosity"] == "debug"
        assert "include" not in cfg and "override" not in cfg

    def test_include_without_extension(self, tmp_path):
        """Included files can omit their extension."""
        (tmp_path / "geo.yaml").write_text("geo:\n  name: wire\n")
        (tmp_path / "main.yaml").write_text("include: [geo]\n")

        assert load_config(str(tmp_path / "main.yaml")) == {"geo": {"name": "wire"}}

    def test_inline_tags(self, tmp_path):
        """The `!include` and `!path` tags are resolved relative to the file."""
        (tmp_path / "reader.yaml").write_text("name: hdf5\n")
        (tmp_path / "main.yaml").write_text(
            "io:\n  reader: !include reader.yaml\n  input: !path data/events.h5\n"
        )

        cfg = load_config(str(tmp_path / "main.yaml"))

        assert cfg["io"]["reader"] == {"name": "hdf5"}
        assert cfg["io"]["input"] == str(tmp_path / "data" / "events.h5")

    def test_cycle(self, tmp_path):
        """Circular includes are detected."""
        (tmp_path / "a.yaml").write_text("include: b.yaml\n")
        (tmp_path / "b.yaml").write_text("include: a.yaml\n")

        with pytest.raises(ConfigCycleError) as exc_info:
            load_config(str(tmp_path / "a.yaml"))

        assert len(exc_info.value.cycle_path) == 3

    def test_missing_include(self, tmp_path):
        """Missing includes are reported."""
        (tmp_path / "main.yaml").write_text("include: nowhere.yaml\n")

        with pytest.raises(ConfigIncludeError):
            load_config(str(tmp_path / "main.yaml"))

        with pytest.raises(ConfigIncludeError):
            load_config(str(tmp_path / "absent.yaml"))

    def test_config_path(self, tmp_path, monkeypatch):
        """Files are also searched for in the configuration path."""
        (tmp_path / "shared.yaml").write_text("a: 1\n")
        monkeypatch.setenv("TRIMATCH_CONFIG_PATH", str(tmp_path))

        path = resolve_config_path("shared", current_dir="/nonexistent")

        assert path == str(tmp_path / "shared.yaml")


class TestOperations:
    """Test the configuration editing helpers."""

    def test_parse_value(self):
        """Command-line values are parsed as YAML scalars."""
        assert parse_value("8") == 8
        assert parse_value("0.5") == 0.5
        assert parse_value("true") is True
        assert parse_value("[1, 2]") == [1, 2]
        assert parse_value("clusters_u") == "clusters_u"
        assert parse_value("") == ""

    def test_set_nested_value(self):
        """Missing levels are created, values are replaced."""
        cfg = {"reco": {"cosmic_track_matching": {"min_matched_hits": 10}}}

        set_nested_value(cfg, "reco.cosmic_track_matching.min_matched_hits", 5)
        set_nested_value(cfg, "base.verbosity", "debug")

        assert cfg["reco"]["cosmic_track_matching"]["min_matched_hits"] == 5
        assert cfg["base"] == {"verbosity": "debug"}

    def test_delete(self):
        """Keys can be deleted, but only if they exist."""
        cfg = {"io": {"writer": {"name": "csv"}}}

        set_nested_value(cfg, "io.writer", None, delete=True)
        assert cfg == {"io": {}}

        with pytest.raises(ConfigPathError):
            set_nested_value(cfg, "io.writer", None, delete=True)
        with pytest.raises(ConfigPathError):
            set_nested_value(cfg, "geo.name", None, delete=True)

    def test_type_error(self):
        """Cannot traverse a value which is not a dictionary."""
        with pytest.raises(ConfigTypeError):
            set_nested_value({"base": 1}, "base.verbosity", "info")
