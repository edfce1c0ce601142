"""Tests for the driver and the command-line configuration."""

import pytest
import yaml

from trimatch import Driver
from trimatch.bin.cli import build_config
from trimatch.io import HDF5Reader, HDF5Writer
from trimatch.main import run


@pytest.fixture(name="input_file")
def fixture_input_file(tmp_path, split_track_store):
    """HDF5 file with two copies of the split track event."""
    path = str(tmp_path / "input.h5")
    writer = HDF5Writer(path)
    writer({"store": split_track_store})
    writer({"store": split_track_store})

    return path


def driver_config(input_file, output_file):
    """Minimal full-chain configuration."""
    return {
        "base": {"verbosity": "warning"},
        "geo": {"name": "wire"},
        "io": {
            "reader": {"name": "hdf5", "file_keys": input_file},
            "writer": {"name": "hdf5", "file_name": output_file},
        },
        "reco": {"cosmic_track_matching": {"min_matched_hits": 10}},
    }


class TestDriver:
    """Test the event loop."""

    def test_process(self, tmp_path, input_file):
        """Each event is read, matched and written."""
        output_file = str(tmp_path / "output.h5")
        driver = Driver(driver_config(input_file, output_file))

        assert len(driver) == 2
        data = driver.process(0)

        assert data["match_status"] == "success"
        assert data["store"].lists["clusters_w"] == (4,)
        assert len(HDF5Reader(output_file)) == 1

    def test_iterations(self, tmp_path, input_file):
        """The number of events can be capped."""
        cfg = driver_config(input_file, str(tmp_path / "output.h5"))
        cfg["base"]["iterations"] = 1
        driver = Driver(cfg)

        assert len(driver) == 1
        assert len(list(driver)) == 1

    def test_run(self, tmp_path, input_file):
        """The full chain produces consistent clusters for every event."""
        output_file = str(tmp_path / "output.h5")
        run(driver_config(input_file, output_file))

        reader = HDF5Reader(output_file)
        assert len(reader) == 2
        for data in reader:
            clusters = data["store"].get_list("clusters_w")
            assert [c.size for c in clusters] == [101]

    def test_no_reco(self, tmp_path, input_file):
        """Without algorithms, events are copied through."""
        cfg = driver_config(input_file, str(tmp_path / "output.h5"))
        del cfg["reco"]

        data = Driver(cfg).process(1)

        assert "match_status" not in data
        assert data["store"].lists["clusters_w"] == (2, 3)


class TestBuildConfig:
    """Test the command-line configuration overrides."""

    def test_overrides(self, tmp_path, input_file):
        """Input, output, entries and arbitrary keys can be overridden."""
        cfg_path = tmp_path / "cfg.yaml"
        cfg_path.write_text(
            yaml.dump(driver_config("unused.h5", str(tmp_path / "unused_out.h5")))
        )

        cfg = build_config(
            str(cfg_path),
            source=[input_file],
            output=str(tmp_path / "out.h5"),
            n=1,
            nskip=1,
            config_overrides=["reco.cosmic_track_matching.min_matched_hits=5"],
        )

        reader = cfg["io"]["reader"]
        assert reader["file_keys"] == [input_file]
        assert reader["n_entry"] == 1 and reader["n_skip"] == 1
        assert cfg["io"]["writer"]["file_name"] == str(tmp_path / "out.h5")
        assert cfg["reco"]["cosmic_track_matching"]["min_matched_hits"] == 5
        assert cfg["base"]["parent_path"] == str(tmp_path)

    def test_bad_override(self, tmp_path):
        """Overrides must be of the form key=value."""
        cfg_path = tmp_path / "cfg.yaml"
        cfg_path.write_text(yaml.dump(driver_config("in.h5", "out.h5")))

        with pytest.raises(ValueError):
            build_config(str(cfg_path), config_overrides=["base.verbosity"])

    def test_missing_reader(self, tmp_path):
        """The configuration must provide a reader."""
        cfg_path = tmp_path / "cfg.yaml"
        cfg_path.write_text("base:\n  verbosity: info\n")

        with pytest.raises(KeyError):
            build_config(str(cfg_path))
