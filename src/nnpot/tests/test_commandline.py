import json

import numpy as np
import pandas as pd
import pytest

from .. import formats
from ..commandline import main, tool_modules
from ..loader import read_mean_file, read_minmax_file
from ..structure import AtomicStructure


@pytest.fixture
def config_file(tmp_path, potential_dir, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "potential": {"path": str(potential_dir), "cutoff": 4.0},
        "evaluation": {"progress": False}}))
    return path


@pytest.fixture
def trajectory(tmp_path, cluster):
    struc = AtomicStructure(cluster, ["Si"]*6 + ["O"], energy=-1.0)
    struc.add_frame(cluster*0.98, energy=-1.5)
    path = tmp_path / "traj.xyz"
    formats.write(struc, filename=str(path))
    return path


class TestCommandLine:

    def test_tools(self):
        assert tool_modules() == ["nnpot_check", "nnpot_config",
                                  "nnpot_eval", "nnpot_features"]

    def test_config(self, tmp_path, capsys):
        path = tmp_path / "settings.json"
        assert main(["config", "--file", str(path),
                     "--write", "potential.cutoff", "6.5",
                     "--write", "potential.path", "Si-potential"]) == 0
        assert main(["config", "--file", str(path),
                     "--read", "potential.cutoff"]) == 0
        out = capsys.readouterr().out
        assert "'potential.cutoff' = 6.5" in out
        with open(path) as fp:
            settings = json.load(fp)
        assert settings["potential"]["path"] == "Si-potential"

    def test_check(self, config_file, trajectory, capsys):
        status = main(["check", "--config", str(config_file),
                       "--structure", str(trajectory), "--samples", "3"])
        assert status == 0
        assert "FAILED" not in capsys.readouterr().out

    def test_check_command_line_overrides(self, config_file, capsys):
        status = main(["check", "--config", str(config_file),
                       "-c", "4.5", "--angular-form", "g4"])
        assert status == 0
        out = capsys.readouterr().out
        assert "g4" in out

    def test_missing_cutoff(self, tmp_path, potential_dir, capsys):
        path = tmp_path / "incomplete.json"
        path.write_text(json.dumps({"potential": {"cutoff": None}}))
        status = main(["check", "--config", str(path),
                       "-p", str(potential_dir)])
        assert status == 1
        assert "Error:" in capsys.readouterr().err

    def test_eval(self, tmp_path, config_file, trajectory, capsys):
        output = tmp_path / "forces.csv"
        status = main(["eval", str(trajectory), "--config", str(config_file),
                       "--output", str(output)])
        assert status == 0
        df = pd.read_csv(output)
        assert list(df.columns) == ["file", "frame", "atom", "type",
                                    "energy", "fx", "fy", "fz"]
        assert len(df) == 14
        assert list(df["type"][:7]) == ["Si"]*6 + ["O"]
        for frame, group in df.groupby("frame"):
            assert np.allclose(group[["fx", "fy", "fz"]].sum().values, 0.0,
                               atol=1e-8)

    def test_eval_unknown_format(self, tmp_path, config_file, capsys):
        path = tmp_path / "structure.unknown"
        path.write_text("")
        status = main(["eval", str(path), "--config", str(config_file)])
        assert status == 1
        assert "Failed to guess format" in capsys.readouterr().err

    def test_features(self, tmp_path, config_file, trajectory, descriptors):
        output = tmp_path / "features.h5"
        stats = tmp_path / "statistics"
        status = main(["features", str(trajectory), "--config",
                       str(config_file), "--output", str(output),
                       "--statistics", str(stats)])
        assert status == 0
        assert output.exists()
        minmax = read_minmax_file(stats / "minmax.txt")
        mean = read_mean_file(stats / "mean.txt")
        assert minmax.shape == (len(descriptors), 2)
        assert np.all(minmax[:, 0] <= 0.0)
        assert np.all(minmax[:, 1] >= 0.0)
        assert mean.shape == (len(descriptors),)
