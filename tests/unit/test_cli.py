from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg", force=True)
import numpy as np
import pytest

from oscilab import cli


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    monkeypatch.delenv("OSCILAB_CONFIG", raising=False)


def test_methods_listing(capsys):
    code = cli.main(["methods"])
    captured = capsys.readouterr()
    assert code == 0
    for name in ("euler", "rk4", "adams"):
        assert name in captured.out
    assert "order=4" in captured.out


def test_run_writes_chained_samples(tmp_path: Path, capsys):
    out = tmp_path / "run.npz"
    code = cli.main([
        "run", "--variant", "averaged", "--method", "rk4",
        "--dt", "0.01", "--steps", "10", "--chain", "2",
        "--ic", "1.5", "0.25", "--out", str(out),
    ])
    captured = capsys.readouterr()
    assert code == 0
    assert "[0] rk4 samples=11" in captured.out
    assert "[1] rk4 samples=11" in captured.out

    data = np.load(out)
    assert list(data["state_names"]) == ["u1", "u2"]
    assert data["traj0"].shape == (2, 11)
    np.testing.assert_array_equal(data["traj0"][:, 0], [1.5, 0.25])
    np.testing.assert_array_equal(data["traj1"][:, 0], data["traj0"][:, -1])


def test_run_backwards_with_negative_dt(capsys):
    code = cli.main(["run", "--eps", "0", "--dt", "-0.001", "--int-time", "0.5"])
    captured = capsys.readouterr()
    assert code == 0
    assert "samples=501" in captured.out


def test_run_writes_plot(tmp_path: Path):
    target = tmp_path / "fig.png"
    code = cli.main(["run", "--steps", "50", "--dt", "0.01", "--plot", str(target)])
    assert code == 0
    assert target.exists()


@pytest.mark.parametrize(
    "argv, message",
    [
        (["run", "--method", "bogus"], "Unknown integration method"),
        (["run", "--variant", "lorenz"], "Unknown system variant"),
        (["run", "--dt", "0"], "dt"),
        (["run", "--variant", "averaged", "--ic", "1", "2", "3"], "initial_state"),
        (["run", "--chain", "0"], "--chain"),
    ],
)
def test_run_user_errors(argv, message, capsys):
    code = cli.main(argv)
    captured = capsys.readouterr()
    assert code == 1
    assert message in captured.err


def test_run_with_config(tmp_path: Path, capsys):
    cfg = tmp_path / "cfg.toml"
    cfg.write_text('[oscillator]\nmethod = "adams"\nstep_count = 5\n', encoding="utf-8")
    code = cli.main(["--config", str(cfg), "run"])
    captured = capsys.readouterr()
    assert code == 0
    assert "[0] adams samples=6" in captured.out


def test_missing_config_file(tmp_path: Path, capsys):
    code = cli.main(["--config", str(tmp_path / "nope.toml"), "run"])
    captured = capsys.readouterr()
    assert code == 1
    assert "Config file not found" in captured.err


def test_portrait_writes_grid_trajectories(tmp_path: Path, capsys):
    out = tmp_path / "portrait.npz"
    plot = tmp_path / "portrait.png"
    code = cli.main([
        "portrait", "--x-step", "4", "--y-step", "1", "--steps", "60",
        "--out", str(out), "--plot", str(plot),
    ])
    captured = capsys.readouterr()
    assert code == 0
    assert "portrait: 9 trajectories from 9 grid points" in captured.out
    data = np.load(out)
    assert data["initial"].shape == (9, 2)
    assert data["traj0"].shape == (2, 61)
    assert plot.exists()


def test_portrait_respects_point_cap(capsys):
    code = cli.main(["portrait", "--x-step", "4", "--y-step", "1", "--steps", "51", "--max-points", "4"])
    captured = capsys.readouterr()
    assert code == 0
    assert "portrait: 4 trajectories from 4 grid points" in captured.out


def test_portrait_rejects_fine_grid(capsys):
    code = cli.main(["portrait", "--x-step", "0.01"])
    captured = capsys.readouterr()
    assert code == 1
    assert "x_step" in captured.err
