import json
import sys
from pathlib import Path

from typer.testing import CliRunner

from modpatcher.patcher.cli import app
from modpatcher.patcher.hook import RESTART_MESSAGES

runner = CliRunner()


def _args(tmp_path: Path):
    return [
        "--config", str(tmp_path / "none.yml"),
        "--patches", str(tmp_path / "patches"),
        "--mods", str(tmp_path / "mods"),
    ]


def test_apply_requests_restart_once(layout, write_class, tmp_path: Path):
    patches, _, _ = layout
    write_class(patches / "modA" / "X.class")

    r = runner.invoke(app, _args(tmp_path) + ["apply"])
    assert r.exit_code == 0
    for line in RESTART_MESSAGES:
        assert line in r.output

    r = runner.invoke(app, _args(tmp_path) + ["apply"])
    assert r.exit_code == 0
    assert RESTART_MESSAGES[0] not in r.output


def test_apply_without_patches_root(tmp_path: Path):
    r = runner.invoke(app, _args(tmp_path) + ["apply"])
    assert r.exit_code == 2


def test_launch_runs_host_when_nothing_new(layout, tmp_path: Path):
    host = [sys.executable, "-c", "raise SystemExit(3)"]
    r = runner.invoke(app, _args(tmp_path) + ["launch", "--"] + host)
    assert r.exit_code == 3


def test_launch_stops_for_restart(layout, write_class, tmp_path: Path):
    patches, _, _ = layout
    write_class(patches / "modA" / "X.class")
    marker = tmp_path / "started"
    host = [sys.executable, "-c", f"open({str(marker)!r}, 'w').close()"]

    r = runner.invoke(app, _args(tmp_path) + ["launch", "--"] + host)

    assert r.exit_code == 0
    assert RESTART_MESSAGES[0] in r.output
    assert not marker.exists()


def test_status_and_reset(layout, write_class, tmp_path: Path):
    patches, _, status = layout
    write_class(patches / "modA" / "X.class")
    runner.invoke(app, _args(tmp_path) + ["apply"])

    r = runner.invoke(app, _args(tmp_path) + ["status"])
    assert r.exit_code == 0
    assert "modA" in r.output

    r = runner.invoke(app, _args(tmp_path) + ["reset", "modA"])
    assert r.exit_code == 0
    assert json.loads(status.read_text()) == {"modA": False}

    r = runner.invoke(app, _args(tmp_path) + ["apply"])
    assert RESTART_MESSAGES[0] in r.output


def test_reset_needs_targets(layout, tmp_path: Path):
    r = runner.invoke(app, _args(tmp_path) + ["reset"])
    assert r.exit_code == 2


def test_bracketed_paths_do_not_break_output(tmp_path: Path):
    base = tmp_path / "x[" / "y]"
    base.mkdir(parents=True)
    r = runner.invoke(app, _args(base) + ["apply"])
    assert r.exit_code == 2
    assert r.exception is None or isinstance(r.exception, SystemExit)


def test_status_counts_jar_entries(layout, write_class, tmp_path: Path):
    patches, mods, _ = layout
    write_class(patches / "modA" / "a" / "X.class")
    write_class(patches / "modA" / "a" / "Y.class")
    runner.invoke(app, _args(tmp_path) + ["apply"])
    mods.joinpath("modA.jar").write_text("garbage")

    r = runner.invoke(app, _args(tmp_path) + ["status"])
    assert r.exit_code == 0
    assert "unreadable" in r.output
