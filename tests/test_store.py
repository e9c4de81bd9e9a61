import json
from pathlib import Path

import pytest

from modpatcher.utils import store
from modpatcher.utils.errors import StatusLoadWarning, StatusSaveError
from modpatcher.utils.store import StatusStore


def test_missing_file_is_empty(tmp_path: Path):
    assert store.load(tmp_path / "status.json") == {}


@pytest.mark.parametrize("content", ["{broken", "[1, 2]", '{"modA": "yes"}', "null", ""])
def test_malformed_content_is_empty(tmp_path: Path, content: str):
    p = tmp_path / "status.json"
    p.write_text(content)
    assert store.load(p) == {}
    with pytest.raises(StatusLoadWarning):
        StatusStore(p).read()


def test_save_overwrites_whole_file(tmp_path: Path):
    p = tmp_path / "status.json"
    p.write_text(json.dumps({"old": True, "other": False}))
    store.save(p, {"modA": True})
    assert json.loads(p.read_text()) == {"modA": True}
    assert store.load(p) == {"modA": True}
    assert not (tmp_path / "status.json.tmp").exists()


def test_save_failure(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    with pytest.raises(StatusSaveError) as exc:
        store.save(blocker / "status.json", {"modA": True})
    assert isinstance(exc.value, OSError)


def test_reset_marks_folders_unapplied(tmp_path: Path):
    s = StatusStore(tmp_path / "status.json")
    s.save({"modA": True, "modB": True})
    s.reset(["modA", "modC"])
    assert s.load() == {"modA": False, "modB": True, "modC": False}
