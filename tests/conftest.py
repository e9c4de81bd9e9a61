from pathlib import Path

import pytest


@pytest.fixture
def write_class():
    def write(path: Path, data: bytes = b"\xca\xfe\xba\xbe") -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    return write


@pytest.fixture
def layout(tmp_path: Path):
    patches = tmp_path / "patches"
    mods = tmp_path / "mods"
    patches.mkdir()
    return patches, mods, patches / "patcher_status.json"
