from __future__ import annotations
import os
import zipfile
import zlib
from pathlib import Path
from typing import Dict, List

# What reading or rebuilding a jar can raise besides OSError: corrupt
# streams, encrypted entries, unsupported compression.
ARCHIVE_ERRORS = (OSError, zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, ValueError)


def check_archive(archive_path: Path) -> None:
    """Open the archive once so a non-zip target fails before it is used."""
    archive_path = Path(archive_path)
    if archive_path.is_dir():
        raise IsADirectoryError(f"{archive_path} is a directory")
    if archive_path.stat().st_size > 0:
        zipfile.ZipFile(archive_path).close()


def create_empty(archive_path: Path) -> Path:
    archive_path = Path(archive_path)
    archive_path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(archive_path, "w"):
        pass
    return archive_path


def list_entries(archive_path: Path) -> List[str]:
    archive_path = Path(archive_path)
    if archive_path.stat().st_size == 0:
        return []
    with zipfile.ZipFile(archive_path) as zf:
        return zf.namelist()


def add_entries(archive_path: Path, entries: Dict[str, Path]) -> int:
    """Write ``entries`` (entry name -> source file) into the archive.

    Entries already present under the same name are replaced, everything
    else in the archive is kept. The archive is rebuilt in a temp file next
    to it and swapped in with ``os.replace``, so a failure leaves the
    original untouched. Raises one of ``ARCHIVE_ERRORS``.
    """
    archive_path = Path(archive_path)
    if not archive_path.exists():
        create_empty(archive_path)

    tmp = archive_path.with_name(archive_path.name + ".tmp")
    try:
        with zipfile.ZipFile(tmp, "w", zipfile.ZIP_DEFLATED, strict_timestamps=False) as out:
            # Zero-length files are treated as empty containers.
            if archive_path.stat().st_size > 0:
                with zipfile.ZipFile(archive_path) as src:
                    for info in src.infolist():
                        if info.filename not in entries:
                            out.writestr(info, src.read(info))
            for name, file in entries.items():
                out.write(file, name)
        os.replace(tmp, archive_path)
    finally:
        if tmp.exists():
            tmp.unlink()
    return len(entries)
