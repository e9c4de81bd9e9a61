from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from ..utils.config import PatcherConfig
from ..utils.errors import ConfigurationError, FolderProcessingError, StatusSaveError
from ..utils.store import StatusRecord, StatusStore
from .archive import ARCHIVE_ERRORS, add_entries, check_archive, create_empty

log = logging.getLogger(__name__)

APPLIED = "applied"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass
class FolderOutcome:
    name: str
    status: str
    files_added: int = 0
    archive: Optional[Path] = None
    error: Optional[FolderProcessingError] = None


@dataclass
class RunSummary:
    files_added: int = 0
    outcomes: List[FolderOutcome] = field(default_factory=list)
    status_saved: bool = False
    error: Optional[ConfigurationError] = None

    @property
    def restart_required(self) -> bool:
        # Independent of status_saved: archives already changed on disk.
        return self.files_added > 0

    @property
    def failed(self) -> List[FolderOutcome]:
        return [o for o in self.outcomes if o.status == FAILED]


def patch_folders(patches_root: Path) -> List[Path]:
    patches_root = Path(patches_root)
    if not patches_root.is_dir():
        raise ConfigurationError(f"directory {patches_root} does not exist or is not a directory")
    try:
        return sorted((p for p in patches_root.iterdir() if p.is_dir()), key=lambda p: p.name)
    except OSError as e:
        raise ConfigurationError(f"error accessing directory {patches_root}: {e}") from e


def collect_entries(folder: Path, suffix: str) -> Dict[str, Path]:
    entries: Dict[str, Path] = {}
    for path in sorted(folder.rglob("*")):
        if path.is_file() and path.name.endswith(suffix):
            entries[path.relative_to(folder).as_posix()] = path
    return entries


def apply_folder(folder: Path, config: PatcherConfig) -> FolderOutcome:
    name = folder.name
    archive = config.archive_path(name)
    try:
        if archive.exists():
            check_archive(archive)
        else:
            create_empty(archive)
        entries = collect_entries(folder, config.patch_suffix)
        added = add_entries(archive, entries) if entries else 0
    except ARCHIVE_ERRORS as e:
        return FolderOutcome(name, FAILED, archive=archive, error=FolderProcessingError(name, e))
    for entry in entries:
        log.debug("add %s to %s", entry, archive)
    return FolderOutcome(name, APPLIED, files_added=added, archive=archive)


def run_patches(config: PatcherConfig) -> RunSummary:
    summary = RunSummary()
    store = StatusStore(config.status_path)
    record: StatusRecord = store.load()

    try:
        folders = patch_folders(config.patches_dir)
    except ConfigurationError as e:
        log.error("%s", e)
        summary.error = e
        return summary

    for folder in folders:
        if record.get(folder.name, False):
            log.info("Subfolder %s already processed, skipping.", folder.name)
            summary.outcomes.append(FolderOutcome(folder.name, SKIPPED))
            continue
        outcome = apply_folder(folder, config)
        summary.outcomes.append(outcome)
        if outcome.status == FAILED:
            log.error("Error processing %s into %s: %s", folder.name, outcome.archive, outcome.error.cause)
            continue
        log.info("Patched %s: %d file(s) into %s", folder.name, outcome.files_added, outcome.archive)
        summary.files_added += outcome.files_added
        record[folder.name] = True

    try:
        store.save(record)
        summary.status_saved = True
    except StatusSaveError as e:
        log.error("%s", e)
    return summary


def apply_patches(
    patches_root: Path,
    archives_root: Path,
    status_path: Path,
    patch_suffix: str = ".class",
    archive_ext: str = "jar",
) -> int:
    try:
        config = PatcherConfig(
            patches_dir=patches_root,
            archives_dir=archives_root,
            status_file=status_path,
            patch_suffix=patch_suffix,
            archive_ext=archive_ext,
        )
    except ValidationError as e:
        log.error("invalid patcher settings: %s", e)
        return 0
    return run_patches(config).files_added
