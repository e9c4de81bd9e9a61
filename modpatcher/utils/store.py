from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable

from pydantic import StrictBool, TypeAdapter, ValidationError

from .errors import StatusLoadWarning, StatusSaveError

log = logging.getLogger(__name__)

StatusRecord = Dict[str, bool]

_record_adapter = TypeAdapter(Dict[str, StrictBool])


class StatusStore:
    """File-backed map of patch folder name -> already applied."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> StatusRecord:
        """Strict read. Raises StatusLoadWarning on unreadable or malformed content."""
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StatusLoadWarning(f"cannot read {self.path}: {e}") from e
        try:
            return dict(_record_adapter.validate_json(text))
        except ValidationError as e:
            raise StatusLoadWarning(
                f"malformed status file {self.path}: {e.error_count()} error(s)"
            ) from e

    def load(self) -> StatusRecord:
        try:
            return self.read()
        except StatusLoadWarning as w:
            log.warning("%s; treating every patch folder as unprocessed", w)
            return {}

    def save(self, record: StatusRecord) -> Path:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(record, indent=2, sort_keys=True) + "\n", encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp.exists():
                tmp.unlink()
            raise StatusSaveError(f"cannot write {self.path}: {e}") from e
        return self.path

    def reset(self, names: Iterable[str]) -> StatusRecord:
        record = self.load()
        for name in names:
            record[name] = False
        self.save(record)
        return record


def load(path: Path) -> StatusRecord:
    return StatusStore(path).load()


def save(path: Path, record: StatusRecord) -> Path:
    return StatusStore(path).save(record)
