from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .errors import ConfigurationError

CONFIG_FILE = Path("config/patcher.yml")
STATUS_FILE_NAME = "patcher_status.json"


class PatcherConfig(BaseModel):
    patches_dir: Path = Path("patches")
    archives_dir: Path = Path("mods")
    status_file: Optional[Path] = None
    patch_suffix: str = ".class"
    archive_ext: str = "jar"

    @field_validator("archive_ext")
    @classmethod
    def _strip_dot(cls, v: str) -> str:
        v = v.lstrip(".")
        if not v:
            raise ValueError("archive_ext must not be empty")
        return v

    @field_validator("patch_suffix")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("patch_suffix must not be empty")
        return v

    @property
    def status_path(self) -> Path:
        # Lives beside the patch folders unless configured elsewhere.
        return self.status_file or self.patches_dir / STATUS_FILE_NAME

    def archive_path(self, folder_name: str) -> Path:
        return self.archives_dir / f"{folder_name}.{self.archive_ext}"

    def with_overrides(self, **overrides: Any) -> "PatcherConfig":
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return PatcherConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e


def load_config(path: Path = CONFIG_FILE) -> PatcherConfig:
    path = Path(path)
    if not path.exists():
        return PatcherConfig()
    try:
        data: Dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"cannot read config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"config {path} must be a mapping")
    try:
        return PatcherConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"invalid config {path}: {e}") from e
