from __future__ import annotations


class PatcherError(Exception):
    pass


class ConfigurationError(PatcherError):
    """Patches root or config file unusable. Fatal for the run."""


class FolderProcessingError(PatcherError):
    def __init__(self, folder: str, cause: BaseException) -> None:
        super().__init__(f"{folder}: {cause}")
        self.folder = folder
        self.cause = cause


class StatusLoadWarning(PatcherError):
    """Status file unreadable or malformed; callers fall back to an empty record."""


class StatusSaveError(PatcherError, OSError):
    pass
