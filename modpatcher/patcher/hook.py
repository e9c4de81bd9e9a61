from __future__ import annotations
import logging
from typing import Optional

from rich.console import Console

from ..utils.config import PatcherConfig, load_config
from ..utils.errors import ConfigurationError
from .applier import RunSummary, run_patches

log = logging.getLogger(__name__)

RESTART_MESSAGES = (
    "Some mods have been patched, please restart the game",
    "有模组被修改了，请重启游戏加载！",
)


def startup_hook(config: Optional[PatcherConfig] = None) -> RunSummary:
    """Run the patcher once at host start. Without a config, the default config file is used."""
    if config is None:
        try:
            config = load_config()
        except ConfigurationError as e:
            log.error("%s", e)
            return RunSummary(error=e)
    return run_patches(config)


def announce_restart(console: Console) -> None:
    for line in RESTART_MESSAGES:
        console.print(line, markup=False, highlight=False)
