"""Runtime configuration."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from shelfline.models.collection import DEFAULT_ICON
from shelfline.store.manager import DEFAULT_USER

DATA_DIR_ENV = "SHELFLINE_DATA_DIR"
USER_ENV = "SHELFLINE_USER"


def _default_data_dir() -> Path:
    return Path(os.getenv(DATA_DIR_ENV, "data"))


def _default_user() -> str:
    return os.getenv(USER_ENV, DEFAULT_USER)


@dataclass
class AppConfig:
    """Configuration shared by every command."""

    data_dir: Path = field(default_factory=_default_data_dir)
    user: str = field(default_factory=_default_user)
    default_icon: str = DEFAULT_ICON
    verbose: bool = False
