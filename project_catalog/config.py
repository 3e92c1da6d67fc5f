"""
Settings for the Project Catalog.

The managed directory (config document plus icons) is supplied by the host.
For the command line it comes from PROJECT_CATALOG_HOME, read from the
environment or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

CONFIG_FILENAME = "project-manager.json"
DEFAULT_HOME = Path.home() / ".project-catalog"

ENV_HOME = "PROJECT_CATALOG_HOME"
ENV_SHOW_PATH = "PROJECT_CATALOG_SHOW_PATH"
ENV_SHOW_DEFAULT_ICON = "PROJECT_CATALOG_SHOW_DEFAULT_ICON"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


@dataclass
class Settings:
    """Resolved settings for one run."""
    home: Path = DEFAULT_HOME
    show_project_path: bool = True
    show_default_icon: bool = True

    @property
    def config_file(self) -> Path:
        return self.home / CONFIG_FILENAME

    @property
    def icon_dir(self) -> Path:
        # Icons are stored flat beside the config document
        return self.home

    @classmethod
    def from_env(cls, home: Path | None = None, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            home: Explicit managed directory; overrides PROJECT_CATALOG_HOME.
            dotenv: Load a .env file from the working directory first.
        """
        if dotenv:
            load_dotenv()

        if home is None:
            env_home = os.environ.get(ENV_HOME)
            home = Path(env_home).expanduser() if env_home else DEFAULT_HOME

        return cls(
            home=Path(home),
            show_project_path=_env_flag(ENV_SHOW_PATH, True),
            show_default_icon=_env_flag(ENV_SHOW_DEFAULT_ICON, True),
        )
