"""Querysmith directory and path management.

XDG Base Directory Specification compliant:
- Config: ~/.config/querysmith/config.yaml

The QSM_CONFIG environment variable points at an alternative config file.
"""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Get the config directory (XDG-compliant: ~/.config/querysmith).

    Returns:
        Path to ~/.config/querysmith (may not exist)
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(config_home) / "querysmith"


def get_config_path() -> Path:
    """Get the config file path.

    Priority: QSM_CONFIG environment variable > ~/.config/querysmith/config.yaml
    """
    env_path = os.environ.get("QSM_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"
