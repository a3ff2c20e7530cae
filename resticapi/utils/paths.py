"""
ResticAPI - Runtime paths
Centralizes the config and log locations under the user's home directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Dict


def _default_config_dir() -> Path:
    override = os.environ.get("RESTICAPI_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "resticapi"


CONFIG_DIR = _default_config_dir()
CONFIG_PATH = CONFIG_DIR / "config.toml"
LOGS_DIR = CONFIG_DIR / "logs"


def runtime_paths_info() -> Dict[str, Any]:
    return {
        "configDir": str(CONFIG_DIR),
        "configPath": str(CONFIG_PATH),
        "logsDir": str(LOGS_DIR),
        "pythonExecutable": str(Path(sys.executable).resolve()),
    }
