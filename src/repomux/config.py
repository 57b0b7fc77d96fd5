"""repomux runtime configuration.

There is no configuration file. Defaults live in DEFAULT_CONFIG and a few
environment variables may override them; command-line options override both.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

# Default configuration values
DEFAULT_CONFIG = {
    "discovery": {
        "marker": ".git",
    },
    "launch": {
        "editor": "nvim",
    },
    "logging": {
        "dir": None,
        "verbose": False,
    },
}

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "REPOMUX_EDITOR": ("launch", "editor"),
    "REPOMUX_LOG_DIR": ("logging", "dir"),
    "REPOMUX_VERBOSE": ("logging", "verbose"),
}

_TRUTHY = {"1", "true", "yes", "on"}


def load_config(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Load configuration (defaults + environment).

    Priority (highest first):
    1. REPOMUX_* environment variables
    2. Default values

    Args:
        environ: Environment mapping to read (default: os.environ)

    Returns:
        Merged configuration dictionary
    """
    if environ is None:
        environ = os.environ

    overrides: dict[str, dict[str, Any]] = {}
    for var, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        if key == "verbose":
            overrides.setdefault(section, {})[key] = value.strip().lower() in _TRUTHY
        elif key == "dir":
            overrides.setdefault(section, {})[key] = Path(value).expanduser()
        else:
            overrides.setdefault(section, {})[key] = value

    return _deep_merge(DEFAULT_CONFIG, overrides)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Dictionary with overriding values

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
