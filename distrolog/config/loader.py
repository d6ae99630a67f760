"""
Configuration loading and merging for distrolog.

Configuration is optional. Built-in defaults cover the public GitHub API and
both product lines; a YAML file can override any part of them.

Configuration Layers
--------------------
1. **Built-in defaults** (DEFAULT_CONFIG)
   - GitHub API root and token reference
   - HTTP timeout for artifact retrieval
   - GitHub organization per product line

2. **User file** (``--config distrolog.yaml``)
   - Optional; overrides the built-in defaults

Merge Behavior
--------------
The loader performs deep merging with "last wins" semantics:
  - **Dicts**: Recursively merged (keys from overlay override base)
  - **Lists**: Completely replaced (NOT appended/extended)
  - **Scalars**: Overwritten (strings, numbers, booleans)

Environment Expansion
---------------------
String values of the form ``${VAR}`` are replaced by the environment
variable's value after merging, or None when it is unset. This keeps tokens
out of configuration files:

    github:
      token: ${GITHUB_TOKEN}

Error Handling
--------------
- ConfigError: file missing, YAML syntax error, or non-mapping document
- All errors are chained with "from err" for better debugging

Examples
--------
    >>> from distrolog.config import load_config
    >>> cfg = load_config()
    >>> cfg["products"]["rke2"]["organization"]
    'rancher'
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from distrolog.exceptions import ConfigError
from distrolog.github import expand_env
from distrolog.logging import get_global_logger

DEFAULT_CONFIG: dict[str, Any] = {
    "github": {
        "api_url": "https://api.github.com",
        "token": "${GITHUB_TOKEN}",
    },
    "http": {
        "timeout": 5,
    },
    "products": {
        "k3s": {"organization": "k3s-io"},
        "rke2": {"organization": "rancher"},
    },
}


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      ConfigError - when the file does not exist or is not valid YAML
    """
    if not p.exists():
        raise ConfigError(f"config file not found: {p}")
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err
    return data


# -------------------------------
# Merge logic
# -------------------------------


def _deep_merge_dicts(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts with "overlay wins".

    Rules:
      - dict + dict -> deep merge
      - list + list -> overlay REPLACES base (not concatenated)
      - everything else -> overlay overwrites base

    This function does not mutate inputs; returns a new dict.
    """
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def _expand_env_values(value: Any) -> Any:
    """Recursively expand "${VAR}" strings in a parsed config tree."""
    if isinstance(value, dict):
        return {k: _expand_env_values(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_expand_env_values(v) for v in value]
    if isinstance(value, str):
        return expand_env(value)
    return value


# -------------------------------
# Public API
# -------------------------------


def load_config(path: Path | None = None) -> dict[str, Any]:
    """
    Load the effective configuration.

    Steps
      1) Start from DEFAULT_CONFIG.
      2) If ``path`` is given, read it and deep-merge it on top.
      3) Expand "${VAR}" strings from the environment.

    An empty file is treated as an empty mapping.

    Raises
      ConfigError if the file is missing, unparsable, or its top level is
      not a mapping.
    """
    logger = get_global_logger()
    merged = copy.deepcopy(DEFAULT_CONFIG)

    if path is not None:
        logger.verbose("CONFIG", f"Loading: {path}")
        overlay = _load_yaml_file(path)
        if overlay is None:
            overlay = {}
        if not isinstance(overlay, dict):
            raise ConfigError(f"top-level YAML must be a mapping (dict): {path}")
        merged = _deep_merge_dicts(merged, overlay)
        logger.debug("CONFIG", f"Overrides: {', '.join(overlay) or '(none)'}")

    return _expand_env_values(merged)
