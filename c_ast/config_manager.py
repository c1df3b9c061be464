"""Configuration manager for c-ast using TOML files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .config import CONFIG_FILE

SECTION = "c_ast"

DEFAULT_CONFIG: Dict[str, Any] = {
    "log_level": "WARNING",
    "encoding": "utf-8",
    "json_indent": 4,
    "skip_index": False,
    "definition_keywords": ["struct", "enum"],
}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from TOML file.

    Returns:
        The ``[c_ast]`` table merged over :data:`DEFAULT_CONFIG`.
        Falls back to the defaults if the file is missing or unreadable.
        ``C_AST_LOG_LEVEL`` overrides the configured log level.
    """
    config = dict(DEFAULT_CONFIG)
    config_file = path or CONFIG_FILE

    if config_file.exists():
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                payload = toml.load(f)
            config.update(payload.get(SECTION, {}))
        except (OSError, toml.TomlDecodeError):
            config = dict(DEFAULT_CONFIG)

    env_level = os.environ.get("C_AST_LOG_LEVEL")
    if env_level:
        config["log_level"] = env_level

    config["log_level"] = str(config["log_level"]).upper()
    config["definition_keywords"] = list(config["definition_keywords"]) or list(
        DEFAULT_CONFIG["definition_keywords"]
    )
    return config


def save_config(values: Dict[str, Any], path: Optional[Path] = None) -> bool:
    """Persist *values* under the ``[c_ast]`` table.

    Returns:
        True if saved successfully, False otherwise.
    """
    config_file = path or CONFIG_FILE
    unknown = set(values) - set(DEFAULT_CONFIG)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    try:
        config_file.parent.mkdir(parents=True, exist_ok=True)
        existing: Dict[str, Any] = {}
        if config_file.exists():
            with open(config_file, "r", encoding="utf-8") as f:
                existing = toml.load(f)
        section = existing.setdefault(SECTION, {})
        section.update(values)
        with open(config_file, "w", encoding="utf-8") as f:
            toml.dump(existing, f)
        return True
    except (OSError, toml.TomlDecodeError):
        return False
