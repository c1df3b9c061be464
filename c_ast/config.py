"""Configuration paths and settings for c-ast."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("C_AST_HOME", str(Path.home() / ".c_ast"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

# Load configuration from TOML file (set via `c-ast set-config`)
from .config_manager import load_config  # noqa: E402

_toml_config = load_config()

LOG_LEVEL = _toml_config["log_level"]
ENCODING = _toml_config["encoding"]
JSON_INDENT = int(_toml_config["json_indent"])
SKIP_INDEX = bool(_toml_config["skip_index"])
DEFINITION_KEYWORDS = tuple(_toml_config["definition_keywords"])


def settings() -> dict:
    """Effective settings, as shown by ``c-ast show-config``."""
    return {
        "config_file": str(CONFIG_FILE),
        "log_level": LOG_LEVEL,
        "encoding": ENCODING,
        "json_indent": JSON_INDENT,
        "skip_index": SKIP_INDEX,
        "definition_keywords": list(DEFINITION_KEYWORDS),
    }
