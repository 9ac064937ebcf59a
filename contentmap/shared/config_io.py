"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of ContentMapConfig to/from
TOML format.
"""

import os
import platform
import tomllib
from dataclasses import asdict
from pathlib import Path
from typing import Any

from contentmap.domain.config import ContentMapConfig

CONFIG_FILENAME = "config.toml"

# Environment overrides applied after all config files
ENV_ES_HOSTS = "CONTENTMAP_ES_HOSTS"
ENV_ES_PASSWORD = "CONTENTMAP_ES_PASSWORD"


def get_global_config_path() -> Path:
    """Get the path to the global config file.

    The location is platform-dependent:
    - Linux/macOS: $XDG_CONFIG_HOME/contentmap/config.toml or
      ~/.config/contentmap/config.toml
    - Windows: %APPDATA%/contentmap/config.toml

    Returns:
        Path to the global config file (may not exist)
    """
    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "contentmap" / CONFIG_FILENAME
        return Path.home() / ".config" / "contentmap" / CONFIG_FILENAME
    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / "contentmap" / CONFIG_FILENAME
    return Path.home() / ".config" / "contentmap" / CONFIG_FILENAME


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def env_overrides(environ: dict[str, str] | None = None) -> dict[str, Any]:
    """Collect config overrides from environment variables.

    CONTENTMAP_ES_HOSTS is a comma-separated list of node URLs.

    Args:
        environ: Environment mapping (default: os.environ)

    Returns:
        Partial config data suitable for ContentMapConfig.from_partial()
    """
    env = os.environ if environ is None else environ
    elasticsearch: dict[str, Any] = {}

    hosts = env.get(ENV_ES_HOSTS, "").strip()
    if hosts:
        elasticsearch["hosts"] = [h.strip() for h in hosts.split(",") if h.strip()]
    password = env.get(ENV_ES_PASSWORD)
    if password:
        elasticsearch["password"] = password

    return {"elasticsearch": elasticsearch} if elasticsearch else {}


def config_to_data(config: ContentMapConfig) -> dict[str, Any]:
    """Convert a config into TOML-serializable data.

    None values are omitted since TOML has no null.
    """
    data: dict[str, Any] = {}
    for section, values in asdict(config).items():
        data[section] = {k: v for k, v in values.items() if v is not None}
    return data


def create_default_config_file(path: Path) -> None:
    """Create a default config.toml file with sensible defaults and comments.

    Args:
        path: Destination path for config.toml
    """
    # Template string keeps the comments that tomli_w would drop
    template = """\
# contentmap configuration
# Created by: contentmap init

[adapter]
# Pending deletes + inserts/updates that trigger a flush to the index.
# 1 flushes after every processed object.
batch_size = 20

# Page size used to enumerate indexed objects ("all of them")
max_rows = 1000000

# Fields fetched when enumerating indexed objects
fields = ["id", "objectid", "objectclass", "hash"]

[elasticsearch]
# Elasticsearch node URLs (override with CONTENTMAP_ES_HOSTS)
hosts = ["http://localhost:9200"]

# Index holding the mapped documents
index = "content"

# Basic auth; set the password via CONTENTMAP_ES_PASSWORD
# username = "elastic"

# Per-request timeout in seconds
request_timeout = 30
"""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(template)
