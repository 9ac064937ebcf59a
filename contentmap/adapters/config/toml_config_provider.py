"""TOML-based configuration provider.

Loads configuration from .contentmap/config.toml with global config fallback.

Config loading priority (highest to lowest):
1. Environment: CONTENTMAP_ES_HOSTS, CONTENTMAP_ES_PASSWORD
2. Local: .contentmap/config.toml (project-specific)
3. Global: ~/.config/contentmap/config.toml (user defaults)
4. Built-in defaults
"""

import logging
from pathlib import Path

from contentmap.domain.config import ContentMapConfig
from contentmap.shared.config_io import (
    CONFIG_FILENAME,
    env_overrides,
    get_global_config_path,
    load_config_data,
)

logger = logging.getLogger(__name__)


class TomlConfigProvider:
    """Configuration provider that loads from TOML files.

    Implements config cascade:
    1. Load global config if present
    2. Load local config if present (key-level override per section)
    3. Apply environment overrides
    4. Missing values fall back to built-in defaults

    Gracefully handles missing or invalid configs with warnings.
    """

    def load(self, config_dir: Path) -> ContentMapConfig:
        """Load configuration with global fallback.

        Args:
            config_dir: Path to .contentmap directory containing config.toml

        Returns:
            ContentMapConfig instance with merged values or defaults
        """
        local_path = config_dir / CONFIG_FILENAME
        global_path = get_global_config_path()

        config = ContentMapConfig.default()

        if global_path.exists():
            try:
                global_data = load_config_data(global_path)
                config = ContentMapConfig.from_partial(config, global_data)
                logger.debug("Loaded global config from %s", global_path)
            except (FileNotFoundError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to parse global config at %s: %s. Ignoring global config.",
                    global_path,
                    e,
                )

        if local_path.exists():
            try:
                local_data = load_config_data(local_path)
                config = ContentMapConfig.from_partial(config, local_data)
                logger.debug("Loaded local config from %s", local_path)
            except (FileNotFoundError, ValueError, TypeError) as e:
                logger.warning(
                    "Failed to parse config.toml: %s. Using global/default configuration.",
                    e,
                )

        overrides = env_overrides()
        if overrides:
            try:
                config = ContentMapConfig.from_partial(config, overrides)
            except ValueError as e:
                logger.warning("Ignoring invalid environment overrides: %s", e)

        return config
