"""Configuration provider port.

Defines the interface for loading and accessing application configuration.
"""

from pathlib import Path
from typing import Protocol

from contentmap.domain.config import ContentMapConfig


class ConfigProvider(Protocol):
    """Protocol for loading and providing configuration."""

    def load(self, config_dir: Path) -> ContentMapConfig:
        """Load configuration from the config directory.

        Args:
            config_dir: Path to .contentmap directory containing config.toml

        Returns:
            ContentMapConfig instance with loaded or default values

        Note:
            Implementations should gracefully fall back to defaults
            if config file is missing or invalid.
        """
        ...
