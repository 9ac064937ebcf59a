"""Config domain models for contentmap.

Configuration is stored in .contentmap/config.toml and describes how the
destination adapter batches writes and how it reaches the search index.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any


@dataclass(frozen=True)
class AdapterConfig:
    """Configuration for the batching destination adapter.

    Attributes:
        batch_size: Pending deletes plus writes that trigger a flush after an
                    object is processed. 1 flushes after every object.
        max_rows: Page size used when enumerating indexed objects. Large
                  enough to be treated as "all matching documents".
        fields: Fields requested when enumerating indexed objects.

    Raises:
        ValueError: If batch_size or max_rows is not positive, or fields is empty.
    """

    batch_size: int = 20
    max_rows: int = 1_000_000
    fields: list[str] = field(
        default_factory=lambda: ["id", "objectid", "objectclass", "hash"]
    )

    def __post_init__(self) -> None:
        """Validate adapter config after initialization."""
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.max_rows <= 0:
            raise ValueError(f"max_rows must be positive, got {self.max_rows}")
        if not self.fields:
            raise ValueError("fields cannot be empty")


@dataclass(frozen=True)
class ElasticsearchConfig:
    """Configuration for the Elasticsearch index client.

    Attributes:
        hosts: Node URLs (default: ["http://localhost:9200"])
        index: Name of the index holding the mapped documents
        username: Basic auth user, or None for no authentication
        password: Basic auth password
        request_timeout: Per-request timeout in seconds

    Raises:
        ValueError: If hosts or index is empty, or request_timeout is not positive.
    """

    hosts: list[str] = field(default_factory=lambda: ["http://localhost:9200"])
    index: str = "content"
    username: str | None = None
    password: str | None = None
    request_timeout: int = 30

    def __post_init__(self) -> None:
        """Validate Elasticsearch config after initialization."""
        if not self.hosts:
            raise ValueError("hosts cannot be empty")
        if not self.index:
            raise ValueError("index cannot be empty")
        if self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )


@dataclass(frozen=True)
class ContentMapConfig:
    """Complete contentmap configuration.

    Attributes:
        adapter: Batching adapter configuration
        elasticsearch: Index client configuration
    """

    adapter: AdapterConfig = field(default_factory=AdapterConfig)
    elasticsearch: ElasticsearchConfig = field(default_factory=ElasticsearchConfig)

    @staticmethod
    def default() -> "ContentMapConfig":
        """Create a config with all default values."""
        return ContentMapConfig(
            adapter=AdapterConfig(),
            elasticsearch=ElasticsearchConfig(),
        )

    @staticmethod
    def from_partial(
        base: "ContentMapConfig", data: dict[str, Any]
    ) -> "ContentMapConfig":
        """Overlay raw config data onto an existing config.

        Keys present in a section replace the base values; missing keys keep
        them. Each section is re-validated.

        Args:
            base: Config providing values for missing keys.
            data: Parsed TOML data, e.g. {"adapter": {"batch_size": 50}}.

        Returns:
            New ContentMapConfig with the overrides applied.

        Raises:
            ValueError: If a section has unknown keys or invalid values.
        """
        sections: dict[str, Any] = {}
        for section_field in fields(base):
            name = section_field.name
            overrides = data.get(name)
            if not overrides:
                continue
            if not isinstance(overrides, dict):
                raise ValueError(f"Section [{name}] must be a table")
            section = getattr(base, name)
            known = {f.name for f in fields(section)}
            unknown = sorted(set(overrides) - known)
            if unknown:
                raise ValueError(
                    f"Unknown key(s) in [{name}]: {', '.join(unknown)}"
                )
            sections[name] = replace(section, **overrides)
        return replace(base, **sections)
