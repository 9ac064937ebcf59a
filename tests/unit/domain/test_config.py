"""Tests for config domain models."""

import pytest

from contentmap.domain.config import AdapterConfig, ContentMapConfig, ElasticsearchConfig


class TestAdapterConfig:
    """Tests for AdapterConfig validation."""

    def test_defaults(self) -> None:
        config = AdapterConfig()
        assert config.batch_size == 20
        assert config.max_rows == 1_000_000
        assert config.fields == ["id", "objectid", "objectclass", "hash"]

    def test_batch_size_of_one_is_allowed(self) -> None:
        assert AdapterConfig(batch_size=1).batch_size == 1

    @pytest.mark.parametrize("batch_size", [0, -5])
    def test_rejects_non_positive_batch_size(self, batch_size: int) -> None:
        with pytest.raises(ValueError, match="batch_size must be positive"):
            AdapterConfig(batch_size=batch_size)

    def test_rejects_non_positive_max_rows(self) -> None:
        with pytest.raises(ValueError, match="max_rows must be positive"):
            AdapterConfig(max_rows=0)

    def test_rejects_empty_fields(self) -> None:
        with pytest.raises(ValueError, match="fields"):
            AdapterConfig(fields=[])

    def test_is_frozen(self) -> None:
        config = AdapterConfig()
        with pytest.raises(AttributeError):
            config.batch_size = 5  # type: ignore[misc]


class TestElasticsearchConfig:
    """Tests for ElasticsearchConfig validation."""

    def test_defaults(self) -> None:
        config = ElasticsearchConfig()
        assert config.hosts == ["http://localhost:9200"]
        assert config.index == "content"
        assert config.username is None
        assert config.request_timeout == 30

    def test_rejects_empty_hosts(self) -> None:
        with pytest.raises(ValueError, match="hosts"):
            ElasticsearchConfig(hosts=[])

    def test_rejects_empty_index(self) -> None:
        with pytest.raises(ValueError, match="index"):
            ElasticsearchConfig(index="")

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValueError, match="request_timeout"):
            ElasticsearchConfig(request_timeout=0)


class TestContentMapConfigFromPartial:
    """Tests for overlaying raw data onto a config."""

    def test_empty_data_keeps_base(self) -> None:
        base = ContentMapConfig.default()
        assert ContentMapConfig.from_partial(base, {}) == base

    def test_overrides_only_given_keys(self) -> None:
        base = ContentMapConfig.default()

        config = ContentMapConfig.from_partial(
            base, {"adapter": {"batch_size": 50}, "elasticsearch": {"index": "pages"}}
        )

        assert config.adapter.batch_size == 50
        assert config.adapter.max_rows == base.adapter.max_rows
        assert config.elasticsearch.index == "pages"
        assert config.elasticsearch.hosts == base.elasticsearch.hosts

    def test_overrides_stack(self) -> None:
        first = ContentMapConfig.from_partial(
            ContentMapConfig.default(), {"adapter": {"batch_size": 50, "max_rows": 10}}
        )
        second = ContentMapConfig.from_partial(first, {"adapter": {"batch_size": 5}})

        assert second.adapter.batch_size == 5
        assert second.adapter.max_rows == 10

    def test_unknown_keys_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown key"):
            ContentMapConfig.from_partial(
                ContentMapConfig.default(), {"adapter": {"batchsize": 5}}
            )

    def test_invalid_values_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="batch_size"):
            ContentMapConfig.from_partial(
                ContentMapConfig.default(), {"adapter": {"batch_size": 0}}
            )

    def test_non_table_section_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="must be a table"):
            ContentMapConfig.from_partial(ContentMapConfig.default(), {"adapter": 5})
