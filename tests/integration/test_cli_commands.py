"""Integration tests for CLI commands using click.testing.CliRunner.

Tests the complete CLI flow end-to-end to verify:
- Command execution and exit codes
- Output formatting and messages
- Error handling and user feedback

Note: Tests prefer semantic assertions (exit codes, file existence) over
exact string matching to be resilient to cosmetic changes.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from contentmap.adapters.memory.in_memory_index import InMemoryIndexClient
from contentmap.domain.entities import SelectQuery, UpdateQuery
from contentmap.entrypoints.cli import cli
from tests.conftest import make_document
from tests.helpers import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_output_contains,
    assert_success_indicator,
)

CREATE_INDEX_CLIENT = "contentmap.adapters.factory.IndexClientFactory.create_index_client"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / ".contentmap"


def invoke(runner: CliRunner, config_dir: Path, *args: str):
    return runner.invoke(cli, ["--config-dir", str(config_dir), *args], obj={})


class TestInitCommand:
    """Tests for 'contentmap init'."""

    def test_creates_config_file(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "init")

        assert_command_success(result, context="contentmap init")
        assert_success_indicator(result)
        assert (config_dir / "config.toml").exists()

    def test_refuses_to_overwrite_without_force(
        self, runner: CliRunner, config_dir: Path
    ) -> None:
        invoke(runner, config_dir, "init")

        result = invoke(runner, config_dir, "init")

        assert_command_failed(result)
        assert_error_message(result, hint="--force")

    def test_force_overwrites(self, runner: CliRunner, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("[adapter]\nbatch_size = 3\n")

        result = invoke(runner, config_dir, "init", "--force")

        assert_command_success(result)
        assert "batch_size = 20" in (config_dir / "config.toml").read_text()

    def test_quiet_suppresses_output(self, runner: CliRunner, config_dir: Path) -> None:
        result = runner.invoke(cli, ["-q", "--config-dir", str(config_dir), "init"], obj={})

        assert_command_success(result)
        assert result.output == ""


class TestConfigCommand:
    """Tests for 'contentmap config'."""

    def test_shows_defaults(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "config")

        assert_command_success(result)
        assert_output_contains(result, "[adapter]", "batch_size = 20", 'index = "content"')

    def test_shows_local_and_environment_values(
        self, runner: CliRunner, config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_dir.mkdir()
        (config_dir / "config.toml").write_text('[elasticsearch]\nindex = "pages"\n')
        monkeypatch.setenv("CONTENTMAP_ES_HOSTS", "http://search:9200")

        result = invoke(runner, config_dir, "config")

        assert_command_success(result)
        assert_output_contains(result, 'index = "pages"', "http://search:9200")


class TestKeyCommand:
    """Tests for 'contentmap key'."""

    def test_prints_composite_key(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "key", "\\App\\Entity\\Article", "5")

        assert_command_success(result)
        assert result.output.strip() == "App-Entity-Article:5"

    def test_rejects_empty_class(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "key", "\\", "5")

        assert_command_failed(result)
        assert_error_message(result, hint="fully qualified")

    def test_rejects_non_numeric_id(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "key", "Article", "five")

        assert_command_failed(result, expected_code=2)


class TestListCommand:
    """Tests for 'contentmap list'."""

    def test_lists_objects_in_id_order(self, runner: CliRunner, config_dir: Path) -> None:
        index = InMemoryIndexClient(
            [make_document(3), make_document(1), make_document(2, object_class="App-Entity-Page")]
        )

        with patch(CREATE_INDEX_CLIENT, return_value=index):
            result = invoke(runner, config_dir, "list", "App\\Entity\\Article")

        assert_command_success(result)
        assert result.output.splitlines() == [
            "1\tApp-Entity-Article:1",
            "3\tApp-Entity-Article:3",
        ]

    def test_warns_about_key_not_matching_object(
        self, runner: CliRunner, config_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        stale = make_document(4)
        stale["objectid"] = 5
        index = InMemoryIndexClient([stale])

        with caplog.at_level(logging.WARNING), patch(CREATE_INDEX_CLIENT, return_value=index):
            result = invoke(runner, config_dir, "list", "App\\Entity\\Article")

        assert_command_success(result)
        assert result.output.splitlines() == ["5\tApp-Entity-Article:4"]
        assert "App-Entity-Article:4" in caplog.text
        assert "does not match" in caplog.text

    def test_unparsable_key_is_reported(self, runner: CliRunner, config_dir: Path) -> None:
        broken = make_document(1)
        broken["id"] = "no-separator"
        index = InMemoryIndexClient([broken])

        with patch(CREATE_INDEX_CLIENT, return_value=index):
            result = invoke(runner, config_dir, "list", "App\\Entity\\Article")

        assert_command_failed(result)
        assert_output_contains(result, "no-separator")

    def test_empty_memory_index(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "--memory", "list", "App\\Entity\\Article")

        assert_command_success(result)
        assert result.output == ""

    def test_query_failure_is_reported(self, runner: CliRunner, config_dir: Path) -> None:
        index = InMemoryIndexClient()

        with (
            patch(CREATE_INDEX_CLIENT, return_value=index),
            patch.object(index, "execute", side_effect=ConnectionError("refused")),
        ):
            result = invoke(runner, config_dir, "list", "Article")

        assert_command_failed(result)
        assert_error_message(result)
        assert_output_contains(result, "refused")


class TestDeleteCommand:
    """Tests for 'contentmap delete'."""

    def test_deletes_documents_in_one_flush(
        self, runner: CliRunner, config_dir: Path
    ) -> None:
        index = InMemoryIndexClient([make_document(1), make_document(2), make_document(3)])

        with patch(CREATE_INDEX_CLIENT, return_value=index):
            result = invoke(runner, config_dir, "delete", "App\\Entity\\Article", "1", "3")

        assert_command_success(result)
        assert_success_indicator(result)
        assert_output_contains(result, "2 document(s)")
        assert index.get("App-Entity-Article:1") is None
        assert index.get("App-Entity-Article:2") is not None
        assert index.get("App-Entity-Article:3") is None
        updates = [r for r in index.executed if isinstance(r, UpdateQuery)]
        assert len(updates) == 1
        assert not any(isinstance(r, SelectQuery) for r in index.executed)

    def test_batch_size_splits_flushes(self, runner: CliRunner, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("[adapter]\nbatch_size = 1\n")
        index = InMemoryIndexClient()

        with patch(CREATE_INDEX_CLIENT, return_value=index):
            result = invoke(runner, config_dir, "delete", "Article", "1", "2")

        assert_command_success(result)
        assert len(index.executed) == 2

    def test_requires_ids(self, runner: CliRunner, config_dir: Path) -> None:
        result = invoke(runner, config_dir, "--memory", "delete", "Article")

        assert_command_failed(result, expected_code=2)

    def test_flush_failure_shows_retry_hint(
        self, runner: CliRunner, config_dir: Path
    ) -> None:
        index = InMemoryIndexClient()

        with (
            patch(CREATE_INDEX_CLIENT, return_value=index),
            patch.object(index, "execute", side_effect=ConnectionError("timeout")),
        ):
            result = invoke(runner, config_dir, "delete", "Article", "1")

        assert_command_failed(result)
        assert_error_message(result, hint="commit() again")
