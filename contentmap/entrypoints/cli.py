"""contentmap CLI entrypoint.

Command-line interface for inspecting and maintaining the documents that the
destination adapter keeps in the search index.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import tomli_w

if TYPE_CHECKING:
    from contentmap.core.sync.destination_adapter import IndexDestinationAdapter
    from contentmap.domain.config import ContentMapConfig

from contentmap.core.errors import (
    ContentMapCliError,
    config_exists_error,
    invalid_object_class_error,
)
from contentmap.domain.exceptions import ContentMapError, MalformedDocumentError
from contentmap.domain.keys import (
    ID_FIELD,
    DocumentKey,
    composite_key,
    normalize_object_class,
)
from contentmap.shared.config_io import (
    CONFIG_FILENAME,
    config_to_data,
    create_default_config_file,
)
from contentmap.version import __version__

DEFAULT_CONFIG_DIR = ".contentmap"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def handle_cli_errors(command_name: str):
    """Decorator to handle common CLI errors.

    Domain errors are converted to ContentMapCliError so they keep their hint.
    Anything unexpected is reported with a generic hint and, in verbose mode,
    a traceback.

    Args:
        command_name: Name of the command for error messages.

    Returns:
        Decorated function with error handling.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ContentMapCliError:
                raise
            except ContentMapError as e:
                raise ContentMapCliError(e.message, hint=e.hint) from e
            except Exception as e:
                ctx = click.get_current_context()
                if ctx.obj.get("verbose", False):
                    import traceback

                    traceback.print_exc()
                raise ContentMapCliError(
                    f"Unexpected error in {command_name}: {e}",
                    hint="Run with --verbose for more details",
                ) from e

        return wrapper

    return decorator


def _configure_logging(verbose: bool, quiet: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # The HTTP transport is chatty at INFO
    logging.getLogger("elastic_transport").setLevel(max(level, logging.WARNING))


def _load_config(config_dir: Path) -> ContentMapConfig:
    """Load the merged configuration for a config directory."""
    from contentmap.adapters.factory import ConfigFactory

    return ConfigFactory().create_config_provider().load(config_dir)


def _create_adapter(ctx: click.Context) -> IndexDestinationAdapter:
    """Create a destination adapter wired to the configured index client."""
    from contentmap.adapters.factory import AdapterFactory, IndexClientFactory

    config = _load_config(ctx.obj["config_dir"])
    index_client = IndexClientFactory(config).create_index_client(
        in_memory=ctx.obj["memory"]
    )
    return AdapterFactory(config).create_destination_adapter(index_client)


def _normalize_or_fail(object_class: str) -> str:
    normalized = normalize_object_class(object_class)
    if not normalized:
        invalid_object_class_error(object_class)
    return normalized


def _document_key(document: Mapping[str, Any]) -> DocumentKey:
    """Parse the composite key stored in a listed document."""
    try:
        return DocumentKey.parse(str(document[ID_FIELD]))
    except (KeyError, ValueError) as e:
        raise MalformedDocumentError(
            f"Document has no valid '{ID_FIELD}' key: {document!r}"
        ) from e


@click.group()
@click.version_option(version=__version__, prog_name="contentmap")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress non-essential output.",
)
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_DIR,
    show_default=True,
    help="Directory holding config.toml.",
)
@click.option(
    "--memory",
    is_flag=True,
    help="Use an empty in-process index instead of Elasticsearch (dry run).",
)
@click.pass_context
def cli(
    ctx: click.Context, verbose: bool, quiet: bool, config_dir: Path, memory: bool
) -> None:
    """contentmap - Batched synchronization of mapped objects into a search index."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_dir"] = config_dir
    ctx.obj["memory"] = memory
    _configure_logging(verbose, quiet)


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
@click.pass_context
@handle_cli_errors("init")
def init(ctx: click.Context, force: bool) -> None:
    """Write a default config.toml into the config directory."""
    config_path = ctx.obj["config_dir"] / CONFIG_FILENAME
    if config_path.exists() and not force:
        config_exists_error(str(config_path))

    create_default_config_file(config_path)
    if not ctx.obj["quiet"]:
        click.echo(f"✓ Created {config_path}")


@cli.command("config")
@click.pass_context
@handle_cli_errors("config")
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration."""
    config = _load_config(ctx.obj["config_dir"])
    click.echo(tomli_w.dumps(config_to_data(config)), nl=False)


@cli.command()
@click.argument("object_class", type=str)
@click.argument("object_id", type=int)
@handle_cli_errors("key")
def key(object_class: str, object_id: int) -> None:
    """Print the document key for OBJECT_CLASS and OBJECT_ID."""
    click.echo(composite_key(_normalize_or_fail(object_class), object_id))


@cli.command("list")
@click.argument("object_class", type=str)
@click.pass_context
@handle_cli_errors("list")
def list_objects(ctx: click.Context, object_class: str) -> None:
    """List indexed objects of OBJECT_CLASS by ascending object id."""
    normalized = _normalize_or_fail(object_class)
    adapter = _create_adapter(ctx)
    for document in adapter.get_objects_ordered_by_id(object_class):
        object_id = adapter.id_of(document)
        key = _document_key(document)
        if key != DocumentKey(normalized, object_id):
            logger.warning(
                "Key %s does not match objectid %s of class %s", key, object_id, normalized
            )
        click.echo(f"{object_id}\t{key}")


@cli.command()
@click.argument("object_class", type=str)
@click.argument("object_ids", type=int, nargs=-1, required=True)
@click.pass_context
@handle_cli_errors("delete")
def delete(ctx: click.Context, object_class: str, object_ids: tuple[int, ...]) -> None:
    """Delete the documents of OBJECT_CLASS with the given OBJECT_IDS."""
    _normalize_or_fail(object_class)
    adapter = _create_adapter(ctx)
    for object_id in object_ids:
        adapter.delete(adapter.create_object(object_id, object_class))
        adapter.after_object_processed()
    adapter.commit()

    if not ctx.obj["quiet"]:
        click.echo(f"✓ Deleted {len(object_ids)} document(s)")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
