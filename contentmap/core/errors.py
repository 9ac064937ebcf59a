"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all contentmap CLI commands.
"""

from typing import NoReturn

import click


class ContentMapCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise ContentMapCliError(
            "Cannot reach the search index",
            hint="Check [elasticsearch] hosts in .contentmap/config.toml"
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        """Initialize the error with message and optional hint.

        Args:
            message: The primary error message.
            hint: Optional actionable suggestion for the user.
        """
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present.

        Returns:
            Formatted error message, with hint on a new line if provided.
        """
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def config_exists_error(path: str) -> NoReturn:
    """Raise error when init would overwrite an existing config.

    Args:
        path: The existing config file.

    Raises:
        ContentMapCliError: Always raises with --force hint.
    """
    raise ContentMapCliError(
        f"Config file already exists: {path}",
        hint="Use 'contentmap init --force' to overwrite it",
    )


def invalid_object_class_error(object_class: str) -> NoReturn:
    """Raise error when an object class name cannot be normalized.

    Args:
        object_class: The rejected class name.

    Raises:
        ContentMapCliError: Always raises with naming hint.
    """
    raise ContentMapCliError(
        f"Invalid object class {object_class!r}",
        hint="Pass a fully qualified class name, e.g. 'App\\Entity\\Article'",
    )
