"""Exceptions raised while loading a Runfile and binding an invocation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from runfile.models import Command


class RunfileError(Exception):
    """Base class for every error the interpreter reports to the user."""


class ParseError(RunfileError):
    """Malformed Runfile syntax."""

    def __init__(
        self,
        message: str,
        line: int,
        column: int = 1,
        source: str | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.source = source
        super().__init__(str(self))

    def __str__(self) -> str:
        location = f"{self.line}:{self.column}"
        if self.source:
            location = f"{self.source}:{location}"
        return f"{location}: {self.message}"


class DuplicateAliasError(RunfileError):
    """The same alias is declared by two commands."""

    def __init__(self, alias: str, first: Command, second: Command) -> None:
        self.alias = alias
        self.first = first
        self.second = second
        super().__init__(
            f"Alias '{alias}' is declared by '{first.label}' (line {first.line_number}) "
            f"and '{second.label}' (line {second.line_number})"
        )


class UnknownCommandError(RunfileError):
    """No command answers to the requested alias."""

    def __init__(self, name: str, suggestions: list[str] | None = None) -> None:
        self.name = name
        self.suggestions = suggestions or []
        message = f"Command '{name}' not found"
        if self.suggestions:
            message += f" (did you mean: {', '.join(self.suggestions)}?)"
        super().__init__(message)


class RunfileNotFoundError(RunfileError):
    """No Runfile in the search path."""


class ConfigError(RunfileError):
    """Invalid .runfile.yml."""


class BindingError(RunfileError):
    """CLI tokens do not fit the command's declared parameters and flags."""

    def __init__(self, message: str, command: Command, token: str | None = None) -> None:
        self.command = command
        self.token = token
        super().__init__(message)


class MissingRequiredArgumentError(BindingError):
    """A required parameter has no token left to bind."""


class UnexpectedArgumentError(BindingError):
    """More positional tokens than declared parameters."""


class UnknownFlagError(BindingError):
    """A flag-like token matches none of the declared flags."""


class MissingFlagValueError(BindingError):
    """A value flag was given without ``=value``."""


class DuplicateFlagError(BindingError):
    """The same flag was given more than once."""


class UnexpectedFlagValueError(BindingError):
    """A boolean flag was given with ``=value``."""


class ExecutionError(RunfileError):
    """The script interpreter could not be started."""
