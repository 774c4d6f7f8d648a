"""Core data models for runfile."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ParamKind(Enum):
    """How a positional parameter consumes CLI tokens."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    VARARG = "vararg"


class FlagKind(Enum):
    BOOLEAN = "boolean"
    VALUE = "value"


@dataclass(frozen=True)
class Parameter:
    """A positional parameter declared on a command header."""

    name: str
    kind: ParamKind = ParamKind.REQUIRED

    @property
    def display(self) -> str:
        if self.kind is ParamKind.OPTIONAL:
            return f"{self.name}?"
        if self.kind is ParamKind.VARARG:
            return f"...{self.name}"
        return self.name


@dataclass(frozen=True)
class FlagSpec:
    """A flag declared on a command header.

    ``short`` is a single character and ``long`` a dash-separated identifier,
    both stored without their leading dashes. At least one is present.
    """

    short: str | None = None
    long: str | None = None
    kind: FlagKind = FlagKind.BOOLEAN
    placeholder: str | None = None

    def __post_init__(self) -> None:
        if self.short is None and self.long is None:
            raise ValueError("A flag needs a short or a long form")
        if self.kind is FlagKind.VALUE and not self.placeholder:
            raise ValueError("A value flag needs a placeholder")

    @property
    def name(self) -> str:
        """The form used for display and variable naming: long if declared."""
        return self.long if self.long is not None else self.short  # type: ignore[return-value]

    @property
    def takes_value(self) -> bool:
        return self.kind is FlagKind.VALUE

    @property
    def display(self) -> str:
        forms = []
        if self.short is not None:
            forms.append(f"-{self.short}")
        if self.long is not None:
            forms.append(f"--{self.long}")
        text = ", ".join(forms)
        if self.takes_value:
            text += f"=<{self.placeholder}>"
        return text


@dataclass(frozen=True)
class Command:
    """A named, aliasable unit with parameters, flags, and a script body."""

    names: tuple[str, ...]
    parameters: tuple[Parameter, ...] = ()
    flags: tuple[FlagSpec, ...] = ()
    body: tuple[str, ...] = ()
    description: str | None = None
    line_number: int = 0
    source_file: str | None = None

    @property
    def label(self) -> str:
        """The name shown in listings (the first one declared)."""
        return self.names[0]

    @property
    def vararg(self) -> Parameter | None:
        if self.parameters and self.parameters[-1].kind is ParamKind.VARARG:
            return self.parameters[-1]
        return None

    @property
    def usage(self) -> str:
        parts = [p.display for p in self.parameters]
        parts.extend(f.display for f in self.flags)
        return " ".join(parts)

    @property
    def signature(self) -> str:
        """The command rendered back into Runfile header syntax."""
        text = ", ".join(self.names)
        if self.usage:
            text += f" {self.usage}"
        return f"{text}:"

    @property
    def shebang(self) -> str | None:
        if self.body and self.body[0].startswith("#!"):
            return self.body[0]
        return None

    @property
    def script(self) -> str:
        return "\n".join(self.body)


@dataclass(frozen=True)
class Group:
    """Commands sharing a display header. ``name`` is None for the default group."""

    name: str | None
    commands: tuple[Command, ...] = ()


@dataclass(frozen=True)
class Runfile:
    """A parsed Runfile: its groups in source order."""

    groups: tuple[Group, ...] = ()
    source_file: str | None = None

    @property
    def commands(self) -> list[Command]:
        return [cmd for group in self.groups for cmd in group.commands]


@dataclass
class Invocation:
    """A command resolved against concrete CLI tokens, ready to execute."""

    command: Command
    variables: dict[str, str] = field(default_factory=dict)
    flag_tokens: list[str] = field(default_factory=list)


@dataclass
class RunConfig:
    """Interpreter settings."""

    shell: str = "sh"
    runfile_names: list[str] = field(default_factory=lambda: ["Runfile"])
    color: bool = True
    inherit_env: bool = True
