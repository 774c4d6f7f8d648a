"""Binds raw CLI tokens to a command's declared parameters and flags.

Every declared name ends up in the environment whether or not it was given,
so scripts can reference ``$target`` or ``$RELEASE`` unconditionally:

* parameters bind under their name and its uppercase form (``$target`` and
  ``$TARGET``); omitted optional and vararg parameters bind ``""``
* a flag binds its lowercase variable to the token as typed and its uppercase
  variable to ``"true"`` (boolean) or the value after ``=``; an absent flag
  binds both to ``""``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from runfile.errors import (
    DuplicateFlagError,
    MissingFlagValueError,
    MissingRequiredArgumentError,
    UnexpectedArgumentError,
    UnexpectedFlagValueError,
    UnknownFlagError,
)
from runfile.mangle import flag_variables, parameter_variables
from runfile.models import Command, FlagSpec, Invocation, ParamKind

logger = logging.getLogger(__name__)

END_OF_FLAGS = "--"


@dataclass(frozen=True)
class _Positional:
    text: str
    flag_like: bool = False


def is_flag_like(token: str) -> bool:
    return token.startswith("-") and token != "-"


def find_flag(command: Command, token: str) -> FlagSpec | None:
    """The :class:`FlagSpec` whose short or long form matches ``token`` before any ``=``."""
    name = token.partition("=")[0]
    for flag in command.flags:
        if flag.long is not None and name == f"--{flag.long}":
            return flag
        if flag.short is not None and name == f"-{flag.short}":
            return flag
    return None


def bind(command: Command, tokens: list[str]) -> Invocation:
    """Bind ``tokens`` (everything after the command name) to ``command``."""
    positionals: list[_Positional] = []
    matched: dict[FlagSpec, str] = {}
    flag_tokens: list[str] = []

    flags_done = False
    for token in tokens:
        if flags_done:
            positionals.append(_Positional(token))
            continue
        if token == END_OF_FLAGS:
            flags_done = True
            continue
        if not is_flag_like(token):
            positionals.append(_Positional(token))
            continue

        flag = find_flag(command, token)
        if flag is None:
            if command.vararg is None:
                raise UnknownFlagError(
                    f"Unknown flag '{token}' for '{command.label}'", command, token
                )
            positionals.append(_Positional(token, flag_like=True))
            continue
        if flag in matched:
            raise DuplicateFlagError(
                f"Flag '{flag.display}' given more than once "
                f"('{matched[flag]}' and '{token}')",
                command,
                token,
            )
        _check_flag_value(command, flag, token)
        matched[flag] = token
        flag_tokens.append(token)

    variables = _bind_parameters(command, positionals)
    variables.update(_bind_flags(command, matched))
    logger.debug(
        "Bound '%s': %d positional token(s), flags=%s",
        command.label, len(positionals), flag_tokens,
    )
    return Invocation(command=command, variables=variables, flag_tokens=flag_tokens)


def _check_flag_value(command: Command, flag: FlagSpec, token: str) -> None:
    has_value = "=" in token
    if flag.takes_value and not has_value:
        raise MissingFlagValueError(
            f"Flag '{flag.display}' requires a value ({token}=<{flag.placeholder}>)",
            command,
            token,
        )
    if not flag.takes_value and has_value:
        raise UnexpectedFlagValueError(
            f"Flag '{flag.display}' does not take a value, got '{token}'",
            command,
            token,
        )


def _bind_parameters(command: Command, positionals: list[_Positional]) -> dict[str, str]:
    variables: dict[str, str] = {}
    remaining = list(positionals)

    for param in command.parameters:
        if param.kind is ParamKind.VARARG:
            value = " ".join(p.text for p in remaining)
            remaining = []
        elif remaining:
            token = remaining.pop(0)
            if token.flag_like:
                raise UnknownFlagError(
                    f"Unknown flag '{token.text}' for '{command.label}'", command, token.text
                )
            value = token.text
        elif param.kind is ParamKind.REQUIRED:
            raise MissingRequiredArgumentError(
                f"Missing required argument '{param.name}' for '{command.label}'",
                command,
                param.name,
            )
        else:
            value = ""
        for var in parameter_variables(param):
            variables[var] = value

    if remaining:
        extra = remaining[0].text
        raise UnexpectedArgumentError(
            f"Unexpected argument '{extra}' for '{command.label}'", command, extra
        )
    return variables


def _bind_flags(command: Command, matched: dict[FlagSpec, str]) -> dict[str, str]:
    variables: dict[str, str] = {}
    for flag in command.flags:
        raw_var, value_var = flag_variables(flag)
        token = matched.get(flag)
        if token is None:
            variables[raw_var] = ""
            variables[value_var] = ""
        elif flag.takes_value:
            variables[raw_var] = token
            variables[value_var] = token.partition("=")[2]
        else:
            variables[raw_var] = token
            variables[value_var] = "true"
    return variables
