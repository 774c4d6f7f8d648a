"""Command header grammar.

Grammar (informal EBNF)::

    header     := names (param | flag)* [':']
    names      := NAME (',' NAME)*
    param      := IDENT | IDENT '?' | '...' IDENT | IDENT '...'
    flag       := form | form ',' form
    form       := '-' CHAR [value] | '--' LONG [value]
    value      := '=' '<' PLACEHOLDER '>' | '=' PLACEHOLDER

Parameters and flags may be interleaved; parameters keep their relative
order. The first name is only the label used in listings, every name in the
list is an equally valid alias.
"""

from __future__ import annotations

import logging
import re
from typing import NoReturn

from runfile.errors import ParseError
from runfile.mangle import flag_variables, parameter_variables
from runfile.models import Command, FlagKind, FlagSpec, Parameter, ParamKind

logger = logging.getLogger(__name__)

NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.:-]*$")
PARAM_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
SHORT_RE = re.compile(r"^[A-Za-z0-9]$")
LONG_RE = re.compile(r"^[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*$")
PLACEHOLDER_RE = re.compile(r"^[A-Za-z0-9_.:/-]+$")

_Token = tuple[str, int]  # (text, 1-based column)


class HeaderParser:
    """Parses one command header line into a bodiless :class:`Command`."""

    def __init__(self, text: str, line_number: int = 1, source_file: str | None = None) -> None:
        self.text = text
        self.line_number = line_number
        self.source_file = source_file

    def parse(self) -> Command:
        tokens = self._split()
        for word, col in tokens:
            if word.startswith("#"):
                self._fail(
                    "Command comments must be on the line above the command, "
                    "not on the same line",
                    col,
                )
            if word.endswith(":"):
                self._fail("':' must follow all parameters and flags", col + len(word) - 1)
        if not tokens:
            self._fail("Command must have at least one name", 1)

        names, pos = self._parse_names(tokens)
        parameters, flags = self._parse_rest(tokens[pos:])
        logger.debug(
            "Parsed header %r: names=%s params=%d flags=%d",
            self.text, names, len(parameters), len(flags),
        )
        return Command(
            names=tuple(names),
            parameters=tuple(parameters),
            flags=tuple(flags),
            line_number=self.line_number,
            source_file=self.source_file,
        )

    def _split(self) -> list[_Token]:
        tokens = [(m.group(), m.start() + 1) for m in re.finditer(r"\S+", self.text)]
        if tokens and tokens[-1][0].endswith(":"):
            word, col = tokens.pop()
            if word != ":":
                tokens.append((word[:-1], col))
        return tokens

    def _parse_names(self, tokens: list[_Token]) -> tuple[list[str], int]:
        names: list[str] = []
        expect_more = True
        pos = 0
        while pos < len(tokens):
            word, col = tokens[pos]
            if not expect_more and not word.startswith(","):
                break
            if _is_param_or_flag(word):
                if not names:
                    self._fail(f"Command must start with a name, found '{word}'", col)
                self._fail(f"Expected an alias after ',', found '{word}'", col)

            parts = word.strip(",").split(",")
            for part in parts:
                if not part:
                    self._fail(f"Empty alias in '{word}'", col)
                if not NAME_RE.match(part):
                    self._fail(f"Invalid command name '{part}'", col)
                if part in names:
                    self._fail(f"Duplicate alias '{part}'", col)
                names.append(part)
            expect_more = word.endswith(",")
            pos += 1

        if expect_more:
            col = tokens[pos - 1][1] if pos else 1
            self._fail("Expected an alias after ','", col)
        return names, pos

    def _parse_rest(self, tokens: list[_Token]) -> tuple[list[Parameter], list[FlagSpec]]:
        parameters: list[Parameter] = []
        flags: list[FlagSpec] = []
        variables: dict[str, str] = {}

        i = 0
        while i < len(tokens):
            word, col = tokens[i]
            if word.startswith("-"):
                if word.endswith(","):
                    if i + 1 >= len(tokens) or not tokens[i + 1][0].startswith("-"):
                        self._fail(f"Expected a second flag form after '{word}'", col)
                    flag = self._parse_pair(word[:-1], tokens[i + 1][0], col)
                    i += 2
                elif "," in word:
                    first, _, second = word.partition(",")
                    flag = self._parse_pair(first, second, col)
                    i += 1
                else:
                    short, long, placeholder = self._parse_form(word, col)
                    flag = _make_flag(short, long, placeholder)
                    i += 1
                self._check_flag(flag, flags, variables, col)
                flags.append(flag)
            else:
                param = self._parse_param(word, col)
                self._check_param(param, parameters, variables, col)
                parameters.append(param)
                i += 1
        return parameters, flags

    def _parse_param(self, word: str, col: int) -> Parameter:
        if word.startswith("..."):
            name, kind = word[3:], ParamKind.VARARG
        elif word.endswith("..."):
            name, kind = word[:-3], ParamKind.VARARG
        elif word.endswith("?"):
            name, kind = word[:-1], ParamKind.OPTIONAL
        else:
            name, kind = word, ParamKind.REQUIRED
        if not PARAM_RE.match(name):
            self._fail(f"Invalid parameter '{word}'", col)
        return Parameter(name=name, kind=kind)

    def _check_param(
        self,
        param: Parameter,
        parameters: list[Parameter],
        variables: dict[str, str],
        col: int,
    ) -> None:
        if parameters and parameters[-1].kind is ParamKind.VARARG:
            self._fail(
                f"Vararg parameter '...{parameters[-1].name}' must be the last parameter",
                col,
            )
        if param.kind is ParamKind.REQUIRED and any(
            p.kind is ParamKind.OPTIONAL for p in parameters
        ):
            self._fail(
                f"Required parameter '{param.name}' cannot follow an optional parameter",
                col,
            )
        for var in parameter_variables(param):
            if var in variables:
                self._fail(
                    f"Duplicate name '{var}' (already used by {variables[var]})",
                    col,
                )
        for var in parameter_variables(param):
            variables[var] = f"parameter '{param.display}'"

    def _parse_pair(self, first: str, second: str, col: int) -> FlagSpec:
        forms = [self._parse_form(first, col), self._parse_form(second, col)]
        shorts = [f for f in forms if f[0] is not None]
        longs = [f for f in forms if f[1] is not None]
        if len(shorts) != 1 or len(longs) != 1:
            self._fail(
                f"Flag '{first}, {second}' must pair one short and one long form", col
            )
        short, _, short_placeholder = shorts[0]
        _, long, placeholder = longs[0]
        if short_placeholder is not None:
            self._fail(
                f"Value placeholder for '-{short}' belongs on '--{long}'", col
            )
        return _make_flag(short, long, placeholder)

    def _parse_form(self, word: str, col: int) -> tuple[str | None, str | None, str | None]:
        head, sep, tail = word.partition("=")
        placeholder = self._parse_placeholder(word, tail, col) if sep else None

        if head.startswith("--"):
            name = head[2:]
            if not LONG_RE.match(name):
                self._fail(f"Malformed flag '{word}'", col)
            return None, name, placeholder
        if head.startswith("-"):
            name = head[1:]
            if not SHORT_RE.match(name):
                self._fail(f"Malformed flag '{word}'", col)
            return name, None, placeholder
        self._fail(f"Malformed flag '{word}'", col)

    def _parse_placeholder(self, word: str, tail: str, col: int) -> str:
        if tail.startswith("<") or tail.endswith(">"):
            if not (tail.startswith("<") and tail.endswith(">")) or len(tail) < 2:
                self._fail(f"Unbalanced '<' '>' in value placeholder of '{word}'", col)
            tail = tail[1:-1]
        if not tail:
            self._fail(f"Missing value placeholder in '{word}'", col)
        if "<" in tail or ">" in tail:
            self._fail(f"Unbalanced '<' '>' in value placeholder of '{word}'", col)
        if not PLACEHOLDER_RE.match(tail):
            self._fail(f"Invalid value placeholder in '{word}'", col)
        return tail

    def _check_flag(
        self,
        flag: FlagSpec,
        flags: list[FlagSpec],
        variables: dict[str, str],
        col: int,
    ) -> None:
        for other in flags:
            if flag.short is not None and flag.short == other.short:
                self._fail(f"Duplicate flag '-{flag.short}'", col)
            if flag.long is not None and flag.long == other.long:
                self._fail(f"Duplicate flag '--{flag.long}'", col)
        for var in flag_variables(flag):
            if var in variables:
                self._fail(
                    f"Flag '{flag.display}' maps to variable '{var}', "
                    f"already used by {variables[var]}",
                    col,
                )
        for var in flag_variables(flag):
            variables[var] = f"flag '{flag.display}'"

    def _fail(self, message: str, column: int) -> NoReturn:
        raise ParseError(message, self.line_number, column, self.source_file)


def _is_param_or_flag(word: str) -> bool:
    return word.startswith("-") or "?" in word or "..." in word or "=" in word


def _make_flag(short: str | None, long: str | None, placeholder: str | None) -> FlagSpec:
    kind = FlagKind.VALUE if placeholder is not None else FlagKind.BOOLEAN
    return FlagSpec(short=short, long=long, kind=kind, placeholder=placeholder)


def parse_header(text: str, line_number: int = 1, source_file: str | None = None) -> Command:
    """Parse a command header line. Raises :class:`ParseError` on malformed input."""
    return HeaderParser(text, line_number, source_file).parse()
