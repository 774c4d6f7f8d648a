"""Runfile parser: assembles classified lines into groups of commands.

Structure (informal EBNF over classified lines)::

    file        := ungrouped group* EOF
    ungrouped   := command*
    group       := group_header command*
    group_header:= GROUP_OPEN GROUP_NAME GROUP_CLOSE | GROUP_INLINE
    command     := COMMENT* COMMAND_HEADER (BODY | COMMENT | BLANK)*

Comment lines directly above a header (no blank line in between) describe
that command instead of belonging to the previous command's body.
"""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from pathlib import Path

from runfile.errors import ParseError
from runfile.header import parse_header
from runfile.lexer import Lexer, Line, LineType
from runfile.models import Command, Group, Runfile

logger = logging.getLogger(__name__)

_BODY_TYPES = (LineType.BODY, LineType.COMMENT, LineType.BLANK)


class Parser:
    """Group assembler over a classified line stream."""

    def __init__(self, lines: list[Line], source_file: str | None = None) -> None:
        self.lines = lines
        self.source_file = source_file
        self.pos = 0
        self.groups: list[Group] = []
        self._group_name: str | None = None
        self._commands: list[Command] = []

    def parse(self) -> Runfile:
        """Parse the line stream into a :class:`Runfile`."""
        while not self._at_end():
            kind = self._peek().type
            if kind == LineType.GROUP_OPEN:
                self._parse_three_line_header()
            elif kind == LineType.GROUP_INLINE:
                self._open_group(self._advance().value)
            elif kind == LineType.COMMENT:
                self._parse_comment_block()
            elif kind == LineType.COMMAND_HEADER:
                self._commands.append(self._parse_command(description=None))
            else:
                line = self._advance()
                if line.type == LineType.BODY:
                    logger.debug("Ignoring indented line %d outside any command", line.line_number)
        self._close_group()
        return Runfile(groups=tuple(self.groups), source_file=self.source_file)

    def _parse_three_line_header(self) -> None:
        self._advance()  # opening rule
        name = self._advance().value
        self._advance()  # closing rule
        self._open_group(name)

    def _open_group(self, name: str) -> None:
        self._close_group()
        self._group_name = name

    def _close_group(self) -> None:
        if self._group_name is not None or self._commands:
            self.groups.append(Group(name=self._group_name, commands=tuple(self._commands)))
        self._group_name = None
        self._commands = []

    def _parse_comment_block(self) -> None:
        comments: list[str] = []
        while not self._at_end() and self._peek().type == LineType.COMMENT:
            comments.append(self._advance().value)
        if not self._at_end() and self._peek().type == LineType.COMMAND_HEADER:
            description = " ".join(c for c in comments if c) or None
            self._commands.append(self._parse_command(description=description))

    def _parse_command(self, description: str | None) -> Command:
        header = self._advance()
        skeleton = parse_header(header.text, header.line_number, self.source_file)

        span: list[Line] = []
        while not self._at_end() and self._peek().type in _BODY_TYPES:
            span.append(self._advance())

        # A comment block touching the next header is that command's description.
        if not self._at_end() and self._peek().type == LineType.COMMAND_HEADER:
            while span and span[-1].type == LineType.COMMENT:
                span.pop()
                self.pos -= 1

        body = _body_text(span)
        if not body:
            raise ParseError(
                f"Command '{skeleton.label}' has no script body",
                header.line_number,
                source=self.source_file,
            )
        logger.debug(
            "Command '%s' at line %d: %d body line(s)",
            skeleton.label, header.line_number, len(body),
        )
        return replace(skeleton, body=tuple(body), description=description)

    def _peek(self) -> Line:
        if self.pos < len(self.lines):
            return self.lines[self.pos]
        return Line(LineType.EOF, "", -1)

    def _advance(self) -> Line:
        line = self._peek()
        self.pos += 1
        return line

    def _at_end(self) -> bool:
        return self._peek().type == LineType.EOF


def _body_text(span: list[Line]) -> list[str]:
    """Strip trailing blanks and the indentation shared by the body lines."""
    while span and span[-1].type == LineType.BLANK:
        span = span[:-1]

    indents = [
        line.text[: len(line.text) - len(line.text.lstrip())]
        for line in span
        if line.type == LineType.BODY
    ]
    prefix = os.path.commonprefix(indents) if indents else ""

    body: list[str] = []
    for line in span:
        if line.type == LineType.BLANK:
            body.append("")
        elif line.type == LineType.BODY:
            body.append(line.text[len(prefix):].rstrip())
        else:
            body.append(line.text.rstrip())
    return body


def parse_runfile_string(content: str, source_file: str | None = None) -> Runfile:
    """Parse Runfile text. Raises :class:`~runfile.errors.ParseError` on bad headers."""
    lines = Lexer(content, source_file).tokenize()
    return Parser(lines, source_file).parse()


def parse_runfile_file(path: Path) -> Runfile:
    """Parse a Runfile from disk."""
    content = path.read_text()
    return parse_runfile_string(content, source_file=str(path))

