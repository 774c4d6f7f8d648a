"""Line classifier for Runfile text.

Each source line gets exactly one tag. Classification is line-local except for
the three-line group header, which looks two lines ahead::

    # ---------            GROUP_OPEN
    # Build                GROUP_NAME
    # ---------            GROUP_CLOSE

    # --- Build ---        GROUP_INLINE

    b, build target?:      COMMAND_HEADER   (column 0, not a comment)
      cargo build          BODY             (any leading whitespace)
    # note                 COMMENT
                           BLANK

The patterns below are the single definition of the structural grammar; the
group assembler and any outline/folding consumer both go through
:func:`classify_lines`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

RULE_RE = re.compile(r"^#\s*-+\s*$")
GROUP_NAME_RE = re.compile(r"^#\s*(?P<name>\S.*?)\s*$")
INLINE_GROUP_RE = re.compile(r"^#\s*-+\s*(?P<name>[^\s-](?:.*?[^\s-])?)\s*-+\s*$")


class LineType(Enum):
    GROUP_OPEN = auto()      # rule line opening a three-line header
    GROUP_NAME = auto()      # "# Name" between two rules
    GROUP_CLOSE = auto()     # rule line closing a three-line header
    GROUP_INLINE = auto()    # "# --- Name ---"
    COMMAND_HEADER = auto()  # non-indented, non-comment line
    COMMENT = auto()         # non-indented "#" line
    BLANK = auto()           # whitespace only
    BODY = auto()            # indented line
    EOF = auto()             # sentinel, never emitted by the lexer


@dataclass(frozen=True)
class Line:
    type: LineType
    text: str
    line_number: int
    value: str = ""  # group name for GROUP_NAME/GROUP_INLINE, comment text for COMMENT


def is_rule(text: str) -> bool:
    return RULE_RE.match(text.rstrip()) is not None


def inline_group_name(text: str) -> str | None:
    match = INLINE_GROUP_RE.match(text.rstrip())
    if match is None:
        return None
    return match.group("name")


def _comment_text(text: str) -> str:
    return text.strip()[1:].strip()


class Lexer:
    """Tags every line of Runfile text."""

    def __init__(self, content: str, source_file: str | None = None) -> None:
        self.lines = content.splitlines()
        self.source_file = source_file

    def tokenize(self) -> list[Line]:
        tokens: list[Line] = []
        i = 0
        while i < len(self.lines):
            header = self._three_line_header(i)
            if header is not None:
                tokens.extend(header)
                i += 3
                continue
            tokens.append(self._classify(self.lines[i], i + 1))
            i += 1
        return tokens

    def _three_line_header(self, i: int) -> list[Line] | None:
        if i + 2 >= len(self.lines):
            return None
        opener, name_line, closer = self.lines[i:i + 3]
        if not (is_rule(opener) and is_rule(closer)):
            return None
        if not name_line.startswith("#") or is_rule(name_line):
            return None
        if inline_group_name(name_line) is not None:
            return None
        match = GROUP_NAME_RE.match(name_line.rstrip())
        if match is None:
            return None
        return [
            Line(LineType.GROUP_OPEN, opener, i + 1),
            Line(LineType.GROUP_NAME, name_line, i + 2, match.group("name")),
            Line(LineType.GROUP_CLOSE, closer, i + 3),
        ]

    def _classify(self, text: str, line_num: int) -> Line:
        if not text.strip():
            return Line(LineType.BLANK, text, line_num)

        if text[0].isspace():
            return Line(LineType.BODY, text, line_num)

        if text.startswith("#"):
            name = inline_group_name(text)
            if name is not None:
                return Line(LineType.GROUP_INLINE, text, line_num, name)
            return Line(LineType.COMMENT, text, line_num, _comment_text(text))

        return Line(LineType.COMMAND_HEADER, text, line_num)


def classify_lines(content: str, source_file: str | None = None) -> list[Line]:
    """Classify Runfile text into one tagged :class:`Line` per source line."""
    return Lexer(content, source_file).tokenize()
