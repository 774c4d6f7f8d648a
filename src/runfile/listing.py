"""Help listing shown when `run` is invoked without a command.

Layout::

    hello                   # Say hello
    Build
      b, build target? -r, --release   # Compile
      t, test ...args

Ungrouped commands come first at column 0, then each named group with its
commands indented two spaces. Descriptions share one column across the whole
listing, rounded up to an even width.
"""

from __future__ import annotations

from collections.abc import Sequence

import click

from runfile.models import Command, Group

INDENT = "  "


def command_display(command: Command) -> str:
    text = ", ".join(command.names)
    if command.usage:
        text += f" {command.usage}"
    return text


def render_listing(groups: Sequence[Group], color: bool = False) -> str:
    """Render ``groups`` (as returned by :meth:`Registry.groups`) for the terminal."""
    rows: list[tuple[str, str | None, bool]] = []  # (text, description, is_group)
    for group in groups:
        if not group.commands:
            continue
        indent = ""
        if group.name is not None:
            if rows:
                rows.append(("", None, False))
            rows.append((group.name, None, True))
            indent = INDENT
        for command in group.commands:
            rows.append((indent + command_display(command), command.description, False))

    if not rows:
        return ""

    widest = max(len(text) for text, _, is_group in rows if not is_group)
    align = ((widest + 1) // 2) * 2

    lines: list[str] = []
    for text, description, is_group in rows:
        if is_group:
            lines.append(click.style(text, bold=True) if color else text)
        elif description:
            comment = f"# {description}"
            if color:
                comment = click.style(comment, fg="bright_black")
            lines.append(f"{text}{' ' * (align - len(text))} {comment}")
        else:
            lines.append(text)
    return "\n".join(lines) + "\n"
