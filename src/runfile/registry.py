"""Command registry: alias lookup over a parsed Runfile."""

from __future__ import annotations

import difflib
import logging

from runfile.errors import DuplicateAliasError, UnknownCommandError
from runfile.models import Command, Group, Runfile

logger = logging.getLogger(__name__)


class Registry:
    """Read-only mapping from every alias to the command that declares it.

    Construction fails as a whole on the first alias declared twice, so a
    registry never holds a partial view of a Runfile.
    """

    def __init__(self, runfile: Runfile) -> None:
        self.runfile = runfile
        aliases: dict[str, Command] = {}
        for command in runfile.commands:
            for alias in command.names:
                owner = aliases.get(alias)
                if owner is not None:
                    raise DuplicateAliasError(alias, owner, command)
                aliases[alias] = command
        self._aliases = aliases
        logger.debug(
            "Registry built: %d command(s), %d alias(es)",
            len(runfile.commands), len(aliases),
        )

    def __contains__(self, alias: str) -> bool:
        return alias in self._aliases

    def __len__(self) -> int:
        return len(self.runfile.commands)

    @property
    def aliases(self) -> list[str]:
        return list(self._aliases)

    def lookup(self, name: str) -> Command:
        """Return the command answering to ``name``."""
        try:
            return self._aliases[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, self._aliases, n=3, cutoff=0.6)
            raise UnknownCommandError(name, suggestions) from None

    def groups(self) -> list[Group]:
        """Groups in source order, for listings."""
        return list(self.runfile.groups)
