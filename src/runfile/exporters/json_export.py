"""JSON export of a command registry, for editors and other tooling."""

from __future__ import annotations

import json
from typing import Any

from runfile.mangle import flag_variables, parameter_variables
from runfile.models import Command
from runfile.registry import Registry


def command_to_json(command: Command) -> dict[str, Any]:
    flags = []
    for flag in command.flags:
        raw_var, value_var = flag_variables(flag)
        flags.append({
            "short": flag.short,
            "long": flag.long,
            "kind": flag.kind.value,
            "placeholder": flag.placeholder,
            "variables": {"raw": raw_var, "value": value_var},
        })
    return {
        "names": list(command.names),
        "description": command.description,
        "line_number": command.line_number,
        "parameters": [
            {"name": p.name, "kind": p.kind.value, "variables": list(parameter_variables(p))}
            for p in command.parameters
        ],
        "flags": flags,
        "signature": command.signature,
        "body": list(command.body),
    }


def registry_to_json(registry: Registry) -> dict[str, Any]:
    return {
        "source_file": registry.runfile.source_file,
        "groups": [
            {
                "name": group.name,
                "commands": [command_to_json(c) for c in group.commands],
            }
            for group in registry.groups()
        ],
    }


def export_json(registry: Registry, indent: int = 2) -> str:
    """Export every group and command in ``registry`` as a JSON string."""
    return json.dumps(registry_to_json(registry), indent=indent)
