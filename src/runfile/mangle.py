"""Variable name mangling for flags and parameters.

Every flag is exposed to its script as two variables derived from its display
name: the lowercase one holds the flag token exactly as typed (handy for
forwarding to another tool) and the uppercase one holds just its value::

    --per-crate        ->  $per_crate / $PER_CRATE
    -o, --output=<f>   ->  $output    / $OUTPUT
    -v                 ->  $v         / $V

Positional parameters are bound twice with the same value, under their declared
name and its uppercase form (``target`` -> ``$target`` / ``$TARGET``).
"""

from __future__ import annotations

from runfile.models import FlagSpec, Parameter


def base_identifier(name: str) -> str:
    """Strip leading dashes and turn the remaining dashes into underscores."""
    return name.lstrip("-").replace("-", "_")


def mangle(name: str) -> tuple[str, str]:
    """Return the ``(raw, value)`` variable names for a flag name."""
    base = base_identifier(name)
    return base.lower(), base.upper()


def flag_variables(flag: FlagSpec) -> tuple[str, str]:
    return mangle(flag.name)


def parameter_variables(param: Parameter) -> tuple[str, ...]:
    """Names a positional parameter is bound under: as declared and uppercased."""
    upper = param.name.upper()
    if upper == param.name:
        return (param.name,)
    return param.name, upper
