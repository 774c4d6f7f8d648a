"""Script execution."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Mapping

from runfile.errors import ExecutionError
from runfile.models import Command, Invocation, RunConfig

logger = logging.getLogger(__name__)

Executor = Callable[[Command, Mapping[str, str]], int]


def interpreter_for(command: Command, shell: str = "sh") -> list[str]:
    """The argv prefix that runs ``command``: its shebang if it has one, else ``shell``."""
    if command.shebang is not None:
        return shlex.split(command.shebang[2:].strip())
    return shlex.split(shell)


def run_script(
    command: Command,
    env: Mapping[str, str],
    shell: str = "sh",
    inherit_env: bool = True,
) -> int:
    """Run a command's script with ``env`` exported and return its exit status.

    stdin, stdout and stderr are inherited from the current process.
    """
    argv = interpreter_for(command, shell) + ["-c", command.script]
    process_env = dict(os.environ) if inherit_env else {}
    process_env.update(env)

    logger.debug("Running '%s' with %s, %d bound variable(s)", command.label, argv[0], len(env))
    try:
        proc = subprocess.run(argv, env=process_env, check=False)
    except FileNotFoundError as exc:
        raise ExecutionError(f"Interpreter not found: {argv[0]}") from exc
    except PermissionError as exc:
        raise ExecutionError(f"Interpreter is not executable: {argv[0]}") from exc
    if proc.returncode < 0:
        # killed by a signal; report it the way a shell does
        return 128 - proc.returncode
    logger.debug("%s exited with %d", argv[0], proc.returncode)
    return proc.returncode


def make_executor(config: RunConfig) -> Executor:
    """An executor bound to the configured shell and environment policy."""

    def execute(command: Command, env: Mapping[str, str]) -> int:
        return run_script(command, env, shell=config.shell, inherit_env=config.inherit_env)

    return execute


def execute(invocation: Invocation, executor: Executor) -> int:
    """Hand a bound invocation to ``executor``."""
    return executor(invocation.command, invocation.variables)
