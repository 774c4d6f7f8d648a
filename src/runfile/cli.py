"""Click CLI entry point for runfile."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from runfile import __version__
from runfile.binder import bind
from runfile.config import find_runfile, load_config
from runfile.errors import BindingError, ExecutionError, RunfileError
from runfile.models import RunConfig, Runfile
from runfile.registry import Registry

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_NOT_FOUND = 127


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.version_option(version=__version__, prog_name="run")
@click.option(
    "--file", "-f", "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Runfile to use instead of searching upwards from the current directory",
)
@click.option("--shell", default=None, help="Interpreter for scripts without a shebang")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored listing")
@click.option(
    "--format", "fmt", type=click.Choice(["text", "json"]), default="text",
    help="Listing format when no command is given",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging on stderr")
@click.argument("command", required=False)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(
    ctx: click.Context,
    file_path: Path | None,
    shell: str | None,
    no_color: bool,
    fmt: str,
    verbose: bool,
    command: str | None,
    args: tuple[str, ...],
) -> None:
    """Run COMMAND from the nearest Runfile, or list every command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config, runfile = _load(file_path, shell, no_color)
        registry = Registry(runfile)
    except RunfileError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)
        return

    if command is None:
        if fmt == "json":
            from runfile.exporters.json_export import export_json

            click.echo(export_json(registry))
        else:
            from runfile.listing import render_listing

            click.echo(render_listing(registry.groups(), color=config.color), nl=False)
        return

    try:
        resolved = registry.lookup(command)
        invocation = bind(resolved, list(args))
    except BindingError as e:
        click.echo(f"Error: {e}", err=True)
        usage = " ".join(filter(None, [e.command.label, e.command.usage]))
        click.echo(f"Usage: run {usage}", err=True)
        ctx.exit(EXIT_USAGE)
        return
    except RunfileError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)
        return

    from runfile.runner import execute, make_executor

    try:
        status = execute(invocation, make_executor(config))
    except ExecutionError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_NOT_FOUND)
        return
    ctx.exit(status)


def _load(
    file_path: Path | None, shell: str | None, no_color: bool
) -> tuple[RunConfig, Runfile]:
    """Locate the Runfile, load its config, and parse it."""
    from runfile.parser import parse_runfile_file

    cwd = Path.cwd().resolve()
    config: RunConfig | None = None
    if file_path is None:
        # discovery needs runfile_names from the starting directory
        config = load_config(cwd)
        file_path = find_runfile(cwd, config.runfile_names)
    path = file_path.resolve()
    if config is None or path.parent != cwd:
        config = load_config(path.parent)

    if shell:
        config.shell = shell
    if no_color:
        config.color = False
    return config, parse_runfile_file(path)