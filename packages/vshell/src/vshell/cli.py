"""CLI entry point for the virtual shell."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from vshell.config import ShellConfig
from vshell.env import MemoryEnvironmentProvider
from vshell.shell import Shell
from vshell.types import ShellResult
from vshell.workspace import FileWorkspaceProvider, MemoryWorkspaceProvider


def _shell_options(f):
    options = [
        click.option("--workspace", default="", help="Directory to use as the workspace (default: in-memory)"),
        click.option("--read-only", is_flag=True, help="Block rm, mkdir and redirection"),
        click.option("--writable", multiple=True, help="Path still writable in read-only mode (repeatable)"),
        click.option("--env", "env_vars", multiple=True, help="KEY=VALUE secret usable as $KEY (repeatable)"),
        click.option("--base-url", default="", help="Base URL for relative curl requests"),
        click.option("--timeout-ms", default=None, type=int, help="HTTP timeout in milliseconds"),
        click.option("--verbose", is_flag=True, help="Log each command to stderr"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _build_shell(
    workspace: str,
    read_only: bool,
    writable: tuple[str, ...],
    env_vars: tuple[str, ...],
    base_url: str,
    timeout_ms: int | None,
    verbose: bool,
) -> Shell:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    secrets: dict[str, str] = {}
    for item in env_vars:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{item}'", param_hint="--env")
        secrets[key] = value

    if workspace:
        fs = FileWorkspaceProvider(workspace)
        asyncio.run(fs.initialize())
    else:
        fs = MemoryWorkspaceProvider()

    shell = Shell(
        fs=fs,
        env_provider=MemoryEnvironmentProvider(secrets) if secrets else None,
        config=ShellConfig(base_url=base_url, timeout_ms=timeout_ms),
    )
    if read_only:
        shell.set_read_only(True, list(writable))
    return shell


def _emit(result: ShellResult) -> None:
    if result.stdout:
        click.echo(result.stdout, nl=False)
    if result.stderr:
        click.echo(result.stderr, err=True)
    sys.exit(result.exit_code)


@click.group()
def main():
    """vshell: sandboxed bash-like shell for LLM agents."""
    pass


@main.command(name="exec")
@click.argument("command")
@_shell_options
def exec_cmd(command: str, **options):
    """Execute a single command line."""
    shell = _build_shell(**options)
    _emit(asyncio.run(shell.execute(command)))


@main.command()
@click.argument("script", type=click.File("r"))
@_shell_options
def run(script, **options):
    """Run a script file ('-' reads stdin)."""
    shell = _build_shell(**options)
    _emit(asyncio.run(shell.execute(script.read())))


@main.command()
def commands():
    """List built-in commands."""
    shell = Shell()
    for handler in shell.registry.handlers():
        description = handler.help.description if handler.help else ""
        click.echo(f"{handler.name.ljust(12)} {description}")


if __name__ == "__main__":
    main()
