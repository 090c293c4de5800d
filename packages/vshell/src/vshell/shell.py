"""Shell execution engine.

A ``Shell`` owns one workspace, a runtime variable map and the read-only
policy. ``execute`` parses a command script, runs each pipeline in order and
stops at the first failure.
"""

from __future__ import annotations

import logging
import re

from vshell.commands import builtin_commands
from vshell.commands.base import CommandHandler, CommandRegistry
from vshell.commands.help import HelpCommand
from vshell.config import ShellConfig
from vshell.env import EnvironmentProvider
from vshell.parser import parse_command
from vshell.paths import ValidatedWorkspace
from vshell.types import CommandContext, ParsedCommand, Pipeline, ShellResult
from vshell.workspace.base import WorkspaceProvider
from vshell.workspace.memory import MemoryWorkspaceProvider

logger = logging.getLogger(__name__)

_ASSIGN_RE = re.compile(r"^(\w+)=(.*)$", re.DOTALL)
_VAR_RE = re.compile(r"\$\{(\w+)\}|\$(\w+)")

DEV_NULL = "/dev/null"
# Commands refused outright in read-only mode
WRITE_COMMANDS = frozenset({"rm", "mkdir"})


class Shell:
    """Virtual shell bound to a single workspace."""

    def __init__(
        self,
        fs: WorkspaceProvider | None = None,
        env_provider: EnvironmentProvider | None = None,
        config: ShellConfig | None = None,
    ) -> None:
        self.config = config or ShellConfig()
        if fs is None:
            fs = MemoryWorkspaceProvider(self.config.initial_context)
        self._raw_fs = fs
        self._fs = ValidatedWorkspace(fs)
        self._env: dict[str, str] = {}
        self._env_provider = env_provider
        self._read_only = False
        self._writable_paths: list[str] = []

        self._registry = CommandRegistry(builtin_commands())
        self._registry.register(HelpCommand(self._registry))

    # --- Public API ---

    async def execute(self, command: str) -> ShellResult:
        """Run a command script and return the combined result."""
        try:
            pipelines = parse_command(command)
            if not pipelines:
                return ShellResult()

            stdout: list[str] = []
            result = ShellResult()
            for pipeline in pipelines:
                result = await self._run_pipeline(pipeline)
                stdout.append(result.stdout)
                if not result.ok:
                    break
            return ShellResult(
                exit_code=result.exit_code,
                stdout="".join(stdout),
                stderr=result.stderr,
            )
        except Exception as e:
            logger.warning("Command failed: %s", e)
            return ShellResult(exit_code=1, stderr=str(e))

    def register(self, handler: CommandHandler) -> None:
        """Add a custom command, replacing any built-in of the same name."""
        self._registry.register(handler)

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def commands(self) -> list[str]:
        return self._registry.names()

    def set_read_only(self, enabled: bool, writable_paths: list[str] | None = None) -> None:
        """Toggle read-only mode.

        While enabled, ``rm`` and ``mkdir`` are refused and redirection may
        only target paths in ``writable_paths`` (exact files or directories).
        """
        self._read_only = enabled
        self._writable_paths = list(writable_paths or [])

    def is_read_only(self) -> bool:
        return self._read_only

    def set_env(self, key: str, value: str) -> None:
        self._env[key] = value

    def get_env(self) -> dict[str, str]:
        return self._env

    def set_env_provider(self, provider: EnvironmentProvider | None) -> None:
        self._env_provider = provider

    def get_env_provider(self) -> EnvironmentProvider | None:
        return self._env_provider

    def get_fs(self) -> WorkspaceProvider:
        """The underlying provider, without path validation."""
        return self._raw_fs

    # --- Internal ---

    async def _run_pipeline(self, pipeline: Pipeline) -> ShellResult:
        stdin: str | None = None
        result = ShellResult()
        last = len(pipeline.stages) - 1
        for i, stage in enumerate(pipeline.stages):
            result = await self._run_stage(stage, stdin, piped=i < last)
            if not result.ok:
                return result
            stdin = result.stdout
        return result

    async def _run_stage(self, cmd: ParsedCommand, stdin: str | None, *, piped: bool) -> ShellResult:
        assign = _ASSIGN_RE.match(cmd.command)
        if assign and not cmd.args and not piped and stdin is None:
            self._env[assign.group(1)] = self._expand(assign.group(2))
            return ShellResult()

        self._expand_command(cmd)
        logger.debug("Running %s with %d args", cmd.command, len(cmd.args))

        if self._read_only:
            refusal = self._check_read_only(cmd)
            if refusal is not None:
                logger.info("Blocked in read-only mode: %s", refusal)
                return ShellResult(exit_code=1, stderr=refusal)

        handler = self._registry.get(cmd.command)
        if handler is None:
            logger.info("Unknown command: %s", cmd.command)
            supported = ", ".join(self._registry.names())
            return ShellResult(
                exit_code=127,
                stderr=f"command not found: {cmd.command}\nAvailable commands: {supported}",
            )

        ctx = CommandContext(
            fs=self._fs,
            env=self._env,
            config=self.config,
            stdin=stdin if stdin is not None else cmd.stdin_content,
            env_provider=self._env_provider,
            piped=piped,
            can_write=self._can_write,
        )

        if cmd.input_file:
            content = await self._fs.read(cmd.input_file)
            if content is None:
                return ShellResult(exit_code=1, stderr=f"{cmd.input_file}: No such file")
            ctx.stdin = content

        result = await handler.execute(cmd.args, ctx)

        if cmd.output_file:
            if cmd.output_file != DEV_NULL:
                await self._fs.write(cmd.output_file, result.stdout)
            result = ShellResult(exit_code=result.exit_code, stderr=result.stderr)
        elif cmd.append_file:
            if cmd.append_file != DEV_NULL:
                existing = await self._fs.read(cmd.append_file) or ""
                await self._fs.write(cmd.append_file, existing + result.stdout)
            result = ShellResult(exit_code=result.exit_code, stderr=result.stderr)

        return result

    def _check_read_only(self, cmd: ParsedCommand) -> str | None:
        if cmd.command in WRITE_COMMANDS:
            return f"read-only mode: '{cmd.command}' is not allowed"
        for target in (cmd.output_file, cmd.append_file):
            if target and not self._is_writable(target):
                return f"read-only mode: cannot write to '{target}'"
        return None

    def _can_write(self, path: str) -> bool:
        return not self._read_only or self._is_writable(path)

    def _is_writable(self, path: str) -> bool:
        if path == DEV_NULL:
            return True
        target = _normalize_target(path)
        for allowed in self._writable_paths:
            allowed = _normalize_target(allowed)
            if target == allowed or target.startswith(allowed.rstrip("/") + "/"):
                return True
        return False

    def _expand(self, text: str) -> str:
        if "$" not in text:
            return text

        def lookup(match: re.Match) -> str:
            name = match.group(1) or match.group(2)
            if name in self._env:
                return self._env[name]
            if self._env_provider is not None:
                value = self._env_provider.get(name)
                if value is not None:
                    return value
            return ""

        return _VAR_RE.sub(lookup, text)

    def _expand_command(self, cmd: ParsedCommand) -> None:
        cmd.command = self._expand(cmd.command)
        cmd.args = [
            arg if i in cmd.literal_args else self._expand(arg)
            for i, arg in enumerate(cmd.args)
        ]
        if cmd.input_file:
            cmd.input_file = self._expand(cmd.input_file)
        if cmd.output_file:
            cmd.output_file = self._expand(cmd.output_file)
        if cmd.append_file:
            cmd.append_file = self._expand(cmd.append_file)
        if cmd.stdin_content is not None and not cmd.heredoc_quoted:
            cmd.stdin_content = self._expand(cmd.stdin_content)


def _normalize_target(path: str) -> str:
    if path.startswith("./"):
        path = path[2:]
    return "/" + path.lstrip("/")
