"""Tool adapter exposing a Shell to an agent loop as a single tool."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from vshell.shell import Shell

TOOL_NAME = "shell"

_DESCRIPTION = """Execute bash-like commands against a sandboxed workspace, make HTTP requests, and browse web pages.

Commands run against a virtual workspace. All paths are relative to the workspace root; absolute paths and '..' are rejected. Pipes (|), && chains, heredocs, input redirection (<) and output redirection (>, >>) are supported.

Run `help` to list all commands, or `help <command>` for detailed usage, flags, and examples.

Available commands:
{commands}

Rules:
- Always quote URLs with special characters: curl 'https://api.example.com/path?a=1&b=2'
- Use $NAME to reference credentials; never paste placeholders like <API_KEY>.
- On failure, read the error message, fix the command, and retry."""


@dataclass
class ToolDefinition:
    name: str = ""
    description: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    execute: Any = None


def make_shell_tool(shell: Shell) -> ToolDefinition:
    """Create the shell tool bound to a Shell instance."""

    async def execute(command: str) -> dict[str, Any]:
        if not command or not isinstance(command, str):
            return {"success": False, "error": "Command is required"}

        result = await shell.execute(command)
        if result.ok:
            return {"success": True, "data": {"output": result.stdout, "exit_code": result.exit_code}}

        details = "\n".join(part for part in (result.stderr, result.stdout) if part)
        return {
            "success": False,
            "error": (
                f"`{command}` failed (exit {result.exit_code}): {details or 'unknown error'}. "
                "Fix the command and try again, or try a different approach."
            ),
            "data": {
                "command": command,
                "exit_code": result.exit_code,
                "stdout": result.stdout,
                "stderr": result.stderr,
            },
        }

    rows = []
    for name in shell.commands:
        handler = shell.registry.get(name)
        description = handler.help.description if handler and handler.help else ""
        rows.append(f"- {name}: {description}")

    return ToolDefinition(
        name=TOOL_NAME,
        description=_DESCRIPTION.format(commands="\n".join(rows)),
        parameters={
            "type": "object",
            "properties": {
                "command": {"type": "string", "description": "The bash command to execute"},
            },
            "required": ["command"],
        },
        execute=execute,
    )
