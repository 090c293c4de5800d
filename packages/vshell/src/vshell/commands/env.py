"""env: list runtime variables, with provider values masked."""

from __future__ import annotations

from vshell.commands.base import join_lines
from vshell.types import CommandContext, CommandExample, CommandHelp, ShellResult

MASK = "***"


class EnvCommand:
    name = "env"
    help = CommandHelp(
        usage="env",
        description="List available environment variables",
        examples=[CommandExample("env", "Show all environment variables")],
        notes=[
            "Provider variables (e.g., API keys) show masked values (***)",
            "Runtime variables (set via VAR=value) show their actual values",
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        lines = [f"{key}={value}" for key, value in ctx.env.items()]
        if ctx.env_provider is not None:
            lines.extend(f"{key}={MASK}" for key in ctx.env_provider.keys() if key not in ctx.env)
        return ShellResult(stdout=join_lines(lines))
