"""curl: transfer data from or to a server."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from vshell.commands.base import error, expand_short_flags
from vshell.config import ShellConfig
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

logger = logging.getLogger(__name__)


def resolve_url(url: str, config: ShellConfig) -> str:
    """Join a relative URL onto the configured base URL."""
    if config.base_url and not url.startswith(("http://", "https://")):
        return config.base_url.rstrip("/") + "/" + url.lstrip("/")
    return url


def request_options(config: ShellConfig) -> dict[str, Any]:
    options: dict[str, Any] = {"follow_redirects": True}
    if config.timeout_seconds is not None:
        options["timeout"] = httpx.Timeout(config.timeout_seconds)
    return options


def _status_block(response: httpx.Response) -> str:
    lines = [f"HTTP/1.1 {response.status_code} {response.reason_phrase}"]
    lines.extend(f"{key}: {value}" for key, value in response.headers.items())
    return "\n".join(lines) + "\n\n"


class CurlCommand:
    name = "curl"
    help = CommandHelp(
        usage="curl [OPTIONS] URL",
        description="Transfer data from or to a server",
        flags=[
            CommandFlag("-X METHOD", "Request method (GET, POST, PUT, DELETE, PATCH)"),
            CommandFlag("-d DATA", "Send data in request body (sets POST if no -X)"),
            CommandFlag("-H HEADER", 'Add header (e.g. "Content-Type: application/json")'),
            CommandFlag("-s", "Silent mode (accepted for compatibility)"),
            CommandFlag("-i", "Include response status and headers in output"),
            CommandFlag("-L", "Follow redirects (always on)"),
            CommandFlag("-f", "Accepted for compatibility; HTTP errors always exit non-zero"),
            CommandFlag("-o FILE", "Ignored; use shell redirection instead"),
        ],
        examples=[
            CommandExample("curl https://api.example.com/users", "GET request"),
            CommandExample(
                "curl -X POST https://api.example.com/data -d '{\"key\":\"value\"}'",
                "POST with JSON body",
            ),
            CommandExample('curl -H "Authorization: Bearer $TOKEN" https://api.example.com', "Request with auth header"),
            CommandExample("curl -s https://api.example.com | jq .data", "Fetch JSON and extract field"),
        ],
        notes=[
            "Relative URLs resolved against the configured base URL",
            "Default headers from config are included automatically",
            "Non-2xx responses exit 1 but still print the body",
            "Always quote URLs with special characters",
        ],
    )

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._client = http_client

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        method: str | None = None
        url: str | None = None
        data: str | None = None
        headers: dict[str, str] = dict(ctx.config.default_headers)
        include = False

        i = 0
        while i < len(args):
            arg = args[i]
            takes_value = arg in ("-X", "--request", "-d", "--data", "--data-raw", "-H", "--header", "-o", "--output")
            if takes_value and i + 1 >= len(args):
                return error(f"curl: option {arg}: requires parameter")
            if arg in ("-X", "--request"):
                i += 1
                method = args[i].upper()
            elif arg in ("-d", "--data", "--data-raw"):
                i += 1
                data = args[i]
            elif arg in ("-H", "--header"):
                i += 1
                name, sep, value = args[i].partition(":")
                if sep and name.strip():
                    headers[name.strip()] = value.strip()
            elif arg in ("-o", "--output"):
                i += 1
            elif arg in ("-i", "--include"):
                include = True
            elif arg in ("-s", "--silent", "-S", "--show-error", "-L", "--location", "-f", "--fail"):
                pass
            elif expand_short_flags(arg, "sSLfi"):
                include = include or "i" in arg
            elif arg.startswith("-") and len(arg) > 1:
                return error(f"curl: option {arg}: is unknown")
            else:
                url = arg
            i += 1

        if not url:
            return error("curl: no URL specified")

        url = resolve_url(url, ctx.config)
        method = method or ("POST" if data is not None else "GET")
        logger.debug("curl %s %s", method, url)

        try:
            if self._client is not None:
                response = await self._send(self._client, method, url, headers, data, ctx.config)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._send(client, method, url, headers, data, ctx.config)
        except httpx.TimeoutException as e:
            logger.warning("curl timed out: %s %s", method, url)
            return error(f"curl: (28) Operation timed out after {ctx.config.timeout_ms} milliseconds: {e}")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("curl failed: %s %s: %s", method, url, e)
            return error(f"curl: {e}")

        output = (_status_block(response) if include else "") + response.text
        if response.is_success:
            return ShellResult(stdout=output)
        return ShellResult(
            exit_code=1,
            stdout=output,
            stderr=f"curl: (22) HTTP error {response.status_code}",
        )

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        headers: dict[str, str],
        data: str | None,
        config: ShellConfig,
    ) -> httpx.Response:
        return await client.request(
            method,
            url,
            headers=headers,
            content=data.encode("utf-8") if data is not None else None,
            **request_options(config),
        )
