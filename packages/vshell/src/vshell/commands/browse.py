"""browse: fetch a web page and convert it to readable text."""

from __future__ import annotations

import logging
import re

import httpx
from bs4 import BeautifulSoup

from vshell.commands.base import error
from vshell.commands.curl import request_options, resolve_url
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; ShellBrowser/1.0)"
# Pages shorter than this after conversion are treated as blocked
MIN_CONTENT_LENGTH = 50

DROPPED_TAGS = ["script", "style", "nav", "footer", "noscript"]

BLOCKED_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"please\s+enable\s+javascript",
        r"you\s+need\s+to\s+enable\s+javascript",
        r"javascript\s+is\s+required",
        r"please\s+click\s+here\s+if\s+you\s+are\s+not\s+redirected",
        r"if\s+you\s+are\s+not\s+redirected",
        r"checking\s+(your\s+)?browser",
        r"verify\s+you\s+are\s+(a\s+)?human",
        r"captcha",
        r"access\s+denied",
        r"forbidden",
        r"bot\s+detected",
        r"unusual\s+traffic",
        r"automated\s+requests",
    )
]


def _replace(tags, render) -> None:
    for tag in tags:
        # Skip tags already swallowed by an enclosing replacement
        if tag.parent is not None:
            tag.replace_with(render(tag))


def html_to_text(html: str) -> str:
    """Render HTML as markdown-flavoured plain text."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(DROPPED_TAGS):
        tag.decompose()

    _replace(soup.find_all("a", href=True), lambda a: f"[{a.get_text()}]({a['href']})")
    _replace(soup.find_all("li"), lambda li: f"- {li.get_text()}\n")
    for level in range(1, 7):
        _replace(soup.find_all(f"h{level}"), lambda h, n=level: f"\n{'#' * n} {h.get_text()}\n")
    _replace(soup.find_all("br"), lambda br: "\n")
    for paragraph in soup.find_all("p"):
        paragraph.append("\n\n")
    for div in soup.find_all("div"):
        div.append("\n")

    text = soup.get_text().replace("\xa0", " ")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n ", "\n", text)
    text = re.sub(r" \n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def detect_low_quality(text: str) -> str | None:
    """Return a warning when the text looks like a block page or a JS shell."""
    if len(text) < MIN_CONTENT_LENGTH:
        return (
            f"browse: page returned very little content ({len(text)} chars). "
            "The site likely requires JavaScript or blocked the request. "
            "Try a different source or use `curl` with an API endpoint instead."
        )
    for pattern in BLOCKED_PATTERNS:
        if pattern.search(text):
            return (
                "browse: page appears to require JavaScript or blocked the request "
                f"(matched: {pattern.pattern}). Content returned is not useful. "
                "Try a different URL, use a direct API, or try a different source for this information."
            )
    return None


class BrowseCommand:
    name = "browse"
    help = CommandHelp(
        usage="browse [OPTIONS] URL",
        description="Fetch a web page and convert HTML to readable text",
        flags=[CommandFlag("--raw", "Return raw HTML instead of converted text")],
        examples=[
            CommandExample("browse https://example.com", "Fetch and convert page to text"),
            CommandExample("browse --raw https://example.com", "Fetch raw HTML"),
            CommandExample('browse https://example.com | grep "keyword"', "Fetch and search for keyword"),
            CommandExample("browse https://example.com > page.md", "Save page content to file"),
        ],
        notes=[
            "Strips <script>, <style>, <nav>, <footer> tags",
            "Converts headings to # format, links to [text](url)",
            "Long pages are truncated",
            "No JavaScript engine; sites requiring JS will return errors",
            "Returns exit code 1 if the page appears blocked or has no useful content",
            "For search, use a search API via curl instead of browsing search engine pages",
        ],
    )

    def __init__(self, http_client: httpx.AsyncClient | None = None) -> None:
        self._client = http_client

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        raw = False
        url: str | None = None
        for arg in args:
            if arg == "--raw":
                raw = True
            elif arg.startswith("-") and len(arg) > 1:
                return error(f"browse: unknown option {arg}")
            else:
                url = arg

        if not url:
            return error("browse: no URL specified")

        url = resolve_url(url, ctx.config)
        headers = {"User-Agent": USER_AGENT, "Accept": "text/html, application/xhtml+xml, */*"}
        logger.debug("browse GET %s", url)

        try:
            if self._client is not None:
                response = await self._client.get(url, headers=headers, **request_options(ctx.config))
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(url, headers=headers, **request_options(ctx.config))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("browse failed: %s: %s", url, e)
            return error(f"browse: {e}")

        if not response.is_success:
            return error(f"browse: HTTP {response.status_code} {response.reason_phrase}")

        output = response.text if raw else html_to_text(response.text)
        if not raw:
            warning = detect_low_quality(output)
            if warning:
                return ShellResult(exit_code=1, stdout=output + "\n", stderr=warning)

        limit = ctx.config.limits.browse_max_output
        if len(output) > limit:
            output = output[:limit] + f"\n\n[... truncated at {limit // 1000}K characters]"
        return ShellResult(stdout=output + "\n")
