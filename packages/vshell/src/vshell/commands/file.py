"""file: determine file type from extension and content."""

from __future__ import annotations

import json

from vshell.commands.base import basename, error
from vshell.types import CommandContext, CommandExample, CommandFlag, CommandHelp, ShellResult

# Content sniffing is skipped for JSON larger than this
JSON_SNIFF_LIMIT = 65_536
LONG_LINE = 500

_UTF8 = "UTF-8 Unicode text"

MIME_BY_EXT = {
    "json": "application/json",
    "js": "application/javascript",
    "mjs": "application/javascript",
    "jsx": "application/javascript",
    "ts": "application/typescript",
    "mts": "application/typescript",
    "tsx": "application/typescript",
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "xml": "application/xml",
    "svg": "image/svg+xml",
    "md": "text/markdown",
    "csv": "text/csv",
    "yaml": "text/yaml",
    "yml": "text/yaml",
    "toml": "application/toml",
    "txt": "text/plain",
    "sh": "text/x-shellscript",
    "bash": "text/x-shellscript",
    "py": "text/x-python",
    "rb": "text/x-ruby",
    "java": "text/x-java",
    "c": "text/x-c",
    "h": "text/x-c",
    "cpp": "text/x-c++",
    "go": "text/x-go",
    "rs": "text/x-rust",
}

TYPE_BY_EXT = {
    "js": f"JavaScript source, {_UTF8}",
    "mjs": f"JavaScript source, {_UTF8}",
    "jsx": f"JavaScript source, {_UTF8}",
    "ts": f"TypeScript source, {_UTF8}",
    "mts": f"TypeScript source, {_UTF8}",
    "tsx": f"TypeScript source, {_UTF8}",
    "py": f"Python source, {_UTF8}",
    "rb": f"Ruby source, {_UTF8}",
    "java": f"Java source, {_UTF8}",
    "c": f"C source, {_UTF8}",
    "h": f"C source header, {_UTF8}",
    "cpp": f"C++ source, {_UTF8}",
    "go": f"Go source, {_UTF8}",
    "rs": f"Rust source, {_UTF8}",
    "css": f"CSS stylesheet, {_UTF8}",
    "md": f"Markdown document, {_UTF8}",
    "yaml": f"YAML document, {_UTF8}",
    "yml": f"YAML document, {_UTF8}",
    "toml": f"TOML document, {_UTF8}",
    "csv": "CSV text",
    "sh": "Bourne-Again shell script text executable",
    "bash": "Bourne-Again shell script text executable",
}

SHEBANGS = [
    ("python", "Python script text executable"),
    ("node", "Node.js script text executable"),
    ("bash", "Bourne-Again shell script text executable"),
    ("/sh", "Bourne-Again shell script text executable"),
    ("ruby", "Ruby script text executable"),
    ("perl", "Perl script text executable"),
]


def extension_of(path: str) -> str:
    name = basename(path)
    dot = name.rfind(".")
    if dot <= 0:
        return ""
    return name[dot + 1 :].lower()


def looks_like_json(content: str) -> bool:
    stripped = content.lstrip()
    if not stripped.startswith(("{", "[")) or len(content) > JSON_SNIFF_LIMIT:
        return False
    try:
        json.loads(content)
    except ValueError:
        return False
    return True


def looks_like_html(content: str) -> bool:
    head = content.lstrip()[:50].lower()
    return head.startswith(("<!doctype html", "<html"))


def looks_like_xml(content: str) -> bool:
    return content.lstrip().startswith("<?xml")


def detect_mime(path: str, content: str) -> str:
    ext = extension_of(path)
    if ext in MIME_BY_EXT:
        mime = MIME_BY_EXT[ext]
    elif looks_like_json(content):
        mime = "application/json"
    elif looks_like_html(content):
        mime = "text/html"
    elif looks_like_xml(content):
        mime = "application/xml"
    elif not content:
        return "inode/x-empty; charset=binary"
    else:
        mime = "text/plain"
    return f"{mime}; charset=utf-8"


def detect_type(path: str, content: str) -> str:
    ext = extension_of(path)
    if not content:
        return "empty"
    if ext == "json" or (not ext and looks_like_json(content)):
        return "JSON text data"
    if ext in ("html", "htm") or (not ext and looks_like_html(content)):
        return f"HTML document, {_UTF8}"
    if ext == "svg":
        return "SVG Scalable Vector Graphics image"
    if ext == "xml" or (not ext and looks_like_xml(content)):
        return "XML document text"
    if content.startswith("#!"):
        first_line = content.split("\n", 1)[0]
        for needle, kind in SHEBANGS:
            if needle in first_line:
                return kind
        return "script text executable"
    if ext in TYPE_BY_EXT:
        return TYPE_BY_EXT[ext]
    if any(len(line) > LONG_LINE for line in content.split("\n")):
        return f"{_UTF8}, with very long lines"
    return _UTF8


class FileCommand:
    name = "file"
    help = CommandHelp(
        usage="file [OPTIONS] [FILE...]",
        description="Determine file type",
        flags=[
            CommandFlag("-b", "Brief mode (do not prepend filename)"),
            CommandFlag("-i", "Output MIME type string"),
        ],
        examples=[
            CommandExample("file data.json", "Identify file type"),
            CommandExample("file -i script.ts", "Show MIME type"),
            CommandExample("file -b readme.md", "Show type without filename"),
            CommandExample("file src", "Identify directory"),
        ],
    )

    async def execute(self, args: list[str], ctx: CommandContext) -> ShellResult:
        brief = mime = False
        paths: list[str] = []
        for arg in args:
            if arg == "--mime":
                mime = True
            elif arg == "--brief":
                brief = True
            elif arg.startswith("-") and len(arg) > 1:
                for ch in arg[1:]:
                    if ch == "b":
                        brief = True
                    elif ch == "i":
                        mime = True
                    else:
                        return error(f"file: invalid option -- '{ch}'")
            else:
                paths.append(arg)

        if not paths:
            return error("file: missing file operand")

        rows: list[str] = []
        problems: list[str] = []
        for path in paths:
            if await ctx.fs.is_directory(path):
                kind = "inode/directory; charset=binary" if mime else "directory"
            else:
                content = await ctx.fs.read(path)
                if content is None:
                    problems.append(f"file: {path}: No such file or directory")
                    continue
                kind = detect_mime(path, content) if mime else detect_type(path, content)
            rows.append(kind if brief else f"{path}: {kind}")

        return ShellResult(
            exit_code=1 if problems else 0,
            stdout="".join(row + "\n" for row in rows),
            stderr="\n".join(problems),
        )
