"""
clean-plus-guard — Import extraction.

Line-oriented pattern scans, one extractor per source ecosystem.
No parsing: multi-line statements are missed and commented-out imports
are still reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Protocol

from .scanner import iter_lines


@dataclass(frozen=True)
class RawImport:
    """An uninterpreted import target found on one line."""
    target: str
    line: int


class ImportExtractor(Protocol):
    def extract(self, text: str) -> Iterator[RawImport]: ...


_PHP_USE_PREFIX = re.compile(r"\Ause\s+")
_PHP_TRAILING_SEMI = re.compile(r";\s*\Z")
_PHP_ALIAS = re.compile(r"\s+as\s+", re.IGNORECASE)


class PhpImportExtractor:
    """
    Extract PHP `use` statements.

    Supports:
        use Foo\\Bar;
        use Foo\\Bar as Baz;
        use Foo\\{Bar, Baz};

    `use function` and `use const` are not type imports and are skipped.
    """

    def extract(self, text: str) -> Iterator[RawImport]:
        for line_no, line in iter_lines(text):
            stripped = line.strip()
            if not stripped.startswith("use "):
                continue
            if stripped.startswith(("use function ", "use const ")):
                continue

            statement = _PHP_USE_PREFIX.sub("", stripped)
            statement = _PHP_TRAILING_SEMI.sub("", statement)

            if "{" in statement and "}" in statement:
                prefix, rest = statement.split("{", 1)
                for name in rest.split("}", 1)[0].split(","):
                    name = name.strip()
                    if name:
                        yield RawImport(target=(prefix + name).strip(), line=line_no)
            else:
                yield RawImport(target=_PHP_ALIAS.split(statement.strip(), 1)[0], line=line_no)


_JS_PATTERNS: tuple[re.Pattern[str], ...] = (
    # import ... from "x"
    re.compile(r"""\bfrom\s+["']([^"']+)["']"""),
    # import("x")
    re.compile(r"""\bimport\s*\(\s*["']([^"']+)["']\s*\)"""),
    # require("x")
    re.compile(r"""\brequire\s*\(\s*["']([^"']+)["']\s*\)"""),
)


class JsImportExtractor:
    """Extract ES `from`, dynamic `import()` and `require()` targets."""

    def extract(self, text: str) -> Iterator[RawImport]:
        for line_no, line in iter_lines(text):
            for pattern in _JS_PATTERNS:
                m = pattern.search(line)
                if m:
                    yield RawImport(target=m.group(1), line=line_no)


_PHP = PhpImportExtractor()
_JS = JsImportExtractor()

EXTRACTORS: dict[str, ImportExtractor] = {
    ".php": _PHP,
    ".js": _JS,
    ".jsx": _JS,
    ".ts": _JS,
    ".tsx": _JS,
    ".mjs": _JS,
    ".cjs": _JS,
}


def extractor_for(path: Path) -> ImportExtractor:
    """Pick the extractor for *path*. Unknown suffixes use the JS/TS scan."""
    return EXTRACTORS.get(path.suffix.lower(), _JS)


def extract_imports(path: Path, text: str) -> list[RawImport]:
    return list(extractor_for(path).extract(text))
