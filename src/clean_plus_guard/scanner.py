"""
clean-plus-guard — File scanning and source loading.

Handles:
- Directory walking with the code-extension allow-list
- Substring-based directory exclusion
- Source file loading
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

CODE_EXTS: frozenset[str] = frozenset({".php", ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs"})

# Matched as substrings of the POSIX path, not as path segments.
EXCLUDED_MARKERS: tuple[str, ...] = (
    "/vendor/",
    "/node_modules/",
    "/storage/",
    "/bootstrap/cache/",
    "/dist/",
    "/build/",
    "/coverage/",
    "/.git/",
)


@dataclass(frozen=True)
class SourceFile:
    """A loaded source file with content."""
    path: Path
    text: str

    @property
    def suffix(self) -> str:
        return self.path.suffix.lower()


def is_code_file(path: Path) -> bool:
    return path.suffix.lower() in CODE_EXTS


def is_excluded_path(path: Path) -> bool:
    """Check if path contains one of the excluded directory markers."""
    path_str = path.as_posix()
    return any(marker in path_str for marker in EXCLUDED_MARKERS)


def iter_code_files(root: Path) -> Iterator[Path]:
    """Iterate over code files under root, skipping excluded directories."""
    for path in sorted(root.rglob("*")):
        if not path.is_file():
            continue
        if not is_code_file(path):
            continue
        if is_excluded_path(path):
            continue
        yield path


def iter_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (1-based line number, line). Only "\\n" ends a line."""
    return enumerate(text.split("\n"), start=1)


def load_source(path: Path) -> SourceFile:
    """Load a single source file."""
    # newline="" keeps a lone "\r" from counting as a line break.
    with path.open("r", encoding="utf-8", errors="replace", newline="") as f:
        text = f.read()
    return SourceFile(path=path, text=text)
