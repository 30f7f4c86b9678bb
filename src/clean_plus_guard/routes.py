"""
clean-plus-guard — Routing checks.

Two textual checks, independent of module classification:
- route definitions inside framework-level routes files
- filesystem auto-discovery of route files in the composition root
"""

from __future__ import annotations

import glob
import logging
import re
from pathlib import Path
from typing import Iterator

from .config import RoutingConfig
from .reporting import Violation
from .scanner import iter_lines, load_source

logger = logging.getLogger(__name__)

RULE_ROUTE_DEFINITION = "FORBIDDEN_ROUTE_DEFINITION"
RULE_ROUTE_AUTODISCOVERY = "ROUTE_AUTODISCOVERY"

ROUTE_DEFINITION_RE = re.compile(
    r"\bRoute::(get|post|put|patch|delete|options|any|match|resource|apiResource|view)\b"
)

AUTO_DISCOVERY_RE = re.compile(
    r"\b(glob\s*\(|RecursiveDirectoryIterator|RecursiveIteratorIterator|FilesystemIterator"
    r"|Finder\b|File::allFiles|File::files|File::glob)\b"
)

ROUTE_DEFINITION_MESSAGE = (
    "Forbidden route definition in framework-level routes file. "
    "Move routes into a module (delivery/http/routes) and mount them "
    "from the composition root (explicit list)."
)

AUTO_DISCOVERY_MESSAGE = (
    "Forbidden route auto-discovery. Clean Plus requires an explicit list "
    "of module route files in the composition root."
)


def _scan_lines(path: Path, pattern: re.Pattern[str], message: str, rule_id: str) -> list[Violation]:
    try:
        src = load_source(path)
    except OSError as e:
        logger.warning("skipping unreadable file %s: %s", path, e)
        return []

    violations = []
    for line_no, line in iter_lines(src.text):
        m = pattern.search(line)
        if m:
            violations.append(Violation(
                file=str(path),
                line=line_no,
                target=m.group(0),
                message=message,
                rule_id=rule_id,
            ))
    return violations


def scan_forbidden_route_definitions(workspace_root: Path, routing: RoutingConfig) -> Iterator[Violation]:
    """Flag inline Route:: declarations in files matched by the configured globs."""
    for pattern in routing.forbidden_route_definition_glob:
        matches = sorted(glob.glob(str(workspace_root / pattern), recursive=True))
        logger.debug("route definition glob %s: %d matches", pattern, len(matches))
        for match in matches:
            path = Path(match)
            if not path.is_file() or path.suffix.lower() != ".php":
                continue
            yield from _scan_lines(path, ROUTE_DEFINITION_RE, ROUTE_DEFINITION_MESSAGE, RULE_ROUTE_DEFINITION)


def scan_route_autodiscovery(workspace_root: Path, routing: RoutingConfig) -> Iterator[Violation]:
    """Flag directory scanning in the route registration file."""
    location = routing.registration_location
    if location is None or not location.endswith(".php"):
        return

    registration_file = workspace_root / location
    if not registration_file.exists():
        logger.debug("registration_location not found: %s", registration_file)
        return

    yield from _scan_lines(registration_file, AUTO_DISCOVERY_RE, AUTO_DISCOVERY_MESSAGE, RULE_ROUTE_AUTODISCOVERY)


def scan_routing_violations(workspace_root: Path, routing: RoutingConfig) -> Iterator[Violation]:
    yield from scan_forbidden_route_definitions(workspace_root, routing)
    yield from scan_route_autodiscovery(workspace_root, routing)
