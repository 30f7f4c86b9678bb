"""
clean-plus-guard — Reference classification.

Maps a raw import target to the module it points into, or None when the
target is not a cross-module reference (shared contracts, third-party
packages, unrecognized syntax). Classification is a pure function of the
target string and the active profile's roots.

Strategies are tried in CLASSIFIERS order; the first non-None result wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from .config import Profile


class ReferenceKind(str, Enum):
    MODULE_CONTRACTS = "module_contracts"
    MODULE_INTERNALS = "module_internals"


class ReferenceVia(str, Enum):
    PATH = "path"
    NAMESPACE = "namespace"


@dataclass(frozen=True)
class ClassifiedReference:
    module: str
    kind: ReferenceKind
    via: ReferenceVia


# Always allowed, whatever the importing file.
SHARED_CONTRACTS_MARKERS: tuple[str, ...] = ("/shared/contracts/", "\\Shared\\Contracts\\")


def is_shared_module(name: Optional[str]) -> bool:
    """'shared' is never a real module, in any case."""
    return name is not None and name.lower() == "shared"


class ReferenceStrategy(Protocol):
    def classify(self, target: str) -> Optional[ClassifiedReference]: ...


class PathMarkerStrategy:
    """
    Path-style references (TS/JS relative imports and aliases).

    Finds /modules/<Module>/..., /Domains/<Module>/... or /domains/<Module>/...
    even when the configured module_root is not part of the import.
    """

    def __init__(self, markers: tuple[str, ...] = ("modules", "Domains", "domains")):
        self.markers = markers

    def classify(self, target: str) -> Optional[ClassifiedReference]:
        normalized = target.replace("\\", "/")
        segments = normalized.split("/")

        marker_index = None
        for marker in self.markers:
            if marker in segments:
                marker_index = segments.index(marker)
                break
        if marker_index is None:
            return None

        if marker_index + 1 >= len(segments):
            return None
        module = segments[marker_index + 1]
        if not module or is_shared_module(module):
            return None

        kind = ReferenceKind.MODULE_CONTRACTS if "/contracts/" in normalized else ReferenceKind.MODULE_INTERNALS
        return ClassifiedReference(module=module, kind=kind, via=ReferenceVia.PATH)


class NamespaceStrategy:
    """
    Namespace-style references (PHP), e.g.:
    - App\\Domains\\User\\Domain\\...
    - Domains\\User\\Contracts\\...
    """

    def __init__(self, patterns: tuple[re.Pattern[str], ...]):
        self.patterns = patterns

    def classify(self, target: str) -> Optional[ClassifiedReference]:
        for pattern in self.patterns:
            m = pattern.search(target)
            if not m:
                continue

            module = m.group("mod")
            if not module or is_shared_module(module):
                return None

            kind = ReferenceKind.MODULE_CONTRACTS if "\\Contracts\\" in m.group("rest") else ReferenceKind.MODULE_INTERNALS
            return ClassifiedReference(module=module, kind=kind, via=ReferenceVia.NAMESPACE)
        return None


LARAVEL_NAMESPACE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(?:\A|\\)App\\Domains\\(?P<mod>[A-Za-z0-9_]+)\\(?P<rest>.+)\Z"),
    re.compile(r"(?:\A|\\)Domains\\(?P<mod>[A-Za-z0-9_]+)\\(?P<rest>.+)\Z"),
)

CLASSIFIERS: tuple[ReferenceStrategy, ...] = (
    PathMarkerStrategy(),
    NamespaceStrategy(LARAVEL_NAMESPACE_PATTERNS),
)


def references_shared_contracts(target: str, profile: Profile) -> bool:
    if profile.shared_contracts_root in target:
        return True
    return any(marker in target for marker in SHARED_CONTRACTS_MARKERS)


def classify_reference(
    target: str,
    profile: Profile,
    strategies: tuple[ReferenceStrategy, ...] = CLASSIFIERS,
) -> Optional[ClassifiedReference]:
    """Classify *target*; None means it can never be a violation on its own."""
    if not target:
        return None
    if references_shared_contracts(target, profile):
        return None

    for strategy in strategies:
        ref = strategy.classify(target)
        if ref is not None:
            return ref
    return None
