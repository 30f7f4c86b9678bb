"""
clean-plus-guard — Module boundary rules.

Each scanned file gets a SourceIdentity; each of its imports is classified
and run through the decision table in check_imports. Rule order matters:
a file in a contracts layer is judged by where it lives before the target's
contracts status is considered.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .classifier import ReferenceKind, classify_reference, is_shared_module
from .config import Profile
from .extractors import RawImport, extract_imports
from .reporting import Violation
from .scanner import iter_code_files, load_source

logger = logging.getLogger(__name__)

RULE_SHARED_CONTRACTS = "SHARED_CONTRACTS_IMPORT"
RULE_MODULE_CONTRACTS = "MODULE_CONTRACTS_IMPORT"
RULE_CROSS_MODULE = "CROSS_MODULE_IMPORT"


@dataclass(frozen=True)
class SourceIdentity:
    """Where a scanned file lives. module is None for shared contracts."""
    module: Optional[str]
    strict_contracts: bool

    @classmethod
    def shared_contracts(cls) -> "SourceIdentity":
        return cls(module=None, strict_contracts=True)

    @property
    def is_shared_contracts(self) -> bool:
        return self.module is None


def module_identity(path: Path, module_root: Path) -> Optional[SourceIdentity]:
    """
    Identity of a file under the module root, or None if it belongs to no module.

    The module is the first path segment beneath the root (for a file sitting
    directly under the root, its file name). The file is in its
    module's contracts layer when it sits under <module_root>/<module>/contracts/.
    """
    try:
        parts = path.relative_to(module_root).parts
    except ValueError:
        return None

    if not parts:
        return None
    module = parts[0]
    if not module or is_shared_module(module):
        return None

    strict = len(parts) > 2 and parts[1] == "contracts"
    return SourceIdentity(module=module, strict_contracts=strict)


def check_imports(
    path: Path,
    imports: Iterable[RawImport],
    identity: SourceIdentity,
    profile: Profile,
) -> list[Violation]:
    """Apply the boundary decision table to one file's imports."""
    violations: list[Violation] = []

    for imp in imports:
        ref = classify_reference(imp.target, profile)
        if ref is None:
            continue

        if ref.module == identity.module:
            continue

        # Shared contracts can never depend on modules.
        if identity.is_shared_contracts:
            violations.append(Violation(
                file=str(path),
                line=imp.line,
                target=imp.target,
                message=f"Shared contracts must not import modules (found {ref.module}).",
                rule_id=RULE_SHARED_CONTRACTS,
            ))
            continue

        # Module contracts may only depend on shared contracts and their own module.
        if identity.strict_contracts:
            violations.append(Violation(
                file=str(path),
                line=imp.line,
                target=imp.target,
                message=f"Module contracts must not import other modules (found {ref.module}).",
                rule_id=RULE_MODULE_CONTRACTS,
            ))
            continue

        if ref.kind is ReferenceKind.MODULE_CONTRACTS:
            continue

        violations.append(Violation(
            file=str(path),
            line=imp.line,
            target=imp.target,
            message=(
                f"Forbidden cross-module import: {identity.module} -> {ref.module} "
                f"(allowed: other module contracts only)."
            ),
            rule_id=RULE_CROSS_MODULE,
        ))

    return violations


def check_file(path: Path, identity: SourceIdentity, profile: Profile) -> list[Violation]:
    """Extract, classify and check one file. Unreadable files are skipped."""
    try:
        src = load_source(path)
    except OSError as e:
        logger.warning("skipping unreadable file %s: %s", path, e)
        return []

    imports = extract_imports(src.path, src.text)
    logger.debug("%s: %d imports", path, len(imports))
    return check_imports(path, imports, identity, profile)


def scan_shared_contracts(shared_contracts_root: Path, profile: Profile) -> Iterator[Violation]:
    """Shared contracts must not import any module."""
    if not shared_contracts_root.exists():
        logger.debug("shared_contracts_root not found: %s", shared_contracts_root)
        return

    identity = SourceIdentity.shared_contracts()
    for path in iter_code_files(shared_contracts_root):
        yield from check_file(path, identity, profile)


def scan_modules(module_root: Path, profile: Profile) -> Iterator[Violation]:
    """Check every module file against the boundary rules."""
    for path in iter_code_files(module_root):
        identity = module_identity(path, module_root)
        if identity is None:
            continue
        yield from check_file(path, identity, profile)
