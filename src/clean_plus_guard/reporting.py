"""
clean-plus-guard — Reporting and output formatting.

Handles:
- Violation dataclass
- Human-readable output
- JSON output
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Violation:
    """A single boundary or routing violation."""
    file: str
    line: int
    target: str
    message: str
    rule_id: str = ""

    def __str__(self) -> str:
        return f"{self.file}:{self.line}: {self.message}"


class Reporter:
    """Collects and formats violations."""

    def __init__(self) -> None:
        self.violations: list[Violation] = []

    def add(self, violation: Violation) -> None:
        self.violations.append(violation)

    def extend(self, violations) -> None:
        for v in violations:
            self.add(v)

    @property
    def ok(self) -> bool:
        return not self.violations

    def render_human(self, profile_key: str) -> str:
        """Render violations as human-readable text."""
        if self.ok:
            return f"CleanPlusGuard OK (profile={profile_key})"

        lines = [f"CleanPlusGuard FAILED (profile={profile_key})"]
        for v in self.violations:
            lines.append(str(v))
            lines.append(f"  target: {v.target}")
        return "\n".join(lines)

    def render_json(self, profile_key: str) -> str:
        return json.dumps(
            {
                "profile": profile_key,
                "ok": self.ok,
                "violations": [asdict(v) for v in self.violations],
            },
            indent=2,
        )
