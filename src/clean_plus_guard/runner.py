"""
clean-plus-guard — Main runner and CLI.

Orchestrates profile selection, the module boundary scans and the routing
checks, then reports and maps the outcome to an exit code:

    0  no violations, or module_root not found (skipped)
    2  violations found
    3  configuration error or invalid invocation
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml

from . import __version__
from .config import DEFAULT_RULEBOOK, ConfigError, load_rulebook
from .profiles import resolve_profile
from .reporting import Reporter
from .routes import scan_routing_violations
from .rules import scan_modules, scan_shared_contracts

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_VIOLATIONS = 2
EXIT_CONFIG_ERROR = 3

LOG_ENV_VAR = "CLEAN_PLUS_GUARD_LOG"


class Guard:
    """One guard run against a workspace."""

    def __init__(
        self,
        rulebook_path: Path | str = DEFAULT_RULEBOOK,
        profile_key: Optional[str] = None,
        workspace_root: Optional[Path] = None,
        json_output: bool = False,
    ) -> None:
        self.rulebook_path = Path(rulebook_path)
        self.requested_profile_key = profile_key
        self.workspace_root = workspace_root or Path.cwd()
        self.json_output = json_output

    def run(self) -> int:
        """Run all checks, print the report and return the exit code."""
        try:
            rulebook = load_rulebook(self.rulebook_path)
            profile = resolve_profile(rulebook, self.workspace_root, self.requested_profile_key)
        except ConfigError as e:
            print(f"Config error: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        except yaml.YAMLError as e:
            print(f"YAML parse error: {e}", file=sys.stderr)
            return EXIT_CONFIG_ERROR

        module_root = self.workspace_root / profile.module_root
        shared_contracts_root = self.workspace_root / profile.shared_contracts_root

        if not module_root.exists():
            self._print_skipped(profile.key, module_root)
            return EXIT_OK

        reporter = Reporter()

        logger.info("scanning shared contracts: %s", shared_contracts_root)
        reporter.extend(scan_shared_contracts(shared_contracts_root, profile))

        logger.info("scanning modules: %s", module_root)
        reporter.extend(scan_modules(module_root, profile))

        logger.info("scanning routing for profile %s", profile.key)
        reporter.extend(scan_routing_violations(self.workspace_root, rulebook.routing_for(profile.key)))

        if self.json_output:
            print(reporter.render_json(profile.key))
        else:
            print(reporter.render_human(profile.key))

        return EXIT_OK if reporter.ok else EXIT_VIOLATIONS

    def _print_skipped(self, profile_key: str, module_root: Path) -> None:
        if self.json_output:
            print(Reporter().render_json(profile_key))
            return
        print(f"CleanPlusGuard SKIPPED (profile={profile_key})")
        print(f"  module_root not found: {module_root}")


def configure_logging(verbose: bool) -> None:
    """Configure logging once for the process. Logs go to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


class _ArgumentParser(argparse.ArgumentParser):
    """Invalid invocations exit with the configuration error code."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_CONFIG_ERROR, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="clean-plus-guard",
        description=f"clean-plus-guard v{__version__} — Clean Plus module boundary guard",
        epilog=(
            "Examples:\n"
            "  clean-plus-guard --profile framework_agnostic_src\n"
            "  clean-plus-guard --profile laravel_app_domains"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--rules",
        default=DEFAULT_RULEBOOK,
        metavar="PATH",
        help=f"Rulebook YAML (default: {DEFAULT_RULEBOOK})",
    )
    parser.add_argument(
        "--profile",
        default=None,
        metavar="KEY",
        help="Profile key (default: auto-detect from existing module roots)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help=f"Enable progress logging (same as {LOG_ENV_VAR}=1)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        print(f"Unknown arg: {unknown[0]}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(args.verbose or os.environ.get(LOG_ENV_VAR) == "1")

    guard = Guard(
        rulebook_path=args.rules,
        profile_key=args.profile,
        json_output=args.json,
    )
    return guard.run()


if __name__ == "__main__":
    raise SystemExit(main())
