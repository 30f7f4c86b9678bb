"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from clean_plus_guard.config import Profile


# =============================================================================
# PROFILE FIXTURES
# =============================================================================

@pytest.fixture
def profile():
    """Framework-agnostic layout: src/modules/<module>/..."""
    return Profile(
        key="framework_agnostic_src",
        module_root="src/modules",
        shared_contracts_root="src/shared/contracts",
    )


@pytest.fixture
def laravel_profile():
    """Laravel layout: app/Domains/<Module>/..."""
    return Profile(
        key="laravel_app_domains",
        module_root="app/Domains",
        shared_contracts_root="app/Shared/Contracts",
    )


# =============================================================================
# WORKSPACE FIXTURES
# =============================================================================

RULEBOOK = """\
clean_plus:
  profiles:
    framework_agnostic_src:
      roots:
        module_root: src/modules
        shared_contracts_root: src/shared/contracts
    laravel_app_domains:
      roots:
        module_root: app/Domains
        shared_contracts_root: app/Shared/Contracts
  routing:
    locations:
      laravel_app_domains:
        forbidden_route_definition_glob:
          - routes/*.php
        registration_location: bootstrap/app.php
"""


def write_file(root: Path, rel: str, text: str) -> Path:
    """Write *text* to root/rel, creating parent directories."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def workspace(tmp_path):
    """Empty workspace with the standard rulebook."""
    write_file(tmp_path, "clean-plus.rules.yaml", RULEBOOK)
    return tmp_path
