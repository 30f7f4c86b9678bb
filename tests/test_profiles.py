"""
Tests for profile resolution.
"""

import pytest

from clean_plus_guard.config import ConfigError, load_rulebook
from clean_plus_guard.profiles import detect_profiles, resolve_profile


@pytest.fixture
def rulebook(workspace):
    return load_rulebook(workspace / "clean-plus.rules.yaml")


class TestExplicitProfile:

    def test_known_key(self, rulebook, workspace):
        p = resolve_profile(rulebook, workspace, "laravel_app_domains")
        assert p.key == "laravel_app_domains"

    def test_explicit_key_ignores_disk(self, rulebook, workspace):
        """An explicit key is used even when its module_root does not exist."""
        p = resolve_profile(rulebook, workspace, "framework_agnostic_src")
        assert p.module_root == "src/modules"

    def test_unknown_key(self, rulebook, workspace):
        with pytest.raises(ConfigError, match="Unknown profile 'nope'"):
            resolve_profile(rulebook, workspace, "nope")


class TestAutoDetect:

    def test_nothing_detected(self, rulebook, workspace):
        with pytest.raises(ConfigError, match="No matching profile detected"):
            resolve_profile(rulebook, workspace)

    def test_single_match(self, rulebook, workspace):
        (workspace / "app" / "Domains").mkdir(parents=True)
        assert resolve_profile(rulebook, workspace).key == "laravel_app_domains"

    def test_ambiguous(self, rulebook, workspace):
        (workspace / "app" / "Domains").mkdir(parents=True)
        (workspace / "src" / "modules").mkdir(parents=True)

        with pytest.raises(ConfigError) as exc:
            resolve_profile(rulebook, workspace)

        message = str(exc.value)
        assert "Multiple profiles detected; pass --profile" in message
        assert "framework_agnostic_src" in message
        assert "laravel_app_domains" in message

    def test_detection_does_not_touch_disk(self, rulebook, workspace):
        before = sorted(p.name for p in workspace.iterdir())
        detect_profiles(rulebook, workspace)
        detect_profiles(rulebook, workspace)
        assert sorted(p.name for p in workspace.iterdir()) == before
