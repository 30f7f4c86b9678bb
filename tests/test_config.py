"""
Tests for rulebook loading and validation.
"""

import pytest
import yaml

from clean_plus_guard.config import (
    ConfigError,
    RoutingConfig,
    load_rulebook,
    parse_rulebook,
)

from conftest import RULEBOOK, write_file


class TestLoadRulebook:
    """Loading the YAML file into typed values."""

    def test_loads_profiles(self, workspace):
        rulebook = load_rulebook(workspace / "clean-plus.rules.yaml")
        assert set(rulebook.profiles) == {"framework_agnostic_src", "laravel_app_domains"}

        p = rulebook.profiles["framework_agnostic_src"]
        assert p.key == "framework_agnostic_src"
        assert p.module_root == "src/modules"
        assert p.shared_contracts_root == "src/shared/contracts"

    def test_loads_routing(self, workspace):
        rulebook = load_rulebook(workspace / "clean-plus.rules.yaml")
        routing = rulebook.routing_for("laravel_app_domains")
        assert routing.forbidden_route_definition_glob == ("routes/*.php",)
        assert routing.registration_location == "bootstrap/app.php"

    def test_routing_defaults_for_unconfigured_profile(self, workspace):
        rulebook = load_rulebook(workspace / "clean-plus.rules.yaml")
        assert rulebook.routing_for("framework_agnostic_src") == RoutingConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Rulebook not found"):
            load_rulebook(tmp_path / "nope.yaml")

    def test_yaml_syntax_error_propagates(self, tmp_path):
        path = write_file(tmp_path, "bad.yaml", "clean_plus: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_rulebook(path)


class TestValidation:
    """Structural problems are collected and reported together."""

    def test_missing_clean_plus(self):
        with pytest.raises(ConfigError) as exc:
            parse_rulebook({"other": {}})
        assert "missing key 'clean_plus'" in exc.value.problems

    def test_non_mapping_document(self):
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            parse_rulebook(None)

    def test_missing_profiles(self):
        with pytest.raises(ConfigError) as exc:
            parse_rulebook({"clean_plus": {}})
        assert exc.value.problems == ["missing key 'clean_plus.profiles'"]

    def test_all_missing_roots_listed(self):
        document = {
            "clean_plus": {
                "profiles": {
                    "a": {"roots": {"shared_contracts_root": "x"}},
                    "b": {},
                    "c": {"roots": {"module_root": "m"}},
                }
            }
        }
        with pytest.raises(ConfigError) as exc:
            parse_rulebook(document)

        assert exc.value.problems == [
            "missing key 'clean_plus.profiles.a.roots.module_root'",
            "missing key 'clean_plus.profiles.b.roots'",
            "missing key 'clean_plus.profiles.c.roots.shared_contracts_root'",
        ]
        assert "clean_plus.profiles.b.roots" in str(exc.value)

    def test_root_must_be_string(self):
        document = {
            "clean_plus": {
                "profiles": {"a": {"roots": {"module_root": 3, "shared_contracts_root": "x"}}}
            }
        }
        with pytest.raises(ConfigError, match="must be a non-empty string"):
            parse_rulebook(document)


class TestRoutingSoftDegrade:
    """Malformed routing never fails the run."""

    def _document(self, routing):
        document = yaml.safe_load(RULEBOOK)
        document["clean_plus"]["routing"] = routing
        return document

    @pytest.mark.parametrize("routing", [None, "oops", [], {"locations": "oops"}, {}])
    def test_malformed_routing_is_empty(self, routing):
        rulebook = parse_rulebook(self._document(routing))
        assert rulebook.routing == {}

    def test_wrong_types_inside_location(self):
        rulebook = parse_rulebook(self._document({
            "locations": {
                "laravel_app_domains": {
                    "forbidden_route_definition_glob": "routes/*.php",
                    "registration_location": 42,
                },
                "framework_agnostic_src": "not a mapping",
            }
        }))
        assert rulebook.routing_for("laravel_app_domains") == RoutingConfig()
        assert "framework_agnostic_src" not in rulebook.routing
