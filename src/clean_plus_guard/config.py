"""
clean-plus-guard — Rulebook configuration.

Loads the Clean Plus rulebook YAML into typed, immutable values.
Structural problems are collected and raised together as a ConfigError,
so a broken rulebook fails before any file is scanned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_RULEBOOK = "clean-plus.rules.yaml"


class ConfigError(Exception):
    """Rulebook is structurally invalid or no profile can be selected."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        self.problems: list[str] = list(problems or [])
        if self.problems:
            message = f"{message}: " + "; ".join(self.problems)
        super().__init__(message)


@dataclass(frozen=True)
class Profile:
    """A named pair of roots, relative to the workspace root."""
    key: str
    module_root: str
    shared_contracts_root: str


@dataclass(frozen=True)
class RoutingConfig:
    """Per-profile routing checks. Empty values disable the matching check."""
    forbidden_route_definition_glob: tuple[str, ...] = ()
    registration_location: Optional[str] = None


@dataclass(frozen=True)
class Rulebook:
    profiles: dict[str, Profile]
    routing: dict[str, RoutingConfig] = field(default_factory=dict)

    def routing_for(self, profile_key: str) -> RoutingConfig:
        return self.routing.get(profile_key, RoutingConfig())


def _require_mapping(value: Any, key_path: str, problems: list[str]) -> Optional[dict]:
    if value is None:
        problems.append(f"missing key '{key_path}'")
        return None
    if not isinstance(value, dict):
        problems.append(f"'{key_path}' must be a mapping")
        return None
    return value


def _require_path(roots: dict, name: str, key_path: str, problems: list[str]) -> Optional[str]:
    value = roots.get(name)
    if value is None:
        problems.append(f"missing key '{key_path}.{name}'")
        return None
    if not isinstance(value, str) or not value:
        problems.append(f"'{key_path}.{name}' must be a non-empty string")
        return None
    return value


def _parse_profiles(section: dict, problems: list[str]) -> dict[str, Profile]:
    profiles: dict[str, Profile] = {}
    for raw_key, body in section.items():
        key = str(raw_key)
        key_path = f"clean_plus.profiles.{key}"
        body = _require_mapping(body, key_path, problems)
        if body is None:
            continue
        roots = _require_mapping(body.get("roots"), f"{key_path}.roots", problems)
        if roots is None:
            continue
        module_root = _require_path(roots, "module_root", f"{key_path}.roots", problems)
        shared_root = _require_path(roots, "shared_contracts_root", f"{key_path}.roots", problems)
        if module_root is None or shared_root is None:
            continue
        profiles[key] = Profile(key=key, module_root=module_root, shared_contracts_root=shared_root)
    return profiles


def _parse_routing(section: Any) -> dict[str, RoutingConfig]:
    """Routing is optional; anything malformed is dropped, never an error."""
    if not isinstance(section, dict):
        return {}
    locations = section.get("locations")
    if not isinstance(locations, dict):
        logger.debug("routing.locations missing or not a mapping; routing checks disabled")
        return {}

    routing: dict[str, RoutingConfig] = {}
    for raw_key, location in locations.items():
        key = str(raw_key)
        if not isinstance(location, dict):
            logger.debug("routing.locations.%s is not a mapping; ignored", key)
            continue

        globs = location.get("forbidden_route_definition_glob")
        if isinstance(globs, list):
            globs = tuple(g for g in globs if isinstance(g, str) and g)
        else:
            globs = ()

        registration = location.get("registration_location")
        if not isinstance(registration, str) or not registration:
            registration = None

        routing[key] = RoutingConfig(
            forbidden_route_definition_glob=globs,
            registration_location=registration,
        )
    return routing


def parse_rulebook(document: Any) -> Rulebook:
    """Validate a decoded rulebook document and build a Rulebook."""
    problems: list[str] = []

    if not isinstance(document, dict):
        raise ConfigError("Rulebook must be a YAML mapping", [f"got {type(document).__name__}"])

    clean_plus = _require_mapping(document.get("clean_plus"), "clean_plus", problems)
    if clean_plus is None:
        raise ConfigError("Invalid rulebook", problems)

    section = _require_mapping(clean_plus.get("profiles"), "clean_plus.profiles", problems)
    profiles = _parse_profiles(section, problems) if section is not None else {}

    if problems:
        raise ConfigError("Invalid rulebook", problems)

    return Rulebook(profiles=profiles, routing=_parse_routing(clean_plus.get("routing")))


def load_rulebook(path: Path | str) -> Rulebook:
    """
    Load and validate the rulebook at *path*.

    Raises:
        ConfigError: If the file is missing or structurally invalid.
        yaml.YAMLError: If the file is not valid YAML.
    """
    path = Path(path)
    logger.debug("loading rulebook %s", path)

    if not path.is_file():
        raise ConfigError(f"Rulebook not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except UnicodeDecodeError as e:
        raise ConfigError(f"Rulebook is not valid UTF-8: {path}", [str(e)]) from e

    rulebook = parse_rulebook(document)
    logger.debug("rulebook profiles: %s", ", ".join(rulebook.profiles) or "(none)")
    return rulebook
