"""Profile selection: explicit key or auto-detection from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import ConfigError, Profile, Rulebook

logger = logging.getLogger(__name__)


def detect_profiles(rulebook: Rulebook, workspace_root: Path) -> list[Profile]:
    """Return every profile whose module_root exists under *workspace_root*."""
    detected = []
    for profile in rulebook.profiles.values():
        if (workspace_root / profile.module_root).exists():
            detected.append(profile)
    return detected


def resolve_profile(
    rulebook: Rulebook,
    workspace_root: Path,
    requested: Optional[str] = None,
) -> Profile:
    """
    Pick the active profile.

    An explicit *requested* key must exist in the rulebook. Without one,
    exactly one profile's module_root may exist on disk.

    Raises:
        ConfigError: Unknown key, no profile detected, or more than one detected.
    """
    if requested is not None:
        profile = rulebook.profiles.get(requested)
        if profile is None:
            known = ", ".join(rulebook.profiles) or "none configured"
            raise ConfigError(f"Unknown profile '{requested}' (known: {known}).")
        logger.debug("using requested profile %s", requested)
        return profile

    detected = detect_profiles(rulebook, workspace_root)
    if not detected:
        raise ConfigError("No matching profile detected (no configured module_root exists).")
    if len(detected) > 1:
        keys = ", ".join(p.key for p in detected)
        raise ConfigError(f"Multiple profiles detected; pass --profile ({keys}).")

    logger.debug("auto-detected profile %s", detected[0].key)
    return detected[0]
