"""Configuration profiles.

A profile names one YAML file in the config directory. The directory is
``config/`` at the project root unless NURTRA_CONFIG_DIR points elsewhere.
"""

import os
from enum import Enum
from pathlib import Path

PROFILE_ENV_VAR = "NURTRA_PROFILE"
CONFIG_DIR_ENV_VAR = "NURTRA_CONFIG_DIR"


class Profile(Enum):
    """Available configuration profiles."""

    DEV = "dev"
    PROD = "prod"
    TEST = "test"


def default_config_dir() -> Path:
    """Directory the profile files are read from."""
    override = os.environ.get(CONFIG_DIR_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path(__file__).parent.parent.parent.parent / "config"


def detect_profile() -> Profile:
    """Profile named by NURTRA_PROFILE, dev when unset or unrecognised."""
    value = os.environ.get(PROFILE_ENV_VAR, "").strip().lower()
    try:
        return Profile(value)
    except ValueError:
        return Profile.DEV


def get_profile_path(profile: Profile | None = None, config_dir: Path | None = None) -> Path:
    """Get path to a profile's YAML file.

    Args:
        profile: Profile to use, or None to auto-detect
        config_dir: Configuration directory, or None for default

    Returns:
        Path to profile YAML file
    """
    profile = profile or detect_profile()
    config_dir = config_dir or default_config_dir()
    return config_dir / f"{profile.value}.yaml"


__all__ = [
    "CONFIG_DIR_ENV_VAR",
    "PROFILE_ENV_VAR",
    "Profile",
    "default_config_dir",
    "detect_profile",
    "get_profile_path",
]
