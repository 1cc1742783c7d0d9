"""YAML configuration loader.

Profile files may name a base file with an ``extends`` key; the base is
loaded first and the child merged over it. Everything lives under a
top-level ``nurtra`` key. Loaded values are checked before use so a bad
profile fails at start-up instead of mid-session.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from . import (
    AudioConfig,
    CacheConfig,
    LoggingConfig,
    NurtraConfig,
    QuoteLoopConfig,
    RestrictionConfig,
    StorageConfig,
    TestingConfig,
    TimerConfig,
    TTSConfig,
)
from .profiles import Profile, default_config_dir, detect_profile, get_profile_path

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base, recursing into nested dicts."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load a YAML file, resolving its ``extends`` chain.

    Raises:
        FileNotFoundError: If the file or one of its bases is missing.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    base_name = data.pop("extends", None)
    if base_name is None:
        return data
    return deep_merge(load_yaml_with_inheritance(path.parent / base_name), data)


def dict_to_config(data: dict[str, Any]) -> NurtraConfig:
    """Convert raw dict to typed NurtraConfig dataclass.

    Raises:
        TypeError: If a section holds a key its dataclass does not have.
    """
    sections = data.get("nurtra") or {}

    # "key:" with no body loads as None
    def section(key: str) -> dict[str, Any]:
        return sections.get(key) or {}

    return NurtraConfig(
        tts=TTSConfig(**section("tts")),
        audio=AudioConfig(**section("audio")),
        cache=CacheConfig(**section("cache")),
        storage=StorageConfig(**section("storage")),
        timer=TimerConfig(**section("timer")),
        quotes=QuoteLoopConfig(**section("quotes")),
        restriction=RestrictionConfig(**section("restriction")),
        logging=LoggingConfig(**section("logging")),
        testing=TestingConfig(**section("testing")),
    )


def validate_config(config: NurtraConfig) -> NurtraConfig:
    """Check value ranges.

    Returns:
        The same config.

    Raises:
        ValueError: Listing every out-of-range value.
    """
    problems = []

    for name in ("stability", "similarity_boost", "style"):
        value = getattr(config.tts, name)
        if not 0.0 <= value <= 1.0:
            problems.append(f"tts.{name} must be between 0 and 1, got {value}")
    if not 0.7 <= config.tts.speed <= 1.2:
        problems.append(f"tts.speed must be between 0.7 and 1.2, got {config.tts.speed}")
    if config.audio.sample_rate <= 0:
        problems.append("audio.sample_rate must be positive")
    if not config.cache.suffix.startswith("."):
        problems.append(f"cache.suffix must start with '.', got '{config.cache.suffix}'")
    if config.timer.tick_interval_ms <= 0:
        problems.append("timer.tick_interval_ms must be positive")
    if config.quotes.skip_delay_seconds < 0:
        problems.append("quotes.skip_delay_seconds cannot be negative")
    if config.quotes.retry_delay_seconds <= 0:
        problems.append("quotes.retry_delay_seconds must be positive")
    if config.logging.level.upper() not in LOG_LEVELS:
        problems.append(f"logging.level must be one of {', '.join(LOG_LEVELS)}")

    if problems:
        raise ValueError("Invalid configuration: " + "; ".join(problems))
    return config


class YAMLConfigLoader:
    """Loads profiles from a config directory."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader.

        Args:
            config_dir: Directory containing profile files. Defaults to
                NURTRA_CONFIG_DIR, then ``config/`` at the project root.
        """
        self._config_dir = config_dir or default_config_dir()

    def load(self, path: Path) -> NurtraConfig:
        """Load and validate a config file."""
        config = validate_config(dict_to_config(load_yaml_with_inheritance(path)))
        logger.debug(f"Loaded config from {path}")
        return config

    def load_profile(self, profile: str) -> NurtraConfig:
        """Load configuration by profile name.

        Raises:
            ValueError: If profile is not dev, prod or test.
        """
        return self.load(get_profile_path(Profile(profile), self._config_dir))

    def get_config_dir(self) -> Path:
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> NurtraConfig:
    """Load Nurtra configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name; detected from NURTRA_PROFILE if None

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    return loader.load_profile(profile or detect_profile().value)


__all__ = [
    "LOG_LEVELS",
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
    "validate_config",
]
