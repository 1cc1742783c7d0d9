"""Configuration module for Nurtra.

This module provides configuration loading and profile management.
"""

from dataclasses import dataclass, field


@dataclass
class TTSConfig:
    """Text-to-speech configuration."""

    provider: str = "elevenlabs"
    voice_id: str = "EXAVITQu4vr4xnSDxMaL"
    model: str = "eleven_multilingual_v2"
    stability: float = 0.1
    similarity_boost: float = 0.8
    style: float = 1.0
    use_speaker_boost: bool = True
    speed: float = 1.1


@dataclass
class AudioConfig:
    """Audio output configuration."""

    output_device: str = "default"
    sample_rate: int = 22050


@dataclass
class CacheConfig:
    """Speech cache configuration."""

    directory: str = "~/.nurtra/speech_cache"
    suffix: str = ".pcm"


@dataclass
class StorageConfig:
    """Document store configuration."""

    uri: str = "mongodb://localhost:27017"
    database: str = "nurtra"
    connect_timeout_ms: int = 5000
    server_selection_timeout_ms: int = 5000


@dataclass
class TimerConfig:
    """Binge-free timer configuration."""

    tick_interval_ms: int = 10
    presence_enabled: bool = False


@dataclass
class QuoteLoopConfig:
    """Quote playback loop configuration."""

    skip_delay_seconds: float = 1.0
    retry_delay_seconds: float = 5.0


@dataclass
class RestrictionConfig:
    """App restriction configuration."""

    state_path: str = "~/.nurtra/local_state.json"
    selection_key: str = "savedFamilyActivitySelection"
    lock_status_key: str = "isAppsLocked"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class TestingConfig:
    """Testing configuration."""

    use_mocks: bool = False
    user_id: str | None = None


@dataclass
class NurtraConfig:
    """Main Nurtra configuration."""

    tts: TTSConfig = field(default_factory=TTSConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)
    quotes: QuoteLoopConfig = field(default_factory=QuoteLoopConfig)
    restriction: RestrictionConfig = field(default_factory=RestrictionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    testing: TestingConfig = field(default_factory=TestingConfig)


__all__ = [
    "AudioConfig",
    "CacheConfig",
    "LoggingConfig",
    "NurtraConfig",
    "QuoteLoopConfig",
    "RestrictionConfig",
    "StorageConfig",
    "TTSConfig",
    "TestingConfig",
    "TimerConfig",
]
