"""Nurtra - craving-intervention companion for binge-eating recovery.

Nurtra provides:
- A binge-free timer that survives restarts
- Looping spoken motivational quotes during a craving (ElevenLabs)
- Automatic locking of distracting apps while a craving lasts

Usage:
    python -m nurtra --profile dev
    python -m nurtra --mock
"""

__version__ = "0.1.0"

from .config import NurtraConfig
from .config.loader import load_config

__all__ = [
    "NurtraConfig",
    "__version__",
    "load_config",
]
