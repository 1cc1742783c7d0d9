"""Craving-intervention session orchestration."""

from .app import NurtraApp
from .controller import CravingSessionController, ExitReason

__all__ = ["CravingSessionController", "ExitReason", "NurtraApp"]
