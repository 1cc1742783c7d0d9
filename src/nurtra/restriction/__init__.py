"""App restriction: saved selection, lock status and the gate that toggles them."""

from ..config import RestrictionConfig
from .gate import DEFAULT_LOCK_STATUS_KEY, DEFAULT_SELECTION_KEY, AppRestrictionGate
from .platform import LoggingRestrictionPlatform, MockRestrictionPlatform, RestrictionPlatform
from .selection import RestrictionSelection
from .state import LocalStateStore


def create_restriction_gate(
    config: RestrictionConfig | None = None,
    use_mock: bool = False,
) -> AppRestrictionGate:
    """Create the restriction gate from configuration.

    Args:
        config: Restriction configuration. Defaults are used if None.
        use_mock: Use the mock platform instead of the logging one.

    Returns:
        AppRestrictionGate over local state at the configured path.
    """
    config = config or RestrictionConfig()
    platform: RestrictionPlatform
    if use_mock:
        platform = MockRestrictionPlatform()
    else:
        platform = LoggingRestrictionPlatform()

    return AppRestrictionGate(
        state=LocalStateStore(config.state_path),
        platform=platform,
        selection_key=config.selection_key,
        lock_status_key=config.lock_status_key,
    )


__all__ = [
    "DEFAULT_LOCK_STATUS_KEY",
    "DEFAULT_SELECTION_KEY",
    "AppRestrictionGate",
    "LocalStateStore",
    "LoggingRestrictionPlatform",
    "MockRestrictionPlatform",
    "RestrictionPlatform",
    "RestrictionSelection",
    "create_restriction_gate",
]
