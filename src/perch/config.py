"""Synchronizer configuration.

SyncConfig is a frozen dataclass, so options are attributes rather than
string-key dict lookups.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SyncConfig:
    """Synchronizer configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SyncConfig(index_suffix=".home", propagate_refresh_errors=True)
    """

    # Appended to a navigation target that names a non-terminal resource
    index_suffix: str = ".index"

    # Any dynamic handler that receives an explicit context counts as changed,
    # even when the context is the one already bound. False compares identity.
    conservative_match: bool = True

    # False: log refresh failures and keep the stale context.
    # True: let the failure escape into the task group (raised on context exit).
    propagate_refresh_errors: bool = False
