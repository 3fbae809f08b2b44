"""Infrastructure domain: configuration store, doctor checks, editor launcher.

Note: ``projsync.infrastructure.watcher`` is intentionally NOT re-exported here
because it needs the optional ``watchfiles`` dependency at call time.  Import
it directly::

    from projsync.infrastructure.watcher import watch
"""

from projsync.infrastructure.config import (
    DEFAULT_TOGGLES,
    Configuration,
    ConfigStore,
)
from projsync.infrastructure.doctor import Check, Severity, find_cycles, run_checks
from projsync.infrastructure.launcher import (
    Installation,
    Target,
    build_command,
    find_installations,
    installation_for_path,
    open_in_editor,
)

__all__ = [
    "DEFAULT_TOGGLES",
    "Check",
    "ConfigStore",
    "Configuration",
    "Installation",
    "Severity",
    "Target",
    "build_command",
    "find_cycles",
    "find_installations",
    "installation_for_path",
    "open_in_editor",
    "run_checks",
]
