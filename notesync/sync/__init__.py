"""
Public sync API surface.

External callers (CLI, tests) should import from here rather than reaching
into submodules directly.

    • sync_notes: main orchestrator entry point
    • SyncReport: counters accumulated during a run
"""

from .orchestrator import SyncReport, sync_notes

__all__ = [
    "sync_notes",
    "SyncReport",
]
