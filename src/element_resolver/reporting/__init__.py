"""
Reporting module - Persisted diagnostics.
"""

from element_resolver.reporting.snapshot_store import SnapshotStore, SavedSnapshot

__all__ = [
    "SnapshotStore",
    "SavedSnapshot",
]
