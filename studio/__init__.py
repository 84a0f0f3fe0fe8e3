"""Workspace core for the Craft studio.

In-memory project state and the pure helpers around it:
- VFSStore: path -> content mapping with explicit placeholders
- build_tree / ExpansionState: project explorer projection
- clean_source: hot-reload instrumentation cleanup
- ActivityLog: operator-facing event log
- PreferenceStore: persisted local preferences
- StudioConfig: environment-driven configuration
"""

from studio.activity_log import ActivityLog, LogEntry
from studio.config import StudioConfig
from studio.preferences import BridgeSettings, PreferenceStore, Preferences
from studio.sanitizer import clean_files, clean_source
from studio.templates import starter_files
from studio.tree import (
    ExpansionState,
    InvalidPathError,
    PathConflictError,
    TreeNode,
    build_tree,
    iter_files,
)
from studio.vfs import PLACEHOLDER, VFSStore

__all__ = [
    "ActivityLog",
    "BridgeSettings",
    "ExpansionState",
    "InvalidPathError",
    "LogEntry",
    "PLACEHOLDER",
    "PathConflictError",
    "PreferenceStore",
    "Preferences",
    "StudioConfig",
    "TreeNode",
    "VFSStore",
    "build_tree",
    "clean_files",
    "clean_source",
    "iter_files",
    "starter_files",
]
