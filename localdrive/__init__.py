"""localdrive package: sandboxed drive over a local folder tree."""

from .adapters import BackingStore, LocalStore, MemoryStore, StoreStat
from .collisions import OperationConfig
from .drive import Drive
from .exceptions import (
    AccessDeniedError,
    ConfigError,
    ConflictError,
    DriveError,
    NotFoundError,
    StorageError,
)
from .kinds import classify
from .listing import ListOptions, glob_matcher, regex_matcher
from .nodes import FsEntry
from .policies import AllowAll, Combined, DenyAll, Operation, Policy, ReadOnly, RootSandbox

__all__ = [
    "Drive",
    "FsEntry",
    "ListOptions",
    "OperationConfig",
    "glob_matcher",
    "regex_matcher",
    "classify",
    "Operation",
    "Policy",
    "AllowAll",
    "DenyAll",
    "ReadOnly",
    "RootSandbox",
    "Combined",
    "BackingStore",
    "StoreStat",
    "LocalStore",
    "MemoryStore",
    "DriveError",
    "AccessDeniedError",
    "StorageError",
    "NotFoundError",
    "ConflictError",
    "ConfigError",
]
