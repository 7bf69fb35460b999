"""Access policies deciding which operations a drive may perform."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Protocol

from .path_utils import is_within, normalize_path


class Operation(Enum):
    READ = "read"
    WRITE = "write"


class Policy(Protocol):
    """Anything with a ``comply`` predicate can act as a policy."""

    def comply(self, path: str | PurePath, operation: Operation) -> bool: ...


@dataclass(frozen=True)
class AllowAll:
    def comply(self, path: str | PurePath, operation: Operation) -> bool:
        return True


@dataclass(frozen=True)
class DenyAll:
    def comply(self, path: str | PurePath, operation: Operation) -> bool:
        return False


@dataclass(frozen=True)
class ReadOnly:
    """Allows reads and blocks any modification."""

    def comply(self, path: str | PurePath, operation: Operation) -> bool:
        return operation is Operation.READ


@dataclass(frozen=True)
class RootSandbox:
    """Allows operations only on paths inside ``root``."""

    root: PurePath

    def __init__(self, root: str | PurePath) -> None:
        object.__setattr__(self, "root", normalize_path(PurePath(root)))

    def comply(self, path: str | PurePath, operation: Operation) -> bool:
        candidate = path if isinstance(path, PurePath) else type(self.root)(path)
        return is_within(candidate, self.root)


@dataclass(frozen=True)
class Combined:
    """Complies only when every member complies, checked in order."""

    policies: tuple[Policy, ...] = ()

    def __init__(self, policies: Iterable[Policy] = ()) -> None:
        object.__setattr__(self, "policies", tuple(policies))

    def comply(self, path: str | PurePath, operation: Operation) -> bool:
        return all(policy.comply(path, operation) for policy in self.policies)


__all__ = [
    "Operation",
    "Policy",
    "AllowAll",
    "DenyAll",
    "ReadOnly",
    "RootSandbox",
    "Combined",
]
