"""Write-target renaming for drives that must not overwrite."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

from .adapters import BackingStore

COLLISION_SUFFIX = ".new"


@dataclass(frozen=True)
class OperationConfig:
    prevent_name_collision: bool = False


class CollisionResolver:
    def __init__(self, store: BackingStore, suffix: str = COLLISION_SUFFIX) -> None:
        if not suffix:
            raise ValueError("Collision suffix must not be empty")
        self.store = store
        self.suffix = suffix

    def resolve(self, path: PurePath) -> PurePath:
        """Append the suffix until no entry exists at the returned path."""
        while self.store.exists(path):
            path = path.with_name(path.name + self.suffix)
        return path


__all__ = ["COLLISION_SUFFIX", "OperationConfig", "CollisionResolver"]
