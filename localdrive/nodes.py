"""Entry records returned by drive listings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .kinds import FOLDER


@dataclass
class FsEntry:
    """One file or folder as seen through a drive.

    ``id`` is root-relative and always uses forward slashes. ``children`` is
    only filled by nested listings, and only for folders with matching
    descendants.
    """

    name: str
    id: str
    size: int
    modified_at: int
    kind: str
    children: list[FsEntry] = field(default_factory=list)

    @property
    def is_folder(self) -> bool:
        return self.kind == FOLDER

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "id": self.id,
            "size": self.size,
            "modifiedAt": self.modified_at,
            "kind": self.kind,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data


__all__ = ["FsEntry", "FOLDER"]
