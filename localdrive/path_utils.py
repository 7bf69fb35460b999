"""Helpers for mapping drive ids onto backing-store paths."""

from __future__ import annotations

from pathlib import PurePath, PurePosixPath

from .exceptions import AccessDeniedError


def normalize_path(path: PurePath) -> PurePath:
    """Collapse ``.`` and ``..`` segments without touching the store.

    ``..`` never climbs above the anchor of an absolute path, so
    ``/data/../../x`` becomes ``/x``.
    """
    anchor = path.anchor
    parts: list[str] = []
    for part in path.parts[1 if anchor else 0 :]:
        if part in ("", "."):
            continue
        if part == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not anchor:
                parts.append(part)
            continue
        parts.append(part)
    return type(path)(anchor, *parts)


def is_within(path: PurePath, root: PurePath) -> bool:
    """True when ``path`` equals ``root`` or lies below it.

    This is a component-wise test: ``/database`` is not inside ``/data``.
    """
    path = normalize_path(path)
    root = normalize_path(root)
    return path == root or root in path.parents


class PathResolver:
    """Translate between root-relative ids and backing paths."""

    def __init__(self, root: PurePath) -> None:
        self.root = normalize_path(root)

    def to_backing_path(self, entry_id: str | None) -> PurePath:
        """Join ``entry_id`` onto the root and normalize the result.

        The result may lie outside the root when the id carries ``..``
        segments; callers must run it through the sandbox policy.
        """
        # "//" survives as its own anchor part in PurePosixPath
        segments = [part for part in PurePosixPath(entry_id or "/").parts if part.strip("/")]
        return normalize_path(self.root.joinpath(*segments))

    def to_id(self, path: PurePath) -> str:
        try:
            relative = normalize_path(path).relative_to(self.root)
        except ValueError:
            raise AccessDeniedError("Path is outside of the drive root", path=str(path)) from None
        if not relative.parts:
            return "/"
        return "/" + "/".join(relative.parts)

    def contains(self, path: PurePath) -> bool:
        return is_within(path, self.root)


__all__ = ["normalize_path", "is_within", "PathResolver"]
