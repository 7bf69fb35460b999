"""Backing-store adapters.

A drive never touches storage directly: every read, write, stat, rename,
delete and copy goes through a :class:`BackingStore`. ``LocalStore`` maps
onto the host filesystem, ``MemoryStore`` keeps an in-process tree.
"""

from __future__ import annotations

import errno
import io
import os
import shutil
import stat as stat_mode
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePath, PurePosixPath
from typing import BinaryIO

from .path_utils import normalize_path


@dataclass(frozen=True)
class StoreStat:
    is_dir: bool
    size: int
    modified_at: int


class BackingStore:
    def resolve_root(self, root: str | PurePath) -> PurePath:
        """Return the absolute, normalized backing path for a drive root."""
        raise NotImplementedError

    def stat(self, path: PurePath) -> StoreStat:
        raise NotImplementedError

    def scandir(self, path: PurePath) -> list[tuple[str, StoreStat]]:
        raise NotImplementedError

    def read_bytes(self, path: PurePath) -> bytes:
        raise NotImplementedError

    def open(self, path: PurePath) -> BinaryIO:
        raise NotImplementedError

    def write_bytes(self, path: PurePath, data: bytes) -> None:
        raise NotImplementedError

    def makedirs(self, path: PurePath) -> None:
        raise NotImplementedError

    def remove(self, path: PurePath) -> None:
        raise NotImplementedError

    def copy_file(self, source: PurePath, target: PurePath) -> None:
        raise NotImplementedError

    def copy_tree(self, source: PurePath, target: PurePath) -> None:
        raise NotImplementedError

    def rename(self, source: PurePath, target: PurePath) -> None:
        raise NotImplementedError

    def exists(self, path: PurePath) -> bool:
        try:
            self.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return True

    def is_dir(self, path: PurePath) -> bool:
        try:
            return self.stat(path).is_dir
        except (FileNotFoundError, NotADirectoryError):
            return False


def _private_file(path: str | PurePath, flags: int) -> int:
    return os.open(path, flags, 0o600)


class LocalStore(BackingStore):
    """Store backed by the host filesystem."""

    def resolve_root(self, root: str | PurePath) -> PurePath:
        return Path(os.path.abspath(os.path.expanduser(str(root))))

    @staticmethod
    def _to_stat(info: os.stat_result) -> StoreStat:
        is_dir = stat_mode.S_ISDIR(info.st_mode)
        return StoreStat(
            is_dir=is_dir,
            size=0 if is_dir else info.st_size,
            modified_at=int(info.st_mtime),
        )

    def stat(self, path: PurePath) -> StoreStat:
        return self._to_stat(os.stat(path))

    def scandir(self, path: PurePath) -> list[tuple[str, StoreStat]]:
        """List direct children without following symlinks.

        A link is reported as a plain entry, never as a folder, so listings
        cannot walk out of the tree or loop through a link to an ancestor.
        """
        with os.scandir(path) as it:
            return [(entry.name, self._to_stat(entry.stat(follow_symlinks=False))) for entry in it]

    def read_bytes(self, path: PurePath) -> bytes:
        return Path(path).read_bytes()

    def open(self, path: PurePath) -> BinaryIO:
        return open(path, "rb")

    def write_bytes(self, path: PurePath, data: bytes) -> None:
        with open(path, "wb", opener=_private_file) as handle:
            handle.write(data)

    def makedirs(self, path: PurePath) -> None:
        os.makedirs(path, mode=0o700, exist_ok=True)

    def remove(self, path: PurePath) -> None:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        elif os.path.lexists(path):
            os.remove(path)

    def copy_file(self, source: PurePath, target: PurePath) -> None:
        shutil.copyfile(source, target)
        shutil.copymode(source, target)

    def copy_tree(self, source: PurePath, target: PurePath) -> None:
        shutil.copytree(source, target, dirs_exist_ok=True)

    def rename(self, source: PurePath, target: PurePath) -> None:
        os.replace(source, target)


def _os_error(cls: type[OSError], code: int, path: PurePath) -> OSError:
    return cls(code, os.strerror(code), str(path))


@dataclass
class _MemoryNode:
    is_dir: bool
    data: bytes = b""
    children: dict[str, _MemoryNode] = field(default_factory=dict)
    modified_at: float = field(default_factory=time.time)


class MemoryStore(BackingStore):
    """In-process store with POSIX paths and host-like error behaviour."""

    def __init__(self, files: Mapping[str, bytes | str] | None = None) -> None:
        self._root = _MemoryNode(is_dir=True)
        for name, content in (files or {}).items():
            target = self.resolve_root(name)
            self.makedirs(target.parent)
            self.write_bytes(target, content.encode("utf-8") if isinstance(content, str) else content)

    def resolve_root(self, root: str | PurePath) -> PurePath:
        return normalize_path(PurePosixPath("/", str(root)))

    def _lookup(self, path: PurePath) -> _MemoryNode:
        node = self._root
        for part in normalize_path(PurePosixPath(path)).parts[1:]:
            if not node.is_dir:
                raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
            child = node.children.get(part)
            if child is None:
                raise _os_error(FileNotFoundError, errno.ENOENT, path)
            node = child
        return node

    def _parent(self, path: PurePath) -> tuple[_MemoryNode, str]:
        path = normalize_path(PurePosixPath(path))
        if not path.name:
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        parent = self._lookup(path.parent)
        if not parent.is_dir:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
        return parent, path.name

    def _file(self, path: PurePath) -> _MemoryNode:
        node = self._lookup(path)
        if node.is_dir:
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        return node

    def stat(self, path: PurePath) -> StoreStat:
        node = self._lookup(path)
        return StoreStat(
            is_dir=node.is_dir,
            size=0 if node.is_dir else len(node.data),
            modified_at=int(node.modified_at),
        )

    def scandir(self, path: PurePath) -> list[tuple[str, StoreStat]]:
        node = self._lookup(path)
        if not node.is_dir:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, path)
        return [(name, self.stat(PurePosixPath(path, name))) for name in node.children]

    def read_bytes(self, path: PurePath) -> bytes:
        return self._file(path).data

    def open(self, path: PurePath) -> BinaryIO:
        return io.BytesIO(self._file(path).data)

    def write_bytes(self, path: PurePath, data: bytes) -> None:
        parent, name = self._parent(path)
        existing = parent.children.get(name)
        if existing is not None and existing.is_dir:
            raise _os_error(IsADirectoryError, errno.EISDIR, path)
        parent.children[name] = _MemoryNode(is_dir=False, data=bytes(data))
        parent.modified_at = time.time()

    def makedirs(self, path: PurePath) -> None:
        node = self._root
        for part in normalize_path(PurePosixPath(path)).parts[1:]:
            child = node.children.get(part)
            if child is None:
                child = _MemoryNode(is_dir=True)
                node.children[part] = child
                node.modified_at = time.time()
            elif not child.is_dir:
                raise _os_error(FileExistsError, errno.EEXIST, path)
            node = child

    def remove(self, path: PurePath) -> None:
        path = normalize_path(PurePosixPath(path))
        if not path.name:
            self._root.children.clear()
            return
        try:
            parent, name = self._parent(path)
        except (FileNotFoundError, NotADirectoryError):
            return
        if parent.children.pop(name, None) is not None:
            parent.modified_at = time.time()

    def copy_file(self, source: PurePath, target: PurePath) -> None:
        self.write_bytes(target, self._file(source).data)

    def copy_tree(self, source: PurePath, target: PurePath) -> None:
        node = self._lookup(source)
        if not node.is_dir:
            raise _os_error(NotADirectoryError, errno.ENOTDIR, source)
        self.makedirs(target)
        for name, child in list(node.children.items()):
            if child.is_dir:
                self.copy_tree(PurePosixPath(source, name), PurePosixPath(target, name))
            else:
                self.write_bytes(PurePosixPath(target, name), child.data)

    def rename(self, source: PurePath, target: PurePath) -> None:
        source = normalize_path(PurePosixPath(source))
        target = normalize_path(PurePosixPath(target))
        node = self._lookup(source)
        if source == target:
            return
        source_parent, source_name = self._parent(source)
        target_parent, target_name = self._parent(target)
        existing = target_parent.children.get(target_name)
        if existing is not None:
            if existing.is_dir and not node.is_dir:
                raise _os_error(IsADirectoryError, errno.EISDIR, target)
            if node.is_dir and not existing.is_dir:
                raise _os_error(NotADirectoryError, errno.ENOTDIR, target)
            if existing.is_dir and existing.children:
                raise _os_error(OSError, errno.ENOTEMPTY, target)
        del source_parent.children[source_name]
        target_parent.children[target_name] = node
        source_parent.modified_at = target_parent.modified_at = time.time()


__all__ = ["StoreStat", "BackingStore", "LocalStore", "MemoryStore"]
