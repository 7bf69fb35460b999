"""Drive facade: sandboxed file operations over a backing store."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from pathlib import PurePath
from typing import BinaryIO

import structlog

from .adapters import BackingStore, LocalStore, StoreStat
from .collisions import CollisionResolver, OperationConfig
from .exceptions import (
    AccessDeniedError,
    ConfigError,
    ConflictError,
    DriveError,
    NotFoundError,
    StorageError,
)
from .kinds import Classifier, classify
from .listing import Lister, ListOptions
from .nodes import FsEntry
from .path_utils import PathResolver
from .policies import Combined, Operation, Policy, RootSandbox

log = structlog.get_logger(__name__)


class Drive:
    """A folder exposed through root-relative ids.

    Every operation resolves ids against the root and asks the policy before
    it touches the store. The root sandbox is always part of the policy, so
    no operation can reach outside the root whatever policy the caller
    supplies.
    """

    __slots__ = (
        "_root",
        "_store",
        "_resolver",
        "_policy",
        "_list_options",
        "_operation",
        "_classifier",
        "_lister",
        "_collisions",
        "_verbose",
    )

    def __init__(
        self,
        root: str | PurePath,
        *,
        store: BackingStore | None = None,
        policy: Policy | None = None,
        list_options: ListOptions | None = None,
        operation: OperationConfig | None = None,
        classifier: Classifier = classify,
        verbose: bool = False,
    ) -> None:
        store = store if store is not None else LocalStore()
        if not str(root).strip():
            raise ConfigError("Drive root is required")
        try:
            resolved = store.resolve_root(root)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Invalid path: {root}", path=str(root)) from exc
        if not store.is_dir(resolved):
            raise ConfigError(f"Drive root is not a folder: {resolved}", path=str(resolved))

        self._store = store
        self._resolver = PathResolver(resolved)
        self._root = self._resolver.root
        sandbox = RootSandbox(self._root)
        self._policy: Policy = Combined([policy, sandbox]) if policy is not None else sandbox
        self._list_options = list_options or ListOptions()
        self._operation = operation or OperationConfig()
        self._classifier = classifier
        self._lister = Lister(store, self._resolver, classifier)
        self._collisions = CollisionResolver(store)
        self._verbose = verbose

    def __repr__(self) -> str:
        return f"Drive(root={str(self._root)!r}, operation={self._operation!r})"

    @property
    def root(self) -> PurePath:
        return self._root

    @property
    def store(self) -> BackingStore:
        return self._store

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    @property
    def policy(self) -> Policy:
        return self._policy

    @property
    def list_options(self) -> ListOptions:
        return self._list_options

    @property
    def operation(self) -> OperationConfig:
        return self._operation

    def with_operation_config(self, config: OperationConfig) -> Drive:
        """Return a new drive sharing root, store and policy but using ``config``."""
        derived = object.__new__(type(self))
        for name in Drive.__slots__:
            setattr(derived, name, getattr(self, name))
        derived._operation = config
        return derived

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _trace(self, event: str, **fields: object) -> None:
        if self._verbose:
            log.info(event, root=str(self._root), **fields)

    def _authorize(self, entry_id: str | None, operation: Operation) -> PurePath:
        path = self._resolver.to_backing_path(entry_id)
        self._ensure(path, operation, entry_id)
        return path

    def _ensure(self, path: PurePath, operation: Operation, entry_id: str | None) -> None:
        if not self._policy.comply(path, operation):
            log.warning("access denied", operation=operation.value, id=entry_id, path=str(path))
            raise AccessDeniedError("Access Denied", path=entry_id)

    @contextlib.contextmanager
    def _store_call(self, entry_id: str | None) -> Iterator[None]:
        try:
            yield
        except FileNotFoundError as exc:
            raise NotFoundError(f"Not found: {entry_id}", path=entry_id) from exc
        except OSError as exc:
            raise StorageError(str(exc), path=entry_id) from exc

    def _stat_or_none(self, path: PurePath, entry_id: str | None) -> StoreStat | None:
        with self._store_call(entry_id):
            try:
                return self._store.stat(path)
            except (FileNotFoundError, NotADirectoryError):
                return None

    def _free_target(self, path: PurePath, entry_id: str | None) -> PurePath:
        if not self._operation.prevent_name_collision:
            return path
        if path == self._root:
            raise ConflictError("Drive root already exists", path=entry_id)
        with self._store_call(entry_id):
            free = self._collisions.resolve(path)
        if free != path:
            self._ensure(free, Operation.WRITE, entry_id)
        return free

    def _place(self, source_id: str, target_id: str, *, move: bool) -> tuple[PurePath, PurePath, bool]:
        source = self._authorize(source_id, Operation.READ)
        if move:
            self._ensure(source, Operation.WRITE, source_id)
        target = self._authorize(target_id, Operation.WRITE)

        source_stat = self._stat_or_none(source, source_id)
        if source_stat is None:
            raise NotFoundError(f"Not found: {source_id}", path=source_id)
        target_stat = self._stat_or_none(target, target_id)

        if target_stat is not None and target_stat.is_dir:
            target = target / source.name
            self._ensure(target, Operation.WRITE, target_id)
        elif source_stat.is_dir and target_stat is not None:
            raise ConflictError("Can't copy folder to file", path=target_id)

        if source in target.parents:
            raise ConflictError("Can't copy folder into self", path=target_id)

        target = self._free_target(target, target_id)
        if target == source:
            raise ConflictError("Source and target are the same entry", path=target_id)
        return source, target, source_stat.is_dir

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def exists(self, entry_id: str) -> bool:
        try:
            self.info(entry_id)
        except DriveError:
            return False
        return True

    def info(self, entry_id: str) -> FsEntry:
        path = self._authorize(entry_id, Operation.READ)
        with self._store_call(entry_id):
            stat = self._store.stat(path)
        return FsEntry(
            name=path.name,
            id=self._resolver.to_id(path),
            size=stat.size,
            modified_at=stat.modified_at,
            kind=self._classifier(path.name, stat.is_dir),
        )

    def read(self, entry_id: str) -> bytes:
        self._trace("read", id=entry_id)
        path = self._authorize(entry_id, Operation.READ)
        with self._store_call(entry_id):
            return self._store.read_bytes(path)

    def open(self, entry_id: str) -> BinaryIO:
        """Return a seekable binary stream; the caller closes it."""
        self._trace("open", id=entry_id)
        path = self._authorize(entry_id, Operation.READ)
        with self._store_call(entry_id):
            return self._store.open(path)

    def list(self, entry_id: str = "/", options: ListOptions | None = None) -> list[FsEntry]:
        self._trace("list", id=entry_id, options=options)
        path = self._authorize(entry_id, Operation.READ)
        with self._store_call(entry_id):
            return self._lister.list(path, options or self._list_options)

    def remove(self, entry_id: str) -> None:
        self._trace("remove", id=entry_id)
        path = self._authorize(entry_id, Operation.WRITE)
        if path == self._root:
            raise ConflictError("Can't remove the drive root", path=entry_id)
        with self._store_call(entry_id):
            self._store.remove(path)

    def mkdir(self, entry_id: str) -> str:
        self._trace("mkdir", id=entry_id)
        path = self._authorize(entry_id, Operation.WRITE)
        path = self._free_target(path, entry_id)
        with self._store_call(entry_id):
            self._store.makedirs(path)
        return self._resolver.to_id(path)

    def write(self, entry_id: str, data: bytes | str | BinaryIO) -> str:
        self._trace("write", id=entry_id)
        path = self._authorize(entry_id, Operation.WRITE)
        path = self._free_target(path, entry_id)
        if isinstance(data, str):
            payload = data.encode("utf-8")
        elif isinstance(data, (bytes, bytearray, memoryview)):
            payload = bytes(data)
        else:
            payload = data.read()
        with self._store_call(entry_id):
            self._store.write_bytes(path, payload)
        return self._resolver.to_id(path)

    def copy(self, source_id: str, target_id: str) -> str:
        self._trace("copy", source=source_id, target=target_id)
        source, target, is_dir = self._place(source_id, target_id, move=False)
        with self._store_call(target_id):
            if is_dir:
                self._store.copy_tree(source, target)
            else:
                self._store.copy_file(source, target)
        return self._resolver.to_id(target)

    def move(self, source_id: str, target_id: str) -> str:
        self._trace("move", source=source_id, target=target_id)
        source, target, _ = self._place(source_id, target_id, move=True)
        with self._store_call(target_id):
            self._store.rename(source, target)
        return self._resolver.to_id(target)


__all__ = ["Drive"]
