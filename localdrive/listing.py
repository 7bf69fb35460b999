"""Folder listing: traversal, filtering and ordering of drive entries."""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import PurePath

from .adapters import BackingStore
from .kinds import FOLDER, Classifier, classify
from .nodes import FsEntry
from .path_utils import PathResolver

Matcher = Callable[[str], bool]


@dataclass(frozen=True)
class ListOptions:
    """Controls what a listing returns.

    ``include`` and ``exclude`` receive the entry name. A file that fails
    ``include`` or matches ``exclude`` is left out. A folder that fails them
    is left out too, but is still walked when ``recursive`` is set. Flat
    listings keep its matching descendants; nested listings drop them along
    with the folder entry.
    """

    skip_files: bool = False
    recursive: bool = False
    nested: bool = False
    include: Matcher | None = None
    exclude: Matcher | None = None

    def filtered_out(self, name: str) -> bool:
        if self.exclude is not None and self.exclude(name):
            return True
        if self.include is not None and not self.include(name):
            return True
        return False


def glob_matcher(*patterns: str) -> Matcher:
    """Case-insensitive shell-style name matcher."""
    lowered = [pattern.lower() for pattern in patterns]

    def match(name: str) -> bool:
        candidate = name.lower()
        return any(fnmatch.fnmatchcase(candidate, pattern) for pattern in lowered)

    return match


def regex_matcher(pattern: str, flags: int = 0) -> Matcher:
    compiled = re.compile(pattern, flags)

    def match(name: str) -> bool:
        return compiled.search(name) is not None

    return match


def sort_entries(entries: list[FsEntry]) -> None:
    """Folders first, then case-insensitive by name."""
    entries.sort(key=lambda entry: (not entry.is_folder, entry.name.upper()))


class Lister:
    """Walks a backing folder and builds flat or nested entry lists."""

    def __init__(
        self,
        store: BackingStore,
        resolver: PathResolver,
        classifier: Classifier = classify,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.classifier = classifier

    def list(self, folder: PurePath, options: ListOptions) -> list[FsEntry]:
        return self._list_folder(folder, options, None)

    def _list_folder(
        self,
        folder: PurePath,
        options: ListOptions,
        accumulator: list[FsEntry] | None,
    ) -> list[FsEntry]:
        # Nested listings start a new list per folder; flat listings share the
        # caller's list and are sorted once at the top.
        fresh = options.nested or accumulator is None
        result: list[FsEntry] = [] if fresh or accumulator is None else accumulator

        for name, info in self.store.scandir(folder):
            skipped = options.filtered_out(name)
            if not info.is_dir and (options.skip_files or skipped):
                continue

            path = folder / name
            entry = FsEntry(
                name=name,
                id=self.resolver.to_id(path),
                size=info.size,
                modified_at=info.modified_at,
                kind=self.classifier(name, info.is_dir),
            )

            if info.is_dir and options.recursive:
                entry.kind = FOLDER
                descendants = self._list_folder(path, options, result)
                if options.nested:
                    entry.children = descendants

            if not skipped:
                result.append(entry)

        if fresh:
            sort_entries(result)
        return result


__all__ = [
    "Matcher",
    "ListOptions",
    "glob_matcher",
    "regex_matcher",
    "sort_entries",
    "Lister",
]
