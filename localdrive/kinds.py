"""Extension based classification of drive entries."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import PurePosixPath
from types import MappingProxyType

FOLDER = "folder"
FILE = "file"

_CATEGORIES: dict[str, tuple[str, ...]] = {
    "document": ("docx", "doc", "odt", "xls", "xlsx", "pdf", "djvu", "djv", "pptx", "ppt"),
    "text": ("txt", "md"),
    "code": ("html", "htm", "js", "json", "css", "scss", "sass", "php", "sh", "coffee"),
    "video": ("mpg", "mp4", "avi", "mkv", "ogv"),
    "image": ("png", "jpg", "jpeg", "gif", "tiff", "tif", "svg"),
    "audio": ("mp3", "ogg", "flac", "wav"),
    "archive": ("zip", "rar", "7z", "tar", "gz"),
}

KIND_BY_EXTENSION = MappingProxyType(
    {ext: kind for kind, extensions in _CATEGORIES.items() for ext in extensions}
)

Classifier = Callable[[str, bool], str]


def classify(name: str, is_dir: bool) -> str:
    """Return ``"folder"``, a category such as ``"image"``, or ``"file"``."""
    if is_dir:
        return FOLDER
    suffix = PurePosixPath(name).suffix
    if not suffix:
        return FILE
    return KIND_BY_EXTENSION.get(suffix[1:].lower(), FILE)


__all__ = ["FOLDER", "FILE", "KIND_BY_EXTENSION", "Classifier", "classify"]
