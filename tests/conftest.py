from pathlib import Path

import pytest

from localdrive import Drive, MemoryStore, OperationConfig

SANDBOX_FILES = {
    "sub/deep/deep.doc": "test\n",
    "sub/c.jpg": "jpeg",
    "a.txt": "alpha",
    "b.txt": "beta",
    "c.jpg": "jpeg",
}
SANDBOX_FOLDERS = ("sub/test.folder", "test.folder")


@pytest.fixture
def sandbox(tmp_path: Path) -> Path:
    root = tmp_path / "sandbox"
    for name, content in SANDBOX_FILES.items():
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)
    for name in SANDBOX_FOLDERS:
        (root / name).mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def drive(sandbox: Path) -> Drive:
    return Drive(sandbox)


@pytest.fixture
def collision_drive(drive: Drive) -> Drive:
    return drive.with_operation_config(OperationConfig(prevent_name_collision=True))


@pytest.fixture
def memory_store() -> MemoryStore:
    store = MemoryStore({f"data/{name}": content for name, content in SANDBOX_FILES.items()})
    for name in SANDBOX_FOLDERS:
        store.makedirs(store.resolve_root(f"data/{name}"))
    return store


@pytest.fixture
def memory_drive(memory_store: MemoryStore) -> Drive:
    return Drive("/data", store=memory_store)
