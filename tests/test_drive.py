from pathlib import Path

import pytest

from localdrive import (
    AccessDeniedError,
    ConfigError,
    ConflictError,
    DenyAll,
    Drive,
    MemoryStore,
    NotFoundError,
    OperationConfig,
    ReadOnly,
    StorageError,
)


def _same_listing(drive: Drive, a: str, b: str) -> None:
    left = drive.list(a)
    right = drive.list(b)
    assert [(e.name, e.kind, e.size) for e in left] == [(e.name, e.kind, e.size) for e in right]


def test_exists(drive: Drive):
    assert drive.exists("/sub")
    assert not drive.exists("/sub2")


def test_init_modes(sandbox: Path):
    assert Drive(sandbox).operation == OperationConfig()
    assert Drive(str(sandbox), verbose=True).root == sandbox


def test_invalid_root_is_a_config_error(sandbox: Path):
    with pytest.raises(ConfigError):
        Drive(sandbox / "missing")
    with pytest.raises(ConfigError):
        Drive(sandbox / "a.txt")
    with pytest.raises(ConfigError):
        Drive("")


def test_info(drive: Drive):
    folder = drive.info("/sub")
    assert folder.name == "sub"
    assert folder.kind == "folder"
    assert folder.id == "/sub"

    text = drive.info("a.txt")
    assert text.name == "a.txt"
    assert text.kind == "text"
    assert text.id == "/a.txt"
    assert text.size == 5

    with pytest.raises(NotFoundError):
        drive.info("/nope.txt")


def test_doubled_separators_stay_inside_root(drive: Drive):
    assert drive.info("//a.txt").id == "/a.txt"
    assert drive.read("//sub//deep/deep.doc").strip() == b"test"
    assert drive.exists("//sub//c.jpg")


def test_write_and_remove(drive: Drive):
    assert drive.write("/sub/test.doc", b"some") == "/sub/test.doc"
    assert drive.exists("/sub/test.doc")
    drive.remove("/sub/test.doc")
    assert not drive.exists("/sub/test.doc")


def test_write_overwrites_without_collision_avoidance(drive: Drive):
    assert drive.write("/sub/deep/copy.doc", b"some") == "/sub/deep/copy.doc"
    assert drive.write("/sub/deep/copy.doc", b"other") == "/sub/deep/copy.doc"
    assert drive.read("/sub/deep/copy.doc") == b"other"


def test_write_twice_with_collision_avoidance(collision_drive: Drive):
    first = collision_drive.write("/sub/deep/copy.doc", "X")
    second = collision_drive.write("/sub/deep/copy.doc", "X")
    assert first == "/sub/deep/copy.doc"
    assert second == "/sub/deep/copy.doc.new"

    collision_drive.write("/sub/deep/deep.doc", b"none")
    assert collision_drive.read("/sub/deep/deep.doc.new") == b"none"
    assert collision_drive.read("/sub/deep/deep.doc").strip() == b"test"


def test_write_accepts_streams(drive: Drive, tmp_path: Path):
    source = tmp_path / "upload.bin"
    source.write_bytes(b"\x00\x01")
    with source.open("rb") as handle:
        assert drive.write("/upload.bin", handle) == "/upload.bin"
    assert drive.read("/upload.bin") == b"\x00\x01"


def test_write_into_missing_folder_fails(drive: Drive):
    with pytest.raises(NotFoundError):
        drive.write("/missing/file.txt", b"x")


def test_read(drive: Drive):
    assert drive.read("/sub/deep/deep.doc").strip() == b"test"
    with drive.open("/sub/deep/deep.doc") as handle:
        handle.seek(1)
        assert handle.read(3) == b"est"


def test_read_folder_is_a_storage_error(drive: Drive):
    with pytest.raises(StorageError):
        drive.read("/sub")


def test_mkdir(drive: Drive, collision_drive: Drive):
    assert drive.mkdir("/alfa/123/a") == "/alfa/123/a"
    assert drive.exists("/alfa/123/a")
    drive.remove("/alfa")
    assert not drive.exists("/alfa")

    assert drive.mkdir("/sub/deep") == "/sub/deep"

    path = collision_drive.mkdir("/sub/deep")
    assert path == "/sub/deep.new"
    assert collision_drive.info(path).kind == "folder"
    collision_drive.remove(path)


def test_dot_file_names(drive: Drive):
    drive.write("/.test", b"1")
    drive.write("/test", b"2")
    names = [entry.name for entry in drive.list("/")]
    assert ".test" in names and "test" in names
    drive.remove("/.test")
    drive.remove("/test")


def test_copy_files(drive: Drive, collision_drive: Drive):
    assert drive.copy("/sub/deep/deep.doc", "/sub/deep/copy.doc") == "/sub/deep/copy.doc"
    assert drive.read("/sub/deep/copy.doc") == drive.read("/sub/deep/deep.doc")

    assert drive.copy("/sub/deep/deep.doc", "/sub") == "/sub/deep.doc"
    drive.remove("/sub/deep.doc")
    assert drive.copy("/sub/deep/deep.doc", "/sub/") == "/sub/deep.doc"
    drive.remove("/sub/deep.doc")

    assert collision_drive.copy("c.jpg", "/sub") == "/sub/c.jpg.new"
    assert collision_drive.exists("/sub/c.jpg.new")


def test_copy_folders(drive: Drive, collision_drive: Drive):
    assert drive.copy("/sub", "/sub2") == "/sub2"
    _same_listing(drive, "/sub", "/sub2")

    assert drive.copy("/sub", "/test.folder") == "/test.folder/sub"
    _same_listing(drive, "/sub", "/test.folder/sub")

    assert collision_drive.copy("/test.folder", "/sub") == "/sub/test.folder.new"
    _same_listing(drive, "/test.folder", "/sub/test.folder.new")


@pytest.mark.parametrize("target", ["/sub/", "/sub/inner", "/sub/deep", "/sub/deep/x/y"])
def test_copy_folder_into_itself_is_a_conflict(drive: Drive, sandbox: Path, target: str):
    before = sorted(p.relative_to(sandbox) for p in sandbox.rglob("*"))
    with pytest.raises(ConflictError):
        drive.copy("/sub", target)
    with pytest.raises(ConflictError):
        drive.move("/sub", target)
    assert sorted(p.relative_to(sandbox) for p in sandbox.rglob("*")) == before


def test_copy_folder_onto_file_is_a_conflict(drive: Drive):
    with pytest.raises(ConflictError):
        drive.copy("/sub", "/a.txt")
    with pytest.raises(ConflictError):
        drive.move("/sub", "/a.txt")


@pytest.mark.parametrize(("source", "target"), [("/sub", "/"), ("/a.txt", "/a.txt"), ("/c.jpg", "/")])
def test_copy_onto_itself_is_a_conflict(drive: Drive, sandbox: Path, source: str, target: str):
    before = sorted(p.relative_to(sandbox) for p in sandbox.rglob("*"))
    with pytest.raises(ConflictError):
        drive.copy(source, target)
    with pytest.raises(ConflictError):
        drive.move(source, target)
    assert sorted(p.relative_to(sandbox) for p in sandbox.rglob("*")) == before


def test_copy_onto_itself_with_collision_avoidance(collision_drive: Drive):
    assert collision_drive.copy("/a.txt", "/a.txt") == "/a.txt.new"
    assert collision_drive.copy("/sub", "/") == "/sub.new"
    assert collision_drive.read("/a.txt.new") == b"alpha"


def test_copy_missing_source(drive: Drive):
    with pytest.raises(NotFoundError):
        drive.copy("/nope", "/sub")


def test_move_file(drive: Drive, collision_drive: Drive):
    assert drive.move("/sub/deep/deep.doc", "/sub/deep/copy.doc") == "/sub/deep/copy.doc"
    assert drive.exists("/sub/deep/copy.doc")
    assert not drive.exists("/sub/deep/deep.doc")
    drive.move("/sub/deep/copy.doc", "/sub/deep/deep.doc")

    assert collision_drive.move("/c.jpg", "/sub/") == "/sub/c.jpg.new"
    assert collision_drive.exists("/sub/c.jpg.new")
    assert not collision_drive.exists("/c.jpg")


def test_move_folder(drive: Drive, collision_drive: Drive):
    assert drive.copy("/sub", "/sub3") == "/sub3"
    assert drive.move("/sub3", "/sub2") == "/sub2"
    _same_listing(drive, "/sub", "/sub2")
    assert drive.move("/sub2", "/sub/deep") == "/sub/deep/sub2"
    _same_listing(drive, "/sub", "/sub/deep/sub2")
    drive.remove("/sub/deep/sub2")

    assert collision_drive.copy("/test.folder", "/sub/deep") == "/sub/deep/test.folder"
    assert collision_drive.move("/sub/deep/test.folder", "/") == "/test.folder.new"
    _same_listing(drive, "/test.folder.new", "/test.folder")


@pytest.mark.parametrize("entry_id", ["../", "../outside.txt", "/../../etc", "sub/../../x"])
def test_traversal_is_denied_everywhere(drive: Drive, sandbox: Path, entry_id: str):
    outside = sandbox.parent / "outside.txt"
    outside.write_text("secret")

    with pytest.raises(AccessDeniedError):
        drive.list(entry_id)
    with pytest.raises(AccessDeniedError):
        drive.info(entry_id)
    with pytest.raises(AccessDeniedError):
        drive.read(entry_id)
    with pytest.raises(AccessDeniedError):
        drive.write(entry_id, b"x")
    with pytest.raises(AccessDeniedError):
        drive.mkdir(entry_id)
    with pytest.raises(AccessDeniedError):
        drive.remove(entry_id)
    with pytest.raises(AccessDeniedError):
        drive.copy(entry_id, "/sub")
    with pytest.raises(AccessDeniedError):
        drive.copy("/a.txt", entry_id)
    with pytest.raises(AccessDeniedError):
        drive.move("/a.txt", entry_id)
    assert not drive.exists(entry_id)
    assert outside.read_text() == "secret"
    assert drive.exists("/a.txt")


def test_sibling_with_shared_prefix_is_denied():
    store = MemoryStore({"data/a.txt": "a", "database/secret.txt": "s"})
    drive = Drive("/data", store=store)
    with pytest.raises(AccessDeniedError):
        drive.read("../database/secret.txt")
    with pytest.raises(AccessDeniedError):
        drive.list("/../database")


def test_read_only_policy_blocks_mutations(sandbox: Path):
    drive = Drive(sandbox, policy=ReadOnly())
    assert drive.read("/a.txt") == b"alpha"
    assert len(drive.list("/")) == 5
    with pytest.raises(AccessDeniedError):
        drive.write("/a.txt", b"changed")
    with pytest.raises(AccessDeniedError):
        drive.remove("/a.txt")
    with pytest.raises(AccessDeniedError):
        drive.mkdir("/new")
    with pytest.raises(AccessDeniedError):
        drive.copy("/a.txt", "/copy.txt")
    with pytest.raises(AccessDeniedError):
        drive.move("/a.txt", "/moved.txt")
    assert (sandbox / "a.txt").read_text() == "alpha"
    assert not (sandbox / "copy.txt").exists()


def test_deny_policy_blocks_reads(sandbox: Path):
    drive = Drive(sandbox, policy=DenyAll())
    assert not drive.exists("/a.txt")
    with pytest.raises(AccessDeniedError):
        drive.list("/")


def test_denial_happens_before_store_access(sandbox: Path):
    class ExplodingStore(MemoryStore):
        armed = False

        def write_bytes(self, path, data):
            if self.armed:
                raise AssertionError("store touched")
            super().write_bytes(path, data)

        def remove(self, path):
            raise AssertionError("store touched")

    store = ExplodingStore({"data/a.txt": "a"})
    store.armed = True
    drive = Drive("/data", store=store, policy=ReadOnly())
    with pytest.raises(AccessDeniedError):
        drive.write("/a.txt", b"x")
    with pytest.raises(AccessDeniedError):
        drive.remove("/a.txt")


def test_root_cannot_be_removed(drive: Drive, sandbox: Path):
    with pytest.raises(ConflictError):
        drive.remove("/")
    assert sandbox.is_dir()


def test_with_operation_config_returns_independent_drive(drive: Drive):
    derived = drive.with_operation_config(OperationConfig(prevent_name_collision=True))
    assert derived is not drive
    assert derived.operation.prevent_name_collision
    assert not drive.operation.prevent_name_collision
    assert derived.root == drive.root
    assert derived.policy is drive.policy

    assert drive.write("/a.txt", b"1") == "/a.txt"
    assert derived.write("/a.txt", b"2") == "/a.txt.new"


def test_memory_drive_operations(memory_drive: Drive, memory_store: MemoryStore):
    assert memory_drive.write("/sub/new.txt", "hello") == "/sub/new.txt"
    assert memory_store.read_bytes(memory_store.resolve_root("data/sub/new.txt")) == b"hello"
    assert memory_drive.copy("/sub", "/test.folder") == "/test.folder/sub"
    assert memory_drive.read("/test.folder/sub/deep/deep.doc") == b"test\n"
    assert memory_drive.move("/test.folder/sub", "/moved") == "/moved"
    assert not memory_drive.exists("/test.folder/sub")
    with pytest.raises(ConflictError):
        memory_drive.copy("/sub", "/sub/")
