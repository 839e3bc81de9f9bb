import shutil

import pytest

from gallery.storage import InvalidStorageKey, StorageError, StoredFile, StoredFileNotFound
from gallery.storage.local_storage import LocalStorage


@pytest.mark.asyncio
async def test_upload_then_list(storage):
    url = await storage.upload(b"pixels", "oracle-1.png", content_type="image/png")

    assert url == "/artworks/oracle-1.png"
    assert (storage.root / "oracle-1.png").read_bytes() == b"pixels"
    assert await storage.list() == [StoredFile(name="oracle-1.png", url="/artworks/oracle-1.png")]


@pytest.mark.asyncio
async def test_list_skips_hidden_files_and_directories(storage):
    (storage.root / "b.png").write_bytes(b"b")
    (storage.root / "a.jpg").write_bytes(b"a")
    (storage.root / ".gitkeep").write_bytes(b"")
    (storage.root / "nested").mkdir()

    files = await storage.list()

    assert [f.name for f in files] == ["a.jpg", "b.png"]


@pytest.mark.asyncio
async def test_list_missing_root_raises(storage):
    shutil.rmtree(storage.root)

    with pytest.raises(StorageError):
        await storage.list()


@pytest.mark.asyncio
async def test_delete(storage):
    (storage.root / "gone.png").write_bytes(b"x")

    await storage.delete("gone.png")

    assert not (storage.root / "gone.png").exists()
    assert await storage.list() == []


@pytest.mark.asyncio
async def test_delete_missing_file(storage):
    with pytest.raises(StoredFileNotFound):
        await storage.delete("never-uploaded.png")


@pytest.mark.parametrize("key", ["", ".", "..", "../secret.png", "a/b.png", "a\\b.png", "nul\0.png"])
def test_path_for_rejects_traversal(storage, key):
    with pytest.raises(InvalidStorageKey):
        storage.path_for(key)


@pytest.mark.asyncio
async def test_upload_rejects_traversal(storage, tmp_path):
    with pytest.raises(InvalidStorageKey):
        await storage.upload(b"x", "../escape.png")
    assert not (tmp_path / "escape.png").exists()


@pytest.mark.asyncio
async def test_delete_rejects_traversal(storage, tmp_path):
    outside = tmp_path / "keep.png"
    outside.write_bytes(b"x")

    with pytest.raises(InvalidStorageKey):
        await storage.delete("../keep.png")
    assert outside.exists()


def test_base_url(tmp_path):
    storage = LocalStorage(root=tmp_path, base_url="http://cdn.test/artworks/")
    assert storage.url_for("a.png") == "http://cdn.test/artworks/a.png"


def test_creates_root(tmp_path):
    root = tmp_path / "deep" / "artworks"
    LocalStorage(root=root)
    assert root.is_dir()


@pytest.mark.asyncio
async def test_upload_never_overwrites(storage):
    await storage.upload(b"first", "same-1700000000500.png")

    with pytest.raises(StorageError):
        await storage.upload(b"second", "same-1700000000500.png")
    assert (storage.root / "same-1700000000500.png").read_bytes() == b"first"


def test_urls_are_percent_encoded(tmp_path):
    storage = LocalStorage(root=tmp_path, base_url="http://cdn.test/artworks")
    assert storage.url_for("a%20b #1?.png") == "http://cdn.test/artworks/a%2520b%20%231%3F.png"
    assert LocalStorage(root=tmp_path, base_url="").url_for("two words.png") == "/artworks/two%20words.png"
