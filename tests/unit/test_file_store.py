from pathlib import Path

import pytest

from app.storage.file_store import LocalFileStore, UnsupportedStorageError, blob_path_for


class TestBlobPath:
    def test_uses_owner_id_and_extension(self) -> None:
        assert blob_path_for("owner-1", "doc-1", "Report.PDF") == "owner-1/doc-1.pdf"

    def test_no_extension(self) -> None:
        assert blob_path_for("owner-1", "doc-1", "README") == "owner-1/doc-1"

    def test_default_extension_used_when_name_has_none(self) -> None:
        assert blob_path_for("owner-1", "doc-1", "scan", ".png") == "owner-1/doc-1.png"

    def test_name_extension_wins_over_default(self) -> None:
        assert blob_path_for("owner-1", "doc-1", "scan.JPEG", ".jpg") == "owner-1/doc-1.jpeg"


class TestSaveAndResolve:
    def test_save_writes_bytes(self, tmp_path: Path) -> None:
        store = LocalFileStore(files_root=tmp_path)

        blob_path = store.save("10", "abc-123", "scan.png", b"\x89PNG data")

        assert blob_path == "10/abc-123.png"
        assert (tmp_path / "10" / "abc-123.png").read_bytes() == b"\x89PNG data"

    def test_resolve_returns_stored_path(self, tmp_path: Path) -> None:
        store = LocalFileStore(files_root=tmp_path)
        blob_path = store.save("10", "def-456", "a.txt", b"hello")

        path = store.resolve(blob_path)

        assert path.read_bytes() == b"hello"

    def test_resolve_raises_when_file_missing(self, tmp_path: Path) -> None:
        store = LocalFileStore(files_root=tmp_path)

        with pytest.raises(FileNotFoundError, match="missing"):
            store.resolve("10/missing.pdf")

    def test_resolve_rejects_escaping_paths(self, tmp_path: Path) -> None:
        store = LocalFileStore(files_root=tmp_path / "files")

        with pytest.raises(UnsupportedStorageError):
            store.resolve("../secrets.txt")


class TestDelete:
    def test_delete_removes_file(self, tmp_path: Path) -> None:
        store = LocalFileStore(files_root=tmp_path)
        blob_path = store.save("10", "gone", "a.txt", b"bye")

        store.delete(blob_path)

        assert not (tmp_path / blob_path).exists()

    def test_delete_missing_file_is_noop(self, tmp_path: Path) -> None:
        LocalFileStore(files_root=tmp_path).delete("10/never.txt")
