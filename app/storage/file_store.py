from pathlib import Path, PurePosixPath


class UnsupportedStorageError(Exception):
    """Raised when a blob path cannot be served by the local store."""


def blob_path_for(
    owner_id: str, document_id: str, file_name: str, default_extension: str = ""
) -> str:
    """Build the storage locator: {owner_id}/{document_id}{ext}

    ``default_extension`` is used when the file name has no suffix.
    """
    extension = PurePosixPath(file_name).suffix.lower() or default_extension
    return f"{owner_id}/{document_id}{extension}"


class LocalFileStore:
    """Stores raw upload bytes under a root directory on the local disk."""

    def __init__(self, files_root: Path) -> None:
        self._files_root = files_root

    def save(
        self,
        owner_id: str,
        document_id: str,
        file_name: str,
        data: bytes,
        default_extension: str = "",
    ) -> str:
        """Write bytes to disk and return the blob path to store on the document."""
        blob_path = blob_path_for(owner_id, document_id, file_name, default_extension)
        path = self._path_for(blob_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return blob_path

    def resolve(self, blob_path: str) -> Path:
        """Return the local path of a stored blob.

        Raises:
            UnsupportedStorageError: if the blob path points outside the root.
            FileNotFoundError: if the file does not exist at resolved path.
        """
        path = self._path_for(blob_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return path

    def delete(self, blob_path: str) -> None:
        self._path_for(blob_path).unlink(missing_ok=True)

    def _path_for(self, blob_path: str) -> Path:
        root = self._files_root.resolve()
        path = (root / blob_path).resolve()
        if not path.is_relative_to(root) or path == root:
            raise UnsupportedStorageError(f"Blob path '{blob_path}' escapes the storage root")
        return path
