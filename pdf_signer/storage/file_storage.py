import time
from dataclasses import dataclass
from pathlib import Path

from pdf_signer.logging.logger import Log
from pdf_signer.storage.exceptions import StorageError


@dataclass(frozen=True)
class StoredFile:
    """A signed PDF written to disk and the URL it is served under."""

    file_name: str
    path: Path
    url: str


def signed_file_name(timestamp_ms: int) -> str:
    """Build the stored name: signed_{epoch milliseconds}.pdf"""
    return f"signed_{timestamp_ms}.pdf"


class SignedFileStorage:
    """Writes signed PDFs to a local uploads directory and resolves them back."""

    def __init__(self, uploads_dir: Path, url_prefix: str = "/uploads") -> None:
        self._uploads_dir = uploads_dir
        self._url_prefix = url_prefix.rstrip("/")

    @property
    def uploads_dir(self) -> Path:
        return self._uploads_dir

    def save(self, pdf_bytes: bytes) -> StoredFile:
        """Write bytes under a fresh timestamp-based name.

        Raises:
            StorageError: if the file cannot be written.
        """
        try:
            self._uploads_dir.mkdir(parents=True, exist_ok=True)
            path = self._write_new_file(pdf_bytes)
        except OSError as exc:
            raise StorageError(f"Could not store signed PDF in {self._uploads_dir}: {exc}") from exc
        Log.info(f"Stored {len(pdf_bytes)} bytes at {path}")
        return StoredFile(
            file_name=path.name,
            path=path,
            url=f"{self._url_prefix}/{path.name}",
        )

    def resolve(self, file_name: str) -> Path:
        """Return the path of a stored file.

        Raises:
            FileNotFoundError: if the name escapes the uploads dir or does not exist.
        """
        root = self._uploads_dir.resolve()
        path = (root / file_name).resolve()
        if path.parent != root or not path.is_file():
            raise FileNotFoundError(f"File not found: {file_name}")
        return path

    def delete(self, file_name: str) -> None:
        """Remove a stored file; a name that is already gone is ignored."""
        try:
            path = self.resolve(file_name)
        except FileNotFoundError:
            return
        path.unlink(missing_ok=True)
        Log.info(f"Deleted {path}")

    def _write_new_file(self, pdf_bytes: bytes) -> Path:
        timestamp_ms = int(time.time() * 1000)
        # Two requests in the same millisecond get consecutive names.
        while True:
            path = self._uploads_dir / signed_file_name(timestamp_ms)
            try:
                with path.open("xb") as fh:
                    fh.write(pdf_bytes)
                return path
            except FileExistsError:
                timestamp_ms += 1
