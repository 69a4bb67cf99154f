import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

from pdf_signer.config.settings import Settings
from pdf_signer.database.models import SignedDocumentRecord
from pdf_signer.database.repositories.signed_documents_repository import SignedDocumentsRepository
from pdf_signer.logging.logger import Log
from pdf_signer.pdf.base import BasePdfEngine
from pdf_signer.pdf.factory import PdfEngineFactory
from pdf_signer.placement.compositor import PlacementCompositor
from pdf_signer.placement.models import CompositedResult, PlacementRequest
from pdf_signer.signing.payload import SignPayload
from pdf_signer.storage.file_storage import SignedFileStorage


@dataclass(frozen=True)
class SigningOutcome:
    """What the caller gets back after a successful burn-in."""

    file_url: str
    file_path: Path
    original_hash: str
    final_hash: str
    audit_id: int | None = None


class SampleDocumentProvider:
    """Supplies the fallback PDF used when a request carries none."""

    def __init__(self, engine: BasePdfEngine, path: Path) -> None:
        self._engine = engine
        self._path = path
        self._lock = threading.Lock()

    def load(self) -> bytes:
        """Read the sample PDF, creating it on first use.

        The file only appears at its final path once fully written, so readers
        never see a partial sample.
        """
        with self._lock:
            if not self._path.exists():
                Log.info(f"Sample PDF not found, creating {self._path}")
                self._write_atomically(self._engine.create_sample())
        return self._path.read_bytes()

    def _write_atomically(self, data: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, self._path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SigningService:
    """Orchestrates one sign request.

    Pipeline: resolve PDF -> composite -> store file -> record audit hashes.
    """

    def __init__(
        self,
        compositor: PlacementCompositor,
        storage: SignedFileStorage,
        samples: SampleDocumentProvider,
        audit_repo: SignedDocumentsRepository | None = None,
    ) -> None:
        self._compositor = compositor
        self._storage = storage
        self._samples = samples
        self._audit_repo = audit_repo

    @property
    def storage(self) -> SignedFileStorage:
        return self._storage

    def sign(self, payload: SignPayload) -> SigningOutcome:
        """Burn the signature image into the PDF and persist the result."""
        if payload.pdf_bytes is not None:
            Log.info(f"Using provided PDF ({len(payload.pdf_bytes)} bytes) for {payload.pdf_id}")
            pdf_bytes = payload.pdf_bytes
        else:
            pdf_bytes = self._samples.load()
            Log.info(f"Using sample PDF ({len(pdf_bytes)} bytes) for {payload.pdf_id}")

        result = self._composite(pdf_bytes, payload)
        Log.info(f"Original hash: {result.original_hash}")
        Log.info(f"Final hash: {result.final_hash}")

        stored = self._storage.save(result.output_pdf_bytes)
        try:
            audit_id = self._record_audit(payload.pdf_id, result, stored.path)
        except Exception:
            Log.error(f"Audit trail save failed, removing unaudited file {stored.path}")
            self._storage.delete(stored.file_name)
            raise

        return SigningOutcome(
            file_url=stored.url,
            file_path=stored.path,
            original_hash=result.original_hash,
            final_hash=result.final_hash,
            audit_id=audit_id,
        )

    def _composite(self, pdf_bytes: bytes, payload: SignPayload) -> CompositedResult:
        if len(payload.placements) == 1:
            return self._compositor.compose(
                PlacementRequest(
                    pdf_bytes=pdf_bytes,
                    image_bytes=payload.signature_image,
                    placement=payload.placements[0],
                )
            )
        return self._compositor.compose_many(
            pdf_bytes,
            [(placement, payload.signature_image) for placement in payload.placements],
        )

    def _record_audit(self, pdf_id: str, result: CompositedResult, path: Path) -> int | None:
        if self._audit_repo is None:
            Log.warning("Audit store not configured, skipping audit trail save")
            return None
        audit_id = self._audit_repo.insert(
            SignedDocumentRecord(
                original_hash=result.original_hash,
                final_hash=result.final_hash,
                pdf_id=pdf_id,
                file_path=str(path),
            )
        )
        Log.info(f"Audit trail saved with id {audit_id}")
        return audit_id


def build_signing_service(
    settings: Settings,
    audit_repo: SignedDocumentsRepository | None = None,
) -> SigningService:
    """Build a SigningService with all required adapters."""
    engine = PdfEngineFactory.create(settings)
    return SigningService(
        compositor=PlacementCompositor(engine),
        storage=SignedFileStorage(Path(settings.uploads_dir), settings.uploads_url_prefix),
        samples=SampleDocumentProvider(engine, Path(settings.sample_pdf_path)),
        audit_repo=audit_repo,
    )
