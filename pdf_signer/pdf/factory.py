from pdf_signer.config.settings import Settings
from pdf_signer.pdf.base import BasePdfEngine
from pdf_signer.pdf.pymupdf_adapter import PyMuPdfEngine


class PdfEngineFactory:
    """Creates the correct PDF engine based on settings."""

    ADAPTERS: dict[str, type[BasePdfEngine]] = {
        "pymupdf": PyMuPdfEngine,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfEngine:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
