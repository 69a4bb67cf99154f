from typing import Any

from flask import Flask, Response, jsonify, request, send_file
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from pdf_signer.config.settings import Settings
from pdf_signer.logging.logger import Log
from pdf_signer.pdf.exceptions import (
    CompositorError,
    DocumentLoadError,
    ImageDecodeError,
    InvalidInputError,
    PageOutOfRangeError,
    SerializationError,
)
from pdf_signer.signing.exceptions import PayloadError
from pdf_signer.signing.payload import parse_sign_payload
from pdf_signer.signing.service import SigningService


def create_app(settings: Settings, service: SigningService) -> Flask:
    """Build the HTTP app around an already-constructed signing service."""
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = settings.max_payload_bytes
    CORS(app)

    url_prefix = settings.uploads_url_prefix.rstrip("/")

    @app.get("/health")
    def health() -> tuple[Response, int]:
        return jsonify({"status": "ok"}), 200

    @app.post("/api/pdf/sign")
    def sign_pdf() -> tuple[Response, int]:
        Log.info("Received sign request")
        try:
            payload = parse_sign_payload(request.get_json(silent=True))
            outcome = service.sign(payload)
        except PayloadError as exc:
            Log.error(f"Rejected sign request: {exc}")
            return _error("Invalid request", exc, 400, exc.field)
        except SerializationError as exc:
            Log.error(f"Error signing PDF: {exc}")
            return _error("Internal Server Error", exc, 500, exc.field)
        except CompositorError as exc:
            Log.error(f"Rejected sign request ({type(exc).__name__}): {exc}")
            return _error(_KIND_MESSAGES.get(type(exc), "Invalid request"), exc, 400, exc.field)
        except HTTPException:
            raise
        except Exception as exc:
            Log.exception(f"Error signing PDF: {exc}")
            return _error("Internal Server Error", exc, 500)

        return (
            jsonify(
                {
                    "message": "PDF signed successfully",
                    "fileUrl": outcome.file_url,
                    "originalHash": outcome.original_hash,
                    "finalHash": outcome.final_hash,
                }
            ),
            200,
        )

    @app.get(f"{url_prefix}/<path:file_name>")
    def download(file_name: str) -> Response | tuple[Response, int]:
        try:
            path = service.storage.resolve(file_name)
        except FileNotFoundError:
            return jsonify({"message": "File not found"}), 404
        return send_file(path, mimetype="application/pdf")

    return app


_KIND_MESSAGES: dict[type[CompositorError], str] = {
    InvalidInputError: "Invalid placement",
    PageOutOfRangeError: "Page out of range",
    ImageDecodeError: "Invalid signature image",
    DocumentLoadError: "Invalid PDF document",
}


def _error(message: str, exc: Exception, status: int, field: str | None = None) -> tuple[Response, int]:
    body: dict[str, Any] = {"message": message, "error": str(exc)}
    if field is not None:
        body["field"] = field
    return jsonify(body), status
