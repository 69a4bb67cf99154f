from pdf_signer.api.app import create_app
from pdf_signer.config.settings import Settings
from pdf_signer.database.connection import Database
from pdf_signer.database.repositories.signed_documents_repository import SignedDocumentsRepository
from pdf_signer.logging.logger import Log
from pdf_signer.signing.service import build_signing_service


def main() -> None:
    """Entry point: open database -> build dependencies -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)

    database = Database(settings) if settings.db_enabled else None
    try:
        audit_repo = None
        if database is not None:
            audit_repo = SignedDocumentsRepository(database)
            audit_repo.create_table()
        else:
            Log.warning("Database disabled, audit trail will not be persisted")

        service = build_signing_service(settings, audit_repo)
        app = create_app(settings, service)
        Log.info(f"Server is running at http://{settings.http_host}:{settings.http_port}")
        app.run(host=settings.http_host, port=settings.http_port, threaded=True)
    finally:
        if database is not None:
            database.close()


if __name__ == "__main__":
    main()
