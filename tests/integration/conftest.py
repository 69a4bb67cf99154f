import os
from collections.abc import Generator

import pytest

from pdf_signer.config.settings import Settings
from pdf_signer.database.connection import Database
from pdf_signer.database.repositories.signed_documents_repository import SignedDocumentsRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "pdf_signer_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def database(test_settings: Settings) -> Generator[Database, None, None]:
    db = Database(test_settings)
    try:
        with db.connection() as conn:
            conn.execute("SELECT 1")
    except Exception as e:
        db.close()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def repository(database: Database) -> SignedDocumentsRepository:
    repo = SignedDocumentsRepository(database)
    repo.create_table()
    return repo


@pytest.fixture
def integration_cleanup(database: Database) -> Generator[list[int], None, None]:
    cleanup: list[int] = []
    yield cleanup
    if not cleanup:
        return
    with database.connection() as conn:
        for record_id in cleanup:
            conn.execute("DELETE FROM signed_documents WHERE id = %s", (record_id,))
        conn.commit()
