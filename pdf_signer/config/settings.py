from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8000
    max_payload_bytes: int = 64 * 1024 * 1024

    db_enabled: bool = True
    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "pdf_signer"
    db_username: str = "pdf_signer"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    uploads_dir: str = "uploads"
    uploads_url_prefix: str = "/uploads"
    sample_pdf_path: str = "sample.pdf"

    pdf_engine: str = "pymupdf"
