from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docextract"
    db_username: str = "docextract"
    db_password: str = "secret"

    files_root: Path = Path("/app/files")
    max_upload_size_bytes: int = 100 * 1024 * 1024

    pdf_engine: str = "pdfplumber"

    ocr_provider: str = "tesseract"
    ocr_language: str = "eng"
    ocr_detect_orientation: bool = True
    ocr_preprocess: bool = True
    ocr_max_attempts: int = 2

    extraction_max_workers: int = 4
    extraction_queue_limit: int = 32
    processing_version: str = "2.0"
