from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

MEGABYTE = 1024 * 1024


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8000

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docport"
    db_username: str = "docport"
    db_password: str = "secret"
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10

    export_dir: Path = Path("public/exports/temp")
    export_url_prefix: str = "/exports/temp"
    export_file_ttl_seconds: int = 3600

    rate_limit_window_seconds: int = 60
    import_rate_limit_per_minute: int = 5
    export_rate_limit_per_minute: int = 10

    import_max_request_bytes: int = 20 * MEGABYTE
    import_max_documents: int = 500
    import_max_content_length: int = 50_000
    import_max_title_length: int = 255
    import_max_json_bytes: int = 10 * MEGABYTE
    import_max_csv_bytes: int = 5 * MEGABYTE
    import_max_txt_bytes: int = 2 * MEGABYTE

    export_max_request_bytes: int = 100 * 1024
    export_max_document_ids: int = 100
    export_max_json_bytes: int = 10 * MEGABYTE
    export_max_csv_bytes: int = 5 * MEGABYTE
    export_max_pdf_bytes: int = 20 * MEGABYTE
