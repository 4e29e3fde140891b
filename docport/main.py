import uvicorn
from fastapi import FastAPI

from docport.api.app import create_app
from docport.config.settings import Settings
from docport.database.connection import close_pool, init_pool
from docport.database.repositories.document_repository import DocumentRepository
from docport.exporting.assembler import ExportAssembler
from docport.exporting.service import ExportService
from docport.exporting.storage import ExportStorage
from docport.guard.guard import RequestGuard
from docport.guard.rate_limiter import InMemoryRateLimitStore
from docport.importing.batch_importer import BatchImporter
from docport.importing.service import ImportService
from docport.logging.logger import Log


def build_app(settings: Settings) -> FastAPI:
    """Wire repositories, services and the guard into the HTTP app."""
    repo = DocumentRepository()
    storage = ExportStorage(
        settings.export_dir, settings.export_url_prefix, settings.export_file_ttl_seconds
    )
    importer = BatchImporter(
        repo,
        max_title_length=settings.import_max_title_length,
        max_content_length=settings.import_max_content_length,
    )
    return create_app(
        settings,
        guard=RequestGuard(InMemoryRateLimitStore(), settings),
        import_service=ImportService(importer, settings),
        export_service=ExportService(ExportAssembler(repo), storage, settings),
        storage=storage,
    )


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        app = build_app(settings)
        Log.info(
            f"Starting docport ({settings.app_env}) on {settings.http_host}:{settings.http_port}"
        )
        uvicorn.run(
            app,
            host=settings.http_host,
            port=settings.http_port,
            log_level=settings.log_level.lower(),
        )
    finally:
        close_pool()


if __name__ == "__main__":
    main()
