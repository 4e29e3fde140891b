import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, JSONResponse
from starlette.datastructures import UploadFile
from starlette.formparsers import MultiPartException

from docport.config.settings import Settings
from docport.documents.categories import normalize_category
from docport.exporting.exceptions import NotFoundError, PayloadTooLargeError
from docport.exporting.models import ExportFormat
from docport.exporting.service import ExportService
from docport.exporting.storage import ExportStorage
from docport.guard.exceptions import ValidationError
from docport.guard.guard import GuardResult, RequestGuard, RequestKind
from docport.importing.exceptions import NothingToImportError, ParseError
from docport.importing.models import ImportOptions, ImportResponse, UploadedFile
from docport.importing.service import ImportService
from docport.logging.logger import Log

OWNER_HEADER = "x-user-id"
UNAUTHORIZED_MESSAGE = "인증이 필요합니다."
INVALID_BODY_MESSAGE = "올바른 요청 형식이 아닙니다."
FORM_PARSE_MESSAGE = "FormData 파싱에 실패했습니다. 올바른 형식으로 파일을 업로드해주세요."
IMPORT_FAILED_MESSAGE = "파일 가져오기 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
EXPORT_FAILED_MESSAGE = "파일 생성 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
LETTER_FAILED_MESSAGE = "편지 내보내기 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
FILE_NOT_FOUND_MESSAGE = "파일을 찾을 수 없습니다."


def client_identity(request: Request) -> str:
    """Rate limiting key: first X-Forwarded-For hop, else the peer address."""
    forwarded = request.headers.get("x-forwarded-for", "")
    first_hop = forwarded.split(",", 1)[0].strip()
    if first_hop:
        return first_hop
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


def declared_length(request: Request) -> int | None:
    raw = request.headers.get("content-length")
    try:
        return int(raw) if raw is not None else None
    except ValueError:
        return None


def owner_identity(request: Request) -> str | None:
    owner = request.headers.get(OWNER_HEADER, "").strip()
    return owner or None


def parse_import_options(form: Any) -> ImportOptions:
    raw_category = form.get("category")
    raw_tags = form.get("tags")
    category = (
        normalize_category(raw_category)
        if isinstance(raw_category, str) and raw_category.strip()
        else None
    )
    tags = (
        [tag.strip() for tag in raw_tags.split(",") if tag.strip()]
        if isinstance(raw_tags, str) and raw_tags.strip()
        else None
    )
    return ImportOptions(
        skip_duplicates=form.get("skipDuplicates") != "false",
        update_existing=form.get("updateExisting") == "true",
        category=category,
        tags=tags,
    )


def _error_id() -> str:
    return uuid.uuid4().hex[:8]


def _import_error(status_code: int, errors: list[str]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ImportResponse.failure(errors).to_dict())


def _export_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _rejected(result: GuardResult, import_shape: bool = False) -> JSONResponse:
    if import_shape:
        return _import_error(result.status_code, [result.message or ""])
    return _export_error(result.status_code, result.message or "")


def create_app(
    settings: Settings,
    guard: RequestGuard,
    import_service: ImportService,
    export_service: ExportService,
    storage: ExportStorage,
) -> FastAPI:
    app = FastAPI(title="docport")

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.post("/api/documents/import")
    async def import_documents(request: Request):
        admission = guard.check_import(client_identity(request), declared_length(request))
        if not admission.ok:
            return _rejected(admission, import_shape=True)

        owner_id = owner_identity(request)
        if owner_id is None:
            return _import_error(401, [UNAUTHORIZED_MESSAGE])

        try:
            form = await request.form()
        except MultiPartException:
            return _import_error(400, [FORM_PARSE_MESSAGE])

        file = form.get("file")
        upload = None
        if isinstance(file, UploadFile):
            upload = UploadedFile(
                filename=file.filename,
                content_type=file.content_type,
                data=await file.read(),
            )

        try:
            response = await run_in_threadpool(
                import_service.import_file, owner_id, upload, parse_import_options(form)
            )
        except (ValidationError, ParseError) as exc:
            return _import_error(400, [str(exc)])
        except NothingToImportError as exc:
            return _import_error(400, exc.errors)
        except Exception:
            error_id = _error_id()
            Log.exception(f"[Import Error {error_id}]")
            return _import_error(500, [IMPORT_FAILED_MESSAGE])
        finally:
            await form.close()

        return response.to_dict()

    @app.get("/api/documents/export")
    def describe_export():
        def megabytes(value: int) -> str:
            return f"{round(value / 1024 / 1024)}MB"

        return {
            "message": "문서 내보내기 API",
            "methods": ["POST"],
            "description": "사용자의 문서를 JSON, CSV, PDF 형식으로 내보냅니다.",
            "supportedFormats": [fmt.value for fmt in ExportFormat],
            "maxFileSizes": {
                "json": megabytes(settings.export_max_json_bytes),
                "csv": megabytes(settings.export_max_csv_bytes),
                "pdf": megabytes(settings.export_max_pdf_bytes),
            },
            "usage": {
                "endpoint": "POST /api/documents/export",
                "headers": {"Content-Type": "application/json", "X-User-Id": "<owner id>"},
                "body": {
                    "format": "json | csv | pdf",
                    "documentIds": "string[] (선택사항, 없으면 모든 문서)",
                    "includeContent": "boolean (선택사항, 기본값: true)",
                },
            },
        }

    @app.post("/api/documents/export")
    async def export_documents(request: Request):
        admission = guard.admit(
            client_identity(request), RequestKind.EXPORT, declared_length(request)
        )
        if not admission.ok:
            return _rejected(admission)

        checked = guard.validate_export(await _json_body(request))
        if not checked.ok:
            return _rejected(checked)

        owner_id = owner_identity(request)
        if owner_id is None:
            return _export_error(401, UNAUTHORIZED_MESSAGE)

        try:
            response = await run_in_threadpool(export_service.export, owner_id, checked.request)
        except NotFoundError as exc:
            return _export_error(404, str(exc))
        except PayloadTooLargeError as exc:
            return _export_error(413, str(exc))
        except Exception:
            error_id = _error_id()
            Log.exception(f"[Export Error {error_id}]")
            return _export_error(500, EXPORT_FAILED_MESSAGE)

        return response.to_dict()

    @app.post("/api/letters/export")
    async def export_letter(request: Request):
        admission = guard.admit(
            client_identity(request), RequestKind.EXPORT, declared_length(request)
        )
        if not admission.ok:
            return _rejected(admission)

        owner_id = owner_identity(request)
        if owner_id is None:
            return _export_error(401, UNAUTHORIZED_MESSAGE)

        checked = guard.validate_letter(await _json_body(request))
        if not checked.ok:
            return _rejected(checked)

        try:
            response = await run_in_threadpool(
                export_service.export_letter, owner_id, checked.request
            )
        except PayloadTooLargeError as exc:
            return _export_error(413, str(exc))
        except Exception:
            error_id = _error_id()
            Log.exception(f"[Letter Export Error {error_id}]")
            return _export_error(500, LETTER_FAILED_MESSAGE)

        return response.to_dict()

    @app.get(f"{settings.export_url_prefix.rstrip('/')}/{{filename}}")
    def download_export(filename: str):
        path = storage.resolve(filename)
        if path is None:
            return _export_error(404, FILE_NOT_FOUND_MESSAGE)
        media_type = {
            ".json": ExportFormat.JSON.media_type,
            ".csv": ExportFormat.CSV.media_type,
            ".pdf": ExportFormat.PDF.media_type,
        }.get(path.suffix, "application/octet-stream")
        return FileResponse(path, media_type=media_type, filename=filename)

    return app


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None
