from dataclasses import dataclass
from enum import Enum
from typing import Any

from docport.config.settings import Settings
from docport.guard.exceptions import RateLimitedError, RequestTooLargeError, ValidationError
from docport.guard.rate_limiter import RateLimitStore
from docport.guard.validators import validate_export_payload, validate_letter_payload
from docport.logging.logger import Log

RATE_LIMITED_MESSAGE = "요청이 너무 많습니다. 잠시 후 다시 시도해주세요."


class RequestKind(str, Enum):
    IMPORT = "import"
    EXPORT = "export"


class RejectReason(str, Enum):
    RATE_LIMITED = "RateLimited"
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    VALIDATION_ERROR = "ValidationError"

    @property
    def status_code(self) -> int:
        return {
            RejectReason.RATE_LIMITED: 429,
            RejectReason.PAYLOAD_TOO_LARGE: 413,
            RejectReason.VALIDATION_ERROR: 400,
        }[self]


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a guard check; ``request`` holds the validated payload when there is one."""

    ok: bool
    reason: RejectReason | None = None
    message: str | None = None
    request: Any = None

    @property
    def status_code(self) -> int:
        return self.reason.status_code if self.reason is not None else 200

    def raise_for_rejection(self) -> None:
        if self.ok or self.reason is None:
            return
        if self.reason is RejectReason.RATE_LIMITED:
            raise RateLimitedError(self.message)
        if self.reason is RejectReason.PAYLOAD_TOO_LARGE:
            raise RequestTooLargeError(self.message)
        raise ValidationError(self.message)


def _reject(reason: RejectReason, message: str) -> GuardResult:
    return GuardResult(ok=False, reason=reason, message=message)


class RequestGuard:
    """Admission control for the import and export entry points.

    Checks run in a fixed order: rate limit, declared body size, payload
    shape. Every request that passes the rate limit is counted, even when
    it is rejected afterwards for size or shape.
    """

    def __init__(self, store: RateLimitStore, settings: Settings) -> None:
        self._store = store
        self._settings = settings

    def admit(self, caller: str, kind: RequestKind, content_length: int | None) -> GuardResult:
        """Apply the rate limit and the declared body size ceiling."""
        limit = (
            self._settings.import_rate_limit_per_minute
            if kind is RequestKind.IMPORT
            else self._settings.export_rate_limit_per_minute
        )
        decision = self._store.hit(
            f"{kind.value}:{caller}", limit, self._settings.rate_limit_window_seconds
        )
        if not decision.allowed:
            Log.warning(
                f"Rate limit hit for {caller} on {kind.value}, "
                f"retry after {decision.retry_after_seconds:.1f}s"
            )
            return _reject(RejectReason.RATE_LIMITED, RATE_LIMITED_MESSAGE)

        if kind is RequestKind.IMPORT:
            max_bytes = self._settings.import_max_request_bytes
            message = (
                "요청 크기가 너무 큽니다. "
                f"최대 {round(max_bytes / 1024 / 1024)}MB까지 지원됩니다."
            )
        else:
            max_bytes = self._settings.export_max_request_bytes
            message = "요청 크기가 너무 큽니다."
        if content_length is not None and content_length > max_bytes:
            return _reject(RejectReason.PAYLOAD_TOO_LARGE, message)

        return GuardResult(ok=True)

    def validate_export(self, payload: Any) -> GuardResult:
        try:
            request = validate_export_payload(payload, self._settings)
        except ValidationError as exc:
            return _reject(RejectReason.VALIDATION_ERROR, str(exc))
        return GuardResult(ok=True, request=request)

    def validate_letter(self, payload: Any) -> GuardResult:
        try:
            request = validate_letter_payload(payload, self._settings)
        except ValidationError as exc:
            return _reject(RejectReason.VALIDATION_ERROR, str(exc))
        return GuardResult(ok=True, request=request)

    def check_import(self, caller: str, content_length: int | None) -> GuardResult:
        return self.admit(caller, RequestKind.IMPORT, content_length)

    def check_export(
        self, caller: str, content_length: int | None, payload: Any
    ) -> GuardResult:
        result = self.admit(caller, RequestKind.EXPORT, content_length)
        return self.validate_export(payload) if result.ok else result

    def check_letter(
        self, caller: str, content_length: int | None, payload: Any
    ) -> GuardResult:
        # Letters share the export budget of the caller.
        result = self.admit(caller, RequestKind.EXPORT, content_length)
        return self.validate_letter(payload) if result.ok else result
