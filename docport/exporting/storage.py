import re
import time
from pathlib import Path

from docport.logging.logger import Log

_UNSAFE_CHARS_RE = re.compile(r"[^\w.-]+")


def safe_filename_part(value: str) -> str:
    """Reduce a value to characters that are safe inside a filename."""
    return _UNSAFE_CHARS_RE.sub("_", value).strip("._") or "file"


class ExportStorage:
    """Temporary download area for generated export files."""

    def __init__(self, directory: Path, url_prefix: str, ttl_seconds: int) -> None:
        self._directory = Path(directory)
        self._url_prefix = url_prefix.rstrip("/")
        self._ttl_seconds = ttl_seconds

    def save(self, filename: str, content: bytes) -> str:
        """Write the file and return its download URL."""
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._directory / filename
        path.write_bytes(content)
        Log.debug(f"Stored export file {path} ({len(content)} bytes)")
        return f"{self._url_prefix}/{filename}"

    def resolve(self, filename: str) -> Path | None:
        """Return the stored file for a download request, or None.

        Names that would leave the export directory are refused.
        """
        if not filename or filename != Path(filename).name:
            return None
        root = self._directory.resolve()
        path = (root / filename).resolve()
        if path.parent != root or not path.is_file():
            return None
        return path

    def cleanup_expired(self, now: float | None = None) -> int:
        """Delete files older than the TTL and return how many were removed."""
        if not self._directory.is_dir():
            return 0

        cutoff = (now if now is not None else time.time()) - self._ttl_seconds
        removed = 0
        for path in self._directory.iterdir():
            try:
                if path.is_file() and path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
                    Log.info(f"Removed expired export file: {path.name}")
            except OSError as exc:
                Log.warning(f"Failed to remove export file {path.name}: {exc}")
        return removed
