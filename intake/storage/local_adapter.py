from pathlib import Path

from intake.storage.base import BaseObjectStore
from intake.storage.exceptions import StorageError, StorageSizeLimitError


class LocalObjectStore(BaseObjectStore):
    """Keeps documents on the local filesystem under a root directory.

    Intended for development and tests. A size limit of ``None`` accepts
    objects of any size.
    """

    def __init__(
        self,
        root: Path,
        public_base_url: str = "",
        max_object_size_bytes: int | None = None,
    ) -> None:
        self._root = root
        self._public_base_url = public_base_url.rstrip("/")
        self._max_object_size_bytes = max_object_size_bytes

    def write(self, locator: str, data: bytes, content_type: str) -> str:
        if self._max_object_size_bytes is not None and len(data) > self._max_object_size_bytes:
            raise StorageSizeLimitError(
                f"Object {locator} exceeded the maximum allowed size"
            )
        path = self._resolve_path(locator)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("xb") as fh:
                fh.write(data)
        except FileExistsError as exc:
            raise StorageError(f"Object {locator} already exists") from exc
        except OSError as exc:
            raise StorageError(f"Local write failed for {locator}: {exc}") from exc
        return locator

    def public_url(self, locator: str) -> str:
        if self._public_base_url:
            return f"{self._public_base_url}/{locator}"
        return self._resolve_path(locator).resolve().as_uri()

    def delete(self, locator: str) -> None:
        try:
            self._resolve_path(locator).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Local delete failed for {locator}: {exc}") from exc

    def _resolve_path(self, locator: str) -> Path:
        path = (self._root / locator).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise StorageError(f"Locator {locator} escapes the storage root")
        return path
