from __future__ import annotations

from pathlib import Path
from typing import Protocol

from ..core.exceptions import StoreUnavailableError, ValidationError


class PhotoStorage(Protocol):
    def upload(self, data: bytes, file_name: str) -> str:
        """Store raw image bytes and return a stable URL for them."""

        raise NotImplementedError


class LocalPhotoStorage(PhotoStorage):
    """Keeps attendance photos under ``<base_dir>/logs`` and serves them from ``base_url``.

    Uploading the same file name twice overwrites the earlier image.
    """

    FOLDER = "logs"

    def __init__(self, base_dir: str | Path, *, base_url: str = "/photos"):
        self._base_dir = Path(base_dir)
        self._base_url = base_url.rstrip("/")

    def upload(self, data: bytes, file_name: str) -> str:
        if not data:
            raise ValidationError("Photo is empty")
        name = Path(file_name).name
        if not name or name != file_name:
            raise ValidationError(f"Invalid photo file name: {file_name!r}")

        target = self._base_dir / self.FOLDER / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise StoreUnavailableError(f"Cannot store photo {name}: {exc}") from exc
        return f"{self._base_url}/{self.FOLDER}/{name}"
