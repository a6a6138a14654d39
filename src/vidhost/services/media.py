"""Media storage collaborator: stores uploaded files and removes them later."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, Union
from uuid import uuid4

from rich.console import Console

from vidhost.config.settings import Settings, get_settings
from vidhost.exceptions import ExternalStorageError

PathLike = Union[str, Path]


@dataclass(slots=True, frozen=True)
class StoredMedia:
    """Result of a successful upload to the media provider."""

    url: str
    provider_id: str
    duration: Optional[float] = None


class MediaStorage(Protocol):
    """Interface of the media-hosting service used by the record store."""

    def store(self, local_path: PathLike) -> StoredMedia:
        """Durably store a local file; raise :class:`ExternalStorageError` on failure."""

    def remove(self, provider_id: str) -> bool:
        """Remove a stored object; return ``False`` when the provider reports failure."""


class LocalMediaStorage:
    """Filesystem-backed media provider serving files from ``media_root``.

    Each stored file is renamed to ``<provider_id><suffix>`` and exposed under
    ``base_url``. Durations are not probed; callers supply them when known.
    """

    def __init__(
        self,
        *,
        media_root: Optional[Path] = None,
        base_url: Optional[str] = None,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ) -> None:
        settings = settings or get_settings()
        self._root = Path(media_root or settings.media_root)
        self._base_url = (base_url or settings.media_base_url).rstrip("/")
        self._console = console or Console()

    @property
    def root(self) -> Path:
        return self._root

    def store(self, local_path: PathLike) -> StoredMedia:
        source = Path(local_path)
        if not source.is_file():
            raise ExternalStorageError(f"Local file not found: {source}")

        provider_id = uuid4().hex
        destination = self._root / f"{provider_id}{source.suffix.lower()}"
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise ExternalStorageError(f"Failed to store {source.name}: {exc}") from exc

        self._console.log(f"[blue]Media:[/blue] stored {source.name} as {destination.name}")
        return StoredMedia(url=f"{self._base_url}/{destination.name}", provider_id=provider_id)

    def remove(self, provider_id: str) -> bool:
        if not provider_id or "/" in provider_id or "\\" in provider_id or provider_id in {".", ".."}:
            self._console.log(f"[red]Media:[/red] refusing to remove invalid provider id {provider_id!r}")
            return False

        matches: list[Path] = []
        if self._root.is_dir():
            matches = [
                path
                for path in self._root.iterdir()
                if path.is_file() and provider_id in {path.name, path.stem}
            ]
        if not matches:
            self._console.log(f"[yellow]Media:[/yellow] nothing stored for provider id {provider_id}")
            return False

        try:
            for path in matches:
                path.unlink()
        except OSError as exc:
            raise ExternalStorageError(
                f"Failed to remove media {provider_id}: {exc}", provider_ids=[provider_id]
            ) from exc

        self._console.log(f"[blue]Media:[/blue] removed provider id {provider_id}")
        return True


__all__ = ["LocalMediaStorage", "MediaStorage", "PathLike", "StoredMedia"]
