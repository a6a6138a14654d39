"""Video record store: lifecycle operations and invariants for stored videos."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import ValidationError as ModelValidationError
from rich.console import Console

from vidhost.config.settings import Settings, get_settings
from vidhost.db.connection import Database
from vidhost.db.user_repository import UserRepository
from vidhost.db.video_repository import VideoRepository
from vidhost.exceptions import ExternalStorageError, NotFoundError, ValidationError
from vidhost.models.video import Video
from vidhost.services.media import MediaStorage, PathLike, StoredMedia
from vidhost.utils.validation import parse_object_id, resolve_provider_id


class VideoService:
    """Create, fetch, update, publish and delete individual videos."""

    def __init__(
        self,
        database: Database,
        media_storage: MediaStorage,
        *,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._console = console or Console()
        self._media = media_storage
        self._video_repo = VideoRepository(database)
        self._user_repo = UserRepository(database)

    # ------------------------------------------------------------------ #
    # Public API                                                         #
    # ------------------------------------------------------------------ #
    def create(
        self,
        *,
        title: Optional[str],
        description: Optional[str],
        video_file: Optional[str],
        thumbnail: Optional[str],
        duration: Optional[float],
        owner_id: object,
        provider_id: Optional[str],
        thumbnail_provider_id: Optional[str] = None,
    ) -> Video:
        """Persist a video whose media file and thumbnail are already stored.

        Raises
        ------
        ValidationError
            If title and description are both empty, a location is missing, or
            the duration is negative.
        NotFoundError
            If the owner does not exist.
        PersistenceError
            If the write fails.
        """

        title, description = self._require_text(title, description)
        if not video_file:
            raise ValidationError("A video file is required.")
        if not thumbnail:
            raise ValidationError("A thumbnail is required.")
        self._require_owner(owner_id)

        try:
            model = Video(
                title=title,
                description=description,
                video_file=video_file,
                thumbnail=thumbnail,
                duration=duration or 0.0,
                is_published=self._settings.default_publish,
                owner=str(owner_id),
                provider_id=provider_id,
                thumbnail_provider_id=thumbnail_provider_id,
            )
        except ModelValidationError as exc:
            raise ValidationError(f"Invalid video: {exc}") from exc

        video = self._video_repo.insert(model)
        self._console.log(f"[green]Videos:[/green] created video {video.id} (owner={video.owner})")
        return video

    def publish(
        self,
        *,
        title: Optional[str],
        description: Optional[str],
        video_path: Optional[PathLike],
        thumbnail_path: Optional[PathLike],
        owner_id: object,
        duration: Optional[float] = None,
    ) -> Video:
        """Upload a media file and thumbnail, then create the video record.

        Both uploads must succeed before a record is written. When the thumbnail
        upload or the record write fails, files already stored are removed
        before the error propagates.
        """

        title, description = self._require_text(title, description)
        if not video_path:
            raise ValidationError("A video file is required.")
        if not thumbnail_path:
            raise ValidationError("A thumbnail file is required.")
        if duration is not None and duration < 0:
            raise ValidationError("Duration must be non-negative.")
        self._require_owner(owner_id)

        self._console.log(f"[blue]Videos:[/blue] uploading media for {title or description!r}")
        media = self._media.store(video_path)
        try:
            thumbnail = self._media.store(thumbnail_path)
        except ExternalStorageError:
            self._discard_uploads([media])
            raise

        try:
            return self.create(
                title=title,
                description=description,
                video_file=media.url,
                thumbnail=thumbnail.url,
                duration=media.duration if media.duration is not None else duration,
                owner_id=owner_id,
                provider_id=media.provider_id,
                thumbnail_provider_id=thumbnail.provider_id,
            )
        except Exception:
            self._discard_uploads([media, thumbnail])
            raise

    def get_by_id(self, video_id: object) -> Video:
        """Return a stored video or raise :class:`NotFoundError`."""

        return self._video_repo.get_by_id(parse_object_id(video_id, label="video id"))

    def update(
        self,
        video_id: object,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[PathLike] = None,
    ) -> Video:
        """Edit title/description and optionally replace the thumbnail.

        The new thumbnail is stored before the previous one is removed, so the
        record never references a missing file. A failed removal of the previous
        thumbnail is reported after the record has been updated.
        """

        title = (title or "").strip()
        description = (description or "").strip()
        if not (title or description or thumbnail_path):
            raise ValidationError("At least one of title, description or thumbnail is required.")

        current = self.get_by_id(video_id)

        changes: Dict[str, object] = {}
        if title:
            changes["title"] = title
        if description:
            changes["description"] = description

        cleanup_error: Optional[ExternalStorageError] = None
        if thumbnail_path:
            previous_id = self._resolve_or_none(current.thumbnail_provider_id, current.thumbnail)
            stored = self._media.store(thumbnail_path)
            changes["thumbnail"] = stored.url
            changes["thumbnail_provider_id"] = stored.provider_id
            failed = self._remove_all([previous_id]) if previous_id else [current.thumbnail]
            if failed:
                cleanup_error = ExternalStorageError(
                    f"Thumbnail replaced but the previous thumbnail {failed[0]} was not removed.",
                    provider_ids=failed,
                )

        updated = self._video_repo.update_by_id(current.id, changes)
        self._console.log(f"[green]Videos:[/green] updated video {updated.id} ({', '.join(sorted(changes))})")
        if cleanup_error is not None:
            raise cleanup_error
        return updated

    def delete(self, video_id: object) -> None:
        """Remove the stored media objects and then the record.

        Every cleanup step is attempted; provider failures are raised as
        :class:`ExternalStorageError` after the record has been removed.
        """

        video = self.get_by_id(video_id)
        failed: List[str] = []
        for recorded, url in (
            (video.provider_id, video.video_file),
            (video.thumbnail_provider_id, video.thumbnail),
        ):
            provider_id = self._resolve_or_none(recorded, url)
            if provider_id is None:
                failed.append(url)
            else:
                failed.extend(self._remove_all([provider_id]))

        self._video_repo.delete_by_id(video.id)
        self._console.log(f"[green]Videos:[/green] deleted video {video.id}")

        if failed:
            raise ExternalStorageError(
                f"Video {video.id} deleted but stored media could not be removed: {', '.join(failed)}",
                provider_ids=failed,
                hint="Retry removal of the listed provider ids.",
            )

    def toggle_publish(self, video_id: object) -> bool:
        """Flip the publish flag and return its new value."""

        video = self.get_by_id(video_id)
        updated = self._video_repo.set_published(video.id, not video.is_published)
        state = "published" if updated.is_published else "unpublished"
        self._console.log(f"[blue]Videos:[/blue] video {updated.id} is now {state}")
        return updated.is_published

    def record_view(self, video_id: object) -> Video:
        """Increment the view counter and return the updated video."""

        return self._video_repo.increment(parse_object_id(video_id, label="video id"), "views")

    # ------------------------------------------------------------------ #
    # Internal helpers                                                   #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _require_text(title: Optional[str], description: Optional[str]) -> tuple[str, str]:
        cleaned_title = (title or "").strip()
        cleaned_description = (description or "").strip()
        if not (cleaned_title or cleaned_description):
            raise ValidationError("A title or a description is required.")
        return cleaned_title, cleaned_description

    def _require_owner(self, owner_id: object) -> None:
        if not self._user_repo.exists(parse_object_id(owner_id, label="owner id")):
            raise NotFoundError(f"Owner {owner_id} does not exist.")

    def _resolve_or_none(self, recorded: Optional[str], url: str) -> Optional[str]:
        """Return the provider id for a stored object, or ``None`` if it cannot be derived."""

        try:
            return resolve_provider_id(recorded, url)
        except ValidationError as exc:
            self._console.log(f"[red]Videos:[/red] {exc}")
            return None

    def _remove_all(self, provider_ids: List[str]) -> List[str]:
        """Attempt to remove every provider object and return those that failed."""

        failed: List[str] = []
        for provider_id in provider_ids:
            try:
                removed = self._media.remove(provider_id)
            except ExternalStorageError as exc:
                self._console.log(f"[red]Videos:[/red] failed to remove {provider_id}: {exc}")
                removed = False
            if not removed:
                failed.append(provider_id)
        return failed

    def _discard_uploads(self, uploads: List[StoredMedia]) -> None:
        failed = self._remove_all([upload.provider_id for upload in uploads])
        if failed:
            self._console.log(f"[yellow]Videos:[/yellow] orphaned uploads left behind: {', '.join(failed)}")


__all__ = ["VideoService"]
