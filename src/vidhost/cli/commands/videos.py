"""CLI commands for publishing, editing, listing and deleting videos."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vidhost.cli.context import ServiceFactory
from vidhost.db.indexes import ensure_indexes
from vidhost.exceptions import (
    ExternalStorageError,
    NotFoundError,
    ValidationError,
    VidhostError,
)
from vidhost.models.envelope import ApiResponse
from vidhost.models.video import PublishedVideo, Video


class VideoExitCode:
    """Mapping of meaningful CLI exit codes."""

    SUCCESS = 0
    INVALID_INPUT = 1
    NOT_FOUND = 2
    STORAGE_ERROR = 3
    PERSISTENCE_ERROR = 4


def register(app: typer.Typer, console: Console, services: ServiceFactory) -> None:
    """Register CLI commands for the video record store and published listing."""

    @app.command("init-db")
    def init_db() -> None:
        """Create the collection indexes."""

        with _error_boundary(console, json_output=False), services.open(console) as bound:
            ensure_indexes(bound.database, console=console)

    @app.command("publish")
    def publish(  # pylint: disable=too-many-arguments
        video_file: Path = typer.Option(..., "--video", exists=True, dir_okay=False, help="Video file to upload"),
        thumbnail: Path = typer.Option(..., "--thumbnail", exists=True, dir_okay=False, help="Thumbnail image"),
        owner: str = typer.Option(..., "--owner", help="Owner user id"),
        title: Optional[str] = typer.Option(None, "--title", help="Video title"),
        description: Optional[str] = typer.Option(None, "--description", help="Video description"),
        duration: Optional[float] = typer.Option(None, "--duration", min=0.0, help="Duration in seconds"),
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        with _error_boundary(console, json_output), services.open(console) as bound:
            video = bound.videos.publish(
                title=title,
                description=description,
                video_path=video_file,
                thumbnail_path=thumbnail,
                owner_id=owner,
                duration=duration,
            )

        if json_output:
            _echo(ApiResponse.ok(_video_payload(video), "Video uploaded successfully"))
            return
        console.print(_video_panel(video, title="Video uploaded"))

    @app.command("show")
    def show(
        video_id: str = typer.Argument(..., help="Video id"),
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        with _error_boundary(console, json_output), services.open(console) as bound:
            video = bound.videos.get_by_id(video_id)

        if json_output:
            _echo(ApiResponse.ok(_video_payload(video), "Video fetched successfully"))
            return
        console.print(_video_panel(video, title=f"Video {video.id}"))

    @app.command("update")
    def update(
        video_id: str = typer.Argument(..., help="Video id"),
        title: Optional[str] = typer.Option(None, "--title", help="New title"),
        description: Optional[str] = typer.Option(None, "--description", help="New description"),
        thumbnail: Optional[Path] = typer.Option(
            None, "--thumbnail", exists=True, dir_okay=False, help="Replacement thumbnail image"
        ),
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        with _error_boundary(console, json_output), services.open(console) as bound:
            video = bound.videos.update(video_id, title=title, description=description, thumbnail_path=thumbnail)

        if json_output:
            _echo(ApiResponse.ok(_video_payload(video), "Video details updated successfully"))
            return
        console.print(_video_panel(video, title="Video updated"))

    @app.command("delete")
    def delete(
        video_id: str = typer.Argument(..., help="Video id"),
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        with _error_boundary(console, json_output), services.open(console) as bound:
            bound.videos.delete(video_id)

        if json_output:
            _echo(ApiResponse.ok({"id": video_id}, "Video deleted successfully"))
            return
        console.print(f"[green]Deleted video[/green] {video_id}")

    @app.command("toggle-publish")
    def toggle_publish(
        video_id: str = typer.Argument(..., help="Video id"),
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        with _error_boundary(console, json_output), services.open(console) as bound:
            is_published = bound.videos.toggle_publish(video_id)

        if json_output:
            _echo(ApiResponse.ok({"id": video_id, "is_published": is_published}, "Publish status toggled"))
            return
        state = "[green]published[/green]" if is_published else "[yellow]unpublished[/yellow]"
        console.print(f"Video {video_id} is now {state}")

    @app.command("view")
    def view(
        video_id: str = typer.Argument(..., help="Video id"),
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        """Record one view of a video."""

        with _error_boundary(console, json_output), services.open(console) as bound:
            video = bound.videos.record_view(video_id)

        if json_output:
            _echo(ApiResponse.ok({"id": video.id, "views": video.views}, "View recorded"))
            return
        console.print(f"Video {video.id} has {video.views} views")

    @app.command("list")
    def list_published(
        json_output: bool = typer.Option(False, "--json", help="Output the response envelope as JSON"),
    ) -> None:
        """List published videos with their owners."""

        with _error_boundary(console, json_output), services.open(console) as bound:
            entries = bound.catalog.list_published()

        if json_output:
            payload = [entry.model_dump(mode="json") for entry in entries]
            _echo(ApiResponse.ok(payload, "All videos retrieved successfully"))
            return
        _render_listing(console, entries)


@contextmanager
def _error_boundary(console: Console, json_output: bool) -> Iterator[None]:
    """Render typed errors and convert them into CLI exit codes."""

    try:
        yield
    except VidhostError as exc:
        if json_output:
            _echo(ApiResponse.from_error(exc))
        else:
            console.print(f"[red]Error:[/red] {exc}")
            if exc.hint:
                console.print(f"[dim]{exc.hint}[/dim]")
        raise typer.Exit(code=_exit_code_for(exc)) from exc


def _exit_code_for(error: VidhostError) -> int:
    if isinstance(error, ValidationError):
        return VideoExitCode.INVALID_INPUT
    if isinstance(error, NotFoundError):
        return VideoExitCode.NOT_FOUND
    if isinstance(error, ExternalStorageError):
        return VideoExitCode.STORAGE_ERROR
    return VideoExitCode.PERSISTENCE_ERROR


def _echo(response: ApiResponse) -> None:
    typer.echo(json.dumps(response.model_dump(mode="json"), ensure_ascii=False, indent=2))


def _video_payload(video: Video) -> dict[str, Any]:
    return video.model_dump(mode="json")


def _video_panel(video: Video, *, title: str) -> Panel:
    state = "[green]published[/green]" if video.is_published else "[yellow]unpublished[/yellow]"
    lines = [
        f"[bold]ID:[/bold] {video.id}",
        f"[bold]Title:[/bold] {video.title or '-'}",
        f"[bold]Description:[/bold] {video.description or '-'}",
        f"[bold]Status:[/bold] {state}",
        f"[bold]Duration:[/bold] {_format_duration(video.duration)}",
        f"[bold]Views:[/bold] {video.views}",
        f"[bold]Owner:[/bold] {video.owner}",
        f"[bold]Video file:[/bold] {video.video_file}",
        f"[bold]Thumbnail:[/bold] {video.thumbnail}",
    ]
    if video.created_at:
        lines.append(f"[bold]Created:[/bold] {video.created_at.isoformat()}")
    return Panel("\n".join(lines), title=title, border_style="cyan")


def _render_listing(console: Console, entries: Sequence[PublishedVideo]) -> None:
    if not entries:
        console.print("[yellow]No published videos.[/yellow]")
        return

    table = Table(title="Published Videos")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Views", justify="right")
    table.add_column("Owner", style="magenta")
    table.add_column("Created")

    for entry in entries:
        owner = entry.owner.username or "(unknown)"
        created = entry.created_at.strftime("%Y-%m-%d %H:%M") if entry.created_at else "-"
        table.add_row(entry.id, entry.title or "-", _format_duration(entry.duration), str(entry.views), owner, created)

    console.print(table)


def _format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(round(seconds)), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


__all__ = ["VideoExitCode", "register"]
