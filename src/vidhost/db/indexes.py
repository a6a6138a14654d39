"""Create the MongoDB indexes vidhost relies on."""

from __future__ import annotations

from typing import NamedTuple, Optional, Sequence

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from rich.console import Console
from rich.table import Table

from vidhost.config.settings import get_settings
from vidhost.db import USERS_COLLECTION, VIDEOS_COLLECTION
from vidhost.db.connection import Database
from vidhost.exceptions import PersistenceError


class IndexSpec(NamedTuple):
    collection: str
    keys: Sequence[tuple[str, int]]
    name: str
    unique: bool = False


INDEXES: tuple[IndexSpec, ...] = (
    IndexSpec(VIDEOS_COLLECTION, [("is_published", ASCENDING), ("created_at", DESCENDING)], "published_listing"),
    IndexSpec(VIDEOS_COLLECTION, [("owner", ASCENDING)], "video_owner"),
    IndexSpec(USERS_COLLECTION, [("username", ASCENDING)], "user_username", unique=True),
    IndexSpec(USERS_COLLECTION, [("email", ASCENDING)], "user_email", unique=True),
)


def ensure_indexes(database: Database, console: Optional[Console] = None) -> list[str]:
    """Create all indexes, skipping those that already exist, and return their names."""

    console = console or Console()

    table = Table(title="Database Indexes")
    table.add_column("Collection", style="cyan")
    table.add_column("Index", style="magenta")
    table.add_column("Status", style="green")

    created: list[str] = []
    for spec in INDEXES:
        try:
            name = database.collection(spec.collection).create_index(
                list(spec.keys), name=spec.name, unique=spec.unique
            )
        except PyMongoError as exc:
            console.print(f"[red]Index creation failed:[/red] {spec.collection}.{spec.name}: {exc}")
            raise PersistenceError(f"Failed to create index {spec.name!r}: {exc}") from exc
        created.append(name)
        table.add_row(spec.collection, name, "ensured")

    console.print(table)
    return created


def main() -> None:
    """Entry point for `python -m vidhost.db.indexes`."""

    with Database.from_settings(get_settings()) as database:
        ensure_indexes(database)


if __name__ == "__main__":  # pragma: no cover
    main()


__all__ = ["INDEXES", "IndexSpec", "ensure_indexes"]
