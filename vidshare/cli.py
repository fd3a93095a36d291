"""
Maintenance commands for the video catalog.

Usage:
    vidshare seed
    vidshare dedupe
    vidshare clear --yes
    vidshare stats
"""
from typing import Annotated

import typer

from vidshare.app import create_app
from vidshare.seed import DEFAULT_VIDEOS
from vidshare.stores import get_store

# Seeding at startup would hide what the commands do
CLI_CONFIG = {"SEED_DEFAULT_VIDEOS": False}

app = typer.Typer(help="Maintain the vidshare video catalog.")


@app.command()
def seed() -> None:
    """Insert the default videos if the catalog is empty."""
    flask_app = create_app(CLI_CONFIG)

    with flask_app.app_context():
        inserted = get_store().seed_if_empty(DEFAULT_VIDEOS)
        if inserted:
            typer.echo(f"Seeded {inserted} default videos.")
        else:
            typer.echo("Catalog is not empty, nothing seeded.")


@app.command()
def dedupe() -> None:
    """Remove videos sharing a filename, keeping the earliest one."""
    flask_app = create_app(CLI_CONFIG)

    with flask_app.app_context():
        removed = get_store().deduplicate_by_filename()
        typer.echo(f"Removed {removed} duplicate video(s).")


@app.command()
def clear(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation")] = False,
) -> None:
    """Delete every video and comment, default videos included."""
    if not yes:
        typer.confirm("This deletes every video and comment. Continue?", abort=True)

    flask_app = create_app(CLI_CONFIG)

    with flask_app.app_context():
        videos, comments = get_store().clear_all()
        typer.echo("Cleared catalog:")
        typer.echo(f"  Videos: {videos}")
        typer.echo(f"  Comments: {comments}")


@app.command()
def stats() -> None:
    """Print catalog statistics."""
    flask_app = create_app(CLI_CONFIG)

    with flask_app.app_context():
        store = get_store()
        typer.echo(f"Backend: {store.name}")
        typer.echo(f"  Videos: {store.count_videos()}")
        typer.echo(f"  Comments: {store.count_comments()}")


if __name__ == "__main__":
    app()
