"""Command-line interface for tubemirror.

Main entry point for the application.
"""
# Created: 2026-10-18

import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .api_client import YouTubeCatalogClient
from .config.settings import Settings, load_settings
from .errors import TubeMirrorError
from .store import MemoryVideoStore, SQLiteVideoStore, VideoStore
from .sync import CatalogSync


console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging with rich handler and an optional log file."""
    level = logging.DEBUG if verbose else logging.INFO

    handlers = [RichHandler(console=console, rich_tracebacks=True)]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True
    )


def _settings(ctx: click.Context, **overrides: Optional[str]) -> Settings:
    """Load settings and apply command-line overrides."""
    config_dir = ctx.obj.get('config_dir') if ctx.obj else None
    settings = load_settings(config_dir)

    youtube_keys = ('api_key', 'username', 'channel_id', 'playlists')
    for key, value in overrides.items():
        if value is None:
            continue
        if key in youtube_keys:
            setattr(settings.youtube, key, value)
        elif key == 'database':
            settings.store.database = value

    # A selector given on the command line replaces the configured one
    if overrides.get('username'):
        settings.youtube.channel_id = overrides.get('channel_id') or ''
    elif overrides.get('channel_id'):
        settings.youtube.username = ''

    return settings


def _existing_store(settings: Settings) -> Optional[SQLiteVideoStore]:
    """Open the video store if its database exists, without creating one."""
    db_path = Path(settings.store.database).expanduser()
    if not db_path.exists():
        logger.debug(f"No video store at {db_path}")
        return None
    return SQLiteVideoStore(db_path)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {error}")
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version and exit')
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging')
@click.option('--config-dir', type=click.Path(),
              default=None, help='Configuration directory')
@click.option('--log-file', type=click.Path(), default=None,
              help='Also write log records to this file')
@click.pass_context
def cli(ctx: click.Context, version: bool, verbose: bool,
        config_dir: Optional[str], log_file: Optional[str]):
    """tubemirror - mirror YouTube playlists into a local video store."""
    if version:
        click.echo(f"tubemirror v{__version__}")
        sys.exit(0)

    setup_logging(verbose, log_file)

    ctx.ensure_object(dict)
    if config_dir:
        ctx.obj['config_dir'] = Path(config_dir)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('--user', 'username', default=None, help='YouTube username')
@click.option('--channel', 'channel_id', default=None, help='YouTube channel id')
@click.option('--playlists', default=None,
              help='Comma-separated playlist names, empty for all')
@click.option('--api-key', default=None, help='YouTube Data API key')
@click.option('--db', 'database', type=click.Path(), default=None,
              help='Path of the video database')
@click.option('--dry-run', is_flag=True, help='Show changes without writing them')
@click.pass_context
def sync(ctx: click.Context, username: Optional[str], channel_id: Optional[str],
         playlists: Optional[str], api_key: Optional[str], database: Optional[str],
         dry_run: bool):
    """Run one reconciliation pass against the video store."""
    try:
        settings = _settings(ctx, username=username, channel_id=channel_id,
                             playlists=playlists, api_key=api_key, database=database)
        account = settings.account_ref()
        client = YouTubeCatalogClient(settings.youtube)
        if dry_run:
            store: VideoStore = _existing_store(settings) or MemoryVideoStore()
        else:
            store = SQLiteVideoStore(Path(settings.store.database))

        report = CatalogSync(client, store).run(
            account,
            playlist_filter=settings.youtube.playlists or None,
            dry_run=dry_run
        )
    except TubeMirrorError as e:
        _fail(e)

    title = "[yellow]Sync preview[/yellow]" if dry_run else "[green]✓[/green] Sync complete"
    console.print(f"\n{title}\n")
    console.print(str(report))


@cli.command()
@click.option('--user', 'username', default=None, help='YouTube username')
@click.option('--channel', 'channel_id', default=None, help='YouTube channel id')
@click.option('--api-key', default=None, help='YouTube Data API key')
@click.pass_context
def playlists(ctx: click.Context, username: Optional[str], channel_id: Optional[str],
              api_key: Optional[str]):
    """List the playlists of a user or channel."""
    try:
        settings = _settings(ctx, username=username, channel_id=channel_id, api_key=api_key)
        account = settings.account_ref()
        client = YouTubeCatalogClient(settings.youtube)
        found = client.list_playlists(account)
    except TubeMirrorError as e:
        _fail(e)

    table = Table(title=f"Playlists of {account}")
    table.add_column("Name", style="cyan")
    table.add_column("Playlist ID")
    for name, playlist_id in found.items():
        table.add_row(name, playlist_id)
    console.print(table)


@cli.command()
@click.option('--db', 'database', type=click.Path(), default=None,
              help='Path of the video database')
@click.pass_context
def videos(ctx: click.Context, database: Optional[str]):
    """List the mirrored videos."""
    try:
        settings = _settings(ctx, database=database)
        store = _existing_store(settings)
        records = store.list_all() if store is not None else []
    except TubeMirrorError as e:
        _fail(e)

    if not records:
        console.print("No videos mirrored yet")
        return

    table = Table(title=f"{len(records)} mirrored videos")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Video ID")
    table.add_column("Playlist item ID", style="dim")
    for record in records:
        table.add_row(str(record.id), record.title, record.video_id, record.playlist_item_id)
    console.print(table)


@cli.command()
@click.option('--db', 'database', type=click.Path(), default=None,
              help='Path of the video database')
@click.pass_context
def status(ctx: click.Context, database: Optional[str]):
    """Show video store statistics."""
    try:
        settings = _settings(ctx, database=database)
        store = _existing_store(settings)
        stats = store.get_stats() if store is not None else None
    except TubeMirrorError as e:
        _fail(e)

    console.print("[yellow]Video store status[/yellow]\n")
    if stats is None:
        console.print(f"Database: {Path(settings.store.database).expanduser()} (missing)")
        console.print("No videos mirrored yet")
        return

    console.print(f"Database: {stats['db_path']}")
    console.print(f"Videos: {stats['total_videos']:,} ({stats['distinct_videos']:,} distinct)")
    console.print(f"Size: {stats['db_size_mb']:.2f} MB")
    console.print(f"Oldest entry: {stats['oldest_entry'] or '-'}")
    console.print(f"Last update: {stats['newest_update'] or '-'}")


def main():
    """Main entry point."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)


if __name__ == "__main__":
    main()
