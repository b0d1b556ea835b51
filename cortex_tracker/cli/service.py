import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from cortex_tracker.config.logging_config import setup_logging
from cortex_tracker.config.settings import settings
from cortex_tracker.services.display import SessionDisplay
from cortex_tracker.services.errors import PersistenceError
from cortex_tracker.services.launcher import AppLauncher
from cortex_tracker.services.persistence import SessionFileStore

# Set up logging
logger = logging.getLogger(__name__)

# Initialize console
console = Console()

@click.group()
def cli():
    """Cortex workspace tracker"""
    pass

@cli.command()
@click.option('--debug', is_flag=True, help='Enable debug output')
def start(debug):
    """Track desktop activity until interrupted, then save the session"""
    try:
        from cortex_tracker.services.runner import run_service
        if not debug:
            console.print("[yellow]Starting Cortex tracker...[/yellow]")
        else:
            console.print("[yellow]Starting Cortex tracker in debug mode...[/yellow]")
        run_service(debug=debug)
    except Exception as e:
        logger.error(f"Failed to start service: {e}")
        console.print(f"[red]Failed to start service: {e}[/red]")
        sys.exit(1)

@cli.command()
@click.argument('app_path')
def launch(app_path):
    """Launch an application by path"""
    setup_logging()
    launched = asyncio.run(AppLauncher().launch(app_path))
    if launched:
        console.print(f"[green]Launched {app_path}[/green]")
    else:
        console.print(f"[red]Failed to launch {app_path}[/red]")
        sys.exit(1)

@cli.command()
@click.option('--dir', 'session_dir', type=click.Path(path_type=Path), default=None,
              help='Directory holding saved sessions')
def sessions(session_dir):
    """List saved sessions"""
    store = SessionFileStore(session_dir=session_dir or settings.SESSION_DIR)
    saved = store.list_saved()
    if not saved:
        console.print("[yellow]No saved sessions found[/yellow]")
        return

    table = Table(title="Saved Sessions")
    table.add_column("File", justify="left", style="cyan")
    table.add_column("Size", justify="right", style="green")
    table.add_column("Modified", justify="left", style="yellow")
    for path in saved:
        stat = path.stat()
        table.add_row(
            path.name,
            f"{stat.st_size / 1024:.1f} KB",
            datetime.fromtimestamp(stat.st_mtime).strftime("%Y-%m-%d %H:%M:%S")
        )
    console.print(table)

@cli.command()
@click.argument('path', required=False, type=click.Path(path_type=Path))
@click.option('--limit', type=int, default=20, show_default=True, help='Number of events to show')
def show(path, limit):
    """Show a session file (defaults to the fixed session file)"""
    try:
        session = SessionFileStore().load(path)
    except PersistenceError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    if session is None:
        console.print(f"[yellow]No session file found at {path or settings.SESSION_FILE}[/yellow]")
        return
    SessionDisplay(console).show_session(session, limit=limit)
