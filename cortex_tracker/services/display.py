from collections import Counter
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cortex_tracker.models.session import (
    AppClosedEvent,
    AppOpenedEvent,
    AppSwitchedEvent,
    FocusChangeEvent,
    IdleCheckEvent,
    PollSnapshotEvent,
    SessionData,
    TabFocusEvent,
    WorkspaceClearedEvent,
)

EVENT_STYLES = {
    "idle_check": "dim",
    "focusChange": "bold cyan",
    "poll_snapshot": "green",
    "tab_focus": "blue",
    "app_opened": "bold green",
    "app_closed": "red",
    "app_switched": "yellow",
    "workspace_cleared": "magenta",
}

def describe_event(event) -> str:
    """One-line description of an event log entry"""
    if isinstance(event, IdleCheckEvent):
        state = "idle" if event.is_idle else "active"
        return f"{event.idle_seconds:.0f}s since last app change ({state})"
    if isinstance(event, FocusChangeEvent):
        return f"{event.app_name}: {event.window_title or ''}"
    if isinstance(event, TabFocusEvent):
        tab = f" [{event.title} | {event.url}]" if event.url else ""
        return f"{event.app_name}: {event.window_title or ''}{tab}"
    if isinstance(event, PollSnapshotEvent):
        duration = f" (+{event.duration_ms}ms)" if event.duration_ms is not None else ""
        return f"{event.app_name}: {event.window_title or ''}{duration}"
    if isinstance(event, AppOpenedEvent):
        via = "via Cortex" if event.data.launched_via_cortex else "observed"
        return f"{event.data.name} ({via}) {event.data.path}"
    if isinstance(event, AppClosedEvent):
        if event.data is not None:
            return event.data.path
        return f"{event.path} (inferred)"
    if isinstance(event, AppSwitchedEvent):
        return f"{event.data.path}: {event.data.window_title or ''}"
    if isinstance(event, WorkspaceClearedEvent):
        return f"{len(event.items)} items"
    return ""

class SessionDisplay:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_session(self, session: SessionData, limit: int = 20):
        """Display a session in a nice terminal format"""
        workspace = session.live_workspace
        counts = Counter(event.type for event in session.event_log)

        # Create header
        header = Text()
        header.append(f"🗂  {session.session_name}", style="bold cyan")
        header.append(f"\nCreated {session.created_at:%Y-%m-%d %H:%M:%S}", style="dim")
        header.append(f"\n{len(session.event_log)} events, {len(workspace.apps)} tracked apps", style="dim")
        if workspace.active_app_id:
            header.append(f"\nActive: {workspace.active_app_id}", style="bold yellow")
            if workspace.active_window_id:
                header.append(f" - {workspace.active_window_id}", style="yellow")
        if workspace.active_tab:
            header.append(f"\nTab: {workspace.active_tab.title} ({workspace.active_tab.url})", style="blue")
        self.console.print(Panel(header, expand=False))

        if workspace.apps:
            apps_table = Table(title="Workspace Apps")
            apps_table.add_column("Name", style="green")
            apps_table.add_column("Path", style="cyan")
            apps_table.add_column("Window", style="yellow")
            apps_table.add_column("Added", style="dim")
            for app in workspace.apps:
                apps_table.add_row(
                    app.name,
                    app.path,
                    app.window_title or "",
                    app.added_at.strftime("%H:%M:%S")
                )
            self.console.print(apps_table)
        else:
            self.console.print("[yellow]No tracked apps in workspace[/yellow]")

        if not session.event_log:
            self.console.print("[yellow]No events recorded[/yellow]")
            return

        events_table = Table(title=f"Last {min(limit, len(session.event_log))} Events")
        events_table.add_column("Time", style="cyan")
        events_table.add_column("Type")
        events_table.add_column("Detail")
        for event in session.event_log[-limit:]:
            events_table.add_row(
                event.timestamp.strftime("%H:%M:%S"),
                Text(event.type, style=EVENT_STYLES.get(event.type, "")),
                Text(describe_event(event))
            )
        self.console.print(events_table)

        stats = Text()
        stats.append("📈 Event Counts\n", style="bold yellow")
        for event_type, count in sorted(counts.items()):
            stats.append(f"{event_type}: {count}\n", style="dim")
        self.console.print(Panel(stats, expand=False))
