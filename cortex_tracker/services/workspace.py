from datetime import datetime
from typing import Union
import logging

from cortex_tracker.models.session import (
    AppClosed,
    AppClosedEvent,
    AppOpened,
    AppOpenedEvent,
    AppSwitched,
    AppSwitchedEvent,
    LiveWorkspace,
    WorkspaceApp,
    WorkspaceCleared,
    WorkspaceClearedEvent,
)

logger = logging.getLogger(__name__)

Update = Union[AppOpened, AppClosed, AppSwitched, WorkspaceCleared]
UpdateLogEntry = Union[AppOpenedEvent, AppClosedEvent, AppSwitchedEvent, WorkspaceClearedEvent]

def is_tracked(workspace: LiveWorkspace, app_name: str) -> bool:
    """Check whether an app name belongs to a workspace member, ignoring case"""
    wanted = app_name.lower()
    return any(app.name.lower() == wanted for app in workspace.apps)

def reduce_workspace(workspace: LiveWorkspace, update: Update, timestamp: datetime) -> LiveWorkspace:
    """Apply a workspace update and return the resulting workspace

    The input workspace is left untouched.

    Args:
        workspace: Current live workspace
        update: Update to apply
        timestamp: Time the update was received, used as ``added_at`` for new apps

    Returns:
        LiveWorkspace: The new workspace
    """
    if isinstance(update, AppOpened):
        # Apps the user opened on their own are observed, not tracked
        if not update.launched_via_cortex:
            return workspace

        apps = list(workspace.apps)
        if not any(app.path == update.path for app in apps):
            apps.append(WorkspaceApp(
                name=update.name,
                path=update.path,
                window_title=update.window_title,
                is_active=update.is_active,
                added_at=timestamp
            ))
        return workspace.model_copy(update={
            "apps": apps,
            "active_app_id": update.path,
            "active_window_id": update.window_title
        })

    if isinstance(update, AppClosed):
        apps = [app for app in workspace.apps if app.path != update.path]
        return workspace.model_copy(update={"apps": apps})

    if isinstance(update, AppSwitched):
        return workspace.model_copy(update={
            "active_app_id": update.path,
            "active_window_id": update.window_title
        })

    if isinstance(update, WorkspaceCleared):
        # Record only: membership is cleared through app_closed updates
        return workspace

    raise TypeError(f"Unsupported workspace update: {type(update).__name__}")

def log_entry_for(update: Update, timestamp: datetime) -> UpdateLogEntry:
    """Build the event log entry recording an update"""
    if isinstance(update, AppOpened):
        return AppOpenedEvent(timestamp=timestamp, data=update)
    if isinstance(update, AppClosed):
        return AppClosedEvent(timestamp=timestamp, data=update)
    if isinstance(update, AppSwitched):
        return AppSwitchedEvent(timestamp=timestamp, data=update)
    if isinstance(update, WorkspaceCleared):
        return WorkspaceClearedEvent(timestamp=timestamp, items=update.items)
    raise TypeError(f"Unsupported workspace update: {type(update).__name__}")
