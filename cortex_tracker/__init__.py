"""
Cortex tracker - live workspace and focus tracking for the desktop
"""

__version__ = "0.1.0"

from .services.session_manager import SessionManager
from .services.persistence import SessionFileStore
from .services.launcher import AppLauncher
from .models.session import SessionData, LiveWorkspace, WorkspaceApp

__all__ = [
    'SessionManager',
    'SessionFileStore',
    'AppLauncher',
    'SessionData',
    'LiveWorkspace',
    'WorkspaceApp',
]
