"""Common error handling for all services"""

class ServiceError(Exception):
    """Base exception for all service errors"""
    pass

class SessionError(ServiceError):
    """Base exception for session lifecycle errors"""
    pass

class NoActiveSessionError(SessionError):
    """Exception raised when an operation needs a live session and none exists"""
    pass

class PersistenceError(ServiceError):
    """Base exception for session file errors"""
    pass

class SessionSaveError(PersistenceError):
    """Exception raised when a session cannot be written to disk"""
    pass

class SessionLoadError(PersistenceError):
    """Exception raised when a session file cannot be read or parsed"""
    pass

class DesktopError(ServiceError):
    """Base exception for desktop integration errors"""
    pass

class SamplerError(DesktopError):
    """Exception raised when the foreground window or browser tab cannot be queried"""
    pass

class RunnerError(ServiceError):
    """Base exception for service runner errors"""
    pass
