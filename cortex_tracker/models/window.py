from typing import Optional
from pydantic import BaseModel, Field

class WindowOwner(BaseModel):
    """Application owning a window"""
    name: str = Field(description="Application name as reported by the OS")

class WindowInfo(BaseModel):
    """Foreground window as reported by a sampler"""
    title: Optional[str] = Field(default=None, description="Window title, None when unreadable")
    owner: WindowOwner
