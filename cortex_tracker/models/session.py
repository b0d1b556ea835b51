from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Base model that serializes field names in camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# Updates sent in by whatever launches or observes apps on the product's behalf

class UpdateModel(CamelModel):
    """Base for caller-supplied workspace updates; unknown keys are kept"""
    model_config = ConfigDict(extra="allow")

class AppOpened(UpdateModel):
    type: Literal["app_opened"] = "app_opened"
    name: str
    path: str
    window_title: Optional[str] = None
    is_active: bool = False
    launched_via_cortex: bool = Field(
        default=False,
        description="Only apps launched through Cortex become workspace members"
    )

class AppClosed(UpdateModel):
    type: Literal["app_closed"] = "app_closed"
    path: str

class AppSwitched(UpdateModel):
    type: Literal["app_switched"] = "app_switched"
    path: str
    window_title: Optional[str] = None

class WorkspaceCleared(UpdateModel):
    type: Literal["workspace_cleared"] = "workspace_cleared"
    items: List[Any] = Field(default_factory=list)

UpdateEvent = Annotated[
    Union[AppOpened, AppClosed, AppSwitched, WorkspaceCleared],
    Field(discriminator="type")
]
UPDATE_TYPES = ("app_opened", "app_closed", "app_switched", "workspace_cleared")
update_event_adapter = TypeAdapter(UpdateEvent)

# Event log entries

class EventModel(CamelModel):
    """Base for event log entries; entries are immutable once built"""
    model_config = ConfigDict(frozen=True)

    timestamp: datetime

class IdleCheckEvent(EventModel):
    type: Literal["idle_check"] = "idle_check"
    idle_seconds: float
    is_idle: bool

class FocusChangeEvent(EventModel):
    type: Literal["focusChange"] = "focusChange"
    window_title: Optional[str] = None
    app_name: str

class PollSnapshotEvent(EventModel):
    type: Literal["poll_snapshot"] = "poll_snapshot"
    app_name: str
    window_title: Optional[str] = None
    duration_ms: Optional[int] = Field(
        default=None,
        description="Milliseconds since the previous sample, None for the first one"
    )

class TabFocusEvent(EventModel):
    type: Literal["tab_focus"] = "tab_focus"
    app_name: str
    window_title: Optional[str] = None
    duration_ms: Optional[int] = None
    title: Optional[str] = None
    url: Optional[str] = None

class AppOpenedEvent(EventModel):
    type: Literal["app_opened"] = "app_opened"
    data: AppOpened

class AppClosedEvent(EventModel):
    """Closure entry: ``data`` when declared by a caller, ``path`` when inferred"""
    type: Literal["app_closed"] = "app_closed"
    data: Optional[AppClosed] = None
    path: Optional[str] = None

class AppSwitchedEvent(EventModel):
    type: Literal["app_switched"] = "app_switched"
    data: AppSwitched

class WorkspaceClearedEvent(EventModel):
    type: Literal["workspace_cleared"] = "workspace_cleared"
    items: List[Any] = Field(default_factory=list)

Event = Annotated[
    Union[
        IdleCheckEvent,
        FocusChangeEvent,
        PollSnapshotEvent,
        TabFocusEvent,
        AppOpenedEvent,
        AppClosedEvent,
        AppSwitchedEvent,
        WorkspaceClearedEvent,
    ],
    Field(discriminator="type")
]

# Live workspace

class TabInfo(CamelModel):
    """Active browser tab"""
    title: Optional[str] = None
    url: Optional[str] = None

class WorkspaceApp(CamelModel):
    """An app launched through the product and tracked as a workspace member"""
    name: str
    path: str
    window_title: Optional[str] = None
    is_active: bool = False
    added_at: datetime

class LiveWorkspace(CamelModel):
    """Current-state projection of the workspace"""
    apps: List[WorkspaceApp] = Field(default_factory=list)
    active_app_id: Optional[str] = None
    active_window_id: Optional[str] = None
    active_tab: Optional[TabInfo] = None

class SessionData(CamelModel):
    """Root aggregate: one live instance per running tracker"""
    session_name: str = Field(frozen=True)
    created_at: datetime = Field(frozen=True)
    live_workspace: LiveWorkspace = Field(default_factory=LiveWorkspace)
    event_log: List[Event] = Field(default_factory=list)

    @classmethod
    def new(cls, now: datetime) -> "SessionData":
        """Create an empty session named after its creation time"""
        stamp = now.isoformat(timespec="milliseconds")
        return cls(session_name=f"Session_{stamp}", created_at=now)

    def to_json(self) -> str:
        """Pretty-printed JSON document with camelCase keys"""
        return self.model_dump_json(by_alias=True, indent=2)
