from datetime import datetime

from pydantic import Field

from .common import ApiModel


class LeaveTypeOut(ApiModel):
    id: int
    name: str
    description: str | None = None
    max_days: int
    requires_attachment: bool
    applications: int
    created_at: datetime | None = None


class LeaveTypeBrief(ApiModel):
    id: int
    name: str
    max_days: int
    requires_attachment: bool


class LeaveTypeCreateIn(ApiModel):
    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    max_days: int | None = Field(default=None, ge=0)
    requires_attachment: bool = False


class LeaveTypeUpdateIn(ApiModel):
    name: str | None = Field(default=None, max_length=100)
    description: str | None = None
    max_days: int | None = Field(default=None, ge=0)
    requires_attachment: bool | None = None
