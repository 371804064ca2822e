from datetime import date, datetime

from pydantic import Field

from .common import ApiModel
from .leave_type import LeaveTypeBrief
from .user import UserBrief


class LeaveApplyIn(ApiModel):
    leave_type_id: int | None = Field(default=None, alias="leaveType")
    from_date: date | None = None
    to_date: date | None = None
    reason: str | None = None
    attachment_url: str | None = None


class LeaveStatusIn(ApiModel):
    status: str | None = None


class LeaveOut(ApiModel):
    id: int
    user_id: int
    leave_type_id: int | None = None
    from_date: date
    to_date: date
    total_days: int
    reason: str
    attachment_url: str | None = None
    status: str
    notification_shown: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
    leave_type: LeaveTypeBrief | None = None
    user: UserBrief | None = None


class LeaveCountsOut(ApiModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


class RemainingBalanceOut(ApiModel):
    leave_type: str
    max_days: int
    used_days: int
    remaining_days: int
