from .user import Base, User
from .department import Department
from .leave_type import LeaveType
from .leave import Leave
from .mail_log import MailLog

__all__ = ["Base", "User", "Department", "LeaveType", "Leave", "MailLog"]
