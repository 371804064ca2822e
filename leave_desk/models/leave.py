from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Boolean, Date, String, Text, Integer, DateTime, ForeignKey, func
from .user import Base

LEAVE_PENDING = "pending"
LEAVE_APPROVED = "approved"
LEAVE_REJECTED = "rejected"


class Leave(Base):
    __tablename__ = "leaves"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True)
    leave_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("leave_types.id", ondelete="SET NULL"), nullable=True, index=True
    )

    from_date: Mapped[date] = mapped_column(Date)
    to_date: Mapped[date] = mapped_column(Date)
    total_days: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(Text)
    attachment_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(String(16), default=LEAVE_PENDING, index=True)
    # reset on every status change, set by the owner once the decision has been seen
    notification_shown: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
