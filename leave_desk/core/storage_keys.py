from __future__ import annotations

import os
from datetime import datetime, timezone
from uuid import uuid4


def _date_path(dt: datetime | None) -> str:
    # folders are YYYY/MM/DD in UTC
    base = dt or datetime.now(timezone.utc)
    return base.strftime("%Y/%m/%d")


def _ext_from_filename(filename: str) -> str:
    _, ext = os.path.splitext((filename or "").lower())
    return ext


def attachment_key(*, user_id: int, filename: str, uploaded_at: datetime | None = None) -> str:
    return f"attachments/{user_id}/{_date_path(uploaded_at)}/{uuid4().hex}{_ext_from_filename(filename)}"
