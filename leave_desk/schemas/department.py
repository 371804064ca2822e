from datetime import datetime

from pydantic import Field

from .common import ApiModel


class DepartmentOut(ApiModel):
    id: int
    name: str
    code: str
    created_at: datetime | None = None


class DepartmentWithCountOut(DepartmentOut):
    employees: int = 0


class DepartmentCreateIn(ApiModel):
    name: str | None = Field(default=None, max_length=100)
    code: str | None = Field(default=None, max_length=20)


class DepartmentUpdateIn(ApiModel):
    name: str | None = Field(default=None, max_length=100)
    code: str | None = Field(default=None, max_length=20)
