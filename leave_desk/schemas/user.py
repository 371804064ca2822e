from datetime import datetime

from pydantic import field_validator

from ..core.validators import (
    check_age,
    check_full_name,
    check_gender,
    check_phone_no,
    check_subjects,
)
from .common import ApiModel


class UserOut(ApiModel):
    id: int
    full_name: str
    email: str
    phone_no: str
    age: int
    gender: str
    department: str
    subjects: list[str]
    photo_url: str | None = None
    created_at: datetime | None = None


class UserBrief(ApiModel):
    id: int
    full_name: str
    email: str
    department: str


class ProfileUpdateIn(ApiModel):
    full_name: str | None = None
    phone_no: str | None = None
    age: int | None = None
    gender: str | None = None
    department: str | None = None
    subjects: list[str] | None = None
    photo_url: str | None = None

    @field_validator("full_name")
    @classmethod
    def valid_full_name(cls, v: str | None) -> str | None:
        return None if v is None else check_full_name(v)

    @field_validator("phone_no")
    @classmethod
    def valid_phone_no(cls, v: str | None) -> str | None:
        return None if v is None else check_phone_no(v)

    @field_validator("age")
    @classmethod
    def valid_age(cls, v: int | None) -> int | None:
        return None if v is None else check_age(v)

    @field_validator("gender")
    @classmethod
    def valid_gender(cls, v: str | None) -> str | None:
        return None if v is None else check_gender(v)

    @field_validator("department")
    @classmethod
    def normalized_department(cls, v: str | None) -> str | None:
        return None if v is None else v.strip().lower()

    @field_validator("subjects")
    @classmethod
    def valid_subjects(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else check_subjects(v)
