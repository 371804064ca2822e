from pydantic import Field, field_validator

from ..core.validators import (
    check_age,
    check_email,
    check_full_name,
    check_gender,
    check_password_strength,
    check_phone_no,
    check_subjects,
)
from .common import ApiModel


class SignupIn(ApiModel):
    full_name: str
    email: str
    phone_no: str
    age: int
    gender: str
    department: str
    subjects: list[str]
    password: str
    photo_url: str | None = None

    @field_validator("full_name")
    @classmethod
    def valid_full_name(cls, v: str) -> str:
        return check_full_name(v)

    @field_validator("phone_no")
    @classmethod
    def valid_phone_no(cls, v: str) -> str:
        return check_phone_no(v)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return check_email(v)

    @field_validator("age")
    @classmethod
    def valid_age(cls, v: int) -> int:
        return check_age(v)

    @field_validator("gender")
    @classmethod
    def valid_gender(cls, v: str) -> str:
        return check_gender(v)

    @field_validator("department")
    @classmethod
    def normalized_department(cls, v: str) -> str:
        # membership is checked against settings in the auth service
        return v.strip().lower()

    @field_validator("subjects")
    @classmethod
    def valid_subjects(cls, v: list[str]) -> list[str]:
        return check_subjects(v)

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class LoginIn(ApiModel):
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    role: str | None = None


class ForgotPasswordIn(ApiModel):
    email: str = Field(min_length=1, max_length=255)


class ResetPasswordIn(ApiModel):
    password: str

    @field_validator("password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)


class ChangePasswordIn(ApiModel):
    current_password: str = Field(min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, v: str) -> str:
        return check_password_strength(v)
