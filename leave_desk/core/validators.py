"""Profile and password rules shared by the signup and profile schemas.

Each check returns the normalized value or raises ``ValueError``; pydantic
turns that into a request validation error with the message below.
"""
from __future__ import annotations

import re

from email_validator import validate_email, EmailNotValidError

PHONE_RE = re.compile(r"^[6-9]\d{9}$")
VALID_GENDERS = ("male", "female", "others")
BCRYPT_MAX_BYTES = 72


def check_full_name(value: str) -> str:
    name = (value or "").strip()
    if len(name) < 3 or len(name) > 50:
        raise ValueError("Full name must be 3-50 characters long")
    return name


def check_phone_no(value: str) -> str:
    phone = (value or "").strip()
    if not PHONE_RE.match(phone):
        raise ValueError("Invalid phone number format")
    return phone


def check_email(value: str) -> str:
    try:
        return validate_email((value or "").strip(), check_deliverability=False).normalized.lower()
    except EmailNotValidError:
        raise ValueError("Invalid email format")


def check_age(value: int) -> int:
    if value < 18 or value > 100:
        raise ValueError("Age must be between 18 and 100")
    return value


def check_gender(value: str) -> str:
    gender = (value or "").strip().lower()
    if gender not in VALID_GENDERS:
        raise ValueError("Gender must be male, female, or others")
    return gender


def check_subjects(value: list[str]) -> list[str]:
    if not value:
        raise ValueError("At least one subject must be provided")
    subjects = [(s or "").strip() for s in value]
    if any(len(s) < 2 for s in subjects):
        raise ValueError("Each subject must be a valid string (min 2 chars)")
    return subjects


def check_password_strength(value: str) -> str:
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError("Password must be <= 72 bytes (bcrypt limit).")
    strong = (
        len(value) >= 8
        and re.search(r"[a-z]", value)
        and re.search(r"[A-Z]", value)
        and re.search(r"\d", value)
        and re.search(r"[^A-Za-z0-9]", value)
    )
    if not strong:
        raise ValueError(
            "Password must be strong (min 8 chars, include uppercase, lowercase, number, and symbol)"
        )
    return value
