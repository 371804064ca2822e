from __future__ import annotations

import jwt
import pytest

from leave_desk.core import validators
from leave_desk.core.roles import is_admin_email
from leave_desk.core.security import (
    cookie_options,
    create_access_token,
    decode_token,
    hash_password,
    hash_reset_token,
    new_reset_token,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = hash_password("Str0ng!Pass")

    assert hashed != "Str0ng!Pass"
    assert verify_password("Str0ng!Pass", hashed)
    assert not verify_password("str0ng!pass", hashed)
    assert not verify_password("Str0ng!Pass", None)
    assert not verify_password("Str0ng!Pass", "not-a-hash")


def test_access_token_carries_subject_and_expiry(settings):
    token = create_access_token("42", settings)
    claims = decode_token(token, settings)

    assert claims["sub"] == "42"
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600


def test_access_token_signed_with_other_secret_is_rejected(settings):
    forged = jwt.encode({"sub": "1"}, "someone-else", algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        decode_token(forged, settings)


def test_cookie_options_follow_environment(settings):
    assert cookie_options(settings)["samesite"] == "lax"
    assert cookie_options(settings)["secure"] is False

    settings.environment = "production"
    assert cookie_options(settings) == {"httponly": True, "secure": True, "samesite": "none", "path": "/"}


def test_reset_token_is_random_hex_and_only_digest_is_kept():
    raw, digest = new_reset_token()
    other_raw, _ = new_reset_token()

    assert len(raw) == 64 and int(raw, 16) >= 0
    assert raw != other_raw
    assert digest == hash_reset_token(raw)
    assert digest != raw


def test_admin_email_match_is_case_insensitive(settings):
    assert is_admin_email("Admin@College.edu", settings)
    assert not is_admin_email("faculty@college.edu", settings)

    settings.admin_email = ""
    assert not is_admin_email("", settings)


@pytest.mark.parametrize("password", ["Short1!", "alllower1!", "ALLUPPER1!", "NoDigits!!", "NoSymbol12"])
def test_weak_passwords(password):
    with pytest.raises(ValueError, match="Password must be strong"):
        validators.check_password_strength(password)


def test_password_over_bcrypt_limit():
    with pytest.raises(ValueError, match="72 bytes"):
        validators.check_password_strength("Aa1!" + "x" * 80)


def test_profile_normalization():
    assert validators.check_email(" Ravi@College.EDU ") == "ravi@college.edu"
    assert validators.check_gender(" Female ") == "female"
    assert validators.check_subjects([" Maths ", "DS"]) == ["Maths", "DS"]
    assert validators.check_phone_no("9876543210") == "9876543210"

    with pytest.raises(ValueError):
        validators.check_phone_no("5876543210")
    with pytest.raises(ValueError, match="min 2 chars"):
        validators.check_subjects(["ok", "x"])
