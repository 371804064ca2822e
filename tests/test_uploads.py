from __future__ import annotations

import re
from datetime import datetime, timezone

import pytest

from leave_desk.core.errors import ValidationError
from leave_desk.core.storage_keys import attachment_key
from leave_desk.routers import uploads


PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n"


def test_attachment_key_layout():
    key = attachment_key(user_id=7, filename="Note.PDF", uploaded_at=datetime(2024, 3, 9, tzinfo=timezone.utc))

    assert re.fullmatch(r"attachments/7/2024/03/09/[0-9a-f]{32}\.pdf", key)


def test_upload_and_serve_locally(client, settings, faculty, faculty_headers):
    res = client.post(
        "/uploads/attachments",
        headers=faculty_headers,
        files={"file": ("certificate.pdf", PDF_BYTES, "application/pdf")},
    )

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["contentType"] == "application/pdf"
    assert body["size"] == len(PDF_BYTES)
    assert body["key"].startswith(f"attachments/{faculty.id}/")
    assert body["url"] == f"/uploads/{body['key']}"

    served = client.get(body["url"])
    assert served.status_code == 200
    assert served.content == PDF_BYTES


def test_upload_requires_login(client):
    res = client.post("/uploads/attachments", files={"file": ("a.pdf", PDF_BYTES, "application/pdf")})

    assert res.status_code == 401


def test_upload_rejects_other_types(client, faculty_headers):
    text = client.post(
        "/uploads/attachments",
        headers=faculty_headers,
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert text.status_code == 400
    assert text.json()["message"] == "Only images and PDF files are allowed"

    disguised = client.post(
        "/uploads/attachments",
        headers=faculty_headers,
        files={"file": ("script.sh", b"echo", "image/png")},
    )
    assert disguised.status_code == 400
    assert disguised.json()["message"] == "Unsupported file type"


def test_upload_size_limit(client, faculty_headers, monkeypatch):
    monkeypatch.setattr(uploads, "MAX_UPLOAD_BYTES", 10)

    res = client.post(
        "/uploads/attachments",
        headers=faculty_headers,
        files={"file": ("big.png", b"x" * 11, "image/png")},
    )

    assert res.status_code == 413


def test_serve_rejects_traversal(settings, tmp_path):
    (tmp_path / "secret.txt").write_text("nope")

    with pytest.raises(ValidationError):
        uploads.serve_upload("attachments/../../secret.txt", settings=settings)


def test_serve_missing_file(client):
    res = client.get("/uploads/attachments/1/missing.pdf")

    assert res.status_code == 404
    assert res.json() == {"success": False, "message": "File not found"}
