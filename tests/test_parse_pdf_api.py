from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import make_pdf

pytestmark = pytest.mark.integration


def test_parse_pdf_returns_text_and_pages(client: TestClient) -> None:
    response = client.post(
        "/parse-pdf",
        files={"file": ("resume.pdf", make_pdf("Forklift certified"), "application/pdf")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["pages"] == 1
    assert "Forklift" in body["text"]
    assert body["info"] == {"title": None, "author": None, "creator": None}


def test_parse_pdf_requires_a_file(client: TestClient) -> None:
    response = client.post("/parse-pdf")

    assert response.status_code == 400
    assert response.json()["detail"] == "No file provided"


def test_parse_pdf_rejects_non_pdf(client: TestClient) -> None:
    response = client.post("/parse-pdf", files={"file": ("resume.txt", b"plain text", "text/plain")})

    assert response.status_code == 400
    assert response.json()["detail"] == "File must be a PDF"


def test_parse_pdf_reports_unreadable_pdf(client: TestClient) -> None:
    response = client.post("/parse-pdf", files={"file": ("resume.pdf", b"%PDF-1.4 broken", "application/pdf")})

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to parse PDF"
