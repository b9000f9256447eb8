from __future__ import annotations

import asyncio
import base64
import copy
import hashlib
import hmac
import json
import threading
from typing import Any

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.api.main import create_app
from app.config import ApiKeyConfig, Config, MatchingConfig, StorageConfig, SupabaseConfig, WebhookConfig
from app.schemas.intake import ProcessingRequest, ProcessingResult
from app.services.container import ServiceContainer
from app.services.storage_service import UploadDestination
from app.utils.api_key import hash_api_key

SECRET = "shared-secret"
OPS_KEY = "ops-key"


class FakeResponse:
    def __init__(self, data: list[dict[str, Any]], count: int | None = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest query builder for the services."""

    def __init__(self, db: FakeSupabase, table: str) -> None:
        self.db = db
        self.table_name = table
        self.action = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, str, Any]] = []
        self.count_mode: str | None = None
        self.order_by: tuple[str, bool] | None = None
        self.limit_to: int | None = None

    def select(self, *_columns: str, count: str | None = None) -> FakeQuery:
        self.action = "select"
        self.count_mode = count
        return self

    def insert(self, row: dict[str, Any]) -> FakeQuery:
        self.action = "insert"
        self.payload = row
        return self

    def update(self, fields: dict[str, Any]) -> FakeQuery:
        self.action = "update"
        self.payload = fields
        return self

    def delete(self) -> FakeQuery:
        self.action = "delete"
        return self

    def eq(self, column: str, value: Any) -> FakeQuery:
        self.filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value: Any) -> FakeQuery:
        self.filters.append(("gte", column, value))
        return self

    def order(self, column: str, desc: bool = False) -> FakeQuery:
        self.order_by = (column, desc)
        return self

    def limit(self, count: int) -> FakeQuery:
        self.limit_to = count
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        for op, column, value in self.filters:
            if op == "eq" and row.get(column) != value:
                return False
            if op == "gte" and (row.get(column) is None or row.get(column) < value):
                return False
        return True

    def execute(self) -> FakeResponse:
        with self.db.lock:
            return self._execute()

    def _execute(self) -> FakeResponse:
        if self.table_name in self.db.failing_tables:
            raise APIError({"message": "connection refused", "code": "08006", "hint": None, "details": None})

        rows = self.db.tables.setdefault(self.table_name, [])
        if self.action == "insert":
            for column in self.db.unique.get(self.table_name, ()):
                if any(existing.get(column) == self.payload.get(column) for existing in rows):
                    raise APIError({
                        "message": f'duplicate key value violates unique constraint "{self.table_name}_{column}_key"',
                        "code": "23505",
                        "hint": None,
                        "details": None,
                    })
            rows.append(copy.deepcopy(self.payload))
            return FakeResponse([copy.deepcopy(self.payload)])

        matched = [row for row in rows if self._matches(row)]
        if self.action == "update":
            for row in matched:
                row.update(self.payload)
            return FakeResponse(copy.deepcopy(matched))
        if self.action == "delete":
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return FakeResponse(copy.deepcopy(matched))

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        total = len(matched)
        if self.limit_to is not None:
            matched = matched[: self.limit_to]
        # PostgREST caps every read at db-max-rows; exact counts are not capped
        matched = matched[: self.db.max_rows]
        return FakeResponse(copy.deepcopy(matched), count=total if self.count_mode == "exact" else None)


class FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.unique = {"intake_claims": ("delivery_id",), "job_mappings": ("external_job_id",)}
        self.failing_tables: set[str] = set()
        self.max_rows = 1000
        self.lock = threading.Lock()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> list[dict[str, Any]]:
        return self.tables.get(name, [])


class FakeObjectStore:
    def __init__(self) -> None:
        self.uploads: list[tuple[str, bytes, str]] = []
        self.fail = False

    def request_upload_destination(self, file_name: str) -> UploadDestination:
        if self.fail:
            raise RuntimeError("storage unavailable")
        return UploadDestination(url=f"https://storage.test/upload/{file_name}", storage_id=f"intake/{file_name}")

    async def upload(self, destination: UploadDestination, raw_bytes: bytes, content_type: str) -> str:
        self.uploads.append((destination.storage_id, raw_bytes, content_type))
        return destination.storage_id


class FakeMatchingClient:
    def __init__(self) -> None:
        self.requests: list[ProcessingRequest] = []
        self.error: Exception | None = None
        self.delay = 0.0

    async def process(self, request: ProcessingRequest) -> ProcessingResult:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return ProcessingResult(application_id=f"app-{len(self.requests)}", status="new")


def make_config(secret: str | None = SECRET, max_raw_payload_chars: int = 10000) -> Config:
    return Config(
        supabase=SupabaseConfig(url="http://supabase.test", service_role_key="service-key"),
        webhook=WebhookConfig(secret=secret, signature_header="X-Signature", max_raw_payload_chars=max_raw_payload_chars),
        matching=MatchingConfig(url="http://matching.test/process", timeout_seconds=5),
        storage=StorageConfig(upload_timeout_seconds=5),
        api_key=ApiKeyConfig(key_hash=hash_api_key(OPS_KEY)),
    )


def sign(body: bytes, secret: str = SECRET) -> str:
    return "sha1=" + hmac.new(secret.encode(), body, hashlib.sha1).hexdigest()


def make_pdf(text: str) -> bytes:
    """Single-page PDF with one line of Helvetica text."""
    content = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(out)


def make_payload(delivery_id: str | None = "apply-0001", **applicant: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "locale": "en_US",
        "job": {
            "jobId": "ext-job-42",
            "jobTitle": "Tire Technician",
            "jobCompanyName": "Acme Tire",
            "jobLocation": "Latrobe, PA",
        },
        "applicant": {
            "fullName": "Jane Doe",
            "email": "jane@x.com",
            "phoneNumber": "555-0100",
            **applicant,
        },
        "questions": [{"question": "Do you have a CDL?", "answer": "Yes"}],
    }
    if delivery_id is not None:
        body["id"] = delivery_id
    return body


def encode_pdf(text: str) -> str:
    return base64.b64encode(make_pdf(text)).decode()


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def matching() -> FakeMatchingClient:
    return FakeMatchingClient()


@pytest.fixture
def container(supabase: FakeSupabase, object_store: FakeObjectStore, matching: FakeMatchingClient) -> ServiceContainer:
    return ServiceContainer.from_config(
        make_config(), supabase=supabase, object_store=object_store, matching_client=matching
    )


@pytest.fixture
def client(container: ServiceContainer):
    with TestClient(create_app(container=container)) as test_client:
        yield test_client


def post_signed(client: TestClient, payload: dict[str, Any] | bytes, secret: str = SECRET):
    body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
    return client.post(
        "/webhook-intake",
        content=body,
        headers={"Content-Type": "application/json", "X-Signature": sign(body, secret)},
    )
