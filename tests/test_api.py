"""
Tests for the HTTP API
"""

import inspect
import io

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from main import app
from seatsmart.api import routes_admin
from seatsmart.api.routes_admin import get_name_service
from seatsmart.core.config import settings
from seatsmart.core.db import Base, get_db
from seatsmart.core.exceptions import NameGenerationError, PlanStorageError
from seatsmart.services import plan_service
from seatsmart.utils.security import rate_limiter

# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///./test_api.db"
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_HEADERS = {"Authorization": f"Bearer {settings.ADMIN_TOKEN}"}

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

class FakeNameService:
    def __init__(self, names=None, error=None):
        self.names = names or []
        self.error = error

    def generate(self, theme, count):
        if self.error:
            raise self.error
        return self.names[:count]

@pytest.fixture
def client():
    """Test client backed by a scratch database"""
    Base.metadata.create_all(bind=engine)
    app.dependency_overrides[get_db] = override_get_db
    rate_limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        rate_limiter.reset()
        Base.metadata.drop_all(bind=engine)

@pytest.fixture
def plan(client):
    """Create a plan with two tables of two seats and five guests"""
    response = client.post(
        "/admin/plans",
        json={"plan_id": "gala", "table_count": 2, "capacity": 2},
        headers=ADMIN_HEADERS
    )
    assert response.status_code == 201
    response = client.post(
        "/admin/plans/gala/guests/import",
        json={"raw_text": "Eve\nDan, Cat\nBen\nAmy"},
        headers=ADMIN_HEADERS
    )
    assert response.status_code == 200
    return response.json()["data"]

def test_health(client):
    """Test health check endpoint"""
    assert client.get("/health").json() == {"status": "ok"}

def test_admin_requires_token(client):
    """Test admin routes reject missing or wrong tokens"""
    assert client.post("/admin/plans", json={}).status_code in (401, 403)
    response = client.post("/admin/plans", json={}, headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401

def test_create_plan(client):
    """Test plan creation returns tables and a share URL"""
    response = client.post("/admin/plans", json={"table_count": 3, "capacity": 4}, headers=ADMIN_HEADERS)

    assert response.status_code == 201
    data = response.json()["data"]
    assert len(data["tables"]) == 3
    assert data["summary"]["total_capacity"] == 12
    assert data["share_url"].endswith(f"/guest/portal?plan={data['plan_id']}")

def test_create_plan_out_of_range(client):
    """Test table configuration bounds are enforced"""
    response = client.post("/admin/plans", json={"table_count": 0}, headers=ADMIN_HEADERS)
    assert response.status_code == 422

    response = client.post("/admin/plans", json={"capacity": 13}, headers=ADMIN_HEADERS)
    assert response.status_code == 422

def test_create_duplicate_plan(client, plan):
    """Test plan ids cannot be reused"""
    response = client.post("/admin/plans", json={"plan_id": "gala"}, headers=ADMIN_HEADERS)

    assert response.status_code == 409
    assert response.json()["error_code"] == "plan_exists"

def test_unknown_plan(client):
    """Test missing plans return 404"""
    response = client.get("/admin/plans/nope", headers=ADMIN_HEADERS)

    assert response.status_code == 404
    assert response.json()["error_code"] == "plan_not_found"

def test_import_guests(plan):
    """Test imported guests are sorted and unassigned"""
    assert [g["display_name"] for g in plan["guests"]] == ["Amy", "Ben", "Cat", "Dan", "Eve"]
    assert plan["summary"]["unassigned_guests"] == 5

def test_add_guests_messages(client, plan):
    """Test duplicate reporting when appending guests"""
    response = client.post("/admin/plans/gala/guests", json={"raw_text": "amy\nFay"}, headers=ADMIN_HEADERS)
    assert response.json()["message"] == "Added 1 guests (skipped 1 duplicate guests)"

    response = client.post("/admin/plans/gala/guests", json={"raw_text": "AMY"}, headers=ADMIN_HEADERS)
    assert response.json()["message"] == "All entered guest names already exist; no new guests were added."

    response = client.post("/admin/plans/gala/guests", json={"raw_text": "  "}, headers=ADMIN_HEADERS)
    assert response.status_code == 400

def test_auto_assign_reports_overflow(client, plan):
    """Test overflow guests are reported"""
    response = client.post("/admin/plans/gala/auto-assign", headers=ADMIN_HEADERS)

    body = response.json()
    assert response.status_code == 200
    assert body["message"] == "1 guests could not be seated. Add tables or seats."
    assert [g["display_name"] for g in body["data"]["unassigned"]] == ["Eve"]

def test_assign_guests(client, plan):
    """Test manual assignment, overflow and unknown table statuses"""
    ids = [g["id"] for g in plan["guests"]]
    table_id = plan["tables"][0]["id"]

    response = client.post(
        "/admin/plans/gala/assign",
        json={"guest_ids": ids[:3], "table_id": table_id},
        headers=ADMIN_HEADERS
    )
    data = response.json()["data"]
    assert data["status"] == "capacity_exceeded"
    assert data["seated_guest_ids"] == ids[:2]
    assert data["unseated_guest_ids"] == ids[2:3]

    response = client.post(
        "/admin/plans/gala/assign",
        json={"guest_ids": ids[:1], "table_id": "missing"},
        headers=ADMIN_HEADERS
    )
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "table_not_found"

    response = client.post(
        "/admin/plans/gala/assign",
        json={"guest_ids": [], "table_id": table_id},
        headers=ADMIN_HEADERS
    )
    assert response.status_code == 400

def test_configure_tables(client, plan):
    """Test regenerating tables"""
    response = client.put("/admin/plans/gala/tables", json={"count": 4, "capacity": 3}, headers=ADMIN_HEADERS)

    data = response.json()["data"]
    assert [t["name"] for t in data["tables"]] == ["Table 1", "Table 2", "Table 3", "Table 4"]
    assert data["summary"]["total_capacity"] == 12

def test_rename_table(client, plan):
    """Test renaming an existing and a missing table"""
    table_id = plan["tables"][0]["id"]

    response = client.patch(f"/admin/plans/gala/tables/{table_id}", json={"name": " Head "}, headers=ADMIN_HEADERS)
    assert response.json()["data"]["name"] == "Head"

    response = client.patch("/admin/plans/gala/tables/missing", json={"name": "X"}, headers=ADMIN_HEADERS)
    assert response.status_code == 404

def test_save_plan_rejects_broken_snapshot(client, plan):
    """Test inconsistent snapshots are refused with details"""
    tables = plan["tables"]
    tables[0]["guests"] = ["ghost"]

    response = client.put(
        "/admin/plans/gala",
        json={"tables": tables, "guests": plan["guests"]},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "invalid_snapshot"
    assert any("ghost" in error for error in body["details"])

def test_generate_table_names(client, plan):
    """Test themed names are applied"""
    app.dependency_overrides[get_name_service] = lambda: FakeNameService(names=["Rose", "Lily", "Iris"])

    response = client.post("/admin/plans/gala/table-names", json={"theme": "Flowers"}, headers=ADMIN_HEADERS)

    assert response.status_code == 200
    assert [t["name"] for t in response.json()["data"]["tables"]] == ["Rose", "Lily"]

def test_generate_table_names_failure(client, plan):
    """Test generation failures map to a gateway error"""
    error = NameGenerationError("Failed to generate names. Please try again.")
    app.dependency_overrides[get_name_service] = lambda: FakeNameService(error=error)

    response = client.post("/admin/plans/gala/table-names", json={"theme": "Flowers"}, headers=ADMIN_HEADERS)

    assert response.status_code == 502
    assert response.json()["error_code"] == "name_generation_failed"

def test_upload_guests(client, plan):
    """Test appending guests from an Excel file"""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        pd.DataFrame({'Name': ['Fay', 'Amy']}).to_excel(writer, index=False)

    response = client.post(
        "/admin/plans/gala/guests/upload",
        files={"file": ("guests.xlsx", buffer.getvalue(), "application/octet-stream")},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert [g["display_name"] for g in data["added"]] == ["Fay"]
    assert data["skipped_duplicates"] == ["Amy"]

def test_upload_rejects_non_excel(client, plan):
    """Test non-Excel uploads are refused"""
    response = client.post(
        "/admin/plans/gala/guests/upload",
        files={"file": ("guests.csv", b"Name\nAnn", "text/csv")},
        headers=ADMIN_HEADERS
    )

    assert response.status_code == 400

def test_export_plan(client, plan):
    """Test the seating chart download"""
    client.post("/admin/plans/gala/auto-assign", headers=ADMIN_HEADERS)

    response = client.get("/admin/plans/gala/export.xlsx", headers=ADMIN_HEADERS)

    assert response.status_code == 200
    df = pd.read_excel(io.BytesIO(response.content))
    assert df['Name'].tolist() == ["Amy", "Ben", "Cat", "Dan", "Eve"]
    assert df['Table'].tolist()[-1] == "Unassigned"

def test_guest_lookup(client, plan):
    """Test guests find their table and seat"""
    client.post("/admin/plans/gala/auto-assign", headers=ADMIN_HEADERS)

    response = client.post("/guest/lookup", json={"plan_id": "gala", "name": "cat"})

    assert response.status_code == 200
    matches = response.json()["data"]["matches"]
    assert len(matches) == 1
    assert matches[0]["table_name"] == "Table 2"
    assert matches[0]["seat_number"] == 1

def test_guest_lookup_no_match(client, plan):
    """Test unseated or unknown guests are not found"""
    client.post("/admin/plans/gala/auto-assign", headers=ADMIN_HEADERS)

    response = client.post("/guest/lookup", json={"plan_id": "gala", "name": "eve"})
    assert response.status_code == 404
    assert response.json()["message"] == "No matches found. Try searching just your first or last name."

    response = client.post("/guest/lookup", json={"plan_id": "gala", "name": "  "})
    assert response.status_code == 400

def test_guest_lookup_rate_limited(client, plan, monkeypatch):
    """Test lookups are throttled per client"""
    monkeypatch.setattr(settings, "RATE_LIMIT_PER_MINUTE", 2)

    statuses = [
        client.post("/guest/lookup", json={"plan_id": "gala", "name": "amy"}).status_code
        for _ in range(3)
    ]

    assert statuses[-1] == 429

def test_public_seating_summary(client, plan):
    """Test the public summary carries no guest names"""
    response = client.get("/plans/gala/seating")

    data = response.json()["data"]
    assert data["total_guests"] == 5
    assert all("guests" not in table for table in data["tables"])

def test_qr_code(client, plan):
    """Test QR code for existing and missing plans"""
    response = client.get("/plans/gala/qr.png")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")

    assert client.get("/plans/missing/qr.png").status_code == 404

def test_guest_portal(client):
    """Test the QR landing endpoint"""
    assert client.get("/guest/portal").status_code == 400
    assert client.get("/guest/portal?plan=gala").json()["data"]["plan_id"] == "gala"

def test_qr_code_missing_plan_envelope(client):
    """Test the QR endpoint reports missing plans with the error envelope"""
    response = client.get("/plans/missing/qr.png")

    assert response.status_code == 404
    assert response.json()["error_code"] == "plan_not_found"

def test_storage_failure_envelope(client, monkeypatch):
    """Test storage failures are reported, not raised, by the routes"""
    def failing_load(db, plan_id):
        raise PlanStorageError(f"Failed to load seating plan '{plan_id}'")

    monkeypatch.setattr(plan_service, "load_plan", failing_load)

    for response in (
        client.get("/plans/gala/qr.png"),
        client.get("/plans/gala/seating"),
        client.get("/admin/plans/gala", headers=ADMIN_HEADERS),
    ):
        assert response.status_code == 500
        assert response.json()["error_code"] == "storage_error"

def test_table_names_route_runs_in_threadpool():
    """Test the route making the blocking Gemini call is not a coroutine"""
    assert not inspect.iscoroutinefunction(routes_admin.generate_table_names)
