import pytest
from types import SimpleNamespace
from fastapi.testclient import TestClient

from equipment_tracker.main import app
from equipment_tracker.database.supabase_client import get_auth_client, get_supabase, get_service_supabase
from equipment_tracker.config.capabilities_config import default_permission_values
from equipment_tracker.core.capabilities import RequestContext
from fake_supabase import FakeSupabase


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def seed_studio(db, name="Northlight Studio", owner_email="owner@northlight.test", employee_email="crew@northlight.test"):
    """Studio with one owner and one employee holding the default permissions row."""
    owner = db.auth.create_user(owner_email, full_name="Olive Owner")
    employee = db.auth.create_user(employee_email, full_name="Eli Crew")
    studio = db.table("studios").insert({"name": name, "owner_id": owner.id}).execute().data[0]
    owner_profile = db.table("profiles").insert({
        "id": owner.id, "email": owner.email, "full_name": "Olive Owner",
        "role": "owner", "studio_id": studio["id"]
    }).execute().data[0]
    employee_profile = db.table("profiles").insert({
        "id": employee.id, "email": employee.email, "full_name": "Eli Crew",
        "role": "employee", "studio_id": studio["id"]
    }).execute().data[0]
    permissions = db.table("employee_permissions").insert({
        "employee_id": employee.id, "studio_id": studio["id"], **default_permission_values()
    }).execute().data[0]
    return SimpleNamespace(
        id=studio["id"],
        owner_id=owner.id,
        employee_id=employee.id,
        owner_token=db.auth.token_for(owner),
        employee_token=db.auth.token_for(employee),
        owner_ctx=RequestContext.from_rows(owner_profile),
        employee_ctx=RequestContext.from_rows(employee_profile, permissions),
    )


def add_equipment(db, studio_id, name="Sony FX3", quantity=1, status=None, **extra):
    if status is None:
        status = "available" if quantity > 0 else "issued"
    row = {
        "studio_id": studio_id,
        "name": name,
        "quantity": quantity,
        "status": status,
        "condition": "good",
        **extra
    }
    return db.table("equipment").insert(row).execute().data[0]


def quantity_of(db, equipment_id):
    return next(row for row in db.tables["equipment"] if row["id"] == equipment_id)["quantity"]


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def studio(db):
    return seed_studio(db)


@pytest.fixture
def client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_auth_client] = lambda: db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
