import os
import tempfile

# Must be set before config/database are imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ADMIN_EMAIL"] = "root@example.com"
os.environ["SEED_ADMIN_UID"] = "seed-admin"
os.environ["SEED_ADMIN_PASSWORD"] = "root-secret"
os.environ["AVATAR_DIR"] = tempfile.mkdtemp(prefix="nafaa-avatars-")

import httpx
import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine
from main import app, seed_defaults
from models.catalog import CatalogDrug
from portal.api import ApiClient
from portal.notify import Notifier
from portal.session import SessionStore

SEED_ADMIN = {"email": "root@example.com", "password": "root-secret"}
PASSWORD = "secret123"

CATALOG = [
    {"barcode": "6221000000001", "english_name": "Panadol Advance", "arabic_name": "بانادول ادفانس",
     "brand": "GSK", "manufacturer": "GlaxoSmithKline", "price": 45.0},
    {"barcode": "6221000000018", "english_name": "Panadol Extra", "arabic_name": "بانادول اكسترا",
     "brand": "GSK", "manufacturer": "GlaxoSmithKline", "price": 52.0},
    {"barcode": "6221000000025", "english_name": "Concor 5mg", "arabic_name": "كونكور",
     "brand": "Merck", "manufacturer": "Merck KGaA", "price": 78.5},
]


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    seed_defaults()
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def catalog(db):
    drugs = [CatalogDrug(**row) for row in CATALOG]
    db.add_all(drugs)
    db.commit()
    return [{"id": d.id, **row} for d, row in zip(drugs, CATALOG)]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_pharmacy(client):
    """Registers, saves the profile and logs in. Returns id, token, headers and the login body."""
    counter = {"n": 0}

    def _make(name="Test Pharmacy", city="Cairo", email=None, phone="010 1234 5678"):
        counter["n"] += 1
        email = email or f"pharmacy{counter['n']}@example.com"
        r = client.post("/webhook/register", json={"payload": {"email": email, "password": PASSWORD}})
        assert r.status_code == 201, r.text
        pharmacy_id = r.json()["pharmacy_id"]

        r = client.post("/webhook/save-profile", json={"payload": {
            "pharmacy_id": pharmacy_id, "email": email, "name": name, "city": city, "phone": phone,
        }})
        assert r.status_code == 200, r.text

        r = client.post("/auth/login", json={"email": email, "password": PASSWORD})
        assert r.status_code == 200, r.text
        login = r.json()
        return {
            "id": pharmacy_id,
            "email": email,
            "token": login["access_token"],
            "headers": auth_headers(login["access_token"]),
            "login": login,
        }

    return _make


@pytest.fixture
def admin_headers(client):
    r = client.post("/auth/login", json=SEED_ADMIN)
    assert r.status_code == 200, r.text
    return auth_headers(r.json()["access_token"])


@pytest.fixture
def add_offer(client):
    def _add(owner, drug, quantity=10, price=40.0, discount=20, expiry="2027-03"):
        r = client.post("/webhook/add-offer", headers=owner["headers"], json={"payload": {
            "pharmacy_id": owner["id"],
            "drug_id": drug["id"],
            "english_name": drug["english_name"],
            "arabic_name": drug["arabic_name"],
            "manufacturer": drug.get("manufacturer"),
            "barcode": drug["barcode"],
            "expiry_date": expiry,
            "quantity": quantity,
            "price": price,
            "discount": discount,
        }})
        assert r.status_code == 201, r.text
        return r.json()

    return _add


@pytest.fixture
def add_request(client):
    def _add(owner, drug, quantity=5):
        r = client.post("/webhook/add-request", headers=owner["headers"], json={"payload": {
            "pharmacy_id": owner["id"],
            "drug_id": drug["id"],
            "english_name": drug["english_name"],
            "arabic_name": drug["arabic_name"],
            "barcode": drug["barcode"],
            "quantity": quantity,
        }})
        assert r.status_code == 201, r.text
        return r.json()

    return _add


# --- Portal helpers ---

class CountingTransport(httpx.AsyncBaseTransport):
    """Forwards to the app in-process and remembers every request path."""

    def __init__(self):
        self._inner = httpx.ASGITransport(app=app)
        self.calls = []

    async def handle_async_request(self, request):
        self.calls.append((request.method, request.url.path))
        return await self._inner.handle_async_request(request)

    async def aclose(self):
        await self._inner.aclose()


@pytest.fixture
def portal(tmp_path):
    """Builds (api, session, notifier, transport) for a pharmacy logged in through /auth/login."""

    def _build(member=None, name="session.json"):
        session = SessionStore(tmp_path / name)
        if member is not None:
            session.begin(member["login"], member["email"])
        transport = CountingTransport()
        api = ApiClient("http://testserver", session, transport=transport)
        return api, session, Notifier(), transport

    return _build
