"""
Shared fixtures: in-memory SQLite database, FastAPI test client and a small
seeded world (two dealerships, bosses, mechanics, a seller, customers, vehicles).
"""

import os

# Settings are read once at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["LOG_JSON"] = "false"

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dealership import models
from dealership.database import Base, get_db, enable_sqlite_foreign_keys
from dealership.main import app
from dealership.security import hash_password

PASSWORD = "secret123"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _user(db, username, full_name, dealership, role, is_active=True, skills=None):
    user = models.User(
        username=username,
        password_hash=hash_password(PASSWORD),
        full_name=full_name,
        dealership_id=dealership.id,
        role_id=role.id,
        is_active=is_active,
        skills=skills,
    )
    db.add(user)
    return user


@pytest.fixture
def world(db):
    """Ids of everything the tests need, committed before the test body runs."""
    north = models.Dealership(name="North")
    south = models.Dealership(name="South")
    roles = {name: models.Role(name=name) for name in ["MECHANIC", "CHIEF_MECHANIC", "MECHANIC_BOSS", "SALES", "OWNER"]}
    db.add_all([north, south, *roles.values()])
    db.flush()

    boss_a = _user(db, "boss_a", "Ana Boss", north, roles["CHIEF_MECHANIC"])
    boss_b = _user(db, "boss_b", "Bruno Boss", south, roles["MECHANIC_BOSS"])
    mech_1 = _user(db, "mech_1", "Carla Wrench", north, roles["MECHANIC"], skills="Brakes")
    mech_2 = _user(db, "mech_2", "Diego Spanner", north, roles["MECHANIC"])
    mech_south = _user(db, "mech_south", "Elena South", south, roles["MECHANIC"])
    mech_off = _user(db, "mech_off", "Fede Retired", north, roles["MECHANIC"], is_active=False)
    seller = _user(db, "seller", "Gina Sales", north, roles["SALES"])
    owner = _user(db, "owner", "Hugo Owner", north, roles["OWNER"])

    category = models.VehicleCategory(name="Sedan")
    db.add(category)
    db.flush()

    fiesta = models.Vehicle(
        plate="1234ABC", brand="Ford", model="Fiesta", year=2017, color="Red",
        mileage=42000, fuel="Petrol", transmission="Manual", doors=5,
        entry_date=date(2024, 3, 1), category_id=category.id,
    )
    golf = models.Vehicle(
        plate="5678DEF", brand="Volkswagen", model="Golf", year=2020, color="Blue",
        entry_date=date(2025, 1, 15),
    )
    alice = models.Customer(dni="12345678A", first_name="Alice", last_name="Zamora",
                            phone="600111222", email="alice@example.com")
    bob = models.Customer(dni="87654321B", first_name="Bob", last_name="Alonso",
                          phone="600333444", email="bob@example.com")
    db.add_all([fiesta, golf, alice, bob])
    db.commit()

    return SimpleNamespace(
        north_id=north.id,
        south_id=south.id,
        boss_a_id=boss_a.id,
        boss_b_id=boss_b.id,
        mech_1_id=mech_1.id,
        mech_2_id=mech_2.id,
        mech_south_id=mech_south.id,
        mech_off_id=mech_off.id,
        seller_id=seller.id,
        owner_id=owner.id,
        fiesta_id=fiesta.id,
        golf_id=golf.id,
        alice_id=alice.id,
        bob_id=bob.id,
    )


@pytest.fixture
def login_as(client):
    """Returns Authorization headers for a seeded username."""
    def _login(username, password=PASSWORD):
        response = client.post("/api/v1/auth/login", data={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}
    return _login


@pytest.fixture
def repair_for(db, world):
    """Creates a repair order directly in the database with the given status."""
    def _create(status="ASSIGNED", boss_id=None, mechanic_id=None, vehicle_id=None, notes="Check brakes"):
        repair = models.RepairOrder(
            vehicle_id=vehicle_id or world.fiesta_id,
            customer_id=world.alice_id,
            created_by_boss_id=boss_id or world.boss_a_id,
            assigned_mechanic_id=mechanic_id,
            status=status,
            notes=notes,
        )
        db.add(repair)
        db.commit()
        return repair.id
    return _create
