from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect

from dealership import models
from dealership.database import Base
from dealership.main import app


def test_metadata_creates_on_fresh_database():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)

    inspector = inspect(engine)
    names = [ix["name"] for table in inspector.get_table_names() for ix in inspector.get_indexes(table)]
    assert len(names) == len(set(names))
    assert "ix_sale_proposal_id" in names
    assert "ix_vehicle_category_id" in names
    engine.dispose()


def test_app_starts_on_empty_database():
    with TestClient(app) as client:
        assert client.get("/health").status_code == 200


def test_timestamps_are_naive_utc_columns():
    for column in (models.RepairOrder.start_at, models.RepairOrder.end_at, models.UserToken.expires_at):
        assert column.type.timezone is False
