import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError, OperationalError

from dealership.exceptions import (
    ConflictError,
    DealershipError,
    DomainValidationError,
    GuardViolatedError,
    NotFoundOrForbiddenError,
    OperationFailedError,
    dealership_exception_handler,
)
from dealership.repositories.base import translate_db_errors


@pytest.fixture
def error_client():
    app = FastAPI()
    app.add_exception_handler(DealershipError, dealership_exception_handler)

    errors = {
        "missing": NotFoundOrForbiddenError("Repair not found."),
        "guard": GuardViolatedError("Not editable."),
        "conflict": ConflictError("Duplicate."),
        "down": OperationFailedError("Could not load repairs."),
        "invalid": DomainValidationError("Bad input."),
    }

    @app.get("/raise/{name}")
    def raise_error(name: str):
        raise errors[name]

    return TestClient(app)


@pytest.mark.parametrize("name, status_code, kind", [
    ("missing", 404, "not_found_or_forbidden"),
    ("guard", 409, "guard_violated"),
    ("conflict", 409, "conflict"),
    ("down", 503, "operation_failed"),
    ("invalid", 422, "validation"),
])
def test_error_kinds_map_to_http(error_client, name, status_code, kind):
    response = error_client.get(f"/raise/{name}")
    assert response.status_code == status_code
    assert response.json()["error"] == kind


class FakeSession:
    def __init__(self):
        self.rolled_back = False

    def rollback(self):
        self.rolled_back = True


def test_integrity_error_becomes_conflict():
    session = FakeSession()
    with pytest.raises(ConflictError) as exc_info:
        with translate_db_errors(session, "create the customer", "Duplicate DNI."):
            raise IntegrityError("INSERT INTO customer", {}, Exception("UNIQUE constraint failed"))
    assert exc_info.value.message == "Duplicate DNI."
    assert session.rolled_back


def test_driver_failure_becomes_operation_failed():
    session = FakeSession()
    with pytest.raises(OperationFailedError) as exc_info:
        with translate_db_errors(session, "load repairs"):
            raise OperationalError("SELECT 1", {}, Exception("could not connect"))
    assert exc_info.value.message == "Could not load repairs."
    assert session.rolled_back


def test_domain_errors_pass_through_untouched():
    session = FakeSession()
    with pytest.raises(GuardViolatedError):
        with translate_db_errors(session, "assign"):
            raise GuardViolatedError("nope")
    assert not session.rolled_back
