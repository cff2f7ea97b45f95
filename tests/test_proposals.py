from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from dealership import models
from dealership.exceptions import ConflictError, OperationFailedError
from dealership.repositories import proposals, sales


def _new_proposal(db, world, price="15000.00", notes="Includes winter tyres"):
    return proposals.insert_proposal(
        db, world.alice_id, world.fiesta_id, world.seller_id, world.north_id, Decimal(price), notes
    )


# ============================================================
# REPOSITORY
# ============================================================

def test_insert_proposal_is_active(db, world):
    proposal_id = _new_proposal(db, world, notes="   ")
    detail = proposals.find_proposal_detail_by_id(db, proposal_id)

    assert detail.status == "ACTIVE"
    assert detail.accepted is False
    assert detail.notes is None
    assert detail.customer_name == "Alice Zamora"
    assert detail.vehicle_text == "Ford Fiesta Red 2017"
    assert detail.price == Decimal("15000.00")


def test_proposal_list_formatting(db, world):
    first = _new_proposal(db, world, price="9999.50")
    second = proposals.insert_proposal(
        db, world.bob_id, world.golf_id, world.seller_id, world.north_id, Decimal("21000"), None
    )

    rows = proposals.find_all_proposals_for_sales(db)

    assert [r.id for r in rows] == [second, first]
    assert rows[0].code == f"{second:05d}"
    assert rows[0].price_text == "21000"
    assert rows[0].customer_name == "Bob Alonso"
    assert rows[1].price_text == "9999.5"
    assert rows[1].vehicle_text == "Ford Fiesta Red 2017"


def test_scenario_accept_then_not_deletable(db, world):
    proposal_id = _new_proposal(db, world)

    sale_id = proposals.accept_proposal(db, proposal_id, date(2026, 5, 4))

    assert sale_id is not None
    assert proposals.is_proposal_already_sold(db, proposal_id) is True
    assert proposals.find_proposal_detail_by_id(db, proposal_id).accepted is True

    sale = sales.find_sale_detail_by_id(db, sale_id)
    assert sale.price == Decimal("15000.00")
    assert sale.sale_date == date(2026, 5, 4)
    assert sale.notes == "Includes winter tyres"
    assert sale.customer_name == "Alice Zamora"

    assert proposals.delete_proposal_by_id(db, proposal_id) is False
    assert proposals.find_proposal_detail_by_id(db, proposal_id) is not None


def test_second_accept_conflicts_and_changes_nothing(db, world):
    proposal_id = _new_proposal(db, world)
    proposals.accept_proposal(db, proposal_id, date(2026, 5, 4))

    with pytest.raises(ConflictError):
        proposals.accept_proposal(db, proposal_id, date(2026, 6, 1))

    assert db.query(models.Sale).count() == 1
    assert db.query(models.Sale).one().sale_date == date(2026, 5, 4)


def test_accept_unknown_proposal(db, world):
    assert proposals.accept_proposal(db, 4242, date.today()) is None
    assert db.query(models.Sale).count() == 0


def test_accept_rolls_back_sale_when_status_change_fails(db, world, monkeypatch):
    proposal_id = _new_proposal(db, world)

    def broken_status(*args, **kwargs):
        raise OperationalError("UPDATE sale_proposal", {}, Exception("database is locked"))

    monkeypatch.setattr(proposals, "set_proposal_status", broken_status)

    with pytest.raises(OperationFailedError):
        proposals.accept_proposal(db, proposal_id, date.today())

    assert db.query(models.Sale).count() == 0
    assert proposals.find_proposal_detail_by_id(db, proposal_id).status == "ACTIVE"


def test_update_proposal_until_accepted(db, world):
    proposal_id = _new_proposal(db, world)

    assert proposals.update_proposal(db, proposal_id, Decimal("14500"), "Discounted") is True
    detail = proposals.find_proposal_detail_by_id(db, proposal_id)
    assert detail.price == Decimal("14500.00")
    assert detail.notes == "Discounted"
    assert detail.status == "ACTIVE"

    proposals.accept_proposal(db, proposal_id, date.today())
    assert proposals.update_proposal(db, proposal_id, Decimal("1"), "too late") is False
    db.expire_all()
    assert proposals.find_proposal_detail_by_id(db, proposal_id).price == Decimal("14500.00")


def test_blank_status_keeps_current_one(db, world):
    proposal_id = _new_proposal(db, world)

    assert proposals.update_proposal(db, proposal_id, Decimal("120"), None, "   ") is True
    db.expire_all()
    assert proposals.find_proposal_detail_by_id(db, proposal_id).status == "ACTIVE"


def test_delete_unsold_proposal(db, world):
    proposal_id = _new_proposal(db, world)
    assert proposals.delete_proposal_by_id(db, proposal_id) is True
    assert proposals.find_proposal_detail_by_id(db, proposal_id) is None
    assert proposals.delete_proposal_by_id(db, proposal_id) is False


def test_set_proposal_status(db, world):
    proposal_id = _new_proposal(db, world)
    assert proposals.set_proposal_status(db, proposal_id, " inactive ") is True
    db.expire_all()
    assert proposals.find_proposal_detail_by_id(db, proposal_id).status == "INACTIVE"
    assert proposals.set_proposal_status(db, 4242, "ACTIVE") is False


def test_sales_list_newest_first(db, world):
    older = proposals.accept_proposal(db, _new_proposal(db, world), date(2026, 1, 10))
    newer = proposals.accept_proposal(db, _new_proposal(db, world, price="18000"), date(2026, 3, 2))

    rows = sales.find_all_sales_for_sales(db)
    assert [r.id for r in rows] == [newer, older]
    assert rows[0].price_text == "18000"
    assert rows[0].code == f"{newer:05d}"


# ============================================================
# API
# ============================================================

def test_proposal_api_flow(client, world, login_as):
    headers = login_as("seller")

    response = client.post("/api/v1/sales/proposals/", headers=headers, json={
        "customer_id": world.alice_id, "vehicle_id": world.fiesta_id, "price": "15000,50", "notes": "Cash"
    })
    assert response.status_code == 201, response.text
    created = response.json()
    assert created["status"] == "ACTIVE"
    assert created["code"] == f"{created['id']:05d}"

    proposal_id = created["id"]
    detail = client.get(f"/api/v1/sales/proposals/{proposal_id}", headers=headers).json()
    assert Decimal(detail["price"]) == Decimal("15000.50")

    response = client.post(f"/api/v1/sales/proposals/{proposal_id}/accept", headers=headers, json={"sale_date": "2026-05-04"})
    assert response.status_code == 201, response.text
    sale = response.json()
    assert sale["sale_date"] == "2026-05-04"

    response = client.post(f"/api/v1/sales/proposals/{proposal_id}/accept", headers=headers)
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"

    response = client.delete(f"/api/v1/sales/proposals/{proposal_id}", headers=headers)
    assert response.status_code == 409
    assert response.json()["error"] == "guard_violated"

    sales_list = client.get("/api/v1/sales/sales/", headers=headers).json()
    assert [s["id"] for s in sales_list] == [sale["id"]]
    assert client.get(f"/api/v1/sales/sales/{sale['id']}", headers=headers).status_code == 200


def test_proposal_api_validation(client, world, login_as):
    headers = login_as("seller")

    response = client.post("/api/v1/sales/proposals/", headers=headers, json={
        "customer_id": world.alice_id, "vehicle_id": world.fiesta_id, "price": 0
    })
    assert response.status_code == 422

    response = client.post("/api/v1/sales/proposals/", headers=headers, json={
        "customer_id": 9999, "vehicle_id": world.fiesta_id, "price": 100
    })
    assert response.status_code == 409


def test_proposal_update_cannot_accept_directly(client, world, login_as):
    headers = login_as("seller")
    proposal_id = client.post("/api/v1/sales/proposals/", headers=headers, json={
        "customer_id": world.alice_id, "vehicle_id": world.fiesta_id, "price": 100
    }).json()["id"]

    response = client.put(f"/api/v1/sales/proposals/{proposal_id}", headers=headers, json={"price": 120, "status": "accepted"})
    assert response.status_code == 422
    assert response.json()["error"] == "validation"

    response = client.put(f"/api/v1/sales/proposals/{proposal_id}", headers=headers, json={"price": 120})
    assert response.status_code == 200
    assert Decimal(response.json()["price"]) == Decimal("120")

    response = client.put(f"/api/v1/sales/proposals/{proposal_id}", headers=headers, json={"price": 130, "status": "  "})
    assert response.status_code == 200
    assert response.json()["status"] == "ACTIVE"


def test_accept_unknown_proposal_api(client, world, login_as):
    response = client.post("/api/v1/sales/proposals/4242/accept", headers=login_as("seller"))
    assert response.status_code == 404
    assert response.json()["error"] == "not_found_or_forbidden"


def test_sales_routes_require_sales_role(client, world, login_as):
    response = client.get("/api/v1/sales/proposals/", headers=login_as("mech_1"))
    assert response.status_code == 403
