def _create_repair(client, world, headers, notes="Noise when braking"):
    response = client.post("/api/v1/boss/repairs", headers=headers, json={
        "vehicle_id": world.fiesta_id,
        "customer_id": world.alice_id,
        "mechanic_id": world.mech_1_id,
        "notes": notes,
    })
    assert response.status_code == 201, response.text
    return response.json()["repair_id"]


# ============================================================
# SCENARIOS
# ============================================================

def test_create_start_finish(client, world, login_as):
    boss = login_as("boss_a")
    mechanic = login_as("mech_1")

    repair_id = _create_repair(client, world, boss)

    tasks = client.get("/api/v1/mechanic/tasks", headers=mechanic).json()
    assert tasks == [{"repair_id": repair_id, "vehicle": "Ford Fiesta", "status": "ASSIGNED"}]

    details = client.get(f"/api/v1/mechanic/repairs/{repair_id}", headers=mechanic).json()
    assert details["can_start"] is True and details["can_finish"] is False

    response = client.post(f"/api/v1/mechanic/repairs/{repair_id}/start", headers=mechanic)
    assert response.status_code == 200
    assert response.json()["status"] == "IN_PROGRESS"

    response = client.post(f"/api/v1/mechanic/repairs/{repair_id}/start", headers=mechanic)
    assert response.status_code == 409
    assert response.json()["error"] == "guard_violated"

    response = client.post(f"/api/v1/mechanic/repairs/{repair_id}/finish", headers=mechanic)
    assert response.status_code == 200
    assert response.json()["status"] == "FINISHED"

    history = client.get("/api/v1/mechanic/history", headers=mechanic).json()
    assert [h["repair_id"] for h in history] == [repair_id]
    assert history[0]["status"] == "Completed"

    edit = client.get(f"/api/v1/boss/repairs/{repair_id}", headers=boss).json()
    assert edit["status"] == "FINISHED"
    assert edit["editable"] is False


def test_other_boss_cannot_touch_repair(client, world, login_as):
    repair_id = _create_repair(client, world, login_as("boss_a"))
    other = login_as("boss_b")

    response = client.put(f"/api/v1/boss/repairs/{repair_id}/assign", headers=other,
                          json={"mechanic_id": world.mech_south_id, "notes": "mine now"})
    assert response.status_code == 409
    assert response.json()["error"] == "guard_violated"

    response = client.put(f"/api/v1/boss/repairs/{repair_id}/unassign", headers=other, json={"notes": ""})
    assert response.status_code == 409

    response = client.get(f"/api/v1/boss/repairs/{repair_id}", headers=other)
    assert response.status_code == 404
    assert response.json() == {"error": "not_found_or_forbidden", "message": "Repair not found."}

    assert client.get("/api/v1/boss/repairs", headers=other).json() == []


def test_unknown_and_foreign_repairs_look_the_same(client, world, login_as):
    repair_id = _create_repair(client, world, login_as("boss_a"))
    other = login_as("boss_b")

    foreign = client.put(f"/api/v1/boss/repairs/{repair_id}/assign", headers=other, json={"mechanic_id": world.mech_south_id})
    missing = client.put("/api/v1/boss/repairs/4242/assign", headers=other, json={"mechanic_id": world.mech_south_id})
    assert foreign.status_code == missing.status_code
    assert foreign.json() == missing.json()


# ============================================================
# BOSS
# ============================================================

def test_boss_unassign_and_reassign(client, world, login_as):
    boss = login_as("boss_a")
    repair_id = _create_repair(client, world, boss)

    response = client.put(f"/api/v1/boss/repairs/{repair_id}/unassign", headers=boss, json={"notes": " waiting parts "})
    assert response.status_code == 200
    assert response.json()["status"] == "PENDING"

    edit = client.get(f"/api/v1/boss/repairs/{repair_id}", headers=boss).json()
    assert edit["mechanic_id"] is None
    assert edit["notes"] == "waiting parts"
    assert edit["editable"] is True

    response = client.put(f"/api/v1/boss/repairs/{repair_id}/assign", headers=boss,
                          json={"mechanic_id": world.mech_2_id, "notes": "parts arrived"})
    assert response.status_code == 200

    edit = client.get(f"/api/v1/boss/repairs/{repair_id}", headers=boss).json()
    assert edit["status"] == "ASSIGNED"
    assert edit["mechanic_name"] == "Diego Spanner"


def test_create_repair_requires_notes_and_ids(client, world, login_as):
    boss = login_as("boss_a")

    response = client.post("/api/v1/boss/repairs", headers=boss, json={
        "vehicle_id": world.fiesta_id, "customer_id": world.alice_id, "mechanic_id": world.mech_1_id, "notes": "   "
    })
    assert response.status_code == 422

    response = client.post("/api/v1/boss/repairs", headers=boss, json={
        "vehicle_id": world.fiesta_id, "customer_id": world.alice_id, "mechanic_id": 0, "notes": "x"
    })
    assert response.status_code == 422

    response = client.post("/api/v1/boss/repairs", headers=boss, json={
        "vehicle_id": 9999, "customer_id": world.alice_id, "mechanic_id": world.mech_1_id, "notes": "x"
    })
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


def test_assign_requires_positive_mechanic(client, world, login_as):
    boss = login_as("boss_a")
    repair_id = _create_repair(client, world, boss)
    response = client.put(f"/api/v1/boss/repairs/{repair_id}/assign", headers=boss, json={"mechanic_id": 0})
    assert response.status_code == 422


def test_boss_mechanics_and_skills(client, world, login_as):
    boss = login_as("boss_a")

    mechanics = client.get("/api/v1/boss/mechanics", headers=boss).json()
    assert world.mech_south_id not in [m["id"] for m in mechanics]

    active = client.get("/api/v1/boss/mechanics/active", headers=boss).json()
    assert world.mech_off_id not in [m["id"] for m in active]

    response = client.put(f"/api/v1/boss/mechanics/{world.mech_2_id}/skills", headers=boss, json={"skills": " Diagnostics "})
    assert response.status_code == 200
    assert response.json() == {"mechanic_id": world.mech_2_id, "skills": "Diagnostics"}

    skills = client.get(f"/api/v1/boss/mechanics/{world.mech_2_id}/skills", headers=boss).json()
    assert skills["skills"] == "Diagnostics"

    assert client.get(f"/api/v1/boss/mechanics/{world.mech_south_id}/skills", headers=boss).status_code == 404
    response = client.put(f"/api/v1/boss/mechanics/{world.mech_south_id}/skills", headers=boss, json={"skills": "x"})
    assert response.status_code == 409


def test_boss_lookups(client, world, login_as):
    boss = login_as("boss_a")
    vehicles = client.get("/api/v1/boss/lookups/vehicles", headers=boss).json()
    assert [v["name"] for v in vehicles] == ["Ford Fiesta", "Volkswagen Golf"]
    customers = client.get("/api/v1/boss/lookups/customers", headers=boss).json()
    assert customers[0]["name"] == "Alice Zamora (12345678A)"


# ============================================================
# MECHANIC
# ============================================================

def test_mechanic_reads_repair_customer(client, world, login_as):
    repair_id = _create_repair(client, world, login_as("boss_a"))
    mechanic = login_as("mech_1")

    customer = client.get(f"/api/v1/mechanic/repairs/{repair_id}/customer", headers=mechanic).json()
    assert customer["id"] == world.alice_id
    assert customer["email"] == "alice@example.com"

    assert client.get("/api/v1/mechanic/repairs/4242/customer", headers=mechanic).status_code == 404
    assert client.get("/api/v1/mechanic/repairs/4242", headers=mechanic).status_code == 404


def test_finish_before_start_is_refused(client, world, login_as):
    repair_id = _create_repair(client, world, login_as("boss_a"))
    response = client.post(f"/api/v1/mechanic/repairs/{repair_id}/finish", headers=login_as("mech_1"))
    assert response.status_code == 409


def test_role_gates(client, world, login_as):
    assert client.get("/api/v1/boss/repairs", headers=login_as("mech_1")).status_code == 403
    assert client.get("/api/v1/mechanic/tasks", headers=login_as("boss_a")).status_code == 403
    assert client.get("/api/v1/mechanic/tasks", headers=login_as("seller")).status_code == 403
    assert client.get("/api/v1/boss/repairs").status_code == 401
