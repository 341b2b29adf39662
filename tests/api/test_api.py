from __future__ import annotations

import pytest

from guard_roster.database.memory_store import InMemoryRecordStore
from guard_roster.main import create_app

MARCH = {"month": 2, "year": 2025}


@pytest.fixture
def app():
    return create_app(settings_module="guard_roster.config.testing", store=InMemoryRecordStore())


def _login(app, username, password):
    client = app.test_client()
    resp = client.post("/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return client


@pytest.fixture
def admin(app):
    return _login(app, "admin", "admin123")


def _register(admin, name):
    resp = admin.post("/admin/guards", json={"name": name, "phone": "555-0100"})
    assert resp.status_code == 201
    body = resp.get_json()
    return body["guard"], body["credentials"]


def test_login_failures_and_role_checks(app, admin):
    client = app.test_client()

    assert client.post("/login", json={"username": "admin", "password": "wrong"}).status_code == 401
    assert client.post("/login", json={"username": "", "password": ""}).status_code == 400
    assert client.get("/admin/guards").status_code == 401

    _, creds = _register(admin, "Ana Pérez")
    guard = _login(app, creds["username"], creds["password"])
    assert guard.get("/admin/guards").status_code == 403
    assert admin.get("/availability").status_code == 403


def test_guard_management_endpoints(app, admin):
    guard, creds = _register(admin, "Ana Pérez")
    assert creds["username"] == "apérez"

    listed = admin.get("/admin/guards").get_json()["guards"]
    assert [g["id"] for g in listed] == [guard["id"]]
    assert "password" not in listed[0]

    resp = admin.post(f"/admin/guards/{guard['id']}/active", json={"active": False})
    assert resp.get_json()["guard"]["active"] is False
    assert app.test_client().post("/login", json=creds).status_code == 401

    assert admin.post(f"/admin/guards/{guard['id']}/delete").status_code == 200
    assert admin.post(f"/admin/guards/{guard['id']}/delete").status_code == 404


def test_full_scheduling_and_coverage_flow(app, admin):
    _, ana_creds = _register(admin, "Ana Pérez")
    _, luis_creds = _register(admin, "Luis Gómez")
    ana = _login(app, ana_creds["username"], ana_creds["password"])
    luis = _login(app, luis_creds["username"], luis_creds["password"])

    grid = ana.get("/availability", query_string=MARCH).get_json()
    assert len(grid["days"]) == 31
    assert grid["selection"] == {}

    grid = ana.post("/availability/toggle", json={**MARCH, "date_key": "2025-03-05", "shift": "shift1"}).get_json()
    assert grid["selection"] == {
        "2025-03-05": "shift1",
        "2025-03-12": "shift1",
        "2025-03-19": "shift1",
        "2025-03-26": "shift1",
    }

    resp = ana.post("/availability/submit", json=MARCH)
    assert resp.status_code == 201
    schedule = resp.get_json()["schedule"]
    assert schedule["status"] == "pending"

    pending = admin.get("/admin/schedules/pending").get_json()["schedules"]
    assert [s["id"] for s in pending] == [schedule["id"]]
    resp = admin.post(f"/admin/schedules/{schedule['id']}/approve")
    assert resp.get_json()["schedule"]["approved_by"] == "admin"

    resp = luis.post("/availability/toggle", json={**MARCH, "date_key": "2025-03-05", "shift": "shift1"})
    assert resp.status_code == 409

    resp = ana.post(
        "/absences",
        json={"schedule_id": schedule["id"], "date_key": "2025-03-05", "shift": "shift1", "reason": "illness"},
    )
    assert resp.status_code == 201
    absence = resp.get_json()["absence"]
    assert absence["coverage_status"] == "open"

    assert ana.get("/coverage").get_json()["absences"] == []
    open_for_luis = luis.get("/coverage").get_json()["absences"]
    assert [a["id"] for a in open_for_luis] == [absence["id"]]
    assert admin.get("/admin/dashboard").get_json()["open_coverages"] == 1

    resp = luis.post(f"/coverage/{absence['id']}/accept")
    assert resp.get_json()["absence"]["covered_by_name"] == "Luis Gómez"
    assert luis.post(f"/coverage/{absence['id']}/accept").status_code == 409

    mine = luis.get("/schedules/mine").get_json()["schedules"]
    assert mine[0]["shifts"] == {"2025-03-05": "shift1"}
    assert mine[0]["status"] == "approved"

    roster = admin.get("/admin/roster", query_string=MARCH).get_json()["days"]
    cell = roster[4]["shifts"][0]
    assert cell["guard_name"] == "Ana Pérez"
    assert cell["absent"] is True
    assert cell["coverage_status"] == "covered"
    assert cell["covered_by_name"] == "Luis Gómez"

    absences = admin.get("/admin/absences", query_string=MARCH).get_json()["absences"]
    assert len(absences) == 1


def test_submit_without_selection_and_bad_month(app, admin):
    _, creds = _register(admin, "Ana Pérez")
    ana = _login(app, creds["username"], creds["password"])

    ana.get("/availability", query_string=MARCH)
    resp = ana.post("/availability/submit", json=MARCH)
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False

    assert ana.get("/availability", query_string={"month": 12, "year": 2025}).status_code == 400


def test_approve_all_and_reject(app, admin):
    clients = []
    for name, day in [("Ana Pérez", "03"), ("Luis Gómez", "04"), ("Marta Ruiz", "05")]:
        _, creds = _register(admin, name)
        client = _login(app, creds["username"], creds["password"])
        client.post("/availability/toggle", json={**MARCH, "date_key": f"2025-03-{day}", "shift": "shift2"})
        assert client.post("/availability/submit", json=MARCH).status_code == 201
        clients.append(client)

    pending = admin.get("/admin/schedules/pending").get_json()["schedules"]
    rejected = pending[0]["id"]
    assert admin.post(f"/admin/schedules/{rejected}/reject").status_code == 200
    assert admin.post(f"/admin/schedules/{rejected}/reject").status_code == 404

    resp = admin.post("/admin/schedules/approve-all", json=MARCH)
    assert resp.get_json()["approved"] == 2
    assert admin.get("/admin/schedules/pending").get_json()["schedules"] == []
    assert admin.post("/admin/schedules/missing/approve").status_code == 404

    dashboards = [c.get("/dashboard").get_json() for c in clients]
    assert all(d["success"] for d in dashboards)


def test_change_password_endpoint(app, admin):
    _, creds = _register(admin, "Ana Pérez")
    ana = _login(app, creds["username"], creds["password"])

    resp = ana.post(
        "/account/password",
        json={"current_password": creds["password"], "new_password": "newpass1", "confirm_password": "newpass1"},
    )
    assert resp.status_code == 200

    ana.post("/logout")
    assert ana.get("/coverage").status_code == 401
    _login(app, creds["username"], "newpass1")
