from datetime import date, timedelta

import pytest

from rotaplan.scheduling.generator import week_start


@pytest.fixture
def template_id(client, auth_headers):
    weeks = client.get("/templates/blank", params={"rotation_length_weeks": 1}, headers=auth_headers).json()
    resp = client.post(
        "/templates",
        json={"name": "Weekdays", "rotation_length_weeks": 1, "weeks": weeks},
        headers=auth_headers,
    )
    return resp.json()["template_id"]


def test_locations_and_employees(client, auth_headers):
    loc = client.post("/admin/locations", json={"name": "Depot"}, headers=auth_headers).json()
    assert [item["name"] for item in client.get("/admin/locations", headers=auth_headers).json()] == ["Depot"]

    resp = client.post(
        "/employees",
        json={"name": "Dana Cho", "email": "Dana@Example.com", "main_location_id": loc["location_id"]},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    emp = resp.json()
    assert emp["email"] == "dana@example.com"

    dup = client.post("/employees", json={"name": "Dana 2", "email": "dana@example.com"}, headers=auth_headers)
    assert dup.status_code == 400

    patched = client.patch(f"/employees/{emp['employee_id']}", json={"phone": "555-0100"}, headers=auth_headers)
    assert patched.json()["phone"] == "555-0100"

    missing_loc = client.post(
        "/employees",
        json={"name": "Eli", "email": "eli@example.com", "main_location_id": "00000000-0000-0000-0000-000000000009"},
        headers=auth_headers,
    )
    assert missing_loc.status_code == 404


def test_employee_login_after_password_set(client, auth_headers, employee):
    resp = client.post(
        f"/employees/{employee.employee_id}/password", json={"password": "hunter22"}, headers=auth_headers
    )
    assert resp.status_code == 200

    bad = client.post("/auth/login", json={"email": employee.email, "password": "nope"})
    assert bad.status_code == 401

    login = client.post("/auth/login", json={"email": employee.email, "password": "hunter22"})
    assert login.status_code == 200
    token = login.json()["access_token"]
    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["employee_id"] == str(employee.employee_id)


def test_manager_login(client, manager):
    resp = client.post("/auth/manager/login", json={"email": "manager@example.com", "password": "secret"})
    assert resp.status_code == 200
    assert resp.json()["role"] == "manager"


def test_availability_replace_all(client, auth_headers, employee):
    url = f"/employees/{employee.employee_id}/availability"
    first = {
        "days": [
            {"weekday": "wednesday", "available_start": "10:00", "available_end": "14:00"},
            {"weekday": "monday"},
        ]
    }
    assert client.put(url, json=first, headers=auth_headers).status_code == 200
    assert [d["weekday"] for d in client.get(url, headers=auth_headers).json()] == ["monday", "wednesday"]

    second = {"days": [{"weekday": "friday", "is_available": False}]}
    client.put(url, json=second, headers=auth_headers)
    days = client.get(url, headers=auth_headers).json()
    assert [(d["weekday"], d["is_available"]) for d in days] == [("friday", False)]

    dup = {"days": [{"weekday": "friday"}, {"weekday": "friday"}]}
    assert client.put(url, json=dup, headers=auth_headers).status_code == 400

    backwards = {"days": [{"weekday": "friday", "available_start": "15:00", "available_end": "09:00"}]}
    assert client.put(url, json=backwards, headers=auth_headers).status_code == 422


def test_assignment_lifecycle(client, auth_headers, employee, template_id):
    start = week_start(date.today())
    resp = client.post(
        f"/employees/{employee.employee_id}/assignments",
        json={"template_id": template_id, "effective_start_date": start.isoformat()},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["generation"]["source"] == "template"
    assert body["generation"]["created"] > 0
    assignment_id = body["assignment_id"]

    source = client.get(f"/employees/{employee.employee_id}/schedule-source", headers=auth_headers).json()
    assert source["kind"] == "template"
    assert source["assignment"]["assignment_id"] == assignment_id

    history = client.get(f"/employees/{employee.employee_id}/assignments", headers=auth_headers).json()
    assert [(h["template_name"], h["is_current"]) for h in history] == [("Weekdays", True)]

    regen = client.post(f"/employees/{employee.employee_id}/regenerate", headers=auth_headers).json()
    assert regen["removed"] == regen["created"] == body["generation"]["created"]
    audit = client.get("/admin/audit-logs", params={"entity_type": "Employee"}, headers=auth_headers).json()
    assert [entry["action"] for entry in audit] == ["generate"]

    resp = client.post(f"/assignments/{assignment_id}/unassign", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["removed_draft_shifts"] == body["generation"]["created"]

    shifts = client.get(
        "/shifts",
        params={
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(weeks=20)).isoformat(),
            "employee_id": str(employee.employee_id),
        },
        headers=auth_headers,
    ).json()
    assert shifts == []


def test_inactive_template_cannot_be_assigned(client, auth_headers, employee, template_id):
    weeks = client.get(f"/templates/{template_id}", headers=auth_headers).json()["weeks"]
    client.put(
        f"/templates/{template_id}",
        json={"name": "Weekdays", "status": "inactive", "rotation_length_weeks": 1, "weeks": weeks},
        headers=auth_headers,
    )
    resp = client.post(
        f"/employees/{employee.employee_id}/assignments",
        json={"template_id": template_id, "effective_start_date": date.today().isoformat()},
        headers=auth_headers,
    )
    assert resp.status_code == 400


def test_custom_schedule_endpoints(client, auth_headers, employee, template_id):
    weeks = client.get("/templates/blank", params={"rotation_length_weeks": 1}, headers=auth_headers).json()
    start = week_start(date.today())
    client.post(
        f"/employees/{employee.employee_id}/assignments",
        json={"template_id": template_id, "effective_start_date": start.isoformat()},
        headers=auth_headers,
    )

    resp = client.post(
        "/custom-schedules",
        json={
            "employee_id": str(employee.employee_id),
            "name": "Four day week",
            "rotation_length_weeks": 1,
            "effective_start_date": start.isoformat(),
            "weeks": weeks,
        },
        headers=auth_headers,
    )
    assert resp.status_code == 200
    created = resp.json()
    custom_id = created["custom_schedule"]["custom_schedule_id"]
    assert created["generation"]["source"] == "custom"

    source = client.get(f"/employees/{employee.employee_id}/schedule-source", headers=auth_headers).json()
    assert source["kind"] == "custom"

    listed = client.get(f"/employees/{employee.employee_id}/custom-schedules", headers=auth_headers).json()
    assert [c["custom_schedule_id"] for c in listed] == [custom_id]
    assert client.get(f"/custom-schedules/{custom_id}", headers=auth_headers).json()["name"] == "Four day week"

    back = client.post(f"/custom-schedules/{custom_id}/deactivate", headers=auth_headers).json()
    assert back["source"] == "template"
