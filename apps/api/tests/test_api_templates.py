from datetime import date

import pytest


@pytest.fixture
def blank_two_weeks(client, auth_headers):
    resp = client.get("/templates/blank", params={"rotation_length_weeks": 2}, headers=auth_headers)
    assert resp.status_code == 200
    return resp.json()


def _create(client, headers, weeks, name="Office rota", **extra):
    body = {"name": name, "rotation_length_weeks": len(weeks), "weeks": weeks, **extra}
    return client.post("/templates", json=body, headers=headers)


def test_requires_manager_token(client):
    assert client.get("/templates").status_code in (401, 403)
    assert client.post("/templates", json={"name": "x"}).status_code in (401, 403)


def test_employee_token_is_forbidden(client, employee):
    from rotaplan.routers.auth import create_access_token

    token = create_access_token({"sub": str(employee.employee_id), "role": "employee"})
    resp = client.get("/templates", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_blank_weeks_shape(blank_two_weeks):
    assert [w["week_label"] for w in blank_two_weeks] == ["Week A", "Week B"]
    monday = blank_two_weeks[0]["days"][0]
    assert monday["weekday"] == "monday"
    assert monday["is_working_day"] is True
    assert monday["start_time"] == "09:00:00"
    assert blank_two_weeks[0]["days"][6]["is_working_day"] is False


def test_create_list_and_get(client, auth_headers, blank_two_weeks):
    resp = _create(client, auth_headers, blank_two_weeks, description="Default office hours")
    assert resp.status_code == 200
    created = resp.json()
    assert created["rotation_length_weeks"] == 2
    assert len(created["weeks"]) == 2
    assert created["active_assignment_count"] == 0

    listed = client.get("/templates", headers=auth_headers).json()
    assert [t["template_id"] for t in listed] == [created["template_id"]]

    fetched = client.get(f"/templates/{created['template_id']}", headers=auth_headers).json()
    assert fetched["weeks"][1]["days"][4]["weekday"] == "friday"


def test_invalid_template_reports_every_violation(client, auth_headers, blank_two_weeks):
    week_a = blank_two_weeks[0]
    week_a["days"][2]["end_time"] = "08:00:00"
    resp = client.post(
        "/templates",
        json={"name": "Broken", "rotation_length_weeks": 2, "weeks": [week_a]},
        headers=auth_headers,
    )
    assert resp.status_code == 400
    violations = resp.json()["detail"]["violations"]
    assert "missing week_index 2" in violations
    assert "week 1 wednesday: start_time must be before end_time" in violations


def test_unknown_location_rejected(client, auth_headers, blank_two_weeks):
    blank_two_weeks[0]["days"][0]["location_id"] = "00000000-0000-0000-0000-000000000001"
    resp = _create(client, auth_headers, blank_two_weeks)
    assert resp.status_code == 400
    assert resp.json()["detail"]["violations"] == [
        "unknown location_id 00000000-0000-0000-0000-000000000001"
    ]


def test_update_replaces_weeks(client, auth_headers, blank_two_weeks):
    template_id = _create(client, auth_headers, blank_two_weeks).json()["template_id"]

    one_week = [blank_two_weeks[0]]
    resp = client.put(
        f"/templates/{template_id}",
        json={"name": "Now weekly", "rotation_length_weeks": 1, "weeks": one_week},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Now weekly"
    assert [w["week_index"] for w in body["weeks"]] == [1]


def test_only_one_default(client, auth_headers, blank_two_weeks):
    first = _create(client, auth_headers, blank_two_weeks, name="A", is_default=True).json()
    second = _create(client, auth_headers, blank_two_weeks, name="B", is_default=True).json()

    by_id = {t["template_id"]: t for t in client.get("/templates", headers=auth_headers).json()}
    assert by_id[first["template_id"]]["is_default"] is False
    assert by_id[second["template_id"]]["is_default"] is True


def test_preview(client, auth_headers, blank_two_weeks):
    blank_two_weeks[1]["days"][4]["is_working_day"] = False
    template_id = _create(client, auth_headers, blank_two_weeks).json()["template_id"]

    resp = client.get(
        f"/templates/{template_id}/preview",
        params={"start_date": "2024-01-03", "weeks": 2},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    weeks = resp.json()
    assert [w["week_start"] for w in weeks] == ["2024-01-01", "2024-01-08"]
    assert weeks[1]["week_label"] == "Week B"
    assert weeks[1]["days"][4]["pattern"]["is_working_day"] is False


def test_delete_blocked_while_referenced(client, auth_headers, blank_two_weeks, employee):
    template_id = _create(client, auth_headers, blank_two_weeks).json()["template_id"]
    resp = client.post(
        f"/employees/{employee.employee_id}/assignments",
        json={"template_id": template_id, "effective_start_date": date.today().isoformat()},
        headers=auth_headers,
    )
    assert resp.status_code == 200

    assert client.get(f"/templates/{template_id}/referenced", headers=auth_headers).json()["referenced"] is True
    listed = client.get("/templates", headers=auth_headers).json()
    assert listed[0]["active_assignment_count"] == 1

    assert client.delete(f"/templates/{template_id}", headers=auth_headers).status_code == 409


def test_delete_unreferenced(client, auth_headers, blank_two_weeks):
    template_id = _create(client, auth_headers, blank_two_weeks).json()["template_id"]

    assert client.delete(f"/templates/{template_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/templates/{template_id}", headers=auth_headers).status_code == 404

    logs = client.get("/admin/audit-logs", params={"entity_type": "ScheduleTemplate"}, headers=auth_headers).json()
    assert sorted(entry["action"] for entry in logs) == ["create", "delete"]
