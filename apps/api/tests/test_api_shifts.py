from datetime import date, time

import pytest
from sqlalchemy import select

from rotaplan.models.scheduled_shifts import ScheduledShift
from rotaplan.routers.auth import create_access_token
from rotaplan.scheduling.patterns import ShiftSource, ShiftStatus
from rotaplan.services import shifts as shifts_service

DAY = "2024-01-01"  # Monday


@pytest.fixture
def new_shift(client, auth_headers, employee):
    def _post(start="09:00", end="13:00", shift_date=DAY, **extra):
        body = {
            "employee_id": str(employee.employee_id),
            "shift_date": shift_date,
            "start_time": start,
            "end_time": end,
            "break_minutes": 0,
            "expected_hours": 4,
            **extra,
        }
        return client.post("/shifts", json=body, headers=auth_headers)

    return _post


def test_create_manual_shift(new_shift, employee):
    resp = new_shift()
    assert resp.status_code == 200
    body = resp.json()
    assert body["shift"]["source"] == "manual"
    assert body["shift"]["status"] == "draft"
    assert body["shift"]["location_id"] == str(employee.main_location_id)
    assert body["availability"]["status"] == "no_availability_record"


def test_overlap_is_409_and_touching_is_allowed(new_shift):
    first = new_shift("09:00", "13:00").json()["shift"]

    clash = new_shift("12:00", "17:00")
    assert clash.status_code == 409
    detail = clash.json()["detail"]
    assert detail["conflicting_shift_id"] == first["shift_id"]
    assert detail["reason"] == "Overlaps existing shift 09:00-13:00 on 2024-01-01"

    assert new_shift("13:00", "17:00").status_code == 200


def test_bad_times_rejected(new_shift):
    assert new_shift("17:00", "09:00").status_code == 400
    assert new_shift("09:00", "10:00", break_minutes=60).status_code == 400


def test_availability_warning_does_not_block(client, auth_headers, employee, new_shift):
    resp = client.put(
        f"/employees/{employee.employee_id}/availability",
        json={"days": [{"weekday": "monday", "is_available": False}]},
        headers=auth_headers,
    )
    assert resp.status_code == 200

    saved = new_shift()
    assert saved.status_code == 200
    assert saved.json()["availability"]["status"] == "unavailable"


def test_editing_template_shift_makes_override_draft(client, auth_headers, employee, make_shift):
    shift = make_shift(
        employee, date(2024, 1, 1), time(9, 0), time(17, 0),
        source=ShiftSource.template, status=ShiftStatus.published,
    )

    resp = client.patch(
        f"/shifts/{shift.shift_id}", json={"start_time": "10:00"}, headers=auth_headers
    )
    assert resp.status_code == 200
    body = resp.json()["shift"]
    assert body["source"] == "override"
    assert body["status"] == "draft"
    assert body["publish_batch_id"] is None
    assert body["start_time"] == "10:00:00"
    assert body["end_time"] == "17:00:00"


def test_null_for_required_field_is_rejected(client, auth_headers, employee, make_shift):
    shift = make_shift(employee, date(2024, 1, 1), time(9, 0), time(17, 0))

    resp = client.patch(f"/shifts/{shift.shift_id}", json={"start_time": None}, headers=auth_headers)
    assert resp.status_code == 400
    assert "start_time" in resp.json()["detail"]

    unchanged = client.get(f"/shifts/{shift.shift_id}", headers=auth_headers).json()
    assert unchanged["start_time"] == "09:00:00"

    # location is optional, so clearing it is a normal edit
    cleared = client.patch(f"/shifts/{shift.shift_id}", json={"location_id": None}, headers=auth_headers)
    assert cleared.status_code == 200
    assert cleared.json()["shift"]["location_id"] is None


def test_edit_checks_overlap_against_other_shifts(client, auth_headers, employee, make_shift):
    make_shift(employee, date(2024, 1, 1), time(9, 0), time(12, 0))
    later = make_shift(employee, date(2024, 1, 1), time(13, 0), time(17, 0))

    resp = client.patch(f"/shifts/{later.shift_id}", json={"start_time": "11:00"}, headers=auth_headers)
    assert resp.status_code == 409

    resp = client.patch(f"/shifts/{later.shift_id}", json={"start_time": "12:00"}, headers=auth_headers)
    assert resp.status_code == 200


def test_failed_create_rolls_back(client, db, new_shift, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("audit store unavailable")

    monkeypatch.setattr(shifts_service, "record_audit", boom)

    with pytest.raises(RuntimeError):
        new_shift()
    assert db.execute(select(ScheduledShift)).first() is None


def test_delete_shift(client, auth_headers, new_shift):
    shift_id = new_shift().json()["shift"]["shift_id"]
    assert client.delete(f"/shifts/{shift_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/shifts/{shift_id}", headers=auth_headers).status_code == 404


def test_list_filters(client, auth_headers, new_shift):
    new_shift(shift_date="2024-01-01")
    new_shift(shift_date="2024-01-08")

    resp = client.get(
        "/shifts",
        params={"start_date": "2024-01-01", "end_date": "2024-01-07", "status": "draft"},
        headers=auth_headers,
    )
    assert [s["shift_date"] for s in resp.json()] == ["2024-01-01"]


def test_publish_then_employee_sees_schedule(client, auth_headers, employee, new_shift):
    ids = [
        new_shift(shift_date="2024-01-01").json()["shift"]["shift_id"],
        new_shift(shift_date="2024-01-02").json()["shift"]["shift_id"],
    ]
    draft_only = new_shift(shift_date="2024-01-03").json()["shift"]["shift_id"]

    resp = client.post("/shifts/publish", json={"shift_ids": ids, "notes": "wk1"}, headers=auth_headers)
    assert resp.status_code == 200
    batch = resp.json()
    assert batch["shifts_count"] == 2
    assert batch["affected_employee_ids"] == [str(employee.employee_id)]

    batches = client.get("/shifts/publish-batches", headers=auth_headers).json()
    assert [b["publish_batch_id"] for b in batches] == [batch["publish_batch_id"]]

    token = create_access_token({"sub": str(employee.employee_id), "role": "employee"})
    mine = client.get(
        "/me/schedule",
        params={"month_start": "2024-01-01"},
        headers={"Authorization": f"Bearer {token}"},
    ).json()
    assert mine["month_end"] == "2024-01-31"
    assert [s["shift_id"] for s in mine["shifts"]] == ids
    assert draft_only not in {s["shift_id"] for s in mine["shifts"]}

    again = client.post("/shifts/publish", json={"shift_ids": ids}, headers=auth_headers)
    assert again.status_code == 400
