import os

# Settings are read at import time; point them at SQLite before rotaplan loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rotaplan.core.database import Base, get_db
from rotaplan.main import app
from rotaplan.models.employee import Employee
from rotaplan.models.location import Location
from rotaplan.models.manager import Manager
from rotaplan.models.scheduled_shifts import ScheduledShift
from rotaplan.routers.auth import create_access_token, get_password_hash
from rotaplan.scheduling.patterns import (
    WEEKDAYS,
    RotationTemplate,
    RotationWeek,
    ShiftSource,
    ShiftStatus,
    Weekday,
    WeekdayPattern,
)
from rotaplan.services.audit import Actor


def _week(index, label, working):
    """``working`` maps Weekday -> (start, end, expected_hours); other days are off."""
    days = []
    for wd in WEEKDAYS:
        if wd in working:
            start, end, hours = working[wd]
            days.append(
                WeekdayPattern(
                    weekday=wd, is_working_day=True, start_time=start, end_time=end,
                    break_minutes=30, expected_hours=hours,
                )
            )
        else:
            days.append(WeekdayPattern(weekday=wd, is_working_day=False))
    return RotationWeek(week_index=index, week_label=label, days=days)


@pytest.fixture
def two_week_rotation() -> RotationTemplate:
    """Week A: Mon-Fri 09:00-17:30. Week B: Mon-Thu 09:00-17:30, Fri off, Sat 09:00-13:00."""
    full = (time(9, 0), time(17, 30), 7.6)
    week_a = _week(1, "Week A", {wd: full for wd in WEEKDAYS[:5]})
    week_b = _week(
        2,
        "Week B",
        {**{wd: full for wd in WEEKDAYS[:4]}, Weekday.saturday: (time(9, 0), time(13, 0), 3.6)},
    )
    return RotationTemplate(name="Two week", rotation_length_weeks=2, weeks=[week_a, week_b])


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def manager(db) -> Manager:
    m = Manager(name="Rota Manager", email="manager@example.com", password_hash=get_password_hash("secret"))
    db.add(m)
    db.commit()
    db.refresh(m)
    return m


@pytest.fixture
def actor(manager) -> Actor:
    return Actor.from_manager(manager)


@pytest.fixture
def auth_headers(manager) -> dict:
    token = create_access_token({"sub": str(manager.manager_id), "role": "manager"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def location(db) -> Location:
    loc = Location(name="Head Office", address="1 Main St")
    db.add(loc)
    db.commit()
    db.refresh(loc)
    return loc


@pytest.fixture
def make_employee(db, location):
    def _make(name="Ana Lee", email=None):
        emp = Employee(
            name=name,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            main_location_id=location.location_id,
        )
        db.add(emp)
        db.commit()
        db.refresh(emp)
        return emp

    return _make


@pytest.fixture
def employee(make_employee) -> Employee:
    return make_employee()


@pytest.fixture
def make_shift(db):
    def _make(employee, shift_date, start, end, source=ShiftSource.manual, status=ShiftStatus.draft):
        shift = ScheduledShift(
            employee_id=employee.employee_id,
            location_id=employee.main_location_id,
            shift_date=shift_date,
            start_time=start,
            end_time=end,
            break_minutes=0,
            expected_hours=0,
            source=source,
            status=status,
        )
        db.add(shift)
        db.commit()
        db.refresh(shift)
        return shift

    return _make
