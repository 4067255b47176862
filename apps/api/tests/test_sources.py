import uuid
from datetime import date

from rotaplan.scheduling.patterns import Assignment, CustomSchedule, TemplateStatus, blank_weeks
from rotaplan.scheduling.sources import (
    CustomSource,
    NoSource,
    TemplateSource,
    active_assignment,
    active_custom_schedule,
    resolve_schedule_source,
)

EMP = uuid.uuid4()
TODAY = date(2024, 3, 1)


def _assignment(template_id, start, end=None):
    return Assignment(
        assignment_id=uuid.uuid4(),
        employee_id=EMP,
        template_id=template_id,
        effective_start_date=start,
        effective_end_date=end,
    )


def _custom(start, end=None, status=TemplateStatus.active):
    return CustomSchedule(
        custom_schedule_id=uuid.uuid4(),
        employee_id=EMP,
        rotation_length_weeks=1,
        effective_start_date=start,
        effective_end_date=end,
        status=status,
        weeks=blank_weeks(1),
    )


def test_open_assignment_wins():
    tid = uuid.uuid4()
    closed = _assignment(tid, date(2024, 1, 1), date(2024, 6, 1))
    current = _assignment(tid, date(2024, 2, 1))
    assert active_assignment([closed, current], TODAY) == current


def test_latest_unexpired_assignment_when_none_open():
    tid = uuid.uuid4()
    expired = _assignment(tid, date(2023, 1, 1), date(2024, 1, 31))
    early = _assignment(tid, date(2024, 1, 1), date(2024, 12, 31))
    late = _assignment(tid, date(2024, 2, 1), date(2024, 3, 1))
    assert active_assignment([expired, early, late], TODAY) == late
    assert active_assignment([expired], TODAY) is None
    assert active_assignment([], TODAY) is None


def test_active_custom_schedule_filters_inactive_and_expired():
    inactive = _custom(date(2024, 2, 1), status=TemplateStatus.inactive)
    expired = _custom(date(2024, 1, 1), end=date(2024, 2, 1))
    older = _custom(date(2024, 1, 1))
    newer = _custom(date(2024, 2, 15))

    assert active_custom_schedule([inactive, expired], TODAY) is None
    assert active_custom_schedule([older, newer, inactive], TODAY) == newer


def test_custom_schedule_takes_precedence():
    template_id = uuid.uuid4()
    custom = _custom(date(2024, 2, 1))
    source = resolve_schedule_source(
        custom_schedules=[custom],
        assignments=[_assignment(template_id, date(2024, 1, 1))],
        templates={},
        today=TODAY,
    )
    assert isinstance(source, CustomSource)
    assert source.kind == "custom"
    assert source.custom_schedule == custom


def test_template_source(two_week_rotation):
    template_id = uuid.uuid4()
    assignment = _assignment(template_id, date(2024, 1, 1))
    source = resolve_schedule_source([], [assignment], {template_id: two_week_rotation}, TODAY)

    assert isinstance(source, TemplateSource)
    assert source.kind == "template"
    assert source.assignment == assignment
    assert source.template.rotation_length_weeks == 2


def test_missing_template_resolves_to_none():
    assignment = _assignment(uuid.uuid4(), date(2024, 1, 1))
    assert isinstance(resolve_schedule_source([], [assignment], {}, TODAY), NoSource)


def test_nothing_assigned():
    source = resolve_schedule_source([], [], {}, TODAY)
    assert isinstance(source, NoSource)
    assert source.kind == "none"
