from __future__ import annotations

from collections import Counter

from rotaplan.scheduling.patterns import (
    MAX_ROTATION_WEEKS,
    MIN_ROTATION_WEEKS,
    WEEKDAYS,
    RotationTemplate,
    RotationWeek,
)


def validate_template(template: RotationTemplate) -> list[str]:
    """
    Return every structural problem with a rotation; an empty list means the
    generator can expand it without skipping weeks.
    """
    violations: list[str] = []

    n = template.rotation_length_weeks
    if not (MIN_ROTATION_WEEKS <= n <= MAX_ROTATION_WEEKS):
        violations.append(
            f"rotation_length_weeks must be between {MIN_ROTATION_WEEKS} and "
            f"{MAX_ROTATION_WEEKS} (got {n})"
        )

    index_counts = Counter(w.week_index for w in template.weeks)
    for idx, count in sorted(index_counts.items()):
        if count > 1:
            violations.append(f"week_index {idx} appears {count} times")
        if idx < 1 or idx > n:
            violations.append(f"week_index {idx} is outside 1..{n}")
    for idx in range(1, n + 1):
        if idx not in index_counts:
            violations.append(f"missing week_index {idx}")

    for week in sorted(template.weeks, key=lambda w: w.week_index):
        violations.extend(_validate_week(week))

    return violations


def _validate_week(week: RotationWeek) -> list[str]:
    violations: list[str] = []
    prefix = f"week {week.week_index}"

    weekday_counts = Counter(d.weekday for d in week.days)
    for weekday in WEEKDAYS:
        count = weekday_counts.get(weekday, 0)
        if count == 0:
            violations.append(f"{prefix}: missing {weekday.value}")
        elif count > 1:
            violations.append(f"{prefix}: {weekday.value} defined {count} times")

    for day in week.days:
        if not day.is_working_day:
            continue
        where = f"{prefix} {day.weekday.value}"
        if day.start_time is None or day.end_time is None:
            violations.append(f"{where}: start_time and end_time are required on a working day")
        elif day.start_time >= day.end_time:
            violations.append(f"{where}: start_time must be before end_time")
        if day.break_minutes < 0:
            violations.append(f"{where}: break_minutes must be >= 0")
        if day.expected_hours < 0:
            violations.append(f"{where}: expected_hours must be >= 0")

    return violations
