from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional, Sequence
from uuid import UUID

from fastapi import HTTPException
from sqlalchemy import and_, select
from sqlalchemy.orm import Session

from rotaplan.models.publish_batch import SchedulePublishBatch
from rotaplan.models.scheduled_shifts import ScheduledShift
from rotaplan.scheduling.patterns import ShiftStatus
from rotaplan.services.audit import Actor, AuditAction, record_audit

logger = logging.getLogger(__name__)


def select_draft_shifts(
    db: Session,
    shift_ids: Optional[Sequence[UUID]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[ScheduledShift]:
    """Shifts to publish: the listed ids, or every draft inside a date range."""
    if shift_ids:
        rows = db.execute(select(ScheduledShift).where(ScheduledShift.shift_id.in_(shift_ids))).scalars().all()
        found = {r.shift_id for r in rows}
        missing = [str(sid) for sid in shift_ids if sid not in found]
        if missing:
            raise HTTPException(status_code=404, detail={"message": "Scheduled shifts not found", "shift_ids": missing})
        by_id = {r.shift_id: r for r in rows}
        # keep caller order, drop repeats
        return [by_id[sid] for sid in dict.fromkeys(shift_ids)]

    if start_date is None or end_date is None:
        raise HTTPException(status_code=400, detail="Provide shift_ids or both start_date and end_date")
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must be >= start_date")

    return db.execute(
        select(ScheduledShift)
        .where(
            and_(
                ScheduledShift.status == ShiftStatus.draft,
                ScheduledShift.shift_date >= start_date,
                ScheduledShift.shift_date <= end_date,
            )
        )
        .order_by(ScheduledShift.shift_date, ScheduledShift.start_time)
    ).scalars().all()


def publish(
    db: Session,
    draft_shifts: Sequence[ScheduledShift],
    actor: Actor,
    notes: Optional[str] = None,
) -> SchedulePublishBatch:
    """
    Promote draft shifts to published under one new batch.

    Batch, shift updates and audit record commit together; on any failure the
    session is rolled back and nothing is published.
    """
    if not draft_shifts:
        raise HTTPException(status_code=400, detail="No draft shifts to publish")

    not_drafts = [str(s.shift_id) for s in draft_shifts if s.status != ShiftStatus.draft]
    if not_drafts:
        raise HTTPException(
            status_code=400,
            detail={"message": "Only draft shifts can be published", "shift_ids": not_drafts},
        )

    affected = list(dict.fromkeys(str(s.employee_id) for s in draft_shifts))

    try:
        batch = SchedulePublishBatch(
            published_by=actor.actor_id,
            published_at=datetime.now(timezone.utc),
            shifts_count=len(draft_shifts),
            affected_employee_ids=affected,
            notes=notes,
        )
        db.add(batch)
        db.flush()

        for shift in draft_shifts:
            shift.status = ShiftStatus.published
            shift.publish_batch_id = batch.publish_batch_id

        record_audit(
            db, actor, AuditAction.approve, "SchedulePublishBatch", batch.publish_batch_id,
            f"Published {len(draft_shifts)} shifts affecting {len(affected)} employees",
            after={"batch_id": str(batch.publish_batch_id), "shifts_count": len(draft_shifts)},
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Publish of %s shifts failed; rolled back", len(draft_shifts))
        raise

    db.refresh(batch)
    logger.info(
        "Published batch %s: %s shifts, %s employees",
        batch.publish_batch_id,
        batch.shifts_count,
        len(affected),
    )
    return batch


def list_publish_batches(db: Session, limit: int = 50) -> list[SchedulePublishBatch]:
    return db.execute(
        select(SchedulePublishBatch).order_by(SchedulePublishBatch.published_at.desc()).limit(limit)
    ).scalars().all()
