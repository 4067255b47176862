"""initial rotation schema

Revision ID: initial_rotation_schema
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'initial_rotation_schema'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Shared enum types are created once up front; tables only reference them.
weekday = postgresql.ENUM(
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
    name='weekday', create_type=False,
)
template_status = postgresql.ENUM('active', 'inactive', name='template_status', create_type=False)
shift_source = postgresql.ENUM('template', 'manual', 'override', name='shift_source', create_type=False)
shift_status = postgresql.ENUM('draft', 'published', name='shift_status', create_type=False)


def _day_columns():
    return [
        sa.Column('weekday', weekday, nullable=False),
        sa.Column('is_working_day', sa.Boolean(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('break_minutes', sa.Integer(), nullable=False),
        sa.Column('expected_hours', sa.Float(), nullable=False),
        sa.Column(
            'location_id', sa.Uuid(),
            sa.ForeignKey('locations.location_id', ondelete='SET NULL'), nullable=True,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    for enum_type in (weekday, template_status, shift_source, shift_status):
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        'locations',
        sa.Column('location_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'employees',
        sa.Column('employee_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column(
            'main_location_id', sa.Uuid(),
            sa.ForeignKey('locations.location_id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_employees_email', 'employees', ['email'], unique=True)

    op.create_table(
        'managers',
        sa.Column('manager_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_managers_email', 'managers', ['email'], unique=True)

    op.create_table(
        'employee_availability',
        sa.Column('availability_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'employee_id', sa.Uuid(),
            sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('weekday', weekday, nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('available_start', sa.Time(), nullable=True),
        sa.Column('available_end', sa.Time(), nullable=True),
        sa.Column('max_hours', sa.Float(), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('effective_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_employee_availability_employee_id', 'employee_availability', ['employee_id'])

    op.create_table(
        'schedule_templates',
        sa.Column('template_id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', template_status, nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('rotation_length_weeks', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        'schedule_weeks',
        sa.Column('schedule_week_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'template_id', sa.Uuid(),
            sa.ForeignKey('schedule_templates.template_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('week_label', sa.String(), nullable=True),
        sa.UniqueConstraint('template_id', 'week_index', name='uq_schedule_weeks_template_index'),
    )
    op.create_index('ix_schedule_weeks_template_id', 'schedule_weeks', ['template_id'])

    op.create_table(
        'schedule_days',
        sa.Column('schedule_day_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'schedule_week_id', sa.Uuid(),
            sa.ForeignKey('schedule_weeks.schedule_week_id', ondelete='CASCADE'), nullable=False,
        ),
        *_day_columns(),
        sa.UniqueConstraint('schedule_week_id', 'weekday', name='uq_schedule_days_week_weekday'),
    )
    op.create_index('ix_schedule_days_schedule_week_id', 'schedule_days', ['schedule_week_id'])

    op.create_table(
        'custom_schedules',
        sa.Column('custom_schedule_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'employee_id', sa.Uuid(),
            sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('rotation_length_weeks', sa.Integer(), nullable=False),
        sa.Column('effective_start_date', sa.Date(), nullable=False),
        sa.Column('effective_end_date', sa.Date(), nullable=True),
        sa.Column('status', template_status, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_custom_schedules_employee_id', 'custom_schedules', ['employee_id'])

    op.create_table(
        'custom_schedule_weeks',
        sa.Column('custom_schedule_week_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'custom_schedule_id', sa.Uuid(),
            sa.ForeignKey('custom_schedules.custom_schedule_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('week_index', sa.Integer(), nullable=False),
        sa.Column('week_label', sa.String(), nullable=True),
        sa.UniqueConstraint('custom_schedule_id', 'week_index', name='uq_custom_schedule_weeks_index'),
    )
    op.create_index('ix_custom_schedule_weeks_custom_schedule_id', 'custom_schedule_weeks', ['custom_schedule_id'])

    op.create_table(
        'custom_schedule_days',
        sa.Column('custom_schedule_day_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'custom_schedule_week_id', sa.Uuid(),
            sa.ForeignKey('custom_schedule_weeks.custom_schedule_week_id', ondelete='CASCADE'), nullable=False,
        ),
        *_day_columns(),
        sa.UniqueConstraint('custom_schedule_week_id', 'weekday', name='uq_custom_schedule_days_weekday'),
    )
    op.create_index(
        'ix_custom_schedule_days_custom_schedule_week_id', 'custom_schedule_days', ['custom_schedule_week_id']
    )

    op.create_table(
        'schedule_assignments',
        sa.Column('assignment_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'employee_id', sa.Uuid(),
            sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'template_id', sa.Uuid(),
            sa.ForeignKey('schedule_templates.template_id', ondelete='RESTRICT'), nullable=False,
        ),
        sa.Column('effective_start_date', sa.Date(), nullable=False),
        sa.Column('effective_end_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_schedule_assignments_employee_id', 'schedule_assignments', ['employee_id'])
    op.create_index('ix_schedule_assignments_template_id', 'schedule_assignments', ['template_id'])

    op.create_table(
        'schedule_publish_batches',
        sa.Column('publish_batch_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'published_by', sa.Uuid(),
            sa.ForeignKey('managers.manager_id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('shifts_count', sa.Integer(), nullable=False),
        sa.Column('affected_employee_ids', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
    )

    op.create_table(
        'scheduled_shifts',
        sa.Column('shift_id', sa.Uuid(), primary_key=True),
        sa.Column(
            'employee_id', sa.Uuid(),
            sa.ForeignKey('employees.employee_id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column(
            'location_id', sa.Uuid(),
            sa.ForeignKey('locations.location_id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('shift_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('break_minutes', sa.Integer(), nullable=False),
        sa.Column('expected_hours', sa.Float(), nullable=False),
        sa.Column('source', shift_source, nullable=False),
        sa.Column('status', shift_status, nullable=False),
        sa.Column(
            'template_assignment_id', sa.Uuid(),
            sa.ForeignKey('schedule_assignments.assignment_id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column(
            'custom_schedule_id', sa.Uuid(),
            sa.ForeignKey('custom_schedules.custom_schedule_id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column(
            'publish_batch_id', sa.Uuid(),
            sa.ForeignKey('schedule_publish_batches.publish_batch_id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_scheduled_shifts_employee_date', 'scheduled_shifts', ['employee_id', 'shift_date'])
    op.create_index('ix_scheduled_shifts_status_source', 'scheduled_shifts', ['status', 'source'])

    op.create_table(
        'audit_logs',
        sa.Column('audit_log_id', sa.Uuid(), primary_key=True),
        sa.Column('actor_id', sa.Uuid(), nullable=True),
        sa.Column('actor_email', sa.String(), nullable=True),
        sa.Column('actor_name', sa.String(), nullable=True),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('entity_type', sa.String(), nullable=False),
        sa.Column('entity_id', sa.String(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('before_data', sa.JSON(), nullable=True),
        sa.Column('after_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_audit_logs_actor_id', 'audit_logs', ['actor_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('audit_logs')
    op.drop_table('scheduled_shifts')
    op.drop_table('schedule_publish_batches')
    op.drop_table('schedule_assignments')
    op.drop_table('custom_schedule_days')
    op.drop_table('custom_schedule_weeks')
    op.drop_table('custom_schedules')
    op.drop_table('schedule_days')
    op.drop_table('schedule_weeks')
    op.drop_table('schedule_templates')
    op.drop_table('employee_availability')
    op.drop_table('managers')
    op.drop_table('employees')
    op.drop_table('locations')

    bind = op.get_bind()
    for enum_type in (shift_status, shift_source, template_status, weekday):
        enum_type.drop(bind, checkfirst=True)
