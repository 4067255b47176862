from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

from dotenv import load_dotenv

# -------------------------------------------------------------------
# Load environment variables (.env in apps/api/)
# -------------------------------------------------------------------
load_dotenv()

# -------------------------------------------------------------------
# Alembic Config object
# -------------------------------------------------------------------
config = context.config

# -------------------------------------------------------------------
# Override sqlalchemy.url from settings
# (avoids alembic.ini interpolation issues)
# -------------------------------------------------------------------
from rotaplan.core.config import settings

config.set_main_option("sqlalchemy.url", settings.database_url)

# -------------------------------------------------------------------
# Logging configuration
# -------------------------------------------------------------------
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# -------------------------------------------------------------------
# Import models & metadata for autogenerate
# -------------------------------------------------------------------
from rotaplan.core.database import Base
from rotaplan.models.location import Location  # noqa: F401
from rotaplan.models.employee import Employee  # noqa: F401
from rotaplan.models.manager import Manager  # noqa: F401
from rotaplan.models.availability import EmployeeAvailability  # noqa: F401
from rotaplan.models.schedule_template import ScheduleTemplate, ScheduleWeek, ScheduleDay  # noqa: F401
from rotaplan.models.custom_schedule import CustomSchedule, CustomScheduleWeek, CustomScheduleDay  # noqa: F401
from rotaplan.models.assignment import ScheduleAssignment  # noqa: F401
from rotaplan.models.publish_batch import SchedulePublishBatch  # noqa: F401
from rotaplan.models.scheduled_shifts import ScheduledShift  # noqa: F401
from rotaplan.models.audit_log import AuditLog  # noqa: F401

target_metadata = Base.metadata

# -------------------------------------------------------------------
# Offline migrations
# -------------------------------------------------------------------
def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()

# -------------------------------------------------------------------
# Online migrations
# -------------------------------------------------------------------
def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )

        with context.begin_transaction():
            context.run_migrations()

# -------------------------------------------------------------------
# Entrypoint
# -------------------------------------------------------------------
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
