from logging.config import fileConfig
from typing import Any

from sqlalchemy import engine_from_config, pool, text
from sqlalchemy.schema import CreateSchema

from alembic import context  # type: ignore[attr-defined]
from venue_booking.config import DATABASE_URL, SCHEMA
from venue_booking.models.base import Base
from venue_booking.models.daily_overrides import DailyOverrideRow  # noqa: F401
from venue_booking.models.guests import GuestRow  # noqa: F401
from venue_booking.models.host_settings import HostSettingsRow  # noqa: F401
from venue_booking.models.reservations import ReservationRow  # noqa: F401
from venue_booking.models.reviews import ReviewRow  # noqa: F401
from venue_booking.models.venues import VenueRow  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
config.set_main_option("sqlalchemy.url", DATABASE_URL)


def include_object(
    object_: Any,
    name: str,
    type_: str,
    reflected: bool,
    compare_to: Any,
) -> bool:
    if hasattr(object_, "schema") and object_.schema != SCHEMA:
        return False
    return True


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode, emitting SQL to the script output."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        include_schemas=True,
        include_object=include_object,
        version_table_schema=SCHEMA,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_schemas=True,
            include_object=include_object,
            version_table_schema=SCHEMA,
        )
        # The version table lives in SCHEMA, so it must exist before migrating
        connection.execute(CreateSchema(SCHEMA, if_not_exists=True))
        # Required by the reservations exclusion constraint
        connection.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))
        connection.commit()

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
