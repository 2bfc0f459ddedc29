from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

from sqlmodel import SQLModel
from taskmatch.core.config import get_settings
from taskmatch.models import *  # noqa: F403

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
settings = get_settings()
config = context.config

config.set_main_option("sqlalchemy.url", str(settings.DATABASE_URL))

# Interpret the config file for Python logging.
# This line sets up loggers basically.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Every table module is imported through taskmatch.models above
target_metadata = SQLModel.metadata


def run_migrations_offline() -> None:
    """
    Run Alembic migrations using the configured SQLAlchemy URL without creating an Engine.

    Configures the Alembic context to render SQL with literal binds and named parameter style, enables type comparison against target metadata, and executes migrations within a transaction so the generated SQL is emitted rather than executed against a live DB.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    Run migrations using a live database connection built from the Alembic configuration.

    Configures the Alembic context with a connection and the module's target metadata, then executes migrations within a transactional boundary.
    """
    configuration = config.get_section(config.config_ini_section, {})

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
