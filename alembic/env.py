from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Import model metadata for autogenerate support.
# Linters will flag dms.models.* as unused, but we must import it.
from dms.db.base import Base
from dms.db.session import DB_URL
from dms.models import *  # noqa: F401,F403

config = context.config

# Interpret the config file for Python logging.
fileConfig(config.config_file_name)

# Connection settings come from the same DB_* environment variables as the API.
config.set_section_option("alembic", "sqlalchemy.url", DB_URL)

target_metadata = Base.metadata


def run_migrations_offline():
    """Run migrations in 'offline' mode, emitting SQL to the script output instead of connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode against a live connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
