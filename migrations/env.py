import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool, text

# Add the project root to the python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Import the SQLAlchemy models
from fitcoach.core.config import settings
from fitcoach.db.base_class import Base
import fitcoach.models  # noqa

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# MetaData for 'autogenerate' support
target_metadata = Base.metadata


def get_url():
    return settings.database_url


def create_version_table_if_needed(connection):
    """Create the alembic_version table with a longer version_num column, or widen it on PostgreSQL."""
    tables = connection.dialect.get_table_names(connection)
    if 'alembic_version' not in tables:
        connection.execute(text("""
            CREATE TABLE alembic_version (
                version_num VARCHAR(100) NOT NULL PRIMARY KEY
            )
        """))
    elif connection.dialect.name == "postgresql":
        result = connection.execute(text("""
            SELECT character_maximum_length
            FROM information_schema.columns
            WHERE table_name = 'alembic_version'
            AND column_name = 'version_num'
        """))
        current_length = result.fetchone()
        if current_length and current_length[0] < 100:
            connection.execute(text("""
                ALTER TABLE alembic_version
                ALTER COLUMN version_num TYPE VARCHAR(100)
            """))
            connection.commit()


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Configures the context with just a URL, so no DBAPI is needed. Calls to
    context.execute() emit the given string to the script output.
    """
    url = get_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    configuration = config.get_section(config.config_ini_section)
    configuration["sqlalchemy.url"] = get_url()
    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        create_version_table_if_needed(connection)

        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
