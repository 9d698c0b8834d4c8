"""
env.py — Alembic environment for GlobeTrotter

The database URL comes from Settings (DATABASE_URL); `alembic -x url=...`
overrides it for one run. All models are registered through
globetrotter.models so autogenerate sees every table.

Business Rules:
- One transaction per migration run
- SQLite runs in batch mode so ALTER TABLE works
- Column type changes are compared during autogenerate

Called by: alembic CLI
Depends on: globetrotter.models (Base), globetrotter.config (Settings)
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from globetrotter.config import Settings
from globetrotter.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

db_url = context.get_x_argument(as_dictionary=True).get("url") or Settings().database_url
config.set_main_option("sqlalchemy.url", db_url)


def _options() -> dict:
    return {
        "target_metadata": Base.metadata,
        "render_as_batch": db_url.startswith("sqlite"),
        "compare_type": True,
    }


def run_offline() -> None:
    """Emit SQL to stdout instead of touching a database."""
    context.configure(url=db_url, literal_binds=True, dialect_opts={"paramstyle": "named"}, **_options())
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    engine = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, **_options())
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
