from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine

config = context.config

# The API configures logging itself when it runs migrations at startup
if config.config_file_name and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

load_dotenv()

# postedit.db builds its engine on import and needs a DATABASE_URL by then
_explicit_url = config.get_main_option("sqlalchemy.url") or os.getenv("DB_ADMIN_URL")
if _explicit_url:
    os.environ.setdefault("DATABASE_URL", _explicit_url)

from postedit import models  # noqa: E402,F401  (registers the tables on Base.metadata)
from postedit.db import Base, get_database_url  # noqa: E402

target_metadata = Base.metadata


def get_admin_url() -> str:
    """URL for migrations. DDL may need a more privileged role than the API uses."""
    if _explicit_url:
        return _explicit_url
    return get_database_url()


def run_migrations_offline() -> None:
    url = get_admin_url()

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = get_admin_url()
    connectable = create_engine(url, pool_pre_ping=True)

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
