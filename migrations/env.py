# migrations/env.py
import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool
from flask import current_app

config = context.config
fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")


# `flask --app armory db ...` runs inside an armory app context; the URL and
# metadata both come from the Flask-Migrate extension registered there.
def _migrate_db():
    return current_app.extensions["migrate"].db


def _database_url() -> str:
    uri = current_app.config.get("SQLALCHEMY_DATABASE_URI")
    if not uri:
        raise RuntimeError("SQLALCHEMY_DATABASE_URI is not set on the armory app")
    return uri


def _configure(**kwargs) -> None:
    url = _database_url()
    context.configure(
        target_metadata=_migrate_db().metadata,
        compare_type=True,
        # SQLite cannot ALTER most columns in place
        render_as_batch=url.startswith("sqlite:"),
        **kwargs,
    )


def run_migrations_offline():
    _configure(url=_database_url(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    section = config.get_section(config.config_ini_section) or {}
    section["sqlalchemy.url"] = _database_url()
    engine = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with engine.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()
    logger.info("armory schema migrated (%s)", engine.url.render_as_string(hide_password=True))


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
