# armory/__init__.py
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

from dotenv import load_dotenv
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# ---------------------------------------------------------------------------
# Extension instances (singletons shared across the app)
# ---------------------------------------------------------------------------
db: SQLAlchemy = SQLAlchemy()
migrate: Migrate = Migrate()


def _app_log_path(app: Flask) -> str:
    log_directory = os.getenv("ARMORY_LOG_DIR") or os.path.join(app.root_path, "..", "logs")
    os.makedirs(log_directory, exist_ok=True)
    return os.path.realpath(os.path.join(log_directory, "app.log"))


def _configure_logging(app: Flask) -> None:
    """Send the app logger (store rollbacks, startup) to logs/app.log."""

    log_path = _app_log_path(app)
    app.logger.setLevel(logging.INFO)

    # app.logger is shared by every app built in one process (tests, CLI)
    for existing in app.logger.handlers:
        if getattr(existing, "baseFilename", None) == log_path:
            return

    handler = RotatingFileHandler(log_path, maxBytes=1_048_576, backupCount=5, encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    app.logger.addHandler(handler)


def create_app(config_overrides: dict | None = None) -> Flask:
    """Application factory used by the CLI, migrations, and tests."""

    load_dotenv()

    app = Flask(
        __name__,
        instance_relative_config=True,  # instance/ holds the local sqlite file
    )

    _configure_logging(app)

    os.makedirs(app.instance_path, exist_ok=True)
    default_db = os.getenv("DATABASE_URL") or f"sqlite:///{os.path.join(app.instance_path, 'armory.db')}"

    app.config.update(
        SQLALCHEMY_DATABASE_URI=default_db,
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
    )

    if config_overrides:
        app.config.update(config_overrides)

    # --- Init extensions -----------------------------------------------------
    db.init_app(app)

    # Import models after the database has been initialized so Alembic can
    # detect metadata from the same SQLAlchemy instance.
    from . import models  # noqa: F401

    migrate.init_app(app, db)

    app.logger.info("armory app created (db=%s)", app.config["SQLALCHEMY_DATABASE_URI"])
    return app


__all__ = ["create_app", "db", "migrate"]
