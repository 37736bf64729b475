from __future__ import annotations

from logging.handlers import RotatingFileHandler

from armory import create_app


def test_config_overrides_win(app):
    assert app.config["TESTING"] is True
    assert app.config["SQLALCHEMY_DATABASE_URI"] == "sqlite:///:memory:"
    assert app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] is False


def test_no_session_secret_is_configured(app):
    # nothing in the ledger signs sessions or cookies
    assert app.config.get("SECRET_KEY") is None


def test_app_log_handler_is_not_duplicated(app):
    create_app({"SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:"})
    file_handlers = [h for h in app.logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].baseFilename.endswith("app.log")
