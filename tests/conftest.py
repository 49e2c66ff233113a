"""Shared fixtures: a Flask app on in-memory SQLite with fresh tables per test."""

import pytest
from sqlalchemy.exc import OperationalError

import models  # noqa: F401

from src.config import TestConfig
from src.extensions import db
from src.main import create_app


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def invoice_draft():
    return {
        "customer_name": "Asha Traders",
        "customer_mobile": "9876543210",
        "customer_address": "12 Market Road, Chennai",
        "items": [
            {"item_name": "Steel rod", "quantity": 2, "unit_price": "100.00", "cgst_rate": "9", "sgst_rate": "9"},
            {"item_name": "Cement bag", "quantity": 1, "unit_price": "100.00", "cgst_rate": "9", "sgst_rate": "9"},
        ],
    }


class FailingCommitSession:
    """Wraps the real session; flushes on commit, then fails like a lost connection."""

    def __init__(self, session):
        self._session = session
        self.commits = 0

    def __getattr__(self, name):
        return getattr(self._session, name)

    def commit(self):
        self.commits += 1
        self._session.flush()
        raise OperationalError("COMMIT", {}, Exception("server closed the connection unexpectedly"))


@pytest.fixture()
def failing_session(app):
    return FailingCommitSession(db.session)
