import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from config import TestConfig
from extensions import db
from models import Course


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    resp = client.post("/api/auth/login", json={"password": "site-pass"})
    assert resp.status_code == 200
    return client


@pytest.fixture
def admin_client(auth_client):
    resp = auth_client.post("/api/admin/login", json={"password": "admin-pass"})
    assert resp.status_code == 200
    return auth_client


@pytest.fixture
def course(app):
    with app.app_context():
        c = Course(
            name="Python Programming",
            code="PY101",
            duration=6,
            full_fee=50000,
            installment_fee=54000,
            installment1=18000,
            installment2=18000,
        )
        db.session.add(c)
        db.session.commit()
        return c.to_dict()
