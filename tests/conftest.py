import pytest

from spendtrack import create_app
from spendtrack.config import TestConfig
from spendtrack.extensions import db
from spendtrack.models import User


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def user_id(app):
    with app.app_context():
        user = User(name="Asha", email="asha@example.com")
        user.set_password("secret")
        db.session.add(user)
        db.session.commit()
        return user.id


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def logged_in(client, user_id):
    resp = client.post("/auth/login", data={"email": "asha@example.com", "password": "secret"})
    assert resp.status_code == 302
    return client


