import pytest

from weather_api import create_app
from weather_api.config import TestConfig
from weather_api.extensions import db
from weather_api.services import identity


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def make_account(email, role, password='pass'):
    """Create an account and log it in; returns (user, authentication key)."""
    identity.create_user(email, password, role)
    user = identity.login(email, password)
    return user, user.authentication_key


@pytest.fixture()
def teacher(app):
    return make_account('teacher@example.com', 'Teacher')


@pytest.fixture()
def sensor(app):
    return make_account('sensor@example.com', 'Sensor')


@pytest.fixture()
def normal_user(app):
    return make_account('user@example.com', 'User')


@pytest.fixture()
def teacher_headers(teacher):
    return {'X-AUTH-KEY': teacher[1]}


@pytest.fixture()
def sensor_headers(sensor):
    return {'X-AUTH-KEY': sensor[1]}


@pytest.fixture()
def user_headers(normal_user):
    return {'X-AUTH-KEY': normal_user[1]}
