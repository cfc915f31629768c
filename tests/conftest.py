import itertools

import pytest
from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash

from lendify import create_app
from lendify.config import TestingConfig
from lendify.extensions import db
from lendify.models.item import Item
from lendify.models.user import User, ROLE_ADMIN, ROLE_STUDENT


_seq = itertools.count(1)


@pytest.fixture
def app(tmp_path):
    class _Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'lendify.db'}"

    app = create_app(_Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(role=ROLE_STUDENT, password="secret", **overrides):
        n = next(_seq)
        fields = dict(
            name=f"User {n}",
            student_id=f"S{n:05d}",
            email=f"user{n}@campus.test",
            password_hash=generate_password_hash(password),
            role=role,
        )
        fields.update(overrides)
        user = User(**fields)
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_item(app):
    def _make_item(stock=1, **overrides):
        n = next(_seq)
        fields = dict(
            name=f"Item {n}",
            category="Audio",
            location="Room 101",
            stock=stock,
            status=Item.status_for(stock),
        )
        fields.update(overrides)
        item = Item(**fields)
        db.session.add(item)
        db.session.commit()
        return item
    return _make_item


@pytest.fixture
def student(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role=ROLE_ADMIN)


def auth_headers(user):
    token = create_access_token(identity=str(user.id), additional_claims={"role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers(app):
    return auth_headers
