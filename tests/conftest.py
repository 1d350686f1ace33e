import itertools

import pytest
from cryptography.fernet import Fernet

from app import create_app
from database.db import db
from flows import booking as booking_flow
from models import Service, User
from utils.auth import generate_token

PASSWORD = "secret123"
CARD_NUMBER = "12345678901234"


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret-key",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "ENCRYPTION_KEY": Fernet.generate_key().decode(),
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def auth_header(user):
    return {"Authorization": f"Bearer {generate_token(user)}"}


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(role="customer", name=None):
        n = next(counter)
        user = User(
            name=name or f"{role.title()} {n}",
            email=f"{role}{n}@example.com",
            number="01700000000",
            address="House 1, Road 2, Dhaka",
            role=role,
        )
        user.set_password(PASSWORD)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_service(app):
    def _make(vendor, price=5000, availability="Yes", category="Photography", name=None):
        service = Service(
            organization_name=name or f"{vendor.name} {category}",
            category=category,
            price=price,
            availability=availability,
            description="Event coverage with two photographers.",
            vendor_id=vendor.id,
            vendor_name=vendor.name,
        )
        db.session.add(service)
        db.session.commit()
        return service

    return _make


@pytest.fixture
def make_booking(app):
    """Book ``service`` for ``customer`` even if an earlier booking took it."""
    def _make(customer, service):
        service.availability = "Yes"
        db.session.commit()
        return booking_flow.create_booking(customer.id, service.id)

    return _make
