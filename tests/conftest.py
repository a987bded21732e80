from decimal import Decimal
from itertools import count

import pytest

from supperclub import create_app
from supperclub.config import TestingConfig
from supperclub.extensions import db
from supperclub.models import Booking, Dinner, HostApplication, User


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


class Factory:
    """Small builders for the read models the revenue engine depends on."""

    def __init__(self):
        self._seq = count(1)

    def user(self, role="USER", referral_code=None):
        n = next(self._seq)
        user = User(full_name=f"User {n}", email=f"user{n}@example.com", role=role, referral_code=referral_code)
        db.session.add(user)
        db.session.commit()
        return user

    def moderator(self, referral_code=None):
        return self.user(role="MODERATOR", referral_code=referral_code)

    def host(self, onboarded_by=None, status="APPROVED"):
        host = self.user(role="HOST")
        db.session.add(
            HostApplication(
                user_id=host.id,
                status=status,
                onboarded_by_id=onboarded_by.id if onboarded_by else None,
            )
        )
        db.session.commit()
        return host

    def applicant(self):
        user = self.user()
        application = HostApplication(user_id=user.id, status="PENDING")
        db.session.add(application)
        db.session.commit()
        return user, application

    def dinner(self, host, price="100.00"):
        dinner = Dinner(host_id=host.id, title="Supper", base_price_per_person=Decimal(price))
        db.session.add(dinner)
        db.session.commit()
        return dinner

    def booking(self, dinner, total_price="1000.00", status="CONFIRMED", referral_code_used=None, guest=None):
        guest = guest or self.user()
        booking = Booking(
            dinner_id=dinner.id,
            guest_id=guest.id,
            number_of_guests=1,
            total_price=Decimal(total_price),
            status=status,
            referral_code_used=referral_code_used,
        )
        db.session.add(booking)
        db.session.commit()
        return booking


@pytest.fixture
def factory():
    return Factory()


@pytest.fixture
def login(client):
    def _login(user_id):
        with client.session_transaction() as sess:
            sess["_user_id"] = str(user_id)
            sess["_fresh"] = True

    return _login
