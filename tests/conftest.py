"""Shared fixtures: an app on an in-memory database and record factories."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta

import pytest

from app import create_app
from config import TestConfig
from models import db
from models.user import User
from models.dealership import Dealership
from models.customer import Customer
from models.vehicle import Vehicle
from models.dispute import Dispute

PASSWORD = "secret123"


def vin_for(n):
    """A valid 17 character VIN that is unique per ``n``."""
    return f"1HGCM8263{n:08d}"


class Factory:
    """Creates rows in their own app context and hands back primary keys."""

    def __init__(self, app):
        self.app = app
        self._vin_counter = 0
        self._base_time = datetime(2024, 1, 1, 12, 0, 0)

    def _user(self, username, role):
        user = User(username=username, email=f"{username}@example.com", role=role)
        user.set_password(PASSWORD)
        return user

    def admin(self, username="admin"):
        with self.app.app_context():
            user = self._user(username, "admin")
            db.session.add(user)
            db.session.commit()
            return user.id

    def dealership(self, username="dealer", registration_number=None, status="active"):
        with self.app.app_context():
            user = self._user(username, "dealership")
            user.dealership = Dealership(
                business_name=f"{username.title()} Motors",
                registration_number=registration_number or f"REG-{username}",
                email=user.email,
                phone="+27-11-555-0000",
                address="1 Test Road",
                city="Johannesburg",
                certification_status=status,
            )
            db.session.add(user)
            db.session.commit()
            return user.dealership.id

    def customer(self, username="customer", with_profile=True):
        with self.app.app_context():
            user = self._user(username, "customer")
            if with_profile:
                user.customer = Customer(full_name=f"{username.title()} Buyer")
            db.session.add(user)
            db.session.commit()
            return user.customer.id if with_profile else user.id

    def vehicle(self, dealership_id, status="pending_verification", vin=None, make="Toyota",
                price=100000, body_type="sedan", minutes=None, **fields):
        self._vin_counter += 1
        if minutes is None:
            minutes = self._vin_counter
        with self.app.app_context():
            vehicle = Vehicle(
                dealership_id=dealership_id,
                vin=vin or vin_for(self._vin_counter),
                make=make,
                model=fields.pop("model", "Corolla"),
                year=fields.pop("year", 2019),
                mileage=fields.pop("mileage", 50000),
                price=price,
                body_type=body_type,
                status=status,
                created_at=self._base_time + timedelta(minutes=minutes),
                **fields
            )
            db.session.add(vehicle)
            db.session.commit()
            return vehicle.id

    def dispute(self, customer_id, vehicle_id, status="submitted"):
        with self.app.app_context():
            dispute = Dispute(customer_id=customer_id, vehicle_id=vehicle_id,
                              discrepancy_type="mileage", description="Odometer reads higher than listed",
                              status=status)
            db.session.add(dispute)
            db.session.commit()
            return dispute.id


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def factory(app):
    return Factory(app)


@pytest.fixture
def login(client):
    def _login(username, password=PASSWORD):
        return client.post("/login", data={"username": username, "password": password})
    return _login
