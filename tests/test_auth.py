# tests/test_auth.py
"""Registration, login and the per-request role gate."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from models.user import User
from models.dealership import Dealership
from models.customer import Customer


def dealership_registration(username="newdealer", registration_number="CK2024/000001/07", **overrides):
    data = {
        "username": username,
        "email": f"{username}@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
        "business_name": "Northside Auto",
        "registration_number": registration_number,
        "phone": "+27-21-555-0100",
        "address": "12 Main Road",
        "city": "Cape Town",
    }
    data.update(overrides)
    return data


def customer_registration(username="buyer", **overrides):
    data = {
        "username": username,
        "email": f"{username}@example.com",
        "password": "secret123",
        "confirm_password": "secret123",
        "full_name": "Thandi Buyer",
    }
    data.update(overrides)
    return data


class TestRegistration:
    def test_dealership_registration_creates_user_and_profile(self, app, client):
        response = client.post("/register/dealership", data=dealership_registration())
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login")

        with app.app_context():
            user = User.query.filter_by(username="newdealer").one()
            assert user.role == "dealership"
            assert user.password_hash != "secret123"
            assert user.dealership.business_name == "Northside Auto"
            assert user.dealership.certification_status == "pending"

    def test_duplicate_registration_number_writes_nothing(self, app, client, factory):
        factory.dealership("existing", registration_number="CK2024/000001/07")

        response = client.post("/register/dealership", data=dealership_registration())
        assert response.status_code == 200
        assert b"registration number already exists" in response.data
        with app.app_context():
            assert User.query.filter_by(username="newdealer").first() is None
            assert Dealership.query.count() == 1

    def test_password_mismatch_writes_nothing(self, app, client):
        response = client.post("/register/customer",
                               data=customer_registration(confirm_password="different1"))
        assert response.status_code == 200
        assert b"Passwords do not match" in response.data
        with app.app_context():
            assert User.query.count() == 0
            assert Customer.query.count() == 0

    def test_customer_registration(self, app, client):
        response = client.post("/register/customer", data=customer_registration())
        assert response.status_code == 302
        with app.app_context():
            user = User.query.filter_by(username="buyer").one()
            assert user.role == "customer"
            assert user.customer.full_name == "Thandi Buyer"

    def test_duplicate_username(self, app, client, factory):
        factory.customer("buyer")
        response = client.post("/register/customer", data=customer_registration(email="other@example.com"))
        assert response.status_code == 200
        assert b"Username or email already exists" in response.data
        with app.app_context():
            assert User.query.count() == 1


class TestLogin:
    @pytest.mark.parametrize("make_user, username, landing", [
        ("admin", "admin", "/admin/dashboard"),
        ("dealership", "dealer", "/dealership/dashboard"),
        ("customer", "customer", "/customer/dashboard"),
    ])
    def test_login_lands_on_role_dashboard(self, factory, login, make_user, username, landing):
        getattr(factory, make_user)()
        response = login(username)
        assert response.status_code == 302
        assert response.headers["Location"].endswith(landing)

    def test_wrong_password(self, factory, login):
        factory.customer()
        response = login("customer", "not-the-password")
        assert response.status_code == 200
        assert b"Invalid username or password" in response.data

    def test_logout(self, client, factory, login):
        factory.customer()
        login("customer")
        response = client.get("/logout")
        assert response.status_code == 302
        assert client.get("/customer/dashboard").status_code == 302


class TestRoleGate:
    @pytest.mark.parametrize("path", [
        "/admin/dashboard",
        "/dealership/dashboard",
        "/customer/dashboard",
        "/customer/report-dispute",
    ])
    def test_anonymous_is_sent_to_login(self, client, path):
        response = client.get(path)
        assert response.status_code == 302
        assert "/login" in response.headers["Location"]

    @pytest.mark.parametrize("path", ["/admin/dashboard", "/dealership/dashboard", "/dealership/api/recent-vehicles"])
    def test_customer_is_forbidden(self, client, factory, login, path):
        factory.customer()
        login("customer")
        assert client.get(path).status_code == 403

    def test_admin_cannot_use_customer_pages(self, client, factory, login):
        factory.admin()
        login("admin")
        assert client.get("/customer/my-disputes").status_code == 403

    @pytest.mark.parametrize("path", ["/", "/customer/vehicles", "/customer/browse-dealerships",
                                      "/vehicle/search/vin"])
    def test_public_pages(self, client, path):
        assert client.get(path).status_code == 200

    def test_dealership_user_without_profile(self, app, client, login):
        from models import db
        with app.app_context():
            user = User(username="orphan", email="orphan@example.com", role="dealership")
            user.set_password("secret123")
            db.session.add(user)
            db.session.commit()
        login("orphan")
        assert client.get("/dealership/dashboard").status_code == 404
