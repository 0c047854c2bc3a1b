# tests/test_dealership.py
"""Dealership area: submitting vehicles with images, deleting, stats."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import io

from models import db
from models.dealership import Dealership
from models.vehicle import Vehicle
from conftest import vin_for


def vehicle_form(vin, **overrides):
    data = {
        "vin": vin,
        "make": "Toyota",
        "model": "Hilux",
        "year": "2019",
        "mileage": "0",
        "price": "389900",
        "body_type": "bakkie",
        "fuel_type": "diesel",
        "transmission": "manual",
        "plate_number": "ca 123-456",
        "license_number_1": "LIC-1",
    }
    data.update(overrides)
    return data


def png(name="car.png"):
    return (io.BytesIO(b"\x89PNG\r\n\x1a\nfake"), name, "image/png")


class TestAddVehicle:
    def test_submission_stores_images_and_qr(self, app, client, factory, login):
        dealership_id = factory.dealership()
        login("dealer")

        data = vehicle_form(vin_for(5).lower())
        data["vehicle_images"] = [png("front.png"), png("back.png")]
        response = client.post("/dealership/add-vehicle", data=data, content_type="multipart/form-data")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/dealership/vehicles")

        with app.app_context():
            vehicle = Vehicle.query.filter_by(vin=vin_for(5)).one()
            assert vehicle.dealership_id == dealership_id
            assert vehicle.status == "pending_verification"
            assert vehicle.plate_number == "CA 123-456"
            assert vehicle.mileage == 0
            assert vehicle.licenses == ["LIC-1"]
            assert len(vehicle.images) == 2
            assert vehicle.qr_code_path == f"/static/qr-codes/vehicle_{vehicle.id}.png"
            assert os.path.exists(os.path.join(app.config["QR_FOLDER"], f"vehicle_{vehicle.id}.png"))
            for url in vehicle.images:
                name = url.rsplit("/", 1)[1]
                assert os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], name))

    def test_invalid_vin_is_rejected(self, app, client, factory, login):
        factory.dealership()
        login("dealer")

        response = client.post("/dealership/add-vehicle", data=vehicle_form("1HGCM82633A00435I"))
        assert response.status_code == 200
        assert b"Invalid VIN format" in response.data
        with app.app_context():
            assert Vehicle.query.count() == 0

    def test_duplicate_vin_keeps_existing_vehicle(self, app, client, factory, login):
        other = factory.dealership("other")
        factory.vehicle(other, vin=vin_for(9))
        factory.dealership()
        login("dealer")

        response = client.post("/dealership/add-vehicle", data=vehicle_form(vin_for(9)))
        assert response.status_code == 200
        assert b"VIN may already exist" in response.data
        with app.app_context():
            assert Vehicle.query.count() == 1
            assert Vehicle.query.one().dealership_id == other

    def test_too_many_images(self, app, client, factory, login):
        factory.dealership()
        login("dealer")

        data = vehicle_form(vin_for(6))
        data["vehicle_images"] = [png(f"{i}.png") for i in range(11)]
        response = client.post("/dealership/add-vehicle", data=data, content_type="multipart/form-data")
        assert response.status_code == 400
        assert b"Too many files. Maximum is 10 files." in response.data
        with app.app_context():
            assert Vehicle.query.count() == 0

    def test_non_image_upload(self, app, client, factory, login):
        factory.dealership()
        login("dealer")

        data = vehicle_form(vin_for(7))
        data["vehicle_images"] = [(io.BytesIO(b"hello"), "notes.txt", "text/plain")]
        response = client.post("/dealership/add-vehicle", data=data, content_type="multipart/form-data")
        assert response.status_code == 400
        assert b"Only image files are allowed" in response.data
        with app.app_context():
            assert Vehicle.query.count() == 0

    def test_oversized_image(self, app, client, factory, login):
        factory.dealership()
        login("dealer")

        data = vehicle_form(vin_for(8))
        data["vehicle_images"] = [(io.BytesIO(b"0" * (5 * 1024 * 1024 + 1)), "big.jpg", "image/jpeg")]
        response = client.post("/dealership/add-vehicle", data=data, content_type="multipart/form-data")
        assert response.status_code == 400
        assert b"5MB" in response.data


class TestDeleteVehicle:
    def test_owner_deletes_pending_vehicle_and_files(self, app, client, factory, login):
        factory.dealership()
        login("dealer")
        data = vehicle_form(vin_for(11))
        data["vehicle_images"] = [png()]
        client.post("/dealership/add-vehicle", data=data, content_type="multipart/form-data")

        with app.app_context():
            vehicle = Vehicle.query.filter_by(vin=vin_for(11)).one()
            vehicle_id = vehicle.id
            image_name = vehicle.images[0].rsplit("/", 1)[1]
        qr_file = os.path.join(app.config["QR_FOLDER"], f"vehicle_{vehicle_id}.png")
        assert os.path.exists(qr_file)

        response = client.post(f"/dealership/vehicle/{vehicle_id}/delete")
        assert response.status_code == 302
        with app.app_context():
            assert db.session.get(Vehicle, vehicle_id) is None
        assert not os.path.exists(qr_file)
        assert not os.path.exists(os.path.join(app.config["UPLOAD_FOLDER"], image_name))

    def test_verified_vehicle_is_kept(self, app, client, factory, login):
        vehicle_id = factory.vehicle(factory.dealership(), status="verified")
        login("dealer")

        response = client.post(f"/dealership/vehicle/{vehicle_id}/delete", follow_redirects=True)
        assert response.status_code == 200
        assert b"Only vehicles still pending verification can be deleted" in response.data
        with app.app_context():
            assert db.session.get(Vehicle, vehicle_id).status == "verified"

    def test_other_dealerships_vehicle_is_not_found(self, app, client, factory, login):
        vehicle_id = factory.vehicle(factory.dealership("other"))
        factory.dealership()
        login("dealer")

        response = client.post(f"/dealership/vehicle/{vehicle_id}/delete")
        assert response.status_code == 404
        with app.app_context():
            assert db.session.get(Vehicle, vehicle_id) is not None

    def test_other_dealerships_vehicle_is_hidden(self, client, factory, login):
        vehicle_id = factory.vehicle(factory.dealership("other"))
        factory.dealership()
        login("dealer")
        assert client.get(f"/dealership/vehicle/{vehicle_id}").status_code == 404


class TestDealershipStats:
    def test_vehicle_stats(self, app, factory):
        dealership_id = factory.dealership()
        factory.vehicle(dealership_id, status="verified", price=100000)
        factory.vehicle(dealership_id, status="verified", price=50000)
        factory.vehicle(dealership_id, price=70000)
        factory.vehicle(dealership_id, status="rejected", price=10000)

        with app.app_context():
            stats = db.session.get(Dealership, dealership_id).get_vehicle_stats()
            assert stats["total"] == 4
            assert stats["verified"] == 2
            assert stats["pending"] == 1
            assert stats["rejected"] == 1
            assert stats["total_value"] == 150000

    def test_status_filter_on_vehicle_list(self, client, factory, login):
        dealership_id = factory.dealership()
        factory.vehicle(dealership_id, status="verified", make="Nissan")
        factory.vehicle(dealership_id, make="Suzuki")
        login("dealer")

        body = client.get("/dealership/vehicles?status=verified").get_data(as_text=True)
        assert "Nissan" in body
        assert "Suzuki" not in body

    def test_recent_vehicles_api(self, client, factory, login):
        dealership_id = factory.dealership()
        factory.vehicle(dealership_id, status="verified", vin=vin_for(31))
        factory.vehicle(dealership_id, vin=vin_for(32))
        login("dealer")

        rows = client.get("/dealership/api/recent-vehicles").get_json()
        assert [row["vin"] for row in rows] == [vin_for(31)]
        assert rows[0]["business_name"] == "Dealer Motors"

    def test_verification_analytics_covers_recent_months(self, client, factory, login):
        dealership_id = factory.dealership()
        factory.vehicle(dealership_id, status="verified")  # created in 2024, outside the window
        login("dealer")
        client.post("/dealership/add-vehicle", data=vehicle_form(vin_for(33)))

        rows = client.get("/dealership/api/verification-analytics").get_json()
        assert len(rows) == 1
        assert rows[0]["status"] == "pending_verification"
        assert rows[0]["count"] == 1
