from datetime import datetime
from app import create_app
from models import db
from models.user import User
from models.dealership import Dealership
from models.customer import Customer
from models.vehicle import Vehicle
from utils.qr import generate_vehicle_qr

app = create_app()


def make_user(username, email, role, password):
    user = User(username=username, email=email, role=role)
    user.set_password(password)
    return user


def create_database():
    with app.app_context():
        # drop and recreate every table
        db.drop_all()
        print("Dropped the old database")
        db.create_all()
        print("Created the new database")

        admin = make_user('admin', 'admin@beforeyousign.com', 'admin', 'admin123')
        db.session.add(admin)

        premium = make_user('premiumauto', 'contact@premiumauto.com', 'dealership', 'dealer123')
        premium.dealership = Dealership(
            business_name='Premium Auto Sales', registration_number='DEAL001', license_number='LIC-2020-001',
            year_established=2015, email='contact@premiumauto.com', phone='+27-11-555-0001',
            address='123 Main Street', city='Johannesburg', postal_code='2000', website='www.premiumauto.com',
            operating_hours='Mon-Fri 8AM-6PM, Sat 9AM-4PM',
            description='Trusted dealership specializing in luxury and premium vehicles',
            certification_status='active'
        )
        city = make_user('citymotors', 'info@citymotors.co.za', 'dealership', 'dealer123')
        city.dealership = Dealership(
            business_name='City Motors', registration_number='DEAL002', license_number='LIC-2019-002',
            year_established=2010, email='info@citymotors.co.za', phone='+27-21-555-0002',
            address='456 Oak Avenue', city='Cape Town', postal_code='8001', website='www.citymotors.co.za',
            operating_hours='Mon-Sat 8AM-5PM',
            description='Family-owned dealership with focus on reliable used cars',
            certification_status='active'
        )
        customer = make_user('johnsmith', 'john.smith@email.com', 'customer', 'customer123')
        customer.customer = Customer(full_name='John Smith', phone='+27-82-555-0001',
                                     address='789 Pine Road', city='Johannesburg', postal_code='2001')
        db.session.add_all([premium, city, customer])
        db.session.flush()

        vehicles = [
            Vehicle(dealership_id=premium.dealership.id, vin='WBA3A5C51CF256789', make='BMW', model='320i',
                    year=2019, mileage=45000, price=385000, color='Black', body_type='sedan', fuel_type='petrol',
                    transmission='automatic', previous_owners=1, plate_number='CA123456',
                    engine_number='N20B20A12345', service_history='Full BMW service history',
                    accident_history='None reported', recall_information='No open recalls'),
            Vehicle(dealership_id=premium.dealership.id, vin='WDD2050042R123456', make='Mercedes-Benz', model='C200',
                    year=2020, mileage=32000, price=459000, color='Silver', body_type='sedan', fuel_type='petrol',
                    transmission='automatic', previous_owners=1, plate_number='GP654321',
                    engine_number='M274920ABC123'),
            Vehicle(dealership_id=city.dealership.id, vin='AHTFR22G906123456', make='Toyota', model='Hilux',
                    year=2018, mileage=98000, price=329000, color='White', body_type='bakkie', fuel_type='diesel',
                    transmission='manual', previous_owners=2, plate_number='WC998877',
                    engine_number='2GD0123456'),
        ]
        db.session.add_all(vehicles)
        db.session.flush()

        # the first two vehicles arrive already verified
        checks = {'vin_verified': True, 'mileage_verified': True, 'ownership_verified': True}
        for vehicle in vehicles[:2]:
            vehicle.approve(admin, 'Seed data', checks)
        for vehicle in vehicles:
            vehicle.qr_code_path = generate_vehicle_qr(vehicle)

        db.session.commit()
        print("Added sample data")
        print("Login details:")
        print("  admin / admin123")
        print("  premiumauto / dealer123")
        print("  citymotors / dealer123")
        print("  johnsmith / customer123")


if __name__ == '__main__':
    create_database()
