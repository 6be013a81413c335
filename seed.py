from datetime import date, timedelta

from werkzeug.security import generate_password_hash

from app import create_app
from model import Flight, User, db

DEMO_PASSWORD = "1234567"


def seed(app):
    with app.app_context():
        db.drop_all()  # clear the old database
        db.create_all()

        admin = User(username="admin", email="admin@example.com", usertype="admin",
                     password=generate_password_hash(DEMO_PASSWORD), approval="approved")
        operator = User(username="operator1", email="operator1@example.com", usertype="flight-operator",
                        password=generate_password_hash(DEMO_PASSWORD), approval="approved")
        traveler = User(username="elina", email="elina@example.com", usertype="traveler",
                        password=generate_password_hash(DEMO_PASSWORD), approval="approved")
        db.session.add_all([admin, operator, traveler])

        soon = date.today() + timedelta(days=14)
        flights = [
            Flight(flight_name="AirFrance", flight_code="AF1145", origin="Moscow", destination="Paris",
                   departure_time="10:00", arrival_time="14:30", journey_date=soon,
                   base_price=300, total_seats=50, available_seats=50),
            Flight(flight_name="AirFrance", flight_code="AF1844", origin="Paris", destination="Moscow",
                   departure_time="16:00", arrival_time="22:15", journey_date=soon + timedelta(days=5),
                   base_price=250, total_seats=30, available_seats=30),
        ]
        db.session.add_all(flights)
        db.session.commit()
        return {"users": 3, "flights": len(flights)}


if __name__ == "__main__":
    counts = seed(create_app())
    print(f"Seeded {counts['users']} users and {counts['flights']} flights. "
          f"Logins: admin@example.com / operator1@example.com / elina@example.com, password {DEMO_PASSWORD}")
