import pytest

from app import create_app
from model import db


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


FLIGHT = {
    "flightName": "AirFrance",
    "flightId": "AF1145",
    "origin": "Moscow",
    "destination": "Paris",
    "departureTime": "10:00",
    "arrivalTime": "14:30",
    "basePrice": 300,
    "totalSeats": 10,
    "journeyDate": "2030-10-10",
}


def auth(token):
    return {"x-auth-token": token}


def register(client, username, usertype="traveler", password="secret123"):
    resp = client.post("/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "usertype": usertype,
        "password": password,
    })
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def login(client, username, password="secret123"):
    return client.post("/login", json={"email": f"{username}@example.com", "password": password})


@pytest.fixture
def admin_token(client):
    return register(client, "admin", "admin")["token"]


@pytest.fixture
def traveler(client):
    data = register(client, "elina")
    return {"token": data["token"], "id": data["user"]["_id"]}


@pytest.fixture
def operator_token(client, admin_token):
    data = register(client, "operator1", "flight-operator")
    client.post("/approve-operator", json={"id": data["user"]["_id"]}, headers=auth(admin_token))
    return login(client, "operator1").get_json()["token"]


@pytest.fixture
def flight(client, operator_token):
    resp = client.post("/add-flight", json=FLIGHT, headers=auth(operator_token))
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["flight"]


def book(client, token, flight_id, count, seat_class="economy"):
    return client.post("/book-ticket", json={
        "flightId": flight_id,
        "passengers": [{"name": f"Passenger {i + 1}", "age": 30} for i in range(count)],
        "seatClass": seat_class,
        "mobile": "+33 1 00 00 00",
    }, headers=auth(token))
