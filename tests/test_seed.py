from conftest import auth
from model import Flight, User
from seed import DEMO_PASSWORD, seed


def test_seed_creates_usable_accounts(app, client):
    assert seed(app) == {"users": 3, "flights": 2}

    with app.app_context():
        assert User.query.count() == 3
        assert all(f.available_seats == f.total_seats for f in Flight.query.all())

    resp = client.post("/login", json={"email": "operator1@example.com", "password": DEMO_PASSWORD})
    assert resp.status_code == 200
    token = resp.get_json()["token"]
    flights = client.get("/fetch-flights").get_json()
    resp = client.put("/update-flight", json={"_id": flights[0]["_id"], "basePrice": 99},
                      headers=auth(token))
    assert resp.status_code == 200
