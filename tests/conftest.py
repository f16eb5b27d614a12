import pytest

from app import create_app
from config import TestConfig
from models import close_storage


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    close_storage(app)


@pytest.fixture
def client(app):
    return app.test_client()


class Api:
    """Small helper around the test client for setting up ledger data."""

    def __init__(self, client):
        self.client = client

    def register(self, email="a@x.com", password="secret1", name="Alice"):
        resp = self.client.post(
            "/auth/register", json={"email": email, "password": password, "name": name}
        )
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return {"Authorization": f"Bearer {body['token']}"}, body["user"]

    def category(self, headers, name="Salary", type="income"):
        resp = self.client.post("/categories", json={"name": name, "type": type}, headers=headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    def income(self, headers, category_id, amount="5000.00", date="2024-01-01", **extra):
        payload = {"categoryId": category_id, "amount": amount, "date": date, **extra}
        resp = self.client.post("/income", json=payload, headers=headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]

    def expense(self, headers, category_id, amount="1200.00", date="2024-01-05", **extra):
        payload = {"categoryId": category_id, "amount": amount, "date": date, **extra}
        resp = self.client.post("/expenses", json=payload, headers=headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["data"]


@pytest.fixture
def api(client):
    return Api(client)


@pytest.fixture
def alice(api):
    headers, _user = api.register()
    return headers


@pytest.fixture
def bob(api):
    headers, _user = api.register(email="b@x.com", password="secret2", name="Bob")
    return headers
