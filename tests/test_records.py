"""Tests for income/expense records: validation, ownership, filters and atomic writes."""

import pytest
from sqlalchemy.exc import OperationalError

from balances.services import BalanceStore


@pytest.fixture
def rent(api, alice):
    return api.category(alice, name="Rent", type="expense")


@pytest.fixture
def salary(api, alice):
    return api.category(alice, name="Salary", type="income")


class TestCreate:

    def test_create_expense_returns_numeric_amount(self, api, alice, rent):
        record = api.expense(alice, rent["id"], amount="1200.5", description="January rent")
        assert record["amount"] == 1200.5
        assert isinstance(record["amount"], float)
        assert record["categoryId"] == rent["id"]
        assert record["description"] == "January rent"
        assert record["date"].startswith("2024-01-05")
        assert record["category"] == {"id": rent["id"], "name": "Rent", "type": "expense"}

    def test_amount_accepts_json_numbers(self, api, alice, rent):
        record = api.expense(alice, rent["id"], amount=19.99)
        assert record["amount"] == 19.99

    @pytest.mark.parametrize("amount", [0, "0", -5, "-0.01", "abc", None, True])
    def test_amount_must_be_positive_number(self, client, alice, rent, amount):
        resp = client.post(
            "/expenses",
            json={"categoryId": rent["id"], "amount": amount, "date": "2024-01-05"},
            headers=alice,
        )
        assert resp.status_code == 400

    @pytest.mark.parametrize(
        "payload",
        [
            {"amount": "10", "date": "2024-01-05"},
            {"categoryId": 1, "date": "2024-01-05"},
            {"categoryId": 1, "amount": "10"},
            {"categoryId": 1, "amount": "10", "date": "not a date"},
            {"categoryId": "one", "amount": "10", "date": "2024-01-05"},
            {"categoryId": 1, "amount": "10", "date": "0001-01-01T00:00:00+01:00"},
        ],
    )
    def test_required_fields(self, client, alice, rent, payload):
        resp = client.post("/expenses", json=payload, headers=alice)
        assert resp.status_code == 400

    def test_unknown_category(self, client, alice):
        resp = client.post(
            "/expenses",
            json={"categoryId": 999, "amount": "10", "date": "2024-01-05"},
            headers=alice,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid categoryId: Category does not exist"

    def test_other_users_category_does_not_exist_for_me(self, client, api, bob, rent):
        resp = client.post(
            "/expenses",
            json={"categoryId": rent["id"], "amount": "10", "date": "2024-01-05"},
            headers=bob,
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Invalid categoryId: Category does not exist"

    def test_category_type_must_match_record_kind(self, client, alice, salary):
        resp = client.post(
            "/expenses",
            json={"categoryId": salary["id"], "amount": "10", "date": "2024-01-05"},
            headers=alice,
        )
        assert resp.status_code == 400
        assert "income category" in resp.get_json()["error"]

    def test_requires_authentication(self, client, rent):
        resp = client.post(
            "/expenses", json={"categoryId": rent["id"], "amount": "10", "date": "2024-01-05"}
        )
        assert resp.status_code == 401


class TestListing:

    def test_filters_combine_with_and(self, client, api, alice, rent):
        food = api.category(alice, name="Food", type="expense")
        api.expense(alice, rent["id"], amount="1000", date="2024-01-01")
        api.expense(alice, food["id"], amount="20", date="2024-01-10")
        api.expense(alice, food["id"], amount="30", date="2024-02-10")

        resp = client.get(
            f"/expenses?startDate=2024-01-01&endDate=2024-01-31&categoryId={food['id']}",
            headers=alice,
        )
        data = resp.get_json()["data"]
        assert resp.status_code == 200
        assert [r["amount"] for r in data] == [20.0]

    def test_end_date_includes_the_whole_day(self, client, api, alice, rent):
        api.expense(alice, rent["id"], amount="5", date="2024-01-31T18:00:00")
        data = client.get("/expenses?endDate=2024-01-31", headers=alice).get_json()["data"]
        assert len(data) == 1

    def test_newest_first_with_pagination(self, client, api, alice, rent):
        for day in range(1, 6):
            api.expense(alice, rent["id"], amount=str(day), date=f"2024-03-0{day}")

        page = client.get("/expenses?limit=2&offset=1", headers=alice).get_json()["data"]
        assert [r["amount"] for r in page] == [4.0, 3.0]

    def test_limit_is_capped(self, client, api, alice, rent):
        api.expense(alice, rent["id"])
        resp = client.get("/expenses?limit=1000", headers=alice)
        assert resp.status_code == 200

    def test_bad_query_values(self, client, alice):
        assert client.get("/expenses?limit=abc", headers=alice).status_code == 400
        assert client.get("/expenses?startDate=soon", headers=alice).status_code == 400
        resp = client.get("/expenses?startDate=2024-02-01&endDate=2024-01-01", headers=alice)
        assert resp.status_code == 400


class TestOwnership:

    def test_other_users_records_are_invisible(self, client, api, alice, bob, rent):
        record = api.expense(alice, rent["id"])

        assert client.get("/expenses", headers=bob).get_json()["data"] == []
        assert client.get(f"/expenses/{record['id']}", headers=bob).status_code == 404

    def test_update_and_delete_of_foreign_record_is_not_found(self, client, api, alice, bob, rent):
        record = api.expense(alice, rent["id"])

        put = client.put(f"/expenses/{record['id']}", json={"amount": "1"}, headers=bob)
        delete = client.delete(f"/expenses/{record['id']}", headers=bob)
        missing = client.delete("/expenses/9999", headers=bob)

        assert put.status_code == delete.status_code == missing.status_code == 404
        assert put.get_json() == missing.get_json()

        unchanged = client.get(f"/expenses/{record['id']}", headers=alice).get_json()["data"]
        assert unchanged["amount"] == 1200.0

    def test_invalid_id(self, client, alice):
        assert client.get("/expenses/abc", headers=alice).status_code == 400
        assert client.put("/expenses/0", json={}, headers=alice).status_code == 400
        assert client.delete("/expenses/-3", headers=alice).status_code == 400


class TestUpdate:

    def test_partial_update_only_touches_given_fields(self, client, api, alice, rent):
        record = api.expense(alice, rent["id"], description="old")

        resp = client.put(
            f"/expenses/{record['id']}", json={"description": "updated"}, headers=alice
        )
        updated = resp.get_json()["data"]

        assert resp.status_code == 200
        assert updated["description"] == "updated"
        assert updated["amount"] == record["amount"]
        assert updated["date"] == record["date"]
        assert updated["categoryId"] == record["categoryId"]
        assert updated["createdAt"] == record["createdAt"]
        assert updated["updatedAt"] != record["updatedAt"]

    def test_update_revalidates_amount_and_date(self, client, api, alice, rent):
        record = api.expense(alice, rent["id"])
        url = f"/expenses/{record['id']}"
        assert client.put(url, json={"amount": 0}, headers=alice).status_code == 400
        assert client.put(url, json={"amount": None}, headers=alice).status_code == 400
        assert client.put(url, json={"date": "never"}, headers=alice).status_code == 400

    def test_update_can_move_to_another_owned_category(self, client, api, alice, rent):
        food = api.category(alice, name="Food", type="expense")
        record = api.expense(alice, rent["id"])
        resp = client.put(
            f"/expenses/{record['id']}", json={"categoryId": food["id"]}, headers=alice
        )
        assert resp.get_json()["data"]["category"]["name"] == "Food"

    def test_update_to_missing_category(self, client, api, alice, rent):
        record = api.expense(alice, rent["id"])
        resp = client.put(f"/expenses/{record['id']}", json={"categoryId": 999}, headers=alice)
        assert resp.status_code == 400

    def test_empty_update_returns_record(self, client, api, alice, rent):
        record = api.expense(alice, rent["id"])
        resp = client.put(f"/expenses/{record['id']}", json={}, headers=alice)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["updatedAt"] == record["updatedAt"]


class TestDelete:

    def test_delete_returns_id(self, client, api, alice, rent):
        record = api.expense(alice, rent["id"])
        resp = client.delete(f"/expenses/{record['id']}", headers=alice)
        assert resp.status_code == 200
        assert resp.get_json() == {"data": {"id": record["id"]}}
        assert client.get(f"/expenses/{record['id']}", headers=alice).status_code == 404


class TestIncome:

    def test_income_uses_income_categories(self, client, api, alice, salary, rent):
        record = api.income(alice, salary["id"], amount="5000.00")
        assert record["amount"] == 5000.0
        resp = client.post(
            "/income",
            json={"categoryId": rent["id"], "amount": "1", "date": "2024-01-01"},
            headers=alice,
        )
        assert resp.status_code == 400

    def test_income_and_expenses_are_separate(self, client, api, alice, salary):
        api.income(alice, salary["id"])
        assert client.get("/expenses", headers=alice).get_json()["data"] == []
        assert len(client.get("/income", headers=alice).get_json()["data"]) == 1


class TestBalanceAdjustment:

    def test_income_moves_latest_balance(self, client, api, alice, salary, rent):
        client.post(
            "/balances", json={"amount": "100.00", "currency": "EUR", "date": "2024-01-01"},
            headers=alice,
        )
        api.income(alice, salary["id"], amount="50.25", adjustBalance=True, currency="eur")
        api.expense(alice, rent["id"], amount="20.00", adjustBalance=True, currency="EUR")

        latest = client.get("/balances/latest?currency=EUR", headers=alice).get_json()["data"]
        assert latest["amount"] == 130.25

    def test_without_previous_snapshot_starts_from_zero(self, client, api, alice, rent):
        api.expense(alice, rent["id"], amount="20.00", adjustBalance=True)
        latest = client.get("/balances/latest", headers=alice).get_json()["data"]
        assert latest["amount"] == -20.0
        assert latest["currency"] == "USD"

    def test_failed_balance_write_rolls_back_the_record(self, client, alice, salary, monkeypatch):
        def boom(self, user_id, delta, currency="USD"):
            self.session.flush()
            raise OperationalError("INSERT INTO balances", {}, Exception("disk I/O error"))

        monkeypatch.setattr(BalanceStore, "stage_adjustment", boom)

        resp = client.post(
            "/income",
            json={
                "categoryId": salary["id"],
                "amount": "10",
                "date": "2024-01-01",
                "adjustBalance": True,
            },
            headers=alice,
        )
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Internal storage error"}
        assert client.get("/income", headers=alice).get_json()["data"] == []
        assert client.get("/balances", headers=alice).get_json()["data"] == []

    def test_adjustment_past_column_range_is_rejected(self, client, alice, salary):
        client.post(
            "/balances", json={"amount": "99999999.00", "date": "2024-01-01"}, headers=alice
        )
        resp = client.post(
            "/income",
            json={
                "categoryId": salary["id"],
                "amount": "5.00",
                "date": "2024-01-02",
                "adjustBalance": True,
            },
            headers=alice,
        )
        assert resp.status_code == 400
        assert "balance" in resp.get_json()["error"]
        assert client.get("/income", headers=alice).get_json()["data"] == []
        latest = client.get("/balances/latest", headers=alice).get_json()["data"]
        assert latest["amount"] == 99999999.0

    def test_adjustments_accumulate_past_a_future_dated_snapshot(self, client, api, alice, salary):
        client.post(
            "/balances", json={"amount": "100.00", "date": "2099-01-01"}, headers=alice
        )
        api.income(alice, salary["id"], amount="10.00", adjustBalance=True)
        api.income(alice, salary["id"], amount="5.00", adjustBalance=True)

        latest = client.get("/balances/latest", headers=alice).get_json()["data"]
        assert latest["amount"] == 115.0
        assert latest["date"].startswith("2099-01-01")
