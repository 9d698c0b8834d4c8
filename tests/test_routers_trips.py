"""
test_routers_trips.py — Tests for trip CRUD, itinerary stops, expenses,
budget and share links.

Called by: pytest
Depends on: globetrotter/routers/trips.py, conftest.py
"""

from datetime import date

import pytest

from globetrotter.models import Expense, Trip
from globetrotter.services.trip_service import trip_duration_days


@pytest.fixture()
def foreign_trip(db_session, other_user):
    trip = Trip(
        user_id=other_user.id,
        name="Someone else's trip",
        start_date=date(2030, 1, 1),
        end_date=date(2030, 1, 5),
    )
    db_session.add(trip)
    db_session.commit()
    return trip


# ── Trip CRUD ────────────────────────────────────────────────────────


class TestTripCrud:
    def test_create_trip(self, client, test_user):
        resp = client.post("/api/trips", json={
            "name": "  Weekend in Rome ", "start_date": "2031-03-01", "end_date": "2031-03-03",
        })
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Weekend in Rome"
        assert body["user_id"] == test_user.id
        assert body["status"] == "upcoming"
        assert body["stops"] == []
        assert body["is_locked"] is False

    def test_create_rejects_end_before_start(self, client):
        resp = client.post("/api/trips", json={
            "name": "Backwards", "start_date": "2031-03-05", "end_date": "2031-03-01",
        })
        assert resp.status_code == 400
        assert resp.json()["error"] == "Validation error"

    def test_create_rejects_same_day(self, client):
        resp = client.post("/api/trips", json={
            "name": "Blink", "start_date": "2031-03-05", "end_date": "2031-03-05",
        })
        assert resp.status_code == 400

    def test_list_only_own_trips_newest_first(self, client, db_session, test_user, test_trip, foreign_trip):
        db_session.add(Trip(
            user_id=test_user.id, name="Earlier", start_date=date(2029, 1, 1), end_date=date(2029, 1, 3),
        ))
        db_session.commit()
        names = [t["name"] for t in client.get("/api/trips").json()]
        assert names == ["Summer in Paris", "Earlier"]

    def test_get_includes_stops_and_activities(self, client, test_trip):
        body = client.get(f"/api/trips/{test_trip.id}").json()
        assert body["stops"][0]["city"]["name"] == "Paris"
        assert body["stops"][0]["activities"][0]["name"] == "Eiffel Tower"

    def test_other_users_trip_forbidden(self, client, foreign_trip):
        assert client.get(f"/api/trips/{foreign_trip.id}").status_code == 403
        assert client.delete(f"/api/trips/{foreign_trip.id}").status_code == 403

    def test_missing_trip_404(self, client):
        assert client.get("/api/trips/99999").status_code == 404

    def test_update_trip(self, client, test_trip):
        resp = client.put(f"/api/trips/{test_trip.id}", json={"name": "Paris Again", "status": "ongoing"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Paris Again"
        assert resp.json()["status"] == "ongoing"
        assert resp.json()["start_date"] == "2030-06-01"

    def test_update_rejects_end_before_existing_start(self, client, test_trip):
        resp = client.put(f"/api/trips/{test_trip.id}", json={"end_date": "2030-05-01"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "End date must be after start date"

    def test_delete_trip(self, client, db_session, test_trip):
        assert client.delete(f"/api/trips/{test_trip.id}").json() == {"success": True}
        assert db_session.get(Trip, test_trip.id) is None


class TestLockedTrip:
    @pytest.fixture(autouse=True)
    def _lock(self, db_session, test_trip):
        test_trip.is_locked = True
        db_session.commit()

    def test_owner_cannot_edit(self, client, test_trip):
        resp = client.put(f"/api/trips/{test_trip.id}", json={"name": "Sneaky"})
        assert resp.status_code == 403
        assert resp.json()["error"] == "Trip is locked and cannot be edited"

    def test_owner_cannot_delete(self, client, test_trip):
        assert client.delete(f"/api/trips/{test_trip.id}").status_code == 403

    def test_owner_cannot_replace_stops(self, client, test_trip):
        assert client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": []}).status_code == 403

    def test_admin_can_replace_stops(self, admin_client, test_trip, second_city):
        resp = admin_client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {"city_id": second_city.id, "start_date": "2030-06-02", "end_date": "2030-06-05"},
        ]})
        assert resp.status_code == 200
        assert [s["city_id"] for s in resp.json()["stops"]] == [second_city.id]


# ── Stops ────────────────────────────────────────────────────────────


class TestReplaceStops:
    def test_replaces_every_stop(self, client, test_trip, test_city, second_city):
        eiffel = test_city.attractions[0]
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {
                "city_id": second_city.id, "start_date": "2030-06-01", "end_date": "2030-06-05",
                "activities": [
                    {"attraction_id": "custom", "name": "Pasta class", "cost": "45"},
                ],
            },
            {
                "city_id": test_city.id, "start_date": "2030-06-05", "end_date": "2030-06-10",
                "notes": "Back to Paris",
                "activities": [
                    {"attraction_id": eiffel.id, "name": "Eiffel Tower", "cost": "free", "duration": "abc"},
                ],
            },
        ]})
        assert resp.status_code == 200
        stops = resp.json()["stops"]
        assert [s["city_id"] for s in stops] == [second_city.id, test_city.id]
        assert [s["order"] for s in stops] == [1, 2]

        custom = stops[0]["activities"][0]
        assert custom["is_custom"] is True
        assert custom["attraction_id"] is None
        assert custom["cost"] == 45

        linked = stops[1]["activities"][0]
        assert linked["is_custom"] is False
        assert linked["attraction_id"] == eiffel.id
        assert linked["cost"] == 0
        assert linked["duration"] is None

        saved = client.get(f"/api/trips/{test_trip.id}").json()["stops"]
        assert len(saved) == 2

    def test_unknown_attraction_becomes_unlinked(self, client, test_trip, test_city):
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {"city_id": test_city.id, "start_date": "2030-06-01", "end_date": "2030-06-02",
             "activities": [{"attraction_id": 99999, "name": "Gone"}]},
        ]})
        activity = resp.json()["stops"][0]["activities"][0]
        assert activity["attraction_id"] is None
        assert activity["is_custom"] is False

    def test_fractional_duration_truncated(self, client, test_trip, test_city):
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {"city_id": test_city.id, "start_date": "2030-06-01", "end_date": "2030-06-02",
             "activities": [{"attraction_id": "custom", "name": "Walk", "duration": 90.5, "cost": 12.5}]},
        ]})
        assert resp.status_code == 200
        activity = resp.json()["stops"][0]["activities"][0]
        assert activity["duration"] == 90
        assert activity["cost"] == 12.5

    def test_explicit_zero_order_kept(self, client, test_trip, test_city):
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {"city_id": test_city.id, "start_date": "2030-06-01", "end_date": "2030-06-02", "order": 0},
        ]})
        assert resp.status_code == 200
        assert resp.json()["stops"][0]["order"] == 0

    def test_empty_list_clears_itinerary(self, client, test_trip):
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": []})
        assert resp.json() == {"stops": []}

    def test_unknown_city_keeps_existing_stops(self, client, test_trip, test_city):
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {"city_id": 99999, "start_date": "2030-06-01", "end_date": "2030-06-02"},
        ]})
        assert resp.status_code == 404
        assert resp.json()["error"] == "City not found: 99999"
        saved = client.get(f"/api/trips/{test_trip.id}").json()["stops"]
        assert [s["city_id"] for s in saved] == [test_city.id]

    def test_stop_ending_before_start_rejected(self, client, test_trip, test_city):
        resp = client.post(f"/api/trips/{test_trip.id}/stops", json={"stops": [
            {"city_id": test_city.id, "start_date": "2030-06-05", "end_date": "2030-06-02"},
        ]})
        assert resp.status_code == 400


# ── Expenses & Budget ────────────────────────────────────────────────


class TestExpenses:
    def test_add_list_delete(self, client, test_trip):
        resp = client.post(f"/api/trips/{test_trip.id}/expenses", json={
            "description": "Hotel", "amount": 120, "category": "accommodation",
            "date": "2030-06-01", "currency": "eur",
        })
        assert resp.status_code == 201
        expense = resp.json()
        assert expense["currency"] == "EUR"
        assert expense["trip_id"] == test_trip.id

        listed = client.get(f"/api/trips/{test_trip.id}/expenses").json()
        assert [e["id"] for e in listed] == [expense["id"]]

        assert client.delete(f"/api/trips/{test_trip.id}/expenses/{expense['id']}").json() == {"success": True}
        assert client.get(f"/api/trips/{test_trip.id}/expenses").json() == []

    def test_invalid_category_rejected(self, client, test_trip):
        resp = client.post(f"/api/trips/{test_trip.id}/expenses", json={
            "description": "Casino", "amount": 10, "category": "gambling", "date": "2030-06-01",
        })
        assert resp.status_code == 400

    def test_negative_amount_rejected(self, client, test_trip):
        resp = client.post(f"/api/trips/{test_trip.id}/expenses", json={
            "description": "Refund", "amount": -5, "category": "other", "date": "2030-06-01",
        })
        assert resp.status_code == 400

    def test_delete_expense_of_other_trip_404(self, client, db_session, test_trip, foreign_trip):
        foreign_trip.expenses.append(Expense(
            category="meals", amount=10, description="Lunch", date=date(2030, 1, 2),
        ))
        db_session.commit()
        expense_id = foreign_trip.expenses[0].id
        resp = client.delete(f"/api/trips/{test_trip.id}/expenses/{expense_id}")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Expense not found"


class TestBudget:
    def test_budget_totals(self, client, db_session, test_trip):
        test_trip.expenses.append(Expense(
            category="accommodation", amount=100, description="Hotel", date=date(2030, 6, 1),
        ))
        test_trip.expenses.append(Expense(
            category="meals", amount=50, description="Dinner", date=date(2030, 6, 2),
        ))
        db_session.commit()

        budget = client.get(f"/api/trips/{test_trip.id}/budget").json()
        assert budget["expenses_total"] == 150
        assert budget["activities_total"] == 30
        # 3 nights in Paris at cost index 75
        assert budget["city_costs_total"] == 225
        assert budget["total"] == 405
        assert budget["duration_days"] == 9
        assert budget["average_per_day"] == pytest.approx(150 / 9)
        assert budget["by_category"] == {"accommodation": 100, "meals": 50}
        assert sorted(b["label"] for b in budget["chart"]["bars"]) == ["Accommodation", "Meals"]

    def test_empty_trip_budget(self, client, db_session, test_user):
        trip = Trip(user_id=test_user.id, name="Bare", start_date=date(2030, 1, 1), end_date=date(2030, 1, 2))
        db_session.add(trip)
        db_session.commit()
        budget = client.get(f"/api/trips/{trip.id}/budget").json()
        assert budget["total"] == 0
        assert budget["chart"]["bars"] == []


def test_trip_duration_days():
    assert trip_duration_days(date(2030, 6, 1), date(2030, 6, 10)) == 9
    assert trip_duration_days(date(2030, 6, 10), date(2030, 6, 1)) == 9
    assert trip_duration_days(None, date(2030, 6, 1)) == 0


# ── Sharing ──────────────────────────────────────────────────────────


class TestShare:
    def test_create_is_idempotent(self, client, test_trip):
        first = client.post(f"/api/trips/{test_trip.id}/share", json={}).json()
        assert first["is_shared"] is True
        assert len(first["share_id"]) == 24
        second = client.post(f"/api/trips/{test_trip.id}/share", json={"action": "create"}).json()
        assert second["share_id"] == first["share_id"]
        assert client.get(f"/api/trips/{test_trip.id}/share").json() == first

    def test_remove_via_action(self, client, test_trip):
        client.post(f"/api/trips/{test_trip.id}/share", json={})
        resp = client.post(f"/api/trips/{test_trip.id}/share", json={"action": "remove"}).json()
        assert resp["is_shared"] is False
        assert resp["share_id"] is None

    def test_remove_via_delete(self, client, test_trip):
        client.post(f"/api/trips/{test_trip.id}/share", json={})
        assert client.delete(f"/api/trips/{test_trip.id}/share").json() == {"success": True}
        assert client.get(f"/api/trips/{test_trip.id}/share").json()["is_shared"] is False

    def test_unknown_action_rejected(self, client, test_trip):
        assert client.post(f"/api/trips/{test_trip.id}/share", json={"action": "explode"}).status_code == 400

    def test_only_owner_can_share(self, client, foreign_trip):
        assert client.post(f"/api/trips/{foreign_trip.id}/share", json={}).status_code == 403
