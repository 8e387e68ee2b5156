"""Restaurant directory tests."""

from datetime import time

from fastapi.testclient import TestClient

from app.core.security import create_access_token
from app.models.reservations import ReservationStatus
from app.models.restaurant import Restaurant, Table, TableStatus


def _headers(user) -> dict:
    token = create_access_token({"sub": user.id, "email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


class TestRestaurantListing:
    def test_list_only_active(self, client: TestClient, db_session, restaurant):
        db_session.add(Restaurant(name="Cerrado", is_active=False))
        db_session.commit()
        response = client.get("/api/restaurants")
        assert response.status_code == 200
        body = response.json()
        assert [r["name"] for r in body["data"]] == ["La Tradición Yucateca"]
        assert body["total"] == 1

    def test_admin_sees_inactive(self, client: TestClient, db_session, admin_user, customer_user, restaurant):
        db_session.add(Restaurant(name="Cerrado", is_active=False))
        db_session.commit()
        response = client.get("/api/restaurants?include_inactive=true", headers=_headers(admin_user))
        assert response.json()["total"] == 2

        response = client.get("/api/restaurants?include_inactive=true", headers=_headers(customer_user))
        assert response.json()["total"] == 1

        response = client.get("/api/restaurants?include_inactive=true", headers={"Authorization": "Bearer nope"})
        assert response.json()["total"] == 1

    def test_filters(self, client: TestClient, restaurant, other_restaurant):
        response = client.get("/api/restaurants?zone=Norte")
        assert [r["name"] for r in response.json()["data"]] == ["Marisquería El Puerto"]

        response = client.get("/api/restaurants?search=yucateca")
        assert [r["id"] for r in response.json()["data"]] == [restaurant.id]

    def test_featured_sorted_by_rating(self, client: TestClient, db_session, restaurant, other_restaurant):
        other_restaurant.rating = 4.8
        restaurant.rating = 4.1
        db_session.commit()
        response = client.get("/api/restaurants/featured")
        assert [r["id"] for r in response.json()["data"]] == [other_restaurant.id, restaurant.id]

    def test_detail(self, client: TestClient, restaurant):
        response = client.get(f"/api/restaurants/{restaurant.id}")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == "La Tradición Yucateca"
        assert data["reviews"] == []

    def test_detail_missing(self, client: TestClient):
        assert client.get("/api/restaurants/missing").status_code == 404


class TestCreateRestaurant:
    def test_admin_creates(self, client: TestClient, admin_user):
        response = client.post(
            "/api/restaurants",
            json={"name": "Cantina La Negrita", "zone": "Centro", "price_range": "$"},
            headers=_headers(admin_user),
        )
        assert response.status_code == 201
        assert response.json()["data"]["is_active"] is True

    def test_owner_cannot_create(self, client: TestClient, owner_user):
        response = client.post(
            "/api/restaurants",
            json={"name": "Otra"},
            headers=_headers(owner_user),
        )
        assert response.status_code == 403

    def test_owner_assigned(self, client: TestClient, admin_user, owner_user):
        response = client.post(
            "/api/restaurants",
            json={"name": "Cantina La Negrita", "owner_id": owner_user.id},
            headers=_headers(admin_user),
        )
        assert response.status_code == 201
        assert response.json()["data"]["owner_id"] == owner_user.id

    def test_unknown_owner_is_404(self, client: TestClient, db_session, admin_user):
        response = client.post(
            "/api/restaurants",
            json={"name": "Fantasma", "owner_id": "nope"},
            headers=_headers(admin_user),
        )
        assert response.status_code == 404
        assert response.json()["error"] == "Owner not found"
        assert db_session.query(Restaurant).filter(Restaurant.name == "Fantasma").count() == 0

    def test_customer_cannot_own_restaurant(self, client: TestClient, admin_user, customer_user):
        response = client.post(
            "/api/restaurants",
            json={"name": "Cocina de Ana", "owner_id": customer_user.id},
            headers=_headers(admin_user),
        )
        assert response.status_code == 400


class TestTableAvailability:
    def test_annotates_tables(self, client: TestClient, db_session, restaurant, table, make_reservation, future_date):
        big = Table(restaurant_id=restaurant.id, number=2, capacity=6)
        broken = Table(restaurant_id=restaurant.id, number=3, capacity=4, status=TableStatus.MAINTENANCE)
        tiny = Table(restaurant_id=restaurant.id, number=4, capacity=2)
        db_session.add_all([big, broken, tiny])
        db_session.commit()
        make_reservation(table_id=table.id, time=time(20, 0))
        make_reservation(table_id=big.id, time=time(20, 0), status=ReservationStatus.CANCELLED)

        response = client.get(
            f"/api/restaurants/{restaurant.id}/tables/available",
            params={"date": future_date.isoformat(), "time": "20:00", "guests": 3},
        )
        assert response.status_code == 200
        body = response.json()
        by_number = {t["number"]: t for t in body["data"]}
        assert set(by_number) == {1, 2, 3}
        assert by_number[1]["availability_status"] == "reserved"
        assert by_number[2]["availability_status"] == "available"
        assert by_number[2]["is_selectable"] is True
        assert by_number[3]["availability_status"] == "blocked"
        assert body["meta"] == {"total_tables": 3, "available_tables": 1}

    def test_requires_slot_parameters(self, client: TestClient, restaurant):
        response = client.get(f"/api/restaurants/{restaurant.id}/tables/available")
        assert response.status_code == 400
