"""Staff dashboard and authorization tests."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token
from app.models.reservations import ReservationStatus
from app.models.restaurant import TableStatus
from app.services.reservations_service import local_now


def _headers(user) -> dict:
    token = create_access_token({"sub": user.id, "email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


class TestUnauthenticatedDenied:
    def test_staff_reservations_requires_token(self, client: TestClient):
        response = client.get("/api/staff/reservations")
        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_staff_tables_requires_token(self, client: TestClient):
        assert client.get("/api/staff/tables").status_code == 401


class TestInvalidToken:
    def test_tampered_token(self, client: TestClient):
        headers = {"Authorization": "Bearer invalid.token.here"}
        assert client.get("/api/staff/reservations", headers=headers).status_code == 401

    def test_expired_token(self, client: TestClient, staff_user):
        token = create_access_token(
            {"sub": staff_user.id, "email": staff_user.email, "role": "staff"},
            expires_delta=timedelta(seconds=-1),
        )
        response = client.get("/api/staff/reservations", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_unknown_role(self, client: TestClient, staff_user):
        token = create_access_token({"sub": staff_user.id, "email": staff_user.email, "role": "chef"})
        response = client.get("/api/staff/reservations", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_deleted_user(self, client: TestClient):
        token = create_access_token({"sub": "ghost", "email": "ghost@example.com", "role": "staff"})
        response = client.get("/api/staff/reservations", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_disabled_user(self, client: TestClient, db_session, staff_user):
        staff_user.is_active = False
        db_session.commit()
        response = client.get("/api/staff/reservations", headers=_headers(staff_user))
        assert response.status_code == 401


class TestRoleGate:
    def test_customer_forbidden(self, client: TestClient, customer_user):
        response = client.get("/api/staff/reservations", headers=_headers(customer_user))
        assert response.status_code == 403

    def test_staff_without_assignment_forbidden(self, client: TestClient, db_session):
        from app.core.rbac import UserRole
        from app.models.user import User
        user = User(email="suelto@example.com", password_hash="x", role=UserRole.STAFF, is_active=True)
        db_session.add(user)
        db_session.commit()
        response = client.get("/api/staff/reservations", headers=_headers(user))
        assert response.status_code == 403


class TestStaffReservations:
    def test_lists_own_restaurant_only(self, client: TestClient, staff_user, other_restaurant, make_reservation):
        mine = make_reservation()
        make_reservation(restaurant_id=other_restaurant.id)
        response = client.get("/api/staff/reservations", headers=_headers(staff_user))
        assert response.status_code == 200
        assert [r["id"] for r in response.json()["data"]] == [mine.id]

    def test_today(self, client: TestClient, staff_user, make_reservation):
        today = local_now().date()
        todays = make_reservation(date=today)
        make_reservation(date=today, status=ReservationStatus.CANCELLED)
        make_reservation(date=today + timedelta(days=1))

        response = client.get("/api/staff/reservations/today", headers=_headers(staff_user))
        assert response.status_code == 200
        assert [r["id"] for r in response.json()["data"]] == [todays.id]


class TestStaffTables:
    def test_list_tables(self, client: TestClient, staff_user, table):
        response = client.get("/api/staff/tables", headers=_headers(staff_user))
        assert response.status_code == 200
        assert [t["id"] for t in response.json()["data"]] == ["abc"]

    def test_seat_and_clear(self, client: TestClient, staff_user, table):
        response = client.patch(
            "/api/staff/tables/abc/status", json={"status": "occupied"}, headers=_headers(staff_user)
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "occupied"

        response = client.patch(
            "/api/staff/tables/abc/status", json={"status": "available"}, headers=_headers(staff_user)
        )
        assert response.json()["data"]["status"] == "available"

    def test_staff_cannot_set_maintenance(self, client: TestClient, staff_user, table):
        response = client.patch(
            "/api/staff/tables/abc/status", json={"status": "maintenance"}, headers=_headers(staff_user)
        )
        assert response.status_code == 403

    def test_staff_of_other_restaurant(self, client: TestClient, other_staff_user, table):
        response = client.patch(
            "/api/staff/tables/abc/status", json={"status": "occupied"}, headers=_headers(other_staff_user)
        )
        assert response.status_code == 403

    def test_invalid_status(self, client: TestClient, staff_user, table):
        response = client.patch(
            "/api/staff/tables/abc/status", json={"status": "dirty"}, headers=_headers(staff_user)
        )
        assert response.status_code == 400


class TestCheckInEndpoint:
    def test_arrive_occupies_table(self, client: TestClient, db_session, staff_user, table, make_reservation):
        reservation = make_reservation(status=ReservationStatus.CONFIRMED, table_id=table.id)
        response = client.patch(
            f"/api/staff/reservations/{reservation.id}/arrive", headers=_headers(staff_user)
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "confirmed"
        assert data["arrived_at"] is not None

        db_session.refresh(table)
        assert table.status == TableStatus.OCCUPIED

    def test_arrive_on_cancelled_is_400(self, client: TestClient, staff_user, make_reservation):
        reservation = make_reservation(status=ReservationStatus.CANCELLED)
        response = client.patch(
            f"/api/staff/reservations/{reservation.id}/arrive", headers=_headers(staff_user)
        )
        assert response.status_code == 400

    def test_arrive_other_restaurant_is_403(self, client: TestClient, other_staff_user, make_reservation):
        reservation = make_reservation(status=ReservationStatus.CONFIRMED)
        response = client.patch(
            f"/api/staff/reservations/{reservation.id}/arrive", headers=_headers(other_staff_user)
        )
        assert response.status_code == 403

    def test_customer_cannot_arrive(self, client: TestClient, customer_user, make_reservation):
        reservation = make_reservation(status=ReservationStatus.CONFIRMED)
        response = client.patch(
            f"/api/staff/reservations/{reservation.id}/arrive", headers=_headers(customer_user)
        )
        assert response.status_code == 403

    def test_arrive_missing(self, client: TestClient, staff_user):
        response = client.patch("/api/staff/reservations/missing/arrive", headers=_headers(staff_user))
        assert response.status_code == 404


class TestAdminOnStaffDashboard:
    @pytest.mark.parametrize("path", ["/api/staff/reservations", "/api/staff/reservations/today", "/api/staff/tables"])
    def test_admin_must_name_restaurant(self, client: TestClient, admin_user, path):
        response = client.get(path, headers=_headers(admin_user))
        assert response.status_code == 400
        assert response.json()["error"] == "restaurant_id is required for global admins"

    def test_admin_with_restaurant(self, client: TestClient, admin_user, restaurant, table, make_reservation):
        mine = make_reservation()
        response = client.get(
            "/api/staff/reservations", params={"restaurant_id": restaurant.id}, headers=_headers(admin_user)
        )
        assert [r["id"] for r in response.json()["data"]] == [mine.id]

        response = client.get(
            "/api/staff/tables", params={"restaurant_id": restaurant.id}, headers=_headers(admin_user)
        )
        assert [t["id"] for t in response.json()["data"]] == ["abc"]
