"""Staff dashboard routes.

Everything here is scoped to the restaurant the caller works at.
"""

from typing import Optional

from fastapi import APIRouter, Query

from app.core.errors import ValidationError
from app.core.rbac import Identity, RequireStaff, authorize_restaurant_scope
from app.core.responses import success_response
from app.db.session import DbSession
from app.schemas.reservations import ReservationResponse
from app.schemas.restaurant import TableResponse, TableStatusUpdate
from app.services.reservations_service import ReservationService, parse_reservation_status
from app.services.table_service import TableService

router = APIRouter()


def _restaurant_of(current_user: Identity, restaurant_id: Optional[str] = None) -> str:
    """The restaurant to operate on: the caller's own, or the one a global admin names."""
    if current_user.is_admin:
        if not restaurant_id:
            raise ValidationError("restaurant_id is required for global admins")
        return restaurant_id
    authorize_restaurant_scope(current_user, current_user.restaurant_id)
    return current_user.restaurant_id


@router.get("/reservations")
def staff_reservations(
    db: DbSession,
    current_user: RequireStaff,
    restaurant_id: Optional[str] = None,
    status: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
):
    reservations = ReservationService(db).list_reservations(
        restaurant_id=_restaurant_of(current_user, restaurant_id),
        statuses=[parse_reservation_status(status)] if status else None,
        limit=limit,
    )
    return success_response([ReservationResponse.model_validate(r) for r in reservations])


@router.get("/reservations/today")
def todays_reservations(
    db: DbSession,
    current_user: RequireStaff,
    restaurant_id: Optional[str] = None,
):
    """Open reservations for today, earliest first."""
    reservations = ReservationService(db).today_reservations(
        _restaurant_of(current_user, restaurant_id)
    )
    return success_response([ReservationResponse.model_validate(r) for r in reservations])


@router.patch("/reservations/{reservation_id}/arrive")
def check_in_reservation(reservation_id: str, db: DbSession, current_user: RequireStaff):
    """Mark the party as arrived and seat them at their table."""
    reservation = ReservationService(db).check_in(reservation_id, current_user)
    return success_response(
        ReservationResponse.model_validate(reservation),
        message="Guests checked in",
    )


@router.get("/tables")
def staff_tables(
    db: DbSession,
    current_user: RequireStaff,
    restaurant_id: Optional[str] = None,
):
    tables = TableService(db).list_tables(_restaurant_of(current_user, restaurant_id))
    return success_response([TableResponse.model_validate(t) for t in tables])


@router.patch("/tables/{table_id}/status")
def staff_set_table_status(
    table_id: str,
    body: TableStatusUpdate,
    db: DbSession,
    current_user: RequireStaff,
):
    """Seat or clear a table."""
    table = TableService(db).set_status(table_id, body.status, current_user)
    return success_response(
        TableResponse.model_validate(table),
        message=f"Table {table.number} is now {table.status.value}",
    )
