"""Reservation routes.

Customers book and manage their own reservations; staff work the
reservations of their restaurant. Status changes go through
``ReservationService`` which enforces the lifecycle and the role rules.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from app.core.rbac import CurrentUser, RequireStaff, authorize_restaurant_scope
from app.core.responses import success_response
from app.db.session import DbSession
from app.schemas.reservations import (
    DepositRequest,
    ReservationCancel,
    ReservationCreate,
    ReservationResponse,
    ReservationStatusUpdate,
)
from app.services.reservations_service import ReservationService, local_now, parse_reservation_status

logger = logging.getLogger(__name__)

router = APIRouter()


def _serialize(reservations):
    return [ReservationResponse.model_validate(r) for r in reservations]


@router.post("", status_code=201)
def create_reservation(body: ReservationCreate, db: DbSession, current_user: CurrentUser):
    reservation = ReservationService(db).create_reservation(body, current_user)
    return success_response(
        ReservationResponse.model_validate(reservation),
        message="Reservation created",
    )


@router.get("/my")
def my_reservations(
    db: DbSession,
    current_user: CurrentUser,
    status: Optional[str] = None,
    upcoming: bool = False,
):
    """The caller's own reservations, newest slot first."""
    reservations = ReservationService(db).list_reservations(
        user_id=current_user.user_id,
        date_from=local_now().date() if upcoming else None,
        statuses=[parse_reservation_status(status)] if status else None,
        descending=True,
    )
    return success_response(_serialize(reservations))


@router.get("")
def list_reservations(
    db: DbSession,
    current_user: RequireStaff,
    restaurant_id: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    descending: bool = False,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """Reservations of the caller's restaurant. Global admins may pick any restaurant."""
    if not current_user.is_admin:
        authorize_restaurant_scope(current_user, current_user.restaurant_id)
        restaurant_id = current_user.restaurant_id
    reservations = ReservationService(db).list_reservations(
        restaurant_id=restaurant_id,
        date_from=date_from,
        date_to=date_to,
        statuses=[parse_reservation_status(status)] if status else None,
        descending=descending,
        limit=limit,
        offset=offset,
    )
    return success_response(_serialize(reservations))


@router.get("/{reservation_id}")
def get_reservation(reservation_id: str, db: DbSession, current_user: CurrentUser):
    reservation = ReservationService(db).get_reservation(reservation_id, current_user)
    return success_response(ReservationResponse.model_validate(reservation))


@router.patch("/{reservation_id}/status")
def update_reservation_status(
    reservation_id: str,
    body: ReservationStatusUpdate,
    db: DbSession,
    current_user: CurrentUser,
):
    reservation = ReservationService(db).update_reservation_status(
        reservation_id, body.status, current_user
    )
    return success_response(
        ReservationResponse.model_validate(reservation),
        message=f"Reservation {reservation.status.value}",
    )


@router.post("/{reservation_id}/cancel")
def cancel_reservation(
    reservation_id: str,
    db: DbSession,
    current_user: CurrentUser,
    body: Optional[ReservationCancel] = None,
):
    reservation = ReservationService(db).cancel_reservation(
        reservation_id, current_user, reason=body.reason if body else None
    )
    return success_response(
        ReservationResponse.model_validate(reservation),
        message="Reservation cancelled",
    )


@router.post("/{reservation_id}/deposit")
def record_deposit(
    reservation_id: str,
    body: DepositRequest,
    db: DbSession,
    current_user: CurrentUser,
):
    reservation = ReservationService(db).record_deposit(reservation_id, body.amount, current_user)
    return success_response(
        ReservationResponse.model_validate(reservation),
        message="Deposit recorded",
    )
