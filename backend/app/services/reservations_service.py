"""Reservation workflow.

Lifecycle::

    pending --> confirmed --> completed
       |            |
       +------------+-----> cancelled

``completed`` and ``cancelled`` are terminal. Who may apply a transition:

* customers may cancel their own pending reservations;
* staff and restaurant admins may confirm, complete or cancel any
  reservation of their restaurant;
* global admins may apply any legal transition.

Checking a party in records ``arrived_at`` and occupies its table without
leaving the four statuses.

Dates and times are restaurant-local (``settings.timezone``).
"""

import logging
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Callable, Iterable, Iterator, Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from app.core.rbac import Identity, UserRole, authorize_restaurant_scope
from app.core.security import generate_qr_code
from app.models.reservations import (
    OPEN_STATUSES,
    TERMINAL_STATUSES,
    Reservation,
    ReservationStatus,
)
from app.models.restaurant import Restaurant, Table, TableStatus
from app.schemas.reservations import ReservationCreate

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.COMPLETED, ReservationStatus.CANCELLED}),
    ReservationStatus.COMPLETED: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}

VALID_STATUSES = [s.value for s in ReservationStatus]


def local_now() -> datetime:
    """Current time in the restaurants' timezone."""
    return datetime.now(ZoneInfo(settings.timezone))


def parse_reservation_status(value) -> ReservationStatus:
    try:
        return ReservationStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}")


def validate_transition(current: ReservationStatus, new: ReservationStatus) -> None:
    """Raise InvalidTransitionError unless ``current -> new`` is an edge of the lifecycle."""
    if current in TERMINAL_STATUSES:
        raise InvalidTransitionError(
            f"Reservation is already {current.value} and cannot be changed"
        )
    if new not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot change reservation from {current.value} to {new.value}"
        )


class ReservationService:
    """Manage restaurant reservations."""

    def __init__(self, db: Session, now: Callable[[], datetime] = local_now):
        self.db = db
        self._now = now

    def _get(self, reservation_id: str) -> Reservation:
        reservation = self.db.query(Reservation).filter(Reservation.id == reservation_id).first()
        if not reservation:
            raise NotFoundError("Reservation not found")
        return reservation

    def _check_access(self, reservation: Reservation, actor: Identity) -> None:
        """Owner, staff of the reservation's restaurant, or a global admin."""
        if actor.is_admin:
            return
        if actor.is_restaurant_member:
            authorize_restaurant_scope(actor, reservation.restaurant_id)
            return
        if reservation.user_id != actor.user_id:
            raise ForbiddenError("You do not have access to this reservation")

    def get_reservation(self, reservation_id: str, actor: Identity) -> Reservation:
        reservation = self._get(reservation_id)
        self._check_access(reservation, actor)
        return reservation

    def create_reservation(
        self,
        data: ReservationCreate,
        actor: Optional[Identity] = None,
    ) -> Reservation:
        """Book a slot. The new reservation is always ``pending``.

        Raises:
            ValidationError: bad guest count, past slot, closed hours, or a
                table that cannot take the party.
            NotFoundError: unknown or inactive restaurant, or a table that
                is not part of it.
            ConflictError: the table already holds an open reservation for
                the same date and time.
        """
        if data.guest_count < 1:
            raise ValidationError("Guest count must be at least 1")

        restaurant = self.db.query(Restaurant).filter(
            Restaurant.id == data.restaurant_id,
            Restaurant.is_active.is_(True),
        ).first()
        if not restaurant:
            raise NotFoundError("Restaurant not found")

        if actor is not None and actor.is_restaurant_member:
            authorize_restaurant_scope(actor, restaurant.id)

        now = self._now()
        if data.date < now.date():
            raise ValidationError("Reservation date cannot be in the past")
        if data.date == now.date() and data.time < now.time():
            raise ValidationError("Reservation time has already passed")
        if not restaurant.is_open_at(data.time):
            raise ValidationError("Restaurant is closed at the requested time")

        table = None
        if data.table_id:
            table = self._bookable_table(restaurant.id, data.table_id, data.date, data.time, data.guest_count)

        customer_name = data.customer_name or (actor.name if actor else None)
        if not customer_name:
            raise ValidationError("customer_name is required")

        reservation = Reservation(
            restaurant_id=restaurant.id,
            table_id=table.id if table else None,
            user_id=actor.user_id if actor and actor.role == UserRole.CUSTOMER else None,
            customer_name=customer_name,
            email=data.email or (actor.email if actor else None),
            phone=data.phone,
            date=data.date,
            time=data.time,
            guest_count=data.guest_count,
            occasion=data.occasion,
            special_request=data.special_request,
            status=ReservationStatus.PENDING,
            deposit_paid=False,
            qr_code=generate_qr_code(),
        )
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)

        logger.info(
            f"Reservation {reservation.id} created at restaurant {restaurant.id} "
            f"for {reservation.date} {reservation.time} ({reservation.guest_count} guests)"
        )
        return reservation

    def _bookable_table(
        self,
        restaurant_id: str,
        table_id: str,
        on_date: date,
        at_time: time,
        guest_count: int,
    ) -> Table:
        table = self.db.query(Table).filter(
            Table.id == table_id,
            Table.restaurant_id == restaurant_id,
        ).first()
        if not table:
            raise NotFoundError("Table not found in this restaurant")
        if table.status == TableStatus.MAINTENANCE:
            raise ValidationError(f"Table {table.number} is under maintenance")
        if table.capacity < guest_count:
            raise ValidationError(f"Table {table.number} seats at most {table.capacity} guests")

        clash = self.db.query(Reservation.id).filter(
            Reservation.table_id == table.id,
            Reservation.date == on_date,
            Reservation.time == at_time,
            Reservation.status.in_(list(OPEN_STATUSES)),
        ).first()
        if clash:
            raise ConflictError(f"Table {table.number} is already booked for that time")
        return table

    def update_reservation_status(
        self,
        reservation_id: str,
        new_status,
        actor: Identity,
        note: Optional[str] = None,
    ) -> Reservation:
        """Apply a lifecycle transition on behalf of ``actor``.

        ``note`` is appended to the special request in the same commit.
        """
        target = parse_reservation_status(new_status)
        reservation = self._get(reservation_id)
        self._check_access(reservation, actor)

        validate_transition(reservation.status, target)

        if actor.role == UserRole.CUSTOMER:
            if target != ReservationStatus.CANCELLED:
                raise ForbiddenError("Customers can only cancel their reservations")
            if reservation.status != ReservationStatus.PENDING:
                raise ForbiddenError("Only pending reservations can be cancelled online")

        previous = reservation.status
        reservation.status = target
        if note:
            reservation.special_request = (
                f"{reservation.special_request} {note}" if reservation.special_request else note
            )

        # Free the table once the party is gone
        if reservation.is_terminal and reservation.table is not None:
            if reservation.table.status == TableStatus.OCCUPIED:
                reservation.table.status = TableStatus.AVAILABLE

        self.db.commit()
        self.db.refresh(reservation)

        logger.info(
            f"Reservation {reservation.id} {previous.value} -> {target.value} by {actor.role.value} {actor.user_id}"
        )
        return reservation

    def cancel_reservation(
        self,
        reservation_id: str,
        actor: Identity,
        reason: Optional[str] = None,
    ) -> Reservation:
        note = f"[Cancelled: {reason}]" if reason else None
        return self.update_reservation_status(
            reservation_id, ReservationStatus.CANCELLED, actor, note=note
        )

    def check_in(self, reservation_id: str, actor: Identity) -> Reservation:
        """Record the party's arrival and seat them.

        A pending reservation is confirmed on arrival. The bound table, if
        any, becomes ``occupied``; it is released again when the
        reservation is completed or cancelled.
        """
        reservation = self._get(reservation_id)
        if not (actor.is_admin or actor.is_restaurant_member):
            raise ForbiddenError("Only restaurant staff can check guests in")
        self._check_access(reservation, actor)

        if reservation.status not in OPEN_STATUSES:
            raise InvalidTransitionError(
                f"Cannot check in a {reservation.status.value} reservation"
            )
        if reservation.arrived_at is not None:
            raise InvalidTransitionError("Guests have already checked in")

        table = reservation.table
        if table is not None and table.status == TableStatus.MAINTENANCE:
            raise ValidationError(f"Table {table.number} is under maintenance")

        if reservation.status == ReservationStatus.PENDING:
            validate_transition(reservation.status, ReservationStatus.CONFIRMED)
            reservation.status = ReservationStatus.CONFIRMED
        reservation.arrived_at = datetime.now(timezone.utc)
        if table is not None:
            table.status = TableStatus.OCCUPIED

        self.db.commit()
        self.db.refresh(reservation)

        logger.info(
            f"Reservation {reservation.id} checked in by {actor.role.value} {actor.user_id}"
            + (f", table {table.number} occupied" if table is not None else "")
        )
        return reservation

    def record_deposit(self, reservation_id: str, amount, actor: Identity) -> Reservation:
        """Mark the deposit as paid. Only open reservations take deposits."""
        amount = Decimal(str(amount))
        if amount <= 0:
            raise ValidationError("Deposit amount must be greater than 0")

        reservation = self._get(reservation_id)
        self._check_access(reservation, actor)

        if reservation.status not in OPEN_STATUSES:
            raise InvalidTransitionError(
                f"Cannot record a deposit on a {reservation.status.value} reservation"
            )

        reservation.deposit_paid = True
        reservation.deposit_amount = amount
        self.db.commit()
        self.db.refresh(reservation)

        logger.info(f"Deposit of {amount} recorded for reservation {reservation.id}")
        return reservation

    def list_reservations(
        self,
        restaurant_id: Optional[str] = None,
        user_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        statuses: Optional[Iterable[ReservationStatus]] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Iterator[Reservation]:
        """Yield matching reservations ordered by date, then time.

        Rows are streamed in batches, so the result can be consumed only
        once.
        """
        query = self.db.query(Reservation)
        if restaurant_id is not None:
            query = query.filter(Reservation.restaurant_id == restaurant_id)
        if user_id is not None:
            query = query.filter(Reservation.user_id == user_id)
        if date_from is not None:
            query = query.filter(Reservation.date >= date_from)
        if date_to is not None:
            query = query.filter(Reservation.date <= date_to)
        if statuses is not None:
            query = query.filter(Reservation.status.in_(list(statuses)))

        if descending:
            query = query.order_by(Reservation.date.desc(), Reservation.time.desc())
        else:
            query = query.order_by(Reservation.date.asc(), Reservation.time.asc())

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        yield from query.yield_per(100)

    def today_reservations(self, restaurant_id: str) -> Iterator[Reservation]:
        """Open reservations for today at one restaurant."""
        today = self._now().date()
        return self.list_reservations(
            restaurant_id=restaurant_id,
            date_from=today,
            date_to=today,
            statuses=OPEN_STATUSES,
        )
