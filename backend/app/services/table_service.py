"""Table management and the table status machine.

Any status may move to any other; only membership in ``TableStatus`` is
enforced. Staff members are limited to seating and clearing tables
(available <-> occupied) in their own restaurant.
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.core.rbac import Identity, UserRole, authorize_restaurant_scope
from app.models.reservations import OPEN_STATUSES, Reservation
from app.models.restaurant import Restaurant, Table, TableStatus
from app.schemas.restaurant import TableCreate, TableUpdate

logger = logging.getLogger(__name__)

VALID_STATUSES = [s.value for s in TableStatus]
STAFF_STATUSES = frozenset({TableStatus.AVAILABLE, TableStatus.OCCUPIED})


def parse_table_status(value: Any) -> TableStatus:
    """Map a raw value onto ``TableStatus`` or raise ValidationError."""
    try:
        return TableStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}")


class TableService:
    """Create, update and seat restaurant tables."""

    def __init__(self, db: Session):
        self.db = db

    def get_table(self, table_id: str) -> Table:
        table = self.db.query(Table).filter(Table.id == table_id).first()
        if not table:
            raise NotFoundError("Table not found")
        return table

    def list_tables(self, restaurant_id: str) -> List[Table]:
        return (
            self.db.query(Table)
            .filter(Table.restaurant_id == restaurant_id)
            .order_by(Table.number)
            .all()
        )

    def set_status(self, table_id: str, status: Any, actor: Optional[Identity] = None) -> Table:
        """Move a table to ``status``.

        Raises ValidationError for unknown statuses (the row is left
        untouched), NotFoundError for unknown tables and ForbiddenError when
        the actor may not touch this table or this status.
        """
        new_status = parse_table_status(status)
        table = self.get_table(table_id)

        if actor is not None:
            authorize_restaurant_scope(actor, table.restaurant_id)
            if actor.role == UserRole.STAFF and new_status not in STAFF_STATUSES:
                raise ForbiddenError("Staff can only set tables to available or occupied")

        old_status = table.status
        table.status = new_status
        table.updated_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(table)

        logger.info(
            f"Table {table.number} ({table.id}) status {old_status.value} -> {new_status.value}"
        )
        return table

    def create_table(self, data: TableCreate, actor: Identity) -> Table:
        restaurant_id = data.restaurant_id or actor.restaurant_id
        if not restaurant_id:
            raise ValidationError("restaurant_id is required")

        restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        authorize_restaurant_scope(actor, restaurant_id)

        exists = self.db.query(Table).filter(
            Table.restaurant_id == restaurant_id,
            Table.number == data.number,
        ).first()
        if exists:
            raise ConflictError(f"Table number {data.number} already exists in this restaurant")

        table = Table(
            restaurant_id=restaurant_id,
            number=data.number,
            capacity=data.capacity,
            position_x=data.position_x,
            position_y=data.position_y,
            shape=data.shape,
            status=TableStatus.AVAILABLE,
        )
        self.db.add(table)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Table number {data.number} already exists in this restaurant")
        self.db.refresh(table)
        return table

    def update_table(self, table_id: str, data: TableUpdate, actor: Identity) -> Table:
        """Update layout fields. The table number is never updatable."""
        table = self.get_table(table_id)
        authorize_restaurant_scope(actor, table.restaurant_id)

        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(table, key, value)

        self.db.commit()
        self.db.refresh(table)
        return table

    def available_tables(
        self,
        restaurant_id: str,
        on_date: date,
        at_time: time,
        guests: int,
    ) -> List[Dict[str, Any]]:
        """Tables that can seat ``guests``, annotated for the requested slot.

        ``availability_status`` is ``reserved`` when an open reservation
        already holds the table for that slot, ``blocked`` for tables under
        maintenance and ``available`` otherwise.
        """
        tables = (
            self.db.query(Table)
            .filter(Table.restaurant_id == restaurant_id, Table.capacity >= guests)
            .order_by(Table.number)
            .all()
        )

        booked = {
            table_id for (table_id,) in self.db.query(Reservation.table_id).filter(
                Reservation.restaurant_id == restaurant_id,
                Reservation.date == on_date,
                Reservation.time == at_time,
                Reservation.table_id.isnot(None),
                Reservation.status.in_(list(OPEN_STATUSES)),
            )
        }

        result = []
        for table in tables:
            if table.id in booked:
                availability = "reserved"
            elif table.status == TableStatus.MAINTENANCE:
                availability = "blocked"
            else:
                availability = "available"
            result.append({
                "id": table.id,
                "restaurant_id": table.restaurant_id,
                "number": table.number,
                "capacity": table.capacity,
                "status": table.status.value,
                "position_x": table.position_x,
                "position_y": table.position_y,
                "shape": table.shape,
                "updated_at": table.updated_at,
                "availability_status": availability,
                "is_selectable": availability == "available",
            })
        return result
