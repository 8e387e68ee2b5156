"""Tables management routes - database-backed."""

from fastapi import APIRouter, status

from app.core.rbac import RequireRestaurantAdmin
from app.core.responses import success_response
from app.db.session import DbSession
from app.schemas.restaurant import TableCreate, TableResponse, TableStatusUpdate, TableUpdate
from app.services.table_service import TableService

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_table(body: TableCreate, db: DbSession, current_user: RequireRestaurantAdmin):
    table = TableService(db).create_table(body, current_user)
    return success_response(TableResponse.model_validate(table), message="Table created")


@router.get("/{table_id}")
def get_table(table_id: str, db: DbSession):
    table = TableService(db).get_table(table_id)
    return success_response(TableResponse.model_validate(table))


@router.patch("/{table_id}")
def update_table(
    table_id: str,
    body: TableUpdate,
    db: DbSession,
    current_user: RequireRestaurantAdmin,
):
    """Update capacity or floor-plan placement. The number cannot change."""
    table = TableService(db).update_table(table_id, body, current_user)
    return success_response(TableResponse.model_validate(table), message="Table updated")


@router.patch("/{table_id}/status")
def update_table_status(
    table_id: str,
    body: TableStatusUpdate,
    db: DbSession,
    current_user: RequireRestaurantAdmin,
):
    table = TableService(db).set_status(table_id, body.status, current_user)
    return success_response(
        TableResponse.model_validate(table),
        message=f"Table status updated to {table.status.value}",
    )
