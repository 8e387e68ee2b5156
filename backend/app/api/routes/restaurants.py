"""Restaurant directory routes."""

import logging
from datetime import date, time
from typing import Optional

from fastapi import APIRouter, Query, status
from sqlalchemy import or_

from app.core.errors import NotFoundError, ValidationError
from app.core.rbac import OptionalCurrentUser, RequireAdmin, UserRole
from app.core.responses import success_response
from app.db.session import DbSession
from app.models.feedback import Review
from app.models.restaurant import Restaurant
from app.models.user import User
from app.schemas.marketing import OfferResponse
from app.schemas.ratings import ReviewResponse
from app.schemas.restaurant import RestaurantCreate, RestaurantResponse, TableResponse
from app.services.reservations_service import local_now
from app.services.review_service import OfferService
from app.services.table_service import TableService

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_active(db, restaurant_id: str) -> Restaurant:
    restaurant = db.query(Restaurant).filter(
        Restaurant.id == restaurant_id,
        Restaurant.is_active.is_(True),
    ).first()
    if not restaurant:
        raise NotFoundError("Restaurant not found")
    return restaurant


@router.get("")
def list_restaurants(
    db: DbSession,
    current_user: OptionalCurrentUser,
    search: Optional[str] = None,
    zone: Optional[str] = None,
    cuisine: Optional[str] = None,
    price_range: Optional[str] = None,
    include_inactive: bool = False,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """List active restaurants with optional filters.

    Global admins may pass ``include_inactive`` to see deactivated ones too.
    """
    query = db.query(Restaurant)
    if not (include_inactive and current_user and current_user.is_admin):
        query = query.filter(Restaurant.is_active.is_(True))
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Restaurant.name.ilike(pattern),
            Restaurant.description.ilike(pattern),
            Restaurant.cuisine_type.ilike(pattern),
        ))
    if zone:
        query = query.filter(Restaurant.zone == zone)
    if cuisine:
        query = query.filter(Restaurant.cuisine_type == cuisine)
    if price_range:
        query = query.filter(Restaurant.price_range == price_range)

    total = query.count()
    restaurants = query.order_by(Restaurant.rating.desc(), Restaurant.name).offset(offset).limit(limit).all()
    return success_response(
        [RestaurantResponse.model_validate(r) for r in restaurants],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/featured")
def featured_restaurants(db: DbSession, limit: int = Query(6, ge=1, le=20)):
    restaurants = (
        db.query(Restaurant)
        .filter(Restaurant.is_active.is_(True))
        .order_by(Restaurant.rating.desc(), Restaurant.review_count.desc())
        .limit(limit)
        .all()
    )
    return success_response([RestaurantResponse.model_validate(r) for r in restaurants])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_restaurant(body: RestaurantCreate, db: DbSession, current_user: RequireAdmin):
    if body.owner_id is not None:
        owner = db.query(User).filter(User.id == body.owner_id).first()
        if not owner:
            raise NotFoundError("Owner not found")
        if owner.role != UserRole.RESTAURANT_ADMIN:
            raise ValidationError("Owner must be a restaurant_admin account")

    restaurant = Restaurant(**body.model_dump(), is_active=True, rating=0, review_count=0)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    logger.info(f"Restaurant created: {restaurant.name} ({restaurant.id}) by {current_user.email}")
    return success_response(RestaurantResponse.model_validate(restaurant), message="Restaurant created")


@router.get("/{restaurant_id}")
def get_restaurant(restaurant_id: str, db: DbSession):
    """Restaurant detail with its latest reviews."""
    restaurant = _get_active(db, restaurant_id)
    reviews = (
        db.query(Review)
        .filter(Review.restaurant_id == restaurant.id)
        .order_by(Review.created_at.desc())
        .limit(10)
        .all()
    )
    data = RestaurantResponse.model_validate(restaurant).model_dump()
    data["reviews"] = [ReviewResponse.model_validate(r) for r in reviews]
    return success_response(data)


@router.get("/{restaurant_id}/tables")
def list_restaurant_tables(restaurant_id: str, db: DbSession):
    restaurant = _get_active(db, restaurant_id)
    tables = TableService(db).list_tables(restaurant.id)
    return success_response([TableResponse.model_validate(t) for t in tables])


@router.get("/{restaurant_id}/tables/available")
def available_tables(
    restaurant_id: str,
    db: DbSession,
    date: date,
    time: time,
    guests: int = Query(..., ge=1),
):
    """Tables that fit the party, marked available / reserved / blocked for the slot."""
    restaurant = _get_active(db, restaurant_id)
    tables = TableService(db).available_tables(restaurant.id, date, time, guests)
    return success_response(
        tables,
        meta={
            "total_tables": len(tables),
            "available_tables": sum(1 for t in tables if t["is_selectable"]),
        },
    )


@router.get("/{restaurant_id}/offers")
def restaurant_offers(restaurant_id: str, db: DbSession):
    restaurant = _get_active(db, restaurant_id)
    offers = OfferService(db).active_offers(local_now().date(), restaurant.id)
    return success_response([OfferResponse.model_validate(o) for o in offers])
