"""Restaurant review routes."""

from typing import Optional

from fastapi import APIRouter, Query

from app.core.rbac import CurrentUser, RequireRestaurantAdmin
from app.core.responses import success_response
from app.db.session import DbSession
from app.schemas.ratings import ReviewCreate, ReviewReply, ReviewResponse, ReviewStats
from app.services.review_service import ReviewService

router = APIRouter()


@router.get("")
def list_reviews(
    db: DbSession,
    restaurant_id: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    reviews = ReviewService(db).list_reviews(restaurant_id, limit=limit, offset=offset)
    return success_response([ReviewResponse.model_validate(r) for r in reviews])


@router.get("/restaurant/{restaurant_id}")
def restaurant_reviews(
    restaurant_id: str,
    db: DbSession,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    reviews = ReviewService(db).list_reviews(restaurant_id, limit=limit, offset=offset)
    return success_response([ReviewResponse.model_validate(r) for r in reviews])


@router.get("/stats/{restaurant_id}")
def review_stats(restaurant_id: str, db: DbSession):
    """Review count, average and 1-5 star distribution."""
    return success_response(ReviewStats(**ReviewService(db).stats(restaurant_id)))


@router.post("", status_code=201)
def create_review(body: ReviewCreate, db: DbSession, current_user: CurrentUser):
    review = ReviewService(db).create_review(body, current_user)
    return success_response(ReviewResponse.model_validate(review), message="Review submitted")


@router.post("/{review_id}/response")
def respond_to_review(
    review_id: str,
    body: ReviewReply,
    db: DbSession,
    current_user: RequireRestaurantAdmin,
):
    review = ReviewService(db).respond(review_id, body.response, current_user)
    return success_response(ReviewResponse.model_validate(review), message="Response saved")
