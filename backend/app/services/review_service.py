"""Restaurant reviews and offers."""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.core.rbac import Identity, UserRole, authorize_restaurant_scope
from app.models.feedback import Review
from app.models.marketing import Offer
from app.models.reservations import Reservation
from app.models.restaurant import Restaurant
from app.schemas.marketing import OfferCreate, OfferUpdate
from app.schemas.ratings import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    """Customer reviews and the restaurant rating aggregate they feed."""

    def __init__(self, db: Session):
        self.db = db

    def _restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()
        if not restaurant:
            raise NotFoundError("Restaurant not found")
        return restaurant

    def list_reviews(
        self,
        restaurant_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Review]:
        query = self.db.query(Review)
        if restaurant_id:
            query = query.filter(Review.restaurant_id == restaurant_id)
        return query.order_by(Review.created_at.desc()).offset(offset).limit(limit).all()

    def create_review(self, data: ReviewCreate, actor: Identity) -> Review:
        """Store a review and refresh the restaurant's rating and review count."""
        restaurant = self._restaurant(data.restaurant_id)

        if data.reservation_id:
            reservation = self.db.query(Reservation).filter(
                Reservation.id == data.reservation_id,
                Reservation.restaurant_id == restaurant.id,
            ).first()
            if not reservation:
                raise NotFoundError("Reservation not found")
            if actor.role == UserRole.CUSTOMER and reservation.user_id != actor.user_id:
                raise ForbiddenError("You can only review your own reservations")

        review = Review(
            restaurant_id=restaurant.id,
            reservation_id=data.reservation_id,
            user_id=actor.user_id,
            rating=data.rating,
            comment=data.comment,
            customer_name=data.customer_name or actor.name,
        )
        self.db.add(review)
        self.db.flush()

        count, average = self.db.query(
            func.count(Review.id), func.avg(Review.rating)
        ).filter(Review.restaurant_id == restaurant.id).one()
        restaurant.review_count = count
        restaurant.rating = Decimal(str(average or 0)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

        self.db.commit()
        self.db.refresh(review)

        logger.info(
            f"Review {review.id} ({review.rating} stars) for restaurant {restaurant.id}; "
            f"rating now {restaurant.rating} over {count} reviews"
        )
        return review

    def respond(self, review_id: str, response: str, actor: Identity) -> Review:
        review = self.db.query(Review).filter(Review.id == review_id).first()
        if not review:
            raise NotFoundError("Review not found")
        authorize_restaurant_scope(actor, review.restaurant_id)

        review.response = response
        review.responded_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(review)
        return review

    def stats(self, restaurant_id: str) -> Dict[str, Any]:
        self._restaurant(restaurant_id)

        rows = self.db.query(Review.rating, func.count(Review.id)).filter(
            Review.restaurant_id == restaurant_id
        ).group_by(Review.rating).all()

        distribution = {star: 0 for star in range(1, 6)}
        for rating, count in rows:
            distribution[rating] = count
        total = sum(distribution.values())
        average = sum(star * n for star, n in distribution.items()) / total if total else 0.0

        return {
            "restaurant_id": restaurant_id,
            "count": total,
            "average": round(average, 1),
            "distribution": distribution,
        }


class OfferService:
    def __init__(self, db: Session):
        self.db = db

    def active_offers(self, today: date, restaurant_id: Optional[str] = None) -> List[Offer]:
        """Offers that are switched on and have not expired."""
        query = self.db.query(Offer).filter(
            Offer.is_active.is_(True),
            Offer.valid_until >= today,
        )
        if restaurant_id:
            query = query.filter(Offer.restaurant_id == restaurant_id)
        return query.order_by(Offer.valid_until).all()

    def create_offer(self, data: OfferCreate, actor: Identity) -> Offer:
        restaurant_id = data.restaurant_id or actor.restaurant_id
        if not restaurant_id:
            raise ValidationError("restaurant_id is required")
        if not self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).first():
            raise NotFoundError("Restaurant not found")
        authorize_restaurant_scope(actor, restaurant_id)

        offer = Offer(
            restaurant_id=restaurant_id,
            title=data.title,
            description=data.description,
            discount=data.discount,
            valid_until=data.valid_until,
            is_active=True,
        )
        self.db.add(offer)
        self.db.commit()
        self.db.refresh(offer)
        return offer

    def _owned_offer(self, offer_id: str, actor: Identity) -> Offer:
        offer = self.db.query(Offer).filter(Offer.id == offer_id).first()
        if not offer:
            raise NotFoundError("Offer not found")
        authorize_restaurant_scope(actor, offer.restaurant_id)
        return offer

    def update_offer(self, offer_id: str, data: OfferUpdate, actor: Identity) -> Offer:
        """Edit an offer or switch it on and off. Only the fields sent change."""
        offer = self._owned_offer(offer_id, actor)
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("title", "valid_until", "is_active"):
                raise ValidationError(f"{field} cannot be null")
            setattr(offer, field, value)
        self.db.commit()
        self.db.refresh(offer)
        logger.info(f"Offer {offer.id} updated by {actor.user_id}")
        return offer

    def deactivate_offer(self, offer_id: str, actor: Identity) -> Offer:
        """Withdraw an offer. The row is kept; it just stops being listed."""
        offer = self._owned_offer(offer_id, actor)
        offer.is_active = False
        self.db.commit()
        self.db.refresh(offer)
        logger.info(f"Offer {offer.id} deactivated by {actor.user_id}")
        return offer
