"""Restaurant offers / promotions."""

from typing import Optional

from fastapi import APIRouter

from app.core.rbac import RequireRestaurantAdmin
from app.core.responses import success_response
from app.db.session import DbSession
from app.schemas.marketing import OfferCreate, OfferResponse, OfferUpdate
from app.services.reservations_service import local_now
from app.services.review_service import OfferService

router = APIRouter()


@router.get("")
def list_offers(db: DbSession, restaurant_id: Optional[str] = None):
    """Active offers: switched on and valid through today or later."""
    offers = OfferService(db).active_offers(local_now().date(), restaurant_id)
    return success_response([OfferResponse.model_validate(o) for o in offers])


@router.post("", status_code=201)
def create_offer(body: OfferCreate, db: DbSession, current_user: RequireRestaurantAdmin):
    offer = OfferService(db).create_offer(body, current_user)
    return success_response(OfferResponse.model_validate(offer), message="Offer created")


@router.patch("/{offer_id}")
def update_offer(offer_id: str, body: OfferUpdate, db: DbSession, current_user: RequireRestaurantAdmin):
    offer = OfferService(db).update_offer(offer_id, body, current_user)
    return success_response(OfferResponse.model_validate(offer), message="Offer updated")


@router.delete("/{offer_id}")
def deactivate_offer(offer_id: str, db: DbSession, current_user: RequireRestaurantAdmin):
    """Withdraw an offer from the public listings."""
    offer = OfferService(db).deactivate_offer(offer_id, current_user)
    return success_response(OfferResponse.model_validate(offer), message="Offer deactivated")
