"""API routes."""

from fastapi import APIRouter

from app.api.routes import (
    auth, restaurants, tables, reservations, marketing, ratings, staff, chatbot,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])
api_router.include_router(reservations.router, prefix="/reservations", tags=["reservations"])
api_router.include_router(marketing.router, prefix="/offers", tags=["offers"])
api_router.include_router(ratings.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(chatbot.router, prefix="/chatbot", tags=["chatbot"])
