"""Seed demo data for a local Mesa Feliz instance.

Creates a global admin, one restaurant with its owner, a waiter, a floor
plan and a couple of offers so the front end has something to show.
Running it twice is safe: existing rows are looked up by email / name and
left alone.

Usage:
    cd backend
    python seed_demo_data.py
"""

import logging
import os
import sys
from datetime import date, time, timedelta

# Ensure the backend app is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from app.core.config import settings
from app.core.rbac import UserRole
from app.core.security import get_password_hash
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models import Offer, Restaurant, Staff, Table, User

logger = logging.getLogger("seed")

DEMO_PASSWORD = "password123"

FLOOR_PLAN = [
    # number, capacity, x, y, shape
    (1, 2, 40, 40, "round"),
    (2, 2, 140, 40, "round"),
    (3, 4, 240, 40, "square"),
    (4, 4, 40, 160, "square"),
    (5, 6, 160, 160, "rectangle"),
    (6, 8, 300, 160, "rectangle"),
]


def seed():
    """Insert demo data, committing once at the end."""
    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        _seed_all(db)
        db.commit()
        logger.info("Seed data committed successfully.")
    except Exception:
        db.rollback()
        logger.exception("Error seeding data")
        raise
    finally:
        db.close()


def _user(db, email: str, role: UserRole, name: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(
        email=email,
        password_hash=get_password_hash(DEMO_PASSWORD),
        role=role,
        name=name,
        is_active=True,
    )
    db.add(user)
    db.flush()
    logger.info(f"  + User {email} ({role.value})")
    return user


def _seed_all(db):
    _user(db, "admin@mesafeliz.com", UserRole.ADMIN, "Administrador Mesa Feliz")
    owner = _user(db, "dueno@latradicion.com", UserRole.RESTAURANT_ADMIN, "Administrador Demo")
    waiter = _user(db, "mesero@latradicion.com", UserRole.STAFF, "Mesero Demo")

    restaurant = db.query(Restaurant).filter(Restaurant.name == "La Tradición Yucateca").first()
    if not restaurant:
        restaurant = Restaurant(
            owner_id=owner.id,
            name="La Tradición Yucateca",
            description="Lo mejor de la comida regional en el corazón de Mérida.",
            address="Calle 60 x 55 y 57, Centro, Mérida",
            phone="9991234567",
            email="contacto@latradicion.com",
            cuisine_type="Yucateca",
            zone="Centro",
            price_range="$$",
            open_time=time(12, 0),
            close_time=time(23, 0),
            is_active=True,
            rating=0,
            review_count=0,
        )
        db.add(restaurant)
        db.flush()
        logger.info(f"  + Restaurant {restaurant.name}")

    if not db.query(Staff).filter(Staff.user_id == waiter.id).first():
        db.add(Staff(user_id=waiter.id, restaurant_id=restaurant.id, position="waiter"))
        logger.info("  + Staff assignment")

    if not db.query(Table).filter(Table.restaurant_id == restaurant.id).count():
        for number, capacity, x, y, shape in FLOOR_PLAN:
            db.add(Table(
                restaurant_id=restaurant.id,
                number=number,
                capacity=capacity,
                position_x=x,
                position_y=y,
                shape=shape,
            ))
        logger.info(f"  + Tables ({len(FLOOR_PLAN)})")

    if not db.query(Offer).filter(Offer.restaurant_id == restaurant.id).count():
        db.add_all([
            Offer(
                restaurant_id=restaurant.id,
                title="Martes de cochinita",
                description="2x1 en tacos de cochinita pibil",
                discount=50,
                valid_until=date.today() + timedelta(days=30),
            ),
            Offer(
                restaurant_id=restaurant.id,
                title="Cumpleañeros",
                description="Postre gratis presentando identificación",
                discount=0,
                valid_until=date.today() + timedelta(days=90),
            ),
        ])
        logger.info("  + Offers (2)")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    seed()
