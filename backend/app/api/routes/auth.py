"""Authentication routes."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Request, status

from app.core.config import settings
from app.core.errors import AuthError, ConflictError, ForbiddenError
from app.core.rate_limit import limiter
from app.core.rbac import CurrentUser, UserRole, authorize_role, resolve_restaurant_id
from app.core.responses import success_response
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.session import DbSession
from app.models.restaurant import Restaurant
from app.models.user import User
from app.schemas.auth import CustomerRegisterRequest, LoginRequest
from app.schemas.restaurant import RestaurantResponse
from app.schemas.user import UserResponse

logger = logging.getLogger("auth")

router = APIRouter()

STAFF_ROLES = (UserRole.STAFF, UserRole.RESTAURANT_ADMIN, UserRole.ADMIN)


def _issue_token(user: User, restaurant_id=None, minutes: int = None) -> str:
    return create_access_token(
        data={
            "sub": user.id,
            "email": user.email,
            "role": user.role.value,
            "restaurant_id": restaurant_id,
        },
        expires_delta=timedelta(minutes=minutes or settings.access_token_expire_minutes),
    )


def _check_credentials(request: Request, db, login_request: LoginRequest) -> User:
    client_ip = request.client.host if request.client else "unknown"
    user = db.query(User).filter(User.email == login_request.email.lower()).first()

    if not user or not verify_password(login_request.password, user.password_hash):
        logger.warning(f"Failed login attempt for email: {login_request.email} from IP: {client_ip}")
        raise AuthError("Invalid email or password")
    if not user.is_active:
        logger.warning(f"Login attempt for inactive user: {login_request.email} (ID: {user.id}) from IP: {client_ip}")
        raise AuthError("User account is disabled")
    return user


@router.post("/customer/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.auth_rate_limit)
def register_customer(request: Request, body: CustomerRegisterRequest, db: DbSession):
    """Create a customer account and log it in."""
    email = body.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise ConflictError("An account with this email already exists")

    user = User(
        email=email,
        password_hash=get_password_hash(body.password),
        name=body.name,
        phone=body.phone,
        role=UserRole.CUSTOMER,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"Customer registered: {user.email} (ID: {user.id})")
    return success_response(
        {"user": UserResponse.model_validate(user), "token": _issue_token(user)},
        message="Account created",
    )


@router.post("/customer/login")
@limiter.limit(settings.auth_rate_limit)
def login_customer(request: Request, body: LoginRequest, db: DbSession):
    user = _check_credentials(request, db, body)
    logger.info(f"Successful login: {user.email} (ID: {user.id}, role: {user.role.value})")
    return success_response({"user": UserResponse.model_validate(user), "token": _issue_token(user)})


@router.post("/staff/login")
@limiter.limit(settings.auth_rate_limit)
def login_staff(request: Request, body: LoginRequest, db: DbSession):
    """Log in a staff member, restaurant admin or global admin.

    The token carries the restaurant the user works at and lasts one shift.
    """
    user = _check_credentials(request, db, body)
    authorize_role(user, STAFF_ROLES)

    restaurant_id = resolve_restaurant_id(db, user)
    if restaurant_id is None and user.role != UserRole.ADMIN:
        raise ForbiddenError("No restaurant is assigned to this account")

    restaurant = None
    if restaurant_id:
        restaurant = db.query(Restaurant).filter(Restaurant.id == restaurant_id).first()

    token = _issue_token(user, restaurant_id, settings.staff_token_expire_minutes)
    logger.info(f"Staff login: {user.email} (ID: {user.id}, restaurant: {restaurant_id})")
    return success_response({
        "user": UserResponse.model_validate(user),
        "restaurant": RestaurantResponse.model_validate(restaurant) if restaurant else None,
        "token": token,
    })


@router.get("/me")
def get_me(current_user: CurrentUser):
    return success_response(current_user.to_dict())
