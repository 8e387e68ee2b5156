"""Role-Based Access Control (RBAC) utilities.

``authenticate`` turns a bearer token into an :class:`Identity`;
``authorize_role`` and ``authorize_restaurant_scope`` gate what that
identity may touch. The FastAPI dependencies at the bottom wire these into
route signatures.
"""

from enum import Enum
from typing import Annotated, Iterable, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.errors import AuthError, ForbiddenError
from app.core.security import decode_access_token
from app.db.session import DbSession


class UserRole(str, Enum):
    """User roles for RBAC."""

    CUSTOMER = "customer"
    STAFF = "staff"
    RESTAURANT_ADMIN = "restaurant_admin"
    ADMIN = "admin"


# Role hierarchy: admin > restaurant_admin > staff > customer
ROLE_HIERARCHY = {
    UserRole.ADMIN: 4,
    UserRole.RESTAURANT_ADMIN: 3,
    UserRole.STAFF: 2,
    UserRole.CUSTOMER: 1,
}


class Identity:
    """Authenticated caller.

    Attributes:
        user_id: The user's database ID.
        email: The user's email address.
        role: The user's role.
        restaurant_id: Restaurant the user works for (staff / restaurant admins).
        name: Display name (defaults to email prefix).
    """

    def __init__(self, user_id: str, email: str, role: UserRole,
                 restaurant_id: Optional[str] = None, name: str = ""):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.restaurant_id = restaurant_id
        self.name = name or email.split("@")[0]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_restaurant_member(self) -> bool:
        return self.role in (UserRole.STAFF, UserRole.RESTAURANT_ADMIN)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "email": self.email,
            "role": self.role.value,
            "restaurant_id": self.restaurant_id,
            "name": self.name,
        }


def resolve_restaurant_id(db: Session, user) -> Optional[str]:
    """Look up the restaurant a staff member or restaurant admin belongs to."""
    from app.models.restaurant import Restaurant
    from app.models.staff import Staff

    if user.role == UserRole.STAFF:
        assignment = db.query(Staff).filter(
            Staff.user_id == user.id,
            Staff.is_active.is_(True),
        ).first()
        return assignment.restaurant_id if assignment else None
    if user.role == UserRole.RESTAURANT_ADMIN:
        restaurant = db.query(Restaurant).filter(Restaurant.owner_id == user.id).first()
        return restaurant.id if restaurant else None
    return None


def authenticate(db: Session, token: Optional[str]) -> Identity:
    """Validate a bearer token and resolve the caller's identity.

    Raises AuthError for a missing, malformed or expired token, an unknown
    role, or a user that no longer exists or has been disabled.
    """
    from app.models.user import User

    if not token:
        raise AuthError("No authorization token provided")

    payload = decode_access_token(token)
    if payload is None:
        raise AuthError("Invalid or expired token")

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")
    if user_id is None or email is None or role is None:
        raise AuthError("Invalid token payload")

    try:
        user_role = UserRole(role)
    except ValueError:
        raise AuthError("Invalid role in token")

    user = db.query(User).filter(User.id == str(user_id)).first()
    if user is None:
        raise AuthError("User profile not found")
    if not user.is_active:
        raise AuthError("User account is disabled")

    return Identity(
        user_id=user.id,
        email=user.email,
        role=user_role,
        restaurant_id=resolve_restaurant_id(db, user),
        name=user.name or "",
    )


def authorize_role(identity: Identity, required_roles: Iterable[UserRole]) -> None:
    """Raise ForbiddenError unless the identity holds one of ``required_roles``."""
    allowed = set(required_roles)
    if identity.role not in allowed:
        names = ", ".join(sorted(r.value for r in allowed))
        raise ForbiddenError(f"Requires one of roles: {names}")


def authorize_restaurant_scope(identity: Identity, restaurant_id: Optional[str]) -> None:
    """Allow global admins everywhere; everyone else only inside their restaurant."""
    if identity.is_admin:
        return
    if identity.restaurant_id is None or identity.restaurant_id != restaurant_id:
        raise ForbiddenError("You do not have access to this restaurant")


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1].strip()
        return token or None
    return None


async def get_current_user(request: Request, db: DbSession) -> Identity:
    """Get the current authenticated user from the Authorization header."""
    return authenticate(db, _bearer_token(request))


async def get_optional_current_user(request: Request, db: DbSession) -> Optional[Identity]:
    """Get the current user if a valid token is provided, otherwise return None."""
    token = _bearer_token(request)
    if token is None:
        return None
    try:
        return authenticate(db, token)
    except AuthError:
        return None


def require_role(minimum_role: UserRole):
    """Dependency to require a minimum role level."""

    async def role_checker(
        current_user: Annotated[Identity, Depends(get_current_user)]
    ) -> Identity:
        user_level = ROLE_HIERARCHY.get(current_user.role, 0)
        required_level = ROLE_HIERARCHY.get(minimum_role, 0)

        if user_level < required_level:
            raise ForbiddenError(f"Requires role {minimum_role.value} or higher")
        return current_user

    return role_checker


# Common role dependencies
RequireAdmin = Annotated[Identity, Depends(require_role(UserRole.ADMIN))]
RequireRestaurantAdmin = Annotated[Identity, Depends(require_role(UserRole.RESTAURANT_ADMIN))]
RequireStaff = Annotated[Identity, Depends(require_role(UserRole.STAFF))]
CurrentUser = Annotated[Identity, Depends(get_current_user)]
OptionalCurrentUser = Annotated[Optional[Identity], Depends(get_optional_current_user)]
