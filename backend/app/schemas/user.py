"""User schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.core.rbac import UserRole


class UserResponse(BaseModel):
    """Public view of a user; never includes the password hash."""

    id: str
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
