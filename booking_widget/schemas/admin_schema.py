"""Admin and authenticated-user models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AdminRole(str, Enum):
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class AdminUser(BaseModel):
    """Row in admin_users linking an auth user to an admin role."""
    id: str
    user_id: str
    email: str
    role: AdminRole = AdminRole.ADMIN
    created_at: Optional[str] = None


class AuthUser(BaseModel):
    """The signed-in user as far as the widget cares."""
    id: str
    email: Optional[str] = None
