"""Service catalog models."""

from typing import Optional

from pydantic import BaseModel, Field


class Service(BaseModel):
    """A bookable service row."""
    id: str
    name: str
    description: Optional[str] = None
    duration_minutes: int = 60
    price: float = 0.0
    category: Optional[str] = None
    active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ServiceInput(BaseModel):
    """Fields accepted when creating a service."""
    name: str = Field(min_length=1)
    description: Optional[str] = None
    duration_minutes: int = Field(default=60, ge=1)
    price: float = Field(default=0.0, ge=0)
    category: Optional[str] = None
    active: bool = True


class ServiceUpdate(BaseModel):
    """Partial update; unset fields are left untouched."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(default=None, ge=1)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    active: Optional[bool] = None
