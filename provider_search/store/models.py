# This file defines the provider record shape that the store holds.
# Records are validated here before they are written by seeding and fixtures.
# The search core never mutates records; it reads the columns these models map onto.

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

HH_MM_PATTERN = r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$"


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class OwnerIdentity(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    phone: str
    email: str | None = None


class ProviderLocation(BaseModel):
    longitude: float = Field(ge=-180, le=180)
    latitude: float = Field(ge=-90, le=90)
    address: str


class ServiceOffering(BaseModel):
    id: str
    name: str = Field(min_length=1)
    duration_minutes: int = Field(ge=0)
    price: float = Field(ge=0)
    description: str | None = None


class WorkingHours(BaseModel):
    day: Weekday
    open: str = Field(pattern=HH_MM_PATTERN)
    close: str = Field(pattern=HH_MM_PATTERN)
    is_closed: bool = False


class ProviderRecord(BaseModel):
    """One provider listing as persisted in the store."""

    model_config = ConfigDict(extra="ignore")

    id: str
    owner_id: str
    business_name: str = Field(min_length=1)
    description: str
    category: str
    subcategory: str | None = None
    location: ProviderLocation
    services: list[ServiceOffering] = Field(default_factory=list)
    working_hours: list[WorkingHours] = Field(default_factory=list)
    rating: float = Field(default=0.0, ge=0, le=5)
    total_ratings: int = Field(default=0, ge=0)
    is_verified: bool = False
    images: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
