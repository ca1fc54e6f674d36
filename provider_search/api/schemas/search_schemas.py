# This file defines provider search response schemas.
# Both search strategies are validated against the same ProviderSummaryV1 contract,
# which is what keeps their payloads indistinguishable apart from ordering.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from provider_search.api.schemas.common import EnvelopeFields, PaginationMetadata


class OwnerSummaryV1(BaseModel):
    name: str
    phone: str
    email: str | None = None


class ProviderLocationV1(BaseModel):
    longitude: float
    latitude: float
    address: str


class ServiceSummaryV1(BaseModel):
    id: str
    name: str
    duration_minutes: int
    price: float


class WorkingHoursV1(BaseModel):
    day: str
    open: str
    close: str
    is_closed: bool = False


class ProviderSummaryV1(BaseModel):
    id: str
    owner: OwnerSummaryV1 | None = None
    business_name: str
    description: str
    category: str
    subcategory: str | None = None
    location: ProviderLocationV1
    services: list[ServiceSummaryV1]
    working_hours: list[WorkingHoursV1]
    rating: float
    total_ratings: int
    is_verified: bool
    images: list[str]
    created_at: datetime | None = None


class ProviderSearchResponseV1(EnvelopeFields):
    providers: list[ProviderSummaryV1]
    pagination: PaginationMetadata


class CategoryListResponseV1(EnvelopeFields):
    data: list[str]


class PopularServiceV1(BaseModel):
    name: str
    count: int
    avg_price: float
    avg_duration_minutes: float


class PopularServiceListResponseV1(EnvelopeFields):
    data: list[PopularServiceV1]
