# This file defines provider search endpoints under the versioned API path.
# Query parameters arrive as raw strings and are validated together by the normalizer,
# so a malformed request is answered with every failing field in one 400 response.
# Store failures are answered with a generic 500; error text is only exposed outside production.

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from provider_search.api.api_config import ApiConfig
from provider_search.api.dependencies import get_config, get_search_service
from provider_search.api.error_handlers import APIError
from provider_search.api.response_envelope import build_object_envelope, build_search_envelope
from provider_search.api.schemas.common import ErrorResponse
from provider_search.api.schemas.search_schemas import (
    CategoryListResponseV1,
    PopularServiceListResponseV1,
    ProviderSearchResponseV1,
)
from provider_search.api.services.search_service import SearchService
from provider_search.search.normalizer import SearchValidationError, normalize_search_params

router = APIRouter(prefix="/search", tags=["search"])
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]

LOGGER = logging.getLogger("search")
GENERIC_FAILURE_MESSAGE = "Internal server error"


def _store_failure(exc: Exception, config: ApiConfig) -> APIError:
    return APIError(
        status_code=500,
        error_code="SEARCH_FAILED",
        message=GENERIC_FAILURE_MESSAGE,
        details=None if config.is_production else str(exc),
    )


@router.get(
    "/providers",
    response_model=ProviderSearchResponseV1,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_providers(
    request: Request,
    service: SearchServiceDep,
    config: ConfigDep,
    query: str | None = Query(default=None, description="Free text over names and services."),
    location: str | None = Query(default=None, description="`longitude,latitude`"),
    category: str | None = Query(default=None),
    rating: str | None = Query(default=None, description="Minimum rating, 0-5."),
    service_name: str | None = Query(default=None, alias="service"),
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
) -> dict[str, object]:
    try:
        filters = normalize_search_params(
            {
                "query": query,
                "location": location,
                "category": category,
                "rating": rating,
                "service": service_name,
                "page": page,
                "limit": limit,
            },
            default_limit=config.default_page_size,
            max_limit=config.max_page_size,
        )
    except SearchValidationError as exc:
        raise APIError(
            status_code=400,
            error_code="VALIDATION_ERROR",
            message="Invalid search parameters.",
            details=exc.as_details(),
        ) from exc

    try:
        result = await service.search_providers(filters)
    except Exception as exc:
        raise _store_failure(exc, config) from exc

    return build_search_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        result=result,
    )


@router.get("/categories", response_model=CategoryListResponseV1)
def list_categories(
    request: Request,
    service: SearchServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    try:
        categories = service.list_categories()
    except Exception as exc:
        LOGGER.exception("Listing provider categories failed")
        raise _store_failure(exc, config) from exc

    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=categories,
    )


@router.get("/popular-services", response_model=PopularServiceListResponseV1)
def list_popular_services(
    request: Request,
    service: SearchServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    try:
        popular = service.list_popular_services()
    except Exception as exc:
        LOGGER.exception("Listing popular services failed")
        raise _store_failure(exc, config) from exc

    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=popular,
    )
