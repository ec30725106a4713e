"""Accommodation dashboard routes."""

from fastapi import APIRouter, Query
from loguru import logger

from config.settings import get_settings
from src.api.dependencies import AccommodationMatcherDep, Repository
from src.matching import AccommodationMatchResult, AccommodationStats, summarize_accommodation
from src.modules.registrations import (
    DistrictCount,
    ListingFilters,
    RecordCategory,
    RecordPage,
)
from src.modules.registrations.models import SortField

accommodation_log = logger.bind(module="AccommodationAPI")

router = APIRouter(prefix="/accommodation", tags=["Accommodation"])


def listing_filters(
    search: str | None = None,
    gender: str | None = None,
    district: str | None = None,
    page: int = 1,
    limit: int | None = None,
    sort_by: SortField = "registrationDate",
    sort_order: str = "desc",
) -> ListingFilters:
    """Build listing filters from query parameters."""
    return ListingFilters(
        search=search,
        gender=gender,
        district=district,
        page=page,
        limit=limit or get_settings().matching.page_limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/stats", response_model=AccommodationStats)
async def get_stats(repo: Repository) -> AccommodationStats:
    """Provider, seeker and hotel-request counts with capacity totals."""
    rows = await repo.accommodation_stats()
    return summarize_accommodation(rows)


@router.get("/providers", response_model=RecordPage)
async def list_providers(
    repo: Repository,
    search: str | None = None,
    gender: str | None = None,
    district: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=200),
    sort_by: SortField = Query("registrationDate", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> RecordPage:
    """
    List hosts offering accommodation.

    Args:
        gender: Host gender preference (male-only / female-only / anyone)
        district: Accommodation district
    """
    filters = listing_filters(search, gender, district, page, limit, sort_by, sort_order)
    return await repo.list_by_category(RecordCategory.PROVIDE_ACCOMMODATION, filters)


@router.get("/seekers", response_model=RecordPage)
async def list_seekers(
    repo: Repository,
    search: str | None = None,
    gender: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=200),
    sort_by: SortField = Query("registrationDate", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> RecordPage:
    """
    List registrants needing accommodation.

    Args:
        gender: Only seekers needing places of this kind
            (male-only -> male, female-only -> female, other -> other)
    """
    filters = listing_filters(search, gender, None, page, limit, sort_by, sort_order)
    return await repo.list_by_category(RecordCategory.NEED_ACCOMMODATION, filters)


@router.get("/hotels", response_model=RecordPage)
async def list_hotel_requests(
    repo: Repository,
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=200),
    sort_by: SortField = Query("registrationDate", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> RecordPage:
    """List discounted hotel requests."""
    filters = listing_filters(search, None, None, page, limit, sort_by, sort_order)
    return await repo.list_by_category(RecordCategory.HOTEL_REQUEST, filters)


@router.get("/districts", response_model=list[DistrictCount])
async def list_districts(repo: Repository) -> list[DistrictCount]:
    """Accommodation districts with registration counts."""
    return await repo.accommodation_districts()


@router.get("/seekers/{seeker_id}/compatible", response_model=AccommodationMatchResult)
async def find_compatible_providers(
    seeker_id: str,
    matcher: AccommodationMatcherDep,
) -> AccommodationMatchResult:
    """Hosts that can take the seeker's whole party."""
    accommodation_log.info(f"Finding compatible hosts for seeker {seeker_id}")
    return await matcher.find_compatible_accommodation(seeker_id)
