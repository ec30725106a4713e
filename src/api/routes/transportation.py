"""Transportation dashboard routes."""

from fastapi import APIRouter, Query
from loguru import logger

from config.settings import get_settings
from src.api.dependencies import Repository, RideMatcherDep
from src.matching import (
    InvalidInputError,
    ProximityGroups,
    RideMatchOptions,
    RideMatchResult,
    TransportationStats,
    group_by_proximity,
    summarize_transportation,
)
from src.modules.registrations import ListingFilters, RecordCategory, RecordPage
from src.modules.registrations.models import SortField

transportation_log = logger.bind(module="TransportationAPI")

router = APIRouter(prefix="/transportation", tags=["Transportation"])


def transport_filters(
    search: str | None = None,
    mode_of_transport: str | None = None,
    district: str | None = None,
    state: str | None = None,
    date: str | None = None,
    page: int = 1,
    limit: int | None = None,
    sort_by: SortField = "registrationDate",
    sort_order: str = "desc",
) -> ListingFilters:
    """Build transportation filters from query parameters."""
    return ListingFilters(
        search=search,
        mode_of_transport=mode_of_transport,
        district=district,
        state=state,
        travel_date=date or None,
        page=page,
        limit=limit or get_settings().matching.page_limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.get("/stats", response_model=TransportationStats)
async def get_stats(
    repo: Repository,
    search: str | None = None,
    mode_of_transport: str | None = Query(None, alias="modeOfTransport"),
    district: str | None = None,
    state: str | None = None,
    date: str | None = None,
) -> TransportationStats:
    """Traveller counts, vehicle capacity and per-mode breakdown."""
    filters = transport_filters(search, mode_of_transport, district, state, date)
    rows = await repo.transportation_stats(filters)
    return summarize_transportation(rows)


@router.get("/providers", response_model=RecordPage)
async def list_vehicle_providers(
    repo: Repository,
    search: str | None = None,
    mode_of_transport: str | None = Query(None, alias="modeOfTransport"),
    district: str | None = None,
    state: str | None = None,
    date: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=200),
    sort_by: SortField = Query("registrationDate", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> RecordPage:
    """List travellers offering seats in their vehicle."""
    filters = transport_filters(
        search, mode_of_transport, district, state, date, page, limit, sort_by, sort_order
    )
    return await repo.list_by_category(RecordCategory.VEHICLE_PROVIDER, filters)


@router.get("/seekers", response_model=RecordPage)
async def list_ride_seekers(
    repo: Repository,
    search: str | None = None,
    district: str | None = None,
    state: str | None = None,
    date: str | None = None,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1, le=200),
    sort_by: SortField = Query("registrationDate", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
) -> RecordPage:
    """List travellers looking for transport."""
    filters = transport_filters(
        search, None, district, state, date, page, limit, sort_by, sort_order
    )
    return await repo.list_by_category(RecordCategory.RIDE_SEEKER, filters)


@router.get("/compatible-rides", response_model=RideMatchResult)
async def find_compatible_rides(
    matcher: RideMatcherDep,
    seeker_id: str | None = Query(None, alias="seekerId"),
    max_distance: int | None = Query(None, alias="maxDistance"),
    same_date_only: bool = Query(True, alias="sameDateOnly"),
    mode_of_transport: str | None = Query(None, alias="modeOfTransport"),
) -> RideMatchResult:
    """
    Ranked vehicle providers for a ride seeker.

    Args:
        seeker_id: Seeker registration ID
        max_distance: Maximum postal-code distance (default from settings)
        same_date_only: Only providers travelling on the seeker's date
        mode_of_transport: Restrict providers to one mode ("all" = any)
    """
    if not seeker_id:
        raise InvalidInputError("Seeker ID is required")

    options = RideMatchOptions(
        max_distance=(
            max_distance if max_distance is not None else get_settings().matching.max_distance
        ),
        same_date_only=same_date_only,
        mode_of_transport=mode_of_transport,
    )
    transportation_log.info(f"Finding compatible rides for seeker {seeker_id}")
    return await matcher.find_compatible_rides(seeker_id, options)


@router.get("/proximity-groups", response_model=ProximityGroups)
async def get_proximity_groups(
    repo: Repository,
    min_group_size: int | None = Query(None, alias="minGroupSize", ge=1),
) -> ProximityGroups:
    """Travellers grouped by postal-code area."""
    travellers = await repo.travellers_with_postal_code()
    size = min_group_size or get_settings().matching.proximity_min_group_size
    return group_by_proximity(travellers, min_group_size=size)


@router.get("/districts", response_model=list[str])
async def list_districts(repo: Repository) -> list[str]:
    """Distinct starting districts of travellers."""
    return await repo.transportation_values("district")


@router.get("/states", response_model=list[str])
async def list_states(repo: Repository) -> list[str]:
    """Distinct starting states of travellers."""
    return await repo.transportation_values("state")
