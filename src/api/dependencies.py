"""
API Dependencies.

Shared dependencies for API routes (repository and matchers).
"""

from typing import Annotated

from fastapi import Depends

from config.settings import get_settings
from src.connections.postgres import get_postgres
from src.matching import AccommodationMatcher, RideMatcher
from src.modules.registrations import RegistrationRepository


async def get_registration_repository() -> RegistrationRepository:
    """Get registration repository instance."""
    postgres = await get_postgres()
    return RegistrationRepository(postgres.pool)


Repository = Annotated[RegistrationRepository, Depends(get_registration_repository)]


async def get_accommodation_matcher(repo: Repository) -> AccommodationMatcher:
    """Get accommodation matcher bound to the repository."""
    settings = get_settings().matching
    return AccommodationMatcher(repo, timeout=settings.repository_timeout)


async def get_ride_matcher(repo: Repository) -> RideMatcher:
    """Get ride matcher bound to the repository."""
    settings = get_settings().matching
    return RideMatcher(
        repo,
        timeout=settings.repository_timeout,
        result_limit=settings.result_limit,
    )


# Type aliases for dependency injection
AccommodationMatcherDep = Annotated[AccommodationMatcher, Depends(get_accommodation_matcher)]
RideMatcherDep = Annotated[RideMatcher, Depends(get_ride_matcher)]
