"""
Compatibility matchers.

Orchestrate repository lookups and the pure evaluators. Matching is
read-only and stateless: every call fetches its own candidate set, so
concurrent requests need no coordination. Each repository call is bounded
by a timeout since candidate sets are full scans.
"""

import asyncio
from typing import Awaitable, Optional, Protocol, TypeVar
from uuid import UUID

from loguru import logger

from src.matching import accommodation, transportation
from src.matching.distance import DistanceStrategy, PostalCodeDistance
from src.matching.errors import InvalidInputError, MatchTimeoutError, NotFoundError
from src.matching.models import (
    AccommodationMatchResult,
    AccommodationSeeker,
    RideMatchOptions,
    RideMatchResult,
    RideSeeker,
)
from src.modules.registrations.models import (
    ParticipantRecord,
    RecordCategory,
    RecordQuery,
)

matcher_log = logger.bind(module="Matcher")

T = TypeVar("T")

DEFAULT_TIMEOUT = 10.0


class RecordRepository(Protocol):
    """Read-only registration store used by the matchers."""

    async def get_by_id(self, record_id: UUID) -> Optional[ParticipantRecord]:
        ...

    async def query(self, criteria: RecordQuery) -> list[ParticipantRecord]:
        ...


def parse_record_id(record_id: str | UUID) -> UUID:
    """
    Parse a registration ID.

    Raises:
        InvalidInputError: If the ID is not a valid UUID
    """
    if isinstance(record_id, UUID):
        return record_id
    try:
        return UUID(str(record_id))
    except ValueError:
        raise InvalidInputError(f"Invalid registration id: {record_id}")


class _BaseMatcher:
    """Shared repository access with timeout handling."""

    def __init__(self, repository: RecordRepository, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize matcher.

        Args:
            repository: Registration store
            timeout: Seconds allowed per repository call
        """
        self.repository = repository
        self.timeout = timeout

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError:
            matcher_log.error(f"{operation} timed out after {self.timeout}s")
            raise MatchTimeoutError(f"{operation} timed out after {self.timeout}s")

    async def _get_seeker(self, seeker_id: str | UUID) -> Optional[ParticipantRecord]:
        record_id = parse_record_id(seeker_id)
        return await self._call("Seeker lookup", self.repository.get_by_id(record_id))


class AccommodationMatcher(_BaseMatcher):
    """Finds hosts that can take an accommodation seeker's party."""

    async def find_compatible_accommodation(
        self, seeker_id: str | UUID
    ) -> AccommodationMatchResult:
        """
        Find hosts compatible with a seeker.

        Args:
            seeker_id: Registration ID of the seeker

        Returns:
            Seeker summary and compatible hosts (unranked, repository order)

        Raises:
            InvalidInputError: Malformed seeker ID
            NotFoundError: Seeker missing or not needing accommodation
            MatchTimeoutError: Repository call timed out
        """
        seeker = await self._get_seeker(seeker_id)
        if seeker is None or not seeker.has_category(RecordCategory.NEED_ACCOMMODATION):
            raise NotFoundError("Seeker not found")

        needed = seeker.accommodation.needed
        total = accommodation.total_needed(needed)

        if total < 1:
            matcher_log.warning(f"Seeker {seeker.id} needs no places, nothing to match")

        candidates = await self._call(
            "Host query",
            self.repository.query(
                RecordQuery(
                    category=RecordCategory.PROVIDE_ACCOMMODATION,
                    min_capacity=total,
                )
            ),
        )

        compatible = accommodation.filter_compatible(seeker, candidates)
        matcher_log.info(
            f"Accommodation seeker {seeker.id}: {len(compatible)} compatible hosts"
        )

        return AccommodationMatchResult(
            seeker=AccommodationSeeker(
                id=seeker.id,
                name=seeker.name,
                needed=needed,
                total_needed=total,
            ),
            compatible_providers=compatible,
        )


class RideMatcher(_BaseMatcher):
    """Finds and ranks vehicle providers for a ride seeker."""

    def __init__(
        self,
        repository: RecordRepository,
        timeout: float = DEFAULT_TIMEOUT,
        result_limit: int = transportation.DEFAULT_RESULT_LIMIT,
        strategy: DistanceStrategy | None = None,
    ):
        """
        Initialize matcher.

        Args:
            repository: Registration store
            timeout: Seconds allowed per repository call
            result_limit: Maximum number of rides returned
            strategy: Distance strategy, postal-code arithmetic by default
        """
        super().__init__(repository, timeout)
        self.result_limit = result_limit
        self.strategy = strategy or PostalCodeDistance()

    async def find_compatible_rides(
        self,
        seeker_id: str | UUID,
        options: RideMatchOptions | None = None,
    ) -> RideMatchResult:
        """
        Find ranked rides for a travelling seeker.

        Args:
            seeker_id: Registration ID of the seeker
            options: Distance, date and mode constraints

        Returns:
            Seeker summary, ranked rides (at most `result_limit`) and count

        Raises:
            InvalidInputError: Malformed seeker ID or negative max distance
            NotFoundError: Seeker missing or not travelling
            MatchTimeoutError: Repository call timed out
        """
        options = options or RideMatchOptions()
        if options.max_distance < 0:
            raise InvalidInputError("max_distance must not be negative")

        seeker = await self._get_seeker(seeker_id)
        if seeker is None or not seeker.is_travelling:
            raise NotFoundError("Seeker not found or not travelling")

        seeker_transport = seeker.transportation
        travel_date = None
        if options.same_date_only:
            if seeker_transport.travel_date:
                travel_date = seeker_transport.travel_date
            else:
                matcher_log.debug(f"Seeker {seeker.id} has no travel date, date filter skipped")

        criteria = RecordQuery(
            category=RecordCategory.VEHICLE_PROVIDER,
            exclude_id=seeker.id,
            travel_date=travel_date,
            mode_of_transport=options.mode_of_transport,
        )

        candidates = await self._call("Ride provider query", self.repository.query(criteria))
        matcher_log.debug(f"Ride seeker {seeker.id}: {len(candidates)} candidate providers")

        rides = transportation.match_rides(
            seeker,
            candidates,
            max_distance=options.max_distance,
            limit=self.result_limit,
            strategy=self.strategy,
        )
        matcher_log.info(f"Ride seeker {seeker.id}: {len(rides)} compatible rides")

        return RideMatchResult(
            seeker=RideSeeker(
                id=seeker.id,
                name=seeker.name,
                transportation=seeker_transport,
            ),
            compatible_rides=rides,
            total_matches=len(rides),
        )
