"""
Registration Repository.

Read-only data access layer over the `registrations` table:

    registrations (
        id                UUID PRIMARY KEY,
        registration_type TEXT,       -- Alumni / Staff / Other
        name, email, contact_number, whatsapp_number,
        school, year_of_passing, district, state  TEXT,
        registration_date TIMESTAMPTZ,
        accommodation     JSONB,      -- AccommodationDetails (snake_case keys)
        transportation    JSONB       -- TransportationDetails (snake_case keys)
    )

Candidate sets are full scans filtered by JSONB predicates; no index on the
JSONB fields is assumed, so large tables scale linearly.
"""

from typing import Optional
from uuid import UUID

import asyncpg
from asyncpg import Pool
from loguru import logger

from src.matching.errors import RepositoryUnavailableError
from src.modules.registrations.models import (
    ALUMNI,
    SORT_COLUMNS,
    DistrictCount,
    ListingFilters,
    ParticipantRecord,
    RecordCategory,
    RecordPage,
    RecordQuery,
)

registrations_log = logger.bind(module="Registrations")

PLANS_ACCOMMODATION = "(accommodation->>'plan_accommodation')::boolean IS TRUE"
IS_TRAVELLING = "(transportation->>'is_travelling')::boolean IS TRUE"

CATEGORY_CONDITIONS = {
    RecordCategory.PROVIDE_ACCOMMODATION: (
        f"{PLANS_ACCOMMODATION} AND accommodation->>'kind' = 'provide'"
    ),
    RecordCategory.NEED_ACCOMMODATION: (
        f"{PLANS_ACCOMMODATION} AND accommodation->>'kind' = 'need'"
    ),
    RecordCategory.HOTEL_REQUEST: (
        f"{PLANS_ACCOMMODATION} AND accommodation->>'kind' = 'discount-hotel'"
    ),
    RecordCategory.VEHICLE_PROVIDER: (
        f"{IS_TRAVELLING}"
        " AND (transportation->>'ready_to_share')::boolean IS TRUE"
        " AND COALESCE((transportation->>'vehicle_capacity')::int, 0) > 0"
    ),
    RecordCategory.RIDE_SEEKER: (
        f"{IS_TRAVELLING}"
        " AND transportation->>'mode_of_transport' = 'looking-for-transport'"
    ),
}

# Seeker gender filter -> needed-count key
NEEDED_GENDER_FIELDS = {
    "male-only": "male",
    "female-only": "female",
}

TRANSPORTATION_FIELDS = {"district", "state"}


class _Where:
    """Collects WHERE conditions with positional asyncpg parameters."""

    def __init__(self, *conditions: str):
        self.conditions = list(conditions)
        self.values: list = []

    def add(self, condition: str, *values) -> None:
        """
        Add a condition; `{}` placeholders are numbered in order.

        Args:
            condition: SQL fragment like "name = {}"
            values: Parameter values, one per placeholder
        """
        placeholders = []
        for value in values:
            self.values.append(value)
            placeholders.append(f"${len(self.values)}")
        self.conditions.append(condition.format(*placeholders))

    def sql(self) -> str:
        """Render the WHERE clause."""
        return " AND ".join(f"({c})" for c in self.conditions)


class RegistrationRepository:
    """Repository for registration read operations."""

    def __init__(self, pool: Pool):
        """
        Initialize repository with database connection pool.

        Args:
            pool: asyncpg connection pool
        """
        self._pool = pool

    # ========== Low-level helpers ==========

    async def _fetch(self, query: str, *args) -> list[asyncpg.Record]:
        """Run a query, mapping driver failures to RepositoryUnavailableError."""
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetch(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            registrations_log.error(f"Query failed: {e}")
            raise RepositoryUnavailableError(f"Registration store error: {e}") from e

    async def _fetchval(self, query: str, *args):
        """Run a scalar query, mapping driver failures."""
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetchval(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            registrations_log.error(f"Query failed: {e}")
            raise RepositoryUnavailableError(f"Registration store error: {e}") from e

    @staticmethod
    def _to_records(rows: list[asyncpg.Record]) -> list[ParticipantRecord]:
        return [ParticipantRecord.model_validate(dict(row)) for row in rows]

    # ========== Lookups ==========

    async def get_by_id(self, record_id: UUID) -> Optional[ParticipantRecord]:
        """
        Get a registration by ID.

        Args:
            record_id: Registration ID

        Returns:
            ParticipantRecord or None if not found
        """
        rows = await self._fetch("SELECT * FROM registrations WHERE id = $1", record_id)
        if not rows:
            return None
        return ParticipantRecord.model_validate(dict(rows[0]))

    async def query(self, criteria: RecordQuery) -> list[ParticipantRecord]:
        """
        Fetch all Alumni registrations matching a structural query.

        Args:
            criteria: Category plus optional capacity, exclusion, date and
                mode constraints

        Returns:
            Matching records in registration order
        """
        where = _Where(CATEGORY_CONDITIONS[criteria.category])
        where.add("registration_type = {}", ALUMNI)

        if criteria.min_capacity is not None:
            where.add(
                "COALESCE((accommodation->>'capacity')::int, 0) >= {}",
                criteria.min_capacity,
            )
        if criteria.exclude_id is not None:
            where.add("id <> {}", criteria.exclude_id)
        if criteria.travel_date is not None:
            where.add("transportation->>'travel_date' = {}", criteria.travel_date)
        if criteria.mode_of_transport is not None:
            where.add("transportation->>'mode_of_transport' = {}", criteria.mode_of_transport)

        query = f"""
        SELECT * FROM registrations
        WHERE {where.sql()}
        ORDER BY registration_date ASC NULLS LAST, id ASC
        """
        rows = await self._fetch(query, *where.values)
        registrations_log.debug(f"Query {criteria.category.value}: {len(rows)} rows")
        return self._to_records(rows)

    # ========== Listings ==========

    async def list_by_category(
        self, category: RecordCategory, filters: ListingFilters
    ) -> RecordPage:
        """
        Paginated listing of one category for the dashboard tables.

        Args:
            category: Registration role to list
            filters: Search, attribute filters and pagination

        Returns:
            RecordPage with items and total count
        """
        where = _Where(CATEGORY_CONDITIONS[category])
        where.add("registration_type = {}", ALUMNI)

        if filters.search:
            pattern = f"%{filters.search}%"
            where.add(
                "name ILIKE {} OR email ILIKE {} OR school ILIKE {}"
                " OR accommodation->>'location' ILIKE {}"
                " OR accommodation->>'district' ILIKE {}"
                " OR transportation->>'starting_location' ILIKE {}",
                *([pattern] * 6),
            )

        if category == RecordCategory.PROVIDE_ACCOMMODATION:
            if filters.gender:
                where.add("accommodation->>'gender_preference' = {}", filters.gender)
            if filters.district:
                where.add("accommodation->>'district' = {}", filters.district)
        elif category == RecordCategory.NEED_ACCOMMODATION:
            if filters.gender:
                key = NEEDED_GENDER_FIELDS.get(filters.gender, "other")
                where.add(f"COALESCE((accommodation->'needed'->>'{key}')::int, 0) > 0")
        elif category in (RecordCategory.VEHICLE_PROVIDER, RecordCategory.RIDE_SEEKER):
            self._add_transportation_filters(where, filters)

        direction = "ASC" if filters.sort_order == "asc" else "DESC"
        column = SORT_COLUMNS[filters.sort_by]
        n = len(where.values)
        query = f"""
        SELECT * FROM registrations
        WHERE {where.sql()}
        ORDER BY {column} {direction} NULLS LAST, id {direction}
        LIMIT ${n + 1} OFFSET ${n + 2}
        """
        count_query = f"SELECT COUNT(*) FROM registrations WHERE {where.sql()}"

        rows = await self._fetch(query, *where.values, filters.limit, filters.offset)
        total = await self._fetchval(count_query, *where.values)

        return RecordPage(
            items=self._to_records(rows),
            page=filters.page,
            limit=filters.limit,
            total=total or 0,
        )

    @staticmethod
    def _add_transportation_filters(where: _Where, filters: ListingFilters) -> None:
        if filters.mode_of_transport:
            where.add("transportation->>'mode_of_transport' = {}", filters.mode_of_transport)
        if filters.district:
            where.add("transportation->>'district' = {}", filters.district)
        if filters.state:
            where.add("transportation->>'state' = {}", filters.state)
        if filters.travel_date:
            where.add("transportation->>'travel_date' = {}", filters.travel_date)

    # ========== Aggregations ==========

    async def accommodation_stats(self) -> list[dict]:
        """
        Group accommodation registrations by kind.

        Returns:
            Rows with kind, count, total_capacity (hosts) and
            total_needed (seekers)
        """
        query = f"""
        SELECT
            accommodation->>'kind' AS kind,
            COUNT(*) AS count,
            SUM(CASE WHEN accommodation->>'kind' = 'provide'
                THEN GREATEST(COALESCE((accommodation->>'capacity')::int, 0), 0)
                ELSE 0 END) AS total_capacity,
            SUM(CASE WHEN accommodation->>'kind' = 'need'
                THEN COALESCE((accommodation->'needed'->>'male')::int, 0)
                   + COALESCE((accommodation->'needed'->>'female')::int, 0)
                   + COALESCE((accommodation->'needed'->>'other')::int, 0)
                ELSE 0 END) AS total_needed
        FROM registrations
        WHERE registration_type = $1 AND {PLANS_ACCOMMODATION}
        GROUP BY 1
        """
        rows = await self._fetch(query, ALUMNI)
        return [dict(row) for row in rows]

    async def transportation_stats(self, filters: ListingFilters) -> list[dict]:
        """
        Group travelling registrations by mode of transport.

        Args:
            filters: Search, mode, district, state and date filters

        Returns:
            Rows with mode, count, total_capacity, total_seekers,
            need_parking and ride_sharing
        """
        where = _Where(IS_TRAVELLING)
        where.add("registration_type = {}", ALUMNI)
        if filters.search:
            pattern = f"%{filters.search}%"
            where.add(
                "name ILIKE {} OR email ILIKE {} OR school ILIKE {}"
                " OR transportation->>'starting_location' ILIKE {}"
                " OR transportation->>'landmark' ILIKE {}",
                *([pattern] * 5),
            )
        self._add_transportation_filters(where, filters)

        query = f"""
        SELECT
            transportation->>'mode_of_transport' AS mode,
            COUNT(*) AS count,
            SUM(GREATEST(COALESCE((transportation->>'vehicle_capacity')::int, 0), 0)) AS total_capacity,
            SUM(GREATEST(COALESCE((transportation->>'group_size')::int, 0), 0)) AS total_seekers,
            COUNT(*) FILTER (
                WHERE COALESCE((transportation->>'need_parking')::boolean, FALSE)
            ) AS need_parking,
            COUNT(*) FILTER (
                WHERE COALESCE((transportation->>'ready_to_share')::boolean, FALSE)
            ) AS ride_sharing
        FROM registrations
        WHERE {where.sql()}
        GROUP BY 1
        """
        rows = await self._fetch(query, *where.values)
        return [dict(row) for row in rows]

    async def accommodation_districts(self) -> list[DistrictCount]:
        """Accommodation districts with registration counts, blanks dropped."""
        query = f"""
        SELECT accommodation->>'district' AS district, COUNT(*) AS count
        FROM registrations
        WHERE registration_type = $1 AND {PLANS_ACCOMMODATION}
          AND COALESCE(accommodation->>'district', '') <> ''
        GROUP BY 1
        ORDER BY 1
        """
        rows = await self._fetch(query, ALUMNI)
        return [DistrictCount(district=row["district"], count=row["count"]) for row in rows]

    async def transportation_values(self, field: str) -> list[str]:
        """
        Distinct non-empty transportation districts or states.

        Args:
            field: "district" or "state"

        Returns:
            Sorted distinct values
        """
        if field not in TRANSPORTATION_FIELDS:
            raise ValueError(f"Unsupported transportation field: {field}")

        query = f"""
        SELECT DISTINCT transportation->>'{field}' AS value
        FROM registrations
        WHERE registration_type = $1 AND {IS_TRAVELLING}
          AND COALESCE(transportation->>'{field}', '') <> ''
        ORDER BY 1
        """
        rows = await self._fetch(query, ALUMNI)
        return [row["value"] for row in rows]

    async def travellers_with_postal_code(self) -> list[ParticipantRecord]:
        """Travelling registrations that have a starting postal code."""
        query = f"""
        SELECT * FROM registrations
        WHERE registration_type = $1 AND {IS_TRAVELLING}
          AND COALESCE(TRIM(transportation->>'postal_code'), '') <> ''
        ORDER BY registration_date ASC NULLS LAST, id ASC
        """
        rows = await self._fetch(query, ALUMNI)
        return self._to_records(rows)
