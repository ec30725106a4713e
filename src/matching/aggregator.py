"""
Dashboard aggregations.

The heavy lifting (group-by with counts and sums) runs in the repository as
a single query; the functions here shape grouped rows into stat-card
payloads. Proximity grouping works on an in-memory list of travellers.
"""

from collections import Counter

from loguru import logger

from src.modules.registrations.models import (
    LOOKING_FOR_TRANSPORT,
    VEHICLE_MODES,
    AccommodationKind,
    CamelModel,
    ParticipantRecord,
)

aggregator_log = logger.bind(module="Aggregator")

POSTAL_PREFIX_LENGTH = 3
TOP_COMMON_DATES = 3


# ============================================================
# Accommodation
# ============================================================


class CategoryStats(CamelModel):
    """Count with optional capacity/needed totals."""

    count: int = 0
    total_capacity: int = 0
    total_needed: int = 0


class AccommodationStats(CamelModel):
    """Accommodation stat cards."""

    providers: CategoryStats
    seekers: CategoryStats
    hotel_requests: CategoryStats
    not_required: CategoryStats


def summarize_accommodation(rows: list[dict]) -> AccommodationStats:
    """
    Shape grouped accommodation rows into stat cards.

    Args:
        rows: Rows with kind, count, total_capacity and total_needed

    Returns:
        AccommodationStats; kinds with no rows report zeros
    """
    by_kind = {}
    for row in rows:
        by_kind[row.get("kind")] = CategoryStats(
            count=row.get("count") or 0,
            total_capacity=row.get("total_capacity") or 0,
            total_needed=row.get("total_needed") or 0,
        )

    return AccommodationStats(
        providers=by_kind.get(AccommodationKind.PROVIDE.value, CategoryStats()),
        seekers=by_kind.get(AccommodationKind.NEED.value, CategoryStats()),
        hotel_requests=by_kind.get(AccommodationKind.DISCOUNT_HOTEL.value, CategoryStats()),
        not_required=by_kind.get(AccommodationKind.NOT_REQUIRED.value, CategoryStats()),
    )


# ============================================================
# Transportation
# ============================================================


class ModeStats(CamelModel):
    """Per-mode transportation totals."""

    count: int = 0
    total_capacity: int = 0
    total_seekers: int = 0
    need_parking: int = 0
    ride_sharing_available: int = 0


class VehicleProviderStats(CamelModel):
    count: int = 0
    total_capacity: int = 0
    need_parking: int = 0


class RideSeekerStats(CamelModel):
    count: int = 0
    total_needed: int = 0


class RideSharingStats(CamelModel):
    count: int = 0
    total_capacity: int = 0


class TransportationStats(CamelModel):
    """Transportation stat cards."""

    vehicle_providers: VehicleProviderStats
    ride_seekers: RideSeekerStats
    ride_sharing_available: RideSharingStats
    mode_breakdown: dict[str, ModeStats]
    total_travellers: int = 0


def summarize_transportation(rows: list[dict]) -> TransportationStats:
    """
    Shape grouped transportation rows into stat cards.

    Vehicle providers are ride-sharers travelling by car, bus or
    two-wheeler; ride seekers are those looking for transport.

    Args:
        rows: Rows with mode, count, total_capacity, total_seekers,
            need_parking and ride_sharing

    Returns:
        TransportationStats
    """
    providers = VehicleProviderStats()
    seekers = RideSeekerStats()
    sharing = RideSharingStats()
    breakdown: dict[str, ModeStats] = {}
    total = 0

    for row in rows:
        mode = row.get("mode") or "unknown"
        stats = ModeStats(
            count=row.get("count") or 0,
            total_capacity=row.get("total_capacity") or 0,
            total_seekers=row.get("total_seekers") or 0,
            need_parking=row.get("need_parking") or 0,
            ride_sharing_available=row.get("ride_sharing") or 0,
        )
        breakdown[mode] = stats
        total += stats.count

        if mode in VEHICLE_MODES:
            providers.count += stats.ride_sharing_available
            providers.total_capacity += stats.total_capacity
            providers.need_parking += stats.need_parking

        if mode == LOOKING_FOR_TRANSPORT:
            seekers.count += stats.count
            seekers.total_needed += stats.total_seekers

        if stats.ride_sharing_available > 0:
            sharing.count += stats.ride_sharing_available
            sharing.total_capacity += stats.total_capacity

    return TransportationStats(
        vehicle_providers=providers,
        ride_seekers=seekers,
        ride_sharing_available=sharing,
        mode_breakdown=breakdown,
        total_travellers=total,
    )


# ============================================================
# Proximity groups
# ============================================================


class DateCount(CamelModel):
    date: str
    count: int


class ProximityGroup(CamelModel):
    """Travellers whose postal codes share a prefix."""

    postal_prefix: str
    area_name: str
    member_count: int
    vehicle_providers: int
    ride_seekers: int
    total_capacity: int
    total_seekers: int
    can_self_sustain: bool
    common_dates: list[DateCount]
    members: list[ParticipantRecord]


class ProximitySummary(CamelModel):
    total_travellers: int
    total_grouped_travellers: int
    self_sustainable_groups: int


class ProximityGroups(CamelModel):
    groups: list[ProximityGroup]
    total_groups: int
    summary: ProximitySummary


def _build_group(prefix: str, members: list[ParticipantRecord]) -> ProximityGroup:
    providers = [m for m in members if m.is_vehicle_provider]
    seekers = [m for m in members if m.is_ride_seeker]

    total_capacity = sum(p.transportation.vehicle_capacity or 0 for p in providers)
    total_seekers = sum(s.transportation.group_size or 1 for s in seekers)

    dates = Counter(
        m.transportation.travel_date for m in members if m.transportation.travel_date
    )
    common_dates = [
        DateCount(date=d, count=c) for d, c in dates.most_common(TOP_COMMON_DATES)
    ]

    return ProximityGroup(
        postal_prefix=prefix,
        area_name=members[0].transportation.district or f"Area {prefix}",
        member_count=len(members),
        vehicle_providers=len(providers),
        ride_seekers=len(seekers),
        total_capacity=total_capacity,
        total_seekers=total_seekers,
        can_self_sustain=total_capacity >= total_seekers,
        common_dates=common_dates,
        members=members,
    )


def group_by_proximity(
    travellers: list[ParticipantRecord],
    min_group_size: int = 2,
) -> ProximityGroups:
    """
    Group travellers by the first three digits of their postal code.

    Args:
        travellers: Travelling registrations with postal codes
        min_group_size: Smallest group reported

    Returns:
        Groups sorted by size (largest first) with a summary
    """
    buckets: dict[str, list[ParticipantRecord]] = {}
    for traveller in travellers:
        tr = traveller.transportation
        postal_code = (tr.postal_code or "").strip() if tr else ""
        if not postal_code:
            continue
        prefix = postal_code[:POSTAL_PREFIX_LENGTH]
        buckets.setdefault(prefix, []).append(traveller)

    groups = [
        _build_group(prefix, members)
        for prefix, members in buckets.items()
        if len(members) >= min_group_size
    ]
    groups.sort(key=lambda g: g.member_count, reverse=True)

    aggregator_log.debug(
        f"Proximity: {len(travellers)} travellers, {len(groups)} groups "
        f"(min size {min_group_size})"
    )

    return ProximityGroups(
        groups=groups,
        total_groups=len(groups),
        summary=ProximitySummary(
            total_travellers=len(travellers),
            total_grouped_travellers=sum(g.member_count for g in groups),
            self_sustainable_groups=sum(1 for g in groups if g.can_self_sustain),
        ),
    )
