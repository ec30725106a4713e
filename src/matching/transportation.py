"""
Ride-sharing compatibility rules and scoring.

Score weights (base 100, floored at 0, so always within [0, 170]):

    - distance           subtracted as-is (closer is better)
    - same travel day    +20
    - same district      +15
    - same state         +10
    - seats for group    +25, otherwise -10

`evaluate_ride` computes the distance once and passes it to `score`;
called on its own, `score` computes it with the default strategy.
"""

from datetime import date, datetime
from typing import Any, Optional

from loguru import logger

from src.matching.distance import DistanceStrategy, PostalCodeDistance
from src.matching.models import RideMatch
from src.modules.registrations.models import ParticipantRecord, TransportationDetails

ride_log = logger.bind(module="Rides")

BASE_SCORE = 100
SAME_DAY_BONUS = 20
SAME_DISTRICT_BONUS = 15
SAME_STATE_BONUS = 10
FULL_GROUP_BONUS = 25
PARTIAL_GROUP_PENALTY = 10
MAX_SCORE = BASE_SCORE + SAME_DAY_BONUS + SAME_DISTRICT_BONUS + SAME_STATE_BONUS + FULL_GROUP_BONUS

DEFAULT_RESULT_LIMIT = 20

_default_strategy = PostalCodeDistance()


def travel_day(value: Any) -> Optional[date]:
    """
    Calendar day of a travel date, as written (no timezone conversion).

    Examples:
        >>> travel_day("2025-12-27")
        datetime.date(2025, 12, 27)
        >>> travel_day("2025-12-27T23:30:00+05:30")
        datetime.date(2025, 12, 27)
        >>> travel_day("soon") is None
        True
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1]
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return None
    return None


def same_travel_day(a: Any, b: Any) -> bool:
    """Check if two travel dates fall on the same calendar day."""
    day_a = travel_day(a)
    day_b = travel_day(b)
    if day_a is None or day_b is None:
        return False
    return day_a == day_b


def group_size(transport: TransportationDetails) -> int:
    """Seeker party size, unset or zero counts as 1."""
    return transport.group_size or 1


def available_seats(transport: TransportationDetails) -> int:
    """Seats left after reserving one for the driver."""
    return max(0, transport.vehicle_capacity or 0) - 1


def is_eligible(
    seeker: ParticipantRecord,
    provider: ParticipantRecord,
    max_distance: int,
    strategy: DistanceStrategy = _default_strategy,
) -> bool:
    """
    Check if a vehicle provider can be offered to a ride seeker.

    Args:
        seeker: Travelling registration
        provider: Candidate vehicle provider
        max_distance: Maximum distance (inclusive)
        strategy: Distance strategy

    Returns:
        True if provider shares rides, has seats and is within range
    """
    s_tr = seeker.transportation
    p_tr = provider.transportation
    if s_tr is None or p_tr is None:
        return False
    if not p_tr.ready_to_share or (p_tr.vehicle_capacity or 0) <= 0:
        return False
    return strategy.distance(s_tr.postal_code, p_tr.postal_code) <= max_distance


def score(
    seeker: TransportationDetails,
    provider: TransportationDetails,
    distance: Optional[int] = None,
    strategy: DistanceStrategy = _default_strategy,
) -> int:
    """
    Compatibility score of a provider for a seeker.

    Args:
        seeker: Seeker transportation details
        provider: Provider transportation details
        distance: Distance between their postal codes; computed with
            `strategy` when not given
        strategy: Distance strategy

    Returns:
        Score in [0, 170], higher is better
    """
    if distance is None:
        distance = strategy.distance(seeker.postal_code, provider.postal_code)

    result = BASE_SCORE - distance

    if same_travel_day(seeker.travel_date, provider.travel_date):
        result += SAME_DAY_BONUS

    if seeker.district == provider.district:
        result += SAME_DISTRICT_BONUS

    if seeker.state == provider.state:
        result += SAME_STATE_BONUS

    if available_seats(provider) >= group_size(seeker):
        result += FULL_GROUP_BONUS
    else:
        result -= PARTIAL_GROUP_PENALTY

    return max(0, result)


def evaluate_ride(
    seeker: ParticipantRecord,
    provider: ParticipantRecord,
    max_distance: int,
    strategy: DistanceStrategy = _default_strategy,
) -> RideMatch | None:
    """
    Score a provider for a seeker.

    Args:
        seeker: Travelling registration
        provider: Candidate vehicle provider
        max_distance: Maximum distance (inclusive)
        strategy: Distance strategy

    Returns:
        RideMatch, or None when the provider is out of range or has no
        transportation details
    """
    s_tr = seeker.transportation
    p_tr = provider.transportation
    if s_tr is None or p_tr is None:
        return None

    distance = strategy.distance(s_tr.postal_code, p_tr.postal_code)
    if distance > max_distance:
        return None

    seats = available_seats(p_tr)
    return RideMatch(
        id=provider.id,
        name=provider.name,
        email=provider.email,
        contact_number=provider.contact_number,
        whatsapp_number=provider.whatsapp_number,
        school=provider.school,
        transportation=p_tr,
        distance=distance,
        compatibility_score=score(s_tr, p_tr, distance),
        available_seats=seats,
        can_accommodate_full_group=seats >= group_size(s_tr),
    )


def rank_rides(
    matches: list[RideMatch],
    limit: int = DEFAULT_RESULT_LIMIT,
) -> list[RideMatch]:
    """
    Sort rides by score (descending) and keep the top `limit`.

    Ties keep their input order.
    """
    ranked = sorted(matches, key=lambda m: m.compatibility_score, reverse=True)
    return ranked[:limit]


def match_rides(
    seeker: ParticipantRecord,
    providers: list[ParticipantRecord],
    max_distance: int,
    limit: int = DEFAULT_RESULT_LIMIT,
    strategy: DistanceStrategy = _default_strategy,
) -> list[RideMatch]:
    """
    Score every candidate, drop out-of-range ones and rank the rest.

    Args:
        seeker: Travelling registration
        providers: Candidate vehicle providers
        max_distance: Maximum distance (inclusive)
        limit: Maximum number of rides returned
        strategy: Distance strategy

    Returns:
        Ranked rides, at most `limit`
    """
    matches = []
    skipped = 0

    for provider in providers:
        ride = evaluate_ride(seeker, provider, max_distance, strategy)
        if ride is None:
            skipped += 1
        else:
            matches.append(ride)

    ride_log.debug(f"Seeker {seeker.id}: {len(matches)} in range, {skipped} skipped")
    return rank_rides(matches, limit)
