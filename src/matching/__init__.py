"""
Matching module for accommodation and ride-sharing compatibility.

This module provides the pure evaluators, the repository-backed matchers
and the dashboard aggregations.
"""

from src.matching.accommodation import (
    filter_compatible,
    gender_compatible,
    is_eligible as is_accommodation_eligible,
    total_needed,
)
from src.matching.aggregator import (
    AccommodationStats,
    ProximityGroups,
    TransportationStats,
    group_by_proximity,
    summarize_accommodation,
    summarize_transportation,
)
from src.matching.distance import (
    UNKNOWN_DISTANCE,
    DistanceStrategy,
    PostalCodeDistance,
)
from src.matching.errors import (
    InvalidInputError,
    MatchingError,
    MatchTimeoutError,
    NotFoundError,
    RepositoryUnavailableError,
)
from src.matching.matcher import (
    AccommodationMatcher,
    RecordRepository,
    RideMatcher,
    parse_record_id,
)
from src.matching.models import (
    AccommodationMatchResult,
    RideMatch,
    RideMatchOptions,
    RideMatchResult,
)
from src.matching.transportation import (
    evaluate_ride,
    is_eligible as is_ride_eligible,
    match_rides,
    rank_rides,
    same_travel_day,
    score,
)

__all__ = [
    # Accommodation evaluator
    "total_needed",
    "gender_compatible",
    "is_accommodation_eligible",
    "filter_compatible",
    # Transportation evaluator
    "is_ride_eligible",
    "same_travel_day",
    "score",
    "evaluate_ride",
    "rank_rides",
    "match_rides",
    # Distance
    "UNKNOWN_DISTANCE",
    "DistanceStrategy",
    "PostalCodeDistance",
    # Matchers
    "RecordRepository",
    "AccommodationMatcher",
    "RideMatcher",
    "parse_record_id",
    # Models
    "RideMatchOptions",
    "RideMatch",
    "RideMatchResult",
    "AccommodationMatchResult",
    # Aggregator
    "AccommodationStats",
    "TransportationStats",
    "ProximityGroups",
    "summarize_accommodation",
    "summarize_transportation",
    "group_by_proximity",
    # Errors
    "MatchingError",
    "NotFoundError",
    "InvalidInputError",
    "RepositoryUnavailableError",
    "MatchTimeoutError",
]
