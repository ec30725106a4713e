"""Registrations module."""

from src.modules.registrations.models import (
    AccommodationDetails,
    AccommodationKind,
    DistrictCount,
    GenderPreference,
    HotelRequirements,
    ListingFilters,
    NeededCounts,
    ParticipantRecord,
    RecordCategory,
    RecordPage,
    RecordQuery,
    TransportationDetails,
)
from src.modules.registrations.repository import RegistrationRepository

__all__ = [
    "AccommodationDetails",
    "AccommodationKind",
    "DistrictCount",
    "GenderPreference",
    "HotelRequirements",
    "ListingFilters",
    "NeededCounts",
    "ParticipantRecord",
    "RecordCategory",
    "RecordPage",
    "RecordQuery",
    "TransportationDetails",
    "RegistrationRepository",
]
