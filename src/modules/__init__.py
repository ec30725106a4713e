"""Modules package - Domain modules with repository pattern."""

from src.modules.registrations import (
    ListingFilters,
    ParticipantRecord,
    RecordCategory,
    RecordPage,
    RecordQuery,
    RegistrationRepository,
)

__all__ = [
    # Registrations
    "ParticipantRecord",
    "RecordCategory",
    "RecordQuery",
    "ListingFilters",
    "RecordPage",
    "RegistrationRepository",
]
