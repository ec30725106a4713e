"""
Matching Models.

Request options and response payloads for compatibility matching.
"""

from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from src.modules.registrations.models import (
    CamelModel,
    NeededCounts,
    ParticipantRecord,
    TransportationDetails,
)


class RideMatchOptions(CamelModel):
    """Parameters for ride matching."""

    max_distance: int = Field(50, description="Maximum postal-code distance (inclusive)")
    same_date_only: bool = True
    mode_of_transport: Optional[str] = None

    @field_validator("mode_of_transport", mode="before")
    @classmethod
    def all_as_none(cls, v):
        """"all" means no mode filter."""
        if v in ("", "all"):
            return None
        return v


class AccommodationSeeker(CamelModel):
    """Seeker summary for accommodation matching."""

    id: UUID
    name: Optional[str] = None
    needed: NeededCounts
    total_needed: int


class AccommodationMatchResult(CamelModel):
    """Seeker with hosts that can take the whole party."""

    seeker: AccommodationSeeker
    compatible_providers: list[ParticipantRecord]


class RideSeeker(CamelModel):
    """Seeker summary for ride matching."""

    id: UUID
    name: Optional[str] = None
    transportation: TransportationDetails


class RideMatch(CamelModel):
    """A vehicle provider scored against a seeker."""

    id: UUID
    name: Optional[str] = None
    email: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    school: Optional[str] = None
    transportation: TransportationDetails
    distance: int
    compatibility_score: int
    available_seats: int
    can_accommodate_full_group: bool


class RideMatchResult(CamelModel):
    """Seeker with ranked compatible rides."""

    seeker: RideSeeker
    compatible_rides: list[RideMatch]
    total_matches: int
