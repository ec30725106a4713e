"""
Registration Models.

Pydantic models for the read-only registration records used by the
accommodation and transportation dashboards.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys for the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# Enumerations
# ============================================================


class RecordCategory(str, Enum):
    """Role a registration plays in accommodation or transportation."""

    PROVIDE_ACCOMMODATION = "provide-accommodation"
    NEED_ACCOMMODATION = "need-accommodation"
    HOTEL_REQUEST = "hotel-request"
    VEHICLE_PROVIDER = "vehicle-provider"
    RIDE_SEEKER = "ride-seeker"


class AccommodationKind(str, Enum):
    """Accommodation option picked on the registration form."""

    PROVIDE = "provide"
    NEED = "need"
    DISCOUNT_HOTEL = "discount-hotel"
    NOT_REQUIRED = "not-required"


class GenderPreference(str, Enum):
    """Guests a host is willing to accommodate."""

    MALE_ONLY = "male-only"
    FEMALE_ONLY = "female-only"
    ANYONE = "anyone"


ALUMNI = "Alumni"
LOOKING_FOR_TRANSPORT = "looking-for-transport"
VEHICLE_MODES = ("car", "bus", "two-wheeler")

ACCOMMODATION_CATEGORIES = {
    AccommodationKind.PROVIDE.value: RecordCategory.PROVIDE_ACCOMMODATION,
    AccommodationKind.NEED.value: RecordCategory.NEED_ACCOMMODATION,
    AccommodationKind.DISCOUNT_HOTEL.value: RecordCategory.HOTEL_REQUEST,
}

# Dashboard sort keys -> registration columns
SORT_COLUMNS = {
    "registrationDate": "registration_date",
    "name": "name",
    "email": "email",
    "school": "school",
    "yearOfPassing": "year_of_passing",
    "district": "district",
}
SortField = Literal[
    "registrationDate", "name", "email", "school", "yearOfPassing", "district"
]


def parse_yes_no(v: Any) -> bool:
    """Intake stores some flags as "yes"/"no" strings."""
    if isinstance(v, str):
        return v.strip().lower() in ("yes", "true", "1")
    return bool(v)


# ============================================================
# Nested details
# ============================================================


class NeededCounts(CamelModel):
    """Number of guests a seeker needs a place for."""

    male: int = 0
    female: int = 0
    other: int = 0

    @field_validator("male", "female", "other", mode="before")
    @classmethod
    def none_as_zero(cls, v: Any) -> int:
        """Missing counts are zero."""
        return 0 if v is None else v

    @computed_field
    @property
    def total(self) -> int:
        """Total number of guests."""
        return self.male + self.female + self.other


class HotelRequirements(CamelModel):
    """Discounted hotel request details."""

    adults: int = 0
    children_above_11: int = Field(default=0, alias="childrenAbove11")
    children_5_to_11: int = Field(default=0, alias="children5to11")
    check_in_date: Optional[str] = None
    check_out_date: Optional[str] = None
    room_preference: Optional[str] = None
    special_requests: Optional[str] = None

    @computed_field
    @property
    def children(self) -> int:
        """Children counted for the room booking."""
        return self.children_above_11 + self.children_5_to_11


class AccommodationDetails(CamelModel):
    """Accommodation section of a registration."""

    plan_accommodation: bool = False
    kind: Optional[str] = Field(None, description="provide / need / discount-hotel / not-required")
    capacity: Optional[int] = Field(None, description="Guests a host can take")
    gender_preference: Optional[str] = Field(None, description="male-only / female-only / anyone")
    needed: NeededCounts = Field(default_factory=NeededCounts)
    location: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    landmark: Optional[str] = None
    remarks: Optional[str] = None
    hotel: Optional[HotelRequirements] = None

    @field_validator("needed", mode="before")
    @classmethod
    def default_needed(cls, v: Any) -> Any:
        """Null needed counts become all zeros."""
        return {} if v is None else v


class TransportationDetails(CamelModel):
    """Transportation section of a registration."""

    is_travelling: bool = False
    mode_of_transport: Optional[str] = None
    starting_location: Optional[str] = None
    postal_code: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    landmark: Optional[str] = None
    travel_date: Optional[str] = None
    travel_time: Optional[str] = None
    vehicle_capacity: Optional[int] = None
    group_size: Optional[int] = None
    ready_to_share: bool = False
    need_parking: bool = False
    special_requirements: Optional[str] = None

    @field_validator("ready_to_share", "need_parking", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> bool:
        """Accept booleans and "yes"/"no" strings."""
        return parse_yes_no(v)


# ============================================================
# Participant record
# ============================================================


class ParticipantRecord(CamelModel):
    """Read-only view of a registration row."""

    id: UUID
    registration_type: str = ALUMNI
    name: Optional[str] = None
    email: Optional[str] = None
    contact_number: Optional[str] = None
    whatsapp_number: Optional[str] = None
    school: Optional[str] = None
    year_of_passing: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    registration_date: Optional[datetime] = None
    accommodation: Optional[AccommodationDetails] = None
    transportation: Optional[TransportationDetails] = None

    @property
    def accommodation_category(self) -> Optional[RecordCategory]:
        """Accommodation role, or None when not planning accommodation."""
        acc = self.accommodation
        if acc is None or not acc.plan_accommodation:
            return None
        return ACCOMMODATION_CATEGORIES.get(acc.kind or "")

    @property
    def is_travelling(self) -> bool:
        """Whether the registrant travels to the event."""
        return self.transportation is not None and self.transportation.is_travelling

    @property
    def is_vehicle_provider(self) -> bool:
        """Travelling, ready to share and has a vehicle with seats."""
        tr = self.transportation
        return (
            self.is_travelling
            and tr.ready_to_share
            and (tr.vehicle_capacity or 0) > 0
        )

    @property
    def is_ride_seeker(self) -> bool:
        """Travelling and looking for transport."""
        return (
            self.is_travelling
            and self.transportation.mode_of_transport == LOOKING_FOR_TRANSPORT
        )

    @property
    def categories(self) -> set[RecordCategory]:
        """All roles the record plays."""
        roles = set()
        if self.accommodation_category is not None:
            roles.add(self.accommodation_category)
        if self.is_vehicle_provider:
            roles.add(RecordCategory.VEHICLE_PROVIDER)
        if self.is_ride_seeker:
            roles.add(RecordCategory.RIDE_SEEKER)
        return roles

    def has_category(self, category: RecordCategory) -> bool:
        """Check whether the record plays the given role."""
        return category in self.categories


# ============================================================
# Query models
# ============================================================


class RecordQuery(BaseModel):
    """
    Structural filter for candidate sets.

    The repository translates it to SQL; `matches` is the same predicate
    evaluated in memory.
    """

    category: RecordCategory
    min_capacity: Optional[int] = None
    exclude_id: Optional[UUID] = None
    travel_date: Optional[str] = None
    mode_of_transport: Optional[str] = None

    def matches(self, record: ParticipantRecord) -> bool:
        """Evaluate the query against a single record."""
        if record.registration_type != ALUMNI:
            return False
        if not record.has_category(self.category):
            return False
        if self.exclude_id is not None and record.id == self.exclude_id:
            return False

        if self.min_capacity is not None:
            capacity = (record.accommodation.capacity if record.accommodation else None) or 0
            if capacity < self.min_capacity:
                return False

        tr = record.transportation
        if self.travel_date is not None and (tr is None or tr.travel_date != self.travel_date):
            return False
        if self.mode_of_transport is not None and (
            tr is None or tr.mode_of_transport != self.mode_of_transport
        ):
            return False
        return True


class ListingFilters(BaseModel):
    """Filters shared by the dashboard listing endpoints."""

    search: Optional[str] = None
    gender: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    travel_date: Optional[str] = None
    mode_of_transport: Optional[str] = None
    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=200)
    sort_by: SortField = "registrationDate"
    sort_order: str = Field("desc", pattern="^(asc|desc)$")

    @field_validator("gender", "district", "state", "mode_of_transport", mode="before")
    @classmethod
    def all_as_none(cls, v: Any) -> Any:
        """The dashboard sends "all" for an unset filter."""
        if v in ("", "all"):
            return None
        return v

    @property
    def offset(self) -> int:
        """Rows skipped before the current page."""
        return (self.page - 1) * self.limit


class RecordPage(CamelModel):
    """One page of a listing."""

    items: list[ParticipantRecord]
    page: int
    limit: int
    total: int

    @computed_field
    @property
    def total_pages(self) -> int:
        """Number of pages for the current limit."""
        return -(-self.total // self.limit) if self.limit else 0

    @computed_field
    @property
    def has_next_page(self) -> bool:
        """Whether another page follows."""
        return self.page < self.total_pages

    @computed_field
    @property
    def has_previous_page(self) -> bool:
        """Whether a page precedes this one."""
        return self.page > 1


class DistrictCount(CamelModel):
    """District with number of accommodation registrations."""

    district: str
    count: int
