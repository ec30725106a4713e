"""
Shared pytest fixtures for all tests.
"""

from datetime import datetime, timezone

import pytest


# ============================================================
# Sample Row Fixtures
# ============================================================


@pytest.fixture
def sample_host_row() -> dict:
    """Registration row (DB format) of an accommodation host."""
    return {
        "id": "7d4f8c1e-2b1a-4c55-9a51-0b7c9f1e2a10",
        "registration_type": "Alumni",
        "name": "Lakshmi Nair",
        "email": "lakshmi@example.com",
        "contact_number": "9847000001",
        "whatsapp_number": "9847000001",
        "school": "JNV Ernakulam",
        "year_of_passing": "2004",
        "district": "Ernakulam",
        "state": "Kerala",
        "registration_date": datetime(2025, 10, 1, 9, 30, tzinfo=timezone.utc),
        "accommodation": {
            "plan_accommodation": True,
            "kind": "provide",
            "capacity": 3,
            "gender_preference": "female-only",
            "location": "Kakkanad",
            "district": "Ernakulam",
            "state": "Kerala",
            "postal_code": "682030",
            "needed": None,
        },
        "transportation": None,
    }


@pytest.fixture
def sample_seeker_row() -> dict:
    """Registration row (DB format) of an accommodation seeker who also travels."""
    return {
        "id": "0b0e7d52-8f8e-4a4c-9f0e-5d3c2b1a0f99",
        "registration_type": "Alumni",
        "name": "Rahul Menon",
        "email": "rahul@example.com",
        "contact_number": "9847000002",
        "registration_date": datetime(2025, 10, 2, 11, 0, tzinfo=timezone.utc),
        "accommodation": {
            "plan_accommodation": True,
            "kind": "need",
            "needed": {"male": 1, "female": 1, "other": None},
        },
        "transportation": {
            "is_travelling": True,
            "mode_of_transport": "looking-for-transport",
            "postal_code": "695001",
            "district": "Thiruvananthapuram",
            "state": "Kerala",
            "travel_date": "2025-12-27",
            "group_size": 2,
            "ready_to_share": "no",
            "need_parking": "no",
        },
    }


@pytest.fixture
def sample_driver_row() -> dict:
    """Registration row (DB format) of a vehicle provider."""
    return {
        "id": "c3a9b7e2-1d4f-4e8a-b6c5-2f1e0d9c8b7a",
        "registration_type": "Alumni",
        "name": "Suresh Kumar",
        "transportation": {
            "is_travelling": True,
            "mode_of_transport": "car",
            "postal_code": "695010",
            "district": "Thiruvananthapuram",
            "state": "Kerala",
            "travel_date": "2025-12-27",
            "vehicle_capacity": 5,
            "ready_to_share": "yes",
            "need_parking": "yes",
        },
    }
