"""
Unit tests for the dashboard API routes.

Routes run against in-memory repositories through dependency overrides;
the application lifespan (database connect) is not started.
"""

from contextlib import asynccontextmanager
from types import SimpleNamespace
from uuid import uuid4

import asyncpg
import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import (
    get_accommodation_matcher,
    get_registration_repository,
    get_ride_matcher,
)
from src.api.main import app
from src.matching import AccommodationMatcher, RepositoryUnavailableError, RideMatcher
from src.modules.registrations.models import (
    DistrictCount,
    ListingFilters,
    RecordCategory,
    RecordPage,
)
from tests.fixtures.registrations import (
    FailingRepository,
    FakeRegistrationRepository,
    make_driver,
    make_host,
    make_seeker,
    make_traveller,
)


class FakeDashboardRepository(FakeRegistrationRepository):
    """In-memory repository with the listing and aggregation queries."""

    def __init__(self, records=None, delay=0.0):
        super().__init__(records, delay)
        self.listings: list[tuple[RecordCategory, ListingFilters]] = []

    async def list_by_category(self, category, filters):
        self.listings.append((category, filters))
        items = [r for r in self.records if r.has_category(category)]
        return RecordPage(
            items=items[filters.offset:filters.offset + filters.limit],
            page=filters.page,
            limit=filters.limit,
            total=len(items),
        )

    async def accommodation_stats(self):
        return [
            {"kind": "provide", "count": 2, "total_capacity": 5, "total_needed": 0},
            {"kind": "need", "count": 1, "total_capacity": 0, "total_needed": 3},
        ]

    async def transportation_stats(self, filters):
        return [
            {"mode": "car", "count": 2, "total_capacity": 9, "total_seekers": 0,
             "need_parking": 1, "ride_sharing": 2},
        ]

    async def accommodation_districts(self):
        return [DistrictCount(district="Ernakulam", count=3)]

    async def transportation_values(self, field):
        return ["Kerala"] if field == "state" else ["Ernakulam", "Kollam"]

    async def travellers_with_postal_code(self):
        return [r for r in self.records if r.is_travelling]


# ============================================================
# Fixtures
# ============================================================


@pytest.fixture
def seeker():
    return make_seeker(male=2)


@pytest.fixture
def traveller():
    return make_traveller("682001")


@pytest.fixture
def repo(seeker, traveller):
    return FakeDashboardRepository([
        seeker,
        traveller,
        make_host(2, "male-only", name="Host A"),
        make_host(2, "female-only", name="Host B"),
        make_driver("682501", name="Driver"),
        make_traveller("682010", name="Neighbour"),
    ])


@pytest.fixture
def client(repo):
    """Test client with every dependency bound to the fake repository."""
    app.dependency_overrides[get_registration_repository] = lambda: repo
    app.dependency_overrides[get_accommodation_matcher] = lambda: AccommodationMatcher(repo)
    app.dependency_overrides[get_ride_matcher] = lambda: RideMatcher(repo)
    yield TestClient(app)
    app.dependency_overrides.clear()


def bind_matchers(repository, timeout: float = 10.0) -> None:
    app.dependency_overrides[get_accommodation_matcher] = (
        lambda: AccommodationMatcher(repository, timeout=timeout)
    )
    app.dependency_overrides[get_ride_matcher] = (
        lambda: RideMatcher(repository, timeout=timeout)
    )


# ============================================================
# Accommodation routes
# ============================================================


class TestAccommodationRoutes:
    """Tests for /accommodation routes."""

    def test_compatible_hosts(self, client, seeker):
        response = client.get(f"/accommodation/seekers/{seeker.id}/compatible")

        assert response.status_code == 200
        data = response.json()
        assert data["seeker"]["totalNeeded"] == 2
        assert [p["name"] for p in data["compatibleProviders"]] == ["Host A"]

    def test_unknown_seeker(self, client):
        response = client.get(f"/accommodation/seekers/{uuid4()}/compatible")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Seeker not found"}

    def test_malformed_seeker_id(self, client):
        response = client.get("/accommodation/seekers/abc/compatible")

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_stats(self, client):
        response = client.get("/accommodation/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["providers"]["totalCapacity"] == 5
        assert data["seekers"]["totalNeeded"] == 3
        assert data["hotelRequests"]["count"] == 0

    def test_list_providers(self, client, repo):
        response = client.get("/accommodation/providers", params={"gender": "all", "limit": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert len(data["items"]) == 1
        assert data["hasNextPage"] is True

        category, filters = repo.listings[0]
        assert category == RecordCategory.PROVIDE_ACCOMMODATION
        assert filters.gender is None

    def test_default_page_limit(self, client, repo):
        client.get("/accommodation/seekers")
        assert repo.listings[0][1].limit == 20

    def test_invalid_page(self, client):
        response = client.get("/accommodation/providers", params={"page": 0})

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_sort_parameters(self, client, repo):
        response = client.get(
            "/accommodation/hotels", params={"sortBy": "name", "sortOrder": "asc"}
        )

        assert response.status_code == 200
        filters = repo.listings[0][1]
        assert filters.sort_by == "name"
        assert filters.sort_order == "asc"

    def test_unknown_sort_field(self, client):
        response = client.get("/accommodation/providers", params={"sortBy": "password"})

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_districts(self, client):
        response = client.get("/accommodation/districts")
        assert response.json() == [{"district": "Ernakulam", "count": 3}]


# ============================================================
# Transportation routes
# ============================================================


class TestTransportationRoutes:
    """Tests for /transportation routes."""

    def test_compatible_rides(self, client, traveller):
        response = client.get(
            "/transportation/compatible-rides", params={"seekerId": str(traveller.id)}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["totalMatches"] == 1
        ride = data["compatibleRides"][0]
        assert ride["name"] == "Driver"
        assert ride["compatibilityScore"] == 170
        assert ride["availableSeats"] == 4
        assert ride["canAccommodateFullGroup"] is True

    def test_seeker_id_required(self, client):
        response = client.get("/transportation/compatible-rides")

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Seeker ID is required"}

    def test_negative_max_distance(self, client, traveller):
        response = client.get(
            "/transportation/compatible-rides",
            params={"seekerId": str(traveller.id), "maxDistance": -1},
        )
        assert response.status_code == 400

    def test_seeker_not_travelling(self, client, seeker):
        response = client.get(
            "/transportation/compatible-rides", params={"seekerId": str(seeker.id)}
        )
        assert response.status_code == 404

    def test_stats(self, client):
        response = client.get("/transportation/stats", params={"modeOfTransport": "all"})

        assert response.status_code == 200
        data = response.json()
        assert data["vehicleProviders"]["totalCapacity"] == 9
        assert data["modeBreakdown"]["car"]["rideSharingAvailable"] == 2
        assert data["totalTravellers"] == 2

    def test_list_vehicle_providers(self, client, repo):
        response = client.get("/transportation/providers", params={"date": "2025-12-27"})

        assert response.status_code == 200
        assert [r["name"] for r in response.json()["items"]] == ["Driver"]
        assert repo.listings[0][1].travel_date == "2025-12-27"

    def test_list_ride_seekers(self, client):
        response = client.get("/transportation/seekers")
        assert response.json()["total"] == 2

    def test_proximity_groups(self, client):
        response = client.get("/transportation/proximity-groups")

        assert response.status_code == 200
        data = response.json()
        assert data["totalGroups"] == 1
        assert data["groups"][0]["postalPrefix"] == "682"
        assert data["groups"][0]["memberCount"] == 3
        assert data["summary"]["selfSustainableGroups"] == 1

    def test_match_options_from_query(self, client, repo, traveller):
        matcher = RideMatcher(repo)
        received = []
        find = matcher.find_compatible_rides

        async def recording_find(seeker_id, options=None):
            received.append(options)
            return await find(seeker_id, options)

        matcher.find_compatible_rides = recording_find
        app.dependency_overrides[get_ride_matcher] = lambda: matcher

        response = client.get(
            "/transportation/compatible-rides",
            params={
                "seekerId": str(traveller.id),
                "maxDistance": 5,
                "sameDateOnly": "false",
                "modeOfTransport": "car",
            },
        )

        assert response.status_code == 200
        options = received[0]
        assert options.max_distance == 5
        assert options.same_date_only is False
        assert options.mode_of_transport == "car"

    def test_listing_mode_filter(self, client, repo):
        client.get("/transportation/providers", params={"modeOfTransport": "bus"})
        assert repo.listings[0][1].mode_of_transport == "bus"

    def test_min_group_size(self, client):
        response = client.get("/transportation/proximity-groups", params={"minGroupSize": 4})
        assert response.json()["totalGroups"] == 0

    def test_districts_and_states(self, client):
        assert client.get("/transportation/districts").json() == ["Ernakulam", "Kollam"]
        assert client.get("/transportation/states").json() == ["Kerala"]


# ============================================================
# Failure handling
# ============================================================


class TestFailures:
    """Store failures map to the unified error body."""

    def test_repository_unavailable(self, client):
        bind_matchers(FailingRepository(RepositoryUnavailableError()))

        response = client.get(f"/accommodation/seekers/{uuid4()}/compatible")

        assert response.status_code == 503
        assert response.json() == {
            "success": False,
            "message": "Registration store unavailable",
        }

    def test_timeout(self, client, traveller):
        bind_matchers(FakeRegistrationRepository([traveller], delay=0.5), timeout=0.01)

        response = client.get(
            "/transportation/compatible-rides", params={"seekerId": str(traveller.id)}
        )

        assert response.status_code == 504
        assert response.json()["success"] is False

    def test_health_without_database(self, client, monkeypatch):
        async def unavailable():
            raise RepositoryUnavailableError("PostgreSQL not connected")

        monkeypatch.setattr("src.api.routes.health.get_postgres", unavailable)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": True, "database": False}

    @pytest.mark.parametrize(
        "error",
        [
            asyncpg.InterfaceError("pool is closed"),
            asyncpg.exceptions.CannotConnectNowError("the database system is starting up"),
            ConnectionResetError("connection reset"),
        ],
    )
    def test_health_with_failing_pool(self, client, monkeypatch, error):
        class FailingPool:
            @asynccontextmanager
            async def acquire(self):
                raise error
                yield

        async def connected():
            return SimpleNamespace(pool=FailingPool())

        monkeypatch.setattr("src.api.routes.health.get_postgres", connected)

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": True, "database": False}
