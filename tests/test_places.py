# =============================================================================
# tests/test_places.py - Google Places Client and Mapping Tests
# =============================================================================
# The client gets an httpx.Client backed by httpx.MockTransport, so no
# network calls are made.
#
# Run with: pytest tests/test_places.py -v
# =============================================================================

from uuid import uuid4

import httpx
import pytest

from app.exceptions import PlacesApiError, PlacesNotConfiguredError
from core.models.business import PriceRange
from core.services.places_service import (
    PlacesClient,
    build_query,
    map_place,
    parse_address,
    parse_opening_hours,
    price_range,
)


def _place(n: int) -> dict:
    return {"place_id": f"p{n}", "name": f"Place {n}", "formatted_address": f"{n} Main Rd, Surat, Gujarat 395003, India"}


def _details(place_id: str) -> dict:
    return {
        "name": f"Details {place_id}",
        "formatted_address": "CG Road, Navrangpura, Ahmedabad, Gujarat 380009, India",
        "formatted_phone_number": "079 2640 0000",
        "website": "https://example.in",
        "url": f"https://maps.google.com/?cid={place_id}",
        "price_level": 2,
        "photos": [{"photo_reference": "ref-a"}, {"photo_reference": "ref-b"}],
        "types": ["restaurant"],
    }


class FakePlacesApi:
    """MockTransport handler serving scripted text search pages."""

    def __init__(self, pages: list[dict], details_status: int = 200):
        self.pages = pages
        self.details_status = details_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/textsearch/json"):
            token = request.url.params.get("pagetoken")
            index = int(token) if token else 0
            return httpx.Response(200, json=self.pages[index])
        if request.url.path.endswith("/details/json"):
            if self.details_status != 200:
                return httpx.Response(self.details_status)
            return httpx.Response(200, json={"status": "OK", "result": _details(request.url.params["place_id"])})
        return httpx.Response(404)

    def client(self, sleeps: list | None = None) -> PlacesClient:
        http = httpx.Client(transport=httpx.MockTransport(self))
        return PlacesClient(
            api_key="test-key",
            http_client=http,
            page_token_delay=2,
            sleep=(sleeps.append if sleeps is not None else lambda _: None),
        )


# =============================================================================
# Mapping
# =============================================================================

class TestMapping:
    """Tests for pure field mapping helpers."""

    def test_build_query_defaults_to_india(self):
        assert build_query("Restaurants", "Ahmedabad") == "Restaurants in Ahmedabad, India"

    def test_parse_full_address(self):
        city, state, pincode = parse_address(
            "CG Road, Navrangpura, Ahmedabad, Gujarat 380009, India", "Surat"
        )

        assert (city, state, pincode) == ("Ahmedabad", "Gujarat", "380009")

    def test_parse_short_address_falls_back(self):
        city, state, pincode = parse_address("India", "Vadodara")

        assert city == "Vadodara"
        assert state == "Gujarat"
        assert pincode is None

    @pytest.mark.parametrize(
        "level, expected",
        [(0, PriceRange.BUDGET), (1, PriceRange.BUDGET), (2, PriceRange.MODERATE),
         (3, PriceRange.PREMIUM), (4, PriceRange.LUXURY), (None, None)],
    )
    def test_price_range(self, level, expected):
        assert price_range(level) == expected

    def test_hours_24_7(self):
        hours = parse_opening_hours({"periods": [{"open": {"day": 0, "time": "0000"}}]})

        assert len(hours) == 7
        assert all(h.open_time == "00:00" and h.close_time == "23:59" for h in hours)

    def test_hours_per_day(self):
        hours = parse_opening_hours({
            "periods": [
                {"open": {"day": 1, "time": "0930"}, "close": {"day": 1, "time": "2100"}},
                {"open": {"day": 2, "time": "1000"}},
            ]
        })

        by_day = {h.day_of_week: h for h in hours}
        assert by_day[1].open_time == "09:30"
        assert by_day[1].close_time == "21:00"
        assert by_day[2].close_time == "23:59"
        assert by_day[0].is_closed is True

    def test_no_periods(self):
        assert parse_opening_hours({}) is None
        assert parse_opening_hours(None) is None

    def test_map_place(self):
        category_id = uuid4()

        candidate = map_place({**_details("p1"), "place_id": "p1"}, "k", "Surat", category_id)

        assert candidate.city == "Ahmedabad"
        assert candidate.phone == "079 2640 0000"
        assert candidate.price_range == PriceRange.MODERATE
        assert candidate.photos[0].is_primary is True
        assert candidate.photos[1].is_primary is False
        assert "maxwidth=800&photo_reference=ref-a&key=k" in candidate.photos[0].url
        assert "maxwidth=200" in candidate.logo_url
        assert candidate.category_id == category_id

    def test_photos_capped_at_ten(self):
        place = {"name": "Big", "photos": [{"photo_reference": f"r{i}"} for i in range(15)]}

        assert len(map_place(place, "k", "Surat").photos) == 10


# =============================================================================
# Client
# =============================================================================

class TestPlacesClient:
    """Tests for paging, error handling and details fallback."""

    def test_requires_api_key(self, monkeypatch):
        from app.config import settings

        monkeypatch.setattr(settings, "GOOGLE_PLACES_API_KEY", None)
        with pytest.raises(PlacesNotConfiguredError):
            PlacesClient()

    def test_pages_with_delay(self):
        api = FakePlacesApi([
            {"status": "OK", "results": [_place(i) for i in range(20)], "next_page_token": "1"},
            {"status": "OK", "results": [_place(i) for i in range(20, 25)]},
        ])
        sleeps: list = []

        with api.client(sleeps) as places:
            candidates = places.search("Restaurants", "Surat", max_results=60)

        assert len(candidates) == 25
        assert sleeps == [2]
        first = api.requests[0]
        assert first.url.params["query"] == "Restaurants in Surat, India"
        assert first.url.params["key"] == "test-key"

    def test_max_results_stops_early(self):
        api = FakePlacesApi([
            {"status": "OK", "results": [_place(i) for i in range(20)], "next_page_token": "1"},
        ])

        with api.client() as places:
            candidates = places.search("Cafes", "Surat", max_results=5)

        assert len(candidates) == 5
        textsearch_calls = [r for r in api.requests if r.url.path.endswith("/textsearch/json")]
        assert len(textsearch_calls) == 1

    def test_first_page_error_raises(self):
        api = FakePlacesApi([{"status": "REQUEST_DENIED", "error_message": "bad key"}])

        with api.client() as places:
            with pytest.raises(PlacesApiError):
                places.search("Cafes", "Surat")

    def test_later_page_error_keeps_results(self):
        api = FakePlacesApi([
            {"status": "OK", "results": [_place(1), _place(2)], "next_page_token": "1"},
            {"status": "INVALID_REQUEST"},
        ])

        with api.client() as places:
            candidates = places.search("Cafes", "Surat")

        assert len(candidates) == 2

    def test_details_failure_uses_basic_result(self):
        api = FakePlacesApi([{"status": "OK", "results": [_place(7)]}], details_status=500)

        with api.client() as places:
            candidates = places.search("Cafes", "Surat")

        assert candidates[0].name == "Place 7"
        assert candidates[0].city == "Surat"

    def test_progress_reported_per_page(self):
        api = FakePlacesApi([{"status": "OK", "results": [_place(1)]}])
        progress: list = []

        with api.client() as places:
            places.search("Cafes", "Surat", max_results=20, on_progress=lambda *args: progress.append(args))

        assert progress == [(1, 20, "Fetched page 1")]

    def test_find_place(self):
        api = FakePlacesApi([{"status": "OK", "results": [_place(3)]}])

        with api.client() as places:
            candidate = places.find_place("Sharma Sweets", "Ahmedabad")

        assert candidate.name == "Details p3"
        assert candidate.place_id == "p3"

    def test_find_place_no_match(self):
        api = FakePlacesApi([{"status": "ZERO_RESULTS", "results": []}])

        with api.client() as places:
            assert places.find_place("Nowhere", "Surat") is None
