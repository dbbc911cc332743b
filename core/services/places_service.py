# =============================================================================
# core/services/places_service.py - Google Places Client and Field Mapping
# =============================================================================
# Talks to the Google Places web service (Text Search + Place Details) and
# maps results onto listing columns.
#
# Text Search returns up to 20 results per page and at most 3 pages. A
# next_page_token only becomes valid a couple of seconds after it is issued,
# so the client waits PLACES_PAGE_TOKEN_DELAY before using one.
#
# Usage:
#   with PlacesClient() as places:
#       candidates = places.search("Restaurants", "Ahmedabad", category_id=...)
# =============================================================================

import logging
import math
import re
import time
from typing import Any, Callable

import httpx

from app.config import settings
from app.exceptions import PlacesApiError, PlacesNotConfiguredError
from core.models.business import BusinessHourInput, PriceRange
from core.models.places import PlaceCandidate, PlacePhoto

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

PLACES_API_BASE = "https://maps.googleapis.com/maps/api/place"
PAGE_SIZE = 20
MAX_PHOTOS = 10
PHOTO_WIDTH = 800
LOGO_WIDTH = 200

OK_STATUSES = ("OK", "ZERO_RESULTS")

DETAIL_FIELDS = [
    "name",
    "formatted_address",
    "formatted_phone_number",
    "international_phone_number",
    "website",
    "url",
    "geometry",
    "opening_hours",
    "photos",
    "rating",
    "user_ratings_total",
    "price_level",
    "editorial_summary",
    "icon",
    "business_status",
    "types",
]

PRICE_LEVEL_MAP = {
    0: PriceRange.BUDGET,
    1: PriceRange.BUDGET,
    2: PriceRange.MODERATE,
    3: PriceRange.PREMIUM,
    4: PriceRange.LUXURY,
}

_DIGITS = re.compile(r"\d+")


# =============================================================================
# Field Mapping
# =============================================================================

def build_query(term: str, city: str, country: str | None = None) -> str:
    """Text search query, e.g. "Restaurants in Ahmedabad, India"."""
    return f"{term} in {city}, {country or settings.PLACES_COUNTRY}"


def photo_url(photo_reference: str, api_key: str, max_width: int = PHOTO_WIDTH) -> str:
    """Places Photo URL for a photo_reference."""
    return (
        f"{PLACES_API_BASE}/photo?maxwidth={max_width}"
        f"&photo_reference={photo_reference}&key={api_key}"
    )


def price_range(price_level: int | None) -> PriceRange | None:
    """Map Google price_level (0-4) to our price bands."""
    if price_level is None:
        return None
    return PRICE_LEVEL_MAP.get(price_level)


def parse_address(formatted_address: str | None, fallback_city: str) -> tuple[str, str, str | None]:
    """
    Pull (city, state, pincode) out of a formatted address.

    Indian addresses end "..., City, State 380009, India", so the city is the
    third part from the end and the state/pincode the second.

    Example:
        parse_address("CG Road, Navrangpura, Ahmedabad, Gujarat 380009, India", "Ahmedabad")
        # ("Ahmedabad", "Gujarat", "380009")
    """
    parts = (formatted_address or "").split(",") if formatted_address else []

    city = parts[-3].strip() if len(parts) > 2 else ""
    state_with_pincode = parts[-2].strip() if len(parts) > 1 else ""

    state = _DIGITS.sub("", state_with_pincode).strip() or settings.DEFAULT_STATE
    match = _DIGITS.search(state_with_pincode)

    return city or fallback_city, state, match.group(0) if match else None


def _hhmm(value: str) -> str:
    if value >= "2400":
        return "23:59"
    return f"{value[:2]}:{value[2:4]}"


def parse_opening_hours(opening_hours: dict[str, Any] | None) -> list[BusinessHourInput] | None:
    """
    Convert Places opening_hours.periods into seven day rows.

    Days without a period are closed. A single period opening at 0000 with
    no close means open 24/7. A period without a close time closes at 23:59.
    """
    periods = (opening_hours or {}).get("periods")
    if not periods:
        return None

    if len(periods) == 1 and periods[0].get("open", {}).get("time") == "0000" and not periods[0].get("close"):
        return [
            BusinessHourInput(day_of_week=day, open_time="00:00", close_time="23:59", is_closed=False)
            for day in range(7)
        ]

    hours = {day: BusinessHourInput(day_of_week=day, is_closed=True) for day in range(7)}
    for period in periods:
        opens = period.get("open") or {}
        day = opens.get("day")
        if day not in hours or not opens.get("time"):
            continue
        closes = period.get("close")
        hours[day] = BusinessHourInput(
            day_of_week=day,
            open_time=_hhmm(opens["time"]),
            close_time=_hhmm(closes["time"]) if closes and closes.get("time") else "23:59",
            is_closed=False,
        )

    return [hours[day] for day in range(7)]


def map_place(
    place: dict[str, Any],
    api_key: str,
    requested_city: str,
    category_id: Any = None,
) -> PlaceCandidate:
    """Map a Places result (details or basic search result) to a PlaceCandidate."""
    city, state, pincode = parse_address(place.get("formatted_address"), requested_city)

    photos = [
        PlacePhoto(
            photo_reference=photo["photo_reference"],
            url=photo_url(photo["photo_reference"], api_key),
            is_primary=index == 0,
        )
        for index, photo in enumerate((place.get("photos") or [])[:MAX_PHOTOS])
        if photo.get("photo_reference")
    ]
    logo_url = photo_url(photos[0].photo_reference, api_key, LOGO_WIDTH) if photos else None
    opening_hours = place.get("opening_hours") or {}

    return PlaceCandidate(
        name=place.get("name") or "",
        address=place.get("formatted_address") or "",
        city=city,
        state=state,
        pincode=pincode,
        phone=place.get("formatted_phone_number") or place.get("international_phone_number") or "",
        website=place.get("website"),
        google_maps_url=place.get("url"),
        category_id=category_id,
        place_id=place.get("place_id"),
        description=(place.get("editorial_summary") or {}).get("overview"),
        price_range=price_range(place.get("price_level")),
        rating=place.get("rating"),
        rating_count=place.get("user_ratings_total"),
        business_status=place.get("business_status"),
        logo_url=logo_url,
        photos=photos,
        hours=parse_opening_hours(opening_hours),
        weekday_text=opening_hours.get("weekday_text"),
    )


# =============================================================================
# Client
# =============================================================================

class PlacesClient:
    """
    Synchronous client for the Places web service.

    Args:
        api_key: Places key; defaults to GOOGLE_PLACES_API_KEY
        http_client: Optional pre-built httpx.Client (tests inject one with
            a MockTransport)
        page_token_delay: Seconds to wait before using a next_page_token
        sleep: Sleep function (replaced in tests)

    Raises:
        PlacesNotConfiguredError: If no API key is available
    """

    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.Client | None = None,
        page_token_delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key or settings.GOOGLE_PLACES_API_KEY
        if not self.api_key:
            raise PlacesNotConfiguredError()

        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=settings.PLACES_TIMEOUT)
        self.page_token_delay = (
            settings.PLACES_PAGE_TOKEN_DELAY if page_token_delay is None else page_token_delay
        )
        self._sleep = sleep

    def __enter__(self) -> "PlacesClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self._client.get(f"{PLACES_API_BASE}/{endpoint}/json", params={**params, "key": self.api_key})
        response.raise_for_status()
        return response.json()

    # -------------------------------------------------------------------------
    # Raw API Calls
    # -------------------------------------------------------------------------

    def text_search(self, query: str | None = None, page_token: str | None = None) -> dict[str, Any]:
        """One Text Search page (by query, or by page token)."""
        params = {"pagetoken": page_token} if page_token else {"query": query}
        return self._get("textsearch", params)

    def place_details(self, place_id: str) -> dict[str, Any] | None:
        """Place Details `result` for a place_id, or None when absent."""
        data = self._get("details", {"place_id": place_id, "fields": ",".join(DETAIL_FIELDS)})
        return data.get("result")

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    def _detailed(self, place: dict[str, Any]) -> dict[str, Any] | None:
        """Details merged with the search result; the basic result if details fail."""
        try:
            details = self.place_details(place["place_id"])
        except Exception as e:
            logger.warning(f"Place details failed for {place.get('place_id')}: {e}")
            return {
                "name": place.get("name"),
                "formatted_address": place.get("formatted_address") or place.get("vicinity"),
                "geometry": place.get("geometry"),
                "types": place.get("types") or [],
                "place_id": place.get("place_id"),
            }

        if not details:
            return None
        return {
            **details,
            "place_id": place["place_id"],
            "types": details.get("types") or place.get("types") or [],
        }

    def search(
        self,
        term: str,
        city: str,
        max_results: int | None = None,
        category_id: Any = None,
        on_progress: Callable[[int, int, str], None] | None = None,
    ) -> list[PlaceCandidate]:
        """
        Search "{term} in {city}, {country}" and map every result.

        Args:
            term: Search term (usually the category name)
            city: City to search in (also the fallback city when mapping)
            max_results: Cap on results (default PLACES_MAX_RESULTS)
            category_id: Category stamped onto every candidate
            on_progress: Called as (fetched, max_results, message)

        Returns:
            Mapped candidates in search order

        Raises:
            PlacesApiError: If the first page returns an error status
        """
        max_results = min(max_results or settings.PLACES_MAX_RESULTS, settings.PLACES_MAX_RESULTS)
        max_pages = math.ceil(max_results / PAGE_SIZE)
        query = build_query(term, city)

        logger.info(f"Places search: '{query}' (max {max_results})")

        places: list[dict[str, Any]] = []
        page_token: str | None = None
        page_count = 0

        while True:
            if page_token:
                self._sleep(self.page_token_delay)
                data = self.text_search(page_token=page_token)
            else:
                data = self.text_search(query=query)

            status = data.get("status")
            if status not in OK_STATUSES:
                logger.error(f"Places API error: {status} {data.get('error_message')}")
                if page_count == 0:
                    raise PlacesApiError(status or "UNKNOWN", data.get("error_message"))
                break

            for result in data.get("results") or []:
                if len(places) >= max_results:
                    break
                detailed = self._detailed(result)
                if detailed:
                    places.append(detailed)

            page_token = data.get("next_page_token")
            page_count += 1
            logger.info(f"Page {page_count}: {len(data.get('results') or [])} places, total {len(places)}")
            if on_progress:
                on_progress(len(places), max_results, f"Fetched page {page_count}")

            if not page_token or page_count >= max_pages or len(places) >= max_results:
                break

        return [map_place(place, self.api_key, city, category_id) for place in places]

    def find_place(self, name: str, city: str) -> PlaceCandidate | None:
        """
        Best match for a single listing: first search result, with details.

        Returns:
            Mapped candidate, or None when Google has no match
        """
        data = self.text_search(query=build_query(name, city))
        results = data.get("results") or []

        if data.get("status") != "OK" or not results:
            logger.info(f"No Places match for '{name}' in {city}")
            return None

        place = results[0]
        details = self.place_details(place["place_id"])
        if not details:
            return None

        merged = {
            **details,
            "place_id": place["place_id"],
            "types": details.get("types") or place.get("types") or [],
        }
        return map_place(merged, self.api_key, city)
