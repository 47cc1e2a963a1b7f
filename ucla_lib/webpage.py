import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, List, Optional

import requests

from .dates import SCRAPE_WINDOW_DAYS, dates_from
from .exceptions import FetchError

logger = logging.getLogger(__name__)

BASE_URL = "https://menu.dining.ucla.edu"
DEFAULT_TIMEOUT = 15

# Reusable HTTP session with browser-like headers (helps avoid 403/blocks)
_HTTP_SESSION = None


class _Catalog(Enum):
    """Enum whose members carry a display name and a URL slug."""

    def __init__(self, display_name: str, slug: str):
        self.display_name = display_name
        self.slug = slug

    @classmethod
    def lookup(cls, value: str):
        """Find a member by display name, slug or member name (case-insensitive)."""
        wanted = (value or '').strip().lower()
        for member in cls:
            if wanted in (member.display_name.lower(), member.slug.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown {cls.__name__.lower()}: {value!r}")

    def __str__(self):
        return self.display_name


class Meal(_Catalog):
    BREAKFAST = ("Breakfast", "Breakfast")
    LUNCH = ("Lunch", "Lunch")
    DINNER = ("Dinner", "Dinner")


class Restaurant(_Catalog):
    COVEL = ("Covel", "Covel")
    DE_NEVE = ("De Neve", "DeNeve")
    FEAST_AT_RIEBER = ("Feast at Rieber", "FeastAtRieber")
    BRUIN_PLATE = ("Bruin Plate", "BruinPlate")


def menu_url(dt: date, meal: Meal, restaurant: Restaurant, base_url: str = BASE_URL) -> str:
    """
    Generate a UCLA Dining menu URL for a given date, meal and restaurant.

    Parameters:
        dt (date): The date (datetime.date object).
        meal (Meal): Meal period.
        restaurant (Restaurant): Dining hall.
        base_url (str): Site root, without a trailing slash.

    Returns:
        str: The full URL, e.g. https://menu.dining.ucla.edu/Menus/Covel/2024-02-28/Dinner
    """
    return f"{base_url.rstrip('/')}/Menus/{restaurant.slug}/{dt.isoformat()}/{meal.slug}"


@dataclass(frozen=True)
class MenuRequest:
    """One (date, meal, restaurant) combination to fetch."""
    date: date
    meal: Meal
    restaurant: Restaurant

    def url(self, base_url: str = BASE_URL) -> str:
        return menu_url(self.date, self.meal, self.restaurant, base_url)

    def __str__(self):
        return f"{self.date.isoformat()} {self.meal.display_name} for {self.restaurant.display_name}"


def requests_for_dates(dates: Iterable[date]) -> List[MenuRequest]:
    """
    Every MenuRequest for the given dates.

    Order is date-major, then meal, then restaurant, each in declared order.
    Combinations a restaurant does not serve are still included; the fetch
    finds out.
    """
    return [
        MenuRequest(date=dt, meal=meal, restaurant=restaurant)
        for dt in dates
        for meal in Meal
        for restaurant in Restaurant
    ]


def all_requests(anchor: Optional[date] = None) -> List[MenuRequest]:
    """Every request for the published week starting at ``anchor`` (default: today)."""
    return requests_for_dates(dates_from(anchor or date.today(), SCRAPE_WINDOW_DAYS))


def _get_http_session() -> requests.Session:
    global _HTTP_SESSION
    if _HTTP_SESSION is None:
        session = requests.Session()
        session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36',
            'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'en-US,en;q=0.9',
            'Connection': 'keep-alive',
        })
        _HTTP_SESSION = session
    return _HTTP_SESSION


def download(url: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    GET ``url`` and return the response body as text.

    Raises:
        FetchError: on any network error or non-success status.
    """
    session = _get_http_session()
    logger.debug(f"GET {url}")
    try:
        response = session.get(url, timeout=timeout, allow_redirects=True)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch URL: {e}", url=url) from e
    return response.text
