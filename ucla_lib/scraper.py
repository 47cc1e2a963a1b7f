import logging
import time
from typing import Callable, Dict

from .exceptions import FetchError, ParseError, ScrapeError
from .model import Item, ItemDetail, Menu
from .parser import parse_item, parse_menu
from .webpage import BASE_URL, MenuRequest, download

logger = logging.getLogger(__name__)

Fetch = Callable[[str], str]


def fetch_menu(request: MenuRequest, fetch: Fetch = download, base_url: str = BASE_URL) -> Menu:
    """
    Download and parse the menu page for one request.

    Raises:
        FetchError: the page could not be downloaded
        ParseError: the page could not be recognized
    """
    url = request.url(base_url)
    logger.info(f"Fetching {request}: {url}")
    markup = fetch(url)
    return parse_menu(markup, request, base_url=base_url)


def inflate_item_details(menu: Menu, fetch: Fetch = download, max_retries: int = 1, delay: float = 0.0) -> Dict:
    """
    Fetch the recipe page of every item and attach its nutrition details.

    Items are processed in display order. An item whose page cannot be
    fetched or parsed keeps an absent detail; its siblings are unaffected.

    Parameters:
        menu (Menu): Menu to inflate in place
        fetch (Callable): Turns a URL into response text, raising FetchError
        max_retries (int): Attempts per item (at least one)
        delay (float): Seconds to wait between attempts for the same item

    Returns:
        Dict: Fetch statistics, including the list of failed items
    """
    stats = {
        "total_items": 0,
        "successful_fetches": 0,
        "failed_fetches": 0,
        "items_without_urls": 0,
        "failures": [],
    }

    for section, item in menu.items():
        stats["total_items"] += 1

        if not item.detail_url:
            stats["items_without_urls"] += 1
            logger.debug(f"No recipe URL for {item.name!r} in {section.name!r}")
            continue

        try:
            detail = _fetch_details_with_retry(item, fetch, max_retries, delay)
        except ScrapeError as e:
            stats["failed_fetches"] += 1
            stats["failures"].append({
                "section": section.name,
                "item": item.name,
                "detail_url": item.detail_url,
                "error": str(e),
            })
            logger.warning(f"Skipping details for {item.name!r} in {section.name!r}: {e}")
            continue

        item.set_details(detail)
        stats["successful_fetches"] += 1

    logger.info(
        f"Details for {menu.request}: {stats['successful_fetches']}/{stats['total_items']} fetched, "
        f"{stats['failed_fetches']} failed, {stats['items_without_urls']} without URL"
    )
    return stats


def _fetch_details_with_retry(item: Item, fetch: Fetch, max_retries: int, delay: float) -> ItemDetail:
    """
    Fetch and parse one recipe page, retrying on failure.

    Raises the last FetchError or ParseError once every attempt has failed.
    """
    attempts = max(max_retries, 1)
    for attempt in range(attempts):
        try:
            return parse_item(fetch(item.detail_url), reference=item.detail_url)
        except (FetchError, ParseError) as e:
            if attempt == attempts - 1:
                raise
            logger.info(f"Retry {attempt + 1}/{attempts} for {item.name!r} in {delay}s: {e}")
            if delay > 0:
                time.sleep(delay)
