"""
UCLA Dining Menu Scraper

A Python package for retrieving and parsing UCLA dining hall menus and
their nutrition labels.
"""

from .dates import dates_from, parse_date
from .exceptions import FetchError, ParseError, ScrapeError
from .model import Item, ItemDetail, Menu, NutritionFact, Section
from .parser import parse_item, parse_menu
from .scraper import fetch_menu, inflate_item_details
from .storage import menu_filename, save_menu_to_file
from .webpage import (
    Meal,
    MenuRequest,
    Restaurant,
    all_requests,
    download,
    menu_url,
    requests_for_dates,
)


__version__ = "0.1.0"

__all__ = [
    "dates_from",
    "parse_date",
    "FetchError",
    "ParseError",
    "ScrapeError",
    "Item",
    "ItemDetail",
    "Menu",
    "NutritionFact",
    "Section",
    "parse_item",
    "parse_menu",
    "fetch_menu",
    "inflate_item_details",
    "menu_filename",
    "save_menu_to_file",
    "Meal",
    "MenuRequest",
    "Restaurant",
    "all_requests",
    "download",
    "menu_url",
    "requests_for_dates",
]
