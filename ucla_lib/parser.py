import logging
import re
from typing import List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from .exceptions import ParseError
from .model import ItemDetail, Item, Menu, NutritionFact, Section
from .webpage import BASE_URL, MenuRequest

logger = logging.getLogger(__name__)


def _make_soup(markup: str, context) -> BeautifulSoup:
    """Parse markup, failing when there is no element structure at all."""
    if not markup or not markup.strip():
        raise ParseError("Empty document", context=context)
    soup = BeautifulSoup(markup, 'html.parser')
    if soup.find() is None:
        raise ParseError("No HTML elements found in document", context=context)
    return soup


# =============================================================================
# MENU PAGE
# =============================================================================

def parse_menu(markup: str, origin: MenuRequest, base_url: str = BASE_URL) -> Menu:
    """
    Parse a UCLA Dining menu page into a Menu.

    Sections and items are collected in document order. A page without any
    section heading is a valid, empty menu (the meal is not served there).

    Parameters:
        markup (str): HTML of the menu page
        origin (MenuRequest): The request the page was fetched for
        base_url (str): Used to resolve relative recipe links

    Returns:
        Menu: Menu stamped with the request's date, meal and restaurant

    Raises:
        ParseError: if the markup has no recognizable structure
    """
    soup = _make_soup(markup, origin)
    menu = Menu.for_request(origin)
    current_section = None

    for element in soup.find_all(_is_menu_node):
        if _is_section_heading(element):
            current_section = Section(name=_section_name(element))
            menu.sections.append(current_section)
            continue

        item = _extract_item(element, base_url)
        if current_section is None:
            logger.debug(f"Ignoring item outside of any section: {item.name} ({origin})")
            continue
        current_section.items.append(item)

    logger.debug(f"Parsed {len(menu.sections)} sections, {menu.item_count()} items for {origin}")
    return menu


def _is_section_heading(element: Tag) -> bool:
    return element.name == 'li' and 'sect-item' in element.get('class', [])


def _is_item_link(element: Tag) -> bool:
    return element.name == 'a' and 'recipelink' in element.get('class', [])


def _is_menu_node(element: Tag) -> bool:
    return _is_section_heading(element) or _is_item_link(element)


def _section_name(element: Tag) -> str:
    # Only the heading's own text; nested item lists carry the item names
    text = ' '.join(
        str(child) for child in element.children
        if isinstance(child, NavigableString) and not isinstance(child, Comment)
    )
    name = _clean_section_name(text)
    if name:
        return name

    # Heading text wrapped in its own tag, e.g. <li class="sect-item"><span>Grill</span><ul>...
    for child in element.find_all(True, recursive=False):
        if child.name in ('ul', 'ol') or _is_item_link(child) or child.find(_is_item_link):
            continue
        name = _clean_section_name(child.get_text(' ', strip=True))
        if name:
            return name
    return ""


def _clean_section_name(section_text: str) -> str:
    """Clean section name by collapsing whitespace and removing padding dashes"""
    cleaned = re.sub(r'\s+', ' ', section_text)
    cleaned = re.sub(r'^[- ]+|[- ]+$', '', cleaned)
    return cleaned


def _extract_item(link: Tag, base_url: str) -> Item:
    """Build an Item from a recipe link"""
    name = re.sub(r'\s+', ' ', link.get_text(strip=True))

    detail_url = ""
    if link.get('href'):
        # Convert relative URLs to absolute using urljoin
        detail_url = urljoin(base_url.rstrip('/') + '/', link['href'].strip())

    return Item(name=name, detail_url=detail_url)


# =============================================================================
# RECIPE (NUTRITION) PAGE
# =============================================================================

_NUTRIENT_NAMES = {
    'total fat': 'total_fat',
    'fat': 'total_fat',
    'saturated fat': 'saturated_fat',
    'trans fat': 'trans_fat',
    'cholesterol': 'cholesterol',
    'sodium': 'sodium',
    'total carbohydrate': 'total_carbohydrate',
    'carbohydrates': 'total_carbohydrate',
    'dietary fiber': 'dietary_fiber',
    'sugars': 'sugars',
    'total sugars': 'sugars',
    'protein': 'protein',
}

_VITAMIN_NAMES = {
    'vitamin a': 'vitamin_a',
    'vitamin c': 'vitamin_c',
    'calcium': 'calcium',
    'iron': 'iron',
}


def parse_item(markup: str, reference: str = "") -> ItemDetail:
    """
    Parse a UCLA Dining recipe page into an ItemDetail.

    Fields missing from the page come back as None (or [] for lists); only a
    page that is not a recipe page at all is an error.

    Parameters:
        markup (str): HTML of the recipe page
        reference (str): Recipe URL, used for error context

    Returns:
        ItemDetail: The nutrition record

    Raises:
        ParseError: if neither the recipe container nor the nutrition box exists
    """
    soup = _make_soup(markup, reference or None)

    container = soup.find('div', class_='recipecontainer')
    facts_box = soup.find('div', class_='nfbox')
    if container is None and facts_box is None:
        raise ParseError("Not a recipe page", context=reference or None)
    scope = container or soup

    detail = ItemDetail()

    # Extract food name
    name_elem = scope.find('h2')
    if name_elem:
        detail.name = re.sub(r'\s+', ' ', name_elem.get_text(' ', strip=True))

    if facts_box is not None:
        _extract_nutrition_facts(facts_box, detail)

    ingredients_text = _labelled_text(scope, 'ingredients')
    if ingredients_text:
        detail.ingredients = _parse_ingredients(ingredients_text)

    allergens_text = _labelled_text(scope, 'allergens')
    if allergens_text:
        detail.allergens = [a.strip() for a in allergens_text.split(',') if a.strip()]

    return detail


def _extract_nutrition_facts(facts_box: Tag, detail: ItemDetail) -> None:
    """Fill serving size, calories, nutrient rows and vitamins from the facts box"""
    serving_elem = facts_box.find('p', class_='nfserv')
    if serving_elem:
        serving = serving_elem.get_text(' ', strip=True)
        serving = re.sub(r'^serving size\s*:?\s*', '', serving, flags=re.IGNORECASE).strip()
        detail.serving_size = serving or None

    calories_elem = facts_box.find('p', class_='nfcal')
    if calories_elem:
        calories_text = calories_elem.get_text(' ', strip=True)
        detail.calories = _int_after(r'^Calories', calories_text)
        detail.fat_calories = _int_after(r'Fat\s*Cal(?:ories)?\.?', calories_text)

    for row in facts_box.find_all('p', class_='nfnutrient'):
        dv_elem = row.find('span', class_='nfdvval')
        daily_value = None
        if dv_elem:
            dv_text = dv_elem.get_text(strip=True)
            daily_value = dv_text if re.match(r'^\d+%$', dv_text) else None
            dv_elem.extract()

        parsed = _parse_nutrient_text(row.get_text(' ', strip=True))
        if not parsed:
            logger.debug(f"Unrecognized nutrient row: {row.get_text(' ', strip=True)!r}")
            continue
        key, amount = parsed
        # Keep the first occurrence
        if getattr(detail, key) is None:
            setattr(detail, key, NutritionFact(amount=amount, daily_value=daily_value))

    for name_elem in facts_box.find_all('span', class_='nfvitname'):
        key = _VITAMIN_NAMES.get(name_elem.get_text(' ', strip=True).lower())
        pct_elem = name_elem.find_next_sibling('span', class_='nfvitpct')
        if key and pct_elem:
            pct = pct_elem.get_text(strip=True)
            if pct:
                setattr(detail, key, pct)


def _int_after(label_pattern: str, text: str) -> Optional[int]:
    # "Calories 1,050"
    match = re.search(label_pattern + r'\s*(\d[\d,]*)', text, flags=re.IGNORECASE)
    return int(match.group(1).replace(',', '')) if match else None


def _parse_nutrient_text(text: str) -> Optional[Tuple[str, str]]:
    """Parse "Total Fat 10g" into ('total_fat', '10g')"""
    text = text.replace('\xa0', ' ').strip()

    # Skip empty or standalone percentages
    if not text or re.match(r'^\d+%$', text):
        return None

    # "Total Fat 10g", "Sodium 1,200mg", "Dietary Fiber <1g"
    match = re.match(r'^(.+?)\s*(<?\s*\d[\d.,]*\s*[a-zA-Z]+)$', text)
    if not match:
        return None

    name = re.sub(r'\s+', ' ', match.group(1)).strip().rstrip('.').lower()
    amount = match.group(2).replace(' ', '')

    # Normalize some names
    if 'trans' in name and 'fat' in name:
        name = 'trans fat'
    elif 'fatty acid' in name:
        name = 'trans fat'
    elif 'sugar' in name and 'added' not in name:
        name = 'sugars'
    elif 'carbohydrate' in name:
        name = 'total carbohydrate'

    key = _NUTRIENT_NAMES.get(name)
    if key is None:
        return None
    return key, amount


def _labelled_text(scope: Tag, label: str) -> str:
    """Text that follows a bold "LABEL:" marker inside the same paragraph"""
    for marker in scope.find_all(['strong', 'b']):
        if marker.get_text(strip=True).lower().startswith(label):
            parent = marker.parent
            text = parent.get_text(' ', strip=True)
            marker_text = marker.get_text(' ', strip=True)
            if text.startswith(marker_text):
                text = text[len(marker_text):]
            return text.lstrip(' :*').strip()
    return ""


def _parse_ingredients(ingredients_text: str) -> List[str]:
    """Parse ingredients from the ingredients text"""
    if not ingredients_text:
        return []

    # Split by commas that are not inside parentheses
    ingredients = []
    current_ingredient = ""
    paren_depth = 0

    for char in ingredients_text:
        if char == '(':
            paren_depth += 1
        elif char == ')':
            paren_depth = max(paren_depth - 1, 0)
        elif char == ',' and paren_depth == 0:
            if current_ingredient.strip():
                ingredients.append(current_ingredient.strip())
            current_ingredient = ""
            continue

        current_ingredient += char

    # Add the last ingredient
    if current_ingredient.strip():
        ingredients.append(current_ingredient.strip())

    return ingredients
