import json
import logging
import os

from .model import Menu

logger = logging.getLogger(__name__)


def menu_filename(menu: Menu, pretty: bool = False) -> str:
    """{date}-{restaurant}-{meal}[-pretty], using URL slugs"""
    suffix = "-pretty" if pretty else ""
    return f"{menu.date.isoformat()}-{menu.restaurant.slug}-{menu.meal.slug}{suffix}"


def save_menu_to_file(menu: Menu, directory: str, pretty: bool = False) -> str:
    """
    Save a menu as JSON inside ``directory``.

    The minimal projection is written compactly; ``pretty`` writes the full
    document indented.

    Returns:
        str: Path of the written file

    Raises:
        OSError: if the file cannot be written
    """
    path = os.path.join(directory, menu_filename(menu, pretty))
    with open(path, 'w', encoding='utf-8') as f:
        if pretty:
            json.dump(menu.to_json(), f, indent=2, ensure_ascii=False)
        else:
            json.dump(menu.to_json_min(), f, separators=(',', ':'), ensure_ascii=False)
    logger.info(f"Menu saved to: {path}")
    return path
