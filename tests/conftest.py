"""Shared test fixtures and configuration."""
import os
from datetime import date

import django
import pytest

# Configure Django before any management command is imported
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "menu_scraper.settings")
os.environ.setdefault("UCLA_MENU_DETAIL_RETRIES", "1")
django.setup()

from ucla_lib.exceptions import FetchError
from ucla_lib.webpage import Meal, MenuRequest, Restaurant


MENU_HTML = """
<html>
<head><title>Covel Dinner</title></head>
<body>
<div id="main-content">
  <div class="menu-block half-col">
    <h3 class="col-header">Dinner</h3>
    <ul class="sect-list">
      <li class="sect-item">
        Entrees
        <ul class="item-list">
          <li class="menu-item">
            <span class="tooltip-target-wrapper">
              <a class="recipelink" href="/Recipes/077009/2">Grilled Chicken</a>
            </span>
          </li>
          <li class="menu-item">
            <span class="tooltip-target-wrapper">
              <a class="recipelink" href="http://menu.dining.ucla.edu/Recipes/142007/1">Veggie Bowl</a>
            </span>
          </li>
        </ul>
      </li>
      <li class="sect-item">
        Desserts
        <ul class="item-list">
          <li class="menu-item">
            <span class="tooltip-target-wrapper">
              <a class="recipelink" href="/Recipes/061099/3">Fruit Cup</a>
            </span>
          </li>
        </ul>
      </li>
    </ul>
  </div>
</div>
</body>
</html>
"""

CLOSED_HTML = """
<html>
<body>
<div id="main-content">
  <p>Covel is closed for Breakfast on this day.</p>
</div>
</body>
</html>
"""

RECIPE_HTML = """
<html>
<body>
<div class="recipecontainer">
  <h2>Grilled Chicken</h2>
  <div class="nfbox">
    <p class="nfserv">Serving Size 4 oz</p>
    <p class="nfcal"><span class="nfcaltxt">Calories</span> 210 <span class="nffatcal">Fat Cal. 90</span></p>
    <p class="nfdvhdr">% Daily Value*</p>
    <p class="nfnutrient"><span class="nfmajornutrient">Total Fat</span> 10g <span class="nfdvval">15%</span></p>
    <p class="nfnutrient"><span class="nfindent">Saturated Fat</span> 3g <span class="nfdvval">15%</span></p>
    <p class="nfnutrient"><span class="nfindent">Trans Fat</span> 0g</p>
    <p class="nfnutrient"><span class="nfmajornutrient">Cholesterol</span> 85mg <span class="nfdvval">28%</span></p>
    <p class="nfnutrient"><span class="nfmajornutrient">Sodium</span> 1,200mg <span class="nfdvval">50%</span></p>
    <p class="nfnutrient"><span class="nfmajornutrient">Total Carbohydrate</span> 2g <span class="nfdvval">1%</span></p>
    <p class="nfnutrient"><span class="nfindent">Dietary Fiber</span> &lt;1g <span class="nfdvval">2%</span></p>
    <p class="nfnutrient"><span class="nfindent">Sugars</span> 1g</p>
    <p class="nfnutrient"><span class="nfmajornutrient">Protein</span> 30g</p>
    <p class="nfvit">
      <span class="nfvitleft"><span class="nfvitname">Vitamin A</span> <span class="nfvitpct">4%</span></span>
      <span class="nfvitright"><span class="nfvitname">Vitamin C</span> <span class="nfvitpct">2%</span></span>
    </p>
    <p class="nfvit">
      <span class="nfvitleft"><span class="nfvitname">Calcium</span> <span class="nfvitpct">2%</span></span>
      <span class="nfvitright"><span class="nfvitname">Iron</span> <span class="nfvitpct">6%</span></span>
    </p>
  </div>
  <div class="ingred_allergen">
    <p><strong>INGREDIENTS:</strong> Chicken Breast, Marinade (Olive Oil, Garlic, Lemon Juice), Salt, Black Pepper</p>
    <p><strong>ALLERGENS*:</strong> Soy, Wheat</p>
  </div>
</div>
</body>
</html>
"""


@pytest.fixture
def menu_html():
    return MENU_HTML


@pytest.fixture
def closed_html():
    return CLOSED_HTML


@pytest.fixture
def recipe_html():
    return RECIPE_HTML


@pytest.fixture
def dinner_request():
    """Covel dinner on a leap day."""
    return MenuRequest(date=date(2024, 2, 29), meal=Meal.DINNER, restaurant=Restaurant.COVEL)


class FakeSite:
    """Stands in for the HTTP transport: maps URLs to bodies or failures."""

    def __init__(self, pages=None, default=None):
        self.pages = dict(pages or {})
        self.default = default
        self.calls = []

    def __call__(self, url, timeout=None):
        self.calls.append(url)
        body = self.pages.get(url, self.default)
        if body is None or isinstance(body, Exception):
            raise body if isinstance(body, Exception) else FetchError("404 Client Error: Not Found", url=url)
        return body


@pytest.fixture
def fake_site():
    return FakeSite
