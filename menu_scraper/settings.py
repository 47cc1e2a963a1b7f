"""
Django settings for the menu scraper.

Only what the management commands need: no database, no web front end.
Values can be overridden through environment variables.
"""
import os

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'menu-scraper-insecure-key')

DEBUG = os.getenv('DJANGO_DEBUG', 'False') == 'True'

INSTALLED_APPS = [
    'menu',
]

DATABASES = {}

USE_TZ = True
TIME_ZONE = 'America/Los_Angeles'

# UCLA Dining scraping
UCLA_MENU_BASE_URL = os.getenv('UCLA_MENU_BASE_URL', 'https://menu.dining.ucla.edu')
UCLA_MENU_TIMEOUT = float(os.getenv('UCLA_MENU_TIMEOUT', '15'))
UCLA_MENU_DETAIL_RETRIES = int(os.getenv('UCLA_MENU_DETAIL_RETRIES', '3'))
UCLA_MENU_DETAIL_DELAY = float(os.getenv('UCLA_MENU_DETAIL_DELAY', '0.0'))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')
