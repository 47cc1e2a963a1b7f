"""
Management command to scrape menus from the UCLA Dining website.
"""
import logging
import os
from functools import partial

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from ucla_lib.dates import parse_date
from ucla_lib.exceptions import ParseError, ScrapeError
from ucla_lib.scraper import fetch_menu, inflate_item_details
from ucla_lib.storage import save_menu_to_file
from ucla_lib.webpage import Meal, Restaurant, all_requests, download, requests_for_dates

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.WARNING)
)
logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Scrape UCLA dining menus (and optionally nutrition details) and print or save them as JSON'

    def add_arguments(self, parser):
        which = parser.add_mutually_exclusive_group(required=True)
        which.add_argument(
            '-a', '--all',
            action='store_true',
            help='Download all menus starting from the current date for a week',
        )
        which.add_argument(
            '--date',
            type=str,
            help='Date to fetch (YYYY-MM-DD)',
        )
        parser.add_argument(
            '-d', '--with-details',
            action='store_true',
            help='Also download the nutrition details of every item',
        )
        target = parser.add_mutually_exclusive_group()
        target.add_argument(
            '--save',
            metavar='DIR',
            help='Save each menu to DIR in minimal JSON format',
        )
        target.add_argument(
            '--save-pretty',
            metavar='DIR',
            help='Save each menu to DIR in full, indented JSON format',
        )
        parser.add_argument(
            '--meals',
            nargs='+',
            type=str.lower,
            choices=[meal.slug.lower() for meal in Meal],
            help='Only fetch these meals (default: all)',
        )
        parser.add_argument(
            '--restaurants',
            nargs='+',
            type=str.lower,
            choices=[restaurant.slug.lower() for restaurant in Restaurant],
            help='Only fetch these restaurants (default: all)',
        )

    def handle(self, *args, **options):
        requests = self._get_requests(options)

        directory = options.get('save') or options.get('save_pretty')
        pretty = bool(options.get('save_pretty'))
        if directory and not os.path.isdir(directory):
            raise CommandError(f'Output directory does not exist: {directory}')

        fetch = partial(download, timeout=settings.UCLA_MENU_TIMEOUT)
        base_url = settings.UCLA_MENU_BASE_URL
        failed = 0

        for request in requests:
            self.stdout.write(f'Fetching {request} ... ', ending='')
            try:
                menu = fetch_menu(request, fetch=fetch, base_url=base_url)
            except ScrapeError as e:
                failed += 1
                self.stdout.write(self.style.ERROR('[failed]'))
                logger.warning(f"Could not fetch {request}: {e}")
                continue
            self.stdout.write(self.style.SUCCESS('[done]'))

            if options['with_details'] and not menu.is_empty:
                stats = inflate_item_details(
                    menu,
                    fetch=fetch,
                    max_retries=settings.UCLA_MENU_DETAIL_RETRIES,
                    delay=settings.UCLA_MENU_DETAIL_DELAY,
                )
                self.stdout.write(
                    f"  Details: {stats['successful_fetches']}/{stats['total_items']} fetched, "
                    f"{stats['failed_fetches']} failed"
                )

            if directory:
                self.stdout.write(f'Storing {request} on disk to {directory} ... ', ending='')
                try:
                    save_menu_to_file(menu, directory, pretty=pretty)
                except OSError as e:
                    self.stdout.write(self.style.ERROR('[failed]'))
                    logger.error(f"Error saving {request}: {e}")
                    continue
                self.stdout.write(self.style.SUCCESS('[done]'))
            else:
                self.stdout.write(str(menu))

        summary = f'\nScraped {len(requests) - failed}/{len(requests)} menus'
        if failed:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))

    def _get_requests(self, options):
        if options.get('all'):
            requests = all_requests()
        else:
            try:
                target_date = parse_date(options['date'])
            except ParseError as e:
                raise CommandError(str(e))
            requests = requests_for_dates([target_date])

        if options.get('meals'):
            meals = {Meal.lookup(meal) for meal in options['meals']}
            requests = [request for request in requests if request.meal in meals]
        if options.get('restaurants'):
            restaurants = {Restaurant.lookup(restaurant) for restaurant in options['restaurants']}
            requests = [request for request in requests if request.restaurant in restaurants]
        return requests
