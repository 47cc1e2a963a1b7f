"""
Errors raised while scraping UCLA dining menus.
"""


class ScrapeError(Exception):
    """Base class for everything the scraper raises on purpose."""


class ParseError(ScrapeError):
    """
    Markup (or a date string) could not be recognized at all.

    ``context`` is whatever identifies the input: a MenuRequest for a menu
    page, the recipe URL for an item page, or the rejected date string.
    """

    def __init__(self, message: str, context=None):
        super().__init__(message)
        self.context = context

    def __str__(self):
        message = super().__str__()
        if self.context is None or str(self.context) in message:
            return message
        return f"{message} ({self.context})"


class FetchError(ScrapeError):
    """Transport-level failure: network error or a non-success status."""

    def __init__(self, message: str, url: str = ""):
        super().__init__(message)
        self.url = url

    def __str__(self):
        message = super().__str__()
        return f"{message} [{self.url}]" if self.url else message
