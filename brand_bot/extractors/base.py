from abc import ABC, abstractmethod
from functools import cached_property

from bs4 import BeautifulSoup

from ..utils import url as url_utils

DEFAULT_PARSER = 'html5lib'


class PageContext:
    """
    A fetched page as seen by the logo strategies

    The parsed document is built on first use and shared by every
    strategy that runs against the page.
    """

    def __init__(self, html, base_url, domain):
        self.html = html or ""
        self.base_url = base_url
        self.domain = domain

    @cached_property
    def soup(self):
        return BeautifulSoup(self.html, DEFAULT_PARSER)

    def absolute(self, url):
        return url_utils.make_absolute_url(self.base_url, url)


class LogoStrategy(ABC):
    """
    Base class for logo strategies

    A strategy looks at one kind of signal and proposes candidates in its
    own preference order. Strategies with needs_probe set propose URLs
    that are only accepted after a reachability check.
    """

    source = None
    needs_probe = False

    @abstractmethod
    def candidates(self, page):
        """
        Propose logo candidates for a page

        Args:
            page (PageContext): The page being analysed

        Returns:
            list: CandidateLogo objects, possibly empty
        """
        pass

    @property
    def name(self):
        return self.__class__.__name__.replace('Strategy', '')

    def __repr__(self):
        return f"<{self.__class__.__name__} source={self.source.value if self.source else None}>"
