import re
import logging

from bs4 import BeautifulSoup

from .base import DEFAULT_PARSER
from ..config import BRAND_COLOR_PATTERNS, DEFAULT_BRAND_COLOR
from ..utils.color import normalize_hex_color

logger = logging.getLogger(__name__)

META_COLOR_NAMES = ('theme-color', 'msapplication-TileColor')


class BrandColorExtractor:
    """
    Pick a brand color for a page

    Signals are tried in order and the first usable one wins:
    known-brand color, theme-color meta, msapplication-TileColor meta,
    CSS patterns over the raw page text, then the default color.
    """

    def __init__(self, patterns=BRAND_COLOR_PATTERNS, default_color=DEFAULT_BRAND_COLOR):
        self.patterns = tuple(re.compile(p, re.IGNORECASE) for p in patterns)
        self.default_color = default_color

    def extract(self, html, known_brand=None, soup=None):
        """
        Args:
            html (str): Raw page HTML, may be empty
            known_brand (KnownBrandEntry): Entry for the page's domain, or None
            soup (BeautifulSoup): Already parsed document, parsed here if omitted

        Returns:
            str: Hex color
        """
        if known_brand is not None and known_brand.brand_color:
            return known_brand.brand_color

        if html:
            if soup is None:
                soup = BeautifulSoup(html, DEFAULT_PARSER)

            for name in META_COLOR_NAMES:
                color = self._meta_color(soup, name)
                if color:
                    logger.info("Found brand color in %s meta tag: %s", name, color)
                    return color

            color = self._css_color(html)
            if color:
                return color

        return self.default_color

    def _meta_color(self, soup, name):
        wanted = name.lower()
        for meta in soup.find_all('meta', attrs={'name': True, 'content': True}):
            if meta['name'].strip().lower() == wanted:
                color = normalize_hex_color(meta['content'])
                if color:
                    return color
                logger.debug("Ignoring unusable %s value: %s", name, meta['content'])
        return None

    def _css_color(self, html):
        for pattern in self.patterns:
            for match in pattern.finditer(html):
                color = normalize_hex_color(match.group(1))
                if color:
                    logger.info("Found brand color with pattern %s: %s", pattern.pattern[:30], color)
                    return color
        return None
