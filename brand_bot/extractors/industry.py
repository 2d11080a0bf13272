import re

from bs4 import BeautifulSoup

from .base import DEFAULT_PARSER
from ..config import INDUSTRY_KEYWORDS, DEFAULT_INDUSTRY


def _page_text(soup):
    """Title, meta description and visible text of a document"""
    parts = []
    if soup.title and soup.title.string:
        parts.append(soup.title.string)
    for meta in soup.find_all('meta', attrs={'content': True}):
        key = (meta.get('name') or meta.get('property') or '').lower()
        if key in ('description', 'keywords', 'og:description'):
            parts.append(meta['content'])
    for tag in soup(['script', 'style', 'noscript']):
        tag.decompose()
    parts.append(soup.get_text(' '))
    return ' '.join(parts)


def detect_industry(html, keywords=INDUSTRY_KEYWORDS, default=DEFAULT_INDUSTRY):
    """
    Guess a company's industry from keywords on its home page

    The first industry, in table order, with a whole-word keyword match
    wins. This is a rough heuristic; users can correct the result.

    Args:
        html (str): Raw page HTML
        keywords (tuple): (industry, keywords) pairs in priority order
        default (str): Industry returned when nothing matches

    Returns:
        str: Industry name
    """
    if not html:
        return default

    text = _page_text(BeautifulSoup(html, DEFAULT_PARSER)).lower()

    for industry, words in keywords:
        pattern = r'\b(?:' + '|'.join(re.escape(w.lower()) for w in words) + r')\b'
        if re.search(pattern, text):
            return industry
    return default
