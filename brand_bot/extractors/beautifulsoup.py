import re
import json
import logging

from .base import LogoStrategy
from ..exceptions import ParseFailure
from ..models import CandidateLogo, LogoSource
from ..utils import image as image_utils

logger = logging.getLogger(__name__)

LOGO_HINTS = ('logo', 'brand')
CONTAINER_HINTS = ('logo', 'brand', 'nav', 'menu')


def _attr_text(tag, attrs=('class', 'id')):
    """Join the given attribute values of a tag into one lowercase string"""
    parts = []
    for attr in attrs:
        value = tag.get(attr)
        if not value:
            continue
        if isinstance(value, list):
            parts.extend(value)
        else:
            parts.append(value)
    return ' '.join(parts).lower()


def _image_source(img):
    """
    Get the real source of an <img>, looking past lazy-loading placeholders

    Returns:
        str: Source attribute value, or "" if the image has none
    """
    src = (img.get('src') or '').strip()
    if not src or image_utils.is_placeholder_data_uri(src):
        src = (img.get('data-src') or img.get('data-lazy-src') or '').strip()
    if image_utils.is_placeholder_data_uri(src):
        return ''
    return src


def _usable_image(page, img):
    """
    Resolve an <img> to an absolute URL if it can plausibly be a logo

    Returns:
        str: Absolute URL, or None for hero images, favicons and placeholders
    """
    src = _image_source(img)
    if not src:
        return None
    abs_url = page.absolute(src)
    if 'favicon' in abs_url.lower():
        return None
    if image_utils.is_likely_hero_image(abs_url):
        logger.debug("Skipping hero image: %s", abs_url[:80])
        return None
    return abs_url


class NavigationImageStrategy(LogoStrategy):
    """
    Look for a logo image in the header/navbar area

    Containers are <header> and <nav> elements first, then elements whose
    class or id mentions logo, brand, nav or menu.
    """

    source = LogoSource.NAVIGATION_IMAGE

    def candidates(self, page):
        soup = page.soup

        def has_container_hint(tag):
            text = _attr_text(tag)
            return bool(text) and any(hint in text for hint in CONTAINER_HINTS)

        containers = soup.find_all(['header', 'nav']) + soup.find_all(has_container_hint)

        for container in containers:
            for img in container.find_all('img'):
                logo_url = _usable_image(page, img)
                if logo_url:
                    logger.info("Found logo image in %s container: %s", container.name, logo_url)
                    return [CandidateLogo(logo_url, self.source)]
        return []


class LogoAttributeStrategy(LogoStrategy):
    """Images anywhere whose class, id or alt text says logo or brand"""

    source = LogoSource.LOGO_ATTRIBUTE

    def candidates(self, page):
        for img in page.soup.find_all('img'):
            text = _attr_text(img, ('class', 'id', 'alt'))
            if not any(hint in text for hint in LOGO_HINTS):
                continue
            logo_url = _usable_image(page, img)
            if logo_url:
                logger.info("Found logo image by attribute search: %s", logo_url)
                return [CandidateLogo(logo_url, self.source)]
        return []


def parse_json_ld(text):
    """
    Parse one JSON-LD block

    Raises:
        ParseFailure: If the block is not valid JSON
    """
    try:
        return json.loads(text)
    except ValueError as e:
        raise ParseFailure("Malformed JSON-LD block", cause=e)


def find_json_ld_logo(data):
    """
    Find an organization/publisher logo in parsed JSON-LD data

    Handles lists, @graph containers, and logos given either as a string
    or as an ImageObject with a url.

    Returns:
        str: Logo URL as written in the document, or None
    """
    if isinstance(data, list):
        for item in data:
            logo = find_json_ld_logo(item)
            if logo:
                return logo
        return None

    if not isinstance(data, dict):
        return None

    logo = data.get('logo')
    for key in ('organization', 'publisher'):
        if not logo and isinstance(data.get(key), dict):
            logo = data[key].get('logo')

    if isinstance(logo, list):
        logo = logo[0] if logo else None
    if isinstance(logo, dict):
        logo = logo.get('url') or logo.get('contentUrl')
    if isinstance(logo, str) and logo.strip():
        return logo.strip()

    if '@graph' in data:
        return find_json_ld_logo(data['@graph'])
    return None


class StructuredDataStrategy(LogoStrategy):
    """schema.org logo from application/ld+json blocks"""

    source = LogoSource.STRUCTURED_DATA

    def candidates(self, page):
        for script in page.soup.find_all('script', type='application/ld+json'):
            text = script.string or script.get_text()
            if not text or not text.strip():
                continue
            try:
                data = parse_json_ld(text)
            except ParseFailure as e:
                logger.info("Skipping structured data block: %s", e)
                continue

            logo = find_json_ld_logo(data)
            if logo:
                logo_url = page.absolute(logo)
                logger.info("Found logo in structured data: %s", logo_url)
                return [CandidateLogo(logo_url, self.source)]
        return []


class InlineSvgStrategy(LogoStrategy):
    """Inline <svg> marked as a logo, returned as a data URI"""

    source = LogoSource.INLINE_SVG

    def candidates(self, page):
        for svg in page.soup.find_all('svg'):
            text = ' '.join(
                ' '.join(value) if isinstance(value, list) else str(value)
                for value in svg.attrs.values()
            ).lower()
            if any(hint in text for hint in LOGO_HINTS):
                logger.info("Found inline SVG logo")
                return [CandidateLogo(image_utils.svg_to_data_uri(str(svg)), self.source)]
        return []


def _icon_size(link):
    """Largest edge from a sizes="180x180" attribute, 0 if unknown"""
    sizes = link.get('sizes') or ''
    best = 0
    for width, height in re.findall(r'(\d+)x(\d+)', sizes.lower()):
        best = max(best, int(width), int(height))
    return best


def _links_with_rel(page, predicate):
    links = []
    for link in page.soup.find_all('link', href=True):
        rel = link.get('rel') or []
        if isinstance(rel, str):
            rel = rel.split()
        rel = [r.lower() for r in rel]
        if predicate(rel) and link['href'].strip():
            links.append(link)
    return links


class TouchIconStrategy(LogoStrategy):
    """apple-touch-icon link, largest declared size first"""

    source = LogoSource.TOUCH_ICON
    needs_probe = True

    def candidates(self, page):
        links = _links_with_rel(
            page,
            lambda rel: 'apple-touch-icon' in rel or 'apple-touch-icon-precomposed' in rel
        )
        if not links:
            return []
        # sorted() is stable, so equally sized icons keep document order
        best = sorted(links, key=_icon_size, reverse=True)[0]
        return [CandidateLogo(page.absolute(best['href']), self.source)]


class IconLinkStrategy(LogoStrategy):
    """icon / shortcut icon link"""

    source = LogoSource.ICON_LINK
    needs_probe = True

    def candidates(self, page):
        links = _links_with_rel(page, lambda rel: 'icon' in rel)
        if not links:
            return []
        return [CandidateLogo(page.absolute(links[0]['href']), self.source)]


class MetaImageStrategy(LogoStrategy):
    """Image named by a <meta> tag, e.g. og:image or twitter:image"""

    needs_probe = False

    def __init__(self, key, source):
        self.key = key
        self.source = source

    def candidates(self, page):
        meta = (page.soup.find('meta', attrs={'property': self.key})
                or page.soup.find('meta', attrs={'name': self.key}))
        if meta and (meta.get('content') or '').strip():
            return [CandidateLogo(page.absolute(meta['content']), self.source)]
        return []

    @property
    def name(self):
        return f"Meta({self.key})"


class ImageReferenceStrategy(LogoStrategy):
    """
    Any reference to an image file with the given extension in the raw HTML

    References whose path mentions "logo" are preferred over the first
    reference in the document.
    """

    def __init__(self, extension, source):
        self.extension = extension
        self.source = source
        self.pattern = re.compile(
            r'["\'(=]\s*([^"\'()\s<>=]+\.' + re.escape(extension) + r'(?:\?[^"\'()\s<>]*)?)\s*["\')\s>]',
            re.IGNORECASE
        )

    def candidates(self, page):
        references = []
        for match in self.pattern.finditer(page.html):
            ref = match.group(1)
            if ref.startswith('data:') or image_utils.is_likely_hero_image(ref):
                continue
            references.append(ref)

        if not references:
            return []
        preferred = next((ref for ref in references if 'logo' in ref.lower()), references[0])
        return [CandidateLogo(page.absolute(preferred), self.source)]

    @property
    def name(self):
        return f"Reference(.{self.extension})"
