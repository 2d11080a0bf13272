import base64
import logging

import requests

from ..config import HEADERS, PROBE_TIMEOUT
from ..exceptions import ProbeFailure

logger = logging.getLogger(__name__)


def probe_url(url, timeout=PROBE_TIMEOUT):
    """
    Check that a URL answers with a success status, without downloading it

    Data URIs carry their own content and always pass.

    Args:
        url (str): URL to check
        timeout (int): Timeout in seconds

    Raises:
        ProbeFailure: If the URL is unreachable or answers with an error status
    """
    if not url:
        raise ProbeFailure("Empty URL")
    if url.startswith('data:image/'):
        return

    try:
        response = requests.head(url, headers=HEADERS, timeout=timeout, allow_redirects=True)
        # Some servers refuse HEAD; a streamed GET still leaves the body unread
        if response.status_code in (405, 501):
            response = requests.get(url, headers=HEADERS, timeout=timeout, allow_redirects=True, stream=True)
            response.close()
    except requests.exceptions.RequestException as e:
        raise ProbeFailure(f"Could not reach {url}", cause=e)

    if response.status_code >= 400:
        raise ProbeFailure(f"{url} answered with status {response.status_code}")


def is_reachable(url, timeout=PROBE_TIMEOUT):
    """
    Boolean wrapper around probe_url

    Returns:
        bool: True if the URL answered with a success status
    """
    try:
        probe_url(url, timeout=timeout)
        return True
    except ProbeFailure as e:
        logger.debug("Probe rejected candidate: %s", e)
        return False


def is_likely_hero_image(url):
    """
    Determine if a URL is likely a hero/banner image rather than a logo

    Args:
        url (str): URL to check

    Returns:
        bool: True if URL is likely a hero image, False otherwise
    """
    if not url or url.startswith('data:'):
        return False

    url_lower = url.lower()

    # Hero image indicators in the URL
    hero_terms = [
        'hero', 'banner', 'background', 'header-bg', 'bg-', 'slide',
        'carousel', 'header-image', 'splash', 'cover', 'main-image',
        'showcase', 'featured', 'jumbotron', 'slider', 'billboard',
        'masthead', 'header-photo', 'panorama', 'feature-img', 'bg_'
    ]
    if any(term in url_lower for term in hero_terms):
        return True

    # Check for overly generic names
    generic_names = ['header.jpg', 'header.png', 'bg.jpg', 'bg.png', 'bg.svg']
    if any(url_lower.endswith(name) for name in generic_names):
        return True

    return False


def is_placeholder_data_uri(url):
    """
    Check for inline image data used as a lazy-loading placeholder

    Args:
        url (str): Image source to check

    Returns:
        bool: True for tracking pixels and short inline placeholders
    """
    if not url or not url.startswith('data:'):
        return False
    if url.startswith('data:image/gif'):
        return True
    # Skip empty SVG placeholders (common in sites using optimization)
    if 'nitro-empty-id' in url:
        return True
    return 'base64' in url and len(url) < 400


def svg_to_data_uri(svg_markup):
    """
    Encode inline SVG markup as a data URI usable as an image source

    Args:
        svg_markup (str): Serialized <svg> element

    Returns:
        str: base64 data URI
    """
    if 'xmlns=' not in svg_markup:
        svg_markup = svg_markup.replace('<svg', '<svg xmlns="http://www.w3.org/2000/svg"', 1)
    encoded = base64.b64encode(svg_markup.encode('utf-8')).decode('ascii')
    return f"data:image/svg+xml;base64,{encoded}"
