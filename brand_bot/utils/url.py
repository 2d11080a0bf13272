import re
from collections import namedtuple
from urllib.parse import urljoin, urlparse

import requests

from ..config import HEADERS, FETCH_TIMEOUT
from ..exceptions import FetchFailure, InvalidUrl

NormalizedUrl = namedtuple('NormalizedUrl', ['full_url', 'base_url', 'domain'])

_HOSTNAME_RE = re.compile(r'[\w-]+(\.[\w-]+)*')


def normalize_url(url):
    """
    Normalize URL by adding https:// prefix if missing

    Args:
        url (str): URL to normalize

    Returns:
        str: Normalized URL
    """
    if not url:
        return url
    url = url.strip()
    if not url.lower().startswith(('http://', 'https://')):
        return 'https://' + url
    return url


def normalize_website_url(text):
    """
    Turn user input into an absolute URL, its origin and its bare domain

    Args:
        text (str): Free text entered by the user, e.g. "www.example.com/about"

    Returns:
        NormalizedUrl: (full_url, base_url, domain)

    Raises:
        InvalidUrl: If the input cannot be parsed as a website URL
    """
    if not text or not text.strip():
        raise InvalidUrl("URL is empty")

    full_url = normalize_url(text)
    if any(ch.isspace() for ch in full_url):
        raise InvalidUrl(f"URL contains whitespace: {text!r}")

    try:
        parsed = urlparse(full_url)
        hostname = parsed.hostname
        port = parsed.port
    except ValueError as e:
        raise InvalidUrl(f"Malformed URL: {text!r}", cause=e)

    if not hostname or not _HOSTNAME_RE.fullmatch(hostname):
        raise InvalidUrl(f"URL has no valid host: {text!r}")

    scheme = parsed.scheme.lower()
    netloc = f"{hostname}:{port}" if port else hostname
    base_url = f"{scheme}://{netloc}"
    domain = re.sub(r'^www\.', '', hostname)

    return NormalizedUrl(full_url, base_url, domain)


def fetch_website_html(url, timeout=FETCH_TIMEOUT):
    """
    Fetch the HTML content of a website

    Args:
        url (str): URL to fetch
        timeout (int): Timeout in seconds

    Returns:
        str: HTML content of the website

    Raises:
        FetchFailure: If the site is unreachable or answers with an error status
    """
    url = normalize_url(url)
    try:
        response = requests.get(
            url,
            headers=HEADERS,
            timeout=timeout,
            allow_redirects=True
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FetchFailure(f"Failed to fetch website {url}", cause=e)

    return response.text or ""


def make_absolute_url(base_url, relative_url):
    """
    Make a relative URL absolute using a base URL

    Args:
        base_url (str): Base URL
        relative_url (str): Relative URL

    Returns:
        str: Absolute URL
    """
    relative_url = relative_url.strip()
    if relative_url.startswith('//'):
        return 'https:' + relative_url
    elif relative_url.startswith(('http://', 'https://', 'data:')):
        return relative_url
    else:
        return urljoin(base_url.rstrip('/') + '/', relative_url)
