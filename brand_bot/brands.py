import logging
from types import MappingProxyType

from .config import KNOWN_BRANDS, PLACEHOLDER_COLORS, PLACEHOLDER_LOGO
from .models import KnownBrandEntry
from .utils.color import normalize_hex_color, same_color

logger = logging.getLogger(__name__)


class KnownBrandTable:
    """
    Read-only table of vetted logo and color values for well-known domains

    Keys are bare lowercase domains without "www.". Lookup is an exact
    match, so "maps.google.com" does not hit "google.com".
    """

    def __init__(self, brands=None):
        if brands is None:
            brands = KNOWN_BRANDS
        entries = {}
        for domain, values in brands.items():
            if isinstance(values, KnownBrandEntry):
                entries[domain] = values
                continue
            entries[domain] = KnownBrandEntry(
                domain=domain,
                logo_url=values.get('logo_url'),
                brand_color=normalize_hex_color(values.get('brand_color')),
                industry=values.get('industry'),
            )
        self._entries = MappingProxyType(entries)

    def lookup(self, domain):
        """
        Args:
            domain (str): Normalized domain

        Returns:
            KnownBrandEntry: Entry for the domain, or None
        """
        if not domain:
            return None
        return self._entries.get(domain)

    def __contains__(self, domain):
        return domain in self._entries

    def __len__(self):
        return len(self._entries)


def reconcile_cached_record(record, entry, placeholder_colors=PLACEHOLDER_COLORS,
                            placeholder_logo=PLACEHOLDER_LOGO):
    """
    Decide which fields of a cached record a known-brand entry should correct

    A cached value is only replaced while it still holds a placeholder: a
    sentinel brand color or the placeholder logo. Real extracted values
    are left alone, and so is any record a user has confirmed.

    Args:
        record (dict): Cached record in the website_data layout
        entry (KnownBrandEntry): Known values for the record's domain, or None
        placeholder_colors (tuple): Colors that mark a placeholder
        placeholder_logo (str): Logo value that marks a placeholder

    Returns:
        dict: Fields to patch, empty when the record needs no correction
    """
    if not record or entry is None or record.get('confirmed'):
        return {}

    patch = {}

    cached_color = record.get('brand_color')
    if entry.brand_color and not same_color(cached_color, entry.brand_color):
        if not cached_color or any(same_color(cached_color, c) for c in placeholder_colors):
            patch['brand_color'] = entry.brand_color

    cached_logo = record.get('logo')
    if entry.logo_url and cached_logo != entry.logo_url:
        if not cached_logo or cached_logo == placeholder_logo:
            patch['logo'] = entry.logo_url
            alternatives = record.get('alternativeLogos') or []
            if entry.logo_url in alternatives:
                patch['alternativeLogos'] = [url for url in alternatives if url != entry.logo_url]

    if patch:
        logger.info("Known brand %s corrects cached fields: %s", entry.domain, ", ".join(sorted(patch)))
    return patch
