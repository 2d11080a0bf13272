import os
import json
import hashlib
import logging
import time

from ..config import CACHE_DIR, CACHE_MAX_AGE
from ..exceptions import CacheUnavailable

logger = logging.getLogger(__name__)


def get_cache_key(url):
    """
    Generate a cache key for a URL

    Args:
        url (str): URL to generate cache key for

    Returns:
        str: Cache key (MD5 hash of URL)
    """
    return hashlib.md5(url.encode()).hexdigest()


def is_cache_valid(cache_data, max_age=CACHE_MAX_AGE):
    """
    Check if cached data is still valid (not too old)

    Args:
        cache_data (dict): Cached data
        max_age (int): Maximum age in seconds (default: 7 days), None for no limit

    Returns:
        bool: True if cache is valid, False otherwise
    """
    if not cache_data or 'timestamp' not in cache_data:
        return False
    if max_age is None:
        return True

    return (time.time() - cache_data['timestamp']) < max_age


class ResultCache:
    """
    JSON file store for extraction results

    One file per submitted URL, named after the MD5 of the literal URL
    string, so "example.com" and "https://example.com" are separate
    entries. Every failure surfaces as CacheUnavailable.
    """

    def __init__(self, cache_dir=CACHE_DIR, max_age=CACHE_MAX_AGE):
        self.cache_dir = cache_dir
        self.max_age = max_age

    def get_cache_path(self, url):
        return os.path.join(self.cache_dir, f"{get_cache_key(url)}.json")

    def get(self, url):
        """
        Get cached record for a URL if it exists and has not expired

        Args:
            url (str): Submitted URL

        Returns:
            dict: Cached record, or None if not found
        """
        cache_file = self.get_cache_path(url)
        if not os.path.exists(cache_file):
            return None

        try:
            with open(cache_file, 'r') as f:
                record = json.load(f)
        except (OSError, ValueError) as e:
            raise CacheUnavailable(f"Error reading cache file {cache_file}", cause=e)

        if not is_cache_valid(record, self.max_age):
            logger.info("Cached record for %s has expired", url)
            return None
        return record

    def put(self, record):
        """
        Store a record under its 'url' field, replacing any previous one

        Args:
            record (dict): Record in the website_data layout
        """
        record = dict(record)
        record.setdefault('timestamp', time.time())
        self._write(record['url'], record)

    def patch(self, url, fields):
        """
        Update some fields of an existing record in place

        Args:
            url (str): Submitted URL
            fields (dict): Fields to overwrite

        Returns:
            dict: The updated record, or None if nothing is cached for the URL
        """
        record = self.get(url)
        if record is None:
            return None
        record.update(fields)
        self._write(url, record)
        return record

    def clear(self, url=None):
        """
        Clear cache for a specific URL or all URLs

        Args:
            url (str): URL to clear cache for, or None to clear all

        Returns:
            int: Number of cache files removed
        """
        count = 0
        try:
            if url:
                cache_file = self.get_cache_path(url)
                if os.path.exists(cache_file):
                    os.remove(cache_file)
                    count = 1
            elif os.path.exists(self.cache_dir):
                for file in os.listdir(self.cache_dir):
                    if file.endswith('.json'):
                        os.remove(os.path.join(self.cache_dir, file))
                        count += 1
        except OSError as e:
            raise CacheUnavailable("Error clearing cache", cause=e)
        return count

    def _write(self, url, record):
        cache_file = self.get_cache_path(url)
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(cache_file, 'w') as f:
                json.dump(record, f)
        except (OSError, TypeError) as e:
            raise CacheUnavailable(f"Error writing cache file {cache_file}", cause=e)
