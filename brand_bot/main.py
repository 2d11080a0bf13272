#!/usr/bin/env python3
import argparse
import json
import logging
import os
import sys

from dotenv import load_dotenv
import uvicorn

from .exceptions import InvalidUrl
from .extractors.website import WebsiteExtractor
from .utils import url as url_utils
from .utils.cache import ResultCache

# Load environment variables from .env file
load_dotenv()


def configure_logging():
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def extract_brand_cli(url: str, force_refresh: bool = False, use_cache: bool = True) -> dict:
    """
    Extract brand data from a website (CLI version)

    Args:
        url (str): URL of the website to extract from
        force_refresh (bool): Whether to bypass cache
        use_cache (bool): Whether to read and write the result cache

    Returns:
        dict: Result in the API response layout
    """
    extractor = WebsiteExtractor(cache=ResultCache() if use_cache else None)
    result = extractor.extract(url, force_refresh=force_refresh)
    return {
        "url": result.source_url,
        "logo": result.logo_url,
        "brand_color": result.brand_color,
        "industry": result.industry,
        "alternativeLogos": result.alternative_logo_urls,
    }


def main_cli(argv=None):
    """
    Main CLI entry point for the application
    """
    parser = argparse.ArgumentParser(description="Extract company logo and brand color from a website")
    parser.add_argument("url", nargs="?", help="URL of the website to extract from")
    parser.add_argument("--force-refresh", action="store_true", help="Force refresh cache")
    parser.add_argument("--no-cache", action="store_true", help="Neither read nor write the result cache")
    parser.add_argument("--api", action="store_true", help="Start the API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind the API server to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind the API server to")
    parser.add_argument("--reload", action="store_true", help="Reload the API server on code changes")

    args = parser.parse_args(argv)
    configure_logging()

    # If --api flag is set, start the API server
    if args.api:
        main_api(host=args.host, port=args.port, reload=args.reload)
        return 0

    if not args.url:
        parser.error("a URL is required unless --api is given")

    try:
        url_utils.normalize_website_url(args.url)
    except InvalidUrl as e:
        print(f"Please enter a valid URL: {e}", file=sys.stderr)
        return 1

    result = extract_brand_cli(
        args.url,
        force_refresh=args.force_refresh,
        use_cache=not args.no_cache
    )
    print(json.dumps(result, indent=2))
    return 0


def main_api(host: str = "127.0.0.1", port: int = 8000, reload: bool = False):
    """
    Start the API server

    Args:
        host (str): Host to bind the API server to
        port (int): Port to bind the API server to
        reload (bool): Whether to reload on code changes
    """
    uvicorn.run(
        "brand_bot.api.routes:app",
        host=host,
        port=port,
        reload=reload
    )


if __name__ == "__main__":
    sys.exit(main_cli())
