import time
import logging

from .base import PageContext
from .beautifulsoup import (
    NavigationImageStrategy,
    LogoAttributeStrategy,
    StructuredDataStrategy,
    InlineSvgStrategy,
    TouchIconStrategy,
    IconLinkStrategy,
    MetaImageStrategy,
    ImageReferenceStrategy,
)
from .color import BrandColorExtractor
from .industry import detect_industry
from .services import LogoServiceStrategy, CommonPathStrategy, FaviconServiceStrategy
from ..brands import KnownBrandTable, reconcile_cached_record
from ..config import (
    LOGO_SERVICE_TEMPLATES,
    COMMON_ICON_PATHS,
    FAVICON_SERVICE_TEMPLATE,
    MAX_ALTERNATIVES,
    PLACEHOLDER_COLORS,
    PLACEHOLDER_LOGO,
    DEFAULT_INDUSTRY,
    INDUSTRY_KEYWORDS,
)
from ..exceptions import InvalidUrl, FetchFailure, CacheUnavailable, ExtractionCancelled
from ..models import CandidateLogo, ExtractionResult, LogoSource
from ..utils import url as url_utils
from ..utils import image as image_utils

logger = logging.getLogger(__name__)


def default_logo_strategies(logo_services=LOGO_SERVICE_TEMPLATES, icon_paths=COMMON_ICON_PATHS,
                            favicon_template=FAVICON_SERVICE_TEMPLATE):
    """
    Build the logo strategy chain, highest priority first

    Returns:
        tuple: LogoStrategy instances
    """
    return (
        LogoServiceStrategy(logo_services),
        NavigationImageStrategy(),
        LogoAttributeStrategy(),
        StructuredDataStrategy(),
        InlineSvgStrategy(),
        TouchIconStrategy(),
        IconLinkStrategy(),
        CommonPathStrategy(icon_paths),
        MetaImageStrategy('og:image', LogoSource.OPEN_GRAPH),
        MetaImageStrategy('twitter:image', LogoSource.TWITTER_CARD),
        ImageReferenceStrategy('svg', LogoSource.SVG_REFERENCE),
        ImageReferenceStrategy('png', LogoSource.PNG_REFERENCE),
        FaviconServiceStrategy(favicon_template),
    )


class WebsiteExtractor:
    """
    Extract a logo, brand color and industry for a website

    The flow for one URL is: cache lookup (corrected against the known-brand
    table), known-brand short-circuit, HTML fetch, logo strategies in
    priority order, color and industry detection, cache write.

    Failures never reach the caller except for cancellation. A site that
    cannot be fetched yields the known-brand values or the favicon-service
    logo with the default color.
    """

    def __init__(self, cache=None, known_brands=None, strategies=None, color_extractor=None,
                 probe=image_utils.is_reachable, fetch_html=url_utils.fetch_website_html,
                 max_alternatives=MAX_ALTERNATIVES, placeholder_colors=PLACEHOLDER_COLORS,
                 favicon_template=FAVICON_SERVICE_TEMPLATE, industry_keywords=INDUSTRY_KEYWORDS):
        """
        Args:
            cache (ResultCache): Result store, or None to disable caching
            known_brands (KnownBrandTable): Vetted values, defaults to the built-in table
            strategies (tuple): Logo strategies, highest priority first
            color_extractor (BrandColorExtractor): Brand color detection
            probe (callable): url -> bool reachability check
            fetch_html (callable): url -> html, raising FetchFailure
            max_alternatives (int): Cap on alternative logo URLs
            placeholder_colors (tuple): Cached colors the known-brand table may correct
            favicon_template (str): Terminal fallback logo URL template
            industry_keywords (tuple): Keyword table for industry detection
        """
        self.cache = cache
        self.known_brands = known_brands if known_brands is not None else KnownBrandTable()
        self.strategies = tuple(strategies) if strategies is not None else default_logo_strategies(
            favicon_template=favicon_template)
        self.color_extractor = color_extractor or BrandColorExtractor()
        self.probe = probe
        self.fetch_html = fetch_html
        self.max_alternatives = max_alternatives
        self.placeholder_colors = tuple(placeholder_colors)
        self.favicon_template = favicon_template
        self.industry_keywords = industry_keywords

    def extract(self, url, force_refresh=False, cancel_event=None):
        """
        Extract brand data for a website

        Args:
            url (str): URL as submitted by the user, also the cache key
            force_refresh (bool): Whether to bypass the cache
            cancel_event (threading.Event): Set by the caller to abandon the extraction

        Returns:
            ExtractionResult: Always populated, degraded when extraction fails

        Raises:
            ExtractionCancelled: If cancel_event was set before extraction finished
        """
        start_time = time.time()

        try:
            target = url_utils.normalize_website_url(url)
        except InvalidUrl as e:
            logger.warning("Cannot extract from malformed URL: %s", e)
            return self._degraded_result(url, "", None)

        known = self.known_brands.lookup(target.domain)

        if not force_refresh:
            cached = self._read_cache(url, known)
            if cached is not None:
                return cached

        if known is not None and known.is_complete:
            logger.info("Using known brand values for %s", target.domain)
            return ExtractionResult(
                logo_url=known.logo_url,
                brand_color=known.brand_color,
                source_url=url,
                industry=known.industry or DEFAULT_INDUSTRY,
            )

        logger.info("Extracting brand data from %s", target.full_url)
        try:
            html = self.fetch_html(target.full_url)
        except FetchFailure as e:
            logger.warning("%s, using fallback values", e)
            return self._degraded_result(url, target.domain, known)

        try:
            result = self._extract_from_html(url, target, html, known, cancel_event)
        except ExtractionCancelled:
            logger.info("Extraction for %s cancelled", url)
            raise
        except Exception as e:
            logger.exception("Unexpected error analysing %s: %s", target.full_url, e)
            return self._degraded_result(url, target.domain, known)

        self._write_cache(result)
        logger.info("Extraction for %s took %.2f seconds", url, time.time() - start_time)
        return result

    def select_logos(self, page, cancel_event=None):
        """
        Run the logo strategies over a page

        The primary logo is the first usable candidate in priority order.
        Later strategies only run to fill the alternatives list, and stop
        once it is full. Candidates from probed strategies are accepted only
        if reachable.

        Args:
            page (PageContext): The page being analysed
            cancel_event (threading.Event): Checked before every strategy and probe

        Returns:
            tuple: (CandidateLogo primary, list of alternative URLs)
        """
        primary = None
        alternatives = []
        seen = set()

        def full():
            return primary is not None and len(alternatives) >= self.max_alternatives

        for strategy in self.strategies:
            if full():
                break
            self._check_cancelled(cancel_event)

            try:
                candidates = strategy.candidates(page)
            except Exception as e:
                logger.warning("Strategy %s failed: %s", strategy.name, e)
                continue

            for candidate in candidates:
                if full():
                    break
                if not candidate.url or candidate.url in seen:
                    continue
                seen.add(candidate.url)

                if strategy.needs_probe:
                    self._check_cancelled(cancel_event)
                    if not self.probe(candidate.url):
                        logger.info("Rejected unreachable candidate from %s: %s", strategy.name, candidate.url[:80])
                        continue

                if primary is None:
                    logger.info("Selected logo from %s: %s", strategy.name, candidate.url[:80])
                    primary = candidate
                else:
                    alternatives.append(candidate.url)

        if primary is None:
            primary = CandidateLogo(self._favicon_url(page.domain), LogoSource.FAVICON_SERVICE)

        return primary, alternatives

    def _extract_from_html(self, url, target, html, known, cancel_event):
        page = PageContext(html, target.base_url, target.domain)

        primary, alternatives = self.select_logos(page, cancel_event)
        logo_url = primary.url

        # A vetted logo beats any heuristic pick; keep the pick as an option
        if known is not None and known.logo_url and known.logo_url != logo_url:
            alternatives = [logo_url] + alternatives
            logo_url = known.logo_url

        brand_color = self.color_extractor.extract(html, known_brand=known, soup=page.soup if html else None)

        if known is not None and known.industry:
            industry = known.industry
        else:
            industry = detect_industry(html, self.industry_keywords)

        return ExtractionResult(
            logo_url=logo_url,
            brand_color=brand_color,
            source_url=url,
            industry=industry,
            alternative_logo_urls=self._clean_alternatives(logo_url, alternatives),
        )

    def _clean_alternatives(self, logo_url, alternatives):
        cleaned = []
        for alt in alternatives:
            if alt and alt != logo_url and alt not in cleaned:
                cleaned.append(alt)
        return cleaned[:self.max_alternatives]

    def _degraded_result(self, url, domain, known):
        if known is not None:
            logo_url = known.logo_url or self._favicon_url(domain)
            brand_color = known.brand_color or self.color_extractor.default_color
            industry = known.industry or DEFAULT_INDUSTRY
        else:
            logo_url = self._favicon_url(domain)
            brand_color = self.color_extractor.default_color
            industry = DEFAULT_INDUSTRY

        return ExtractionResult(
            logo_url=logo_url,
            brand_color=brand_color,
            source_url=url or "",
            industry=industry,
        )

    def _favicon_url(self, domain):
        if not domain:
            return PLACEHOLDER_LOGO
        return self.favicon_template.format(domain=domain)

    def _read_cache(self, url, known):
        if self.cache is None:
            return None

        try:
            record = self.cache.get(url)
        except CacheUnavailable as e:
            logger.warning("Cache lookup failed, extracting without it: %s", e)
            return None
        if not record:
            return None

        fields = reconcile_cached_record(record, known, self.placeholder_colors)
        if fields:
            record.update(fields)
            try:
                self.cache.patch(url, fields)
            except CacheUnavailable as e:
                logger.warning("Could not patch cached record for %s: %s", url, e)

        try:
            result = ExtractionResult.from_record(record)
        except (KeyError, TypeError) as e:
            logger.warning("Ignoring malformed cached record for %s: %s", url, e)
            return None

        logger.info("Found cached brand data for %s", url)
        return result

    def _write_cache(self, result):
        if self.cache is None:
            return
        try:
            self.cache.put(result.to_record())
        except CacheUnavailable as e:
            logger.warning("Could not cache result for %s: %s", result.source_url, e)

    @staticmethod
    def _check_cancelled(cancel_event):
        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelled("Extraction abandoned by caller")
