from .base import LogoStrategy
from ..config import LOGO_SERVICE_TEMPLATES, COMMON_ICON_PATHS, FAVICON_SERVICE_TEMPLATE
from ..models import CandidateLogo, LogoSource


class LogoServiceStrategy(LogoStrategy):
    """Third-party logo-by-domain lookups, in configured order"""

    source = LogoSource.LOGO_SERVICE
    needs_probe = True

    def __init__(self, templates=LOGO_SERVICE_TEMPLATES):
        self.templates = tuple(templates)

    def candidates(self, page):
        if not page.domain:
            return []
        return [CandidateLogo(t.format(domain=page.domain), self.source) for t in self.templates]


class CommonPathStrategy(LogoStrategy):
    """Conventional icon files relative to the site root"""

    source = LogoSource.COMMON_PATH
    needs_probe = True

    def __init__(self, paths=COMMON_ICON_PATHS):
        self.paths = tuple(paths)

    def candidates(self, page):
        base = page.base_url.rstrip('/')
        return [CandidateLogo(base + '/' + path.lstrip('/'), self.source) for path in self.paths]


class FaviconServiceStrategy(LogoStrategy):
    """
    Generic favicon-by-domain URL

    Always proposes a URL and is never probed, so it ends every strategy
    chain as the terminal fallback.
    """

    source = LogoSource.FAVICON_SERVICE
    needs_probe = False

    def __init__(self, template=FAVICON_SERVICE_TEMPLATE):
        self.template = template

    def candidates(self, page):
        return [CandidateLogo(self.favicon_url(page.domain), self.source)]

    def favicon_url(self, domain):
        return self.template.format(domain=domain)
