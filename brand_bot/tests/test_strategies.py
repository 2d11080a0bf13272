import base64
import unittest

from brand_bot.extractors.base import PageContext
from brand_bot.extractors.beautifulsoup import (
    NavigationImageStrategy,
    LogoAttributeStrategy,
    StructuredDataStrategy,
    InlineSvgStrategy,
    TouchIconStrategy,
    IconLinkStrategy,
    MetaImageStrategy,
    ImageReferenceStrategy,
    find_json_ld_logo,
)
from brand_bot.extractors.services import LogoServiceStrategy, CommonPathStrategy, FaviconServiceStrategy
from brand_bot.models import LogoSource


def make_page(body, head=""):
    html = f"<html><head>{head}</head><body>{body}</body></html>"
    return PageContext(html, "https://acme.test", "acme.test")


def urls(candidates):
    return [c.url for c in candidates]


class TestNavigationImageStrategy(unittest.TestCase):
    """Test cases for header/navbar logo search"""

    def test_skips_hero_image_in_header(self):
        page = make_page('<header><img src="/img/hero-banner.jpg"><img src="/img/acme.svg"></header>')

        result = NavigationImageStrategy().candidates(page)

        self.assertEqual(urls(result), ["https://acme.test/img/acme.svg"])
        self.assertEqual(result[0].source, LogoSource.NAVIGATION_IMAGE)

    def test_finds_image_in_brand_classed_container(self):
        page = make_page('<div class="site-brand"><a href="/"><img src="brand/acme.png"></a></div>')

        self.assertEqual(urls(NavigationImageStrategy().candidates(page)), ["https://acme.test/brand/acme.png"])

    def test_uses_lazy_source_behind_placeholder(self):
        page = make_page(
            '<nav><img src="data:image/gif;base64,R0lGODlhAQABAAAAACw=" data-src="/static/acme-logo.png"></nav>'
        )

        self.assertEqual(urls(NavigationImageStrategy().candidates(page)), ["https://acme.test/static/acme-logo.png"])

    def test_ignores_images_outside_navigation(self):
        page = make_page('<main><img src="/photos/team.jpg"></main>')

        self.assertEqual(NavigationImageStrategy().candidates(page), [])


class TestLogoAttributeStrategy(unittest.TestCase):
    """Test cases for class/id/alt logo hints"""

    def test_matches_alt_text(self):
        page = make_page('<img src="/a.png" alt="Team"><img src="/b.png" alt="Acme Logo">')

        self.assertEqual(urls(LogoAttributeStrategy().candidates(page)), ["https://acme.test/b.png"])

    def test_matches_class(self):
        page = make_page('<section><img class="site-logo dark" src="//cdn.acme.test/l.svg"></section>')

        self.assertEqual(urls(LogoAttributeStrategy().candidates(page)), ["https://cdn.acme.test/l.svg"])

    def test_skips_favicon(self):
        page = make_page('<img class="logo" src="/favicon.png">')

        self.assertEqual(LogoAttributeStrategy().candidates(page), [])

    def test_skips_hero_image(self):
        page = make_page(
            '<header><img class="brand-hero" src="/hero-banner.jpg">'
            '<img class="brand-logo" src="/logo.svg"></header>'
        )

        self.assertEqual(urls(LogoAttributeStrategy().candidates(page)), ["https://acme.test/logo.svg"])


class TestStructuredDataStrategy(unittest.TestCase):
    """Test cases for JSON-LD logos"""

    def test_skips_malformed_block(self):
        head = (
            '<script type="application/ld+json">{not json</script>'
            '<script type="application/ld+json">'
            '{"@type": "Article", "publisher": {"@type": "Organization", "logo": {"url": "/schema-logo.png"}}}'
            '</script>'
        )
        page = make_page("", head=head)

        result = StructuredDataStrategy().candidates(page)

        self.assertEqual(urls(result), ["https://acme.test/schema-logo.png"])

    def test_find_json_ld_logo_shapes(self):
        self.assertEqual(find_json_ld_logo({"logo": "https://acme.test/a.png"}), "https://acme.test/a.png")
        self.assertEqual(find_json_ld_logo({"organization": {"logo": "/b.png"}}), "/b.png")
        self.assertEqual(find_json_ld_logo([{"name": "x"}, {"logo": {"contentUrl": "/c.png"}}]), "/c.png")
        self.assertEqual(find_json_ld_logo({"@graph": [{"@type": "WebSite"}, {"logo": "/d.png"}]}), "/d.png")
        self.assertIsNone(find_json_ld_logo({"name": "Acme"}))


class TestInlineSvgStrategy(unittest.TestCase):
    """Test cases for inline SVG logos"""

    def test_returns_data_uri_for_logo_svg(self):
        page = make_page('<svg class="icon"></svg><svg id="brand-mark" viewBox="0 0 10 10"><path d="M0 0h10v10z"></path></svg>')

        result = InlineSvgStrategy().candidates(page)

        self.assertEqual(len(result), 1)
        self.assertTrue(result[0].url.startswith("data:image/svg+xml;base64,"))
        markup = base64.b64decode(result[0].url.split(",", 1)[1]).decode("utf-8")
        self.assertIn("brand-mark", markup)

    def test_ignores_unmarked_svg(self):
        page = make_page('<svg class="chevron"><path d="M0 0"></path></svg>')

        self.assertEqual(InlineSvgStrategy().candidates(page), [])


class TestIconLinkStrategies(unittest.TestCase):
    """Test cases for touch icon and favicon links"""

    def test_touch_icon_prefers_largest(self):
        head = (
            '<link rel="apple-touch-icon" sizes="76x76" href="/touch-76.png">'
            '<link rel="apple-touch-icon" sizes="180x180" href="/touch-180.png">'
        )
        strategy = TouchIconStrategy()

        self.assertEqual(urls(strategy.candidates(make_page("", head=head))), ["https://acme.test/touch-180.png"])
        self.assertTrue(strategy.needs_probe)

    def test_shortcut_icon(self):
        head = '<link rel="stylesheet" href="/main.css"><link rel="shortcut icon" href="/favicon.ico">'
        strategy = IconLinkStrategy()

        self.assertEqual(urls(strategy.candidates(make_page("", head=head))), ["https://acme.test/favicon.ico"])
        self.assertTrue(strategy.needs_probe)


class TestMetaImageStrategy(unittest.TestCase):
    """Test cases for Open Graph and Twitter card images"""

    def test_open_graph_image(self):
        head = '<meta property="og:image" content="/share.png">'
        strategy = MetaImageStrategy("og:image", LogoSource.OPEN_GRAPH)

        result = strategy.candidates(make_page("", head=head))

        self.assertEqual(urls(result), ["https://acme.test/share.png"])
        self.assertEqual(result[0].source, LogoSource.OPEN_GRAPH)

    def test_twitter_image(self):
        head = '<meta name="twitter:image" content="https://img.acme.test/card.jpg">'
        strategy = MetaImageStrategy("twitter:image", LogoSource.TWITTER_CARD)

        self.assertEqual(urls(strategy.candidates(make_page("", head=head))), ["https://img.acme.test/card.jpg"])


class TestImageReferenceStrategy(unittest.TestCase):
    """Test cases for raw image references"""

    def test_prefers_reference_mentioning_logo(self):
        page = make_page(
            '<div style="background: url(/icons/arrow.svg)"></div>'
            '<object data="/assets/acme-logo.svg?v=2"></object>'
        )
        strategy = ImageReferenceStrategy("svg", LogoSource.SVG_REFERENCE)

        self.assertEqual(urls(strategy.candidates(page)), ["https://acme.test/assets/acme-logo.svg?v=2"])

    def test_falls_back_to_first_reference(self):
        page = make_page('<img src="/a/first.png"><img src="/a/second.png">')
        strategy = ImageReferenceStrategy("png", LogoSource.PNG_REFERENCE)

        self.assertEqual(urls(strategy.candidates(page)), ["https://acme.test/a/first.png"])

    def test_no_reference(self):
        strategy = ImageReferenceStrategy("svg", LogoSource.SVG_REFERENCE)

        self.assertEqual(strategy.candidates(make_page("<p>plain</p>")), [])


class TestServiceStrategies(unittest.TestCase):
    """Test cases for strategies that do not read the page"""

    def test_logo_services_in_order(self):
        strategy = LogoServiceStrategy(("https://logos.test/{domain}", "https://icons.test/{domain}.ico"))

        self.assertEqual(
            urls(strategy.candidates(make_page(""))),
            ["https://logos.test/acme.test", "https://icons.test/acme.test.ico"]
        )

    def test_common_paths(self):
        strategy = CommonPathStrategy(("/logo.png", "favicon.ico"))

        self.assertEqual(
            urls(strategy.candidates(make_page(""))),
            ["https://acme.test/logo.png", "https://acme.test/favicon.ico"]
        )

    def test_favicon_service_is_never_probed(self):
        strategy = FaviconServiceStrategy("https://favicons.test/?domain={domain}")

        self.assertEqual(urls(strategy.candidates(make_page(""))), ["https://favicons.test/?domain=acme.test"])
        self.assertFalse(strategy.needs_probe)


if __name__ == "__main__":
    unittest.main()
