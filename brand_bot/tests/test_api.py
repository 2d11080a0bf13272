import asyncio
import os
import threading
import time
import tempfile
import unittest
from unittest import mock

from fastapi.testclient import TestClient

from brand_bot.api.routes import app, get_cache, get_extractor, _watch_disconnect
from brand_bot.config import CACHE_MAX_AGE, DEFAULT_BRAND_COLOR
from brand_bot.exceptions import CacheUnavailable, ExtractionCancelled
from brand_bot.main import main_cli
from brand_bot.models import ExtractionResult
from brand_bot.utils.cache import ResultCache


class TestApi(unittest.TestCase):
    """Test cases for the HTTP API"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.cache = ResultCache(cache_dir=os.path.join(self.temp_dir.name, "cache"))
        self.extractor = mock.Mock()
        self.extractor.extract.return_value = ExtractionResult(
            logo_url="https://acme.test/logo.svg",
            brand_color="#123456",
            source_url="acme.test",
            industry="Retail",
            alternative_logo_urls=["https://acme.test/favicon.ico"],
        )
        app.dependency_overrides[get_cache] = lambda: self.cache
        app.dependency_overrides[get_extractor] = lambda: self.extractor
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.temp_dir.cleanup()

    def test_root(self):
        response = self.client.get("/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["name"], "Brand Bot API")

    def test_extract(self):
        response = self.client.post("/extract", json={"url": "acme.test", "force_refresh": True})

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["url"], "acme.test")
        self.assertEqual(data["logo"], "https://acme.test/logo.svg")
        self.assertEqual(data["brand_color"], "#123456")
        self.assertEqual(data["industry"], "Retail")
        self.assertEqual(data["alternativeLogos"], ["https://acme.test/favicon.ico"])
        self.extractor.extract.assert_called_once_with("acme.test", force_refresh=True, cancel_event=mock.ANY)
        cancel_event = self.extractor.extract.call_args[1]["cancel_event"]
        self.assertIsInstance(cancel_event, threading.Event)
        self.assertFalse(cancel_event.is_set())

    def test_extract_requires_url(self):
        response = self.client.post("/extract", json={"url": "  "})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "URL is required")
        self.extractor.extract.assert_not_called()

    def test_extract_rejects_invalid_url(self):
        response = self.client.post("/extract", json={"url": "exa mple"})

        self.assertEqual(response.status_code, 400)
        self.assertTrue(response.json()["detail"].startswith("Please enter a valid URL"))
        self.extractor.extract.assert_not_called()

    def test_cancelled_extraction_gets_no_body(self):
        self.extractor.extract.side_effect = ExtractionCancelled("client went away")

        response = self.client.post("/extract", json={"url": "acme.test"})

        self.assertEqual(response.status_code, 499)
        self.assertEqual(response.content, b"")

    def test_confirm_stores_new_record(self):
        response = self.client.post("/confirm", json={
            "url": "acme.test",
            "logo": "data:image/png;base64,AAAA",
            "brand_color": "#abcdef",
        })

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data["saved"])
        self.assertEqual(data["brand_color"], "#ABCDEF")
        self.assertEqual(data["industry"], "Technology")
        record = self.cache.get("acme.test")
        self.assertEqual(record["logo"], "data:image/png;base64,AAAA")
        self.assertEqual(record["brand_color"], "#ABCDEF")

    def test_confirm_overrides_extracted_record(self):
        self.cache.put({
            "url": "acme.test",
            "logo": "https://acme.test/logo.svg",
            "brand_color": "#123456",
            "industry": "Retail",
            "alternativeLogos": ["https://acme.test/alt.png", "https://acme.test/other.png"],
        })

        response = self.client.post("/confirm", json={
            "url": "acme.test",
            "logo": "https://acme.test/alt.png",
            "brand_color": "#FF0000",
            "industry": "Travel",
        })

        self.assertEqual(response.status_code, 200)
        record = self.cache.get("acme.test")
        self.assertEqual(record["logo"], "https://acme.test/alt.png")
        self.assertEqual(record["industry"], "Travel")
        self.assertEqual(record["alternativeLogos"], ["https://acme.test/other.png"])

    def test_confirm_restarts_cache_age(self):
        """Confirmed values outlive the extraction they replaced"""
        now = time.time()
        self.cache.put({
            "url": "acme.test",
            "logo": "https://acme.test/logo.svg",
            "brand_color": "#123456",
            "timestamp": now - CACHE_MAX_AGE + 60,
        })

        response = self.client.post("/confirm", json={
            "url": "acme.test",
            "logo": "data:image/png;base64,AAAA",
            "brand_color": "#222222",
        })
        self.assertEqual(response.status_code, 200)

        with mock.patch("brand_bot.utils.cache.time") as clock:
            clock.time.return_value = now + 120
            record = self.cache.get("acme.test")

        self.assertIsNotNone(record)
        self.assertEqual(record["brand_color"], "#222222")
        self.assertEqual(record["logo"], "data:image/png;base64,AAAA")

    def test_confirm_marks_record_confirmed(self):
        self.client.post("/confirm", json={
            "url": "acme.test",
            "logo": "https://acme.test/logo.svg",
            "brand_color": DEFAULT_BRAND_COLOR,
        })

        self.assertTrue(self.cache.get("acme.test")["confirmed"])

    def test_confirm_rejects_bad_color(self):
        response = self.client.post("/confirm", json={
            "url": "acme.test",
            "logo": "https://acme.test/logo.svg",
            "brand_color": "green-ish",
        })

        self.assertEqual(response.status_code, 400)
        self.assertIsNone(self.cache.get("acme.test"))

    def test_confirm_rejects_empty_logo(self):
        response = self.client.post("/confirm", json={"url": "acme.test", "logo": " ", "brand_color": "#000"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Logo is required")

    def test_confirm_reports_unsaved_values(self):
        broken = mock.Mock()
        broken.get.side_effect = CacheUnavailable("disk full")
        app.dependency_overrides[get_cache] = lambda: broken

        response = self.client.post("/confirm", json={
            "url": "acme.test",
            "logo": "https://acme.test/logo.svg",
            "brand_color": "#000000",
        })

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()["saved"])
        self.assertEqual(response.json()["message"], "Company details could not be saved")

    def test_cache_info_and_clear(self):
        self.cache.put({"url": "acme.test", "logo": "a", "brand_color": "#000"})

        info = self.client.get("/cache", params={"url": "acme.test"}).json()
        self.assertTrue(info["has_cache"])
        self.assertEqual(info["cache_data"]["logo"], "a")

        cleared = self.client.delete("/cache", params={"url": "acme.test"}).json()
        self.assertEqual(cleared["files_removed"], 1)

        info = self.client.get("/cache", params={"url": "acme.test"}).json()
        self.assertFalse(info["has_cache"])


class FakeRequest:
    def __init__(self, disconnect_after):
        self.calls = 0
        self.disconnect_after = disconnect_after

    async def is_disconnected(self):
        self.calls += 1
        return self.calls > self.disconnect_after


class TestWatchDisconnect(unittest.TestCase):
    """Test cases for abandoning extraction when the client leaves"""

    def test_sets_event_on_disconnect(self):
        cancel_event = threading.Event()
        request = FakeRequest(disconnect_after=2)

        asyncio.run(_watch_disconnect(request, cancel_event, interval=0))

        self.assertTrue(cancel_event.is_set())
        self.assertEqual(request.calls, 3)

    def test_stops_when_event_already_set(self):
        cancel_event = threading.Event()
        cancel_event.set()
        request = FakeRequest(disconnect_after=0)

        asyncio.run(_watch_disconnect(request, cancel_event, interval=0))

        self.assertEqual(request.calls, 0)


class TestCli(unittest.TestCase):
    """Test cases for the command line entry point"""

    def test_invalid_url_exits_with_error(self):
        with mock.patch("brand_bot.main.extract_brand_cli") as extract:
            self.assertEqual(main_cli(["exa mple"]), 1)
        extract.assert_not_called()

    def test_prints_result(self):
        result = {"url": "acme.test", "logo": "a", "brand_color": "#000", "industry": "Retail", "alternativeLogos": []}
        with mock.patch("brand_bot.main.extract_brand_cli", return_value=result) as extract, \
                mock.patch("builtins.print") as printed:
            self.assertEqual(main_cli(["acme.test", "--no-cache"]), 0)

        extract.assert_called_once_with("acme.test", force_refresh=False, use_cache=False)
        self.assertIn('"brand_color": "#000"', printed.call_args[0][0])


if __name__ == "__main__":
    unittest.main()
