import logging

from django.test import TestCase

from backend.middleware import RequestIdLogFilter, get_request_id


class RequestIdTests(TestCase):
    """
    GUARANTEES:
    - Every response carries X-Request-ID
    - An incoming id is echoed back (trimmed, capped at 64 chars)
    """

    def test_generated_when_absent(self):
        res = self.client.get("/api/health/")
        self.assertEqual(len(res["X-Request-ID"]), 32)

    def test_incoming_id_is_echoed(self):
        res = self.client.get("/api/health/", HTTP_X_REQUEST_ID="  trace-abc  ")
        self.assertEqual(res["X-Request-ID"], "trace-abc")

    def test_incoming_id_is_capped(self):
        res = self.client.get("/api/health/", HTTP_X_REQUEST_ID="x" * 200)
        self.assertEqual(res["X-Request-ID"], "x" * 64)

    def test_log_filter_outside_request(self):
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        self.assertTrue(RequestIdLogFilter().filter(record))
        self.assertEqual(record.request_id, get_request_id())
        self.assertEqual(record.request_id, "-")


class PublicEndpointTests(TestCase):
    def test_health(self):
        res = self.client.get("/api/health/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"status": "ok", "db": "ok"})

    def test_api_root(self):
        res = self.client.get("/api/")
        self.assertEqual(res.status_code, 200)
        self.assertIn("inventory", res.json()["modules"])
