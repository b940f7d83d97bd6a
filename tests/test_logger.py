import io
import json
import logging
import unittest

from action1_mcp.logger import REDACTED, RedactingFilter, StructuredFormatter, TextFormatter, redact


class TestRedact(unittest.TestCase):

    def test_nested_access_token_is_masked(self):
        meta = {"request": {"url": "/x", "auth": {"access_token": "abc", "scope": "all"}}, "status": 200}
        out = redact(meta)
        self.assertEqual(out["request"]["auth"]["access_token"], REDACTED)
        self.assertEqual(out["request"]["auth"]["scope"], "all")
        self.assertEqual(out["request"]["url"], "/x")
        self.assertEqual(out["status"], 200)
        self.assertEqual(meta["request"]["auth"]["access_token"], "abc")

    def test_keys_are_matched_case_insensitively(self):
        out = redact({"Authorization": "Bearer x", "X-Api-Key": "k", "client_secret": "s", "BasicAuth": "b", "name": "n"})
        self.assertEqual(out, {
            "Authorization": REDACTED,
            "X-Api-Key": REDACTED,
            "client_secret": REDACTED,
            "BasicAuth": REDACTED,
            "name": "n",
        })

    def test_lists_are_walked(self):
        out = redact({"items": [{"token": "t", "id": 1}, "plain", [{"bearer": "b"}]]})
        self.assertEqual(out, {"items": [{"token": REDACTED, "id": 1}, "plain", [{"bearer": REDACTED}]]})

    def test_scalars_pass_through(self):
        self.assertEqual(redact("token"), "token")
        self.assertIsNone(redact(None))


class TestHandlerOutput(unittest.TestCase):

    def _logger(self, formatter):
        stream = io.StringIO()
        handler = logging.StreamHandler(stream)
        handler.addFilter(RedactingFilter())
        handler.setFormatter(formatter)
        logger = logging.getLogger(f"test.{id(stream)}")
        logger.propagate = False
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        return logger, stream

    def test_structured_record(self):
        logger, stream = self._logger(StructuredFormatter())
        logger.warning("http:retry", extra={"meta": {"attempt": 1, "headers": {"Authorization": "Bearer x"}}})
        entry = json.loads(stream.getvalue())
        self.assertEqual(entry["level"], "warning")
        self.assertEqual(entry["msg"], "http:retry")
        self.assertIn("ts", entry)
        self.assertEqual(entry["meta"], {"attempt": 1, "headers": {"Authorization": REDACTED}})

    def test_record_without_meta(self):
        logger, stream = self._logger(StructuredFormatter())
        logger.info("started")
        self.assertNotIn("meta", json.loads(stream.getvalue()))

    def test_text_format(self):
        logger, stream = self._logger(TextFormatter())
        logger.info("[ApiClient] request", extra={"meta": {"token": "t"}})
        self.assertEqual(stream.getvalue().strip(), f'[INFO] [ApiClient] request {{"token": "{REDACTED}"}}')


if __name__ == '__main__':
    unittest.main()
