import unittest

from action1_mcp.config import RetryPolicy, Settings


class TestSettingsFromEnv(unittest.TestCase):

    def test_empty_environment(self):
        settings = Settings.from_env({})
        self.assertIsNone(settings.token)
        self.assertIsNone(settings.org_id)
        self.assertFalse(settings.allow_destructive)
        self.assertFalse(settings.has_client_credentials)
        self.assertEqual(settings.http_timeout, 30.0)
        self.assertEqual(settings.retry, RetryPolicy())

    def test_token_priority(self):
        settings = Settings.from_env({"ACTION1_TOKEN": "c", "API_TOKEN": "b", "BEARER_TOKEN": "a"})
        self.assertEqual((settings.token, settings.token_source), ("a", "BEARER_TOKEN"))

        settings = Settings.from_env({"ACTION1_TOKEN": "c", "API_TOKEN": "b", "BEARER_TOKEN": ""})
        self.assertEqual((settings.token, settings.token_source), ("b", "API_TOKEN"))

        settings = Settings.from_env({"ACTION1_TOKEN": "c"})
        self.assertEqual((settings.token, settings.token_source), ("c", "ACTION1_TOKEN"))

    def test_allow_destructive_requires_literal_true(self):
        self.assertTrue(Settings.from_env({"ALLOW_DESTRUCTIVE": "true"}).allow_destructive)
        for value in ("TRUE", "1", "yes", "false", ""):
            self.assertFalse(Settings.from_env({"ALLOW_DESTRUCTIVE": value}).allow_destructive)

    def test_other_fields(self):
        settings = Settings.from_env({
            "ORG_ID": "org-1",
            "ACTION1_CLIENT_ID": "cid",
            "ACTION1_CLIENT_SECRET": "sec",
            "API_KEY": "k",
            "BASIC_USER": "u",
            "BASIC_PASS": "p",
            "HTTP_TIMEOUT": "5",
        })
        self.assertEqual(settings.org_id, "org-1")
        self.assertTrue(settings.has_client_credentials)
        self.assertEqual((settings.api_key, settings.basic_user, settings.basic_pass), ("k", "u", "p"))
        self.assertEqual(settings.http_timeout, 5.0)

    def test_client_credentials_need_both_halves(self):
        self.assertFalse(Settings.from_env({"ACTION1_CLIENT_ID": "cid"}).has_client_credentials)

    def test_invalid_timeout_falls_back_to_default(self):
        with self.assertLogs(level="WARNING") as logs:
            settings = Settings.from_env({"HTTP_TIMEOUT": "soon"})
        self.assertEqual(settings.http_timeout, 30.0)
        self.assertIn("HTTP_TIMEOUT", logs.output[0])

    def test_blank_timeout_uses_default(self):
        self.assertEqual(Settings.from_env({"HTTP_TIMEOUT": " "}).http_timeout, 30.0)


class TestResolveBaseUrl(unittest.TestCase):

    def test_default_when_unset(self):
        self.assertEqual(Settings().resolve_base_url("https://api.example.com/v1/"), "https://api.example.com/v1")

    def test_override_strips_trailing_slashes(self):
        settings = Settings(api_base="https://eu.example.com/api//")
        self.assertEqual(settings.resolve_base_url("https://api.example.com"), "https://eu.example.com/api")

    def test_non_http_override_is_ignored(self):
        for value in ("ftp://x", "example.com", "   "):
            settings = Settings(api_base=value)
            self.assertEqual(settings.resolve_base_url("https://api.example.com"), "https://api.example.com")


if __name__ == '__main__':
    unittest.main()
