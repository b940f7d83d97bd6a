import unittest

from action1_mcp.server.guard import CONFIRM_MARKER, allow_destructive


class TestAllowDestructive(unittest.TestCase):

    def test_dry_run_is_always_allowed(self):
        for enabled in (True, False):
            for confirm in (None, "", "no", "YES"):
                self.assertTrue(allow_destructive(confirm, True, enabled).allowed)

    def test_disabled_denies(self):
        for confirm in (None, "no", "YES"):
            decision = allow_destructive(confirm, False, False)
            self.assertFalse(decision.allowed)
            self.assertIn("disabled", decision.reason)

    def test_enabled_requires_exact_marker(self):
        for confirm in (None, "", "yes", "Y", "YES "):
            decision = allow_destructive(confirm, False, True)
            self.assertFalse(decision.allowed)
            self.assertIn("Confirmation required", decision.reason)

    def test_enabled_and_confirmed(self):
        decision = allow_destructive(CONFIRM_MARKER, None, True)
        self.assertTrue(decision.allowed)
        self.assertIsNone(decision.reason)
        self.assertEqual(CONFIRM_MARKER, "YES")


if __name__ == '__main__':
    unittest.main()
