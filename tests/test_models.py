import dataclasses
import unittest

from action1_mcp.api.endpoints import ENDPOINTS
from action1_mcp.api.models import (
    APIParameter,
    AuthScheme,
    HTTPMethod,
    Operation,
    PaginationStyle,
    check_required,
)
from action1_mcp.errors import MissingParameter, UnsupportedOperation


class TestEndpointsMap(unittest.TestCase):

    def test_defaults(self):
        self.assertEqual(ENDPOINTS.base_url, "https://app.action1.com/api/3.0")
        self.assertEqual(ENDPOINTS.auth.scheme, AuthScheme.OAUTH2)
        self.assertEqual(ENDPOINTS.pagination.style, PaginationStyle.CURSOR)
        self.assertEqual(ENDPOINTS.pagination.cursor_param, "next_page")
        self.assertEqual(ENDPOINTS.pagination.per_page_param, "limit")
        self.assertIsNone(ENDPOINTS.job_status)

    def test_includes_endpoints_status(self):
        self.assertIn("endpoints_status", ENDPOINTS.resources)

    def test_includes_deployer_installation_windows(self):
        self.assertIn("deployer_installation_windows", ENDPOINTS.resources)

    def test_agent_installation_takes_install_type(self):
        desc = ENDPOINTS.endpoint("agent_installation", Operation.GET)
        self.assertIn("{installType}", desc.path)

    def test_remote_sessions_subresource(self):
        sub = ENDPOINTS.resource("endpoints", "remoteSessions")
        self.assertIsNotNone(sub.get)
        self.assertIsNotNone(sub.update)
        self.assertEqual(sub.update.method, HTTPMethod.PATCH)

    def test_actions_are_post(self):
        for name, action in ENDPOINTS.actions.items():
            self.assertEqual(action.method, HTTPMethod.POST, name)


class TestLookups(unittest.TestCase):

    def test_unknown_resource(self):
        with self.assertRaises(UnsupportedOperation) as ctx:
            ENDPOINTS.resource("printers")
        self.assertIn("printers", str(ctx.exception))

    def test_missing_operation_is_reported(self):
        with self.assertRaises(UnsupportedOperation) as ctx:
            ENDPOINTS.endpoint("organizations", Operation.DELETE)
        self.assertIn("does not support delete", str(ctx.exception))

    def test_unknown_subresource(self):
        with self.assertRaises(UnsupportedOperation):
            ENDPOINTS.resource("endpoints", "nope")

    def test_unknown_action(self):
        with self.assertRaises(UnsupportedOperation):
            ENDPOINTS.action("reboot_everything")

    def test_operations_lists_only_defined(self):
        ops = ENDPOINTS.resource("deployers").operations()
        self.assertEqual(ops, (Operation.LIST, Operation.GET, Operation.DELETE))

    def test_describe_includes_subresources(self):
        summary = ENDPOINTS.describe()
        self.assertEqual(summary["resources"]["organizations"], {"list": "GET /organizations"})
        self.assertIn("contents", summary["resources"]["endpoint_groups"]["subresources"])
        self.assertIn("move_endpoint", summary["actions"])


class TestImmutability(unittest.TestCase):

    def test_registry_cannot_be_mutated(self):
        with self.assertRaises(TypeError):
            ENDPOINTS.resources["extra"] = None
        with self.assertRaises(dataclasses.FrozenInstanceError):
            ENDPOINTS.base_url = "http://elsewhere"
        with self.assertRaises(TypeError):
            ENDPOINTS.resource("endpoints").subresources["x"] = None


class TestCheckRequired(unittest.TestCase):

    def test_missing_required_field(self):
        schema = (APIParameter("name"), APIParameter("note", required=False))
        with self.assertRaises(MissingParameter) as ctx:
            check_required(schema, {"note": "x"})
        self.assertEqual(ctx.exception.key, "name")

    def test_present_fields_pass(self):
        check_required((APIParameter("name"),), {"name": "Servers"})
        check_required(None, None)


if __name__ == '__main__':
    unittest.main()
