"""Unit tests for the demo identity provider and header resolution."""

import unittest

from proposal_box.services.identity import (
    COUNCIL_DISPLAY_NAME,
    DemoIdentityProvider,
    identity_from_headers,
)


class DemoIdentityProviderTests(unittest.TestCase):
    def test_member_login(self) -> None:
        provider = DemoIdentityProvider()
        result = provider.login("taro@example.com", "secret")

        self.assertIsNone(result.error)
        self.assertEqual(result.identity.id, "taro@example.com")
        self.assertEqual(result.identity.role, "member")
        self.assertIs(provider.current_identity(), result.identity)

    def test_admin_markers_grant_administrator(self) -> None:
        for email in ("admin@school.example", "student-council"):
            identity = DemoIdentityProvider().login(email).identity
            self.assertEqual(identity.role, "administrator")
            self.assertTrue(identity.is_administrator)
            self.assertEqual(identity.display_name, COUNCIL_DISPLAY_NAME)

    def test_empty_email_fails_with_message(self) -> None:
        provider = DemoIdentityProvider()
        result = provider.login("   ")

        self.assertIsNone(result.identity)
        self.assertTrue(result.error)
        self.assertIsNone(provider.current_identity())

    def test_register_and_logout(self) -> None:
        provider = DemoIdentityProvider()
        result = provider.register("Hanako", "hanako@example.com", "2-B")

        self.assertEqual(result.identity.display_name, "Hanako")
        self.assertEqual(result.identity.group_label, "2-B")
        self.assertEqual(result.identity.role, "member")
        provider.logout()
        self.assertIsNone(provider.current_identity())


class HeaderIdentityTests(unittest.TestCase):
    def test_headers_build_identity(self) -> None:
        identity = identity_from_headers("a@example.com", "A", "Administrator", "3-A")
        self.assertEqual(identity.id, "a@example.com")
        self.assertTrue(identity.is_administrator)
        self.assertEqual(identity.group_label, "3-A")

    def test_missing_id_or_bad_role_means_anonymous(self) -> None:
        self.assertIsNone(identity_from_headers(None, "A"))
        self.assertIsNone(identity_from_headers("  ", "A"))
        self.assertIsNone(identity_from_headers("a@example.com", "A", "superuser"))

    def test_display_name_defaults_to_id(self) -> None:
        self.assertEqual(identity_from_headers("a@example.com", None).display_name, "a@example.com")


if __name__ == "__main__":
    unittest.main()
