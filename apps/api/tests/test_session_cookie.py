"""Session cookie encoding tests."""

from __future__ import annotations

import json
import unittest

from orgchat.core.session import decode_cookie, encode_principal
from orgchat.schemas.auth import AuthPrincipal


class SessionCookieTests(unittest.TestCase):
    def test_principal_round_trips_through_json_cookie(self) -> None:
        principal = AuthPrincipal(
            user_id="user-1",
            email="ada@example.com",
            role="admin",
            is_admin=True,
            name="Ada",
        )

        value = encode_principal(principal)

        self.assertEqual(
            json.loads(value),
            {"userId": "user-1", "email": "ada@example.com", "name": "Ada", "role": "admin", "isAdmin": True},
        )
        self.assertEqual(decode_cookie(value), principal)

    def test_missing_cookie_decodes_to_none(self) -> None:
        self.assertIsNone(decode_cookie(None))
        self.assertIsNone(decode_cookie(""))

    def test_legacy_raw_user_id_decodes_to_minimal_coworker(self) -> None:
        for legacy_value in ("abc123UID", "12345"):
            with self.subTest(legacy_value=legacy_value):
                principal = decode_cookie(legacy_value)
                assert principal is not None
                self.assertEqual(principal.user_id, legacy_value)
                self.assertEqual(principal.role, "coworker")
                self.assertFalse(principal.is_admin)
                self.assertEqual(principal.email, "user@example.com")
                self.assertIsNone(principal.name)

    def test_missing_claims_fall_back_to_coworker_defaults(self) -> None:
        principal = decode_cookie(json.dumps({"userId": "user-2", "role": "owner", "isAdmin": "yes"}))

        assert principal is not None
        self.assertEqual(principal.user_id, "user-2")
        self.assertEqual(principal.role, "coworker")
        self.assertFalse(principal.is_admin)
        self.assertEqual(principal.email, "user@example.com")

    def test_unsigned_cookie_claims_are_taken_at_face_value(self) -> None:
        forged = json.dumps({"userId": "mallory", "email": "m@example.com", "role": "admin", "isAdmin": True})

        principal = decode_cookie(forged)

        assert principal is not None
        self.assertTrue(principal.is_admin)
