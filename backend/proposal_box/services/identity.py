"""Identity provider collaborators.

Real authentication (OAuth token exchange) lives outside this service; these
providers only yield an ``Identity`` or an error message.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from proposal_box.schemas.identity import Identity, LoginResult

logger = logging.getLogger(__name__)

ADMIN_EMAIL_MARKER = "admin"
COUNCIL_LOGIN = "student-council"
COUNCIL_DISPLAY_NAME = "Student Council"
DEMO_MEMBER_NAME = "Demo Student"
DEMO_GROUP_LABEL = "3-A"


class IdentityProvider(Protocol):
    """Supplies the identity of the current session."""

    def current_identity(self) -> Identity | None:
        """Return the signed-in identity, if any."""

    def login(self, email: str, password: str = "") -> LoginResult:
        """Attempt to sign in."""


class DemoIdentityProvider:
    """Email-only demo sign-in; never stores credentials."""

    def __init__(self) -> None:
        self._current: Identity | None = None

    def current_identity(self) -> Identity | None:
        return self._current

    def login(self, email: str, password: str = "") -> LoginResult:
        _ = password
        clean_email = email.strip()
        if not clean_email:
            return LoginResult(error="Enter an email address to sign in.")
        is_admin = ADMIN_EMAIL_MARKER in clean_email.lower() or clean_email == COUNCIL_LOGIN
        self._current = Identity(
            id=clean_email,
            display_name=COUNCIL_DISPLAY_NAME if is_admin else DEMO_MEMBER_NAME,
            role="administrator" if is_admin else "member",
            group_label=DEMO_GROUP_LABEL,
        )
        logger.info("identity.login id=%s role=%s", self._current.id, self._current.role)
        return LoginResult(identity=self._current)

    def register(self, name: str, email: str, group_label: str | None = None) -> LoginResult:
        """Sign up as a member with a chosen display name."""

        clean_email = email.strip()
        clean_name = name.strip()
        if not clean_email or not clean_name:
            return LoginResult(error="Enter your name and email address to register.")
        self._current = Identity(
            id=clean_email,
            display_name=clean_name,
            role="member",
            group_label=(group_label or "").strip() or None,
        )
        logger.info("identity.registered id=%s", self._current.id)
        return LoginResult(identity=self._current)

    def logout(self) -> None:
        self._current = None


def identity_from_headers(
    identity_id: str | None,
    display_name: str | None,
    role: str | None = None,
    group_label: str | None = None,
) -> Identity | None:
    """Build the caller identity forwarded by the authentication layer.

    Missing or malformed headers mean "not signed in".
    """

    if not identity_id or not identity_id.strip():
        return None
    try:
        return Identity(
            id=identity_id.strip(),
            display_name=(display_name or "").strip() or identity_id.strip(),
            role=(role or "member").strip().lower(),
            group_label=(group_label or "").strip() or None,
        )
    except ValidationError:
        logger.warning("identity.invalid_headers id=%s role=%s", identity_id, role)
        return None
