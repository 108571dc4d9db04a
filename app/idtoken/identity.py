"""Serializable identity produced after verifying a provider ID token."""

from __future__ import annotations

from dataclasses import dataclass

from .tokens import Provider


@dataclass(frozen=True)
class VerifiedIdentity:
    """
    Provider-agnostic user identity.

    Only built once signature, issuer, audience, tenant and expiry checks
    have all passed. The caller owns it from there on.
    """

    email: str
    email_verified: bool
    first_name: str
    last_name: str
    avatar: str
    """Profile picture URL; empty for Microsoft."""

    subject_id: str
    """Provider-scoped user id (Google ``sub``, Microsoft ``oid`` or ``sub``)."""

    provider: Provider

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase JSON shape sent to clients."""
        return {
            "email": self.email,
            "emailVerified": self.email_verified,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "avatar": self.avatar,
            "subjectId": self.subject_id,
            "provider": self.provider.value,
        }
