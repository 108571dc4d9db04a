"""
Failure taxonomy for ID token verification.

Every stage of the pipeline raises one of the ``VerificationFailure``
subclasses below. The ``detail`` string is meant for server-side logs only;
HTTP responses carry a generic message. Never put the token itself in a
failure.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class FailureReason(str, Enum):
    MALFORMED_TOKEN = "MalformedToken"
    SIGNATURE_INVALID = "SignatureInvalid"
    ISSUER_MISMATCH = "IssuerMismatch"
    KEY_FETCH_ERROR = "KeyFetchError"
    AUDIENCE_MISMATCH = "AudienceMismatch"
    TENANT_MISMATCH = "TenantMismatch"
    TOKEN_EXPIRED = "TokenExpired"
    CONFIGURATION_MISSING = "ConfigurationMissing"
    UNEXPECTED_FAULT = "UnexpectedFault"


class VerificationFailure(Exception):
    """Base class for every verification failure. Do not log the token."""

    reason: ClassVar[FailureReason] = FailureReason.UNEXPECTED_FAULT

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def is_rejection(self) -> bool:
        """True when the token itself was judged untrustworthy."""
        return self.reason in _REJECTIONS


class MalformedToken(VerificationFailure):
    reason = FailureReason.MALFORMED_TOKEN


class SignatureInvalid(VerificationFailure):
    reason = FailureReason.SIGNATURE_INVALID


class IssuerMismatch(VerificationFailure):
    reason = FailureReason.ISSUER_MISMATCH


class KeyFetchError(VerificationFailure):
    """Provider key material unreachable. Retryable by the caller."""

    reason = FailureReason.KEY_FETCH_ERROR


class AudienceMismatch(VerificationFailure):
    reason = FailureReason.AUDIENCE_MISMATCH


class TenantMismatch(VerificationFailure):
    reason = FailureReason.TENANT_MISMATCH


class TokenExpired(VerificationFailure):
    reason = FailureReason.TOKEN_EXPIRED


class ConfigurationMissing(VerificationFailure):
    reason = FailureReason.CONFIGURATION_MISSING


class UnexpectedFault(VerificationFailure):
    reason = FailureReason.UNEXPECTED_FAULT


_REJECTIONS = frozenset({
    FailureReason.MALFORMED_TOKEN,
    FailureReason.SIGNATURE_INVALID,
    FailureReason.ISSUER_MISMATCH,
    FailureReason.AUDIENCE_MISMATCH,
    FailureReason.TENANT_MISMATCH,
    FailureReason.TOKEN_EXPIRED,
})
