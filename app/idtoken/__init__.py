"""
Standalone utility to verify Google and Microsoft ID tokens.

This package has no dependency on other app packages (app.routers, app.security, etc.).
Use TokenVerifier.verify() with a GoogleToken or MicrosoftToken to get a VerifiedIdentity.
"""

from .config import GoogleConfig, MicrosoftConfig, ProviderConfig
from .errors import (
    AudienceMismatch,
    ConfigurationMissing,
    FailureReason,
    IssuerMismatch,
    KeyFetchError,
    MalformedToken,
    SignatureInvalid,
    TenantMismatch,
    TokenExpired,
    UnexpectedFault,
    VerificationFailure,
)
from .identity import VerifiedIdentity
from .tokens import GoogleToken, MicrosoftToken, Provider, RawToken
from .verifier import GoogleVerifier, MicrosoftVerifier, TokenVerifier, Verifier, verify_token

__all__ = [
    "GoogleConfig",
    "MicrosoftConfig",
    "ProviderConfig",
    "FailureReason",
    "VerificationFailure",
    "MalformedToken",
    "SignatureInvalid",
    "IssuerMismatch",
    "KeyFetchError",
    "AudienceMismatch",
    "TenantMismatch",
    "TokenExpired",
    "ConfigurationMissing",
    "UnexpectedFault",
    "VerifiedIdentity",
    "GoogleToken",
    "MicrosoftToken",
    "Provider",
    "RawToken",
    "Verifier",
    "GoogleVerifier",
    "MicrosoftVerifier",
    "TokenVerifier",
    "verify_token",
]
