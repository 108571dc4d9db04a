from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.idtoken import (
    ConfigurationMissing,
    GoogleToken,
    KeyFetchError,
    MicrosoftToken,
    RawToken,
    TokenVerifier,
    UnexpectedFault,
    VerificationFailure,
)
from app.schemas.auth import (
    ConfigErrorOut,
    HealthOut,
    LogoutOut,
    TokenRequest,
    VerifiedUserOut,
    VerifyErrorOut,
    VerifyOut,
)
from app.security.dependencies import get_token_verifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Client-facing messages stay generic: which check failed is logged, never returned.
REJECTED_MESSAGE = "Invalid or expired token"
FAILED_MESSAGE = "Token verification failed"
UNAVAILABLE_MESSAGE = "Token verification temporarily unavailable"
NOT_CONFIGURED_MESSAGES = {
    "google": "Google Client ID not configured",
    "microsoft": "Microsoft OAuth not configured properly",
}

_VERIFY_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ConfigErrorOut},
    status.HTTP_401_UNAUTHORIZED: {"model": VerifyErrorOut},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": VerifyErrorOut},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": VerifyErrorOut},
}


async def verify_body_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Unreadable verify-token bodies get the generic 401, never a 422 that
    echoes the submitted input back.
    """
    if not request.url.path.startswith(f"{router.prefix}/verify-"):
        return await request_validation_exception_handler(request, exc)
    logger.warning("Token rejected path=%s reason=MalformedToken detail=unreadable request body", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"valid": False, "error": REJECTED_MESSAGE},
    )


def _failure_response(token: RawToken, exc: VerificationFailure) -> JSONResponse:
    provider = token.provider.value

    if isinstance(exc, ConfigurationMissing):
        logger.error("Verification requested for unconfigured provider=%s", provider)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": NOT_CONFIGURED_MESSAGES[provider]},
        )

    if isinstance(exc, KeyFetchError):
        logger.warning("Signing keys unavailable provider=%s detail=%s", provider, exc.detail)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"valid": False, "error": UNAVAILABLE_MESSAGE},
        )

    if exc.is_rejection:
        logger.warning("Token rejected provider=%s reason=%s detail=%s", provider, exc.reason.value, exc.detail)
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"valid": False, "error": REJECTED_MESSAGE},
        )

    logger.error(
        "Token verification failed provider=%s reason=%s detail=%s",
        provider,
        exc.reason.value,
        exc.detail,
        exc_info=exc if isinstance(exc, UnexpectedFault) else None,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"valid": False, "error": FAILED_MESSAGE},
    )


def _verify(verifier: TokenVerifier, token: RawToken) -> VerifyOut | JSONResponse:
    try:
        identity = verifier.verify(token)
    except VerificationFailure as exc:
        return _failure_response(token, exc)

    logger.info("Token verified provider=%s subject=%s", identity.provider.value, identity.subject_id)
    return VerifyOut(user=VerifiedUserOut.model_validate(identity.to_dict()))


@router.post("/verify-google-token", response_model=VerifyOut, responses=_VERIFY_RESPONSES)
def verify_google_token(body: TokenRequest, verifier: TokenVerifier = Depends(get_token_verifier)):
    return _verify(verifier, GoogleToken(body.id_token))


@router.post("/verify-microsoft-token", response_model=VerifyOut, responses=_VERIFY_RESPONSES)
def verify_microsoft_token(body: TokenRequest, verifier: TokenVerifier = Depends(get_token_verifier)):
    return _verify(verifier, MicrosoftToken(body.id_token))


@router.post("/logout", response_model=LogoutOut)
def logout() -> LogoutOut:
    # Stateless: there is no server-side session to drop.
    logger.info("User logged out")
    return LogoutOut(message="Logged out successfully")


@router.get("/health", response_model=HealthOut)
def health() -> HealthOut:
    return HealthOut(status="ok", timestamp=datetime.now(timezone.utc))
