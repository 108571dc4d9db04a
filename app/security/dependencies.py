from __future__ import annotations

from fastapi import Request

from app.idtoken import TokenVerifier


def get_token_verifier(request: Request) -> TokenVerifier:
    verifier = getattr(request.app.state, "verifier", None)
    if verifier is None:
        raise RuntimeError("Token verifier not loaded. Did app startup run?")
    return verifier
