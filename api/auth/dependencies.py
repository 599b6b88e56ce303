"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Request, status

from . import security, service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized access",
        )

    # "Bearer <token>"; a header without a token part fails verification instead.
    parts = raw.split(None, 1)
    return parts[1].strip() if len(parts) == 2 else ""


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


@lru_cache(maxsize=1)
def _token_verifier() -> security.TokenVerifier:
    return security.build_token_verifier()


def get_token_verifier() -> security.TokenVerifier:
    return _token_verifier()


async def get_current_user(
    request: Request,
    access_token: str = Depends(get_bearer_token),
    verifier: security.TokenVerifier = Depends(get_token_verifier),
) -> dict:
    claims = await service.verify_access_token(access_token, verifier)
    request.state.claims = claims
    return claims
