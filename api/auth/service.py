"""
Auth business logic.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException, status

from . import security

logger = logging.getLogger(__name__)


async def verify_access_token(token: str, verifier: security.TokenVerifier) -> dict[str, Any]:
    """
    Verify a bearer token and return its decoded claims.

    Any verification failure is reported as 403.
    """
    try:
        claims = await verifier.verify(token)
    except security.AuthSecurityError as exc:
        logger.info("token_verification_failed reason=%s", exc)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden access",
        ) from exc
    return claims
