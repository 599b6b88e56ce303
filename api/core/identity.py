"""
Identity provider HTTP client helpers.

Used endpoint:
- GET <jwks url> -> {"keys": [{"kid": "...", "kty": "RSA", "n": "...", "e": "...", ...}]}

The default URL serves the public keys Firebase Authentication signs ID tokens with.
"""

from __future__ import annotations

from typing import Any

import httpx

GOOGLE_SECURE_TOKEN_JWKS_URL = (
    "https://www.googleapis.com/service_accounts/v1/jwk/securetoken@system.gserviceaccount.com"
)


# Identity provider failures are explicit and separable from token errors.
class IdentityError(RuntimeError):
    pass


async def fetch_signing_keys(
    *,
    url: str = GOOGLE_SECURE_TOKEN_JWKS_URL,
    timeout_s: float = 10.0,
) -> dict[str, Any]:
    """
    Fetch the provider's current JWK set.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout_s) as client:
            resp = await client.get(url)
    except httpx.HTTPError as exc:
        raise IdentityError(f"Signing key request failed: {exc}") from exc

    if resp.status_code != 200:
        body = resp.text[:300]
        raise IdentityError(f"Signing key request failed: {resp.status_code} {body}")

    try:
        data = resp.json()
    except ValueError as exc:
        raise IdentityError("Identity provider returned a non-JSON key set.") from exc

    if not isinstance(data, dict) or not isinstance(data.get("keys"), list):
        raise IdentityError("Identity provider returned no signing keys.")
    return data
