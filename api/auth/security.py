"""
Auth security helpers: bearer token verification.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Protocol

import jwt

from core import identity


class AuthSecurityError(RuntimeError):
    pass


class TokenVerifier(Protocol):
    async def verify(self, token: str) -> dict[str, Any]: ...


def firebase_service_account_path() -> Path:
    return Path(os.environ.get("FIREBASE_SERVICE_ACCOUNT", "serviceKey.json").strip() or "serviceKey.json")


def firebase_project_id() -> str:
    project_id = os.environ.get("FIREBASE_PROJECT_ID", "").strip()
    if project_id:
        return project_id

    path = firebase_service_account_path()
    if not path.is_file():
        raise RuntimeError("FIREBASE_PROJECT_ID is not set and no service account file was found.")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise RuntimeError(f"Failed to read service account file {path}.") from exc

    project_id = str(data.get("project_id") or "").strip()
    if not project_id:
        raise RuntimeError(f"Service account file {path} has no project_id.")
    return project_id


def shared_secret() -> str:
    return os.environ.get("AUTH_JWT_SECRET", "").strip()


def shared_secret_algorithm() -> str:
    return os.environ.get("AUTH_JWT_ALG", "HS256").strip() or "HS256"


def _require_subject(payload: dict[str, Any]) -> dict[str, Any]:
    subject = str(payload.get("sub") or "").strip()
    if not subject or len(subject) > 128:
        raise AuthSecurityError("Token has an invalid subject.")
    payload["uid"] = subject
    return payload


class FirebaseTokenVerifier:
    """
    Verifies Firebase ID tokens against the provider's published signing keys.

    Keys are fetched on every call; nothing is cached between requests.
    """

    algorithm = "RS256"

    def __init__(self, project_id: str, *, jwks_url: str = identity.GOOGLE_SECURE_TOKEN_JWKS_URL) -> None:
        self.project_id = project_id
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self.jwks_url = jwks_url

    async def verify(self, token: str) -> dict[str, Any]:
        raw = (token or "").strip()
        if not raw:
            raise AuthSecurityError("ID token is empty.")

        try:
            header = jwt.get_unverified_header(raw)
        except jwt.InvalidTokenError as exc:
            raise AuthSecurityError("ID token is malformed.") from exc

        kid = header.get("kid")
        if not kid:
            raise AuthSecurityError("ID token has no key id.")

        try:
            jwks = await identity.fetch_signing_keys(url=self.jwks_url)
        except identity.IdentityError as exc:
            raise AuthSecurityError(str(exc)) from exc

        jwk = next((k for k in jwks["keys"] if isinstance(k, dict) and k.get("kid") == kid), None)
        if jwk is None:
            raise AuthSecurityError("ID token was signed with an unknown key.")

        try:
            signing_key = jwt.PyJWK(jwk, algorithm=self.algorithm)
            payload = jwt.decode(
                raw,
                signing_key.key,
                algorithms=[self.algorithm],
                audience=self.project_id,
                issuer=self.issuer,
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthSecurityError("ID token has expired.") from exc
        except jwt.PyJWTError as exc:
            raise AuthSecurityError(f"Invalid ID token: {exc}") from exc

        return _require_subject(payload)


class SharedSecretTokenVerifier:
    """
    Local-development verifier for tokens signed with a shared secret.
    """

    def __init__(self, secret: str, *, algorithm: str = "HS256") -> None:
        if not secret:
            raise AuthSecurityError("Shared secret is empty.")
        self.secret = secret
        self.algorithm = algorithm

    async def verify(self, token: str) -> dict[str, Any]:
        raw = (token or "").strip()
        if not raw:
            raise AuthSecurityError("Access token is empty.")

        try:
            payload = jwt.decode(raw, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as exc:
            raise AuthSecurityError("Access token has expired.") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthSecurityError("Invalid access token.") from exc

        return _require_subject(payload)


def build_token_verifier() -> TokenVerifier:
    secret = shared_secret()
    if secret:
        return SharedSecretTokenVerifier(secret, algorithm=shared_secret_algorithm())
    return FirebaseTokenVerifier(firebase_project_id())
