"""Verification of session tokens issued by the hosted auth provider.

Sign-in itself happens at the provider; this service only checks the RS256
tokens it issues. The public key comes from ``AUTH_PUBLIC_KEY`` (PEM or JWK
JSON) or is fetched from the provider's JWKS endpoint and selected by ``kid``.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import httpx
import jwt
from jwcrypto import jwk

from app.core.config import AuthSettings, settings
from app.core.logging import get_logger

logger = get_logger(__name__)

ALGORITHMS = ["RS256"]

# Minimum seconds between two JWKS fetches
JWKS_REFRESH_INTERVAL = 60.0


class InvalidTokenError(Exception):
    """Raised when a token is missing, malformed, expired or untrusted."""


@dataclass
class AuthenticatedUser:
    id: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


def _load_static_key(value: str) -> jwk.JWK:
    value = value.strip()
    if value.startswith("{"):
        return jwk.JWK.from_json(value)
    return jwk.JWK.from_pem(value.encode("utf-8"))


class ProviderTokenVerifier:
    def __init__(
        self,
        auth_settings: AuthSettings,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        refresh_interval: float = JWKS_REFRESH_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.settings = auth_settings
        self._transport = transport
        self._static_pem: Optional[bytes] = None
        self._jwks_pems: Dict[str, bytes] = {}
        self._refresh_interval = refresh_interval
        self._clock = clock
        self._last_fetch: Optional[float] = None
        self._fetch_lock = asyncio.Lock()

        if auth_settings.public_key:
            key = _load_static_key(auth_settings.public_key)
            self._static_pem = key.export_to_pem(private_key=False, password=None)
        elif not auth_settings.jwks_url:
            logger.warning(
                "Neither AUTH_PUBLIC_KEY nor AUTH_JWKS_URL is set; all tokens will be rejected"
            )

    async def _fetch_jwks(self) -> None:
        """Refresh the cached JWKS from the provider."""
        try:
            async with httpx.AsyncClient(
                timeout=10.0, transport=self._transport
            ) as client:
                response = await client.get(self.settings.jwks_url)
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise InvalidTokenError(f"Unable to fetch JWKS: {e}") from e

        pems: Dict[str, bytes] = {}
        try:
            keyset = jwk.JWKSet.from_json(response.text)
            for key in keyset["keys"]:
                kid = key.get("kid") or ""
                pems[kid] = key.export_to_pem(private_key=False, password=None)
        except (jwk.InvalidJWKValue, ValueError, KeyError, TypeError) as e:
            raise InvalidTokenError(f"Unusable JWKS response: {e}") from e
        self._jwks_pems = pems

    def _refresh_due(self) -> bool:
        if self._last_fetch is None:
            return True
        return self._clock() - self._last_fetch >= self._refresh_interval

    async def _resolve_key(self, kid: Optional[str]) -> bytes:
        if self._static_pem is not None:
            return self._static_pem
        if not self.settings.jwks_url:
            raise InvalidTokenError("No verification key configured")

        kid = kid or ""
        if kid not in self._jwks_pems:
            # Unknown kid may mean the provider rotated keys
            async with self._fetch_lock:
                if kid not in self._jwks_pems and self._refresh_due():
                    self._last_fetch = self._clock()
                    await self._fetch_jwks()
        try:
            return self._jwks_pems[kid]
        except KeyError:
            raise InvalidTokenError(f"Unknown signing key: {kid!r}") from None

    async def verify(self, token: Optional[str]) -> AuthenticatedUser:
        if not token:
            raise InvalidTokenError("Missing token")

        try:
            header = jwt.get_unverified_header(token)
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Malformed token: {e}") from e

        key = await self._resolve_key(header.get("kid"))

        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=ALGORITHMS,
                audience=self.settings.audience,
                issuer=self.settings.issuer,
                leeway=self.settings.leeway_seconds,
                options={
                    "require": ["exp", "sub"],
                    "verify_aud": self.settings.audience is not None,
                },
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e

        parties = self.settings.authorized_parties
        if parties and payload.get("azp") not in parties:
            raise InvalidTokenError(f"Unauthorized party: {payload.get('azp')!r}")

        return AuthenticatedUser(
            id=str(payload["sub"]),
            email=payload.get("email"),
            claims=payload,
        )


_verifier: Optional[ProviderTokenVerifier] = None


def get_token_verifier() -> ProviderTokenVerifier:
    global _verifier
    if _verifier is None:
        _verifier = ProviderTokenVerifier(settings.auth)
    return _verifier
