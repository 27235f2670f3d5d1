from .verifier import (
    AuthenticatedUser,
    InvalidTokenError,
    ProviderTokenVerifier,
    get_token_verifier,
)

__all__ = [
    "AuthenticatedUser",
    "InvalidTokenError",
    "ProviderTokenVerifier",
    "get_token_verifier",
]
