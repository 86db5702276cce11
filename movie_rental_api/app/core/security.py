"""
Security helpers for password hashing and token authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC-SHA256 signatures and base64url encoding.  ``IdentityVerifier``
signs and verifies tokens with a key handed to its constructor; the
FastAPI dependencies ``require_authenticated`` and ``require_elevated``
build one from the application settings and gate protected routes on
the ``x-auth-token`` header.

Helper functions are also provided for hashing passwords using
PBKDF2-HMAC with SHA-256, along with salt generation and verification.
"""

import base64
import binascii
import hashlib
import hmac
import json
import os
import time
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from .config import settings
from .exceptions import InvalidCredential, MissingCredential


AUTH_HEADER = "x-auth-token"
SIGNING_ALGORITHM = "HS256"


def _b64_url_encode(data: bytes) -> str:
    """Base64-url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64-url encoded string, adding padding if necessary."""
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC-SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


@dataclass(frozen=True)
class IdentityClaim:
    """Verified identity of the caller of a request."""

    subject_id: str
    is_elevated: bool = False


class IdentityVerifier:
    """Issue and verify signed ``header.payload.signature`` tokens.

    Only claims covered by the signature are returned.  The header's
    ``alg`` must match the algorithm the verifier was built with, so a
    token announcing ``none`` or any other algorithm is rejected before
    its payload is looked at.
    """

    def __init__(self, secret_key: str, algorithm: str = SIGNING_ALGORITHM, expires_in: int = 24 * 60 * 60):
        if algorithm != SIGNING_ALGORITHM:
            raise ValueError(f"Unsupported signing algorithm: {algorithm}")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_in = expires_in

    def issue(self, subject_id: str, is_elevated: bool = False, expires_in: Optional[int] = None) -> str:
        """Create a signed token for ``subject_id``.

        The payload carries ``sub``, ``isAdmin``, ``iat`` and ``exp``
        (UNIX timestamps).  ``expires_in`` is the lifetime in seconds and
        defaults to the verifier's configured lifetime.
        """
        now = int(time.time())
        payload = {
            "sub": subject_id,
            "isAdmin": bool(is_elevated),
            "iat": now,
            "exp": now + (expires_in if expires_in is not None else self.expires_in),
        }
        header = {"alg": self.algorithm, "typ": "JWT"}
        header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
        payload_b64 = _b64_url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        signature_b64 = _b64_url_encode(_sign(signing_input, self._secret_key))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def verify(self, token: Optional[str]) -> IdentityClaim:
        """Verify ``token`` and return the identity it carries.

        Raises
        ------
        MissingCredential
            If no token was supplied.
        InvalidCredential
            If the token is malformed, signed with another key or
            algorithm, expired, or lacks a subject.
        """
        if not token:
            raise MissingCredential("No token provided")
        parts = token.split(".")
        if len(parts) != 3:
            raise InvalidCredential("Malformed token")
        header_b64, payload_b64, signature_b64 = parts
        try:
            header = json.loads(_b64_url_decode(header_b64).decode("utf-8"))
            actual_sig = _b64_url_decode(signature_b64)
        except (binascii.Error, ValueError) as exc:
            raise InvalidCredential("Malformed token") from exc
        if not isinstance(header, dict) or header.get("alg") != self.algorithm:
            raise InvalidCredential("Unexpected signing algorithm")

        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        expected_sig = _sign(signing_input, self._secret_key)
        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(expected_sig, actual_sig):
            raise InvalidCredential("Signature mismatch")

        try:
            payload = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
        except (binascii.Error, ValueError) as exc:
            raise InvalidCredential("Malformed payload") from exc
        if not isinstance(payload, dict):
            raise InvalidCredential("Malformed payload")

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool) or exp < time.time():
            raise InvalidCredential("Token expired")
        subject_id = payload.get("sub")
        if not isinstance(subject_id, str) or not subject_id:
            raise InvalidCredential("Token has no subject")
        return IdentityClaim(subject_id=subject_id, is_elevated=payload.get("isAdmin") is True)


token_header = APIKeyHeader(name=AUTH_HEADER, auto_error=False)


def get_identity_verifier() -> IdentityVerifier:
    """Dependency returning a verifier bound to the configured signing key."""
    return IdentityVerifier(
        settings.jwt_private_key,
        algorithm=settings.algorithm,
        expires_in=settings.access_token_expire_minutes * 60,
    )


def require_authenticated(
    token: Optional[str] = Depends(token_header),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> IdentityClaim:
    """Dependency that authenticates the caller of a request.

    A missing ``x-auth-token`` header yields HTTP 401, a token that
    fails verification yields HTTP 400.  On success the verified
    identity is handed to the route handler.
    """
    try:
        return verifier.verify(token)
    except MissingCredential:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
        )
    except InvalidCredential:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token.")


def require_elevated(current_user: IdentityClaim = Depends(require_authenticated)) -> IdentityClaim:
    """Dependency that additionally requires the administrative claim."""
    if not current_user.is_elevated:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
    return current_user


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2-HMAC with SHA-256.

    A 16-byte random salt is generated for each password.  The
    resulting string contains the salt and hash separated by a
    ``$`` (salt in hex, then hash in hex).
    """
    salt = os.urandom(16)
    iterations = 100_000
    dk = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string."""
    try:
        salt_hex, hash_hex = hashed_password.split("$", 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except ValueError:
        return False
    iterations = 100_000
    dk = hashlib.pbkdf2_hmac("sha256", plain_password.encode("utf-8"), salt, iterations)
    return hmac.compare_digest(dk, stored_hash)
