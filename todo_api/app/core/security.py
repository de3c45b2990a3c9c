"""
Security helpers for password hashing and auth tokens.

Tokens are compact JSON Web Tokens signed with HMAC‑SHA256 and
base64url encoded.  They bind a user identifier and an ``access``
purpose claim and carry no expiration: a token stays valid for as long
as it is listed in the owning user's ``tokens`` and is revoked by
removing it from there.

Passwords are hashed with PBKDF2‑HMAC‑SHA256.  The stored string is
self‑describing (algorithm, iteration count, salt and digest) so that
the cost factor can be raised without invalidating existing hashes.
"""

import base64
import binascii
import hashlib
import hmac
import json
import os
import secrets
import time
from typing import Any, Dict

from .exceptions import InvalidToken

HASH_ALGORITHM = "pbkdf2_sha256"
SALT_BYTES = 16
TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}


def _encode_segment(claims: Dict[str, Any]) -> str:
    """Serialise ``claims`` compactly and base64url encode them, unpadded."""
    raw = json.dumps(claims, separators=(',', ':')).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_segment(segment: str) -> bytes:
    """Reverse the base64url step of ``_encode_segment``."""
    return base64.urlsafe_b64decode(segment + '=' * (-len(segment) % 4))


def _signature(header_b64: str, payload_b64: str, secret: str) -> bytes:
    """HMAC‑SHA256 over ``header.payload``."""
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()


def create_access_token(data: Dict[str, Any], secret: str) -> str:
    """Create a signed token carrying the given claims.

    An ``iat`` claim (issue time, UNIX seconds) and a random ``jti``
    are added unless the caller supplies them, so two tokens issued for
    the same user in the same second still differ.  The token has the form
    ``header.payload.signature`` where each part is base64url encoded.

    Parameters
    ----------
    data : dict
        Claims to embed, e.g. ``{"_id": "...", "access": "auth"}``.
    secret : str
        Shared signing secret.

    Returns
    -------
    str
        A signed token.
    """
    to_encode = data.copy()
    to_encode.setdefault("iat", int(time.time()))
    to_encode.setdefault("jti", secrets.token_hex(8))
    header_b64 = _encode_segment(TOKEN_HEADER)
    payload_b64 = _encode_segment(to_encode)
    signature = _signature(header_b64, payload_b64, secret)
    signature_b64 = base64.urlsafe_b64encode(signature).rstrip(b"=").decode("ascii")
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str, secret: str) -> Dict[str, Any]:
    """Verify a token and return its claims.

    Raises
    ------
    InvalidToken
        If the token does not have three segments, the signature does
        not match, or the payload is not a JSON object.
    """
    parts = token.split('.')
    if len(parts) != 3:
        raise InvalidToken("Malformed token")
    header_b64, payload_b64, signature_b64 = parts
    expected_sig = _signature(header_b64, payload_b64, secret)
    try:
        actual_sig = _decode_segment(signature_b64)
    except (binascii.Error, ValueError) as exc:
        raise InvalidToken("Malformed signature") from exc
    # Constant‑time comparison to prevent timing attacks
    if not hmac.compare_digest(expected_sig, actual_sig):
        raise InvalidToken("Signature mismatch")
    try:
        data = json.loads(_decode_segment(payload_b64).decode("utf-8"))
    except (binascii.Error, ValueError) as exc:
        raise InvalidToken("Malformed payload") from exc
    if not isinstance(data, dict):
        raise InvalidToken("Malformed payload")
    return data


def hash_password(password: str, iterations: int = 100_000) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each call, so hashing the
    same password twice yields different strings.  The result has the
    form ``pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>``.
    """
    salt = os.urandom(SALT_BYTES)
    dk = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, iterations)
    return f"{HASH_ALGORITHM}${iterations}${salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored hash string.

    Returns ``False`` on mismatch and on any stored value that cannot
    be parsed; it never raises.
    """
    try:
        algorithm, iterations, salt_hex, hash_hex = hashed_password.split('$')
        if algorithm != HASH_ALGORITHM:
            return False
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
        dk = hashlib.pbkdf2_hmac('sha256', plain_password.encode('utf-8'), salt, int(iterations))
    except (AttributeError, ValueError):
        return False
    return hmac.compare_digest(dk, stored_hash)
