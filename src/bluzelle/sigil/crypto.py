"""
Bluzelle Transaction Signing.

Provides:
- Canonical sign payload bytes (RFC 8785 JCS plus the ledger's HTML escaping)
- SHA-256 / secp256k1 signing with fixed-width R||S output
- Signature verification against a compressed public key
"""

from __future__ import annotations

import logging
from typing import Any

import rfc8785
from eth_keys import keys

from ..errors import SigningError
from ..spec.models import SignPayload
from ..utils import base64_decode, base64_encode, sha256_digest

logger = logging.getLogger(__name__)

# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# Characters the ledger's JSON encoder escapes on top of RFC 8785.
_JSON_ESCAPES = (
    ("&", "\\u0026"),
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


def canonicalize_sign_payload(payload: SignPayload | dict[str, Any]) -> bytes:
    """Serialize a sign payload exactly as the ledger re-derives it."""
    if isinstance(payload, SignPayload):
        payload = payload.to_dict()
    try:
        text = rfc8785.dumps(payload).decode("utf-8")
    except rfc8785.CanonicalizationError as exc:
        raise SigningError(f"Sign payload cannot be canonicalized: {exc}") from exc
    for raw, escaped in _JSON_ESCAPES:
        text = text.replace(raw, escaped)
    return text.encode("utf-8")


def serialize_signature(r: int, s: int) -> bytes:
    """R || S, each left-zero-padded to 32 bytes big-endian."""
    if s > SECP256K1_N // 2:
        s = SECP256K1_N - s
    return r.to_bytes(32, "big") + s.to_bytes(32, "big")


def sign_bytes(message: bytes, signing_key: keys.PrivateKey) -> str:
    """Sign SHA-256(message); returns base64 of the 64-byte signature."""
    digest = sha256_digest(message)
    try:
        signature = signing_key.sign_msg_hash(digest)
    except Exception as exc:
        raise SigningError(f"Signing failed: {exc}") from exc
    return base64_encode(serialize_signature(signature.r, signature.s))


def sign_payload(payload: SignPayload, signing_key: keys.PrivateKey) -> str:
    canonical = canonicalize_sign_payload(payload)
    logger.debug("txn sign %s", canonical.decode("utf-8"))
    return sign_bytes(canonical, signing_key)


def verify_signature(message: bytes, signature_b64: str, public_key: bytes) -> None:
    """Verify a base64 R||S signature over SHA-256(message).

    Args:
        message: Canonical bytes that were signed.
        signature_b64: Base64 of the 64-byte R||S signature.
        public_key: 33-byte compressed or 64-byte raw public key.

    Raises:
        SigningError: If verification fails.
    """
    try:
        raw = base64_decode(signature_b64)
    except ValueError as exc:
        raise SigningError("Signature is not valid base64.") from exc
    if len(raw) != 64:
        raise SigningError(f"Signature must be 64 bytes, got {len(raw)}.")

    r = int.from_bytes(raw[:32], "big")
    s = int.from_bytes(raw[32:], "big")
    try:
        if len(public_key) == 33:
            pub = keys.PublicKey.from_compressed_bytes(public_key)
        else:
            pub = keys.PublicKey(public_key)
        ok = pub.verify_msg_hash(sha256_digest(message), keys.Signature(vrs=(0, r, s)))
    except Exception as exc:
        raise SigningError("Invalid signature.") from exc

    if not ok:
        raise SigningError("Signature does not match public key.")
