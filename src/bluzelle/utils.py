from __future__ import annotations

import base64
import hashlib
import secrets
import string
from urllib.parse import quote

MEMO_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def base64_encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def base64_decode(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def random_memo(length: int = 32) -> str:
    return "".join(secrets.choice(MEMO_ALPHABET) for _ in range(length))


def path_segment(value: str | int) -> str:
    return quote(str(value), safe="")


def to_int(value: object, field_name: str) -> int:
    """Parse an integer that the ledger may send as a number or a decimal string."""
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    raise ValueError(f"{field_name} must be an integer, got {value!r}")
