__all__ = [
    # Client
    "Client",
    "ClientOptions",
    "load_options",
    # Models
    "AccountState",
    "GasInfo",
    "KeyLease",
    "KeyValue",
    "LeaseInfo",
    "TransactionRecord",
    # Errors
    "BluzelleError",
    "ConfigError",
    "ConflictError",
    "DecodeError",
    "InvalidArgumentError",
    "PipelineError",
    "RemoteError",
    "RetryExhaustedError",
    "SigningError",
    "TransportError",
    # Signing
    "canonicalize_sign_payload",
    "generate_private_key",
    "load_private_key",
    "verify_signature",
]

from .client import Client
from .config import ClientOptions, load_options
from .errors import (
    BluzelleError,
    ConfigError,
    ConflictError,
    DecodeError,
    InvalidArgumentError,
    PipelineError,
    RemoteError,
    RetryExhaustedError,
    SigningError,
    TransportError,
)
from .sigil.crypto import canonicalize_sign_payload, verify_signature
from .sigil.keys import generate_private_key, load_private_key
from .spec.models import AccountState, GasInfo, KeyLease, KeyValue, LeaseInfo, TransactionRecord
