"""
sporesign - RSA record and field signing for key-value benchmark workloads.

A KeySigner loads an RSA key pair from two optional DER files, or generates
and stores one on first use, and then signs records produced by a workload
generator before they are written to a data store.

Quick Start:
    >>> from sporesign import KeySigner
    >>>
    >>> signer = KeySigner("keys/public.der", "keys/private.der")
    >>> signer.load_keys()
    >>>
    >>> # One signature over the whole record, stored under "sign"
    >>> record = signer.sign_record({"name": b"alice", "age": b"30"})
    >>>
    >>> # One signature appended to every field value
    >>> record = signer.sign_fields({"name": b"alice", "age": b"30"})
"""

from .canonical import encode_record
from .config import (
    SignerConfig,
    create_signer_config,
    load_config_from_json,
    save_config_to_json,
)
from .error_handling import (
    KeyGenerationError,
    KeyPersistenceError,
    KeyReadError,
    SignatureFieldCollisionError,
    SignerConfigurationError,
    SignerNotReadyError,
    SigningComputationError,
    SigningError,
)
from .keys import KeyMaterial
from .signer import KeyOrigin, KeySigner, create_key_signer, sign_message

__version__ = "0.1.0"

__all__ = [
    # Signer
    "KeySigner",
    "KeyOrigin",
    "KeyMaterial",
    "create_key_signer",
    "sign_message",
    "encode_record",
    # Configuration
    "SignerConfig",
    "create_signer_config",
    "load_config_from_json",
    "save_config_to_json",
    # Errors
    "SigningError",
    "SignerConfigurationError",
    "KeyReadError",
    "KeyGenerationError",
    "KeyPersistenceError",
    "SignerNotReadyError",
    "SigningComputationError",
    "SignatureFieldCollisionError",
    # Version info
    "__version__",
]
