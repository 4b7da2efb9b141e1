"""
Record Signing
==============

This module provides RSA signatures for key-value records written by a
benchmark workload before they reach a data store.

Features:
- Load-or-generate key lifecycle backed by two optional DER key files
- Whole-record signatures stored under a dedicated field ("sign")
- Per-field signatures appended to each field value

Signing Model:
- RSASSA-PKCS1-v1_5, SHA-1 by default, over a 1024-bit key by default
- Each signature is a pure function of (message, private key), so a signer
  can be shared between threads once its keys are loaded
- Whole-record payloads use the canonical encoding in ``sporesign.canonical``
"""

import logging
import threading
from dataclasses import replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Union

from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .canonical import encode_record, to_bytes
from .config import SignerConfig, normalize_key_path
from .error_handling import (
    KeyReadError,
    SignatureFieldCollisionError,
    SignerNotReadyError,
    SigningComputationError,
    signing_operation_context,
    with_error_handling,
)
from .keys import (
    HASH_ALGORITHMS,
    KeyMaterial,
    decode_private_key,
    decode_public_key,
    generate_key_material,
    read_key_bytes,
    write_key_bytes,
)

logger = logging.getLogger(__name__)

Record = MutableMapping[str, Any]


class KeyOrigin(str, Enum):
    """Where the active key pair of a signer came from."""

    LOADED = "loaded"
    GENERATED = "generated"


@with_error_handling(SigningComputationError)
def sign_message(
    private_key: rsa.RSAPrivateKey, message: bytes, hash_algorithm: str = "sha1"
) -> bytes:
    """
    Sign ``message`` with ``private_key`` using PKCS#1 v1.5.

    Args:
        private_key: RSA private key
        message: Bytes to sign
        hash_algorithm: One of sha1, sha256, sha384, sha512

    Returns:
        Raw signature bytes, as long as the key modulus
    """
    return private_key.sign(
        message, padding.PKCS1v15(), HASH_ALGORITHMS[hash_algorithm]()
    )


class KeySigner:
    """
    RSA signer for benchmark records.

    A signer starts without keys. ``load_keys`` reads the configured key
    files, or generates and stores a new pair when they cannot be read;
    only then can records be signed.
    """

    def __init__(
        self,
        public_key_path: Optional[Union[str, Path]] = None,
        private_key_path: Optional[Union[str, Path]] = None,
        config: Optional[SignerConfig] = None,
    ):
        """
        Initialize the signer.

        Args:
            public_key_path: Public key file (overrides ``config``)
            private_key_path: Private key file (overrides ``config``)
            config: Full signer configuration
        """
        config = config or SignerConfig()
        paths = {}
        if public_key_path is not None:
            paths["public_key_path"] = normalize_key_path(public_key_path)
        if private_key_path is not None:
            paths["private_key_path"] = normalize_key_path(private_key_path)
        self.config = replace(config, **paths) if paths else config

        self._keys: Optional[KeyMaterial] = None
        self._origin: Optional[KeyOrigin] = None
        self._lock = threading.Lock()

    @property
    def public_key_path(self) -> Optional[str]:
        return self.config.public_key_path

    @property
    def private_key_path(self) -> Optional[str]:
        return self.config.private_key_path

    @property
    def is_ready(self) -> bool:
        """True once a private key is bound and records can be signed."""
        return self._keys is not None

    @property
    def key_origin(self) -> Optional[KeyOrigin]:
        return self._origin

    @property
    def signature_length(self) -> int:
        """Number of bytes every signature adds."""
        return self._require_keys().signature_length

    # Key lifecycle

    def load_keys(self) -> KeyOrigin:
        """
        Load the key pair from disk, or generate and store a new one.

        Any failure while reading falls back to generation. Keys are bound
        only once, so later calls return the existing origin.

        Returns:
            KeyOrigin.LOADED or KeyOrigin.GENERATED

        Raises:
            KeyGenerationError: If a new key pair could not be generated
            KeyPersistenceError: If a generated key could not be written
        """
        with self._lock:
            if self._keys is not None:
                return self._origin

            with signing_operation_context(
                "load keys",
                public_key_path=self.public_key_path,
                private_key_path=self.private_key_path,
            ):
                try:
                    keys = self._read_keys()
                except KeyReadError as e:
                    logger.warning(f"Could not load signing keys ({e}), generating a new pair")
                    return self._generate_keys()

                self._bind(keys, KeyOrigin.LOADED)
                logger.info(
                    f"Loaded RSA-{keys.key_size} signing key from {self.private_key_path}"
                )
                return KeyOrigin.LOADED

    def _bind(self, keys: KeyMaterial, origin: KeyOrigin) -> None:
        self._keys = keys
        self._origin = origin

    def _read_keys(self) -> KeyMaterial:
        """Read both configured key files; nothing is bound unless all succeed."""
        if self.private_key_path is None:
            raise KeyReadError("No private key path configured")

        private_key = decode_private_key(read_key_bytes(self.private_key_path))
        keys = KeyMaterial.from_private_key(private_key)

        if self.public_key_path is not None:
            public_key = decode_public_key(read_key_bytes(self.public_key_path))
            if public_key.public_numbers() != keys.public_key.public_numbers():
                raise KeyReadError(
                    "Public key does not match private key",
                    {
                        "public_key_path": self.public_key_path,
                        "private_key_path": self.private_key_path,
                    },
                )

        if keys.key_size != self.config.key_size:
            logger.debug(
                f"Loaded key size {keys.key_size} differs from configured {self.config.key_size}"
            )
        return keys

    def _generate_keys(self) -> KeyOrigin:
        keys = generate_key_material(self.config.key_size, self.config.public_exponent)
        self._bind(keys, KeyOrigin.GENERATED)
        logger.info(
            f"Generated new RSA-{keys.key_size} signing key (fingerprint {keys.fingerprint()})"
        )
        self._save_keys(keys)
        return KeyOrigin.GENERATED

    def _save_keys(self, keys: KeyMaterial) -> None:
        if self.public_key_path is not None:
            write_key_bytes(keys.public_bytes(), self.public_key_path)
        if self.private_key_path is not None:
            write_key_bytes(keys.private_bytes(), self.private_key_path, private=True)

    def _require_keys(self) -> KeyMaterial:
        keys = self._keys
        if keys is None:
            raise SignerNotReadyError("Signer has no key; call load_keys() first")
        return keys

    def public_key_bytes(self) -> bytes:
        """DER-encoded public key of the active key pair."""
        return self._require_keys().public_bytes()

    def sign(self, message: bytes) -> bytes:
        """Sign raw bytes with the active private key."""
        keys = self._require_keys()
        return sign_message(keys.private_key, message, self.config.hash_algorithm)

    # Record transforms

    def sign_record(self, record: Record) -> Record:
        """
        Add a signature over the whole record under the signature field.

        Values are normalized to bytes; no other field changes.

        Args:
            record: Mapping of field name to bytes (or str) value, mutated in place

        Returns:
            The same record

        Raises:
            SignerNotReadyError: If no key has been loaded
            SignatureFieldCollisionError: If the record already holds the
                signature field and the collision policy is "error"
        """
        keys = self._require_keys()
        field = self.config.signature_field
        encoding = self.config.value_encoding

        exclude = ()
        if field in record:
            if self.config.on_field_collision == "error":
                raise SignatureFieldCollisionError(
                    f"Record already contains signature field '{field}'",
                    {"field": field},
                )
            logger.debug(f"Overwriting existing '{field}' field")
            exclude = (field,)

        payload = encode_record(record, exclude=exclude, encoding=encoding)
        signature = sign_message(keys.private_key, payload, self.config.hash_algorithm)

        for name, value in list(record.items()):
            if name not in exclude:
                record[name] = to_bytes(value, encoding)
        record[field] = signature
        return record

    def sign_fields(self, record: Record) -> Record:
        """
        Append a signature of each field's value to that value.

        Every value grows by exactly ``signature_length`` bytes and no
        fields are added. The record is only updated once every field has
        been signed.

        Args:
            record: Mapping of field name to bytes (or str) value, mutated in place

        Returns:
            The same record

        Raises:
            SignerNotReadyError: If no key has been loaded
        """
        keys = self._require_keys()
        encoding = self.config.value_encoding

        signed = {}
        for name, value in record.items():
            data = to_bytes(value, encoding)
            signed[name] = data + sign_message(
                keys.private_key, data, self.config.hash_algorithm
            )
        record.update(signed)
        return record

    def get_key_info(self) -> Dict[str, Any]:
        """Get information about the current signing configuration."""
        info = {
            "public_key_path": self.public_key_path,
            "private_key_path": self.private_key_path,
            "algorithm": f"rsa-pkcs1v15-{self.config.hash_algorithm}",
            "signature_field": self.config.signature_field,
            "ready": self.is_ready,
            "key_origin": self._origin.value if self._origin else None,
        }
        if self._keys is not None:
            info["key_size"] = self._keys.key_size
            info["signature_length"] = self._keys.signature_length
            info["fingerprint"] = self._keys.fingerprint()
        return info


def create_key_signer(
    public_key_path: Optional[Union[str, Path]] = None,
    private_key_path: Optional[Union[str, Path]] = None,
    config: Optional[SignerConfig] = None,
    load: bool = True,
    **overrides,
) -> KeySigner:
    """
    Factory function to create a key signer.

    Args:
        public_key_path: Public key file, or None to keep it in memory only
        private_key_path: Private key file, or None to keep it in memory only
        config: Base configuration; ``overrides`` are applied on top of it
        load: Whether to call ``load_keys`` before returning
        **overrides: Any other SignerConfig field

    Returns:
        Configured KeySigner instance
    """
    if config is None or overrides:
        base = config.to_dict() if config is not None else {}
        config = SignerConfig.from_dict({**base, **overrides})

    signer = KeySigner(public_key_path, private_key_path, config=config)
    if load:
        signer.load_keys()
    return signer
