"""
RSA key material: generation, DER encoding and key file I/O.

Key files hold the raw DER encoding of a single key with no framing:
X.509 SubjectPublicKeyInfo for the public key and unencrypted PKCS#8 for
the private key.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import xxhash
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from .error_handling import (
    KeyGenerationError,
    KeyPersistenceError,
    KeyReadError,
    safe_file_operation,
    with_error_handling,
)

logger = logging.getLogger(__name__)

HASH_ALGORITHMS = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


@dataclass(frozen=True)
class KeyMaterial:
    """An RSA private key together with its public key."""

    private_key: rsa.RSAPrivateKey
    public_key: rsa.RSAPublicKey

    @classmethod
    def from_private_key(cls, private_key: rsa.RSAPrivateKey) -> "KeyMaterial":
        return cls(private_key=private_key, public_key=private_key.public_key())

    @property
    def key_size(self) -> int:
        return self.private_key.key_size

    @property
    def signature_length(self) -> int:
        """Length in bytes of every signature made with this key."""
        return (self.private_key.key_size + 7) // 8

    def private_bytes(self) -> bytes:
        return encode_private_key(self.private_key)

    def public_bytes(self) -> bytes:
        return encode_public_key(self.public_key)

    def fingerprint(self) -> str:
        return key_fingerprint(self.public_key)


@with_error_handling(KeyGenerationError)
def generate_key_material(key_size: int = 1024, public_exponent: int = 65537) -> KeyMaterial:
    """
    Generate a fresh RSA key pair from the operating system CSPRNG.

    Raises:
        KeyGenerationError: If the backend refuses the parameters or fails
    """
    private_key = rsa.generate_private_key(
        public_exponent=public_exponent, key_size=key_size
    )
    logger.debug(f"Generated RSA-{key_size} key pair")
    return KeyMaterial.from_private_key(private_key)


def encode_private_key(private_key: rsa.RSAPrivateKey) -> bytes:
    """PKCS#8 DER, unencrypted."""
    return private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def encode_public_key(public_key: rsa.RSAPublicKey) -> bytes:
    """X.509 SubjectPublicKeyInfo DER."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


@with_error_handling(KeyReadError)
def decode_private_key(data: bytes) -> rsa.RSAPrivateKey:
    """
    Decode a PKCS#8 DER private key.

    Raises:
        KeyReadError: If the bytes are not an unencrypted RSA private key
    """
    key = serialization.load_der_private_key(data, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyReadError(
            f"Expected an RSA private key, got {type(key).__name__}"
        )
    return key


@with_error_handling(KeyReadError)
def decode_public_key(data: bytes) -> rsa.RSAPublicKey:
    """
    Decode an X.509 SubjectPublicKeyInfo DER public key.

    Raises:
        KeyReadError: If the bytes are not an RSA public key
    """
    key = serialization.load_der_public_key(data)
    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyReadError(f"Expected an RSA public key, got {type(key).__name__}")
    return key


def key_fingerprint(public_key: rsa.RSAPublicKey) -> str:
    """Short non-cryptographic fingerprint of a public key, for logs and reports."""
    return xxhash.xxh3_64(encode_public_key(public_key)).hexdigest()


def _read_all(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def _write_all(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)


def read_key_bytes(path: Union[str, Path]) -> bytes:
    """
    Read the full contents of a key file.

    Raises:
        KeyReadError: If the file is missing, unreadable or empty
    """
    path = Path(path)
    data = safe_file_operation(
        "read key file", path, _read_all, path, error_type=KeyReadError
    )
    if not data:
        raise KeyReadError(f"Key file is empty: {path}", {"file_path": str(path)})
    return data


def write_key_bytes(data: bytes, path: Union[str, Path], private: bool = False) -> None:
    """
    Write key bytes to ``path``, truncating any existing file.

    Private key files are restricted to the owner where the platform allows.

    Raises:
        KeyPersistenceError: If the file cannot be written
    """
    path = Path(path)
    safe_file_operation(
        "write key file", path, _write_all, path, data, error_type=KeyPersistenceError
    )

    if private:
        try:
            os.chmod(path, 0o600)
        except OSError as e:
            logger.warning(f"Failed to set restrictive permissions on key file: {e}")

    logger.debug(f"Wrote {len(data)} key bytes to {path}")
