"""
Shared fixtures for signer tests.

A single RSA key pair is generated per session and written to disk so that
most tests can load it instead of paying for key generation.
"""

from pathlib import Path

import pytest

from sporesign.keys import KeyMaterial, generate_key_material
from sporesign.signer import KeySigner


@pytest.fixture(scope="session")
def key_material() -> KeyMaterial:
    """One RSA-1024 key pair shared by the whole session."""
    return generate_key_material(1024)


@pytest.fixture(scope="session")
def key_dir(tmp_path_factory, key_material) -> Path:
    """Directory holding the session key pair as DER files."""
    directory = tmp_path_factory.mktemp("keys")
    (directory / "public.der").write_bytes(key_material.public_bytes())
    (directory / "private.der").write_bytes(key_material.private_bytes())
    return directory


@pytest.fixture
def key_paths(tmp_path, key_dir):
    """Per-test copies of the session key files: (public_path, private_path)."""
    public_path = tmp_path / "public.der"
    private_path = tmp_path / "private.der"
    public_path.write_bytes((key_dir / "public.der").read_bytes())
    private_path.write_bytes((key_dir / "private.der").read_bytes())
    return public_path, private_path


@pytest.fixture
def signer(key_paths) -> KeySigner:
    """A ready signer using the session key pair."""
    public_path, private_path = key_paths
    signer = KeySigner(public_path, private_path)
    signer.load_keys()
    return signer


@pytest.fixture
def record():
    return {"name": b"alice", "age": b"30", "city": b"College Park"}
