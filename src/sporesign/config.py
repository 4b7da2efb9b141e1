"""
Configuration Management for Sporesign
======================================

Signer configuration lives in a single dataclass validated on construction.
It can be built directly, from a dict, from a JSON file or from environment
variables.
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .error_handling import SignerConfigurationError
from .json_utils import dumps, loads

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

MIN_KEY_SIZE = 1024
SUPPORTED_HASH_ALGORITHMS = ("sha1", "sha256", "sha384", "sha512")
COLLISION_POLICIES = ("error", "overwrite")


def normalize_key_path(path: Optional[PathLike]) -> Optional[str]:
    """Return the path as a string, or None when it is absent or blank."""
    if path is None:
        return None
    path = str(path)
    if not path.strip():
        return None
    return path


@dataclass
class SignerConfig:
    """Configuration for a KeySigner."""

    public_key_path: Optional[str] = None
    private_key_path: Optional[str] = None
    key_size: int = 1024
    public_exponent: int = 65537
    hash_algorithm: str = "sha1"
    signature_field: str = "sign"
    on_field_collision: str = "error"  # "error" or "overwrite"
    value_encoding: str = "utf-8"

    def __post_init__(self):
        """Validate signer configuration."""
        self.public_key_path = normalize_key_path(self.public_key_path)
        self.private_key_path = normalize_key_path(self.private_key_path)

        for name in ("key_size", "public_exponent"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise SignerConfigurationError(
                    f"{name} must be an integer, got {type(value).__name__}",
                    {name: value},
                )
        for name in ("hash_algorithm", "signature_field", "on_field_collision", "value_encoding"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise SignerConfigurationError(
                    f"{name} must be a string, got {type(value).__name__}",
                    {name: value},
                )

        if self.key_size < MIN_KEY_SIZE or self.key_size % 8:
            raise SignerConfigurationError(
                f"key_size must be a multiple of 8 and at least {MIN_KEY_SIZE}",
                {"key_size": self.key_size},
            )

        if self.public_exponent not in (3, 65537):
            raise SignerConfigurationError(
                "public_exponent must be 3 or 65537",
                {"public_exponent": self.public_exponent},
            )

        self.hash_algorithm = self.hash_algorithm.lower()
        if self.hash_algorithm not in SUPPORTED_HASH_ALGORITHMS:
            raise SignerConfigurationError(
                f"hash_algorithm must be one of {SUPPORTED_HASH_ALGORITHMS}",
                {"hash_algorithm": self.hash_algorithm},
            )

        if not self.signature_field:
            raise SignerConfigurationError("signature_field must not be empty")

        if self.on_field_collision not in COLLISION_POLICIES:
            raise SignerConfigurationError(
                f"on_field_collision must be one of {COLLISION_POLICIES}",
                {"on_field_collision": self.on_field_collision},
            )

        try:
            "".encode(self.value_encoding)
        except LookupError as e:
            raise SignerConfigurationError(
                f"Unknown value_encoding: {self.value_encoding}"
            ) from e

        logger.debug(
            f"Signer configured: rsa-{self.key_size}/{self.hash_algorithm}, "
            f"public={self.public_key_path}, private={self.private_key_path}"
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SignerConfig":
        """Create a config from a mapping, ignoring unknown keys with a warning."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key in known:
                kwargs[key] = value
            else:
                logger.warning(f"Unknown configuration parameter ignored: {key}={value}")
        return cls(**kwargs)

    @classmethod
    def from_env(
        cls, prefix: str = "SPORESIGN_", environ: Optional[Mapping[str, str]] = None
    ) -> "SignerConfig":
        """
        Create a config from environment variables.

        ``SPORESIGN_PRIVATE_KEY_PATH`` maps to ``private_key_path`` and so on.
        Integer fields are parsed; unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            value = environ.get(prefix + f.name.upper())
            if value is None:
                continue
            if f.type in (int, "int"):
                try:
                    kwargs[f.name] = int(value)
                except ValueError as e:
                    raise SignerConfigurationError(
                        f"{prefix + f.name.upper()} must be an integer",
                        {"value": value},
                    ) from e
            else:
                kwargs[f.name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def load_config_from_json(path: PathLike) -> SignerConfig:
    """
    Load a SignerConfig from a JSON file.

    Args:
        path: Path to a JSON object whose keys are SignerConfig field names

    Returns:
        Validated SignerConfig
    """
    try:
        data = loads(Path(path).read_bytes())
    except OSError as e:
        raise SignerConfigurationError(
            f"Cannot read config file: {e}", {"path": str(path)}
        ) from e
    except ValueError as e:
        raise SignerConfigurationError(
            f"Config file is not valid JSON: {e}", {"path": str(path)}
        ) from e

    if not isinstance(data, dict):
        raise SignerConfigurationError(
            "Config file must contain a JSON object", {"path": str(path)}
        )
    return SignerConfig.from_dict(data)


def create_signer_config(
    public_key_path: Optional[PathLike] = None,
    private_key_path: Optional[PathLike] = None,
    **overrides,
) -> SignerConfig:
    """
    Factory function for creating configurations with convenience parameters.

    Args:
        public_key_path: Where the public key is read from / written to
        private_key_path: Where the private key is read from / written to
        **overrides: Any other SignerConfig field

    Returns:
        Configured SignerConfig instance
    """
    return SignerConfig.from_dict(
        {
            "public_key_path": public_key_path,
            "private_key_path": private_key_path,
            **overrides,
        }
    )


def save_config_to_json(config: SignerConfig, path: PathLike) -> None:
    """Write ``config`` as a JSON object readable by load_config_from_json."""
    Path(path).write_text(
        dumps(config.to_dict(), sort_keys=True, indent=True), encoding="utf-8"
    )
