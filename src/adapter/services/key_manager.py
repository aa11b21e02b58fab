"""
RSA Key Manager

Holds the signing key and the set of verification keys addressed by key
id (``kid``). Rotation installs a new signing key while keeping earlier
public keys, so tokens signed before the rotation stay verifiable until
they expire.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

logger = logging.getLogger(__name__)

DEFAULT_KEY_ID = "key-1"


class KeyManagerError(Exception):
    pass


class KeyNotFoundError(KeyManagerError):
    """Key file does not exist"""


class InvalidKeyError(KeyManagerError):
    """PEM data cannot be parsed as an RSA key"""


class KeyNotLoadedError(KeyManagerError):
    """No signing key has been loaded"""


def _private_key_from_pem(pem: bytes) -> rsa.RSAPrivateKey:
    # Accepts PKCS#8 ("PRIVATE KEY") and PKCS#1 ("RSA PRIVATE KEY")
    try:
        key = serialization.load_pem_private_key(pem, password=None)
    except (ValueError, TypeError) as exc:
        raise InvalidKeyError(f"Cannot parse private key: {exc}") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise InvalidKeyError("Not an RSA private key")
    return key


def _public_key_from_pem(pem: bytes) -> rsa.RSAPublicKey:
    # Accepts PKIX ("PUBLIC KEY") and PKCS#1 ("RSA PUBLIC KEY")
    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError) as exc:
        raise InvalidKeyError(f"Cannot parse public key: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise InvalidKeyError("Not an RSA public key")
    return key


def _read_file(path: str) -> bytes:
    file_path = Path(path)
    if not file_path.exists():
        raise KeyNotFoundError(f"Key file not found: {path}")
    return file_path.read_bytes()


def _private_pem(key: rsa.RSAPrivateKey) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


def _public_pem(key: rsa.RSAPublicKey) -> str:
    return key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


class KeyManager:
    def __init__(self, key_id: str = DEFAULT_KEY_ID):
        self._lock = threading.Lock()
        self._key_id = key_id
        self._signing_pem: Optional[str] = None
        self._public_pems: Dict[str, str] = {}

    @property
    def key_id(self) -> str:
        with self._lock:
            return self._key_id

    def load_private_key_pem(self, pem, key_id: Optional[str] = None) -> None:
        """Install a signing key; its public half is registered for verification."""
        if isinstance(pem, str):
            pem = pem.encode()
        private_key = _private_key_from_pem(pem)
        with self._lock:
            if key_id:
                self._key_id = key_id
            self._signing_pem = _private_pem(private_key)
            self._public_pems[self._key_id] = _public_pem(private_key.public_key())

    def load_private_key_file(self, path: str, key_id: Optional[str] = None) -> None:
        self.load_private_key_pem(_read_file(path), key_id)

    def load_public_key_pem(self, pem, key_id: Optional[str] = None) -> None:
        """Register a verification-only key (defaults to the current kid)."""
        if isinstance(pem, str):
            pem = pem.encode()
        public_key = _public_key_from_pem(pem)
        with self._lock:
            self._public_pems[key_id or self._key_id] = _public_pem(public_key)

    def load_public_key_file(self, path: str, key_id: Optional[str] = None) -> None:
        self.load_public_key_pem(_read_file(path), key_id)

    def rotate(self, private_pem, key_id: str) -> None:
        """Sign with a new key from now on; older public keys remain valid."""
        self.load_private_key_pem(private_pem, key_id)
        logger.info("Signing key rotated to kid=%s", key_id)

    def generate_ephemeral_key(self, key_size: int = 2048) -> None:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
        self.load_private_key_pem(_private_pem(private_key))

    def signing_key(self) -> Tuple[str, str]:
        """Returns (kid, private key PEM)."""
        with self._lock:
            if self._signing_pem is None:
                raise KeyNotLoadedError("Signing key has not been loaded")
            return self._key_id, self._signing_pem

    def public_key(self, key_id: Optional[str] = None) -> Optional[str]:
        """Verification key for a kid; None kid means the current key."""
        with self._lock:
            return self._public_pems.get(key_id or self._key_id)

    @classmethod
    def from_config(cls, config) -> "KeyManager":
        """
        Load key material from application config.

        Private key comes from JWT_PRIVATE_KEY (PEM) or JWT_PRIVATE_KEY_FILE;
        an optional JWT_PUBLIC_KEY / JWT_PUBLIC_KEY_FILE overrides the
        derived public key. Without a private key an ephemeral one is
        generated when JWT_ALLOW_EPHEMERAL_KEY is set.
        """
        manager = cls(key_id=getattr(config, "JWT_KEY_ID", None) or DEFAULT_KEY_ID)

        private_pem = getattr(config, "JWT_PRIVATE_KEY", None)
        private_file = getattr(config, "JWT_PRIVATE_KEY_FILE", None)
        if private_pem:
            manager.load_private_key_pem(private_pem)
        elif private_file:
            manager.load_private_key_file(private_file)
        elif getattr(config, "JWT_ALLOW_EPHEMERAL_KEY", False):
            logger.warning(
                "No JWT signing key configured; generated an ephemeral RSA key. "
                "Tokens will not survive a restart."
            )
            manager.generate_ephemeral_key()
        else:
            raise KeyNotLoadedError(
                "Set JWT_PRIVATE_KEY or JWT_PRIVATE_KEY_FILE to sign access tokens"
            )

        public_pem = getattr(config, "JWT_PUBLIC_KEY", None)
        public_file = getattr(config, "JWT_PUBLIC_KEY_FILE", None)
        if public_pem:
            manager.load_public_key_pem(public_pem)
        elif public_file:
            manager.load_public_key_file(public_file)

        return manager
