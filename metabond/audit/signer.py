"""
Ed25519 signing for audit snapshots.

Key management:
- Default location: ~/.metabond/keys/audit_ed25519 (+ .pub)
- Override with METABOND_SIGNING_KEY or an explicit path
"""

import base64
import binascii
import hashlib
import os
from pathlib import Path
from typing import Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

from ..core.canonical import canonical_json_bytes


def _pubkey_id(public_key: Ed25519PublicKey) -> str:
    public_pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return hashlib.sha256(public_pem).hexdigest()[:16]


class SigningKey:
    """Ed25519 private key wrapper."""

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> "SigningKey":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def load_from_file(cls, path: str) -> "SigningKey":
        """
        Load private key from PEM file.

        Raises:
            FileNotFoundError: If key file doesn't exist
            ValueError: If key format is invalid
        """
        with open(path, "rb") as f:
            private_key = serialization.load_pem_private_key(f.read(), password=None)

        if not isinstance(private_key, Ed25519PrivateKey):
            raise ValueError("Key file is not Ed25519 private key")

        return cls(private_key)

    def save_to_file(self, path: str, public_path: Optional[str] = None) -> None:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

        private_pem = self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        with open(path, "wb") as f:
            f.write(private_pem)

        if public_path:
            with open(public_path, "wb") as f:
                f.write(self.get_public_key_pem())

    def sign(self, payload: dict) -> bytes:
        """Sign the canonical JSON encoding of payload."""
        return self.private_key.sign(canonical_json_bytes(payload))

    def sign_base64(self, payload: dict) -> str:
        return base64.b64encode(self.sign(payload)).decode("ascii")

    def get_pubkey_id(self) -> str:
        """SHA-256 of the public key PEM, first 16 hex chars."""
        return _pubkey_id(self.public_key)

    def get_public_key_pem(self) -> bytes:
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )


class VerifyingKey:
    """
    Ed25519 verifying key (public key only).

    Used for signature verification without private key access.
    """

    def __init__(self, public_key: Ed25519PublicKey):
        self.public_key = public_key

    @classmethod
    def load_from_file(cls, path: str) -> "VerifyingKey":
        with open(path, "rb") as f:
            public_key = serialization.load_pem_public_key(f.read())

        if not isinstance(public_key, Ed25519PublicKey):
            raise ValueError("Key file is not Ed25519 public key")

        return cls(public_key)

    @classmethod
    def from_signing_key(cls, signing_key: SigningKey) -> "VerifyingKey":
        return cls(signing_key.public_key)

    def verify(self, payload: dict, signature: bytes) -> bool:
        try:
            self.public_key.verify(signature, canonical_json_bytes(payload))
            return True
        except InvalidSignature:
            return False

    def verify_base64(self, payload: dict, signature_b64: str) -> bool:
        try:
            signature_bytes = base64.b64decode(signature_b64, validate=True)
        except (binascii.Error, ValueError):
            return False
        return self.verify(payload, signature_bytes)

    def get_pubkey_id(self) -> str:
        return _pubkey_id(self.public_key)


def get_default_key_path() -> Path:
    return Path.home() / ".metabond" / "keys" / "audit_ed25519"


def ensure_keypair(key_path: Optional[str] = None) -> Tuple[str, str]:
    """
    Ensure keypair exists (generate if missing).

    Returns:
        (private_key_path, public_key_path) tuple
    """
    if key_path is None:
        key_path = str(get_default_key_path())

    public_key_path = key_path + ".pub"

    if not os.path.exists(key_path):
        SigningKey.generate().save_to_file(key_path, public_key_path)
    elif not os.path.exists(public_key_path):
        with open(public_key_path, "wb") as f:
            f.write(SigningKey.load_from_file(key_path).get_public_key_pem())

    return key_path, public_key_path
