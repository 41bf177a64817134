# shadow_sdk/models/identity.py
"""Wallet identity model"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

import base58
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

SEED_LENGTH = 32
SECRET_KEY_LENGTH = 64


@dataclass(frozen=True)
class KeyPair:
    """Ed25519 signing key pair

    Stored in the Solana layout: the 64-byte secret key is the 32-byte
    seed followed by the 32-byte public key.
    """
    seed: bytes = field(repr=False)

    def __post_init__(self):
        if len(self.seed) != SEED_LENGTH:
            raise ValueError(f"Ed25519 seed must be {SEED_LENGTH} bytes, got {len(self.seed)}")

    @classmethod
    def generate(cls) -> 'KeyPair':
        """Generate a fresh key pair"""
        private_key = Ed25519PrivateKey.generate()
        seed = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption()
        )
        return cls(seed)

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> 'KeyPair':
        """Create from a 64-byte secret key (seed || public key)

        Raises:
            ValueError: If the length is wrong or the embedded public key
                does not belong to the seed
        """
        secret_key = bytes(secret_key)
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise ValueError(
                f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {len(secret_key)}"
            )

        keypair = cls(secret_key[:SEED_LENGTH])
        if keypair.public_key != secret_key[SEED_LENGTH:]:
            raise ValueError("Secret key does not match its embedded public key")
        return keypair

    @property
    def _private_key(self) -> Ed25519PrivateKey:
        return Ed25519PrivateKey.from_private_bytes(self.seed)

    @property
    def public_key(self) -> bytes:
        """Raw 32-byte public key"""
        return self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw
        )

    @property
    def public_key_b58(self) -> str:
        """Base58 encoded public key (wallet address)"""
        return base58.b58encode(self.public_key).decode('ascii')

    @property
    def secret_key(self) -> bytes:
        """64-byte secret key in Solana layout"""
        return self.seed + self.public_key

    def sign(self, message: bytes) -> bytes:
        """Sign a message, returning the 64-byte signature"""
        return self._private_key.sign(message)

    def to_wallet_dict(self) -> Dict[str, Any]:
        """Serialize to the wallet.json layout"""
        return {
            'publicKey': self.public_key_b58,
            'secretKey': list(self.secret_key),
        }

    def to_cli_keypair(self) -> List[int]:
        """Serialize to the Solana CLI keypair file layout"""
        return list(self.secret_key)

    def __str__(self) -> str:
        return self.public_key_b58
