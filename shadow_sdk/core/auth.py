# shadow_sdk/core/auth.py
"""Signed per-request authentication header (X-Shadow-Auth)"""

import base64
import json
import time
from dataclasses import dataclass
from typing import Optional

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from ..constants import AUTH_MAX_AGE, AUTH_MESSAGE_PREFIX
from ..models.identity import KeyPair


@dataclass(frozen=True)
class AuthHeader:
    """Decoded X-Shadow-Auth assertion"""
    wallet: str
    timestamp: int
    message: str
    signature: str


def auth_message(wallet: str, timestamp: int) -> str:
    """Challenge string signed by the wallet"""
    return f"{AUTH_MESSAGE_PREFIX}:{wallet}:{timestamp}"


def create_auth_header(keypair: KeyPair, timestamp: Optional[int] = None) -> str:
    """Create a fresh signed assertion for one backend request

    The header value is base64 encoded JSON carrying the wallet, a unix
    timestamp, the signed message and its base58 Ed25519 signature.
    """
    if timestamp is None:
        timestamp = int(time.time())

    wallet = keypair.public_key_b58
    message = auth_message(wallet, timestamp)
    signature = keypair.sign(message.encode('utf-8'))

    payload = {
        'wallet': wallet,
        'timestamp': timestamp,
        'message': message,
        'signature': base58.b58encode(signature).decode('ascii'),
    }
    encoded = json.dumps(payload, separators=(',', ':'), sort_keys=True)
    return base64.b64encode(encoded.encode('utf-8')).decode('ascii')


def parse_auth_header(value: str) -> AuthHeader:
    """Decode a header value

    Raises:
        ValueError: If the value is not a well-formed assertion
    """
    try:
        data = json.loads(base64.b64decode(value.encode('ascii'), validate=True))
        return AuthHeader(
            wallet=str(data['wallet']),
            timestamp=int(data['timestamp']),
            message=str(data['message']),
            signature=str(data['signature']),
        )
    except (ValueError, KeyError, TypeError) as e:
        raise ValueError(f"Malformed auth header: {e}")


def verify_auth_header(value: str,
                       max_age: int = AUTH_MAX_AGE,
                       now: Optional[int] = None) -> AuthHeader:
    """Verify signature, message binding and freshness

    Raises:
        ValueError: If the header is malformed, stale or badly signed
    """
    header = parse_auth_header(value)
    if header.message != auth_message(header.wallet, header.timestamp):
        raise ValueError("Auth message does not match wallet and timestamp")

    now = int(time.time()) if now is None else now
    if abs(now - header.timestamp) > max_age:
        raise ValueError("Auth header expired")

    try:
        public_key = Ed25519PublicKey.from_public_bytes(base58.b58decode(header.wallet))
        public_key.verify(base58.b58decode(header.signature), header.message.encode('utf-8'))
    except (InvalidSignature, ValueError) as e:
        raise ValueError(f"Invalid auth signature: {e}")

    return header
