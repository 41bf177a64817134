# shadow_sdk/core/validation.py
"""Input validation helpers"""

import base58

from ..constants import (
    DOMAIN_LABEL_PATTERN,
    PLACEHOLDER_PROGRAM_ID,
    SHADOW_DOMAIN_SUFFIX,
)

MAX_DOMAIN_LENGTH = 253
MAX_LABEL_LENGTH = 63
PUBKEY_LENGTH = 32


def validate_domain(domain: str) -> bool:
    """Check domain syntax

    ``<name>.shadow`` domains take a single label; custom domains need at
    least two labels. Labels are 1-63 alphanumerics with inner hyphens.
    """
    if not domain or len(domain) > MAX_DOMAIN_LENGTH:
        return False

    if domain.endswith(SHADOW_DOMAIN_SUFFIX):
        name = domain[:-len(SHADOW_DOMAIN_SUFFIX)]
        if not name or len(name) > MAX_LABEL_LENGTH:
            return False
        return bool(DOMAIN_LABEL_PATTERN.match(name))

    labels = domain.split('.')
    if len(labels) < 2:
        return False

    for label in labels:
        if not label or len(label) > MAX_LABEL_LENGTH:
            return False
        if not DOMAIN_LABEL_PATTERN.match(label):
            return False

    return True


def validate_pubkey(pubkey: str) -> bool:
    """Check that a string is a base58 encoded 32-byte public key"""
    if not pubkey or not isinstance(pubkey, str):
        return False
    try:
        return len(base58.b58decode(pubkey)) == PUBKEY_LENGTH
    except ValueError:
        return False


def is_placeholder_address(address: str) -> bool:
    """True for the all-ones id written by program scaffolding"""
    return address == PLACEHOLDER_PROGRAM_ID


def validate_ipfs_cid(cid: str) -> bool:
    if not cid:
        return False
    clean = cid[len("ipfs://"):] if cid.startswith("ipfs://") else cid
    return 10 <= len(clean) <= 100


def validate_arweave_tx(tx_id: str) -> bool:
    if not tx_id:
        return False
    clean = tx_id[len("arweave://"):] if tx_id.startswith("arweave://") else tx_id
    return 20 <= len(clean) <= 100


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """Strip control characters except tab, newline and carriage return

    Raises:
        ValueError: If the string is longer than max_length
    """
    if len(value) > max_length:
        raise ValueError(f"String too long (max {max_length} characters)")
    return ''.join(c for c in value if ord(c) >= 32 or c in '\t\n\r')
