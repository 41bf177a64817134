# shadow_sdk/core/identity_store.py
"""Persistent wallet identity for a project"""

import json
import logging
from typing import Optional

from .path_resolver import PathResolver
from ..api.exceptions import StateCorruptError
from ..constants import MSG_IDENTITY_CREATED, SECRET_FILE_MODE
from ..models.identity import KeyPair
from ..utils.file_utils import atomic_write_json

logger = logging.getLogger(__name__)


class IdentityStore:
    """Loads or creates the project's signing key pair

    The wallet lives at ``.shadow/wallet.json``. A Solana CLI keypair file
    (``.shadow/id.json``) is kept next to it for the external toolchains.
    """

    def __init__(self, path_resolver: PathResolver):
        self.path_resolver = path_resolver
        self.last_created = False

    @property
    def wallet_path(self):
        return self.path_resolver.wallet_path

    def exists(self) -> bool:
        return self.wallet_path.exists()

    def load_identity(self) -> Optional[KeyPair]:
        """Load the persisted key pair

        Returns:
            KeyPair, or None when no wallet has been created yet

        Raises:
            StateCorruptError: If the wallet file is unreadable or malformed
        """
        path = self.wallet_path
        if not path.exists():
            return None

        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StateCorruptError(f"Wallet file is unreadable: {path}: {e}", str(path))

        if not isinstance(data, dict) or not isinstance(data.get('secretKey'), list):
            raise StateCorruptError(f"Wallet file has no secretKey array: {path}", str(path))

        try:
            keypair = KeyPair.from_secret_key(bytes(data['secretKey']))
        except (TypeError, ValueError) as e:
            raise StateCorruptError(f"Wallet key material is corrupt: {path}: {e}", str(path))

        recorded = data.get('publicKey')
        if recorded is not None and recorded != keypair.public_key_b58:
            raise StateCorruptError(
                f"Wallet publicKey {recorded} does not match its secret key: {path}",
                str(path)
            )

        if not self.path_resolver.keypair_path.exists():
            self._write_cli_keypair(keypair)

        return keypair

    def ensure_identity(self) -> KeyPair:
        """Return the persisted key pair, generating one on first use

        Raises:
            StateCorruptError: If a wallet exists but cannot be loaded. A new
                identity is never generated in that case.
        """
        keypair = self.load_identity()
        if keypair is not None:
            self.last_created = False
            logger.debug("Loaded wallet %s", keypair.public_key_b58)
            return keypair

        keypair = KeyPair.generate()
        self.path_resolver.state_dir.mkdir(parents=True, exist_ok=True)
        atomic_write_json(self.wallet_path, keypair.to_wallet_dict(), file_mode=SECRET_FILE_MODE)
        self._write_cli_keypair(keypair)
        self.last_created = True

        logger.warning(MSG_IDENTITY_CREATED.format(
            pubkey=keypair.public_key_b58, path=self.wallet_path
        ))
        return keypair

    def _write_cli_keypair(self, keypair: KeyPair) -> None:
        atomic_write_json(
            self.path_resolver.keypair_path,
            keypair.to_cli_keypair(),
            file_mode=SECRET_FILE_MODE
        )
