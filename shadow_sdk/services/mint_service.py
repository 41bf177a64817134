"""Ownership token mint stage"""

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional

from ..api.exceptions import MintError
from ..constants import SPL_TOKEN_COMMAND, TOOLCHAIN_TIMEOUT, Network
from ..core.validation import validate_pubkey
from ..models.config import Settings
from ..models.identity import KeyPair
from ..utils.process_utils import CommandResult, CommandRunner, run_command

logger = logging.getLogger(__name__)

CREATING_TOKEN_PATTERN = re.compile(r"Creating token\s+([1-9A-HJ-NP-Za-km-z]{32,44})")


class SplTokenMinter:
    """Mints a zero-decimal, single-unit token with the spl-token CLI"""

    def __init__(self,
                 keypair_path: Path,
                 command: str = SPL_TOKEN_COMMAND,
                 runner: CommandRunner = run_command,
                 timeout: float = TOOLCHAIN_TIMEOUT):
        self.keypair_path = Path(keypair_path)
        self.command = command
        self.runner = runner
        self.timeout = timeout

    def _run(self, args: List[str], rpc_url: str, network: Network) -> CommandResult:
        full_args = [self.command] + args + [
            "--url", rpc_url,
            "--fee-payer", str(self.keypair_path),
            "--owner", str(self.keypair_path),
        ]
        context = {'network': network.value, 'step': args[0]}

        try:
            result = self.runner(full_args, None, self.timeout)
        except FileNotFoundError as e:
            raise MintError(
                f"'{self.command}' is not installed. Install the SPL token CLI "
                "(cargo install spl-token-cli) to mint site tokens.",
                context=context,
                cause=e
            )
        except subprocess.TimeoutExpired as e:
            raise MintError(f"'{self.command} {args[0]}' timed out", context=context, cause=e)

        if not result.ok:
            raise MintError(
                f"'{self.command} {args[0]}' exited with code {result.returncode}: "
                f"{result.tail(5)}",
                context=context
            )
        return result

    def mint(self, network: Network, rpc_url: str) -> str:
        """Create the token, its holder account, and mint one unit

        Returns:
            Token mint address
        """
        # spl-token otherwise makes the machine's default keypair the authority
        result = self._run(
            ["create-token", "--decimals", "0", "--mint-authority", str(self.keypair_path)],
            rpc_url, network
        )
        match = CREATING_TOKEN_PATTERN.search(result.output)
        if not match or not validate_pubkey(match.group(1)):
            raise MintError(
                "Could not read the token address from spl-token output",
                context={'network': network.value}
            )
        mint_address = match.group(1)

        self._run(["create-account", mint_address], rpc_url, network)
        self._run(
            ["mint", mint_address, "1", "--mint-authority", str(self.keypair_path)],
            rpc_url, network
        )
        return mint_address


class MintService:
    """Mints the site ownership token for the deploying identity"""

    def __init__(self, settings: Settings, minter: SplTokenMinter):
        self.settings = settings
        self.minter = minter

    def mint_ownership_token(self, identity: KeyPair, network: Network) -> str:
        """Mint exactly one unit of a new zero-decimal token

        Args:
            identity: Wallet that pays for and holds the token
            network: Target cluster

        Returns:
            Token mint address

        Raises:
            MintError: If any step of minting fails
        """
        network = Network.parse(network)
        logger.info("Minting ownership token for %s on %s", identity.public_key_b58, network.value)
        try:
            mint_address = self.minter.mint(network, self.settings.rpc_url(network))
        except MintError:
            raise
        except Exception as e:
            raise MintError(
                f"Token minting failed: {e}",
                context={'network': network.value},
                cause=e
            )
        logger.info("Token minted: %s", mint_address)
        return mint_address


def create_mint_service(settings: Settings,
                        keypair_path: Path,
                        runner: Optional[CommandRunner] = None) -> MintService:
    """Mint service backed by the spl-token CLI"""
    minter = SplTokenMinter(
        keypair_path,
        command=settings.toolchain.spl_token,
        runner=runner or run_command,
        timeout=settings.toolchain.timeout
    )
    return MintService(settings, minter)
