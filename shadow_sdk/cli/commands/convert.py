"""Convert command implementation"""

from pathlib import Path

import click

from ..utils.output import console, format_convert_result
from ..utils.progress import spinner
from ...api import convert as convert_site
from ...constants import (
    EMOJI_KEY, MSG_IDENTITY_CREATED, STATE_DIR, WALLET_FILE, Network, StorageKind
)


@click.command()
@click.argument('path', required=False, default='.',
                type=click.Path(exists=True, file_okay=False))
@click.option('--network', '-n',
              type=click.Choice([n.value for n in Network]),
              default=Network.DEVNET.value, show_default=True,
              help='Target cluster')
@click.option('--storage', '-s',
              type=click.Choice([s.value for s in StorageKind]),
              default=StorageKind.IPFS.value, show_default=True,
              help='Content storage backend')
@click.option('--mint-token/--no-mint-token', default=True, show_default=True,
              help='Mint a site token used as the site address')
def convert(path, network, storage, mint_token):
    """Convert an existing static site into a Shadow site

    Publishes the site's files, mints a site token, registers a
    <token>.shadow domain, and writes shadow.json plus
    shadow-integration.js into PATH. No program is deployed.

    Examples:
        shadow convert
        shadow convert ./public --storage arweave --no-mint-token
    """
    with spinner("Converting site...", console=console):
        result = convert_site(path, network=network, storage=storage, mint_token=mint_token)

    if result.identity_created:
        console.print(f"{EMOJI_KEY} " + MSG_IDENTITY_CREATED.format(
            pubkey=result.wallet, path=Path(STATE_DIR) / WALLET_FILE
        ))

    format_convert_result(result)
