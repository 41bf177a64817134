"""Deploy command implementation"""

import click

from ..decorators import require_project
from ..utils.output import console, format_deploy_result
from ..utils.progress import spinner
from ...api import Deployer
from ...constants import EMOJI_KEY, MSG_IDENTITY_CREATED, Network, StorageKind


@click.command()
@click.option('--network', '-n',
              type=click.Choice([n.value for n in Network]),
              default=Network.DEVNET.value, show_default=True,
              help='Target cluster')
@click.option('--storage', '-s',
              type=click.Choice([s.value for s in StorageKind]),
              default=StorageKind.IPFS.value, show_default=True,
              help='Content storage backend')
@click.option('--domain', help='Register a domain alias (e.g. mysite.shadow)')
@click.option('--mint-token', is_flag=True, help='Mint a site ownership token')
@click.option('--require-domain', is_flag=True,
              help='Fail the deployment if domain registration fails')
@click.option('--include', 'include', multiple=True,
              help='Include glob pattern (repeatable)')
@click.option('--exclude', 'exclude', multiple=True,
              help='Exclude glob pattern (repeatable)')
@click.option('--path', '-p', type=click.Path(exists=True, file_okay=False),
              help='Project directory (default: search from current directory)')
@click.pass_context
@require_project('path')
def deploy(ctx, network, storage, domain, mint_token, require_domain,
           include, exclude, path):
    """Deploy the site to Shadow

    Runs the deployment pipeline: wallet, asset upload, program deploy,
    then the optional token mint and domain registration. Progress is
    saved to shadow.json after every stage, so running deploy again
    resumes where a failed run stopped.

    Examples:

        # Deploy to devnet with IPFS storage
        shadow deploy

        # Deploy to mainnet with a domain and an ownership token
        shadow deploy --network mainnet --domain mysite.shadow --mint-token

        # Publish only the public folder
        shadow deploy --include "public/**"
    """
    deployer = Deployer(path)
    show_logs = ctx.obj is not None and (ctx.obj.verbose or ctx.obj.debug)

    with spinner(f"Deploying to {network}...", console=console, enabled=not show_logs):
        result = deployer.deploy(
            network=network,
            storage=storage,
            domain=domain,
            mint_token=mint_token,
            include=list(include) or None,
            exclude=list(exclude) or None,
            require_domain=require_domain,
        )

    if result.identity_created:
        console.print(f"{EMOJI_KEY} " + MSG_IDENTITY_CREATED.format(
            pubkey=result.wallet,
            path=deployer.path_resolver.make_relative(deployer.path_resolver.wallet_path)
        ))

    format_deploy_result(result)

    if not result.success:
        ctx.exit(1)
