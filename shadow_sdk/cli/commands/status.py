"""Status command implementation"""

import click

from ..decorators import require_project
from ..utils.output import format_json, format_status
from ...api import Deployer


@click.command()
@click.option('--path', '-p', type=click.Path(exists=True, file_okay=False),
              help='Project directory (default: search from current directory)')
@click.option('--verify', is_flag=True, help='Check the program account on-chain')
@click.option('--json', 'as_json', is_flag=True, help='Output raw JSON')
@require_project('path')
def status(path, verify, as_json):
    """Show the project's deployment state

    Prints what shadow.json records, the wallet, the number of
    publishable files and the stage the next deploy would start at.
    """
    info = Deployer(path).status(verify=verify)

    if as_json:
        validation = info.get('validation')
        if validation is not None:
            info['validation'] = {
                'success': validation.success,
                'errors': validation.errors,
                'warnings': validation.warnings,
                'info': validation.info,
            }
        format_json(info)
    else:
        format_status(info)
