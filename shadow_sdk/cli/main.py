# shadow_sdk/cli/main.py
"""Main CLI entry point for shadow-sdk"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ..constants import APP_NAME, ENV_LOG_LEVEL, LOG_FORMAT
from ..core import PathResolver, find_project_root
from ..api.exceptions import PipelineFailedError, ShadowSDKError

from .commands import init, deploy, convert, status

console = Console(stderr=True)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = os.environ.get(ENV_LOG_LEVEL, "WARNING").upper()

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    for name in ("httpx", "httpcore", "asyncio", "aiofiles"):
        logging.getLogger(name).setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy project lookup"""

    def __init__(self):
        self.verbose: bool = False
        self.debug: bool = False
        self._project_root: Optional[Path] = None
        self._project_checked: bool = False

    @property
    def project_root(self) -> Optional[Path]:
        """Nearest directory holding shadow.json, or None"""
        if not self._project_checked:
            self._project_checked = True
            self._project_root = find_project_root()
            if self.debug:
                console.print(f"[dim]Project root: {self._project_root}[/dim]")
        return self._project_root

    @property
    def path_resolver(self) -> Optional[PathResolver]:
        root = self.project_root
        return PathResolver(root) if root else None


@click.group(name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.pass_context
def cli(ctx, verbose, debug, quiet):
    """Shadow - Deploy static sites as Solana programs

    Publishes site assets to IPFS or Arweave, deploys the site's Anchor
    program, and optionally mints an ownership token and registers a
    human-readable domain for it.
    """
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context()
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(init.init)
cli.add_command(deploy.deploy)
cli.add_command(convert.convert)
cli.add_command(status.status)


def main():
    """Main entry point for the CLI application

    Exit codes: 0 on success, 1 on any pipeline or SDK failure and
    130 when interrupted.
    """
    try:
        exit_code = cli(prog_name=APP_NAME, standalone_mode=False)
        sys.exit(exit_code if isinstance(exit_code, int) else 0)

    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)

    except (KeyboardInterrupt, click.exceptions.Abort):
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except PipelineFailedError as e:
        console.print(f"[red]Deployment failed at stage '{e.stage}':[/red] {e}")
        sys.exit(1)

    except ShadowSDKError as e:
        console.print(f"[red]Error ({e.error_code}):[/red] {e}")
        sys.exit(1)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
