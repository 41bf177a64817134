# shadow_sdk/cli/utils/output.py
"""Output formatting utilities"""

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich import box

from ...constants import EMOJI_ERROR, EMOJI_SUCCESS, EMOJI_WARNING
from ...models import ConvertResult, DeployResult, StageWarning

console = Console()


def _manifest_lines(manifest) -> List[str]:
    lines = [
        f"[bold]Network:[/bold] {manifest.network.value}",
        f"[bold]Storage:[/bold] {manifest.storage.value}",
        f"[bold]Program:[/bold] {manifest.program_address or '-'}",
        f"[bold]Content:[/bold] {manifest.storage_cid or '-'}",
    ]
    if manifest.token_mint:
        lines.append(f"[bold]Token:[/bold] {manifest.token_mint}")
    if manifest.domain:
        lines.append(f"[bold]Domain:[/bold] {manifest.domain}")
    return lines


def format_warnings(warnings: List[StageWarning]) -> None:
    """Display recoverable stage warnings"""
    if not warnings:
        return

    console.print("\n[bold yellow]Warnings:[/bold yellow]")
    for warning in warnings:
        console.print(f"  {EMOJI_WARNING} [yellow]{warning.stage}[/yellow]: {warning.message}")
        if warning.guidance:
            console.print(f"    [dim]{warning.guidance}[/dim]")


def format_deploy_result(result: DeployResult) -> None:
    """Format and display deploy operation result"""
    if result.success:
        lines = [
            f"[green]{EMOJI_SUCCESS}[/green] Deployment completed successfully!",
            "",
        ]
        lines.extend(_manifest_lines(result.manifest))
        if result.wallet:
            lines.append(f"[bold]Wallet:[/bold] {result.wallet}")
        if result.skipped_stages:
            lines.append(f"[bold]Skipped:[/bold] {', '.join(result.skipped_stages)}")
        lines.append(f"[bold]Duration:[/bold] {result.duration:.1f}s")

        panel = Panel(
            "\n".join(lines),
            title="Deploy Result",
            border_style="green"
        )
        console.print(panel)

    else:
        lines = [f"[red]{EMOJI_ERROR} Deploy failed at stage '{result.failed_stage}':[/red] {result.error}"]

        if result.completed_stages:
            lines.append("")
            lines.append(f"[yellow]Completed stages: {', '.join(result.completed_stages)}[/yellow]")
            lines.append("[dim]Progress was saved; run deploy again to resume.[/dim]")

        panel = Panel(
            "\n".join(lines),
            title="Deploy Error",
            border_style="red"
        )
        console.print(panel)

    format_warnings(result.warnings)


def format_convert_result(result: ConvertResult) -> None:
    """Format and display convert operation result"""
    if result.already_converted:
        console.print(f"{EMOJI_WARNING} Site already converted; shadow.json exists.")
        return

    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Site converted successfully!",
        "",
    ]
    lines.extend(_manifest_lines(result.manifest))
    if result.integration_path:
        lines.append(f"[bold]Integration:[/bold] {result.integration_path}")

    panel = Panel(
        "\n".join(lines),
        title="Convert Result",
        border_style="green"
    )
    console.print(panel)

    format_warnings(result.warnings)


def format_status(status: Dict[str, Any]) -> None:
    """Format and display project status"""
    manifest = status['manifest']

    table = Table(title=f"{manifest.get('name')} {manifest.get('version')}", box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    for key in ('network', 'storage', 'programAddress', 'storageCid',
                'tokenMint', 'domain', 'updatedAt'):
        table.add_row(key, str(manifest.get(key) or '-'))
    table.add_row("wallet", status.get('wallet') or '-')
    table.add_row("files", str(status.get('files', 0)))
    table.add_row("next stage", status.get('next_state', '-'))

    console.print(table)

    validation = status.get('validation')
    if validation is not None:
        for error in validation.errors:
            print_error(error)
        for warning in validation.warnings:
            print_warning(warning)
        for info in validation.info:
            print_info(info)

    verification = status.get('verification')
    if verification is not None:
        if verification.get('exists') and verification.get('executable'):
            console.print(f"[green]{EMOJI_SUCCESS} Program is deployed and executable[/green]")
        elif verification.get('exists'):
            console.print(f"[yellow]{EMOJI_WARNING} Account exists but is not executable[/yellow]")
        else:
            console.print(f"[red]{EMOJI_ERROR} Program account not found on-chain[/red]")


def format_json(data: Any, title: Optional[str] = None) -> None:
    """Format and display JSON data with syntax highlighting"""
    json_str = json.dumps(data, indent=2, default=str)
    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        panel = Panel(syntax, title=title, border_style="blue")
        console.print(panel)
    else:
        console.print(syntax)


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message"""
    console.print(f"[blue]Info:[/blue] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
