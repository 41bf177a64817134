"""Initialize command for creating new Shadow site projects"""

from pathlib import Path

import click

from ..decorators import ensure_no_project
from ..utils.output import console, print_error
from ..utils.progress import spinner
from ...api.exceptions import ShadowSDKError
from ...constants import DEFAULT_ASSETS_DIR, EMOJI_ROCKET, EMOJI_SUCCESS, MANIFEST_FILE
from ...core.project_manager import ProjectManager


@click.command()
@click.argument('name')
@click.option(
    '--directory', '-C',
    type=click.Path(file_okay=False),
    help='Parent directory for the project (default: current directory)'
)
@click.pass_context
@ensure_no_project
def init(ctx, name, directory):
    """Create a new Shadow site project

    Scaffolds NAME/ with an Anchor program, an assets/ folder holding a
    starter index.html, and shadow.json. Uses 'anchor init' when the
    Anchor CLI is installed and a minimal workspace otherwise.

    Examples:
        shadow init my-site
        shadow init my-site -C ~/projects
    """
    console.print(f"\n{EMOJI_ROCKET} Creating Shadow project '{name}'...")

    try:
        with spinner("Scaffolding project...", console=console):
            project_root = ProjectManager().create_project(name, directory)
    except ShadowSDKError as e:
        print_error("Failed to initialize project", e)
        ctx.exit(1)

    console.print(f"\n{EMOJI_SUCCESS} Project initialized successfully!")
    console.print(f"\nLocation: {project_root}")
    show_project_structure(project_root)

    console.print(f"\n{EMOJI_SUCCESS} Next steps:")
    console.print(f"1. cd {project_root.name}")
    console.print(f"2. Edit {DEFAULT_ASSETS_DIR}/index.html")
    console.print("3. shadow deploy --network devnet")


def show_project_structure(project_root: Path) -> None:
    """Print the top-level layout of a new project"""
    console.print("\n[bold]Project structure:[/bold]")
    console.print(f"  {project_root.name}/")
    for entry in sorted(project_root.iterdir()):
        if entry.name.startswith('.') and entry.name != '.gitignore':
            continue
        marker = "/" if entry.is_dir() else ""
        note = "  [dim]# deployment state[/dim]" if entry.name == MANIFEST_FILE else ""
        console.print(f"  ├── {entry.name}{marker}{note}")
