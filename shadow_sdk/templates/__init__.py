# shadow_sdk/templates/__init__.py
"""Built-in templates for shadow-sdk"""

from pathlib import Path
from typing import Dict, Optional

from ..utils.template_utils import render_template

# Template directory path
TEMPLATES_DIR = Path(__file__).parent

# Template name -> path relative to TEMPLATES_DIR
TEMPLATES = {
    "index.html": "project/index.html",
    "lib.rs": "project/lib.rs",
    "Anchor.toml": "project/Anchor.toml",
    "gitignore": "project/gitignore",
    "README.md": "project/README.md",
    "integration.js": "site/integration.js",
}


def get_template_path(name: str) -> Optional[Path]:
    """
    Get path to a template file

    Args:
        name: Template name (a key of TEMPLATES)

    Returns:
        Path to template file or None if not found
    """
    relative = TEMPLATES.get(name)
    if relative is None:
        return None

    template_path = TEMPLATES_DIR / relative
    if template_path.exists():
        return template_path

    return None


def load_template(name: str) -> str:
    """
    Load template content

    Raises:
        FileNotFoundError: If the template does not exist
    """
    template_path = get_template_path(name)
    if template_path is None:
        raise FileNotFoundError(f"Template not found: {name}")

    return template_path.read_text(encoding='utf-8')


def render(name: str, /, **variables: str) -> str:
    """Load a template and substitute ``${var}`` placeholders"""
    return render_template(load_template(name), variables)


def list_templates() -> Dict[str, Path]:
    """Map of template name to file path for every shipped template"""
    return {
        name: TEMPLATES_DIR / relative
        for name, relative in TEMPLATES.items()
        if (TEMPLATES_DIR / relative).exists()
    }


__all__ = [
    'TEMPLATES_DIR',
    'TEMPLATES',
    'get_template_path',
    'load_template',
    'render',
    'list_templates',
]
