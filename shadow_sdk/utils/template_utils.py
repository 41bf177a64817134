"""Template processing utilities"""

import string
from datetime import datetime
from typing import Any, Dict


def render_template(template: str,
                    variables: Dict[str, Any],
                    safe: bool = True) -> str:
    """
    Render template with variables

    Args:
        template: Template string with ``${name}`` placeholders
        variables: Variables to substitute
        safe: Use safe substitution (leave missing vars untouched)

    Returns:
        Rendered string
    """
    context = {
        'YEAR': str(datetime.now().year),
        'DATE': datetime.now().strftime('%Y-%m-%d'),
    }
    context.update({key: str(value) for key, value in variables.items()})

    tmpl = string.Template(template)

    if safe:
        return tmpl.safe_substitute(context)
    else:
        return tmpl.substitute(context)


def module_name(name: str) -> str:
    """Rust module name for a project name (hyphens become underscores)"""
    return name.replace('-', '_')
