# shadow_sdk/cli/decorators/project.py
"""Project-related decorators for CLI commands"""

from functools import wraps
from pathlib import Path
from typing import Callable

import click

from ..utils.output import console
from ...constants import EMOJI_ERROR, EMOJI_WARNING, MANIFEST_FILE
from ...core.project_manager import find_project_root


def require_project(path_arg: str = 'path'):
    """Decorator that resolves the project root before the command runs

    The root is searched upward from the ``path_arg`` option when it is
    given, otherwise from the current directory. The resolved root
    replaces the option value.

    Args:
        path_arg: Name of the path argument

    Returns:
        Decorator function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            ctx = click.get_current_context()
            path = kwargs.get(path_arg)

            if path:
                project_root = find_project_root(path)
            else:
                project_root = ctx.obj.project_root if ctx.obj else find_project_root()

            if project_root is None:
                where = Path(path).resolve() if path else Path.cwd()
                console.print(
                    f"{EMOJI_ERROR} No {MANIFEST_FILE} found in {where} or its parents."
                )
                console.print("Run 'shadow init <name>' to create a project, "
                              "or 'shadow convert' for an existing site.")
                ctx.exit(1)

            kwargs[path_arg] = project_root
            return func(*args, **kwargs)

        return wrapper

    return decorator


def ensure_no_project(func: Callable) -> Callable:
    """Decorator that refuses to run inside an existing project

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()
        directory = kwargs.get('directory') or '.'
        project_root = find_project_root(directory)

        if project_root is not None:
            console.print(
                f"{EMOJI_WARNING} Already inside a Shadow project: {project_root}"
            )
            ctx.exit(1)

        return func(*args, **kwargs)

    return wrapper
