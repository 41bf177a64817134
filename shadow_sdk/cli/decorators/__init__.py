# shadow_sdk/cli/decorators/__init__.py
"""CLI decorators"""

from .project import require_project, ensure_no_project

__all__ = [
    'require_project',
    'ensure_no_project',
]
