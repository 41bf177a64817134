# shadow_sdk/cli/commands/__init__.py
"""CLI commands"""

from . import init
from . import deploy
from . import convert
from . import status

__all__ = [
    "init",
    "deploy",
    "convert",
    "status",
]
