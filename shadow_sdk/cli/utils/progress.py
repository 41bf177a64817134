# shadow_sdk/cli/utils/progress.py
"""Progress display utilities"""

from contextlib import contextmanager
from typing import Any, Callable, Generator, Optional

from rich.console import Console
from rich.status import Status


@contextmanager
def spinner(description: str = "Processing...",
            console: Optional[Console] = None,
            enabled: bool = True) -> Generator[Optional[Status], None, None]:
    """Simple spinner shown while a long operation runs

    Disabled spinners yield None so callers can skip status updates.
    """
    if not enabled:
        yield None
        return

    console = console or Console()
    with console.status(description) as status:
        yield status


def run_with_progress(func: Callable[..., Any], *args,
                      description: str = "Processing...",
                      console: Optional[Console] = None,
                      enabled: bool = True,
                      **kwargs) -> Any:
    """Run a blocking call with a spinner"""
    with spinner(description, console=console, enabled=enabled):
        return func(*args, **kwargs)
