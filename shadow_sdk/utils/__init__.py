# shadow_sdk/utils/__init__.py
"""Utility functions for shadow-sdk"""

from .file_utils import (
    atomic_write,
    atomic_write_json,
    ensure_parent_dir,
)

from .template_utils import (
    render_template,
    module_name,
)

from .version_utils import (
    parse_version,
    is_valid_version,
)

from .async_utils import (
    run_async,
    gather_limited,
)

from .process_utils import (
    CommandResult,
    run_command,
)

__all__ = [
    # File utilities
    "atomic_write",
    "atomic_write_json",
    "ensure_parent_dir",

    # Template utilities
    "render_template",
    "module_name",

    # Version utilities
    "parse_version",
    "is_valid_version",

    # Async utilities
    "run_async",
    "gather_limited",

    # Process utilities
    "CommandResult",
    "run_command",
]
