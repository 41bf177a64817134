"""Version management utilities"""

from typing import Optional

from packaging.version import parse, Version, InvalidVersion


def parse_version(version_str: str) -> Optional[Version]:
    """
    Parse version string

    Args:
        version_str: Version string

    Returns:
        Version object or None if invalid
    """
    try:
        return parse(version_str)
    except InvalidVersion:
        return None


def is_valid_version(version: str) -> bool:
    """
    Check if version string is a valid PEP 440 / semver-like version

    Args:
        version: Version string

    Returns:
        True if valid
    """
    return bool(version) and parse_version(version) is not None
