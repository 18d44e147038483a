"""Three-way version comparison using semantic versioning."""

from functools import lru_cache

import semantic_version


@lru_cache(maxsize=4096)
def parse_version(version: str) -> semantic_version.Version:
    """Parse a version string, coercing partial forms such as "1" or "1.2".

    Raises:
        ValueError: If the string cannot be read as a version.
    """
    if not isinstance(version, str) or not version.strip():
        raise ValueError(f"Invalid version: {version!r}")
    text = version.strip()
    try:
        return semantic_version.Version(text)
    except ValueError:
        return semantic_version.Version.coerce(text)


def compare_versions(left: str, right: str) -> int:
    """Compare two versions of the same archive.

    Returns:
        -1 if left < right, 0 if they have equal precedence, 1 if left > right
    """
    if not isinstance(left, str) or not isinstance(right, str):
        raise ValueError(f"Invalid version: {left!r} & {right!r}")
    if left == right:
        return 0
    lhs, rhs = parse_version(left), parse_version(right)
    # Ordering operators follow precedence and ignore build metadata
    if lhs < rhs:
        return -1
    if lhs > rhs:
        return 1
    return 0
