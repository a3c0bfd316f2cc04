"""Case-insensitive "method" / "method:source" type filters."""

from typing import Iterable, Optional, Tuple


def parse_type(type_filter: str) -> Tuple[str, Optional[str]]:
    """Split a filter into lower-cased (method, source). Source is None when absent."""
    # fields past method:source are ignored
    parts = type_filter.split(':')
    source = parts[1].lower() if len(parts) > 1 else None
    return parts[0].lower(), source


def type_match(primary_tag: str, source_tag: str, types: Iterable[str]) -> bool:
    """Check a primary/source tag pair against type filters.

    A bare method matches any source. No filters matches everything.
    """
    types = list(types)
    if not types:
        return True

    method = (primary_tag or "").lower()
    source = (source_tag or "").lower()
    for t in types:
        m, s = parse_type(t)
        if method == m and (s is None or source == s):
            return True
    return False


def feature_type(primary_tag: str, source_tag: str) -> str:
    """Format a tag pair the way filters are written."""
    return f"{primary_tag}:{source_tag}" if source_tag else primary_tag
