"""Wildcard matching for operation identifiers.

Operation identifiers are "/"-delimited and compared case-insensitively.
A "*" in a pattern matches any substring, including an empty one, and
need not be aligned to a segment boundary::

    matches_wildcard("Provider.Storage/*", "provider.storage/accounts/read")  # True
    matches_wildcard("*/read", "Provider.Compute/vms/read")                   # True
    matches_wildcard("Provider.*/write", "Provider.Storage/accounts/read")    # False

Every other character is matched literally, so there is no invalid pattern.
"""

import re
import threading
from typing import Dict, Optional


class WildcardMatcher:
    """Matches operations against wildcard patterns.

    Compiled expressions are cached per normalized pattern; directory
    construction matches the same few patterns against every known
    operation.
    """

    def __init__(self) -> None:
        self._cache: Dict[str, re.Pattern] = {}
        self._lock = threading.Lock()

    def matches(self, pattern: str, operation: str) -> bool:
        """Check whether an operation is covered by a pattern.

        Args:
            pattern: Literal operation or wildcard pattern
            operation: Concrete operation identifier

        Returns:
            True if the operation matches the pattern
        """
        if not pattern or not operation:
            return False

        normalized_pattern = pattern.lower()
        normalized_operation = operation.lower()

        if normalized_pattern == normalized_operation:
            return True

        if normalized_pattern == "*":
            return True

        return self.compile(normalized_pattern).match(normalized_operation) is not None

    def compile(self, pattern: str) -> re.Pattern:
        """Return the cached expression for a pattern, building it if needed."""
        normalized = pattern.lower()
        regex = self._cache.get(normalized)
        if regex is None:
            body = ".*".join(re.escape(part) for part in normalized.split("*"))
            regex = re.compile(f"{body}\\Z", re.DOTALL)
            with self._lock:
                regex = self._cache.setdefault(normalized, regex)
        return regex

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        """Drop all cached expressions (mainly for testing)."""
        with self._lock:
            self._cache.clear()


# Shared matcher instance
_matcher = WildcardMatcher()


def get_matcher() -> WildcardMatcher:
    """Get the shared wildcard matcher.

    Returns:
        Shared WildcardMatcher instance
    """
    return _matcher


def matches_wildcard(
    pattern: str, operation: str, matcher: Optional[WildcardMatcher] = None
) -> bool:
    """Check whether an operation matches a wildcard pattern.

    Args:
        pattern: The pattern to match against (e.g. "Provider.Storage/*")
        operation: The operation to check (e.g. "Provider.Storage/accounts/read")
        matcher: Matcher whose cache to use; the shared one by default

    Returns:
        True if the operation matches the pattern, False otherwise
    """
    return (matcher or _matcher).matches(pattern, operation)


def is_wildcard(entry: str) -> bool:
    """Check whether a permission entry contains a wildcard."""
    return "*" in entry
