"""Privilege weighting for role definitions.

A role's weight is a heuristic breadth score used to rank roles from most
to least restrictive (lower = more restrictive = least privilege):

  - Full wildcard ("*"): 10,000 points
  - Partial wildcard (e.g. "Provider.Storage/*"): max(100, 1000 / segments),
    so broader patterns with fewer segments score higher
  - Literal operation: 1 point
  - Each notActions / notDataActions entry: -0.5 points

The score is clamped at 0. It is a relative ranking, not a permission count.
"""

from typing import Iterable

from .matcher import is_wildcard
from .models import Role


FULL_WILDCARD_WEIGHT = 10000
PARTIAL_WILDCARD_MAX_WEIGHT = 1000
PARTIAL_WILDCARD_MIN_WEIGHT = 100
LITERAL_WEIGHT = 1
DENY_WEIGHT = 0.5


def pattern_weight(entry: str) -> float:
    """Weight contributed by a single allow-list entry."""
    if entry == "*":
        return FULL_WILDCARD_WEIGHT
    if is_wildcard(entry):
        segments = len(entry.split("/"))
        return max(PARTIAL_WILDCARD_MIN_WEIGHT, PARTIAL_WILDCARD_MAX_WEIGHT / segments)
    return LITERAL_WEIGHT


def _allow_weight(entries: Iterable[str]) -> float:
    return sum(pattern_weight(entry) for entry in entries)


def privilege_weight(role: Role) -> float:
    """Calculate the weighted breadth score of a role.

    Args:
        role: Role definition

    Returns:
        Weighted permission count (minimum 0)
    """
    count: float = 0

    for permission in role.permissions:
        count += _allow_weight(permission.actions)
        count -= len(permission.not_actions) * DENY_WEIGHT
        count += _allow_weight(permission.data_actions)
        count -= len(permission.not_data_actions) * DENY_WEIGHT

    return max(0, count)


# Name used by catalog data ("permissionCount")
calculate_permission_count = privilege_weight


def effective_weight(role: Role) -> float:
    """Return the role's pre-computed weight, computing it when absent."""
    if role.permission_count is not None:
        return role.permission_count
    return privilege_weight(role)
