"""Least-privilege role resolution.

Finds the roles that grant every requested action and data action and
ranks them from least to most privileged.

Grant semantics follow the provider's allow/deny model:
  1. An operation is allowed by a permission set when any entry of its
     allow list matches it.
  2. A deny entry of the same permission set that also matches the
     operation removes the grant (deny overrides allow).
  3. A role grants the operation when any of its permission sets does.
"""

from typing import List, Optional, Sequence

from ...common.logger import get_logger
from .matcher import WildcardMatcher, get_matcher
from .models import LeastPrivilegeResult, PermissionSet, Role
from .weights import effective_weight

logger = get_logger("resolver")

ACTION = "action"
DATA_ACTION = "dataAction"


def _permission_set_grants(
    permission: PermissionSet,
    required: str,
    kind: str,
    matcher: WildcardMatcher,
) -> bool:
    if kind == ACTION:
        allow_list, deny_list = permission.actions, permission.not_actions
    else:
        allow_list, deny_list = permission.data_actions, permission.not_data_actions

    if not any(matcher.matches(allowed, required) for allowed in allow_list):
        return False

    return not any(matcher.matches(denied, required) for denied in deny_list)


def check_permission_access(
    role: Role,
    required: str,
    kind: str = ACTION,
    matcher: Optional[WildcardMatcher] = None,
) -> bool:
    """Check whether a role grants an operation.

    Args:
        role: Role definition
        required: Concrete operation identifier
        kind: ACTION for control-plane, DATA_ACTION for data-plane lists
        matcher: Wildcard matcher to use

    Returns:
        True if any permission set grants the operation net of its denials
    """
    matcher = matcher or get_matcher()
    return any(
        _permission_set_grants(permission, required, kind, matcher)
        for permission in role.permissions
    )


def has_permission(
    role: Role, required_action: str, matcher: Optional[WildcardMatcher] = None
) -> bool:
    """Check if a role grants a control-plane action."""
    return check_permission_access(role, required_action, ACTION, matcher)


def has_data_permission(
    role: Role, required_data_action: str, matcher: Optional[WildcardMatcher] = None
) -> bool:
    """Check if a role grants a data-plane action."""
    return check_permission_access(role, required_data_action, DATA_ACTION, matcher)


def _collect_granted(
    role: Role, required: Sequence[str], kind: str, matcher: WildcardMatcher
) -> Optional[List[str]]:
    """Return the requested operations if the role grants all of them."""
    granted = []
    for operation in required:
        if not check_permission_access(role, operation, kind, matcher):
            return None
        granted.append(operation)
    return granted


def calculate_least_privileged_roles(
    roles: Sequence[Role],
    required_actions: Sequence[str],
    required_data_actions: Optional[Sequence[str]] = None,
    *,
    matcher: Optional[WildcardMatcher] = None,
) -> List[LeastPrivilegeResult]:
    """Find roles that satisfy all requested operations, least privileged first.

    Ranking:
      1. Exact matches (roles granting nothing beyond the request)
      2. Ascending privilege weight
    Ties keep catalog order.

    Args:
        roles: Role catalog
        required_actions: Control-plane operations to grant
        required_data_actions: Data-plane operations to grant
        matcher: Wildcard matcher to use

    Returns:
        Ordered list of LeastPrivilegeResult
    """
    matcher = matcher or get_matcher()
    required_actions = list(required_actions)
    required_data_actions = list(required_data_actions or [])
    requested_total = len(required_actions) + len(required_data_actions)

    results: List[LeastPrivilegeResult] = []

    for role in roles:
        matching_actions = _collect_granted(role, required_actions, ACTION, matcher)
        if matching_actions is None:
            continue

        matching_data_actions = _collect_granted(
            role, required_data_actions, DATA_ACTION, matcher
        )
        if matching_data_actions is None:
            continue

        weight = effective_weight(role)
        is_exact_match = (
            len(matching_actions) == len(required_actions)
            and len(matching_data_actions) == len(required_data_actions)
            and weight == requested_total
        )

        results.append(
            LeastPrivilegeResult(
                role=role,
                matching_actions=matching_actions,
                matching_data_actions=matching_data_actions,
                permission_count=weight,
                is_exact_match=is_exact_match,
            )
        )

    results.sort(key=lambda result: (not result.is_exact_match, result.permission_count))

    logger.debug(
        f"{len(results)} of {len(roles)} roles grant "
        f"{len(required_actions)} actions and {len(required_data_actions)} data actions"
    )
    return results
