"""Flattening of role permission sets into typed entries."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List

from .models import Role


class PermissionType(str, Enum):
    """The four permission buckets of a permission set."""

    ACTION = "Action"
    NOT_ACTION = "Not Action"
    DATA_ACTION = "Data Action"
    NOT_DATA_ACTION = "Not Data Action"


@dataclass(frozen=True)
class FlattenedPermission:
    type: PermissionType
    permission: str


@dataclass
class FlattenedPermissions:
    """Permissions of a role grouped by bucket."""

    actions: List[str] = field(default_factory=list)
    not_actions: List[str] = field(default_factory=list)
    data_actions: List[str] = field(default_factory=list)
    not_data_actions: List[str] = field(default_factory=list)


def flatten_role_permissions(role: Role) -> Iterator[FlattenedPermission]:
    """Yield every entry of every permission set of a role, in order."""
    for permission in role.permissions:
        for action in permission.actions:
            yield FlattenedPermission(PermissionType.ACTION, action)
        for action in permission.not_actions:
            yield FlattenedPermission(PermissionType.NOT_ACTION, action)
        for action in permission.data_actions:
            yield FlattenedPermission(PermissionType.DATA_ACTION, action)
        for action in permission.not_data_actions:
            yield FlattenedPermission(PermissionType.NOT_DATA_ACTION, action)


def get_flattened_permissions(role: Role) -> FlattenedPermissions:
    """Collect all permissions of a role grouped by bucket."""
    result = FlattenedPermissions()
    for permission in role.permissions:
        result.actions.extend(permission.actions)
        result.not_actions.extend(permission.not_actions)
        result.data_actions.extend(permission.data_actions)
        result.not_data_actions.extend(permission.not_data_actions)
    return result


def count_total_permissions(role: Role) -> int:
    """Count raw entries across all four buckets (unweighted)."""
    return sum(1 for _ in flatten_role_permissions(role))
