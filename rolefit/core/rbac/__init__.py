"""Role resolution engine for rolefit.

This module provides wildcard matching, privilege weighting, action
directory construction and least-privilege role resolution.
"""

from .models import (
    LeastPrivilegeResult,
    Operation,
    PermissionSet,
    ProviderOperation,
    Role,
    RoleKind,
)
from .matcher import WildcardMatcher, get_matcher, matches_wildcard
from .weights import calculate_permission_count, effective_weight, privilege_weight
from .directory import ActionDirectory, DirectoryEntry, build_action_directory
from .resolver import (
    calculate_least_privileged_roles,
    has_data_permission,
    has_permission,
)
from .catalog import RoleCatalog
from .exceptions import (
    CatalogError,
    DuplicateRoleError,
    EmptyRequestError,
    RoleFitError,
)

__all__ = [
    "ActionDirectory",
    "CatalogError",
    "DirectoryEntry",
    "DuplicateRoleError",
    "EmptyRequestError",
    "LeastPrivilegeResult",
    "Operation",
    "PermissionSet",
    "ProviderOperation",
    "Role",
    "RoleCatalog",
    "RoleFitError",
    "RoleKind",
    "WildcardMatcher",
    "build_action_directory",
    "calculate_least_privileged_roles",
    "calculate_permission_count",
    "effective_weight",
    "get_matcher",
    "has_data_permission",
    "has_permission",
    "matches_wildcard",
    "privilege_weight",
]
