"""Search over the action directory and the role catalog.

Used by autocomplete, "operations by service" and role explorer views.
Operation lookups run against a pre-built ActionDirectory; role lookups
run against the role catalog directly.
"""

from typing import Callable, Dict, List, Optional, Sequence, Tuple, TypeVar, Union

from .directory import ActionDirectory, DirectoryEntry
from .models import Operation, Role, RoleKind

T = TypeVar("T")

# Shorter queries match almost everything and are not searched
MIN_QUERY_LENGTH = 2


def get_service_from_permission(permission: str) -> str:
    """Extract the service namespace from an operation identifier.

    Example: "Provider.Storage/accounts/read" -> "Provider.Storage"
    """
    if not permission:
        return ""
    return permission.split("/")[0]


def readable_operation_name(name: str) -> str:
    """Build a display name of the form "<operation> <resource>".

    Example: "Provider.Storage/accounts/keys/read" -> "read accounts/keys"
    """
    parts = name.split("/")
    resource = "/".join(parts[1:-1])
    return f"{parts[-1]} {resource}".strip() or name


def _usage_description(role_count: int) -> str:
    return f"Used by {role_count} role{'' if role_count == 1 else 's'}"


def _to_operation(entry: DirectoryEntry, provider: Optional[str] = None) -> Operation:
    return Operation(
        name=entry.name,
        display_name=entry.display_name or readable_operation_name(entry.name),
        provider=provider or get_service_from_permission(entry.name),
        role_count=entry.role_count,
        description=entry.description or _usage_description(entry.role_count),
        origin=entry.origin,
    )


def _is_searchable(query: str) -> bool:
    return bool(query) and len(query.strip()) >= MIN_QUERY_LENGTH


def search_operations(
    directory: ActionDirectory, query: str, limit: int = 50
) -> List[Operation]:
    """Search operations by name, display name or description.

    Matching is a case-insensitive substring test. Results are ordered by
    role count, most widely granted first, keeping directory order for ties.

    Args:
        directory: Action directory to search
        query: Substring to look for (at least two characters)
        limit: Maximum number of results

    Returns:
        Matching operations
    """
    if limit <= 0 or not _is_searchable(query):
        return []

    query_lower = query.lower()
    matches = [
        entry
        for entry in directory.values()
        if query_lower in entry.name.lower()
        or query_lower in entry.display_name.lower()
        or query_lower in entry.description.lower()
    ]
    matches.sort(key=lambda entry: -entry.role_count)

    return [_to_operation(entry) for entry in matches[:limit]]


def get_service_namespaces(directory: ActionDirectory) -> List[str]:
    """List distinct service namespaces present in the directory."""
    namespaces = set()
    for entry in directory.values():
        parts = entry.name.split("/")
        if len(parts) >= 2:
            namespaces.add(parts[0])
    return sorted(namespaces)


def get_actions_by_service(directory: ActionDirectory, service: str) -> List[Operation]:
    """List the operations of one service namespace, sorted by name."""
    prefix = service + "/"
    results = [
        _to_operation(entry, service)
        for entry in directory.values()
        if entry.name.startswith(prefix)
    ]
    return sorted(results, key=lambda operation: operation.name)


def extract_service_namespaces(roles: Sequence[Role]) -> List[str]:
    """Extract service namespaces from role actions.

    Namespaces are deduplicated case-insensitively; when both casings exist
    the variant with an upper-case first letter is kept for display.
    """
    namespaces: Dict[str, str] = {}

    for role in roles:
        for permission in role.permissions:
            for action in permission.actions:
                namespace = get_service_from_permission(action)
                if not namespace or namespace == "*":
                    continue

                key = namespace.lower()
                existing = namespaces.get(key)
                if existing is None:
                    namespaces[key] = namespace
                elif namespace[0].isupper() and existing[0].islower():
                    namespaces[key] = namespace

    return sorted(namespaces.values(), key=str.lower)


def query_rank(query: str, text: str) -> Tuple[bool, bool, str]:
    """Sort key placing exact matches first, then prefix matches.

    Remaining ties are broken alphabetically, ignoring case.
    """
    query_lower = query.lower()
    text_lower = text.lower()
    return (
        text_lower != query_lower,
        not text_lower.startswith(query_lower),
        text_lower,
    )


def rank_by_query(items: Sequence[T], query: str, get_text: Callable[[T], str]) -> List[T]:
    """Order items by how closely their text matches the query."""
    return sorted(items, key=lambda item: query_rank(query, get_text(item)))


def search_roles(
    roles: Sequence[Role], query: str, limit: Optional[int] = None
) -> List[Role]:
    """Search roles whose name or description contains the query.

    Results are ranked by role name: exact name first, then names starting
    with the query, then alphabetically.

    Args:
        roles: Role catalog
        query: Substring to look for (at least two characters)
        limit: Maximum number of results (no limit when None)

    Returns:
        Matching roles
    """
    if not _is_searchable(query):
        return []

    query_lower = query.lower()
    matches = [
        role
        for role in roles
        if query_lower in role.role_name.lower()
        or query_lower in role.description.lower()
    ]
    ranked = rank_by_query(matches, query, lambda role: role.role_name)
    return ranked if limit is None else ranked[: max(limit, 0)]


def filter_roles_by_service(roles: Sequence[Role], namespace: str) -> List[Role]:
    """Roles with at least one action starting with the namespace (case-insensitive)."""
    if not namespace:
        return []

    namespace_lower = namespace.lower()
    return [
        role
        for role in roles
        if any(
            action.lower().startswith(namespace_lower)
            for permission in role.permissions
            for action in permission.actions
        )
    ]


def get_roles_by_type(
    roles: Sequence[Role], role_type: Union[RoleKind, str]
) -> List[Role]:
    """Roles of one kind; accepts a RoleKind or its string form."""
    kind = RoleKind(role_type)
    return [role for role in roles if role.role_type == kind]
