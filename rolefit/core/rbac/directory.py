"""Action directory construction.

Scans a role catalog once and produces a canonical catalog of every known
operation: its most common casing and the number of roles that grant it,
either by listing it or through a wildcard that is not denied.

Building the directory matches every wildcard grant against every known
operation, so it is run once per catalog version and cached.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from ...common.logger import get_logger
from .exceptions import DuplicateRoleError
from .matcher import WildcardMatcher, get_matcher, is_wildcard
from .models import ProviderOperation, Role

logger = get_logger("directory")

ProgressCallback = Callable[[int, int], None]

# Lower-case key -> casing variant -> occurrences
ActionCasingMap = Dict[str, Counter]
# Lower-case key -> handles of roles listing it explicitly
ExplicitActionRolesMap = Dict[str, Set[str]]


@dataclass(frozen=True)
class WildcardGrant:
    """A wildcard allow entry together with the deny lists of its set."""

    pattern: str
    role_key: str
    not_actions: Tuple[str, ...] = ()
    not_data_actions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DirectoryEntry:
    """A known operation in the action directory.

    ``display_name``, ``description`` and ``origin`` come from the provider
    operation catalog and stay empty for operations only roles mention.
    """

    key: str
    name: str
    role_count: int
    display_name: str = ""
    description: str = ""
    origin: str = ""

    @property
    def has_metadata(self) -> bool:
        return bool(self.display_name or self.description or self.origin)

    def to_record(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "key": self.key,
            "name": self.name,
            "roleCount": self.role_count,
        }
        if self.display_name:
            record["displayName"] = self.display_name
        if self.description:
            record["description"] = self.description
        if self.origin:
            record["origin"] = self.origin
        return record


@dataclass
class ActionDirectory(Mapping[str, DirectoryEntry]):
    """Read-only mapping of lower-case operation key to DirectoryEntry."""

    entries: Dict[str, DirectoryEntry] = field(default_factory=dict)

    def __getitem__(self, key: str) -> DirectoryEntry:
        return self.entries[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self.entries

    def role_count(self, operation: str) -> int:
        """Number of roles granting an operation (0 when unknown)."""
        entry = self.entries.get(operation.lower())
        return entry.role_count if entry else 0

    def uncovered(self) -> List[DirectoryEntry]:
        """Entries that no known role grants."""
        return [entry for entry in self.entries.values() if entry.role_count == 0]

    def to_records(self) -> List[Dict[str, Any]]:
        """Export as {key, name, roleCount} records plus any provider metadata."""
        return [entry.to_record() for entry in self.entries.values()]

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "ActionDirectory":
        """Rebuild a directory from exported records."""
        entries = {}
        for record in records:
            key = str(record.get("key") or record["name"]).lower()
            entries[key] = DirectoryEntry(
                key=key,
                name=record["name"],
                role_count=int(record.get("roleCount", 0)),
                display_name=record.get("displayName") or "",
                description=record.get("description") or "",
                origin=record.get("origin") or "",
            )
        return cls(entries)


def collect_explicit_action_metadata(
    roles: Sequence[Role],
) -> Tuple[ActionCasingMap, ExplicitActionRolesMap]:
    """Collect literal actions and data actions from every role.

    Records how often each casing variant appears, to pick canonical names,
    and which roles list each action.

    Args:
        roles: Role catalog

    Returns:
        Tuple of (casing map, explicit action roles map)
    """
    casing_map: ActionCasingMap = {}
    explicit_roles: ExplicitActionRolesMap = {}

    for role in roles:
        for permission in role.permissions:
            for action in [*permission.actions, *permission.data_actions]:
                if is_wildcard(action) or not action:
                    continue

                key = action.lower()
                casing_map.setdefault(key, Counter())[action] += 1
                explicit_roles.setdefault(key, set()).add(role.key)

    return casing_map, explicit_roles


def collect_wildcard_patterns(roles: Sequence[Role]) -> List[WildcardGrant]:
    """Collect wildcard allow entries and the deny lists that apply to them.

    Covers both control-plane actions and data-plane actions.

    Args:
        roles: Role catalog

    Returns:
        List of WildcardGrant
    """
    grants: List[WildcardGrant] = []

    for role in roles:
        for permission in role.permissions:
            not_actions = tuple(permission.not_actions)
            not_data_actions = tuple(permission.not_data_actions)
            for action in [*permission.actions, *permission.data_actions]:
                if is_wildcard(action):
                    grants.append(
                        WildcardGrant(
                            pattern=action,
                            role_key=role.key,
                            not_actions=not_actions,
                            not_data_actions=not_data_actions,
                        )
                    )

    return grants


def canonical_casing(variants: Counter) -> str:
    """Pick the most frequent casing variant; the first seen wins ties."""
    name = ""
    best = 0
    for casing, count in variants.items():
        if count > best:
            best = count
            name = casing
    return name


def _is_denied(grant: WildcardGrant, name: str, matcher: WildcardMatcher) -> bool:
    for denied in grant.not_actions:
        if matcher.matches(denied, name):
            return True
    for denied in grant.not_data_actions:
        if matcher.matches(denied, name):
            return True
    return False


def resolve_action_entries(
    casing_map: ActionCasingMap,
    explicit_roles: ExplicitActionRolesMap,
    wildcard_grants: Sequence[WildcardGrant],
    *,
    matcher: Optional[WildcardMatcher] = None,
    progress_interval: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ActionDirectory:
    """Combine explicit grants with wildcard grants for each known action.

    A wildcard grant adds its role to an action unless the action is also
    matched by that grant's own deny lists.

    Args:
        casing_map: Casing variants per lower-case key
        explicit_roles: Roles listing each key explicitly
        wildcard_grants: Collected wildcard grants
        matcher: Wildcard matcher to use
        progress_interval: Report progress every this many actions
        progress_callback: Called with (processed, total) on each report

    Returns:
        ActionDirectory with one entry per key in casing_map
    """
    matcher = matcher or get_matcher()
    entries: Dict[str, DirectoryEntry] = {}
    total = len(casing_map)

    for processed, (key, variants) in enumerate(casing_map.items(), start=1):
        name = canonical_casing(variants)
        role_keys = set(explicit_roles.get(key, ()))

        for grant in wildcard_grants:
            if grant.role_key in role_keys:
                continue
            if matcher.matches(grant.pattern, name) and not _is_denied(
                grant, name, matcher
            ):
                role_keys.add(grant.role_key)

        entries[key] = DirectoryEntry(key=key, name=name, role_count=len(role_keys))

        if progress_interval and processed % progress_interval == 0:
            logger.info(f"Processing actions: {processed}/{total}...")
            if progress_callback is not None:
                progress_callback(processed, total)

    return ActionDirectory(entries)


def merge_operation_catalog(
    directory: ActionDirectory,
    operations: Iterable[ProviderOperation],
) -> ActionDirectory:
    """Add provider operations that no role mentions.

    Operations already in the directory keep their name and role count and
    only pick up the provider's display name, description and origin. New
    ones are added with a role count of zero.

    Args:
        directory: Directory built from roles
        operations: Operations exposed by providers

    Returns:
        New ActionDirectory including the merged operations
    """
    entries = dict(directory.entries)
    added = 0

    for operation in operations:
        if not operation.name:
            continue
        key = operation.name.lower()
        existing = entries.get(key)
        if existing is None:
            entries[key] = DirectoryEntry(
                key=key,
                name=operation.name,
                role_count=0,
                display_name=operation.display_name,
                description=operation.description,
                origin=operation.origin,
            )
            added += 1
        elif not existing.has_metadata:
            entries[key] = replace(
                existing,
                display_name=operation.display_name,
                description=operation.description,
                origin=operation.origin,
            )

    logger.debug(f"Merged {added} provider operations not granted by any role")
    return ActionDirectory(entries)


def build_action_directory(
    roles: Sequence[Role],
    operations: Optional[Iterable[ProviderOperation]] = None,
    *,
    matcher: Optional[WildcardMatcher] = None,
    progress_interval: Optional[int] = None,
    progress_callback: Optional[ProgressCallback] = None,
) -> ActionDirectory:
    """Build the action directory for a role catalog.

    Args:
        roles: Role catalog
        operations: Optional provider operation catalog to merge in
        matcher: Wildcard matcher to use
        progress_interval: Report progress every this many actions
        progress_callback: Called with (processed, total) on each report

    Returns:
        ActionDirectory keyed by lower-case operation name

    Raises:
        DuplicateRoleError: If two roles share the same key
    """
    logger.info("Generating action directory...")

    seen: Set[str] = set()
    for role in roles:
        if role.key in seen:
            raise DuplicateRoleError(role.key)
        seen.add(role.key)

    casing_map, explicit_roles = collect_explicit_action_metadata(roles)
    logger.info(f"Found {len(casing_map)} unique actions across {len(roles)} roles")

    wildcard_grants = collect_wildcard_patterns(roles)
    logger.info(f"Found {len(wildcard_grants)} wildcard patterns")

    directory = resolve_action_entries(
        casing_map,
        explicit_roles,
        wildcard_grants,
        matcher=matcher,
        progress_interval=progress_interval,
        progress_callback=progress_callback,
    )

    if operations is not None:
        directory = merge_operation_catalog(directory, operations)

    logger.info(f"Generated directory with {len(directory)} unique actions")
    return directory
