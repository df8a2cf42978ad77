"""Immutable role catalog snapshots.

A catalog is built once from role records and never changed in place.
When the role data changes, a new catalog is built and swapped in; the
action directory is cached per catalog instance.
"""

import threading
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    Mapping,
    Optional,
    Tuple,
)

from pydantic import ValidationError

from ...common.logger import get_logger
from .directory import ActionDirectory, ProgressCallback, build_action_directory
from .exceptions import CatalogError, DuplicateRoleError
from .matcher import WildcardMatcher, get_matcher
from .models import ProviderOperation, Role
from .weights import privilege_weight

logger = get_logger("catalog")


class RoleCatalog:
    """An ordered, read-only snapshot of role definitions."""

    def __init__(
        self,
        roles: Iterable[Role],
        operations: Optional[Iterable[ProviderOperation]] = None,
        version: Optional[str] = None,
        matcher: Optional[WildcardMatcher] = None,
    ):
        """
        Initialize the catalog.

        Args:
            roles: Role definitions, in catalog order
            operations: Optional provider operation catalog for directory merges
            version: Opaque label of the role data this snapshot was built from
            matcher: Wildcard matcher used for the directory (shared one by default)

        Raises:
            DuplicateRoleError: If two roles share the same key
        """
        self._roles: Tuple[Role, ...] = tuple(roles)
        self._operations: Optional[Tuple[ProviderOperation, ...]] = (
            tuple(operations) if operations is not None else None
        )
        self.version = version
        self.matcher = matcher or get_matcher()

        self._by_key: Dict[str, Role] = {}
        for role in self._roles:
            if role.key in self._by_key:
                raise DuplicateRoleError(role.key)
            self._by_key[role.key] = role

        self._directory: Optional[ActionDirectory] = None
        self._directory_lock = threading.Lock()

    @classmethod
    def from_records(
        cls,
        records: Iterable[Mapping[str, Any]],
        operations: Optional[Iterable[Mapping[str, Any]]] = None,
        version: Optional[str] = None,
    ) -> "RoleCatalog":
        """Build a catalog from plain role and operation records.

        Raises:
            CatalogError: If a record does not describe a valid role or operation
        """
        try:
            roles = [Role.model_validate(record) for record in records]
            provider_operations = (
                [ProviderOperation.model_validate(op) for op in operations]
                if operations is not None
                else None
            )
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog record: {e}") from e

        logger.debug(f"Loaded {len(roles)} role records (version={version})")
        return cls(roles, provider_operations, version)

    @property
    def roles(self) -> Tuple[Role, ...]:
        return self._roles

    @property
    def operations(self) -> Optional[Tuple[ProviderOperation, ...]]:
        return self._operations

    def __len__(self) -> int:
        return len(self._roles)

    def __iter__(self) -> Iterator[Role]:
        return iter(self._roles)

    def get_role(self, key: str) -> Optional[Role]:
        """Look up a role by its key."""
        return self._by_key.get(key)

    def with_weights(self) -> "RoleCatalog":
        """Return a new catalog whose roles carry a pre-computed weight."""
        weighted = [
            role.model_copy(update={"permission_count": privilege_weight(role)})
            for role in self._roles
        ]
        return RoleCatalog(weighted, self._operations, self.version, self.matcher)

    def action_directory(
        self,
        *,
        merge_operations: bool = True,
        progress_interval: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ActionDirectory:
        """Return the action directory, building it on first use.

        Build options only apply to the first call for this catalog.
        """
        if self._directory is not None:
            return self._directory

        with self._directory_lock:
            if self._directory is None:
                self._directory = build_action_directory(
                    self._roles,
                    self._operations if merge_operations else None,
                    matcher=self.matcher,
                    progress_interval=progress_interval,
                    progress_callback=progress_callback,
                )
        return self._directory

