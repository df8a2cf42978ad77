"""Role advisor service.

Bridges the resolution engine with configuration and callers: validates
requests, runs lookups against a catalog snapshot and flags privileged
roles among the candidates.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from rolefit.common.config import RoleFitConfig
from rolefit.common.logger import get_logger, set_catalog_version, setup_logger
from rolefit.core.config import Settings, get_settings, load_runtime_config
from rolefit.core.rbac.catalog import RoleCatalog
from rolefit.core.rbac.directory import ActionDirectory
from rolefit.core.rbac.exceptions import EmptyRequestError
from rolefit.core.rbac.models import LeastPrivilegeResult, Operation, Role, RoleKind
from rolefit.core.rbac.privileged import is_privileged_role
from rolefit.core.rbac.resolver import calculate_least_privileged_roles
from rolefit.core.rbac.search import (
    filter_roles_by_service,
    get_actions_by_service,
    get_roles_by_type,
    get_service_namespaces,
    search_operations,
    search_roles,
)

logger = get_logger("advisor")


@dataclass
class AdvisorResult:
    """A candidate role together with its privileged flag."""

    result: LeastPrivilegeResult
    is_privileged: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = self.result.to_dict()
        data["isPrivileged"] = self.is_privileged
        return data


def _clean(operations: Optional[Sequence[str]]) -> List[str]:
    """Strip whitespace and drop blank entries, keeping order and first casing."""
    cleaned: List[str] = []
    seen = set()
    for operation in operations or []:
        operation = operation.strip()
        if operation and operation.lower() not in seen:
            seen.add(operation.lower())
            cleaned.append(operation)
    return cleaned


class RoleAdvisor:
    """
    Answers least-privilege questions against one catalog snapshot.

    Swap the catalog with ``replace_catalog`` when role data changes; the
    previous snapshot stays valid for lookups already in progress.
    """

    def __init__(self, catalog: RoleCatalog, config: Optional[RoleFitConfig] = None):
        """
        Initialize the advisor.

        Args:
            catalog: Role catalog snapshot
            config: Engine configuration (defaults when omitted)
        """
        self.config = config or RoleFitConfig()
        self._catalog = catalog
        set_catalog_version(catalog.version)

    @classmethod
    def from_settings(
        cls, catalog: RoleCatalog, settings: Optional[Settings] = None
    ) -> "RoleAdvisor":
        """Create an advisor configured from environment settings.

        Loads the YAML configuration named by the settings and sets up the
        "rolefit" logger hierarchy.
        """
        settings = settings or get_settings()
        config = load_runtime_config(settings)
        setup_logger(
            "rolefit",
            log_dir=config.log_dir,
            level=config.log_level,
            file_logging=settings.file_logging,
        )
        return cls(catalog, config)

    @property
    def catalog(self) -> RoleCatalog:
        return self._catalog

    def replace_catalog(self, catalog: RoleCatalog) -> None:
        """Swap in a new catalog snapshot."""
        logger.info(
            f"Replacing role catalog (version {self._catalog.version} -> {catalog.version})"
        )
        self._catalog = catalog
        set_catalog_version(catalog.version)

    def directory(self) -> ActionDirectory:
        """Return the catalog's action directory, building it if needed."""
        return self._catalog.action_directory(
            merge_operations=self.config.directory.merge_provider_operations,
            progress_interval=self.config.directory.progress_interval,
        )

    def find_least_privileged(
        self,
        required_actions: Sequence[str],
        required_data_actions: Optional[Sequence[str]] = None,
    ) -> List[AdvisorResult]:
        """
        Find the roles granting every requested operation, least privileged first.

        Args:
            required_actions: Control-plane operations
            required_data_actions: Data-plane operations

        Returns:
            Ranked AdvisorResult list, truncated to search.max_results if set

        Raises:
            EmptyRequestError: If no operation was requested
        """
        actions = _clean(required_actions)
        data_actions = _clean(required_data_actions)

        if not actions and not data_actions:
            raise EmptyRequestError()

        catalog = self._catalog
        results = calculate_least_privileged_roles(
            catalog.roles, actions, data_actions, matcher=catalog.matcher
        )

        max_results = self.config.search.max_results
        if max_results is not None:
            results = results[:max_results]

        privileged = set(self.config.privileged_roles)
        advised = [
            AdvisorResult(
                result=result,
                is_privileged=is_privileged_role(result.role.role_name, privileged),
            )
            for result in results
        ]

        if not advised:
            logger.info(
                f"No role grants {len(actions)} actions and "
                f"{len(data_actions)} data actions"
            )
        else:
            logger.info(
                f"Found {len(advised)} candidate roles; "
                f"best match: {advised[0].result.role.role_name}"
            )
        return advised

    def search_operations(self, query: str, limit: Optional[int] = None) -> List[Operation]:
        """Search known operations by name, display name or description."""
        if limit is None:
            limit = self.config.search.default_limit
        return search_operations(self.directory(), query, limit)

    def service_namespaces(self) -> List[str]:
        return get_service_namespaces(self.directory())

    def actions_by_service(self, service: str) -> List[Operation]:
        return get_actions_by_service(self.directory(), service)

    def search_roles(self, query: str, limit: Optional[int] = None) -> List[Role]:
        """Search roles by name or description, closest names first."""
        if limit is None:
            limit = self.config.search.default_limit
        return search_roles(self._catalog.roles, query, limit)

    def roles_by_service(self, namespace: str) -> List[Role]:
        return filter_roles_by_service(self._catalog.roles, namespace)

    def roles_by_type(self, role_type: Union[RoleKind, str]) -> List[Role]:
        return get_roles_by_type(self._catalog.roles, role_type)
