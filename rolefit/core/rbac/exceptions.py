"""Exceptions raised around the role resolution engine.

The engine itself treats all string input as valid data; these are raised
by the catalog and service layers that feed it.
"""

from typing import Optional


class RoleFitError(Exception):
    """Base class for rolefit errors."""


class CatalogError(RoleFitError):
    """Raised when role or operation records cannot form a catalog."""


class DuplicateRoleError(CatalogError):
    """Raised when two roles in one catalog share the same handle."""

    def __init__(self, role_key: str):
        super().__init__(f"Duplicate role in catalog: {role_key}")
        self.role_key = role_key


class EmptyRequestError(RoleFitError):
    """Raised when a least-privilege lookup names no operations."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message or "At least one action or data action must be requested"
        )
