"""Highly privileged role names.

These roles grant wide-ranging access, including the ability to modify
access control itself, and should be flagged when they come up as a
candidate for a request.
"""

from typing import Iterable, List, Optional, Sequence

from ...common.config import DEFAULT_PRIVILEGED_ROLES
from .models import Role


PRIVILEGED_ROLES = tuple(DEFAULT_PRIVILEGED_ROLES)


def is_privileged_role(
    role_name: str, privileged: Optional[Iterable[str]] = None
) -> bool:
    """Check if a role name is in the privileged roles list (case-sensitive)."""
    names = PRIVILEGED_ROLES if privileged is None else privileged
    return role_name in names


def get_privileged_roles(
    roles: Sequence[Role], privileged: Optional[Iterable[str]] = None
) -> List[Role]:
    """Filter a list of roles to the privileged ones."""
    names = set(PRIVILEGED_ROLES if privileged is None else privileged)
    return [role for role in roles if role.role_name in names]
