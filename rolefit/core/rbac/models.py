"""Role definition model for rolefit.

Role records arrive from a provider catalog in its camelCase shape, e.g.::

    {
        "id": "acdd72a7-3385-48ef-bd42-f606fba81ae7",
        "roleName": "Reader",
        "roleType": "BuiltInRole",
        "permissions": [{"actions": ["*/read"], "notActions": []}],
        "assignableScopes": ["/"],
    }

Fields may also be given in snake_case. Missing or null permission lists
are treated as empty.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoleKind(str, Enum):
    """Origin of a role definition."""

    BUILT_IN = "BuiltInRole"
    CUSTOM = "CustomRole"

    @classmethod
    def _missing_(cls, value: object) -> Optional["RoleKind"]:
        # Accept the short forms ("BuiltIn", "custom") some catalogs use
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if normalized in (member.value.lower(), member.value[:-4].lower()):
                    return member
        return None


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


class PermissionSet(BaseModel):
    """One allow/deny bundle of a role.

    Deny lists narrow what the allow list of the same bundle grants; they
    have no effect on other bundles of the role.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    actions: List[str] = Field(default_factory=list)
    not_actions: List[str] = Field(default_factory=list, alias="notActions")
    data_actions: List[str] = Field(default_factory=list, alias="dataActions")
    not_data_actions: List[str] = Field(default_factory=list, alias="notDataActions")

    @field_validator(
        "actions", "not_actions", "data_actions", "not_data_actions", mode="before"
    )
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _none_to_list(value)


class Role(BaseModel):
    """A role definition: an ordered list of permission sets plus metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = ""
    role_name: str = Field("", alias="roleName")
    role_type: RoleKind = Field(RoleKind.BUILT_IN, alias="roleType")
    description: str = ""
    permissions: List[PermissionSet] = Field(default_factory=list)
    assignable_scopes: List[str] = Field(default_factory=list, alias="assignableScopes")
    permission_count: Optional[float] = Field(None, alias="permissionCount")

    @field_validator("permissions", "assignable_scopes", mode="before")
    @classmethod
    def coerce_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("role_type", mode="before")
    @classmethod
    def coerce_role_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return RoleKind(value)
        return value

    @property
    def key(self) -> str:
        """Stable handle used to refer to this role across passes."""
        return self.id or self.role_name

    @property
    def is_custom(self) -> bool:
        return self.role_type == RoleKind.CUSTOM

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the provider's camelCase record shape."""
        return self.model_dump(by_alias=True, mode="json")


class ProviderOperation(BaseModel):
    """An operation exposed by a provider, independent of any role."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    provider: str = ""
    display_name: str = Field("", alias="displayName")
    description: str = ""
    origin: str = ""


@dataclass
class Operation:
    """An operation as returned by directory searches."""

    name: str
    display_name: str
    provider: str
    role_count: int = 0
    description: str = ""
    origin: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "displayName": self.display_name,
            "description": self.description,
            "origin": self.origin,
            "provider": self.provider,
            "roleCount": self.role_count,
        }


@dataclass
class LeastPrivilegeResult:
    """A role that satisfies a request, with its ranking data."""

    role: Role
    matching_actions: List[str] = field(default_factory=list)
    matching_data_actions: List[str] = field(default_factory=list)
    permission_count: float = 0
    is_exact_match: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for presentation layers."""
        return {
            "role": self.role.to_dict(),
            "matchingActions": list(self.matching_actions),
            "matchingDataActions": list(self.matching_data_actions),
            "permissionCount": self.permission_count,
            "isExactMatch": self.is_exact_match,
        }
