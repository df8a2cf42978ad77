"""Services built on the rolefit engine."""

from .advisor import AdvisorResult, RoleAdvisor

__all__ = ["AdvisorResult", "RoleAdvisor"]
