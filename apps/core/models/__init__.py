from .base import BusinessOwnedModel, BusinessScopedQuerySet, MissingBusinessContext
from .business import Business
from .membership import BusinessUser
from .role import Role, RoleAssignment

__all__ = [
    "Business",
    "BusinessOwnedModel",
    "BusinessScopedQuerySet",
    "BusinessUser",
    "MissingBusinessContext",
    "Role",
    "RoleAssignment",
]
