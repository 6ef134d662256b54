"""Domain layer: entities, value objects, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.entities import ActorContext, LocationNode
from app.domain.enums import (
    LocationType,
    ScopeTarget,
    SearchEntity,
    TaskStatus,
    TimeRange,
    UserRole,
)
from app.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    CommunityAdminException,
    ResourceNotFoundException,
    ScopeViolationException,
    UpstreamFailureException,
    UpstreamTimeoutException,
    ValidationException,
)
from app.domain.value_objects import DateRange, Pagination, Predicate

__all__ = [
    # Entities
    "ActorContext",
    "LocationNode",
    # Enums
    "LocationType",
    "ScopeTarget",
    "SearchEntity",
    "TaskStatus",
    "TimeRange",
    "UserRole",
    # Exceptions
    "AuthenticationException",
    "AuthorizationException",
    "CommunityAdminException",
    "ResourceNotFoundException",
    "ScopeViolationException",
    "UpstreamFailureException",
    "UpstreamTimeoutException",
    "ValidationException",
    # Value objects
    "DateRange",
    "Pagination",
    "Predicate",
]
