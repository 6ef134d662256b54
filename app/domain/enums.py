"""Domain enumerations for community administration.

Enums represent fixed sets of domain values (roles, statuses, location
levels, searchable entity kinds).
"""

from enum import Enum


class UserRole(str, Enum):
    """Role of a user; leader roles carry a jurisdiction at their own level."""

    ADMIN = "ADMIN"
    CELL_LEADER = "CELL_LEADER"
    VILLAGE_LEADER = "VILLAGE_LEADER"
    ISIBO_LEADER = "ISIBO_LEADER"
    HOUSE_REPRESENTATIVE = "HOUSE_REPRESENTATIVE"
    CITIZEN = "CITIZEN"
    VOLUNTEER = "VOLUNTEER"
    GUEST = "GUEST"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid role values as strings."""
        return [role.value for role in cls]


class TaskStatus(str, Enum):
    """Lifecycle status shared by activities and tasks."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ONGOING = "ongoing"
    UPCOMING = "upcoming"
    RESCHEDULED = "rescheduled"
    POSTPONED = "postponed"
    PENDING = "pending"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]


class LocationType(str, Enum):
    """Administrative level of a location node, largest first."""

    PROVINCE = "province"
    DISTRICT = "district"
    SECTOR = "sector"
    CELL = "cell"
    VILLAGE = "village"
    ISIBO = "isibo"
    HOUSE = "house"

    @property
    def parent(self) -> "LocationType | None":
        """Level directly above this one, or None for a province."""
        order = list(LocationType)
        index = order.index(self)
        return order[index - 1] if index > 0 else None

    @property
    def child(self) -> "LocationType | None":
        """Level directly below this one, or None for a house."""
        order = list(LocationType)
        index = order.index(self)
        return order[index + 1] if index + 1 < len(order) else None


class ScopeTarget(str, Enum):
    """Record type a scope predicate is built for."""

    PROVINCE = "province"
    DISTRICT = "district"
    SECTOR = "sector"
    CELL = "cell"
    VILLAGE = "village"
    ISIBO = "isibo"
    HOUSE = "house"
    USER = "user"
    ACTIVITY = "activity"
    TASK = "task"
    REPORT = "report"

    @classmethod
    def for_location(cls, location_type: LocationType) -> "ScopeTarget":
        """Return the target matching a location level."""
        return cls(location_type.value)


class SearchEntity(str, Enum):
    """Entity buckets of the global search; ALL expands to every bucket."""

    ACTIVITIES = "activities"
    TASKS = "tasks"
    REPORTS = "reports"
    USERS = "users"
    LOCATIONS = "locations"
    ALL = "all"

    @classmethod
    def concrete(cls) -> list["SearchEntity"]:
        """Every bucket except ALL, in presentation order."""
        return [entity for entity in cls if entity is not cls.ALL]


class TimeRange(str, Enum):
    """Analytics look-back presets ending at request time."""

    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"


# Roles whose analytics are bounded by a single location node.
JURISDICTION_LEVELS: dict[UserRole, LocationType] = {
    UserRole.CELL_LEADER: LocationType.CELL,
    UserRole.VILLAGE_LEADER: LocationType.VILLAGE,
    UserRole.ISIBO_LEADER: LocationType.ISIBO,
}
