"""Persistence models: ORM entities and mixins.

Importing this package registers every table on Base.metadata, which the
relationship-path compiler relies on to resolve string targets.
"""

from app.infrastructure.persistence.models.activity import Activity, Task
from app.infrastructure.persistence.models.location import (
    Cell,
    District,
    House,
    Isibo,
    Province,
    Sector,
    Village,
)
from app.infrastructure.persistence.models.mixins import (
    BaseModel,
    LeadershipMixin,
    TimestampMixin,
    UuidMixin,
)
from app.infrastructure.persistence.models.report import (
    Report,
    ReportAttendance,
    ReportEvidence,
)
from app.infrastructure.persistence.models.user import Profile, User

__all__ = [
    "Activity",
    "BaseModel",
    "Cell",
    "District",
    "House",
    "Isibo",
    "LeadershipMixin",
    "Profile",
    "Province",
    "Report",
    "ReportAttendance",
    "ReportEvidence",
    "Sector",
    "TimestampMixin",
    "User",
    "UuidMixin",
    "Village",
]
