"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from app.domain.entities.actor import ActorContext
from app.domain.entities.location import LocationNode

__all__ = [
    "ActorContext",
    "LocationNode",
]
