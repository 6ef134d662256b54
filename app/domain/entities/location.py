"""Location hierarchy node.

Represents one administrative unit independent of persistence. The
hierarchy is a strict tree: every node except a province has exactly
one parent.
"""

from dataclasses import dataclass

from app.domain.enums import LocationType
from app.domain.exceptions import ValidationException


@dataclass(frozen=True)
class LocationNode:
    """Node of the Province > District > Sector > Cell > Village > Isibo > House tree."""

    id: str
    name: str
    type: LocationType
    parent_id: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationException("Location ID is required", field="id")
        if self.type == LocationType.PROVINCE and self.parent_id is not None:
            raise ValidationException("A province has no parent", field="parent_id")
        if self.type != LocationType.PROVINCE and not self.parent_id:
            raise ValidationException(
                f"A {self.type.value} must have a parent", field="parent_id"
            )

    @property
    def is_root(self) -> bool:
        return self.type == LocationType.PROVINCE
