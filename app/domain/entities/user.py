"""Domain entity representing a household member."""

from dataclasses import dataclass
from datetime import datetime

ROLE_PARENT = "parent"
ROLE_CHILD = "child"


@dataclass
class User:
    """Core attributes describing a household member."""

    id: int | None
    name: str
    email: str
    password: str
    role: str
    family_id: int | None
    is_active: bool
    created_at: datetime | None = None

    def shares_family_with(self, other: "User") -> bool:
        """Return ``True`` when both members belong to the same family."""

        return self.family_id is not None and self.family_id == other.family_id
