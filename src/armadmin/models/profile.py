"""User profile model."""

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Access role of an app user."""

    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value) -> "Role":
        """Read a stored role; null or unknown values count as a plain user."""
        try:
            return cls(value)
        except ValueError:
            return cls.USER


@dataclass
class Profile:
    """The app-side record attached to an auth identity."""

    id: str
    role: Role = Role.USER
    is_banned: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def toggled_role(self) -> Role:
        """Role this profile would have after a promote/demote toggle."""
        return Role.USER if self.is_admin else Role.ADMIN

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "role": self.role.value,
            "is_banned": self.is_banned,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        """Create from a stored row."""
        return cls(
            id=data["id"],
            role=Role.parse(data.get("role")),
            is_banned=bool(data.get("is_banned", False)),
        )
