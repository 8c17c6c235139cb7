from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class Profile:
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None

    @property
    def full_name(self) -> str:
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name or "User"


@dataclass(frozen=True)
class UpdateProfileData:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


def profile_to_wire(profile: Profile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "first_name": profile.first_name,
        "last_name": profile.last_name,
        "email": profile.email,
        "avatar_url": profile.avatar_url,
    }


def profile_from_wire(row: Mapping[str, Any]) -> Profile:
    return Profile(
        id=row["id"],
        first_name=row.get("first_name"),
        last_name=row.get("last_name"),
        email=row.get("email"),
        avatar_url=row.get("avatar_url"),
    )
