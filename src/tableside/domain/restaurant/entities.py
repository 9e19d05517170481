from __future__ import annotations

from dataclasses import dataclass

NAME_MAX_LENGTH = 30
DESCRIPTION_MAX_LENGTH = 300


@dataclass(frozen=True)
class RestaurantDetails:
    name: str
    description: str
    logo: str = ""

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if len(self.name) > NAME_MAX_LENGTH:
            raise ValueError(f"name must be at most {NAME_MAX_LENGTH} characters")
        if not self.description.strip():
            raise ValueError("description must be non-empty")
        if len(self.description) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(
                f"description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )
