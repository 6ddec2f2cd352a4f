from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field


class EventRef(BaseModel):
    """One event a couple is entered in, as read from a competitor page."""

    model_config = ConfigDict(frozen=True)  # Make instances immutable

    id: Optional[int] = Field(
        None, ge=0, description="Numeric event ID, None when it could not be parsed."
    )
    name: str


class EventGroup(BaseModel):
    """All couples entered in a single event."""

    event_key: str  # str(id), or a synthetic "unknown_..." key
    event_id: Optional[int] = None
    event_name: str
    pairs: List[Tuple[str, str]] = []

    @computed_field  # type: ignore[misc]
    @property
    def is_synthetic(self) -> bool:
        return self.event_id is None

    def has_pair(self, name_a: str, name_b: str) -> bool:
        return any(
            (a == name_a and b == name_b) or (a == name_b and b == name_a)
            for a, b in self.pairs
        )

    def add_pair(self, name_a: str, name_b: str) -> bool:
        """Adds the couple unless the same two names are already listed, in either order."""
        if self.has_pair(name_a, name_b):
            return False
        self.pairs.append((name_a, name_b))
        return True
