"""Base Domain Event class for all domain events."""

from abc import ABC
from typing import Any

from pydantic import BaseModel, ConfigDict


class DomainEvent(BaseModel, ABC):
    """Base class for all domain events.

    Domain events represent something that happened in an agent session.
    They are immutable and carry only what the wire event said, so two
    translations of the same wire event compare equal.
    """

    model_config = ConfigDict(frozen=True)

    event_type: str = ""

    def model_post_init(self, __context: Any) -> None:
        """Set event_type after initialization."""
        object.__setattr__(self, "event_type", self.__class__.__name__)

    def to_dict(self) -> dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DomainEvent":
        """Create event from dictionary."""
        payload = {key: value for key, value in data.items() if key != "event_type"}
        return cls(**payload)
