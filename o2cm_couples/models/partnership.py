from typing import List

from pydantic import BaseModel, computed_field

from .event import EventRef


def pair_key(name_a: str, name_b: str) -> str:
    """Order-independent key for a couple: key(A, B) == key(B, A)."""
    return "|".join(sorted([name_a, name_b]))


class PartnershipObservation(BaseModel):
    """A couple as seen from one competitor's page.

    The same couple is normally observed twice, once from each partner's page,
    with the two names swapped.
    """

    competitor_name: str  # Subject of the page the block was read from
    partner_name: str
    events: List[EventRef] = []

    @computed_field  # type: ignore[misc]
    @property
    def pair_key(self) -> str:
        return pair_key(self.competitor_name, self.partner_name)


class CanonicalPartnership(PartnershipObservation):
    """The single retained record for a couple after deduplication."""

    observation_count: int = 1

    @classmethod
    def from_observation(
        cls, observation: PartnershipObservation
    ) -> "CanonicalPartnership":
        if isinstance(observation, CanonicalPartnership):
            return observation.model_copy(deep=True)
        return cls(
            competitor_name=observation.competitor_name,
            partner_name=observation.partner_name,
            events=list(observation.events),
        )
