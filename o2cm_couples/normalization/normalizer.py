from typing import Dict, List, Sequence

from loguru import logger

from o2cm_couples.models.event import EventGroup, EventRef
from o2cm_couples.models.partnership import CanonicalPartnership, PartnershipObservation
from o2cm_couples.utils.misc_utils import synthetic_event_key

# Type alias for the output of normalization, keyed by event_group_key()
GroupedEvents = Dict[str, EventGroup]


def event_group_key(event: EventRef) -> str:
    """Groups by numeric ID when known, else by a key derived from the event name."""
    if event.id is not None:
        return str(event.id)
    return synthetic_event_key(event.name)


class Normalizer:
    """Turns raw partnership observations into per-event couple lists."""

    def __init__(self, merge_events: bool = False):
        # False keeps only the first-seen observation of a couple, True unions
        # the event lists of every observation of that couple
        self.merge_events = merge_events
        logger.info(f"Normalizer initialized (merge_events={merge_events}).")

    def normalize(self, observations: Sequence[PartnershipObservation]) -> GroupedEvents:
        """Deduplicates the observations and groups the result by event."""
        return self.group_by_event(self.deduplicate(observations))

    def deduplicate(
        self, observations: Sequence[PartnershipObservation]
    ) -> List[CanonicalPartnership]:
        """Keeps one partnership per unordered pair of names.

        Output follows first-seen order. Already canonical input passes
        through unchanged, so running this twice is a no-op.
        """
        unique_entries: Dict[str, CanonicalPartnership] = {}

        for observation in observations:
            key = observation.pair_key
            existing = unique_entries.get(key)
            if existing is None:
                unique_entries[key] = CanonicalPartnership.from_observation(observation)
                continue

            existing.observation_count += getattr(observation, "observation_count", 1)
            if self.merge_events:
                self._merge_events(existing, observation)
            elif observation.events != existing.events:
                logger.debug(
                    f"Discarding differing event list for {key} (first seen wins)."
                )

        logger.info(
            f"Found {len(observations)} raw entries, deduplicated to {len(unique_entries)} unique partnerships."
        )
        return list(unique_entries.values())

    def _merge_events(
        self, target: CanonicalPartnership, observation: PartnershipObservation
    ) -> None:
        known = set(target.events)
        added = [event for event in observation.events if event not in known]
        if added:
            target.events.extend(added)
            logger.debug(f"Merged {len(added)} extra event(s) into {target.pair_key}")

    def group_by_event(
        self, partnerships: Sequence[PartnershipObservation]
    ) -> GroupedEvents:
        """Collects the couples entered in each event.

        The first partnership to mention an event names the group. A couple is
        listed once per event whichever way round its names appear.
        """
        events_map: GroupedEvents = {}

        for partnership in partnerships:
            for event in partnership.events:
                key = event_group_key(event)
                group = events_map.get(key)
                if group is None:
                    group = EventGroup(
                        event_key=key, event_id=event.id, event_name=event.name
                    )
                    events_map[key] = group
                group.add_pair(partnership.competitor_name, partnership.partner_name)

        logger.info(
            f"Grouped {len(partnerships)} partnerships into {len(events_map)} events."
        )
        return events_map
