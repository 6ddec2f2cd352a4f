# o2cm_couples/utils/misc_utils.py
import re

SYNTHETIC_KEY_PREFIX = "unknown_"

WITH_LABEL = "with:"


def clean_text(text: str) -> str:
    """Strips surrounding whitespace, tolerating None from missing cells."""
    return (text or "").strip()


def synthetic_event_key(event_name: str) -> str:
    """Builds a grouping key for an event whose numeric ID could not be parsed.

    The prefix keeps it from ever colliding with str() of a real event ID.
    """
    return SYNTHETIC_KEY_PREFIX + re.sub(r"\s+", "_", event_name)


def is_synthetic_key(event_key: str) -> bool:
    return event_key.startswith(SYNTHETIC_KEY_PREFIX)


def format_partner_name(raw_text: str) -> str:
    """Turns "With: Last, First" into "First Last".

    Anything that is not exactly two non-empty comma separated parts is kept
    as written.
    """
    name = clean_text(raw_text)
    if name.lower().startswith(WITH_LABEL):
        name = name[len(WITH_LABEL) :].strip()

    parts = [part.strip() for part in name.split(",")]
    if len(parts) == 2 and parts[0] and parts[1]:
        return f"{parts[1]} {parts[0]}"
    return name
