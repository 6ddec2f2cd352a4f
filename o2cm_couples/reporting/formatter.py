from typing import Iterable, Iterator, List, Mapping, Optional

from rich.text import Text

from o2cm_couples.models.event import EventGroup
from o2cm_couples.utils.misc_utils import is_synthetic_key

SEPARATOR = "-------------------------------"

HEADER_STYLE = "bold white on blue"
LABEL_STYLE = "bold green"
NAME_STYLE = "cyan"
COUPLE_STYLE = "magenta"
PARTNER_STYLE = "bold magenta"
EMPTY_STYLE = "yellow"
SEPARATOR_STYLE = "bright_black"


def _numeric_key(event_key: str) -> Optional[int]:
    if is_synthetic_key(event_key):
        return None
    try:
        return int(event_key)
    except ValueError:
        return None


def sort_event_keys(event_keys: Iterable[str]) -> List[str]:
    """Numeric event IDs in ascending order, then every other key alphabetically."""
    numeric, other = [], []
    for key in event_keys:
        value = _numeric_key(key)
        if value is None:
            other.append(key)
        else:
            numeric.append((value, key))
    return [key for _, key in sorted(numeric)] + sorted(other)


def format_section(group: EventGroup) -> Text:
    """Builds the styled report section for one event.

    The plain text of the section (``Text.plain``) is exactly what goes into
    the report file; styles only ever wrap that text.
    """
    if group.is_synthetic:
        header = "Unknown ID"
    else:
        header = f"Event ID: {group.event_key}"

    section = Text(end="")
    section.append(f"\n{header}", style=HEADER_STYLE)
    section.append("\n")
    section.append("Event Name:", style=LABEL_STYLE)
    section.append(" ")
    section.append(group.event_name, style=NAME_STYLE)
    section.append("\n")
    section.append("Couples:", style="bold")
    section.append("\n")

    if not group.pairs:
        section.append("  No couples registered.", style=EMPTY_STYLE)
        section.append("\n")
    else:
        couples = sorted(group.pairs, key=lambda pair: pair[0])
        for index, (name_a, name_b) in enumerate(couples, start=1):
            section.append(f"  {index}. ", style=COUPLE_STYLE)
            section.append(name_a, style=PARTNER_STYLE)
            section.append(" & ", style=COUPLE_STYLE)
            section.append(name_b, style=PARTNER_STYLE)
            section.append("\n")

    section.append(SEPARATOR, style=SEPARATOR_STYLE)
    section.append("\n")
    return section


def iter_report_sections(groups: Mapping[str, EventGroup]) -> Iterator[Text]:
    """Yields one styled section per event, in report order."""
    for event_key in sort_event_keys(groups.keys()):
        yield format_section(groups[event_key])


def render_plain(section: Text) -> str:
    return section.plain
