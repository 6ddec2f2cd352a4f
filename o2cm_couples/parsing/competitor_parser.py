"""
Competitor page parsers for the O2CM entries site.

Two documents are read:
- the competition landing page, whose <select id="selEnt"> lists every
  competitor entry;
- one page per competitor, whose second table lists that competitor's
  partners and, under each partner, the events the couple is entered in.

The competitor table carries no explicit markup for its row kinds; a row's
meaning is given by its number of cells:

    row 1           | Competitor Name |
    2 cells         |                 | With: Last, First          |
    3 cells         |                 |                            | [ID] ... 7:30 PM Event |

Malformed competitor pages never raise; they yield fewer (or no) records.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from loguru import logger

from o2cm_couples.models.enums import RowKind
from o2cm_couples.models.event import EventRef
from o2cm_couples.models.partnership import PartnershipObservation
from o2cm_couples.utils.misc_utils import clean_text, format_partner_name

# "[123] Sat 7:30 PM Pre-Bronze Waltz" -> ("123", "Pre-Bronze Waltz")
EVENT_TEXT_PATTERN = re.compile(r"^\[(\d+)\].*?\d{1,2}:\d{2} (?:AM|PM)\s+(.*)$")

COMPETITOR_TABLE_INDEX = 1
COMPETITOR_NAME_ROW_INDEX = 1
FIRST_ENTRY_ROW_INDEX = 2


class DiscoveryError(Exception):
    """Competitor identifiers could not be discovered; nothing else can run."""

    pass


class StructureNotFoundError(DiscoveryError):
    """The competitor <select> control is missing from the landing page."""

    pass


class NoIdentifiersError(DiscoveryError):
    """The competitor <select> control offers no usable option values."""

    pass


def parse_competitor_ids(html: str, select_id: str = "selEnt") -> List[str]:
    """
    Extract the competitor identifiers offered by the landing page.

    Args:
        html: Raw HTML of the competition landing page
        select_id: id attribute of the <select> listing the entries

    Returns:
        Non-blank option values, in document order

    Raises:
        StructureNotFoundError: If the <select> is not on the page
        NoIdentifiersError: If every option value is blank
    """
    soup = BeautifulSoup(html, "html.parser")
    select = soup.find("select", id=select_id)
    if select is None:
        raise StructureNotFoundError(
            f'Could not find <select id="{select_id}"> on the page.'
        )

    competitor_ids = [
        value
        for option in select.find_all("option")
        if (value := option.get("value")) and value.strip()
    ]
    if not competitor_ids:
        raise NoIdentifiersError("No valid competitor IDs found in the dropdown.")

    logger.info(f"Found {len(competitor_ids)} potential competitor entries.")
    return competitor_ids


def classify_row(cells: List[Tag]) -> RowKind:
    """Decides what a competitor table row holds from its cell count."""
    if len(cells) == 2:
        return RowKind.PARTNER_HEADER
    if len(cells) == 3:
        return RowKind.EVENT
    return RowKind.NOISE


def parse_event_text(raw_text: str) -> EventRef:
    """Parses an event cell, keeping the raw text as the name when no ID is found."""
    text = clean_text(raw_text)
    match = EVENT_TEXT_PATTERN.match(text)
    if match:
        event_id, name = match.groups()
        return EventRef(id=int(event_id), name=name.strip())
    logger.debug(f"Event text without a parsable ID: '{text}'")
    return EventRef(id=None, name=text)


def _cell_text(cell: Tag) -> str:
    return clean_text(cell.get_text())


class CompetitorTableScanner:
    """Walks the competitor table, grouping event rows under their partner row."""

    def __init__(self, competitor_name: str):
        self.competitor_name = competitor_name
        self.partner_name: Optional[str] = None
        self.events: List[EventRef] = []
        self.observations: List[PartnershipObservation] = []

    def feed(self, cells: List[Tag]) -> None:
        kind = classify_row(cells)
        if kind == RowKind.PARTNER_HEADER:
            self._flush()
            self.partner_name = format_partner_name(cells[1].get_text())
            self.events = []
        elif kind == RowKind.EVENT:
            if self.partner_name is None:
                logger.debug(
                    f"Event row before any partner row for {self.competitor_name}, skipping."
                )
                return
            self.events.append(parse_event_text(cells[2].get_text()))

    def finish(self) -> List[PartnershipObservation]:
        self._flush()
        return self.observations

    def _flush(self) -> None:
        """Emits the open partner block, if it has a partner and at least one event."""
        if not self.partner_name or not self.events:
            if self.partner_name is not None:
                logger.debug(
                    f"Dropping partner block '{self.partner_name}' for {self.competitor_name}: no events."
                )
            return
        self.observations.append(
            PartnershipObservation(
                competitor_name=self.competitor_name,
                partner_name=self.partner_name,
                events=list(self.events),
            )
        )


def extract_partnerships(html: str) -> List[PartnershipObservation]:
    """
    Parse one competitor page into partnership observations.

    Args:
        html: Raw HTML of a competitor page

    Returns:
        One observation per partner with at least one event; empty when the
        page does not have the expected table layout
    """
    soup = BeautifulSoup(html, "html.parser")
    tables = soup.find_all("table")
    if len(tables) <= COMPETITOR_TABLE_INDEX:
        logger.debug(
            f"Expected at least {COMPETITOR_TABLE_INDEX + 1} tables, found {len(tables)}. No data."
        )
        return []

    rows = tables[COMPETITOR_TABLE_INDEX].find_all("tr")
    if len(rows) <= COMPETITOR_NAME_ROW_INDEX:
        logger.debug(f"Competitor table has {len(rows)} row(s). No data.")
        return []

    name_cells = rows[COMPETITOR_NAME_ROW_INDEX].find_all("td")
    competitor_name = _cell_text(name_cells[0]) if name_cells else ""
    if not competitor_name:
        logger.warning("Could not parse competitor name from table row 1. Skipping.")
        return []

    scanner = CompetitorTableScanner(competitor_name)
    for row in rows[FIRST_ENTRY_ROW_INDEX:]:
        scanner.feed(row.find_all("td"))
    observations = scanner.finish()

    logger.debug(
        f"Parsed {len(observations)} partnership(s) for competitor {competitor_name}"
    )
    return observations
