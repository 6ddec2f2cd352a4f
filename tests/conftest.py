"""
Pytest configuration and fixtures for the O2CM couples test suite.
"""

import io
import re

import pytest
from rich.console import Console

from o2cm_couples.models.event import EventRef
from o2cm_couples.models.partnership import PartnershipObservation

# CSI / escape sequences emitted by terminal styling
ANSI_PATTERN = re.compile(
    r"[\u001b\u009b][\[()#;?]*(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?[0-9A-ORZcf-nqry=><]"
)

LANDING_PAGE_HTML = """<html><body>
<form method="post" action="default.asp">
  <select name="selEnt" id="selEnt">
    <option value="">-- Select a competitor --</option>
    <option value="101">Doe, Jane</option>
    <option value="   ">(blank)</option>
    <option value="102">Smith, John</option>
    <option>No value attribute</option>
    <option value="103">Brown, Alex</option>
  </select>
  <input type="submit" name="submit" value="OK">
</form>
</body></html>
"""


def _row(*cells: str) -> str:
    return "<tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>"


def build_competitor_page(competitor_name: str, rows) -> str:
    """Builds a competitor page: a heading table, then the entries table."""
    body = [_row("Entries for competitor"), _row(competitor_name)]
    body.extend(_row(*cells) for cells in rows)
    return (
        "<html><body>"
        "<table><tr><td>O2CM Entries</td></tr></table>"
        "<table>" + "".join(body) + "</table>"
        "</body></html>"
    )


@pytest.fixture
def landing_page_html():
    return LANDING_PAGE_HTML


@pytest.fixture
def page_builder():
    """Returns a function building competitor pages from row cell lists."""
    return build_competitor_page


@pytest.fixture
def jane_page():
    """Jane dances with John (two events) and with Alex (one event)."""
    return build_competitor_page(
        "Jane Doe",
        [
            ("", "With: Smith, John"),
            ("", "", "[12] Sat 3:45 PM Tango"),
            ("", "", "[5] Sat 10:00 AM Waltz"),
            ("", "With: Brown, Alex"),
            ("", "", "[30] Sun 1:15 PM Foxtrot"),
        ],
    )


@pytest.fixture
def john_page():
    """John's view of the partnership with Jane, plus an event without ID."""
    return build_competitor_page(
        "John Smith",
        [
            ("", "With: Doe, Jane"),
            ("", "", "[5] Sat 10:00 AM Waltz"),
            ("", "", "[12] Sat 3:45 PM Tango"),
            ("", "", "Showcase Exhibition"),
        ],
    )


@pytest.fixture
def waltz_observations():
    """The same couple observed from both partners' pages."""
    waltz = EventRef(id=1, name="Waltz")
    return [
        PartnershipObservation(competitor_name="A", partner_name="B", events=[waltz]),
        PartnershipObservation(competitor_name="B", partner_name="A", events=[waltz]),
    ]


@pytest.fixture
def strip_ansi():
    """Returns a function removing terminal escape sequences from text."""
    return lambda text: ANSI_PATTERN.sub("", text)


@pytest.fixture
def terminal_console():
    """A narrow, colour terminal console writing into a string buffer."""
    return Console(
        file=io.StringIO(), force_terminal=True, color_system="truecolor", width=40
    )
