"""
Tests for the report formatter: ordering, section layout, and the
styled/plain renderings.
"""

from o2cm_couples.models.event import EventGroup
from o2cm_couples.reporting.formatter import (
    SEPARATOR,
    format_section,
    iter_report_sections,
    render_plain,
    sort_event_keys,
)


def _group(key, name, pairs=(), event_id=None):
    if event_id is None and key.isdigit():
        event_id = int(key)
    return EventGroup(
        event_key=key, event_id=event_id, event_name=name, pairs=list(pairs)
    )


class TestSortEventKeys:
    """Tests for report ordering of events."""

    def test_numeric_keys_sort_by_value(self):
        assert sort_event_keys(["30", "5", "100"]) == ["5", "30", "100"]

    def test_numeric_keys_before_synthetic(self):
        keys = ["unknown_Zumba", "100", "unknown_Aerobics", "7"]
        assert sort_event_keys(keys) == [
            "7",
            "100",
            "unknown_Aerobics",
            "unknown_Zumba",
        ]

    def test_synthetic_key_with_digits_stays_synthetic(self):
        assert sort_event_keys(["unknown_1", "2"]) == ["2", "unknown_1"]


class TestFormatSection:
    """Tests for the plain text of one event section."""

    def test_numeric_event_section(self):
        group = _group("12", "Tango", [("John Smith", "Jane Doe"), ("Alex Brown", "Jane Doe")])

        assert render_plain(format_section(group)) == (
            "\nEvent ID: 12\n"
            "Event Name: Tango\n"
            "Couples:\n"
            "  1. Alex Brown & Jane Doe\n"
            "  2. John Smith & Jane Doe\n"
            f"{SEPARATOR}\n"
        )

    def test_synthetic_event_section(self):
        group = _group("unknown_Showcase", "Showcase", [("A", "B")])

        plain = render_plain(format_section(group))
        assert plain.startswith("\nUnknown ID\nEvent Name: Showcase\n")
        assert "Event ID" not in plain

    def test_empty_group_has_marker(self):
        plain = render_plain(format_section(_group("3", "Rumba")))
        assert "Couples:\n  No couples registered.\n" in plain
        assert plain.endswith(f"{SEPARATOR}\n")

    def test_sort_does_not_reorder_group(self):
        group = _group("1", "Waltz", [("B", "A"), ("A", "C")])
        format_section(group)
        assert group.pairs == [("B", "A"), ("A", "C")]


class TestRenderings:
    """Tests for the styled and plain renderings of the same report."""

    def test_plain_has_no_escape_sequences(self):
        section = format_section(_group("1", "Waltz", [("A", "B")]))
        assert "\x1b" not in render_plain(section)

    def test_styled_print_is_plain_plus_styling(self, terminal_console, strip_ansi):
        section = format_section(_group("1", "Waltz", [("A", "B"), ("C", "D")]))

        terminal_console.print(section, end="", soft_wrap=True)

        styled = terminal_console.file.getvalue()
        assert "\x1b[" in styled
        assert strip_ansi(styled) == render_plain(section)

    def test_long_names_are_not_wrapped(self, terminal_console, strip_ansi):
        """Lines far wider than the terminal still print unchanged."""
        long_a, long_b = "A" * 180, "B" * 180
        section = format_section(_group("7", "Quickstep " * 10, [(long_a, long_b)]))

        terminal_console.print(section, end="", soft_wrap=True)

        assert strip_ansi(terminal_console.file.getvalue()) == render_plain(section)
        assert f"  1. {long_a} & {long_b}\n" in render_plain(section)

    def test_iter_report_sections_order(self):
        groups = {key: _group(key, f"Event {key}") for key in ["30", "5", "100"]}
        names = [
            render_plain(section).split("\n")[2]
            for section in iter_report_sections(groups)
        ]
        assert names == [
            "Event Name: Event 5",
            "Event Name: Event 30",
            "Event Name: Event 100",
        ]

    def test_empty_report(self):
        assert list(iter_report_sections({})) == []
