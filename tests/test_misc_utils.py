import pytest

from o2cm_couples.storage.report_writer import (
    PersistenceError,
    save_raw_response,
    save_report,
)
from o2cm_couples.utils.misc_utils import (
    format_partner_name,
    is_synthetic_key,
    synthetic_event_key,
)


class TestFormatPartnerName:
    """Tests for partner name clean-up."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("With: Smith, John", "John Smith"),
            ("WITH:Smith,John", "John Smith"),
            ("  with:  Van Dyke ,  Mary Ann ", "Mary Ann Van Dyke"),
            ("With: Cher", "Cher"),
            ("With: Smith, John, Jr.", "Smith, John, Jr."),
            ("With: Smith,", "Smith,"),
            ("Smith, John", "John Smith"),
            ("", ""),
        ],
    )
    def test_format(self, raw, expected):
        assert format_partner_name(raw) == expected


class TestSyntheticEventKey:
    def test_whitespace_runs_become_underscores(self):
        assert synthetic_event_key("Open  Smooth\tWaltz") == "unknown_Open_Smooth_Waltz"

    def test_is_recognised(self):
        assert is_synthetic_key(synthetic_event_key("42"))
        assert not is_synthetic_key("42")


class TestReportWriter:
    """Tests for writing the report and raw pages to disk."""

    def test_save_report_overwrites_with_lf(self, tmp_path):
        path = tmp_path / "events.txt"
        path.write_text("old content that is longer than the new one")

        save_report("line one\nline two\n", path)

        assert path.read_bytes() == b"line one\nline two\n"

    def test_save_report_failure(self, tmp_path):
        with pytest.raises(PersistenceError):
            save_report("x", tmp_path / "missing" / "events.txt")

    def test_save_raw_response_sanitises_name(self, tmp_path):
        path = save_raw_response("<html></html>", tmp_path / "raw", "CCC", "12/3")

        assert path.name == "CCC_12_3.html"
        assert path.read_text(encoding="utf-8") == "<html></html>"
