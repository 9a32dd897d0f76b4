"""Tests for slotrun.slots.document: header parsing, extraction and edits."""

import pytest

from slotrun.slots.document import SlotDocument, extract_slot, format_header, header_id

TEXT = """\
# slot 2
return 'b'

# slot 1
x = 1
  # slot 9 inside a comment line is not a header
return 'a'
//command 1
return 'duplicate'
"""


class TestHeaderId:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("# slot 3", 3),
            ("# slot 3\n", 3),
            ("  #slot 12  \r\n", 12),
            ("// command 4", 4),
            ("//command 0", 0),
            ("\t# command 7", 7),
        ],
    )
    def test_headers(self, line, expected):
        assert header_id(line) == expected

    @pytest.mark.parametrize(
        "line",
        ["# slot", "# slot x", "# slot -1", "# slots 3", "x = 1  # slot 3", "# slot 3 extra", "; slot 3"],
    )
    def test_not_headers(self, line):
        assert header_id(line) is None

    def test_format_header(self):
        assert format_header(4) == "# slot 4\n"
        assert header_id(format_header(4)) == 4


class TestExtractSlot:
    def test_order_independent(self):
        assert extract_slot(TEXT, 2) == "return 'b'"

    def test_body_runs_to_next_header(self):
        assert extract_slot(TEXT, 1) == "x = 1\n  # slot 9 inside a comment line is not a header\nreturn 'a'"

    def test_first_occurrence_wins(self):
        assert "duplicate" not in extract_slot(TEXT, 1)

    def test_missing(self):
        assert extract_slot(TEXT, 3) is None

    def test_empty_body(self):
        assert extract_slot("# slot 0\n\n# slot 1\nx\n", 0) == ""

    def test_crlf(self):
        assert extract_slot("# slot 0\r\nprint(1)\r\n# slot 1\r\n", 0) == "print(1)"


class TestSlotDocument:
    def test_render_round_trips_exactly(self):
        assert SlotDocument.parse(TEXT).render() == TEXT

    def test_preamble_is_kept(self):
        doc = SlotDocument.parse("notes\n# slot 0\nx\n")
        assert doc.preamble == "notes\n"
        assert doc.render() == "notes\n# slot 0\nx\n"

    def test_ids_sorted_unique(self):
        doc = SlotDocument.parse(TEXT)
        assert doc.ids() == [1, 2]
        assert 1 in doc and 3 not in doc

    def test_save_replaces_first_block(self):
        doc = SlotDocument.parse(TEXT)
        assert doc.save(1, "return 'new'   \n\n") is True
        assert extract_slot(doc.render(), 1) == "return 'new'"
        assert "duplicate" in doc.render()

    def test_save_keeps_gap_before_next_block(self):
        doc = SlotDocument.parse("# slot 0\nA\n\n# slot 1\nB\n")
        doc.save(0, "X")
        assert doc.render() == "# slot 0\nX\n\n# slot 1\nB\n"

    def test_save_last_block_ends_with_newline(self):
        doc = SlotDocument.parse("# slot 0\nA")
        doc.save(0, "X\n\n")
        assert doc.render() == "# slot 0\nX\n"

    def test_save_empty_code_keeps_gap(self):
        doc = SlotDocument.parse("# slot 0\nA\n\n# slot 1\n")
        doc.save(0, "")
        assert doc.render() == "# slot 0\n\n# slot 1\n"

    def test_save_appends_missing_block(self):
        doc = SlotDocument.parse("# slot 0\nx = 1\n")
        assert doc.save(3, "return 3") is False
        assert doc.render() == "# slot 0\nx = 1\n\n# slot 3\nreturn 3\n"

    def test_append_to_empty_document(self):
        doc = SlotDocument.parse("")
        doc.append(0)
        assert doc.render() == "# slot 0\n\n"

    def test_remove_all_occurrences(self):
        doc = SlotDocument.parse(TEXT)
        assert doc.remove([1, 5]) == [1]
        assert doc.ids() == [2]

    def test_remove_first_only(self):
        doc = SlotDocument.parse(TEXT)
        doc.remove([1], first_only=True)
        assert extract_slot(doc.render(), 1) == "return 'duplicate'"

    def test_render_trimmed(self):
        doc = SlotDocument.parse("\n\n# slot 0\nx\n\n\n")
        assert doc.render_trimmed() == "# slot 0\nx\n"
