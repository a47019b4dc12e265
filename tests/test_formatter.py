import sys
from pathlib import Path

import pytest

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from analysis.formatter import apply_edits, format_document  # noqa: E402
from analysis.model import Range, TextEdit  # noqa: E402
from analysis.validator import validate  # noqa: E402


def fmt(text: str, indent_width: int = 4) -> str:
    return apply_edits(text, format_document(text, indent_width))


def test_if_end_needs_no_edits():
    assert format_document("if true\nend") == []


def test_body_is_indented():
    edits = format_document("if x\necho 1\nend")
    assert edits == [TextEdit(Range.create(1, 0, 1, 0), "    ")]
    assert fmt("if x\necho 1\nend") == "if x\n    echo 1\nend"


def test_over_indented_line_is_pulled_back():
    edits = format_document("  x = 1")
    assert edits == [TextEdit(Range.create(0, 0, 0, 2), "")]


def test_nested_blocks_and_continuations():
    src = """class Account
def run(x)
if x
a
elsif y
b
else
c
end
items.each do |i|
echo i
end
end
end
"""
    expected = """class Account
    def run(x)
        if x
            a
        elsif y
            b
        else
            c
        end
        items.each do |i|
            echo i
        end
    end
end
"""
    assert fmt(src) == expected


def test_indent_width_is_configurable():
    assert fmt("while go\nstep\nend", indent_width=2) == "while go\n  step\nend"


def test_tabs_are_replaced():
    assert fmt("if a\n\tb\nend") == "if a\n    b\nend"


def test_formatting_is_idempotent():
    src = "module M\nclass C\ndef f\nx = 1\nend\nend\nend\n"
    once = fmt(src)
    assert format_document(once) == []
    assert fmt(once) == once


def test_crlf_separators_are_kept():
    assert fmt("def foo\r\necho 1\r\nend\r\n") == "def foo\r\n    echo 1\r\nend\r\n"


def test_blank_and_comment_lines_are_untouched():
    src = "if a\n\n  # note\nb\nend"
    assert fmt(src) == "if a\n\n  # note\n    b\nend"


def test_block_comment_interior_is_untouched():
    src = "#[\n   free text\n  if nothing\n]#\nif a\nb\nend"
    edits = format_document(src)
    assert [e.range.start.line for e in edits] == [5]


def test_keywords_inside_strings_do_not_indent():
    assert format_document('echo "do it"\nx = 1') == []


def test_inline_block_does_not_indent():
    assert format_document("if a then b end\nx = 1") == []


@pytest.mark.parametrize("text", ["", "\n", "end\nend"])
def test_degenerate_input_does_not_raise(text):
    format_document(text)


def test_formatter_and_validator_can_disagree_on_orphans():
    # The validator reports the orphaned "else" and keeps an empty stack;
    # the formatter's own counter still treats the next line as nested.
    text = "else\nx = 1"
    assert [d.message for d in validate(text)] == [
        'Unexpected "else" without matching block start'
    ]
    assert fmt(text) == "else\n    x = 1"


def test_apply_edits_ignores_lines_past_end():
    edits = [TextEdit(Range.create(5, 0, 5, 0), "    ")]
    assert apply_edits("a\nb", edits) == "a\nb"
