import sys
from pathlib import Path

import pytest

# Make src importable
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.append(str(SRC))

from analysis.config import AnalyzerConfig  # noqa: E402
from analysis.model import Range, Severity  # noqa: E402
from analysis.validator import validate  # noqa: E402


def messages(text: str, config: AnalyzerConfig | None = None):
    return [d.message for d in validate(text, config)]


def test_lowercase_class_name_is_error():
    (diag,) = validate("class point\nend")
    assert diag.severity == Severity.ERROR
    assert diag.message == "class name must start with a capital letter"
    assert diag.range == Range.create(0, 6, 0, 11)
    assert diag.source == "dragonstone"


def test_lowercase_module_name_is_error():
    assert messages("module util\nend") == [
        "module name must start with a capital letter"
    ]


def test_capitalized_method_name_is_error():
    (diag,) = validate("def Foo\nend")
    assert diag.message == "def name must start with a lowercase letter"
    assert diag.range == Range.create(0, 4, 0, 7)


def test_capitalized_function_name_is_error():
    assert messages("fun Bad()\nend") == ["fun name must start with a lowercase letter"]


@pytest.mark.parametrize(
    "text",
    [
        "def Point.create\nend",
        "public def Foo\nend",
        "def self.build\nend",
    ],
)
def test_callable_naming_exemptions(text):
    assert validate(text) == []


def test_mixed_case_constant_warns():
    (diag,) = validate("MaxSize = 10")
    assert diag.severity == Severity.WARNING
    assert diag.message == "Constants without keyword should be in SCREAMING_SNAKE_CASE"
    assert diag.range == Range.create(0, 0, 0, 7)


@pytest.mark.parametrize(
    "text",
    [
        "MAX_SIZE = 10",
        "con MaxSize = 10",
        "Value == 2",
        "Total => 3",
        "Result != nil",
    ],
)
def test_constant_naming_clean(text):
    assert validate(text) == []


def test_enum_members_are_exempt():
    text = "enum Color\n  Red = 1\n  Green = 2\nend"
    assert validate(text) == []


def test_enum_exemption_ends_with_block():
    text = "enum Color\n  Red = 1\nend\nBlue = 3"
    (diag,) = validate(text)
    assert diag.range.start.line == 3


def test_well_nested_if_is_clean():
    assert validate("if true\nend") == []


def test_nested_blocks_with_continuations():
    text = """class Account
  def withdraw(amount)
    if amount > balance
      raise "no"
    elsif amount == 0
      return
    else
      items.each do |i|
        echo i
      end
    end
    begin
      run
    rescue
      echo "failed"
    ensure
      close
    end
  end
end
"""
    assert validate(text) == []


def test_case_when_branches():
    text = "case x\nwhen 1\n  a\nwhen 2\n  b\nelse\n  c\nend"
    assert validate(text) == []


@pytest.mark.parametrize(
    "line, quote",
    [
        ('echo "hi', 'double quote (")'),
        ("echo 'hi", "single quote (')"),
        ("echo `hi", "backtick (`)"),
    ],
)
def test_unclosed_literal(line, quote):
    (diag,) = validate(line)
    assert diag.severity == Severity.ERROR
    assert diag.message == f"Unclosed string literal ({quote})"
    assert diag.range == Range.of_line(0, len(line))


def test_mismatched_quote_inside_literal_is_inert():
    assert validate('echo "it\'s fine"') == []


def test_orphaned_end():
    (diag,) = validate("end")
    assert diag.severity == Severity.ERROR
    assert diag.message == 'Unexpected "end" without matching block start'
    assert diag.range == Range.of_line(0, 3)


def test_orphaned_continuation_reported_once():
    assert messages("else") == ['Unexpected "else" without matching block start']


def test_unclosed_blocks_outermost_first():
    diags = validate("class A\n  def foo")
    assert [d.message for d in diags] == ['Unclosed "class" block', 'Unclosed "def" block']
    assert diags[0].range == Range.of_line(0, 7)
    assert diags[1].range == Range.of_line(1, 9)


def test_line_diagnostics_precede_unclosed_blocks():
    assert messages("class point\nend\nend\nif x") == [
        "class name must start with a capital letter",
        'Unexpected "end" without matching block start',
        'Unclosed "if" block',
    ]


def test_keywords_inside_strings_and_comments_are_ignored():
    text = 'echo "if this do that"\nx = 1 # while forever'
    assert validate(text) == []


def test_inline_closed_block_does_not_open():
    assert validate("if ready then go end") == []


def test_block_comment_contents_are_skipped():
    text = "#[\nclass point\necho 'oops\n]#\nx = 1"
    assert validate(text) == []


def test_unmatched_comment_close_warns():
    (diag,) = validate("]#\nx = 1")
    assert diag.severity == Severity.WARNING
    assert diag.message == 'Unmatched block comment close "]#"'
    assert diag.range == Range.create(0, 0, 0, 2)


def test_unmatched_close_is_anchored_on_the_stray_marker():
    (diag,) = validate("#[ a ]# ]#\nx = 1")
    assert diag.message == 'Unmatched block comment close "]#"'
    assert diag.range == Range.create(0, 8, 0, 10)


def test_unclosed_block_comment_warns():
    (diag,) = validate("x = 1\n#[ never closed\nclass point")
    assert diag.message == "Unclosed block comment"
    assert diag.range.start.line == 1


def test_comment_nesting_reports_can_be_disabled():
    config = AnalyzerConfig(report_comment_nesting=False)
    assert validate("]#\n#[ open", config) == []


def test_mismatched_brackets_warning_comes_last():
    diags = validate("x = (1 + 2\nend")
    assert [d.message for d in diags] == [
        'Unexpected "end" without matching block start',
        "Document has mismatched brackets: 1 unclosed (), 0 unclosed [], 0 unclosed {}",
    ]
    assert diags[-1].severity == Severity.WARNING
    assert diags[-1].range == Range.of_line(0, len("x = (1 + 2"))


def test_check_families_can_be_disabled():
    config = AnalyzerConfig(check_naming=False, check_brackets=False)
    assert validate("class point\nend\nx = (1", config) == []


def test_diagnostic_source_comes_from_config():
    (diag,) = validate("end", AnalyzerConfig(source="ds-check"))
    assert diag.source == "ds-check"


def test_validation_is_repeatable():
    text = "class point\nif x\n"
    assert validate(text) == validate(text)


@pytest.mark.parametrize(
    "text",
    [
        "cb = fun(x)\n  x * 2\nend",
        "handler = function(e)\n  echo e\nend",
        "f = fun(x) x end",
        "with file\n  echo 1\nend",
        "items.each do |i|\n  run(fun(j)\n    j\n  end)\nend",
    ],
)
def test_lambda_and_with_blocks_are_clean(text):
    assert validate(text) == []


@pytest.mark.parametrize(
    "text, keyword",
    [
        ("cb = fun(x)\n  x * 2", "fun"),
        ("handler = function(e)\n  echo e", "function"),
        ("with file\n  echo 1", "with"),
    ],
)
def test_unclosed_lambda_and_with_blocks(text, keyword):
    (diag,) = validate(text)
    assert diag.severity == Severity.ERROR
    assert diag.message == f'Unclosed "{keyword}" block'
    first = text.split("\n")[0]
    assert diag.range == Range.of_line(0, len(first))
