"""Static language tables for Dragonstone.

Completion entries, keyword groups used by the line recognizers, and a small
lookup database used for keyword help. All tables are tuples built once at
import time and never mutated.
"""

from __future__ import annotations

from .model import CompletionItem, CompletionKind

_KW = CompletionKind.KEYWORD


def _kw(label: str, detail: str, snippet: str | None = None) -> CompletionItem:
    return CompletionItem(
        label, _KW, detail, insert_text=snippet, snippet=snippet is not None
    )


KEYWORDS: tuple[CompletionItem, ...] = (
    _kw("class", "Define a class"),
    _kw("cls", "Define a class (short)"),
    _kw("struct", "Define a struct"),
    _kw("module", "Define a module"),
    _kw("mod", "Define a module (short)"),
    _kw("enum", "Define an enum"),
    _kw("record", "Define a record"),
    _kw("annotation", "Define an annotation"),
    _kw("anno", "Define an annotation (short)"),
    _kw("def", "Define a method", "def ${1:method_name}($2)\n    $0\nend"),
    _kw("define", "Define a method", "define ${1:method_name}($2)\n    $0\nend"),
    _kw(
        "fun",
        "Define a function",
        "fun ${1:function_name}($2) -> ${3:return_type}\n    $0\nend",
    ),
    _kw(
        "function",
        "Define a function",
        "function ${1:function_name}($2) -> ${3:return_type}\n    $0\nend",
    ),
    _kw("if", "Conditional statement", "if ${1:condition}\n    $0\nend"),
    _kw("unless", "Negative conditional", "unless ${1:condition}\n    $0\nend"),
    _kw("elsif", "Else if clause"),
    _kw("elseif", "Else if clause"),
    _kw("else", "Else clause"),
    _kw(
        "case",
        "Case statement",
        "case ${1:value}\nwhen ${2:pattern}\n    $0\nend",
    ),
    _kw(
        "select",
        "Select statement",
        "select ${1:value}\nwhen ${2:pattern}\n    $0\nend",
    ),
    _kw("when", "When clause"),
    _kw("while", "While loop", "while ${1:condition}\n    $0\nend"),
    _kw("begin", "Begin block", "begin\n    $0\nend"),
    _kw("rescue", "Rescue clause"),
    _kw("ensure", "Ensure clause"),
    _kw("end", "End block"),
    _kw("return", "Return statement"),
    _kw("yield", "Yield to block"),
    _kw("break", "Break loop"),
    _kw("next", "Next iteration"),
    _kw("con", "Define a constant variable"),
    _kw("let", "Define an immutable variable"),
    _kw("var", "Define a mutable variable"),
    _kw("fix", "Define a fixed variable"),
    _kw("use", "Import/use module"),
    _kw("from", "Import from module"),
    _kw("as", "Alias import"),
    _kw("abstract", "Abstract modifier"),
    _kw("abs", "Abstract modifier (short)"),
    _kw("public", "Public visibility"),
    _kw("private", "Private visibility"),
    _kw("protected", "Protected visibility"),
    _kw("with", "With statement", "with ${1:expression}\n    $0\nend"),
)

TYPES: tuple[CompletionItem, ...] = tuple(
    CompletionItem(label, CompletionKind.CLASS, detail)
    for label, detail in (
        ("str", "String type"),
        ("int", "Integer type"),
        ("int8", "8-bit integer"),
        ("int16", "16-bit integer"),
        ("int32", "32-bit integer"),
        ("int64", "64-bit integer"),
        ("int128", "128-bit integer"),
        ("float", "Float type"),
        ("float8", "8-bit float"),
        ("float16", "16-bit float"),
        ("float32", "32-bit float"),
        ("float64", "64-bit float"),
        ("float128", "128-bit float"),
        ("bool", "Boolean type"),
        ("char", "Character type"),
        ("nil", "Nil type"),
        ("sym", "Symbol type"),
        ("arr", "Array type"),
        ("array", "Array type"),
        ("map", "Map/Hash type"),
        ("range", "Range type"),
        ("tuple", "Tuple type"),
        ("para", "Parameter type"),
    )
)

BUILTINS: tuple[CompletionItem, ...] = tuple(
    CompletionItem(label, CompletionKind.FUNCTION, detail)
    for label, detail in (
        ("echo", "Print to stdout"),
        ("eecho", "Print to stderr"),
        ("e!", "Print to stdout (short)"),
        ("ee!", "Print to stderr (short)"),
        ("abort", "Abort execution"),
        ("exit", "Exit program"),
        ("gets", "Get input"),
        ("read_line", "Read line from input"),
        ("sleep", "Sleep for duration"),
        ("spawn", "Spawn fiber/thread"),
        ("thread", "Create thread"),
        ("channel", "Create channel"),
        ("fiber", "Create fiber"),
        ("raise", "Raise exception"),
        ("rand", "Random number"),
        ("sprintf", "Format string"),
        ("system", "Execute system command"),
        ("typeof", "Get type of value"),
    )
)

CONSTANTS: tuple[CompletionItem, ...] = tuple(
    CompletionItem(label, CompletionKind.CONSTANT, detail)
    for label, detail in (
        ("true", "Boolean true"),
        ("false", "Boolean false"),
        ("nil", "Nil value"),
        ("null", "Null value"),
        ("self", "Current instance"),
        ("__FILE__", "Current file path"),
        ("__DIR__", "Current directory"),
        ("__LINE__", "Current line number"),
        ("__END_LINE__", "End line number"),
    )
)

SPECIAL_METHODS: tuple[CompletionItem, ...] = (
    CompletionItem("getter", CompletionKind.METHOD, "Define getter method"),
    CompletionItem("setter", CompletionKind.METHOD, "Define setter method"),
    CompletionItem("property", CompletionKind.METHOD, "Define property"),
    CompletionItem(
        "bag", CompletionKind.METHOD, "Create bag type", "bag($0)", snippet=True
    ),
    CompletionItem(
        "para", CompletionKind.METHOD, "Define parameter", "para($0)", snippet=True
    ),
)

# Keyword groups recognized by the line scanners.
TYPE_KEYWORDS = ("class", "cls", "struct", "record", "anno", "annotation", "enum")
MODULE_KEYWORDS = ("module", "mod")
METHOD_KEYWORDS = ("def", "define")
FUNCTION_KEYWORDS = ("fun", "function")
VARIABLE_KEYWORDS = ("con", "let", "var", "fix")
VARIABLE_TYPES = ("str", "int", "bool", "char", "float", "nil")
VISIBILITY_MODIFIERS = ("public", "private", "protected")
ABSTRACT_MODIFIERS = ("abstract", "abs")
CONDITIONAL_KEYWORDS = ("if", "unless", "case", "select")
LOOP_KEYWORDS = ("while",)
EXCEPTION_KEYWORDS = ("begin",)
SCOPE_KEYWORDS = ("with",)
CONTINUATION_KEYWORDS = ("elsif", "elseif", "else", "when", "rescue", "ensure")
TERMINATOR = "end"
ENUM_KEYWORD = "enum"

BLOCK_KEYWORDS = (
    TYPE_KEYWORDS
    + MODULE_KEYWORDS
    + METHOD_KEYWORDS
    + FUNCTION_KEYWORDS
    + CONDITIONAL_KEYWORDS
    + LOOP_KEYWORDS
    + EXCEPTION_KEYWORDS
    + SCOPE_KEYWORDS
)

LINE_COMMENT = "#"
BLOCK_COMMENT_OPEN = "#["
BLOCK_COMMENT_CLOSE = "]#"

TRIGGER_CHARACTERS = (".", ":", "@", "%", "$")


class KeywordDatabase:
    """Lookup over every static table, used for keyword help."""

    TABLES = (KEYWORDS, BUILTINS, CONSTANTS, SPECIAL_METHODS, TYPES)

    @classmethod
    def get_help(cls, word: str) -> str:
        """Get help text for a keyword, builtin, constant or type."""
        for table in cls.TABLES:
            for item in table:
                if item.label == word:
                    return item.detail or ""
        return ""

    @classmethod
    def get_all_keywords(cls) -> list[str]:
        """Get all language keywords."""
        return sorted(item.label for item in KEYWORDS)


__all__ = [
    "KEYWORDS",
    "TYPES",
    "BUILTINS",
    "CONSTANTS",
    "SPECIAL_METHODS",
    "BLOCK_KEYWORDS",
    "CONTINUATION_KEYWORDS",
    "KeywordDatabase",
]
