"""Analyzer configuration."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class AnalyzerConfig:
    indent_width: int = 4
    source: str = "dragonstone"
    check_naming: bool = True
    check_brackets: bool = True
    report_comment_nesting: bool = True

    # camelCase option names used by editor clients
    OPTION_NAMES = {
        "indentWidth": "indent_width",
        "diagnosticSource": "source",
        "checkNaming": "check_naming",
        "checkBrackets": "check_brackets",
        "reportCommentNesting": "report_comment_nesting",
    }

    def __post_init__(self):
        if isinstance(self.indent_width, bool) or not isinstance(
            self.indent_width, int
        ):
            raise ConfigError(f"indent_width must be an integer, got {self.indent_width!r}")
        if self.indent_width < 1:
            raise ConfigError(f"indent_width must be at least 1, got {self.indent_width}")
        if not isinstance(self.source, str) or not self.source:
            raise ConfigError("source must be a non-empty string")
        for f in fields(self):
            if f.type in ("bool", bool) and not isinstance(getattr(self, f.name), bool):
                raise ConfigError(
                    f"{f.name} must be true or false, got {getattr(self, f.name)!r}"
                )

    @property
    def indent_unit(self) -> str:
        return " " * self.indent_width

    def merged(self, options: Mapping[str, Any] | None) -> "AnalyzerConfig":
        """Return a copy with the recognized options applied.

        Keys may be camelCase client names or the field names themselves;
        unknown keys are ignored.
        """
        if not options:
            return self
        if not isinstance(options, Mapping):
            raise ConfigError(f"options must be a mapping, got {type(options).__name__}")
        field_names = {f.name for f in fields(self)}
        changes = {}
        for key, value in options.items():
            name = self.OPTION_NAMES.get(key, key)
            if name in field_names:
                changes[name] = value
        return replace(self, **changes)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None) -> "AnalyzerConfig":
        return cls().merged(options)


__all__ = ["AnalyzerConfig", "ConfigError"]
